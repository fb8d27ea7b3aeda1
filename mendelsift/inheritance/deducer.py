"""
Pattern deducer for Mendelian inheritance analysis.

This module contains the core logic for deducing inheritance patterns
for one variant and one individual of interest, based on the genotypes
of that individual and its relatives.

Every rule is evaluated independently, so several patterns may match.
Resolving the ambiguity is left to :mod:`mendelsift.inheritance.prioritizer`.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..genotype_utils import AUTOSOME, CHROM_X, classify_chromosome, normalize_genotype
from ..models import (
    Diagnostic,
    Genotype,
    Individual,
    PatternLabel,
    Sex,
    VariantRecord,
    Zygosity,
)
from ..pedigree import PedigreeGraph, Trio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeductionResult:
    """Patterns consistent with one variant for one individual."""

    patterns: FrozenSet[PatternLabel]
    diagnostics: Tuple[Diagnostic, ...] = ()


class _GenotypeLookup:
    """Normalizes and caches the genotypes of one variant."""

    def __init__(self, variant: VariantRecord, pedigree: PedigreeGraph):
        self.variant = variant
        self.pedigree = pedigree
        self.diagnostics: List[Diagnostic] = []
        self._cache: Dict[str, Genotype] = {}

    def get(self, sample_id: str) -> Genotype:
        if sample_id not in self._cache:
            ind = self.pedigree.get_individual(sample_id)
            sex = ind.sex if ind is not None else Sex.UNKNOWN
            gt = normalize_genotype(self.variant.raw_call(sample_id), self.variant.chromosome, sex)
            if gt.diagnostic:
                self.diagnostics.append(
                    Diagnostic(
                        "genotype",
                        gt.diagnostic,
                        sample_id=sample_id,
                        variant_key=self.variant.variant_key,
                    )
                )
            self._cache[sample_id] = gt
        return self._cache[sample_id]

    def is_genotyped(self, ind: Optional[Individual]) -> bool:
        return ind is not None and not self.get(ind.sample_id).is_missing

    def note(self, code: str, message: str, sample_id: Optional[str] = None) -> None:
        self.diagnostics.append(
            Diagnostic(code, message, sample_id=sample_id, variant_key=self.variant.variant_key)
        )


def deduce_patterns(
    variant: VariantRecord, individual_id: str, pedigree: PedigreeGraph
) -> DeductionResult:
    """
    Deduce all inheritance patterns consistent with a variant.

    Parameters
    ----------
    variant : VariantRecord
        Variant with raw genotype calls of the sampled individuals
    individual_id : str
        The individual of interest (proband)
    pedigree : PedigreeGraph
        Read-only pedigree

    Returns
    -------
    DeductionResult
        Matching patterns plus diagnostics. The pattern set is empty when
        no rule matched.
    """
    lookup = _GenotypeLookup(variant, pedigree)

    if individual_id in pedigree:
        trio = pedigree.get_trio(individual_id)
    else:
        lookup.note(
            "unregistered_sample",
            f"Sample '{individual_id}' is not in the pedigree; sex and affected status unknown",
            sample_id=individual_id,
        )
        trio = Trio(Individual(individual_id))

    proband_gt = lookup.get(individual_id)

    if proband_gt.is_missing:
        patterns = frozenset({PatternLabel.UNKNOWN_MISSING_GENOTYPES})
    elif proband_gt.zygosity is Zygosity.HOM_REF:
        patterns = frozenset({PatternLabel.REFERENCE})
    else:
        patterns = frozenset(_apply_rules(trio, lookup))

    logger.debug(
        f"{variant.variant_key} [{individual_id}={proband_gt.zygosity.value}]: "
        f"{sorted(p.value for p in patterns)}"
    )
    return DeductionResult(patterns, tuple(lookup.diagnostics))


def _apply_rules(trio: Trio, lookup: _GenotypeLookup) -> List[PatternLabel]:
    chrom_class = classify_chromosome(lookup.variant.chromosome)
    patterns = []

    if not trio.child.is_affected:
        lookup.note(
            "not_affected",
            f"Sample '{trio.child.sample_id}' is not affected; disease models not evaluated",
            sample_id=trio.child.sample_id,
        )
        return patterns

    if check_de_novo(trio, lookup):
        patterns.append(PatternLabel.DE_NOVO)

    if chrom_class == AUTOSOME:
        if check_autosomal_recessive(trio, lookup):
            patterns.append(PatternLabel.AUTOSOMAL_RECESSIVE)
        if check_autosomal_dominant(trio, lookup):
            patterns.append(PatternLabel.AUTOSOMAL_DOMINANT)
    elif chrom_class == CHROM_X:
        if check_x_linked_recessive(trio, lookup):
            patterns.append(PatternLabel.X_LINKED_RECESSIVE)
        if check_x_linked_dominant(trio, lookup):
            patterns.append(PatternLabel.X_LINKED_DOMINANT)

    return patterns


def check_de_novo(trio: Trio, lookup: _GenotypeLookup) -> bool:
    """Affected carrier whose registered parents are both homozygous reference."""
    if not lookup.get(trio.child.sample_id).is_carrier:
        return False
    if not trio.is_complete:
        lookup.note(
            "incomplete_trio",
            f"De novo not evaluated: '{trio.child.sample_id}' has no complete trio",
            sample_id=trio.child.sample_id,
        )
        return False

    father_gt = lookup.get(trio.father.sample_id)
    mother_gt = lookup.get(trio.mother.sample_id)
    return father_gt.zygosity is Zygosity.HOM_REF and mother_gt.zygosity is Zygosity.HOM_REF


def _is_obligate_carrier(parent: Individual, gt: Genotype) -> bool:
    if gt.zygosity is Zygosity.HET:
        return True
    return gt.zygosity is Zygosity.HOM_ALT and parent.is_affected


def check_autosomal_recessive(trio: Trio, lookup: _GenotypeLookup) -> bool:
    """
    Affected homozygous alternate proband with carrier parents.

    With an incomplete trio, or ungenotyped parents, the rule still matches
    on the proband genotype alone.
    """
    if lookup.get(trio.child.sample_id).zygosity is not Zygosity.HOM_ALT:
        return False

    if not trio.is_complete:
        lookup.note(
            "weak_evidence",
            "Autosomal recessive matched on proband genotype only (incomplete trio)",
            sample_id=trio.child.sample_id,
        )
        return True

    for parent in trio.parents:
        gt = lookup.get(parent.sample_id)
        if gt.is_missing:
            lookup.note(
                "weak_evidence",
                f"Autosomal recessive: parent '{parent.sample_id}' is not genotyped",
                sample_id=parent.sample_id,
            )
            continue
        if not _is_obligate_carrier(parent, gt):
            return False
    return True


def check_autosomal_dominant(trio: Trio, lookup: _GenotypeLookup) -> bool:
    """
    Affected heterozygous or homozygous alternate proband.

    At least one parent must be genotyped. The variant must then come with
    an affected carrier parent, or no genotyped unaffected carrier may exist
    in the family.
    """
    child_id = trio.child.sample_id
    if lookup.get(child_id).zygosity not in (Zygosity.HET, Zygosity.HOM_ALT):
        return False

    genotyped_parents = [p for p in trio.parents if lookup.is_genotyped(p)]
    if not genotyped_parents:
        lookup.note(
            "no_parental_genotypes",
            "Autosomal dominant not evaluated: no genotyped parent",
            sample_id=child_id,
        )
        return False

    if any(p.is_affected and lookup.get(p.sample_id).is_carrier for p in genotyped_parents):
        return True

    for member_id in lookup.pedigree.get_family_members(child_id) or [child_id]:
        if member_id == child_id:
            continue
        member = lookup.pedigree.get_individual(member_id)
        if member is None or not member.is_unaffected:
            continue
        if lookup.get(member_id).is_carrier:
            logger.debug(f"Autosomal dominant rejected: unaffected carrier '{member_id}'")
            return False
    return True


def check_x_linked_recessive(trio: Trio, lookup: _GenotypeLookup) -> bool:
    """Hemizygous affected male or homozygous affected female with carrier mother."""
    child = trio.child
    child_gt = lookup.get(child.sample_id)

    if child.is_male:
        if child_gt.zygosity is not Zygosity.HEMI_ALT:
            return False
    elif child.is_female:
        if child_gt.zygosity is not Zygosity.HOM_ALT:
            return False
    else:
        lookup.note(
            "unknown_sex",
            f"X-linked recessive not evaluated: sex of '{child.sample_id}' is unknown",
            sample_id=child.sample_id,
        )
        return False

    if lookup.is_genotyped(trio.mother):
        if not _is_obligate_carrier(trio.mother, lookup.get(trio.mother.sample_id)):
            return False

    if lookup.is_genotyped(trio.father) and not trio.father.is_female:
        father_carries = lookup.get(trio.father.sample_id).is_carrier
        if father_carries and not trio.father.is_affected:
            return False
        # A homozygous daughter needs an X carrying the allele from her father.
        if child.is_female and not father_carries:
            return False

    return True


def check_x_linked_dominant(trio: Trio, lookup: _GenotypeLookup) -> bool:
    """
    Affected carrier with an affected transmitting parent.

    Fathers only transmit their X to daughters. At least one parent must be
    genotyped.
    """
    child = trio.child
    if not lookup.get(child.sample_id).is_carrier:
        return False

    if not (lookup.is_genotyped(trio.father) or lookup.is_genotyped(trio.mother)):
        lookup.note(
            "no_parental_genotypes",
            "X-linked dominant not evaluated: no genotyped parent",
            sample_id=child.sample_id,
        )
        return False

    transmitters = []
    if trio.mother is not None:
        transmitters.append(trio.mother)
    if trio.father is not None and not child.is_male:
        transmitters.append(trio.father)

    return any(
        parent.is_affected and lookup.get(parent.sample_id).is_carrier for parent in transmitters
    )

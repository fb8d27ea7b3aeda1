"""
Segregation checker for inheritance analysis.

This module validates whether a matched inheritance pattern segregates
with the affected status across the family of the individual of interest.
The result is informational and does not change prioritization.
"""

import logging
from typing import Dict, Iterable

from ..genotype_utils import normalize_genotype
from ..models import PatternLabel, SegregationStatus, VariantRecord, Zygosity
from ..pedigree import PedigreeGraph

logger = logging.getLogger(__name__)

RECESSIVE_PATTERNS = frozenset(
    {
        PatternLabel.AUTOSOMAL_RECESSIVE,
        PatternLabel.X_LINKED_RECESSIVE,
    }
)

CHECKED_PATTERNS = frozenset(
    {
        PatternLabel.DE_NOVO,
        PatternLabel.AUTOSOMAL_RECESSIVE,
        PatternLabel.AUTOSOMAL_DOMINANT,
        PatternLabel.X_LINKED_RECESSIVE,
        PatternLabel.X_LINKED_DOMINANT,
    }
)

_BIALLELIC = (Zygosity.HOM_ALT, Zygosity.HEMI_ALT)


def check_segregation(
    pattern: PatternLabel, variant: VariantRecord, individual_id: str, pedigree: PedigreeGraph
) -> SegregationStatus:
    """
    Check if a variant segregates according to a pattern within a family.

    Parameters
    ----------
    pattern : PatternLabel
        The inheritance pattern to check
    variant : VariantRecord
        Variant with genotype calls
    individual_id : str
        Individual of interest; its family is checked
    pedigree : PedigreeGraph
        Pedigree information

    Returns
    -------
    SegregationStatus
        ``segregates``, ``does_not_segregate``, ``unknown_missing_data``,
        ``unknown_no_affected``, or ``not_applicable`` for patterns without
        a family-level check.
    """
    if pattern not in CHECKED_PATTERNS:
        return SegregationStatus.NOT_APPLICABLE

    members = pedigree.get_family_members(individual_id)
    if not members:
        return SegregationStatus.UNKNOWN_MISSING_DATA

    affected = [sid for sid in members if pedigree.is_affected(sid)]
    if not affected:
        return SegregationStatus.UNKNOWN_NO_AFFECTED

    recessive = pattern in RECESSIVE_PATTERNS
    affected_with_variant = 0
    affected_missing = 0

    for sample_id in members:
        ind = pedigree.get_individual(sample_id)
        gt = normalize_genotype(variant.raw_call(sample_id), variant.chromosome, ind.sex)
        if gt.is_missing:
            if ind.is_affected:
                affected_missing += 1
            continue

        if ind.is_affected:
            if recessive and gt.zygosity not in _BIALLELIC:
                logger.debug(f"{pattern.value}: affected '{sample_id}' is not biallelic")
                return SegregationStatus.DOES_NOT_SEGREGATE
            if not gt.is_carrier:
                logger.debug(f"{pattern.value}: affected '{sample_id}' lacks the variant")
                return SegregationStatus.DOES_NOT_SEGREGATE
            affected_with_variant += 1
        elif ind.is_unaffected:
            if recessive and gt.zygosity is Zygosity.HOM_ALT:
                return SegregationStatus.DOES_NOT_SEGREGATE
            if recessive and gt.zygosity is Zygosity.HEMI_ALT and ind.is_male:
                return SegregationStatus.DOES_NOT_SEGREGATE

    if affected_with_variant == 0:
        return SegregationStatus.UNKNOWN_MISSING_DATA
    if affected_missing:
        logger.debug(
            f"{pattern.value} likely segregates, but {affected_missing} affected individual(s) "
            "have missing genotypes"
        )
    return SegregationStatus.SEGREGATES


def calculate_segregation_status(
    patterns: Iterable[PatternLabel],
    variant: VariantRecord,
    individual_id: str,
    pedigree: PedigreeGraph,
) -> Dict[PatternLabel, SegregationStatus]:
    """Segregation status for every checkable pattern in ``patterns``."""
    return {
        pattern: check_segregation(pattern, variant, individual_id, pedigree)
        for pattern in patterns
        if pattern in CHECKED_PATTERNS
    }

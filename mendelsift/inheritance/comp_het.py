"""
Compound heterozygous analyzer for inheritance analysis.

This module identifies compound heterozygous variants where an affected
individual has two different heterozygous variants in the same gene,
one from each parent.

It runs as a second pass, after every variant has been through the
single-variant deducer, because grouping by gene needs the complete
variant set.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from enum import Enum
from itertools import combinations
from typing import Dict, Iterable, List, Mapping, Optional

from ..genotype_utils import normalize_genotype
from ..models import (
    CompHetDetails,
    CompHetPhase,
    Diagnostic,
    PatternResult,
    VariantRecord,
    Zygosity,
)
from ..pedigree import PedigreeGraph, Trio

logger = logging.getLogger(__name__)

ResultMap = Dict[str, Dict[str, PatternResult]]


class ParentOrigin(Enum):
    """Which parent a heterozygous variant was inherited from."""

    PATERNAL = "paternal"
    MATERNAL = "maternal"
    ABSENT = "absent"
    AMBIGUOUS = "ambiguous"


def build_gene_index(
    sample_id: str,
    records: Mapping[str, VariantRecord],
    pedigree: PedigreeGraph,
) -> Dict[str, List[str]]:
    """
    Group the heterozygous variants of a sample by gene symbol.

    Parameters
    ----------
    sample_id : str
        The individual whose genotypes are inspected
    records : Mapping[str, VariantRecord]
        Variants keyed by variant key
    pedigree : PedigreeGraph
        Pedigree, used for the sample's sex

    Returns
    -------
    Dict[str, List[str]]
        Gene symbol to ascending list of distinct variant keys
    """
    ind = pedigree.get_individual(sample_id)
    gene_index: Dict[str, set] = defaultdict(set)

    for variant_key, record in records.items():
        gt = normalize_genotype(record.raw_call(sample_id), record.chromosome, ind.sex)
        if gt.zygosity is not Zygosity.HET:
            continue
        if not record.gene_symbols:
            logger.debug(f"Skipping {variant_key} for compound het: no gene symbol")
            continue
        for gene in record.gene_symbols:
            gene_index[gene].add(variant_key)

    return {gene: sorted(keys) for gene, keys in gene_index.items()}


def determine_parent_of_origin(record: VariantRecord, trio: Trio) -> ParentOrigin:
    """
    Infer the parent a heterozygous variant of the child came from.

    Requires a complete trio; anything else is ambiguous.
    """
    if not trio.is_complete:
        return ParentOrigin.AMBIGUOUS

    father_gt = normalize_genotype(
        record.raw_call(trio.father.sample_id), record.chromosome, trio.father.sex
    )
    mother_gt = normalize_genotype(
        record.raw_call(trio.mother.sample_id), record.chromosome, trio.mother.sex
    )
    father_ref = father_gt.zygosity is Zygosity.HOM_REF
    mother_ref = mother_gt.zygosity is Zygosity.HOM_REF

    if father_gt.is_carrier and mother_ref:
        return ParentOrigin.PATERNAL
    if mother_gt.is_carrier and father_ref:
        return ParentOrigin.MATERNAL
    if father_ref and mother_ref:
        return ParentOrigin.ABSENT
    # Missing parental genotype, or both parents carry the variant
    return ParentOrigin.AMBIGUOUS


def classify_pair(
    origin_a: ParentOrigin, origin_b: ParentOrigin, trio_complete: bool
) -> Optional[CompHetPhase]:
    """
    Classify the phase of two heterozygous variants.

    Returns
    -------
    Optional[CompHetPhase]
        ``TRANS`` when the variants demonstrably come from different parents,
        ``POSSIBLE`` when parental data are missing or uninformative, and
        None when both come from the same parent (cis).
    """
    if not trio_complete:
        return CompHetPhase.POSSIBLE

    definite = (ParentOrigin.PATERNAL, ParentOrigin.MATERNAL)
    if origin_a in definite and origin_b in definite:
        if origin_a is not origin_b:
            return CompHetPhase.TRANS
        return None
    return CompHetPhase.POSSIBLE


def find_compound_het_details(
    sample_id: str,
    records: Mapping[str, VariantRecord],
    pedigree: PedigreeGraph,
) -> Dict[str, CompHetDetails]:
    """
    Find compound heterozygous candidates of one affected sample.

    Parameters
    ----------
    sample_id : str
        An affected individual registered in the pedigree
    records : Mapping[str, VariantRecord]
        Variants keyed by variant key
    pedigree : PedigreeGraph
        Pedigree information

    Returns
    -------
    Dict[str, CompHetDetails]
        Details for every variant taking part in at least one confirmed or
        possible pair. A variant qualifying in several genes keeps a
        confirmed gene over a possible one, then the first gene by name.
    """
    trio = pedigree.get_trio(sample_id)
    gene_index = build_gene_index(sample_id, records, pedigree)
    details: Dict[str, CompHetDetails] = {}

    for gene in sorted(gene_index):
        keys = gene_index[gene]
        if len(keys) < 2:
            continue

        origins = {key: determine_parent_of_origin(records[key], trio) for key in keys}
        partners: Dict[CompHetPhase, Dict[str, set]] = {
            CompHetPhase.TRANS: defaultdict(set),
            CompHetPhase.POSSIBLE: defaultdict(set),
        }

        for key_a, key_b in combinations(keys, 2):
            phase = classify_pair(origins[key_a], origins[key_b], trio.is_complete)
            if phase is None:
                logger.debug(f"{gene}: {key_a} and {key_b} are in cis in '{sample_id}'")
                continue
            partners[phase][key_a].add(key_b)
            partners[phase][key_b].add(key_a)

        for key in keys:
            if partners[CompHetPhase.TRANS][key]:
                phase = CompHetPhase.TRANS
            elif partners[CompHetPhase.POSSIBLE][key]:
                phase = CompHetPhase.POSSIBLE
            else:
                continue

            candidate = CompHetDetails(
                is_candidate=True,
                gene_symbol=gene,
                partner_variant_keys=tuple(sorted(partners[phase][key])),
                phase=phase,
            )
            current = details.get(key)
            if current is None or (
                current.phase is CompHetPhase.POSSIBLE and phase is CompHetPhase.TRANS
            ):
                details[key] = candidate

    return details


def link_compound_heterozygous(
    results: ResultMap,
    records: Iterable[VariantRecord],
    pedigree: PedigreeGraph,
) -> ResultMap:
    """
    Annotate first-pass results with compound heterozygous linkage.

    Must run after every variant has a first-pass result. Entries of
    ``results`` are replaced (results themselves are immutable).

    Parameters
    ----------
    results : Dict[str, Dict[str, PatternResult]]
        First-pass results keyed by variant key, then sample ID
    records : Iterable[VariantRecord]
        All variant records of the run
    pedigree : PedigreeGraph
        Pedigree information

    Returns
    -------
    Dict[str, Dict[str, PatternResult]]
        The same mapping, updated
    """
    records_by_key: Dict[str, VariantRecord] = {}
    for record in records:
        if record.variant_key in results:
            records_by_key.setdefault(record.variant_key, record)

    sample_ids = sorted({sid for per_sample in results.values() for sid in per_sample})
    n_linked = 0

    for sample_id in sample_ids:
        if not pedigree.is_affected(sample_id):
            logger.debug(f"Skipping compound het analysis for unaffected sample '{sample_id}'")
            continue

        sample_records = {
            key: record for key, record in records_by_key.items() if sample_id in results[key]
        }
        details = find_compound_het_details(sample_id, sample_records, pedigree)

        for variant_key, comp_het in details.items():
            result = results[variant_key][sample_id]
            diagnostics = result.diagnostics
            if comp_het.phase is CompHetPhase.POSSIBLE:
                diagnostics = diagnostics + (
                    Diagnostic(
                        "comp_het_phase_unknown",
                        f"Phase with partner variant(s) in {comp_het.gene_symbol} could not be "
                        "confirmed from parental genotypes",
                        sample_id=sample_id,
                        variant_key=variant_key,
                    ),
                )
            results[variant_key][sample_id] = replace(
                result, comp_het_details=comp_het, diagnostics=diagnostics
            )
            n_linked += 1

    logger.info(f"Compound het analysis annotated {n_linked} variant result(s)")
    return results


def get_compound_het_summary(results: ResultMap, sample_id: str) -> Dict[str, object]:
    """
    Get a summary of compound heterozygous findings for a sample.

    Args:
        results: Complete analysis results
        sample_id: Sample to summarize

    Returns:
        Summary dictionary with unique pairs and genes
    """
    pairs = set()
    genes = set()
    n_variants = 0

    for variant_key, per_sample in results.items():
        result = per_sample.get(sample_id)
        if result is None or result.comp_het_details is None:
            continue
        comp_het = result.comp_het_details
        n_variants += 1
        genes.add(comp_het.gene_symbol)
        for partner in comp_het.partner_variant_keys:
            first, second = sorted((variant_key, partner))
            pairs.add((first, second, comp_het.gene_symbol, comp_het.phase.value))

    return {
        "total_comp_het_variants": n_variants,
        "comp_het_pairs": [
            {"variant1": v1, "variant2": v2, "gene": gene, "configuration": phase}
            for v1, v2, gene, phase in sorted(pairs)
        ],
        "genes_with_comp_het": sorted(genes),
    }

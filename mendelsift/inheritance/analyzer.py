"""
Main inheritance analyzer orchestrator.

This module coordinates the inheritance pattern analysis by combining
pattern deduction, compound heterozygous analysis, and pattern prioritization.

The analysis performs three passes:

1. Per-variant pattern deduction (independent per variant; optionally run
   on a thread pool)
2. Compound heterozygous linkage (per affected sample and gene; needs the
   complete pass 1 results)
3. Pattern prioritization
"""

import json
import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from ..models import Diagnostic, PatternResult, VariantRecord
from ..pedigree import PedigreeGraph
from ..variant_reader import records_from_dataframe
from .comp_het import get_compound_het_summary, link_compound_heterozygous
from .deducer import deduce_patterns
from .prioritizer import get_pattern_description, prioritize_pattern
from .segregation_checker import calculate_segregation_status

logger = logging.getLogger(__name__)


def determine_index_sample(
    records: Sequence[VariantRecord],
    pedigree: PedigreeGraph,
    sample_map: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Determine the index (proband) sample.

    Priority:
    1. ``sample_map["index"]`` or ``sample_map["proband"]``
    2. First affected individual in pedigree order
    3. First sample of the first variant's genotypes

    Returns
    -------
    Optional[str]
        The index sample ID, or None if none could be determined
    """
    if sample_map:
        for role in ("index", "proband"):
            if sample_map.get(role):
                logger.debug(f"Index sample from sample map ({role}): {sample_map[role]}")
                return sample_map[role]

    affected = pedigree.affected_samples()
    if affected:
        logger.debug(f"Index sample from first affected individual: {affected[0]}")
        return affected[0]

    if records and records[0].genotypes:
        sample_id = next(iter(records[0].genotypes))
        logger.debug(f"Index sample falls back to first genotyped sample: {sample_id}")
        return sample_id

    logger.warning("Could not determine index sample for inheritance analysis")
    return None


def _unique_records(records: Iterable[VariantRecord]) -> tuple:
    unique: Dict[str, VariantRecord] = {}
    diagnostics: List[Diagnostic] = []
    for record in records:
        if record.variant_key in unique:
            diagnostics.append(
                Diagnostic(
                    "duplicate_variant",
                    f"Duplicate variant key {record.variant_key}; keeping the first record",
                    variant_key=record.variant_key,
                )
            )
            continue
        unique[record.variant_key] = record
    for diag in diagnostics:
        logger.warning(diag.message)
    return list(unique.values()), diagnostics


def _evaluate_variant(
    record: VariantRecord, sample_ids: Sequence[str], pedigree: PedigreeGraph
) -> Dict[str, PatternResult]:
    per_sample = {}
    for sample_id in sample_ids:
        deduction = deduce_patterns(record, sample_id, pedigree)
        segregation = calculate_segregation_status(
            deduction.patterns, record, sample_id, pedigree
        )
        per_sample[sample_id] = PatternResult(
            variant_key=record.variant_key,
            sample_id=sample_id,
            prioritized_pattern=prioritize_pattern(deduction.patterns),
            matched_patterns=deduction.patterns,
            segregation_status=segregation,
            diagnostics=deduction.diagnostics,
        )
    return per_sample


def analyze_inheritance_for_samples(
    records: Iterable[VariantRecord],
    pedigree: PedigreeGraph,
    sample_ids: Sequence[str],
    n_workers: Optional[int] = None,
    min_variants_for_parallel: int = 100,
) -> Dict[str, Dict[str, PatternResult]]:
    """
    Run the full inheritance analysis for several individuals of interest.

    Parameters
    ----------
    records : Iterable[VariantRecord]
        All variants of the run
    pedigree : PedigreeGraph
        Read-only pedigree
    sample_ids : Sequence[str]
        Individuals of interest
    n_workers : Optional[int]
        Threads for pass 1. None or 1 runs sequentially.
    min_variants_for_parallel : int
        Minimum number of variants before pass 1 uses a thread pool

    Returns
    -------
    Dict[str, Dict[str, PatternResult]]
        Results keyed by variant key, then sample ID
    """
    unique, duplicate_diagnostics = _unique_records(records)
    sample_ids = list(dict.fromkeys(sample_ids))

    logger.info(
        f"Starting inheritance analysis for {len(unique)} variants across "
        f"{len(sample_ids)} individual(s) of interest"
    )

    # Pass 1: Per-Variant Pattern Deduction
    logger.info("Pass 1: Deducing inheritance patterns per variant")
    results: Dict[str, Dict[str, PatternResult]] = {}
    use_parallel = bool(n_workers and n_workers > 1 and len(unique) >= min_variants_for_parallel)
    if use_parallel:
        logger.info(f"Pass 1 running on {n_workers} worker threads")
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = {
                record.variant_key: executor.submit(_evaluate_variant, record, sample_ids, pedigree)
                for record in unique
            }
            # Barrier: pass 2 needs every variant's result
            for variant_key, future in futures.items():
                results[variant_key] = future.result()
    else:
        for record in unique:
            results[record.variant_key] = _evaluate_variant(record, sample_ids, pedigree)

    for diag in duplicate_diagnostics:
        for sample_id, result in results[diag.variant_key].items():
            results[diag.variant_key][sample_id] = replace(
                result, diagnostics=result.diagnostics + (diag,)
            )

    # Pass 2: Compound Heterozygous Analysis
    logger.info("Pass 2: Analyzing compound heterozygous patterns")
    link_compound_heterozygous(results, unique, pedigree)

    # Pass 3: Prioritize and Finalize
    logger.info("Pass 3: Prioritizing patterns")
    for per_sample in results.values():
        for sample_id, result in per_sample.items():
            per_sample[sample_id] = replace(
                result,
                prioritized_pattern=prioritize_pattern(
                    result.matched_patterns, result.comp_het_details
                ),
            )

    pattern_counts = Counter(
        result.prioritized_pattern.value
        for per_sample in results.values()
        for result in per_sample.values()
    )
    logger.info(f"Inheritance analysis complete. Pattern distribution: {dict(pattern_counts)}")
    return results


def analyze_inheritance(
    records: Iterable[VariantRecord],
    pedigree: PedigreeGraph,
    index_sample: Optional[str] = None,
    sample_map: Optional[Mapping[str, str]] = None,
    n_workers: Optional[int] = None,
    min_variants_for_parallel: int = 100,
) -> Dict[str, PatternResult]:
    """
    Run the full inheritance analysis for a single index sample.

    Parameters
    ----------
    records : Iterable[VariantRecord]
        All variants of the run
    pedigree : PedigreeGraph
        Read-only pedigree
    index_sample : Optional[str]
        Individual of interest. Determined with
        :func:`determine_index_sample` when not given.
    sample_map : Optional[Mapping[str, str]]
        Optional role mapping (``index`` / ``proband``)
    n_workers : Optional[int]
        Threads for pass 1
    min_variants_for_parallel : int
        Minimum number of variants before pass 1 uses a thread pool

    Returns
    -------
    Dict[str, PatternResult]
        One result per variant key
    """
    records = list(records)
    if index_sample is None:
        index_sample = determine_index_sample(records, pedigree, sample_map)

    if index_sample is None:
        # No samples at all: every variant is missing its proband genotype
        index_sample = ""

    results = analyze_inheritance_for_samples(
        records,
        pedigree,
        [index_sample],
        n_workers=n_workers,
        min_variants_for_parallel=min_variants_for_parallel,
    )
    return {variant_key: per_sample[index_sample] for variant_key, per_sample in results.items()}


def to_output_record(result: PatternResult) -> Dict[str, Any]:
    """Render a result as the ``deducedInheritancePattern`` record."""
    return result.to_dict()


def get_inheritance_summary(results: Mapping[str, PatternResult]) -> Dict[str, Any]:
    """
    Generate a summary of single-sample inheritance analysis results.

    Parameters
    ----------
    results : Mapping[str, PatternResult]
        Results keyed by variant key

    Returns
    -------
    Dict[str, Any]
        Summary dictionary
    """
    pattern_counts = Counter(r.prioritized_pattern.value for r in results.values())
    summary: Dict[str, Any] = {
        "total_variants": len(results),
        "pattern_counts": dict(sorted(pattern_counts.items())),
        "de_novo_variants": pattern_counts.get("de_novo", 0),
    }

    by_sample: Dict[str, Dict[str, PatternResult]] = {
        key: {r.sample_id or "": r} for key, r in results.items()
    }
    sample_ids = {r.sample_id or "" for r in results.values()}
    genes = set()
    for sample_id in sample_ids:
        genes.update(get_compound_het_summary(by_sample, sample_id)["genes_with_comp_het"])
    summary["compound_het_genes"] = sorted(genes)
    summary["compound_het_gene_count"] = len(genes)
    return summary


def analyze_inheritance_dataframe(
    df: pd.DataFrame,
    pedigree: PedigreeGraph,
    sample_list: List[str],
    index_sample: Optional[str] = None,
    gene_column: str = "GENE",
    n_workers: Optional[int] = None,
    min_variants_for_parallel: int = 100,
) -> pd.DataFrame:
    """
    Run inheritance analysis on a variant table and add result columns.

    Parameters
    ----------
    df : pd.DataFrame
        Variant table with ``CHROM``, ``POS``, ``REF``, ``ALT``, a gene
        column and one genotype column per sample
    pedigree : PedigreeGraph
        Pedigree information
    sample_list : List[str]
        Genotype columns to use
    index_sample : Optional[str]
        Individual of interest

    Returns
    -------
    pd.DataFrame
        Copy of ``df`` with added columns:
        - Inheritance_Pattern: The prioritized pattern
        - Inheritance_Details: JSON string with the full result record
    """
    df = df.copy()
    if df.empty:
        logger.warning("Empty DataFrame provided for inheritance analysis")
        df["Inheritance_Pattern"] = pd.Series(dtype=str)
        df["Inheritance_Details"] = pd.Series(dtype=str)
        return df

    records = records_from_dataframe(df, sample_list, gene_column=gene_column)
    results = analyze_inheritance(
        records,
        pedigree,
        index_sample=index_sample,
        n_workers=n_workers,
        min_variants_for_parallel=min_variants_for_parallel,
    )

    patterns = []
    details = []
    for record in records:
        result = results[record.variant_key]
        record_dict = to_output_record(result)
        record_dict["patternDescription"] = get_pattern_description(result.prioritized_pattern)
        patterns.append(result.prioritized_pattern.value)
        details.append(json.dumps(record_dict))

    df["Inheritance_Pattern"] = patterns
    df["Inheritance_Details"] = details
    return df


def export_inheritance_report(
    records: Iterable[VariantRecord],
    results: Mapping[str, Any],
    output_path: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build, and optionally save, a JSON inheritance report.

    Parameters
    ----------
    records : Iterable[VariantRecord]
        Variants in report order
    results : Mapping
        Results keyed by variant key. Values are either one PatternResult
        or, for several individuals of interest, a mapping of sample ID to
        PatternResult (reported as ``deducedInheritancePatterns``).
    output_path : Optional[str]
        Path for the JSON file. Nothing is written when None.

    Returns
    -------
    List[Dict[str, Any]]
        The report entries
    """
    report = []
    seen = set()
    for record in records:
        if record.variant_key in seen or record.variant_key not in results:
            continue
        seen.add(record.variant_key)
        entry: Dict[str, Any] = {
            "variantKey": record.variant_key,
            "chromosome": record.chromosome,
            "geneSymbols": sorted(record.gene_symbols),
        }
        result = results[record.variant_key]
        if isinstance(result, PatternResult):
            entry["deducedInheritancePattern"] = to_output_record(result)
        else:
            entry["deducedInheritancePatterns"] = {
                sample_id: to_output_record(r) for sample_id, r in result.items()
            }
        report.append(entry)

    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
        logger.info(f"Inheritance report saved to {output_path}")
    return report

"""
Pattern prioritizer for inheritance analysis.

This module collapses the set of matched inheritance patterns, together
with any compound heterozygous linkage, into one final label using a fixed
total order.
"""

import logging
from typing import Iterable, Optional

from ..models import CompHetDetails, CompHetPhase, PatternLabel

logger = logging.getLogger(__name__)

# Highest precedence first. This order is fixed: de novo and biallelic
# evidence outrank dominant and phase-ambiguous compound heterozygous calls.
PATTERN_ORDER = (
    PatternLabel.DE_NOVO,
    PatternLabel.AUTOSOMAL_RECESSIVE,
    PatternLabel.COMPOUND_HETEROZYGOUS,
    PatternLabel.X_LINKED_RECESSIVE,
    PatternLabel.X_LINKED_DOMINANT,
    PatternLabel.AUTOSOMAL_DOMINANT,
    PatternLabel.COMPOUND_HETEROZYGOUS_POSSIBLE,
    PatternLabel.REFERENCE,
    PatternLabel.UNKNOWN_MISSING_GENOTYPES,
    PatternLabel.UNKNOWN,
)

PATTERN_RANK = {pattern: rank for rank, pattern in enumerate(PATTERN_ORDER)}

PATTERN_CATEGORIES = {
    PatternLabel.DE_NOVO: "sporadic",
    PatternLabel.AUTOSOMAL_RECESSIVE: "recessive",
    PatternLabel.COMPOUND_HETEROZYGOUS: "recessive",
    PatternLabel.X_LINKED_RECESSIVE: "x_linked",
    PatternLabel.X_LINKED_DOMINANT: "x_linked",
    PatternLabel.AUTOSOMAL_DOMINANT: "dominant",
    PatternLabel.COMPOUND_HETEROZYGOUS_POSSIBLE: "recessive",
    PatternLabel.REFERENCE: "none",
    PatternLabel.UNKNOWN_MISSING_GENOTYPES: "unclear",
    PatternLabel.UNKNOWN: "unclear",
}

PATTERN_DESCRIPTIONS = {
    PatternLabel.DE_NOVO: "New mutation not inherited from parents",
    PatternLabel.AUTOSOMAL_RECESSIVE: "Two copies of the mutation needed, one from each parent",
    PatternLabel.COMPOUND_HETEROZYGOUS: (
        "Two different mutations in the same gene, one from each parent"
    ),
    PatternLabel.X_LINKED_RECESSIVE: "Mutation on X chromosome, primarily affects males",
    PatternLabel.X_LINKED_DOMINANT: "Mutation on X chromosome affects both sexes",
    PatternLabel.AUTOSOMAL_DOMINANT: "One copy of the mutation is sufficient to cause disease",
    PatternLabel.COMPOUND_HETEROZYGOUS_POSSIBLE: (
        "Possible compound heterozygous (missing or uninformative parent data)"
    ),
    PatternLabel.REFERENCE: "No variant present",
    PatternLabel.UNKNOWN_MISSING_GENOTYPES: "Genotype of the individual of interest is missing",
    PatternLabel.UNKNOWN: "Inheritance pattern could not be determined",
}


def comp_het_pattern(comp_het_details: Optional[CompHetDetails]) -> Optional[PatternLabel]:
    """Map compound heterozygous details to the label they contribute, if any."""
    if comp_het_details is None or not comp_het_details.is_candidate:
        return None
    if comp_het_details.phase is CompHetPhase.TRANS:
        return PatternLabel.COMPOUND_HETEROZYGOUS
    return PatternLabel.COMPOUND_HETEROZYGOUS_POSSIBLE


def prioritize_pattern(
    matched_patterns: Iterable[PatternLabel],
    comp_het_details: Optional[CompHetDetails] = None,
) -> PatternLabel:
    """
    Select the single highest priority pattern.

    Parameters
    ----------
    matched_patterns : Iterable[PatternLabel]
        Patterns found consistent by the single-variant pass
    comp_het_details : Optional[CompHetDetails]
        Compound heterozygous linkage for the variant, if any

    Returns
    -------
    PatternLabel
        The first pattern of ``PATTERN_ORDER`` that is satisfied, or
        ``PatternLabel.UNKNOWN`` when nothing matched.
    """
    candidates = set(matched_patterns)
    linked = comp_het_pattern(comp_het_details)
    if linked is not None:
        candidates.add(linked)

    for pattern in PATTERN_ORDER:
        if pattern in candidates:
            return pattern
    return PatternLabel.UNKNOWN


def get_pattern_category(pattern: PatternLabel) -> str:
    """
    Get the category for an inheritance pattern.

    Parameters
    ----------
    pattern : PatternLabel
        The inheritance pattern

    Returns
    -------
    str
        Pattern category
    """
    return PATTERN_CATEGORIES.get(pattern, "unclear")


def get_pattern_description(pattern: PatternLabel) -> str:
    """Get a human-readable description of an inheritance pattern."""
    return PATTERN_DESCRIPTIONS.get(pattern, "Unknown inheritance pattern")

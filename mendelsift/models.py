"""
Core data types for inheritance analysis.

Defines the closed enumerations used throughout the engine (sex, affected
status, zygosity, inheritance pattern) and the immutable records that flow
between the genotype model, the pedigree graph and the inheritance passes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

FOUNDER_SENTINEL = "0"


class Sex(Enum):
    """PED sex code."""

    UNKNOWN = 0
    MALE = 1
    FEMALE = 2


class AffectedStatus(Enum):
    """PED affected status code."""

    UNKNOWN = 0
    UNAFFECTED = 1
    AFFECTED = 2


class Zygosity(str, Enum):
    """Normalized genotype state of one sample at one variant."""

    HOM_REF = "hom_ref"
    HET = "het"
    HOM_ALT = "hom_alt"
    HEMI_ALT = "hemi_alt"
    MISSING = "missing"


class PatternLabel(str, Enum):
    """Inheritance pattern labels reported by the engine."""

    DE_NOVO = "de_novo"
    AUTOSOMAL_RECESSIVE = "autosomal_recessive"
    COMPOUND_HETEROZYGOUS = "compound_heterozygous"
    X_LINKED_RECESSIVE = "x_linked_recessive"
    X_LINKED_DOMINANT = "x_linked_dominant"
    AUTOSOMAL_DOMINANT = "autosomal_dominant"
    COMPOUND_HETEROZYGOUS_POSSIBLE = "compound_heterozygous_possible_missing_parents"
    REFERENCE = "reference"
    UNKNOWN_MISSING_GENOTYPES = "unknown_missing_genotypes"
    UNKNOWN = "unknown"


class CompHetPhase(str, Enum):
    """Phase of a compound heterozygous candidate."""

    TRANS = "trans"
    POSSIBLE = "possible"


class SegregationStatus(str, Enum):
    """Outcome of a segregation check for one pattern."""

    SEGREGATES = "segregates"
    DOES_NOT_SEGREGATE = "does_not_segregate"
    UNKNOWN_MISSING_DATA = "unknown_missing_data"
    UNKNOWN_NO_AFFECTED = "unknown_no_affected"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal note produced while evaluating data."""

    code: str
    message: str
    sample_id: str | None = None
    variant_key: str | None = None

    def to_dict(self) -> dict[str, str]:
        out = {"code": self.code, "message": self.message}
        if self.sample_id is not None:
            out["sampleId"] = self.sample_id
        if self.variant_key is not None:
            out["variantKey"] = self.variant_key
        return out


@dataclass(frozen=True)
class Individual:
    """
    One row of a pedigree.

    Fields
    ------
    sample_id : str
        Unique sample identifier.
    family_id : str
        Family identifier; empty when not given.
    father_id, mother_id : str
        Parent identifiers. ``"0"`` means founder/unknown.
    sex : Sex
    affected_status : AffectedStatus
    """

    sample_id: str
    family_id: str = ""
    father_id: str = FOUNDER_SENTINEL
    mother_id: str = FOUNDER_SENTINEL
    sex: Sex = Sex.UNKNOWN
    affected_status: AffectedStatus = AffectedStatus.UNKNOWN

    @property
    def is_affected(self) -> bool:
        return self.affected_status is AffectedStatus.AFFECTED

    @property
    def is_unaffected(self) -> bool:
        return self.affected_status is AffectedStatus.UNAFFECTED

    @property
    def is_male(self) -> bool:
        return self.sex is Sex.MALE

    @property
    def is_female(self) -> bool:
        return self.sex is Sex.FEMALE


@dataclass(frozen=True)
class Genotype:
    """Normalized genotype call."""

    zygosity: Zygosity
    raw: str | None = None
    diagnostic: str | None = None

    @property
    def is_missing(self) -> bool:
        return self.zygosity is Zygosity.MISSING

    @property
    def is_carrier(self) -> bool:
        return self.zygosity in (Zygosity.HET, Zygosity.HOM_ALT, Zygosity.HEMI_ALT)


@dataclass(frozen=True)
class VariantRecord:
    """
    A variant with the raw genotype call of every sampled individual.

    ``genotypes`` maps sample IDs to raw calls such as ``"0/1"`` or ``"1"``.
    """

    variant_key: str
    chromosome: str
    gene_symbols: frozenset = field(default_factory=frozenset)
    genotypes: Mapping[str, Any] = field(default_factory=dict)

    @staticmethod
    def make_key(chrom: Any, pos: Any, ref: Any, alt: Any) -> str:
        """Build the canonical ``chrom:pos:ref:alt`` variant key."""
        return f"{chrom}:{pos}:{ref}:{alt}"

    def raw_call(self, sample_id: str) -> Any:
        return self.genotypes.get(sample_id)


@dataclass(frozen=True)
class CompHetDetails:
    """Compound heterozygous linkage metadata attached to a variant."""

    is_candidate: bool
    gene_symbol: str
    partner_variant_keys: tuple = ()
    phase: CompHetPhase = CompHetPhase.TRANS

    @property
    def is_confirmed(self) -> bool:
        return self.is_candidate and self.phase is CompHetPhase.TRANS

    def to_dict(self) -> dict[str, Any]:
        return {
            "isCandidate": self.is_candidate,
            "geneSymbol": self.gene_symbol,
            "partnerVariantKeys": list(self.partner_variant_keys),
            "phase": self.phase.value,
        }


@dataclass(frozen=True)
class PatternResult:
    """
    Final inheritance result for one variant and one individual of interest.

    Fields
    ------
    variant_key : str
    sample_id : str | None
        The individual of interest the patterns were deduced for.
    prioritized_pattern : PatternLabel
        Single label chosen by the prioritizer. Never absent.
    matched_patterns : frozenset[PatternLabel]
        All models the single-variant pass found consistent.
    comp_het_details : CompHetDetails | None
        Set by the compound heterozygous pass.
    segregation_status : Mapping[PatternLabel, SegregationStatus]
        Family-level segregation per matched pattern. Stored read-only; the
        result hashes over its sorted entries.
    diagnostics : tuple[Diagnostic, ...]
        Non-fatal notes about fallbacks taken while evaluating.
    """

    variant_key: str
    sample_id: str | None
    prioritized_pattern: PatternLabel
    matched_patterns: frozenset = field(default_factory=frozenset)
    comp_het_details: CompHetDetails | None = None
    segregation_status: Mapping[PatternLabel, SegregationStatus] = field(default_factory=dict)
    diagnostics: tuple = ()

    def __post_init__(self):
        object.__setattr__(
            self, "segregation_status", MappingProxyType(dict(self.segregation_status))
        )

    def __hash__(self):
        segregation = tuple(
            sorted(self.segregation_status.items(), key=lambda item: item[0].value)
        )
        return hash(
            (
                self.variant_key,
                self.sample_id,
                self.prioritized_pattern,
                self.matched_patterns,
                self.comp_het_details,
                segregation,
                self.diagnostics,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Render as the ``deducedInheritancePattern`` output record."""
        out: dict[str, Any] = {
            "prioritizedPattern": self.prioritized_pattern.value,
            "matchedPatterns": sorted(p.value for p in self.matched_patterns),
        }
        if self.comp_het_details is not None:
            out["compHetDetails"] = self.comp_het_details.to_dict()
        out["segregationStatus"] = {
            pattern.value: status.value
            for pattern, status in sorted(self.segregation_status.items(), key=lambda x: x[0].value)
        }
        out["diagnostics"] = [d.to_dict() for d in self.diagnostics]
        return out

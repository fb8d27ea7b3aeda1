"""
Genotype utility functions for inheritance analysis.

This module normalizes raw genotype strings as commonly found in VCF files
(``0/1``, ``1|1``, ``./.``, ``1``, ``0/1:35:99``) into a zygosity value,
taking sex-chromosome hemizygosity into account.
"""

import math
from typing import Any, Optional, Tuple

from .models import Genotype, Sex, Zygosity

MISSING_CALL_MARKERS = frozenset({".", ""})
MISSING_ALLELE = "."

AUTOSOME = "autosome"
CHROM_X = "X"
CHROM_Y = "Y"
CHROM_MT = "MT"

_CHROMOSOME_ALIASES = {
    "X": CHROM_X,
    "23": CHROM_X,
    "Y": CHROM_Y,
    "24": CHROM_Y,
    "M": CHROM_MT,
    "MT": CHROM_MT,
}


def classify_chromosome(chrom: Any) -> str:
    """
    Classify a chromosome name.

    Parameters
    ----------
    chrom : Any
        Chromosome name, with or without ``chr`` prefix (e.g. "chrX", "23", "7")

    Returns
    -------
    str
        One of 'autosome', 'X', 'Y', 'MT'
    """
    name = str(chrom).strip().upper()
    if name.startswith("CHR"):
        name = name[3:]
    return _CHROMOSOME_ALIASES.get(name, AUTOSOME)


def is_sex_chromosome(chrom: Any) -> bool:
    """Check if chromosome is X or Y."""
    return classify_chromosome(chrom) in (CHROM_X, CHROM_Y)


def _is_absent(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return False


def parse_genotype(gt: Any) -> Optional[Tuple[Optional[int], ...]]:
    """
    Parse a genotype string into allele indices.

    Only the GT sub-field is considered, so ``"0/1:35:99"`` parses like
    ``"0/1"``. A ``.`` allele becomes None; an empty allele token makes the
    whole call unparseable.

    Parameters
    ----------
    gt : Any
        Genotype string (e.g., "0/1", "1|1", "./.", "1")

    Returns
    -------
    Optional[Tuple[Optional[int], ...]]
        Tuple of allele indices, or None if the call cannot be parsed at all
    """
    if _is_absent(gt):
        return ()

    text = str(gt).strip().split(":", 1)[0]
    if text in MISSING_CALL_MARKERS:
        return ()

    # Handle both / and | separators
    parts = text.replace("|", "/").split("/")

    alleles = []
    for part in parts:
        part = part.strip()
        if part == MISSING_ALLELE:
            alleles.append(None)
            continue
        if not part:
            # Empty allele token, e.g. "0//1" or "0/1/"
            return None
        try:
            index = int(part)
        except ValueError:
            return None
        if index < 0:
            return None
        alleles.append(index)
    return tuple(alleles)


def normalize_genotype(raw_call: Any, chromosome: Any, sex: Sex = Sex.UNKNOWN) -> Genotype:
    """
    Normalize a raw genotype call into a Genotype.

    Never raises: anything that cannot be interpreted degrades to
    ``Zygosity.MISSING`` with a diagnostic note.

    Parameters
    ----------
    raw_call : Any
        Raw genotype call
    chromosome : Any
        Chromosome of the variant
    sex : Sex
        Sex of the individual the call belongs to

    Returns
    -------
    Genotype
        Normalized genotype
    """
    raw = None if _is_absent(raw_call) else str(raw_call)
    alleles = parse_genotype(raw_call)

    if alleles is None:
        return Genotype(Zygosity.MISSING, raw, f"unparseable genotype call {raw!r}")
    if not alleles:
        return Genotype(Zygosity.MISSING, raw)
    if any(a is None for a in alleles):
        return Genotype(Zygosity.MISSING, raw)

    sex_chrom = is_sex_chromosome(chromosome)

    if len(alleles) == 1:
        if not sex_chrom:
            return Genotype(
                Zygosity.MISSING, raw, f"single-allele call {raw!r} on autosome {chromosome}"
            )
        if sex is Sex.FEMALE:
            return Genotype(
                Zygosity.MISSING,
                raw,
                f"single-allele call {raw!r} on chromosome {chromosome} for a female",
            )
        zygosity = Zygosity.HOM_REF if alleles[0] == 0 else Zygosity.HEMI_ALT
        note = None
        if sex is Sex.UNKNOWN:
            note = f"single-allele call {raw!r} treated as hemizygous for sample of unknown sex"
        return Genotype(zygosity, raw, note)

    if len(alleles) > 2:
        return Genotype(Zygosity.MISSING, raw, f"non-diploid genotype call {raw!r}")

    alt_count = sum(1 for a in alleles if a != 0)
    if alt_count == 0:
        return Genotype(Zygosity.HOM_REF, raw)

    if sex_chrom and sex is Sex.MALE:
        # Males carry a single X/Y; diploid homozygous calls are hemizygous.
        if alt_count == 2:
            return Genotype(Zygosity.HEMI_ALT, raw)
        if alt_count == 1:
            return Genotype(
                Zygosity.HET,
                raw,
                f"heterozygous call {raw!r} on chromosome {chromosome} for a male",
            )

    if alt_count == 1:
        return Genotype(Zygosity.HET, raw)
    return Genotype(Zygosity.HOM_ALT, raw)


def is_carrier(zygosity: Zygosity) -> bool:
    """Check if a zygosity carries at least one alternate allele."""
    return zygosity in (Zygosity.HET, Zygosity.HOM_ALT, Zygosity.HEMI_ALT)


def get_allele_count(zygosity: Zygosity) -> int:
    """
    Get the count of alternate alleles for a zygosity.

    Parameters
    ----------
    zygosity : Zygosity
        Normalized genotype state

    Returns
    -------
    int
        Number of alternate alleles (0, 1, or 2)
    """
    if zygosity is Zygosity.HOM_ALT:
        return 2
    if zygosity in (Zygosity.HET, Zygosity.HEMI_ALT):
        return 1
    return 0

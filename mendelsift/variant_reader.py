"""
Variant table reader.

Reads a tab-separated variant table with one row per variant and one
genotype column per sample, and turns it into VariantRecord objects.
"""

import logging
import re
from typing import List, Optional

import pandas as pd

from .models import VariantRecord

logger = logging.getLogger(__name__)

VARIANT_COLUMNS = ["CHROM", "POS", "REF", "ALT"]

# Separators seen in annotated gene columns (e.g. "GENE1,GENE2" or "GENE1&GENE2")
GENE_SEPARATORS = re.compile(r"[,;&|]")


def read_variant_table(file_path: str) -> pd.DataFrame:
    """
    Read a tab-separated variant table.

    All columns are read as strings so that genotype calls like ``0/1`` and
    positions are kept verbatim. Empty cells become empty strings.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file cannot be parsed or lacks the variant columns.
    """
    try:
        df = pd.read_csv(file_path, sep="\t", dtype=str, keep_default_na=False)
    except FileNotFoundError:
        raise
    except pd.errors.EmptyDataError:
        raise ValueError(f"Variant table '{file_path}' is empty")
    except Exception as e:
        raise ValueError(f"Failed to parse variant table '{file_path}': {e}")

    missing = [col for col in VARIANT_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Variant table '{file_path}' is missing required columns: {missing}")

    logger.info(f"Read {len(df)} variants with {len(df.columns)} columns from {file_path}")
    return df


def split_gene_symbols(value: Optional[str]) -> frozenset:
    """Split a gene column value into a set of symbols."""
    if value is None or pd.isna(value):
        return frozenset()
    return frozenset(
        gene.strip() for gene in GENE_SEPARATORS.split(str(value)) if gene.strip() not in ("", ".")
    )


def get_sample_columns(df: pd.DataFrame, gene_column: str = "GENE") -> List[str]:
    """All columns that are neither variant nor gene columns."""
    fixed = set(VARIANT_COLUMNS) | {gene_column}
    return [col for col in df.columns if col not in fixed]


def records_from_dataframe(
    df: pd.DataFrame, sample_list: List[str], gene_column: str = "GENE"
) -> List[VariantRecord]:
    """
    Build variant records from a variant table.

    Parameters
    ----------
    df : pd.DataFrame
        Table with ``CHROM``, ``POS``, ``REF``, ``ALT``, an optional gene
        column and genotype columns
    sample_list : List[str]
        Sample IDs whose genotype columns are used. Samples without a
        column are treated as not genotyped.
    gene_column : str
        Column holding the gene symbol(s)

    Returns
    -------
    List[VariantRecord]
        One record per row, in table order
    """
    missing = [col for col in VARIANT_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Variant table is missing required columns: {missing}")

    if gene_column not in df.columns:
        logger.warning(
            f"Gene column '{gene_column}' not found; compound heterozygous analysis will find "
            "no candidates"
        )

    present = [s for s in sample_list if s in df.columns]
    absent = [s for s in sample_list if s not in df.columns]
    if absent:
        logger.warning(f"No genotype column for samples: {', '.join(absent)}")

    records = []
    for row in df.to_dict("records"):
        chrom = str(row["CHROM"]).strip()
        records.append(
            VariantRecord(
                variant_key=VariantRecord.make_key(chrom, row["POS"], row["REF"], row["ALT"]),
                chromosome=chrom,
                gene_symbols=split_gene_symbols(row.get(gene_column)),
                genotypes={sample_id: row[sample_id] for sample_id in present},
            )
        )

    logger.debug(f"Built {len(records)} variant records for {len(present)} samples")
    return records

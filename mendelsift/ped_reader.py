"""
PED file reader for pedigree information.

This module parses standard 6-column PED files used in genetic analysis
to define family relationships. It only handles file syntax; relationship
checks (dangling parents, cycles) happen in :mod:`mendelsift.pedigree`.
"""

import logging
from typing import Any, Dict

import pandas as pd

logger = logging.getLogger(__name__)

PED_COLUMNS = ["family_id", "sample_id", "father_id", "mother_id", "sex", "affected_status"]

# Column defaults applied to empty or "." cells
_DEFAULTS = {
    "family_id": "",
    "father_id": "0",
    "mother_id": "0",
    "sex": "0",
    "affected_status": "0",
}


def _clean(value: Any, default: str) -> str:
    if pd.isna(value):
        return default
    value = str(value).strip()
    if value in ("", "."):
        return default
    return value


def read_pedigree(file_path: str) -> Dict[str, Dict[str, Any]]:
    """
    Parse a PED file into a dictionary keyed by sample ID.

    Lines starting with ``#`` are comments. Records keep file order; when a
    sample ID occurs twice, the first record wins.

    Args:
        file_path: Path to the PED file

    Returns:
        Dictionary mapping sample IDs to their pedigree information

    Raises:
        ValueError: If the PED file is invalid or cannot be parsed
    """
    try:
        ped_df = pd.read_csv(file_path, sep=r"\s+", header=None, dtype=str, comment="#")
    except FileNotFoundError:
        raise
    except pd.errors.EmptyDataError:
        raise ValueError("Failed to parse PED file: PED file is empty")
    except Exception as e:
        raise ValueError(f"Failed to parse PED file: {e}")

    if ped_df.empty:
        raise ValueError("Failed to parse PED file: PED file is empty")

    if ped_df.shape[1] != len(PED_COLUMNS):
        raise ValueError(
            f"Failed to parse PED file: PED file must have exactly 6 columns, "
            f"found {ped_df.shape[1]}"
        )
    ped_df.columns = PED_COLUMNS

    pedigree_data: Dict[str, Dict[str, Any]] = {}
    for row in ped_df.itertuples(index=False):
        record = row._asdict()
        sample_id = _clean(record["sample_id"], "")
        if not sample_id:
            logger.warning("Skipping PED row with empty sample ID")
            continue
        if sample_id in pedigree_data:
            logger.warning(f"Duplicate PED record for sample '{sample_id}'; keeping the first")
            continue

        entry = {"sample_id": sample_id}
        for column, default in _DEFAULTS.items():
            entry[column] = _clean(record[column], default)
        pedigree_data[sample_id] = entry

    logger.info(f"Successfully parsed PED file with {len(pedigree_data)} individuals")
    return pedigree_data

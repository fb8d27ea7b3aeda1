"""Pytest configuration and fixtures for inheritance tests."""

from typing import Any, Dict, Iterable

import pytest

from mendelsift.models import VariantRecord
from mendelsift.pedigree import PedigreeGraph


def _make_variant(
    chrom: str,
    pos: int,
    genotypes: Dict[str, Any],
    genes: Iterable[str] = ("GENE1",),
    ref: str = "A",
    alt: str = "G",
) -> VariantRecord:
    """Build a variant record for tests."""
    return VariantRecord(
        variant_key=VariantRecord.make_key(chrom, pos, ref, alt),
        chromosome=chrom,
        gene_symbols=frozenset(genes),
        genotypes=genotypes,
    )


@pytest.fixture
def make_variant():
    """Factory for variant records: make_variant(chrom, pos, genotypes, genes=...)."""
    return _make_variant


@pytest.fixture
def trio_pedigree_data() -> Dict[str, Dict[str, Any]]:
    """Standard trio: unaffected parents, affected son."""
    return {
        "father": {
            "family_id": "FAM1",
            "sample_id": "father",
            "father_id": "0",
            "mother_id": "0",
            "sex": "1",  # Male
            "affected_status": "1",  # Unaffected
        },
        "mother": {
            "family_id": "FAM1",
            "sample_id": "mother",
            "father_id": "0",
            "mother_id": "0",
            "sex": "2",  # Female
            "affected_status": "1",  # Unaffected
        },
        "child": {
            "family_id": "FAM1",
            "sample_id": "child",
            "father_id": "father",
            "mother_id": "mother",
            "sex": "1",  # Male
            "affected_status": "2",  # Affected
        },
    }


@pytest.fixture
def trio_pedigree(trio_pedigree_data) -> PedigreeGraph:
    return PedigreeGraph.from_pedigree_data(trio_pedigree_data)


@pytest.fixture
def daughter_trio_pedigree(trio_pedigree_data) -> PedigreeGraph:
    """Trio with an affected daughter."""
    trio_pedigree_data["child"]["sex"] = "2"
    return PedigreeGraph.from_pedigree_data(trio_pedigree_data)


@pytest.fixture
def single_sample_pedigree() -> PedigreeGraph:
    """Affected singleton of unknown sex."""
    return PedigreeGraph.from_pedigree_data(
        {
            "Sample1": {
                "sample_id": "Sample1",
                "father_id": "0",
                "mother_id": "0",
                "sex": "0",
                "affected_status": "2",
            }
        }
    )


@pytest.fixture
def multi_generation_pedigree() -> PedigreeGraph:
    """Affected grandfather, affected mother, affected grandson."""
    return PedigreeGraph.build(
        [
            {
                "family_id": "FAM1",
                "sample_id": "grandfather",
                "father_id": "0",
                "mother_id": "0",
                "sex": "1",
                "affected_status": "2",
            },
            {
                "family_id": "FAM1",
                "sample_id": "grandmother",
                "father_id": "0",
                "mother_id": "0",
                "sex": "2",
                "affected_status": "1",
            },
            {
                "family_id": "FAM1",
                "sample_id": "mother",
                "father_id": "grandfather",
                "mother_id": "grandmother",
                "sex": "2",
                "affected_status": "2",
            },
            {
                "family_id": "FAM1",
                "sample_id": "father",
                "father_id": "0",
                "mother_id": "0",
                "sex": "1",
                "affected_status": "1",
            },
            {
                "family_id": "FAM1",
                "sample_id": "child",
                "father_id": "father",
                "mother_id": "mother",
                "sex": "1",
                "affected_status": "2",
            },
        ]
    )

"""Shared pytest fixtures for all test modules."""

from pathlib import Path

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single function or class")
    config.addinivalue_line("markers", "inheritance: inheritance analysis tests")


TRIO_PED = """# family sample father mother sex affected
FAM1 father 0 0 1 1
FAM1 mother 0 0 2 1
FAM1 child father mother 1 2
"""

TRIO_VARIANTS = (
    "CHROM\tPOS\tREF\tALT\tGENE\tchild\tfather\tmother\n"
    "1\t1000\tA\tG\tGENE1\t0/1\t0/0\t0/0\n"
    "2\t2000\tC\tT\tGENE2\t1/1\t0/1\t0/1\n"
    "3\t3000\tG\tA\tGENE3\t0/1\t0/1\t0/0\n"
    "3\t3500\tT\tC\tGENE3\t0/1\t0/0\t0/1\n"
    "X\t5000\tA\tT\tGENE4\t1\t0/0\t0/1\n"
    "7\t7000\tG\tC\tGENE5\t0/0\t0/1\t0/0\n"
)


@pytest.fixture
def trio_ped_file(tmp_path) -> Path:
    """Standard trio PED file: unaffected parents, affected son."""
    path = tmp_path / "trio.ped"
    path.write_text(TRIO_PED)
    return path


@pytest.fixture
def trio_variant_file(tmp_path) -> Path:
    """Variant table for the trio covering the main inheritance patterns."""
    path = tmp_path / "variants.tsv"
    path.write_text(TRIO_VARIANTS)
    return path

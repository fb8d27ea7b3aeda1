"""Tests for the variant table reader."""

import pandas as pd
import pytest

from mendelsift.variant_reader import (
    get_sample_columns,
    read_variant_table,
    records_from_dataframe,
    split_gene_symbols,
)


class TestReadVariantTable:

    def test_read_table(self, trio_variant_file):
        df = read_variant_table(str(trio_variant_file))
        assert len(df) == 6
        assert df.loc[0, "child"] == "0/1"
        assert df.loc[0, "POS"] == "1000"

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.tsv"
        path.write_text("CHROM\tPOS\tGENE\ts1\n1\t100\tGENE1\t0/1\n")
        with pytest.raises(ValueError, match="missing required columns"):
            read_variant_table(str(path))

    def test_empty_table(self, tmp_path):
        path = tmp_path / "empty.tsv"
        path.write_text("")
        with pytest.raises(ValueError):
            read_variant_table(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_variant_table(str(tmp_path / "nope.tsv"))


class TestRecordsFromDataFrame:

    @pytest.fixture
    def variant_df(self):
        return pd.DataFrame(
            [
                ["chr1", "100", "A", "G", "GENE1,GENE2", "0/1", "0/0"],
                ["chrX", "200", "C", "T", "", "1", "./."],
            ],
            columns=["CHROM", "POS", "REF", "ALT", "GENE", "s1", "s2"],
        )

    def test_build_records(self, variant_df):
        records = records_from_dataframe(variant_df, ["s1", "s2"])

        assert [r.variant_key for r in records] == ["chr1:100:A:G", "chrX:200:C:T"]
        assert records[0].chromosome == "chr1"
        assert records[0].gene_symbols == {"GENE1", "GENE2"}
        assert records[1].gene_symbols == frozenset()
        assert records[1].raw_call("s1") == "1"

    def test_sample_without_column(self, variant_df):
        records = records_from_dataframe(variant_df, ["s1", "s9"])
        assert records[0].raw_call("s9") is None
        assert "s2" not in records[0].genotypes

    def test_custom_gene_column(self, variant_df):
        df = variant_df.rename(columns={"GENE": "SYMBOL"})
        records = records_from_dataframe(df, ["s1"], gene_column="SYMBOL")
        assert records[0].gene_symbols == {"GENE1", "GENE2"}

    def test_sample_columns(self, variant_df):
        assert get_sample_columns(variant_df) == ["s1", "s2"]

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("GENE1", {"GENE1"}),
            ("GENE1;GENE2", {"GENE1", "GENE2"}),
            ("GENE1&GENE2|GENE3", {"GENE1", "GENE2", "GENE3"}),
            (" GENE1 , GENE1 ", {"GENE1"}),
            (".", set()),
            (None, set()),
        ],
    )
    def test_split_gene_symbols(self, value, expected):
        assert split_gene_symbols(value) == expected

"""Tests for genotype utility functions."""

import pytest

from mendelsift.genotype_utils import (
    AUTOSOME,
    CHROM_MT,
    CHROM_X,
    CHROM_Y,
    classify_chromosome,
    get_allele_count,
    is_carrier,
    is_sex_chromosome,
    normalize_genotype,
    parse_genotype,
)
from mendelsift.models import Sex, Zygosity


class TestParseGenotype:
    """Test raw genotype parsing."""

    def test_parse_genotype(self):
        """Test parsing various genotype formats."""
        assert parse_genotype("0/0") == (0, 0)
        assert parse_genotype("0/1") == (0, 1)
        assert parse_genotype("1|0") == (1, 0)
        assert parse_genotype("2/3") == (2, 3)
        assert parse_genotype("1") == (1,)
        assert parse_genotype("0/.") == (0, None)

    def test_missing_calls(self):
        assert parse_genotype("./.") == (None, None)
        assert parse_genotype(".") == ()
        assert parse_genotype("") == ()
        assert parse_genotype(None) == ()
        assert parse_genotype(float("nan")) == ()

    def test_colon_separated_fields(self):
        assert parse_genotype("0/1:35:99") == (0, 1)
        assert parse_genotype("1|1:12,30") == (1, 1)

    def test_unparseable(self):
        assert parse_genotype("invalid") is None
        assert parse_genotype("A/G") is None
        assert parse_genotype("-1/0") is None
        assert parse_genotype("0//1") is None
        assert parse_genotype("0/1/") is None


class TestChromosomes:

    @pytest.mark.parametrize(
        "chrom,expected",
        [
            ("1", AUTOSOME),
            ("chr7", AUTOSOME),
            ("X", CHROM_X),
            ("chrX", CHROM_X),
            ("23", CHROM_X),
            ("y", CHROM_Y),
            ("chrM", CHROM_MT),
            ("MT", CHROM_MT),
        ],
    )
    def test_classify_chromosome(self, chrom, expected):
        assert classify_chromosome(chrom) == expected

    def test_is_sex_chromosome(self):
        assert is_sex_chromosome("chrX")
        assert is_sex_chromosome("Y")
        assert not is_sex_chromosome("MT")
        assert not is_sex_chromosome("12")


class TestNormalizeGenotype:
    """Test genotype normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("0/0", Zygosity.HOM_REF),
            ("0|1", Zygosity.HET),
            ("1/0", Zygosity.HET),
            ("1/1", Zygosity.HOM_ALT),
            ("1/2", Zygosity.HOM_ALT),
            ("0/2", Zygosity.HET),
            ("./.", Zygosity.MISSING),
            ("0/.", Zygosity.MISSING),
            (None, Zygosity.MISSING),
        ],
    )
    def test_autosomal_calls(self, raw, expected):
        assert normalize_genotype(raw, "1").zygosity is expected

    def test_missing_call_has_no_diagnostic(self):
        gt = normalize_genotype("./.", "1")
        assert gt.is_missing
        assert gt.diagnostic is None

    def test_unparseable_call_is_missing_with_diagnostic(self):
        gt = normalize_genotype("garbage", "1")
        assert gt.zygosity is Zygosity.MISSING
        assert "unparseable" in gt.diagnostic
        assert gt.raw == "garbage"

    @pytest.mark.parametrize("raw", ["0//1", "0/1/", "/1", "0|"])
    def test_empty_allele_token_is_unparseable(self, raw):
        gt = normalize_genotype(raw, "1")
        assert gt.zygosity is Zygosity.MISSING
        assert gt.diagnostic is not None
        assert "unparseable" in gt.diagnostic

    def test_single_allele_on_autosome(self):
        gt = normalize_genotype("1", "5", Sex.MALE)
        assert gt.is_missing
        assert gt.diagnostic

    def test_non_diploid_call(self):
        gt = normalize_genotype("0/1/1", "5")
        assert gt.is_missing
        assert "non-diploid" in gt.diagnostic

    def test_male_hemizygous_x(self):
        assert normalize_genotype("1", "X", Sex.MALE).zygosity is Zygosity.HEMI_ALT
        assert normalize_genotype("0", "X", Sex.MALE).zygosity is Zygosity.HOM_REF
        assert normalize_genotype("1/1", "chrX", Sex.MALE).zygosity is Zygosity.HEMI_ALT
        assert normalize_genotype("1", "Y", Sex.MALE).zygosity is Zygosity.HEMI_ALT

    def test_male_het_on_x_is_flagged(self):
        gt = normalize_genotype("0/1", "X", Sex.MALE)
        assert gt.zygosity is Zygosity.HET
        assert gt.diagnostic

    def test_female_x(self):
        assert normalize_genotype("1/1", "X", Sex.FEMALE).zygosity is Zygosity.HOM_ALT
        assert normalize_genotype("0/1", "X", Sex.FEMALE).zygosity is Zygosity.HET
        assert normalize_genotype("1", "X", Sex.FEMALE).is_missing

    def test_unknown_sex_single_allele_x(self):
        gt = normalize_genotype("1", "X")
        assert gt.zygosity is Zygosity.HEMI_ALT
        assert gt.diagnostic

    def test_carrier_helpers(self):
        assert is_carrier(Zygosity.HET)
        assert is_carrier(Zygosity.HEMI_ALT)
        assert not is_carrier(Zygosity.HOM_REF)
        assert not is_carrier(Zygosity.MISSING)
        assert get_allele_count(Zygosity.HOM_ALT) == 2
        assert get_allele_count(Zygosity.HEMI_ALT) == 1
        assert get_allele_count(Zygosity.MISSING) == 0

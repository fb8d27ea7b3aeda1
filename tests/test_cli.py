"""
Tests for CLI module.

Runs the command-line entry point end to end on small PED and variant files.
"""

import json
import subprocess
import sys

import pytest

from mendelsift.cli import create_parser, main


def _patterns(report):
    return {
        entry["variantKey"]: entry["deducedInheritancePattern"]["prioritizedPattern"]
        for entry in report
    }


def test_cli_help():
    """Test that the CLI help message can be displayed."""
    cmd = [sys.executable, "-m", "mendelsift.cli", "--help"]
    result = subprocess.run(cmd, capture_output=True, text=True)
    assert result.returncode == 0
    assert "usage:" in result.stdout
    assert "--all-affected" in result.stdout


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        create_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert "mendelsift" in capsys.readouterr().out


def test_required_arguments():
    with pytest.raises(SystemExit):
        create_parser().parse_args(["--ped", "family.ped"])


class TestMain:

    def test_report_to_stdout(self, trio_ped_file, trio_variant_file, capsys):
        rc = main(["--ped", str(trio_ped_file), "--variants", str(trio_variant_file)])
        assert rc == 0

        report = json.loads(capsys.readouterr().out)
        assert _patterns(report) == {
            "1:1000:A:G": "de_novo",
            "2:2000:C:T": "autosomal_recessive",
            "3:3000:G:A": "compound_heterozygous",
            "3:3500:T:C": "compound_heterozygous",
            "X:5000:A:T": "x_linked_recessive",
            "7:7000:G:C": "reference",
        }

    def test_report_to_file(self, trio_ped_file, trio_variant_file, tmp_path):
        output = tmp_path / "out" / "report.json"
        output.parent.mkdir()
        rc = main(
            [
                "--ped",
                str(trio_ped_file),
                "--variants",
                str(trio_variant_file),
                "--output",
                str(output),
                "--threads",
                "2",
            ]
        )
        assert rc == 0
        report = json.loads(output.read_text())
        assert len(report) == 6
        assert report[2]["geneSymbols"] == ["GENE3"]

    def test_index_sample_option(self, trio_ped_file, trio_variant_file, capsys):
        rc = main(
            [
                "--ped",
                str(trio_ped_file),
                "--variants",
                str(trio_variant_file),
                "--index-sample",
                "father",
            ]
        )
        assert rc == 0
        report = json.loads(capsys.readouterr().out)
        assert _patterns(report)["1:1000:A:G"] == "reference"

    def test_samples_option(self, trio_ped_file, trio_variant_file, capsys):
        rc = main(
            [
                "--ped",
                str(trio_ped_file),
                "--variants",
                str(trio_variant_file),
                "--samples",
                "child",
            ]
        )
        assert rc == 0
        report = json.loads(capsys.readouterr().out)
        # Without parental genotypes the trio evidence is gone
        assert _patterns(report)["3:3000:G:A"] == (
            "compound_heterozygous_possible_missing_parents"
        )

    def test_all_affected(self, trio_ped_file, trio_variant_file, capsys):
        rc = main(
            ["--ped", str(trio_ped_file), "--variants", str(trio_variant_file), "--all-affected"]
        )
        assert rc == 0
        report = json.loads(capsys.readouterr().out)
        assert set(report[0]["deducedInheritancePatterns"]) == {"child"}

    def test_config_file(self, trio_ped_file, tmp_path, capsys):
        variants = tmp_path / "symbol.tsv"
        variants.write_text(
            "CHROM\tPOS\tREF\tALT\tSYMBOL\tchild\tfather\tmother\n"
            "3\t3000\tG\tA\tGENE3\t0/1\t0/1\t0/0\n"
            "3\t3500\tT\tC\tGENE3\t0/1\t0/0\t0/1\n"
        )
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"gene_column": "SYMBOL", "log_level": "DEBUG"}))

        rc = main(
            ["--ped", str(trio_ped_file), "--variants", str(variants), "--config", str(config)]
        )
        assert rc == 0
        report = json.loads(capsys.readouterr().out)
        assert set(_patterns(report).values()) == {"compound_heterozygous"}

    def test_log_file(self, trio_ped_file, trio_variant_file, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        rc = main(
            [
                "--ped",
                str(trio_ped_file),
                "--variants",
                str(trio_variant_file),
                "--output",
                str(tmp_path / "report.json"),
                "--log-file",
                str(log_file),
            ]
        )
        assert rc == 0
        assert "Inheritance report saved" in log_file.read_text()

    def test_cyclic_pedigree(self, tmp_path, trio_variant_file):
        ped = tmp_path / "cycle.ped"
        ped.write_text("FAM1 a b 0 1 2\nFAM1 b a 0 1 1\n")
        rc = main(["--ped", str(ped), "--variants", str(trio_variant_file)])
        assert rc == 1

    def test_missing_input(self, tmp_path, trio_variant_file):
        rc = main(["--ped", str(tmp_path / "none.ped"), "--variants", str(trio_variant_file)])
        assert rc == 1

    def test_invalid_threads(self, trio_ped_file, trio_variant_file):
        rc = main(
            [
                "--ped",
                str(trio_ped_file),
                "--variants",
                str(trio_variant_file),
                "--threads",
                "0",
            ]
        )
        assert rc == 1

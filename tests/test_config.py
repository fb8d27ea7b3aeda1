"""Tests for configuration loading."""

import json

import pytest

from mendelsift.config import load_config, validate_config
from mendelsift.errors import ConfigError


class TestLoadConfig:

    def test_default_config(self):
        cfg = load_config()
        assert cfg["threads"] == 1
        assert cfg["min_variants_for_parallel"] == 100
        assert cfg["gene_column"] == "GENE"
        assert cfg["index_sample"] is None
        assert cfg["all_affected"] is False

    def test_user_config_overrides_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"threads": 4, "gene_column": "SYMBOL"}))
        cfg = load_config(str(path))

        assert cfg["threads"] == 4
        assert cfg["gene_column"] == "SYMBOL"
        assert cfg["log_level"] == "INFO"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.json"))

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Error parsing JSON"):
            load_config(str(path))

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(str(path))


class TestValidateConfig:

    @pytest.fixture
    def valid_config(self):
        return {
            "log_level": "INFO",
            "threads": 2,
            "min_variants_for_parallel": 10,
            "gene_column": "GENE",
        }

    def test_valid(self, valid_config):
        validate_config(valid_config)

    @pytest.mark.parametrize(
        "key,value",
        [
            ("threads", 0),
            ("threads", "4"),
            ("threads", True),
            ("min_variants_for_parallel", -1),
            ("log_level", "TRACE"),
        ],
    )
    def test_invalid_values(self, valid_config, key, value):
        valid_config[key] = value
        with pytest.raises(ConfigError) as excinfo:
            validate_config(valid_config)
        assert excinfo.value.details["key"] == key

    def test_missing_key(self, valid_config):
        del valid_config["gene_column"]
        with pytest.raises(ConfigError, match="gene_column"):
            validate_config(valid_config)

    def test_config_error_is_value_error(self, valid_config):
        valid_config["threads"] = -2
        with pytest.raises(ValueError):
            validate_config(valid_config)

# File: mendelsift/config.py
# Location: mendelsift/mendelsift/config.py

"""
Configuration management module.

This module handles loading configuration from a JSON file.
All default values reside in config.json, which is included in
the installed package directory.

If no config_file is provided, this module attempts to load the default
config.json from the package installation directory.
"""

import json
import os
from typing import Any, Dict, Optional

from .errors import ConfigError

REQUIRED_KEYS = ("log_level", "threads", "min_variants_for_parallel", "gene_column")


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file.

    If no config_file is provided, the function attempts to load the
    'config.json' from the installed package directory. A user-supplied
    file only needs to contain the keys it overrides; missing keys are
    filled in from the packaged defaults.

    Parameters
    ----------
    config_file : str, optional
        Path to a configuration file in JSON format. If None, defaults to
        the package-installed 'config.json'.

    Returns
    -------
    dict
        Configuration dictionary loaded from the JSON file.

    Raises
    ------
    FileNotFoundError
        If the specified configuration file does not exist.
    ValueError
        If there is an error parsing the JSON configuration file.
    """
    default_file = os.path.join(os.path.dirname(__file__), "config.json")
    config = _read_json(default_file)

    if config_file:
        user_config = _read_json(config_file)
        config.update(user_config)

    validate_config(config)
    return config


def _read_json(config_file: str) -> Dict[str, Any]:
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file '{config_file}' not found.")

    with open(config_file, "r", encoding="utf-8") as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing JSON configuration: {e}")

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file '{config_file}' must contain a JSON object.")
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """Check that the merged configuration has usable values."""
    for key in REQUIRED_KEYS:
        if key not in config:
            raise ConfigError(f"Missing configuration key: {key}", {"key": key})

    threads = config["threads"]
    if not isinstance(threads, int) or isinstance(threads, bool) or threads < 1:
        raise ConfigError(
            f"'threads' must be a positive integer, got {threads!r}", {"key": "threads"}
        )

    min_variants = config["min_variants_for_parallel"]
    if not isinstance(min_variants, int) or isinstance(min_variants, bool) or min_variants < 0:
        raise ConfigError(
            f"'min_variants_for_parallel' must be a non-negative integer, got {min_variants!r}",
            {"key": "min_variants_for_parallel"},
        )

    if str(config["log_level"]).upper() not in ("DEBUG", "INFO", "WARN", "ERROR"):
        raise ConfigError(
            f"'log_level' must be one of DEBUG, INFO, WARN, ERROR, got {config['log_level']!r}",
            {"key": "log_level"},
        )

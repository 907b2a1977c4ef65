# src/rendercheck/core/config_loader.py
"""Configuration file loading and layering.

Reads YAML config files and merges them with CLI overrides before
validating through a Pydantic model. Precedence: CLI > config file >
built-in defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, with override taking precedence.

    Args:
        base: Base configuration dict.
        override: Override values (takes precedence).

    Returns:
        Merged configuration dict (new dict, does not mutate inputs).
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def read_yaml_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML file that must contain a mapping.

    An empty file is treated as an empty mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If the document is not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open(encoding="utf-8") as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {path} must be a YAML mapping, got {type(loaded).__name__}")
    return loaded


def load_config(
    config_cls: type[ConfigT],
    *,
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ConfigT:
    """Load a configuration with precedence handling.

    Precedence (highest to lowest):
    1. cli_overrides - Direct overrides from CLI flags
    2. config_file - User's YAML configuration file
    3. defaults - Built-in Pydantic defaults

    Args:
        config_cls: The Pydantic model class to validate into.
        config_file: Optional path to YAML config file.
        cli_overrides: Optional dict of CLI flag overrides.

    Returns:
        Validated config instance of type ``config_cls``.

    Raises:
        FileNotFoundError: If config_file is not found.
        yaml.YAMLError: If YAML is malformed.
        pydantic.ValidationError: If final config fails validation.
    """
    config_dict: dict[str, Any] = {}

    if config_file is not None:
        config_dict = read_yaml_mapping(config_file)

    if cli_overrides is not None:
        config_dict = deep_merge(config_dict, cli_overrides)

    return config_cls(**config_dict)

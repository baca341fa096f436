# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Load per-project scan configuration from YAML or JSON."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from skscan.core.constants import RuleAction
from skscan.core.exceptions import ConfigurationError
from skscan.models.config import ScanConfig

logger = logging.getLogger("skscan.loader.config_file")

CONFIG_FILENAMES = (
    "skscan.yaml",
    "skscan.yml",
    ".skscan.yaml",
    ".skscan.yml",
    "skscan.json",
)


def find_config(target: str | Path) -> Path | None:
    """Return the first known config file in ``target`` (or its directory)."""
    base = Path(target)
    if base.is_file():
        base = base.parent
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_config(target: str | Path, explicit: str | Path | None = None) -> ScanConfig:
    """Load the scan configuration for ``target``.

    Parameters
    ----------
    target:
        File or directory being scanned; searched for a config file.
    explicit:
        Config file path given on the command line. Must exist.

    Returns
    -------
    ScanConfig
        Parsed configuration, or an empty one when no file is found.

    Raises
    ------
    ConfigurationError
        The file is missing, is not valid YAML/JSON, or fails validation.
    """
    if explicit is not None:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
    else:
        path = find_config(target)
        if path is None:
            return ScanConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot parse config file {path}: {exc}") from exc

    if data is None:
        return ScanConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    try:
        config = ScanConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc

    logger.info("Loaded config from %s (%d rule overrides)", path, len(config.rules))
    return config


def merge_cli_flags(config: ScanConfig, ignore_rules: str | None = None) -> ScanConfig:
    """Turn a comma-separated ``--ignore`` rule list into ``off`` overrides."""
    if not ignore_rules:
        return config
    rules = dict(config.rules)
    for rule_id in ignore_rules.split(","):
        rule_id = rule_id.strip()
        if rule_id:
            rules[rule_id] = RuleAction.OFF
    return config.model_copy(update={"rules": rules})

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Public SDK interface for embedding skscan in other tools.

Usage::

    from skscan import scan_path, scan_path_async

    # Synchronous (blocking)
    result = scan_path("./my-skill")
    print(result.status, result.summary.total)

    # Async
    result = await scan_path_async("./my-skill", config={"rules": {"secrets-high-entropy": "off"}})
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from skscan.core.config import Settings
from skscan.loader.config_file import load_config
from skscan.loader.files import discover_files
from skscan.models.config import ScanConfig
from skscan.models.scan import ScanResult
from skscan.models.skill import SkillFile
from skscan.scanner.pipeline import ScanOrchestrator, coerce_config

logger = logging.getLogger("skscan.sdk")


def _prepare(
    target: str | Path,
    config: ScanConfig | Mapping[str, Any] | None,
) -> tuple[list[SkillFile], ScanConfig]:
    """Resolve the config (explicit or discovered) and load the files."""
    scan_config = coerce_config(config) if config is not None else load_config(target)
    files = discover_files(target, scan_config.ignore)
    logger.debug("Prepared %d files from %s", len(files), target)
    return files, scan_config


def scan_path(
    target: str | Path,
    config: ScanConfig | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> ScanResult:
    """Scan a skill directory or single file.

    Parameters
    ----------
    target:
        Directory (walked recursively) or single file.
    config:
        Scan configuration. When omitted, ``skscan.yaml`` and friends are
        looked up in ``target``.
    settings:
        Optional ``Settings`` override; falls back to ``get_settings()``.
    """
    files, scan_config = _prepare(target, config)
    return ScanOrchestrator(settings).scan(files, scan_config)


async def scan_path_async(
    target: str | Path,
    config: ScanConfig | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> ScanResult:
    """Async variant of :func:`scan_path`; cancelling it stops the scan."""
    files, scan_config = await asyncio.to_thread(_prepare, target, config)
    return await ScanOrchestrator(settings).scan_async(files, scan_config)

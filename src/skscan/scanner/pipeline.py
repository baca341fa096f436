# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Scan orchestrator: turns a file corpus and a config into a ScanResult."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from skscan.core.config import Settings, get_settings
from skscan.core.constants import ENGINE_VERSION
from skscan.core.exceptions import ConfigurationError
from skscan.detectors.rule_engine.registry import RuleRegistry
from skscan.models.config import ScanConfig
from skscan.models.finding import Finding
from skscan.models.scan import ScanResult
from skscan.models.skill import SkillFile
from skscan.scanner.code_scanner import scan_code
from skscan.scanner.corpus import filter_corpus
from skscan.scanner.dispatch import RuleDispatcher
from skscan.scanner.prompt_scanner import scan_prompt
from skscan.scanner.severity import apply_overrides, category_statuses, summarize, worst_status

logger = logging.getLogger("skscan.scanner.pipeline")


def coerce_config(config: ScanConfig | Mapping[str, Any] | None) -> ScanConfig:
    """Accept a ScanConfig, a plain mapping, or None."""
    if config is None:
        return ScanConfig()
    if isinstance(config, ScanConfig):
        return config
    try:
        return ScanConfig.model_validate(dict(config))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid scan configuration: {exc}") from exc


class ScanOrchestrator:
    """Runs both category scanners and aggregates their findings.

    The orchestrator holds no per-scan state, so one instance may serve many
    concurrent scans. Each call builds its own dispatcher and thread pool.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        engine_version: str = ENGINE_VERSION,
    ) -> None:
        self._settings = settings or get_settings()
        self._engine_version = engine_version

    def scan(
        self,
        files: Iterable[SkillFile],
        config: ScanConfig | Mapping[str, Any] | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Scan a file corpus.

        Raises:
            ConfigurationError: The config names an unknown rule id or an
                invalid action. Raised before any file is scanned.
            ScanCancelledError: ``cancel_event`` was set mid-scan.
        """
        scan_config = coerce_config(config)
        scan_config.validate_rule_ids(RuleRegistry.rule_ids())

        start_time = time.monotonic()
        corpus = filter_corpus(files, scan_config.ignore)
        logger.info("Scanning %d files", len(corpus))

        dispatcher = RuleDispatcher(self._settings, cancel_event)
        raw = [
            *scan_code(corpus, dispatcher=dispatcher),
            *scan_prompt(corpus, dispatcher=dispatcher),
        ]
        findings = sorted(apply_overrides(raw, scan_config), key=Finding.sort_key)

        categories = category_statuses(findings)
        result = ScanResult(
            status=worst_status(categories.as_mapping().values()),
            summary=summarize(findings),
            findings=tuple(findings),
            categories=categories,
            scanned_files=len(corpus),
            scan_duration=int((time.monotonic() - start_time) * 1000),
            engine_version=self._engine_version,
        )
        logger.info(
            "Scan finished: status=%s findings=%d files=%d duration=%dms",
            result.status,
            result.summary.total,
            result.scanned_files,
            result.scan_duration,
        )
        return result

    async def scan_async(
        self,
        files: Iterable[SkillFile],
        config: ScanConfig | Mapping[str, Any] | None = None,
    ) -> ScanResult:
        """Run :meth:`scan` in a worker thread.

        Cancelling the awaiting task stops the dispatcher for this scan only;
        other scans on the same orchestrator are unaffected.
        """
        cancel = threading.Event()
        corpus = list(files)
        try:
            return await asyncio.to_thread(self.scan, corpus, config, cancel_event=cancel)
        except asyncio.CancelledError:
            cancel.set()
            logger.info("Scan cancelled by caller")
            raise


def scan(
    files: Iterable[SkillFile],
    config: ScanConfig | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> ScanResult:
    return ScanOrchestrator(settings).scan(files, config)


async def scan_async(
    files: Iterable[SkillFile],
    config: ScanConfig | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> ScanResult:
    return await ScanOrchestrator(settings).scan_async(files, config)

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Code-risk scanner: secrets and dangerous code."""

from __future__ import annotations

import logging
from collections.abc import Iterable

# Import rule modules to trigger registration
import skscan.detectors.rule_engine.rules.dangerous_code
import skscan.detectors.rule_engine.rules.secrets  # noqa: F401
from skscan.core.config import Settings
from skscan.core.constants import CODE_CATEGORIES
from skscan.detectors.rule_engine.registry import RuleRegistry
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile
from skscan.scanner.dispatch import RuleDispatcher

logger = logging.getLogger("skscan.scanner.code")


def scan_code(
    files: Iterable[SkillFile],
    *,
    dispatcher: RuleDispatcher | None = None,
    settings: Settings | None = None,
) -> list[Finding]:
    """Run every enabled secrets and dangerous-code rule over ``files``.

    Returns raw findings in deterministic order. Configuration overrides are
    applied by the orchestrator, not here.
    """
    dispatcher = dispatcher or RuleDispatcher(settings)
    rules = RuleRegistry.get_enabled(CODE_CATEGORIES, dispatcher.settings)
    corpus = list(files)
    logger.debug("Running %d code rules against %d files", len(rules), len(corpus))
    return sorted(dispatcher.run(rules, corpus), key=Finding.sort_key)

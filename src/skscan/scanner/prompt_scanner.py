# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Prompt-level scanner: overrides, exfiltration and hidden instructions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

# Import rule modules to trigger registration
import skscan.detectors.rule_engine.rules.exfiltration
import skscan.detectors.rule_engine.rules.hidden_instructions
import skscan.detectors.rule_engine.rules.prompt_override  # noqa: F401
from skscan.core.config import Settings
from skscan.core.constants import PROMPT_CATEGORIES
from skscan.detectors.rule_engine.registry import RuleRegistry
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile
from skscan.scanner.dispatch import RuleDispatcher

logger = logging.getLogger("skscan.scanner.prompt")


def scan_prompt(
    files: Iterable[SkillFile],
    *,
    dispatcher: RuleDispatcher | None = None,
    settings: Settings | None = None,
) -> list[Finding]:
    """Run every enabled prompt-override, exfiltration and hidden-instruction rule."""
    dispatcher = dispatcher or RuleDispatcher(settings)
    rules = RuleRegistry.get_enabled(PROMPT_CATEGORIES, dispatcher.settings)
    corpus = list(files)
    logger.debug("Running %d prompt rules against %d files", len(rules), len(corpus))
    return sorted(dispatcher.run(rules, corpus), key=Finding.sort_key)

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Override application, summary counts and status derivation."""

from __future__ import annotations

from collections.abc import Iterable

from skscan.core.constants import (
    BLOCKING_SEVERITIES,
    STATUS_ORDER,
    Category,
    RuleAction,
    ScanStatus,
    Severity,
)
from skscan.models.config import ScanConfig
from skscan.models.finding import Finding
from skscan.models.scan import CategoryStatuses, ScanSummary


def is_blocking(finding: Finding, action: RuleAction | None = None) -> bool:
    """Effective bucket of a finding: an override wins over intrinsic severity."""
    if action == RuleAction.ERROR:
        return True
    if action == RuleAction.WARN:
        return False
    return finding.severity in BLOCKING_SEVERITIES


def apply_overrides(findings: Iterable[Finding], config: ScanConfig) -> list[Finding]:
    """Drop ``off`` findings and stamp ``blocking`` on the rest.

    The stored severity is never changed.
    """
    stamped = []
    for finding in findings:
        action = config.action_for(finding.rule_id)
        if action == RuleAction.OFF:
            continue
        blocking = is_blocking(finding, action)
        stamped.append(
            finding if finding.blocking == blocking
            else finding.model_copy(update={"blocking": blocking})
        )
    return stamped


def category_status(findings: Iterable[Finding]) -> ScanStatus:
    status = ScanStatus.PASS
    for finding in findings:
        if finding.blocking:
            return ScanStatus.FAIL
        status = ScanStatus.WARN
    return status


def category_statuses(findings: Iterable[Finding]) -> CategoryStatuses:
    by_category: dict[Category, list[Finding]] = {c: [] for c in Category}
    for finding in findings:
        by_category[finding.category].append(finding)
    return CategoryStatuses.from_mapping({
        category: category_status(items) for category, items in by_category.items()
    })


def worst_status(statuses: Iterable[ScanStatus]) -> ScanStatus:
    return max(statuses, key=lambda s: STATUS_ORDER[s], default=ScanStatus.PASS)


def summarize(findings: Iterable[Finding]) -> ScanSummary:
    counts = {severity: 0 for severity in Severity}
    total = 0
    for finding in findings:
        counts[finding.severity] += 1
        total += 1
    return ScanSummary(
        total=total,
        critical=counts[Severity.CRITICAL],
        high=counts[Severity.HIGH],
        medium=counts[Severity.MEDIUM],
        low=counts[Severity.LOW],
    )

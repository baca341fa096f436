# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Unit tests for overrides, status derivation and summary counts."""

from __future__ import annotations

import pytest

from skscan.core.constants import Category, RuleAction, ScanStatus, Severity
from skscan.models.config import ScanConfig
from skscan.models.finding import Finding
from skscan.scanner.severity import (
    apply_overrides,
    category_status,
    category_statuses,
    is_blocking,
    summarize,
    worst_status,
)


def _make_finding(
    *,
    rule_id: str = "secrets-aws-key",
    severity: Severity = Severity.CRITICAL,
    category: Category = Category.SECRETS,
    file: str = "a.env",
    line: int = 1,
    blocking: bool = False,
) -> Finding:
    return Finding(
        rule_id=rule_id,
        severity=severity,
        category=category,
        file=file,
        line=line,
        message="test finding",
        blocking=blocking,
    )


class TestIsBlocking:
    @pytest.mark.parametrize(
        ("severity", "expected"),
        [
            (Severity.CRITICAL, True),
            (Severity.HIGH, True),
            (Severity.MEDIUM, False),
            (Severity.LOW, False),
        ],
    )
    def test_intrinsic_bucket(self, severity, expected):
        assert is_blocking(_make_finding(severity=severity)) is expected

    def test_error_override_blocks_low_severity(self):
        assert is_blocking(_make_finding(severity=Severity.LOW), RuleAction.ERROR)

    def test_warn_override_unblocks_critical(self):
        assert not is_blocking(_make_finding(severity=Severity.CRITICAL), RuleAction.WARN)


class TestApplyOverrides:
    def test_off_drops_findings(self):
        findings = [_make_finding(), _make_finding(rule_id="secrets-github-token")]
        config = ScanConfig(rules={"secrets-aws-key": "off"})
        kept = apply_overrides(findings, config)
        assert [f.rule_id for f in kept] == ["secrets-github-token"]

    def test_warn_keeps_severity_and_clears_blocking(self):
        config = ScanConfig(rules={"secrets-aws-key": "warn"})
        (finding,) = apply_overrides([_make_finding()], config)
        assert finding.severity == Severity.CRITICAL
        assert finding.blocking is False

    def test_error_stamps_blocking(self):
        config = ScanConfig(rules={"secrets-aws-key": "error"})
        (finding,) = apply_overrides([_make_finding(severity=Severity.MEDIUM)], config)
        assert finding.severity == Severity.MEDIUM
        assert finding.blocking is True

    def test_no_override_uses_intrinsic_bucket(self):
        (finding,) = apply_overrides([_make_finding(severity=Severity.HIGH)], ScanConfig())
        assert finding.blocking is True

    def test_input_findings_are_not_mutated(self):
        original = _make_finding(severity=Severity.HIGH)
        apply_overrides([original], ScanConfig())
        assert original.blocking is False


class TestStatus:
    def test_category_status(self):
        assert category_status([]) == ScanStatus.PASS
        assert category_status([_make_finding(blocking=False)]) == ScanStatus.WARN
        assert category_status([_make_finding(blocking=False), _make_finding(blocking=True)]) == ScanStatus.FAIL

    def test_category_statuses_per_category(self):
        findings = [
            _make_finding(blocking=True),
            _make_finding(
                rule_id="exfiltration-env-vars",
                category=Category.EXFILTRATION,
                severity=Severity.HIGH,
                blocking=False,
            ),
        ]
        statuses = category_statuses(findings)
        assert statuses.secrets == ScanStatus.FAIL
        assert statuses.exfiltration == ScanStatus.WARN
        assert statuses.dangerous_code == ScanStatus.PASS
        assert statuses.get(Category.HIDDEN_INSTRUCTIONS) == ScanStatus.PASS

    def test_worst_status(self):
        assert worst_status([]) == ScanStatus.PASS
        assert worst_status([ScanStatus.PASS, ScanStatus.WARN]) == ScanStatus.WARN
        assert worst_status([ScanStatus.FAIL, ScanStatus.WARN, ScanStatus.PASS]) == ScanStatus.FAIL


def test_summarize_counts_by_severity():
    findings = [
        _make_finding(severity=Severity.CRITICAL),
        _make_finding(severity=Severity.CRITICAL),
        _make_finding(severity=Severity.MEDIUM),
        _make_finding(severity=Severity.LOW),
    ]
    summary = summarize(findings)
    assert summary.total == 4
    assert (summary.critical, summary.high, summary.medium, summary.low) == (2, 0, 1, 1)

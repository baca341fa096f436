# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""CI-specific output for skscan results.

Provides:
- GitHub Actions workflow commands (``::error``/``::warning`` annotations)
- GitHub step summary markdown
- GitLab Code Quality JSON
- Azure DevOps logging commands
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from skscan.core.constants import Severity
from skscan.models.finding import Finding
from skscan.models.scan import ScanResult

_SEVERITY_TO_GITLAB: dict[str, str] = {
    Severity.CRITICAL: "blocker",
    Severity.HIGH: "critical",
    Severity.MEDIUM: "major",
    Severity.LOW: "minor",
}


def _level(finding: Finding) -> str:
    return "error" if finding.blocking else "warning"


# ---------------------------------------------------------------------------
# GitHub Actions
# ---------------------------------------------------------------------------


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_github_annotations(result: ScanResult) -> str:
    """One workflow command per finding; blocking findings are errors.

    See: https://docs.github.com/actions/using-workflows/workflow-commands-for-github-actions
    """
    lines = []
    for finding in result.findings:
        props = f"file={_escape_property(finding.file)},line={finding.line}"
        if finding.column:
            props += f",col={finding.column}"
        props += f",title={_escape_property(finding.rule_id)}"
        message = _escape_data(f"{finding.rule_id}: {finding.message}")
        lines.append(f"::{_level(finding)} {props}::{message}")
    return "\n".join(lines)


def _md_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def format_markdown_summary(result: ScanResult) -> str:
    """Markdown report suitable for ``$GITHUB_STEP_SUMMARY``."""
    lines = [
        "## skscan Results",
        "",
        f"**Status:** {result.status.upper()} | "
        f"**Files scanned:** {result.scanned_files} | "
        f"**Findings:** {result.summary.total}",
        "",
    ]
    if result.findings:
        lines.append("| Severity | Rule | File | Line | Message |")
        lines.append("|----------|------|------|------|---------|")
        for f in result.findings:
            lines.append(
                f"| {f.severity} | `{f.rule_id}` | `{_md_cell(f.file)}` | {f.line} | {_md_cell(f.message)} |"
            )
    else:
        lines.append("No issues found.")
    lines.append("")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# GitLab Code Quality
# ---------------------------------------------------------------------------


def format_gitlab_code_quality(result: ScanResult) -> str:
    """Format findings as a GitLab Code Quality report.

    See: https://docs.gitlab.com/ee/ci/testing/code_quality.html
    """
    issues: list[dict[str, Any]] = []
    for finding in result.findings:
        fingerprint_src = f"{finding.rule_id}:{finding.file}:{finding.line}:{finding.column or 0}"
        issues.append({
            "type": "issue",
            "check_name": finding.rule_id,
            "description": finding.message,
            "categories": ["Security"],
            "severity": _SEVERITY_TO_GITLAB[finding.severity],
            "fingerprint": hashlib.sha256(fingerprint_src.encode()).hexdigest(),
            "location": {"path": finding.file, "lines": {"begin": finding.line}},
        })
    return json.dumps(issues, indent=2)


# ---------------------------------------------------------------------------
# Azure DevOps logging commands
# ---------------------------------------------------------------------------


def format_azure_annotations(result: ScanResult) -> str:
    """Format findings as ``##vso[task.logissue]`` commands."""
    lines = []
    for finding in result.findings:
        message = finding.message.replace(";", "%3B").replace("\n", "%0A")
        lines.append(
            f"##vso[task.logissue type={_level(finding)};"
            f"sourcepath={finding.file.replace(';', '%3B')};"
            f"linenumber={finding.line};"
            f"columnnumber={finding.column or 1};"
            f"code={finding.rule_id}]"
            f"{message}"
        )
    return "\n".join(lines)

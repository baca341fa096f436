# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""SARIF 2.1.0 output formatter."""

from __future__ import annotations

import json
from typing import Any

from skscan.core.constants import Severity
from skscan.detectors.rule_engine.registry import RuleRegistry
from skscan.models.finding import Finding
from skscan.models.scan import ScanResult

SEVERITY_TO_SARIF_LEVEL = {
    Severity.CRITICAL: "error",
    Severity.HIGH: "error",
    Severity.MEDIUM: "warning",
    Severity.LOW: "note",
}

# GitHub code scanning reads this as a CVSS-like score
SECURITY_SEVERITY = {
    Severity.CRITICAL: "9.5",
    Severity.HIGH: "8.0",
    Severity.MEDIUM: "5.5",
    Severity.LOW: "2.0",
}


def _rule_descriptor(finding: Finding) -> dict[str, Any]:
    rule_class = RuleRegistry.get_by_id(finding.rule_id)
    title = rule_class.title if rule_class else finding.rule_id
    description = rule_class.description if rule_class else finding.message
    severity = rule_class.severity if rule_class else finding.severity
    return {
        "id": finding.rule_id,
        "name": finding.rule_id.replace("-", "_"),
        "shortDescription": {"text": title},
        "fullDescription": {"text": description},
        "defaultConfiguration": {"level": SEVERITY_TO_SARIF_LEVEL[severity]},
        "properties": {
            "category": str(finding.category),
            "security-severity": SECURITY_SEVERITY[severity],
            "tags": ["security", str(finding.category)],
        },
    }


def _result_level(finding: Finding) -> str:
    # The effective bucket decides the level, not the intrinsic severity
    if finding.blocking:
        return "error"
    return "note" if finding.severity == Severity.LOW else "warning"


def scan_result_to_sarif(result: ScanResult) -> dict[str, Any]:
    """Convert a ScanResult to SARIF 2.1.0 format."""
    rules: list[dict[str, Any]] = []
    rule_index: dict[str, int] = {}
    results: list[dict[str, Any]] = []

    for finding in result.findings:
        if finding.rule_id not in rule_index:
            rule_index[finding.rule_id] = len(rules)
            rules.append(_rule_descriptor(finding))

        region: dict[str, Any] = {"startLine": finding.line}
        if finding.column:
            region["startColumn"] = finding.column
        if finding.snippet:
            region["snippet"] = {"text": finding.snippet}

        results.append({
            "ruleId": finding.rule_id,
            "ruleIndex": rule_index[finding.rule_id],
            "level": _result_level(finding),
            "message": {"text": finding.message},
            "locations": [{
                "physicalLocation": {
                    "artifactLocation": {"uri": finding.file},
                    "region": region,
                }
            }],
            "properties": {
                "severity": str(finding.severity),
                "category": str(finding.category),
                "blocking": finding.blocking,
            },
        })

    return {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "skscan",
                        "version": result.engine_version,
                        "rules": rules,
                    }
                },
                "results": results,
                "properties": {
                    "status": str(result.status),
                    "scannedFiles": result.scanned_files,
                },
            }
        ],
    }


def format_sarif(result: ScanResult) -> str:
    """Return SARIF JSON string."""
    return json.dumps(scan_result_to_sarif(result), indent=2)

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Diff engine: compare two scan results and flag what changed."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from skscan.core.constants import ScanStatus
from skscan.models.finding import Finding
from skscan.models.scan import ScanResult


def finding_key(finding: Finding) -> str:
    """Produce a stable identity key for a finding.

    Findings are matched across scans by ``rule_id``, file and a hash of the
    normalised snippet. Line numbers are left out so that inserting lines
    above a finding does not make it look new.
    """
    snippet = " ".join(finding.snippet.split())
    snippet_hash = hashlib.sha256(snippet.encode()).hexdigest()[:16]
    return f"{finding.rule_id}:{finding.file}:{snippet_hash}"


def diff_findings(
    old_findings: list[Finding] | tuple[Finding, ...],
    new_findings: list[Finding] | tuple[Finding, ...],
) -> tuple[list[Finding], list[Finding], list[Finding]]:
    """Classify findings between two scans as new, removed, or unchanged.

    Parameters
    ----------
    old_findings:
        Findings from the baseline scan.
    new_findings:
        Findings from the updated scan.

    Returns
    -------
    tuple[list[Finding], list[Finding], list[Finding]]
        ``(new, removed, unchanged)``. Repeated identical findings are
        matched pairwise, so a second copy of the same line still counts as new.
    """
    old_by_key: dict[str, list[Finding]] = {}
    for finding in old_findings:
        old_by_key.setdefault(finding_key(finding), []).append(finding)

    introduced: list[Finding] = []
    unchanged: list[Finding] = []
    for finding in new_findings:
        bucket = old_by_key.get(finding_key(finding))
        if bucket:
            bucket.pop(0)
            unchanged.append(finding)
        else:
            introduced.append(finding)

    removed = [f for bucket in old_by_key.values() for f in bucket]
    return (
        sorted(introduced, key=Finding.sort_key),
        sorted(removed, key=Finding.sort_key),
        sorted(unchanged, key=Finding.sort_key),
    )


@dataclass
class DiffResult:
    """Result of comparing two scans of different skill versions."""

    old_scan: ScanResult
    new_scan: ScanResult
    new_findings: list[Finding] = field(default_factory=list)
    removed_findings: list[Finding] = field(default_factory=list)
    unchanged_findings: list[Finding] = field(default_factory=list)

    @property
    def old_status(self) -> ScanStatus:
        return self.old_scan.status

    @property
    def new_status(self) -> ScanStatus:
        return self.new_scan.status

    @property
    def status_changed(self) -> bool:
        return self.old_status != self.new_status

    def to_report(self) -> DiffReport:
        return DiffReport(
            old_status=self.old_status,
            new_status=self.new_status,
            status_changed=self.status_changed,
            new_findings=self.new_findings,
            removed_findings=self.removed_findings,
            unchanged_count=len(self.unchanged_findings),
        )


class DiffReport(BaseModel):
    """Serializable view of a :class:`DiffResult`."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    old_status: ScanStatus
    new_status: ScanStatus
    status_changed: bool
    new_findings: list[Finding]
    removed_findings: list[Finding]
    unchanged_count: int


def diff_results(old: ScanResult, new: ScanResult) -> DiffResult:
    new_f, removed_f, unchanged_f = diff_findings(old.findings, new.findings)
    return DiffResult(
        old_scan=old,
        new_scan=new,
        new_findings=new_f,
        removed_findings=removed_f,
        unchanged_findings=unchanged_f,
    )

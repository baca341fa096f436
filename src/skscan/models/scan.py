# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Scan result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from skscan.core.constants import Category, ScanStatus
from skscan.models.finding import Finding

_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ScanSummary(BaseModel):
    model_config = _MODEL_CONFIG

    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class CategoryStatuses(BaseModel):
    """Pass/warn/fail status for each of the five detection categories."""

    model_config = _MODEL_CONFIG

    secrets: ScanStatus = ScanStatus.PASS
    dangerous_code: ScanStatus = ScanStatus.PASS
    prompt_override: ScanStatus = ScanStatus.PASS
    exfiltration: ScanStatus = ScanStatus.PASS
    hidden_instructions: ScanStatus = ScanStatus.PASS

    @classmethod
    def from_mapping(cls, statuses: dict[Category, ScanStatus]) -> CategoryStatuses:
        return cls(**{
            category.value.replace("-", "_"): status
            for category, status in statuses.items()
        })

    def get(self, category: Category) -> ScanStatus:
        return getattr(self, category.value.replace("-", "_"))

    def as_mapping(self) -> dict[Category, ScanStatus]:
        return {category: self.get(category) for category in Category}


class ScanResult(BaseModel):
    """Terminal artifact of one scan; safe to serialize and diff."""

    model_config = _MODEL_CONFIG

    status: ScanStatus
    summary: ScanSummary
    findings: tuple[Finding, ...] = ()
    categories: CategoryStatuses = Field(default_factory=CategoryStatuses)
    scanned_files: int = Field(default=0, ge=0)
    scan_duration: int = Field(default=0, ge=0, description="Milliseconds")
    engine_version: str

    def findings_in(self, category: Category) -> list[Finding]:
        return [f for f in self.findings if f.category == category]

    def to_json(self, *, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent, by_alias=True)

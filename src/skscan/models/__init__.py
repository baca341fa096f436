# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Domain models for skscan."""

from skscan.models.config import ScanConfig
from skscan.models.finding import Finding
from skscan.models.scan import CategoryStatuses, ScanResult, ScanSummary
from skscan.models.skill import SkillFile

__all__ = [
    "CategoryStatuses",
    "Finding",
    "ScanConfig",
    "ScanResult",
    "ScanSummary",
    "SkillFile",
]

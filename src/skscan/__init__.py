# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""skscan - static security scanner for AI agent skill packages."""

from skscan.core.constants import ENGINE_VERSION

__version__ = ENGINE_VERSION

from skscan.models.config import ScanConfig
from skscan.models.finding import Finding
from skscan.models.scan import ScanResult
from skscan.models.skill import SkillFile
from skscan.scanner.code_scanner import scan_code
from skscan.scanner.pipeline import ScanOrchestrator, scan, scan_async
from skscan.scanner.prompt_scanner import scan_prompt
from skscan.sdk import scan_path, scan_path_async

__all__ = [
    "Finding",
    "ScanConfig",
    "ScanOrchestrator",
    "ScanResult",
    "SkillFile",
    "__version__",
    "scan",
    "scan_async",
    "scan_code",
    "scan_path",
    "scan_path_async",
    "scan_prompt",
]

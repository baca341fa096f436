# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, severity buckets, and engine constants."""

from enum import StrEnum

ENGINE_VERSION = "0.1.0"


class Severity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(StrEnum):
    SECRETS = "secrets"
    DANGEROUS_CODE = "dangerous-code"
    PROMPT_OVERRIDE = "prompt-override"
    EXFILTRATION = "exfiltration"
    HIDDEN_INSTRUCTIONS = "hidden-instructions"


class ScanStatus(StrEnum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class RuleAction(StrEnum):
    OFF = "off"
    WARN = "warn"
    ERROR = "error"


SEVERITY_ORDER: dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}

STATUS_ORDER: dict[ScanStatus, int] = {
    ScanStatus.PASS: 0,
    ScanStatus.WARN: 1,
    ScanStatus.FAIL: 2,
}

# Intrinsic severities that land in the blocking bucket absent an override
BLOCKING_SEVERITIES: frozenset[Severity] = frozenset({Severity.CRITICAL, Severity.HIGH})

CODE_CATEGORIES: tuple[Category, ...] = (Category.SECRETS, Category.DANGEROUS_CODE)
PROMPT_CATEGORIES: tuple[Category, ...] = (
    Category.PROMPT_OVERRIDE,
    Category.EXFILTRATION,
    Category.HIDDEN_INSTRUCTIONS,
)

SCRIPT_EXTENSIONS: frozenset[str] = frozenset({
    ".sh", ".bash", ".zsh", ".py", ".js", ".mjs", ".cjs", ".ts", ".ps1", ".rb", ".pl",
})
PROSE_EXTENSIONS: frozenset[str] = frozenset({".md", ".markdown", ".mdx", ".txt", ".rst"})
MARKUP_EXTENSIONS: frozenset[str] = frozenset({".html", ".htm"})
CONFIG_EXTENSIONS: frozenset[str] = frozenset({
    ".json", ".yaml", ".yml", ".toml", ".env", ".cfg", ".ini",
})

SNIPPET_MAX_LENGTH = 200

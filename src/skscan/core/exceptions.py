# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for skscan."""


class SkscanError(Exception):
    """Base exception for all skscan errors."""


class ConfigurationError(SkscanError):
    """Invalid or unknown configuration supplied to a scan."""


class LoadError(SkscanError):
    """Failed to read the files of a skill package."""


class RuleEvaluationError(SkscanError):
    """A rule raised while evaluating a single file."""

    def __init__(self, rule_id: str, path: str, cause: BaseException) -> None:
        super().__init__(f"Rule {rule_id} failed to evaluate {path}: {cause}")
        self.rule_id = rule_id
        self.path = path
        self.cause = cause


class ScanCancelledError(SkscanError):
    """The caller cancelled an in-flight scan."""

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Standardized exit codes for CI/CD pipeline integrations.

Exit codes:
    0 PASS: no blocking findings (and, by default, warn-only results)
    1 FAIL: at least one blocking finding
    2 ERROR: scan could not complete (bad config, unreadable input)
"""

from __future__ import annotations

from enum import IntEnum

from skscan.core.constants import ScanStatus


class CIExitCode(IntEnum):
    """Exit codes used by skscan in CI mode."""

    PASS = 0
    FAIL = 1
    SCAN_ERROR = 2


def status_to_exit_code(
    status: ScanStatus | str,
    *,
    strict: bool = False,
    warn_exit_code: int = CIExitCode.PASS,
) -> int:
    """Convert a scan status to a process exit code.

    Args:
        status: One of pass, warn, fail.
        strict: Treat ``warn`` as a failure.
        warn_exit_code: Exit code for ``warn`` when not strict.

    Raises:
        ValueError: If the status string is not recognized.
    """
    try:
        normalized = ScanStatus(str(status).lower().strip())
    except ValueError:
        msg = f"Unknown status: {status!r}. Expected one of: {', '.join(ScanStatus)}"
        raise ValueError(msg) from None

    if normalized == ScanStatus.FAIL:
        return CIExitCode.FAIL
    if normalized == ScanStatus.WARN:
        return CIExitCode.FAIL if strict else warn_exit_code
    return CIExitCode.PASS

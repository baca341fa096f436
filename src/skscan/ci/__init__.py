# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""CI/CD integration module for skscan.

Provides exit codes and annotation formats for GitHub Actions, GitLab CI
and Azure DevOps pipelines.
"""

from skscan.ci.annotations import (
    format_azure_annotations,
    format_github_annotations,
    format_gitlab_code_quality,
    format_markdown_summary,
)
from skscan.ci.exit_codes import CIExitCode, status_to_exit_code

__all__ = [
    "CIExitCode",
    "format_azure_annotations",
    "format_github_annotations",
    "format_gitlab_code_quality",
    "format_markdown_summary",
    "status_to_exit_code",
]

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rich console output formatter for scan results."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skscan.core.constants import SEVERITY_ORDER, Category, ScanStatus, Severity
from skscan.models.scan import ScanResult

console = Console()

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

STATUS_COLORS = {
    ScanStatus.FAIL: "bold red",
    ScanStatus.WARN: "yellow",
    ScanStatus.PASS: "bold green",
}

CATEGORY_LABELS = {
    Category.SECRETS: "Secrets",
    Category.DANGEROUS_CODE: "Dangerous code",
    Category.PROMPT_OVERRIDE: "Prompt override",
    Category.EXFILTRATION: "Exfiltration",
    Category.HIDDEN_INSTRUCTIONS: "Hidden instructions",
}


def format_scan_result(result: ScanResult, target: str | None = None, out: Console | None = None) -> None:
    """Print a scan result to the console with Rich formatting."""
    out = out or console
    out.print()
    out.print(f"[bold]skscan v{result.engine_version}[/bold] - Skill package security scanner")
    if target:
        out.print(f"[dim]Target:[/dim] {target}")
    out.print()

    status_color = STATUS_COLORS[result.status]
    out.print(
        Panel(
            f"[{status_color}]STATUS: {result.status.upper()}[/{status_color}]"
            f"  ({result.summary.total} findings in {result.scanned_files} files)",
            style=status_color,
        )
    )

    categories = Table(show_header=False, box=None, padding=(0, 2))
    categories.add_column("category", style="dim")
    categories.add_column("status")
    categories.add_column("findings", style="dim")
    for category, status in result.categories.as_mapping().items():
        color = STATUS_COLORS[status]
        count = len(result.findings_in(category))
        categories.add_row(
            CATEGORY_LABELS[category],
            f"[{color}]{status}[/{color}]",
            f"{count} finding{'' if count == 1 else 's'}" if count else "",
        )
    out.print(categories)
    out.print()

    if result.findings:
        ordered = sorted(
            result.findings,
            key=lambda f: (SEVERITY_ORDER[f.severity], f.sort_key()),
        )
        for finding in ordered:
            sev_label = Text(finding.severity.upper().ljust(9), style=SEVERITY_COLORS[finding.severity])
            out.print(sev_label, end="")
            marker = "" if finding.blocking else " [dim](non-blocking)[/dim]"
            out.print(f"  [bold]{finding.rule_id}[/bold]{marker}  {finding.message}")
            location = f"{finding.file}:{finding.line}"
            if finding.column:
                location += f":{finding.column}"
            out.print(f"          {location}", style="dim", highlight=False)
            if finding.snippet:
                out.print(Text(f"          {finding.snippet[:120]}", style="dim italic"))
            out.print()
    else:
        out.print("  No issues found.", style="bold green")
        out.print()

    parts = [
        f"{count} {name}"
        for name, count in (
            ("critical", result.summary.critical),
            ("high", result.summary.high),
            ("medium", result.summary.medium),
            ("low", result.summary.low),
        )
        if count
    ]
    out.print(f"  Summary: {result.summary.total} findings ({', '.join(parts) or 'none'})")
    out.print(f"  Duration: {result.scan_duration / 1000:.2f}s")
    out.print()

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""CLI command for diff scanning: compare two versions of a skill package."""

from __future__ import annotations

import sys
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from skscan.core.exceptions import SkscanError
from skscan.scanner.diff import DiffResult


class DiffFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


def _format_text(result: DiffResult) -> str:
    """Render a human-readable diff report."""
    lines: list[str] = []

    lines.append("skscan diff report")
    lines.append("=" * 60)
    lines.append("")

    if result.status_changed:
        lines.append(f"Status: {result.old_status} -> {result.new_status}")
    else:
        lines.append(f"Status: {result.new_status} (unchanged)")
    lines.append(
        f"Old findings: {result.old_scan.summary.total}  |  "
        f"New findings: {result.new_scan.summary.total}"
    )
    lines.append("")

    if result.new_findings:
        lines.append(f"[+] NEW FINDINGS ({len(result.new_findings)}):")
        lines.append("-" * 40)
        for f in result.new_findings:
            lines.append(f"  + {f.rule_id}  [{f.severity}]  {f.file}:{f.line}  {f.message}")
            if f.snippet:
                lines.append(f"    snippet: {f.snippet}")
        lines.append("")

    if result.removed_findings:
        lines.append(f"[-] REMOVED FINDINGS ({len(result.removed_findings)}):")
        lines.append("-" * 40)
        for f in result.removed_findings:
            lines.append(f"  - {f.rule_id}  [{f.severity}]  {f.file}:{f.line}  {f.message}")
        lines.append("")

    lines.append("Summary:")
    lines.append(f"  New:       {len(result.new_findings)}")
    lines.append(f"  Removed:   {len(result.removed_findings)}")
    lines.append(f"  Unchanged: {len(result.unchanged_findings)}")

    return "\n".join(lines)


def _format_json(result: DiffResult) -> str:
    return result.to_report().model_dump_json(indent=2, by_alias=True)


def diff_command(
    old_path: Annotated[
        Path, typer.Argument(help="Baseline skill directory or file")
    ],
    new_path: Annotated[
        Path, typer.Argument(help="Updated skill directory or file")
    ],
    fmt: Annotated[
        DiffFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = DiffFormat.TEXT,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file applied to both scans"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
) -> None:
    """Compare two versions of a skill and flag newly introduced findings."""
    from skscan.loader.config_file import load_config
    from skscan.scanner.diff import diff_results
    from skscan.sdk import scan_path

    for label, path in (("Old", old_path), ("New", new_path)):
        if not path.exists():
            typer.echo(f"{label} path not found: {path}", err=True)
            raise typer.Exit(2)

    try:
        old_scan = scan_path(old_path, load_config(old_path, config))
        new_scan = scan_path(new_path, load_config(new_path, config))
    except SkscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc

    result = diff_results(old_scan, new_scan)
    text = _format_json(result) if fmt == DiffFormat.JSON else _format_text(result)

    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Output written to {output}", err=True)
    else:
        sys.stdout.write(text + "\n")

    # Exit 1 only when the update introduces blocking findings
    raise typer.Exit(1 if any(f.blocking for f in result.new_findings) else 0)

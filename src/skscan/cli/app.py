# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

import os
import sys
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from skscan.cli.commands.diff import diff_command
from skscan.core.config import get_settings
from skscan.core.constants import Category
from skscan.core.exceptions import SkscanError
from skscan.core.logging import setup_logging
from skscan.models.scan import ScanResult

app = typer.Typer(
    name="skscan",
    help="Static security scanner for AI agent skill packages",
    no_args_is_help=True,
)

app.command(name="diff")(diff_command)


class OutputFormat(StrEnum):
    CONSOLE = "console"
    JSON = "json"
    JSON_SUMMARY = "json-summary"
    SARIF = "sarif"
    GITLAB_CODEQUALITY = "gitlab-codequality"
    AZURE_ANNOTATIONS = "azure-annotations"


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log scan progress to stderr")
    ] = False,
    log_format: Annotated[
        str | None, typer.Option("--log-format", help="Log format: text | json")
    ] = None,
) -> None:
    """Scan skill packages for secrets, dangerous code and prompt attacks."""
    settings = get_settings()
    setup_logging("INFO" if verbose else settings.log_level, log_format or settings.log_format)


def _run(target: str, config_path: Path | None, ignore_rules: str | None) -> ScanResult:
    """Load config and files, then scan. Exits with code 2 on any input error."""
    from skscan.loader.config_file import load_config, merge_cli_flags
    from skscan.loader.files import discover_files
    from skscan.scanner.pipeline import ScanOrchestrator

    try:
        config = merge_cli_flags(load_config(target, config_path), ignore_rules)
        files = discover_files(target, config.ignore)
        if not files:
            typer.echo("No scannable files found.", err=True)
            raise typer.Exit(2)
        return ScanOrchestrator(get_settings()).scan(files, config)
    except SkscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Output written to {output}", err=True)
    else:
        sys.stdout.write(text + "\n")


def _output_result(result: ScanResult, fmt: OutputFormat, output: Path | None, target: str) -> None:
    if fmt == OutputFormat.CONSOLE:
        from skscan.cli.formatters.console import format_scan_result
        format_scan_result(result, target=target)
    elif fmt == OutputFormat.JSON:
        from skscan.cli.formatters.json_fmt import format_json
        _write_output(format_json(result), output)
    elif fmt == OutputFormat.JSON_SUMMARY:
        from skscan.cli.formatters.json_fmt import format_json_summary
        _write_output(format_json_summary(result), output)
    elif fmt == OutputFormat.SARIF:
        from skscan.cli.formatters.sarif import format_sarif
        _write_output(format_sarif(result), output)
    elif fmt == OutputFormat.GITLAB_CODEQUALITY:
        from skscan.ci.annotations import format_gitlab_code_quality
        _write_output(format_gitlab_code_quality(result), output)
    elif fmt == OutputFormat.AZURE_ANNOTATIONS:
        from skscan.ci.annotations import format_azure_annotations
        _write_output(format_azure_annotations(result), output)


@app.command()
def scan(
    target: Annotated[
        str, typer.Argument(help="Skill directory or single file to scan")
    ] = ".",
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.CONSOLE,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
    strict: Annotated[
        bool, typer.Option("--strict", "-s", help="Exit 1 on any finding, not just blocking ones")
    ] = False,
    ignore: Annotated[
        str | None,
        typer.Option("--ignore", help="Comma-separated rule IDs to turn off"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config file"),
    ] = None,
    badge: Annotated[
        bool, typer.Option("--badge", help="Output an SVG status badge instead of a report")
    ] = False,
) -> None:
    """Scan a skill package and report findings by category."""
    from skscan.ci.exit_codes import status_to_exit_code

    result = _run(target, config, ignore)

    if badge:
        from skscan.cli.formatters.badge import format_badge
        _write_output(format_badge(result.status), output)
        raise typer.Exit(0)

    _output_result(result, fmt, output, target)
    raise typer.Exit(
        status_to_exit_code(result.status, strict=strict, warn_exit_code=get_settings().warn_exit_code)
    )


@app.command()
def ci(
    target: Annotated[
        str, typer.Argument(help="Skill directory or single file to scan")
    ] = ".",
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config file"),
    ] = None,
) -> None:
    """CI mode: JSON output, GitHub Actions annotations, strict exit codes."""
    from skscan.ci.annotations import format_github_annotations, format_markdown_summary
    from skscan.ci.exit_codes import status_to_exit_code
    from skscan.cli.formatters.json_fmt import format_json

    result = _run(target, config, None)
    _write_output(format_json(result), None)

    if os.environ.get("GITHUB_ACTIONS") and result.findings:
        _write_output(format_github_annotations(result), None)

    summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
    if summary_path:
        with open(summary_path, "a", encoding="utf-8") as fh:
            fh.write(format_markdown_summary(result))

    raise typer.Exit(status_to_exit_code(result.status, strict=True))


@app.command(name="rules")
def list_rules(
    category: Annotated[
        Category | None,
        typer.Option("--category", help="Only show rules in this category"),
    ] = None,
) -> None:
    """List the rule catalogue."""
    from rich.console import Console
    from rich.table import Table

    # Importing the pipeline registers every rule
    import skscan.scanner.pipeline  # noqa: F401
    from skscan.detectors.rule_engine.registry import RuleRegistry

    rules = RuleRegistry.get_by_category(category) if category else RuleRegistry.get_all()

    table = Table(title=f"skscan rules ({len(rules)})")
    table.add_column("Rule ID", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Severity", style="red")
    table.add_column("Description")
    for rule_class in rules:
        table.add_row(
            rule_class.rule_id,
            str(rule_class.category),
            str(rule_class.severity),
            rule_class.description,
        )
    Console().print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from skscan import __version__

    typer.echo(f"skscan v{__version__}")

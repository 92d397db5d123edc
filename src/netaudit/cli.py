"""CLI entrypoint, Typer-based command interface.

Commands:
    netaudit scan            Scan configuration files
    netaudit vendors         List supported vendor dialects
    netaudit helpers         List helper functions available to JSON rules
    netaudit validate-rules  Validate and compile rule files without scanning
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer

from netaudit.config import Settings, get_settings
from netaudit.errors import UnknownVendorError
from netaudit.log_config import configure_logging
from netaudit.models import Outcome, Rule, RuleResult
from netaudit.parser.vendors import VENDOR_SCHEMAS, available_vendors
from netaudit.rules.builtin.library import default_rules
from netaudit.rules.loader import load_rule_files
from netaudit.rules.registry import default_registry
from netaudit.scanner import ScanReport, scan_files

app = typer.Typer(
    name="netaudit",
    help="Vendor-agnostic compliance scanner for network device configurations",
)

EXIT_FINDINGS = 1
EXIT_USAGE = 2


def _settings() -> Settings:
    settings = get_settings()
    configure_logging(log_level=settings.log_level, log_format=settings.log_format)
    return settings


def _result_dict(result: RuleResult) -> dict[str, Any]:
    return {
        "outcome": result.outcome.value,
        "level": result.level.value,
        "rule_id": result.rule_id,
        "node_id": result.node_id,
        "message": result.message,
        "start_line": result.loc.start_line if result.loc else None,
        "end_line": result.loc.end_line if result.loc else None,
        "remediation": result.remediation,
    }


def _report_dict(report: ScanReport, show_passed: bool) -> dict[str, Any]:
    summary = report.summary
    return {
        "path": report.path,
        "vendor": report.vendor,
        "error": report.error,
        "summary": {
            "passed": summary.passed,
            "failed": summary.failed,
            "not_applicable": summary.not_applicable,
            "failures_by_level": summary.failures_by_level,
        },
        "results": [
            _result_dict(result)
            for result in report.results
            if show_passed or result.outcome is Outcome.FAIL
        ],
    }


def _echo_report(report: ScanReport, show_passed: bool) -> None:
    typer.echo(f"{report.path}  (vendor: {report.vendor or 'none'})")
    if report.error is not None:
        typer.echo(f"  ERROR  {report.error}")
        return
    for result in report.results:
        if result.outcome is not Outcome.FAIL and not show_passed:
            continue
        line = result.loc.start_line if result.loc else "-"
        label = "FAIL" if result.outcome is Outcome.FAIL else result.outcome.value.upper()
        typer.echo(f"  {label:<14} {result.level.value:<7} {result.rule_id:<16} line {line}: {result.message}")
    summary = report.summary
    typer.echo(
        f"  passed={summary.passed} failed={summary.failed} not_applicable={summary.not_applicable}"
    )


async def _collect_rules(rule_files: list[Path], include_builtin: bool) -> list[Rule]:
    rules = default_rules() if include_builtin else []
    loaded, errors = await load_rule_files(rule_files, existing_ids=[rule.id for rule in rules])
    if errors:
        for error in errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=EXIT_USAGE)
    return rules + loaded


@app.command()
def scan(
    paths: list[Path] = typer.Argument(help="Configuration files to scan"),
    vendor: str | None = typer.Option(None, help="Vendor id (defaults to NETAUDIT_DEFAULT_VENDOR)"),
    rules: list[Path] | None = typer.Option(None, "--rules", help="Additional JSON/YAML rule file"),
    no_builtin: bool = typer.Option(False, "--no-builtin", help="Skip the built-in rule library"),
    output_format: str = typer.Option("text", "--format", help="Output format: text or json"),
    show_passed: bool = typer.Option(False, "--show-passed", help="Also print passing and not-applicable results"),
) -> None:
    """Scan configuration files and report compliance findings.

    Exits 1 when any file fails to scan or any error-level check fails.
    """
    if output_format not in ("text", "json"):
        typer.echo("Error: --format must be 'text' or 'json'", err=True)
        raise typer.Exit(code=EXIT_USAGE)

    settings = _settings()
    vendor_id = vendor or settings.default_vendor
    if vendor_id.strip().lower() not in VENDOR_SCHEMAS:
        typer.echo(f"Error: {UnknownVendorError(vendor_id)}", err=True)
        raise typer.Exit(code=EXIT_USAGE)

    async def _run() -> list[ScanReport]:
        rule_files = [Path(p) for p in settings.rule_paths] + list(rules or [])
        include_builtin = settings.include_builtin_rules and not no_builtin
        active_rules = await _collect_rules(rule_files, include_builtin)
        return await scan_files(
            paths,
            vendor_id,
            active_rules,
            max_parallel=settings.max_parallel_scans,
            max_config_bytes=settings.max_config_bytes,
            max_nesting_depth=settings.max_nesting_depth,
        )

    reports = asyncio.run(_run())

    if output_format == "json":
        typer.echo(json.dumps([_report_dict(report, show_passed) for report in reports], indent=2))
    else:
        for report in reports:
            _echo_report(report, show_passed)

    if any(report.has_errors for report in reports):
        raise typer.Exit(code=EXIT_FINDINGS)


@app.command()
def vendors() -> None:
    """List supported vendor dialects."""
    for vendor_id in available_vendors():
        schema = VENDOR_SCHEMAS[vendor_id]
        typer.echo(f"{vendor_id:<16} {schema.scope_style.value:<8} {schema.name}")


@app.command()
def helpers(
    namespace: str | None = typer.Option(None, help="Only list helpers of this namespace (or 'common')"),
) -> None:
    """List helper functions available to JSON rules."""
    for name in default_registry().names():
        prefix = name.partition(".")[0] if "." in name else "common"
        if namespace is None or prefix == namespace:
            typer.echo(name)


@app.command("validate-rules")
def validate_rules(
    files: list[Path] = typer.Argument(help="Rule files to validate"),
) -> None:
    """Validate and compile rule files without scanning anything."""
    _settings()

    async def _run() -> None:
        loaded, errors = await load_rule_files(files)
        for error in errors:
            typer.echo(f"INVALID  {error}", err=True)
        typer.echo(f"{len(loaded)} rule(s) valid, {len(errors)} file(s) rejected")
        if errors:
            raise typer.Exit(code=EXIT_FINDINGS)

    asyncio.run(_run())


if __name__ == "__main__":
    app()

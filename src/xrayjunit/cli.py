"""Command line entry point: Newman JSON summary in, JUnit XML with Xray keys out."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ReporterConfig, load_config
from .config_validator import validate_config
from .junit_reporter import JUnitReport, build_junit_report, save_junit_xml
from .loader import SummaryLoadError, load_run_summary

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xray-junit",
        description="Convert a Newman run summary into a JUnit XML report with Xray test keys.",
    )
    parser.add_argument("summary", type=Path, help="Newman JSON reporter output")
    parser.add_argument(
        "--collection", type=Path, help="Collection export to resolve folders and scripts from"
    )
    parser.add_argument("--config", type=Path, help="YAML or TOML file with reporter options")
    parser.add_argument("--export", help="Report file or directory")
    parser.add_argument(
        "--exclude-request", help="Comma-separated request names to leave out of the report"
    )
    parser.add_argument(
        "--hide-sensitive-data",
        action="store_true",
        default=None,
        help="Drop user, token and password variables from suite properties",
    )
    parser.add_argument(
        "--aggregate",
        action="store_true",
        default=None,
        help="Write total failures and errors on the testsuites element",
    )
    parser.add_argument("--separator", help="Token joining folder names (default: ->)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> ReporterConfig:
    """Combine the config file (if any) with command line overrides.

    Raises:
        ValueError: If the config file is invalid.
        pydantic.ValidationError: If an option has the wrong type.
    """
    overrides = {
        "exclude_request": args.exclude_request,
        "hide_sensitive_data": args.hide_sensitive_data,
        "aggregate": args.aggregate,
        "export": args.export,
        "separator": args.separator,
    }
    if args.config is None:
        return ReporterConfig.model_validate(
            {key: value for key, value in overrides.items() if value is not None}
        )

    result = validate_config(args.config)
    for warning in result.warnings:
        hint = f" ({warning.suggestion})" if warning.suggestion else ""
        message = escape(f"{warning.field}: {warning.error}{hint}")
        console.print(f"[yellow]Warning: {message}[/yellow]")
    if result.has_errors:
        details = "; ".join(f"{e.field}: {e.error}" for e in result.errors)
        raise ValueError(f"Invalid configuration {args.config}: {details}")
    return load_config(args.config, **overrides)


def print_report_summary(report: JUnitReport) -> None:
    """Print per-suite counts in a table."""
    stats = report.statistics
    table = Table(title="JUnit Report", show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Suite", style="bold")
    table.add_column("Tests", justify="right")
    table.add_column("Failures", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Time (s)", justify="right")

    for suite in stats.per_suite:
        failures = f"[red]{suite.failures}[/red]" if suite.failures else "0"
        errors = f"[red]{suite.errors}[/red]" if suite.errors else "0"
        table.add_row(
            str(suite.id),
            escape(suite.name),
            str(suite.tests),
            failures,
            errors,
            f"{suite.time:.3f}",
        )

    console.print(table)
    style = "red" if stats.has_failures else "green"
    console.print(
        f"[{style}]{stats.suites} suites, {stats.tests} tests, "
        f"{stats.failures} failures, {stats.errors} errors[/{style}]"
        + (f" [dim]({stats.excluded} excluded)[/dim]" if stats.excluded else "")
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = resolve_config(args)
    except (ValueError, ValidationError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    try:
        summary = load_run_summary(args.summary, args.collection)
    except SummaryLoadError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    report = build_junit_report(summary, config)
    if report is None:
        console.print("[yellow]No executions in run summary; no report written.[/yellow]")
        return 0

    export_path = config.resolve_export_path()
    console.print(f"[dim]Export path resolved: {export_path}[/dim]")
    save_junit_xml(report, export_path)
    print_report_summary(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())

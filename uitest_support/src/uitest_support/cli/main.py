"""CLI application for uitest-support."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from uitest_support.core.config import Config
from uitest_support.core.exceptions import UITestSupportError
from uitest_support.reporting.aggregator import RunMetricsAggregator
from uitest_support.reporting.coverage import CRITICAL_MARKERS, FEATURE_MARKERS
from uitest_support.reporting.models import RunConfig, RunReport, TestOutcome
from uitest_support.reporting.storage import ReportWriter

app = typer.Typer(
    name="uitest-support",
    help="uitest-support - UI test run metrics and reporting",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def configure_logging() -> None:
    """Apply the configured log level."""
    logging.basicConfig(
        level=Config.from_env().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_outcomes(path: Path) -> list[TestOutcome]:
    """Read one JSON outcome per line, skipping blank lines.

    Raises:
        typer.Exit: If the file is missing or a line is malformed
    """
    if not path.exists():
        console.print(f"[red]Error:[/red] Outcome file not found: {path}")
        raise typer.Exit(1)

    outcomes = []
    with open(path) as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                outcomes.append(TestOutcome.from_dict(json.loads(line)))
            except (json.JSONDecodeError, UITestSupportError, TypeError, ValueError) as e:
                console.print(f"[red]Error:[/red] line {line_no}: {e}")
                raise typer.Exit(1)
    return outcomes


def print_report(report: RunReport) -> None:
    """Print a run report as a table."""
    table = Table(title="Run Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Total tests", str(report.total_tests))
    table.add_row("Passed", f"[green]{report.passed}[/green]")
    table.add_row("Failed", f"[red]{report.failed}[/red]")
    table.add_row("Skipped", str(report.skipped))
    table.add_row("Flaky", f"[yellow]{report.flaky}[/yellow]")
    table.add_row("Pass rate", f"{report.pass_rate}%")
    table.add_row("Avg duration", f"{report.avg_test_duration:.0f}ms")
    if report.slowest_test:
        table.add_row(
            "Slowest", f"{report.slowest_test.name} ({report.slowest_test.duration:.0f}ms)"
        )
    if report.fastest_test:
        table.add_row(
            "Fastest", f"{report.fastest_test.name} ({report.fastest_test.duration:.0f}ms)"
        )
    table.add_row("Features", f"{report.feature_coverage} ({', '.join(report.feature_tags)})")
    table.add_row("Critical paths", f"{report.critical_path_coverage}%")
    table.add_row("Cross-platform", str(report.cross_platform_coverage))
    table.add_row("Timeouts", str(report.timeouts))
    table.add_row("Retries", str(report.retries))

    console.print(table)


@app.command("report")
def build_report(
    outcomes_file: Path = typer.Argument(..., help="JSON-lines file, one test outcome per line"),
    workers: int = typer.Option(1, "--workers", "-w", help="Parallel worker count"),
    project: Optional[List[str]] = typer.Option(None, "--project", "-p", help="Project name (repeatable)"),
    engine: Optional[List[str]] = typer.Option(None, "--engine", "-e", help="Browser engine (repeatable)"),
    save: bool = typer.Option(False, "--save", help="Save the report as a JSON artifact"),
    output_dir: str = typer.Option("", "--output-dir", "-o", help="Report directory (default: UITEST_REPORT_DIR)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Aggregate test outcomes into a run report."""
    outcomes = load_outcomes(outcomes_file)

    aggregator = RunMetricsAggregator()
    try:
        aggregator.on_run_start(
            RunConfig(worker_count=workers, projects=project or (), engines=engine or ())
        )
        for outcome in outcomes:
            aggregator.on_test_end(outcome)
        report = aggregator.on_run_end()
    except UITestSupportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        print_report(report)

    if save:
        writer = ReportWriter(output_dir or Config.from_env().report_dir)
        try:
            path = writer.save(report)
        except UITestSupportError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        if not json_output:
            console.print(f"\n[green]Saved:[/green] {path}")


@app.command("info")
def show_info() -> None:
    """Show coverage markers and configuration."""
    table = Table(title="Coverage Heuristics")
    table.add_column("Metric", style="cyan")
    table.add_column("Markers", style="green")

    table.add_row("features", ", ".join(FEATURE_MARKERS))
    table.add_row("critical paths", ", ".join(CRITICAL_MARKERS))

    console.print(table)

    console.print("\n[yellow]Environment Variables:[/yellow]")
    console.print("  UITEST_RESOLVE_TIMEOUT   Element resolution budget in seconds (default: 10)")
    console.print("  UITEST_REPORT_DIR        Report directory (default: dashboard-data)")
    console.print("  UITEST_LOG_LEVEL         Log level (default: INFO)")


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from uitest_support import __version__
    console.print(f"uitest-support v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()

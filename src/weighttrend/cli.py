"""CLI interface using Typer."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from weighttrend.config.settings import Settings, default_config_path
from weighttrend.response import (
    CommandResponse,
    analysis_response,
    error_response,
    settings_response,
)
from weighttrend.tracking.classify import format_trend_report
from weighttrend.tracking.models import SampleFileError

app = typer.Typer(
    help="Weight trend estimation with a Kalman filter",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the configuration file")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: CommandResponse) -> None:
    """Print a JSON response to stdout."""
    print(response.to_json())


def configure_logging(verbose: bool) -> None:
    """Route library debug logging through Rich when --verbose is set."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> NoReturn:
    """Report an error and exit with status 1."""
    if json_output:
        output_json(error_response(command, message, suggestions))
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _format_ts(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


# ============================================================================
# Commands
# ============================================================================


@app.command()
def analyze(
    path: Path = typer.Argument(..., help="CSV file with timestamp (or date) and weight columns"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    unit: Optional[str] = typer.Option(None, "--unit", "-u", help="Unit label for output"),
    window: Optional[float] = typer.Option(
        None, "--window", "-w", help="Projection window in days"
    ),
    interpolate: Optional[int] = typer.Option(
        None, "--interpolate", help="Points to insert between samples in the series output"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Estimate the weight trend from a sample file."""
    from weighttrend.data.sample_loader import SampleLoader
    from weighttrend.tracking.analysis import analyze_weight_trend
    from weighttrend.tracking.projection import interpolate_for_display

    configure_logging(verbose)

    try:
        settings = Settings.load(config)
    except (ValueError, yaml.YAMLError) as e:
        _fail("analyze", f"Invalid configuration: {e}", json_output)

    json_output = json_output or settings.display.output_format == "json"
    if window is not None:
        settings.projection.window_days = max(0.0, window)
    unit_label = unit or settings.display.unit
    points_per_gap = settings.projection.points_per_gap if interpolate is None else interpolate
    if points_per_gap < 0:
        _fail("analyze", "--interpolate must be non-negative", json_output)

    try:
        report = SampleLoader().load_from_csv(path)
    except SampleFileError as e:
        _fail(
            "analyze",
            str(e),
            json_output,
            suggestions=["Expected a CSV with 'timestamp' (or 'date') and 'weight' columns"],
        )

    result = analyze_weight_trend(report.samples, settings)
    threshold = settings.display.stable_threshold
    skipped = report.skipped_missing + report.skipped_invalid

    if result is None:
        if json_output:
            output_json(analysis_response(None, skipped_rows=skipped))
        else:
            console.print("[yellow]No weight samples found - not enough data for a trend.[/yellow]")
        return

    if json_output:
        display_series = interpolate_for_display(result.historical_series, points_per_gap)
        output_json(
            analysis_response(
                result,
                display_series=display_series,
                skipped_rows=skipped,
                unit=unit_label,
                threshold=threshold,
            )
        )
        return

    console.print(Panel(format_trend_report(result, unit_label, threshold), title="weighttrend"))

    table = Table(title="Filtered History")
    table.add_column("Date", style="cyan")
    table.add_column("Trend", justify="right", style="blue")
    for point in result.historical_series[-10:]:
        table.add_row(_format_ts(point.timestamp), f"{point.estimate:.1f}")
    console.print(table)

    if result.future_series:
        end = result.future_series[-1]
        console.print(
            f"[green]Projected:[/green] {end.estimate:.1f} {unit_label} on {_format_ts(end.timestamp)}"
        )

    if skipped:
        console.print(f"[yellow]Skipped {skipped} unusable rows[/yellow]")


@config_app.command("show")
def config_show(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show effective settings."""
    try:
        settings = Settings.load(config)
    except (ValueError, yaml.YAMLError) as e:
        _fail("config show", f"Invalid configuration: {e}", json_output)

    if json_output or settings.display.output_format == "json":
        output_json(settings_response(settings))
        return

    table = Table(title="Settings")
    table.add_column("Section", style="cyan")
    table.add_column("Key")
    table.add_column("Value", justify="right")
    for section, values in settings.to_dict().items():
        for key, value in values.items():
            table.add_row(section, key, str(value))
    console.print(table)


@config_app.command("init")
def config_init(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Where to write config.yaml"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a config file with default settings."""
    target = config or default_config_path()
    if target.exists() and not force:
        console.print(f"[red]{target} already exists.[/red] Use --force to overwrite.")
        raise typer.Exit(1)

    written = Settings().save(target)
    console.print(f"[green]Wrote default settings to[/green] {written}")


if __name__ == "__main__":
    app()

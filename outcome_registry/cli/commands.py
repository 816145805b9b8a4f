"""CLI commands for the outcome registry."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from outcome_registry.config import get_settings

app = typer.Typer(
    name="outcome-registry",
    help="Outcome registry analytics for clinical leadership dashboards",
    add_completion=False,
)
console = Console()


def _load_snapshot(path: Path):
    """Read a JSON snapshot file into a RawSnapshot."""
    from outcome_registry.analytics import RawSnapshot

    if not path.exists():
        console.print(f"[red]Snapshot file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return RawSnapshot.model_validate(json.loads(path.read_text()))
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Invalid snapshot file {path}: {e}[/red]")
        raise typer.Exit(1)


def _parse_as_of(value: Optional[str]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid --as-of timestamp: {value}[/red]")
        raise typer.Exit(1)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _build_filters(
    window: Optional[str],
    domain: Optional[str],
    body_region: Optional[str],
    clinician: Optional[str],
    include_overrides: Optional[bool],
):
    from outcome_registry.models.filters import Filters, TimeWindow

    settings = get_settings()
    try:
        time_window = TimeWindow(window or settings.default_time_window)
    except ValueError:
        console.print(f"[red]Invalid window: {window}. Use 30d, 90d, 12mo or all[/red]")
        raise typer.Exit(1)

    return Filters(
        time_window=time_window,
        domain=domain,
        body_region=body_region,
        clinician_id=clinician,
        include_overrides=(
            settings.default_include_overrides if include_overrides is None else include_overrides
        ),
    )


WindowOption = typer.Option(None, "--window", "-w", help="Time window: 30d, 90d, 12mo, all")
DomainOption = typer.Option(None, "--domain", help="Clinical domain filter")
RegionOption = typer.Option(None, "--body-region", help="Body region filter")
ClinicianOption = typer.Option(None, "--clinician", help="Clinician id filter")
OverridesOption = typer.Option(
    None, "--include-overrides/--exclude-overrides", help="Count override-flagged care targets in outcome metrics"
)
AsOfOption = typer.Option(None, "--as-of", help="Reference timestamp (ISO 8601, default now UTC)")


@app.command()
def dashboard(
    snapshot: Path = typer.Argument(..., help="JSON file with episodes, care_targets and scores"),
    window: Optional[str] = WindowOption,
    domain: Optional[str] = DomainOption,
    body_region: Optional[str] = RegionOption,
    clinician: Optional[str] = ClinicianOption,
    include_overrides: Optional[bool] = OverridesOption,
    as_of: Optional[str] = AsOfOption,
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Compute leadership dashboard metrics for a snapshot."""
    from outcome_registry.analytics import compute_dashboard_from_snapshot
    from outcome_registry.observability import DiagnosticsRecorder

    raw = _load_snapshot(snapshot)
    filters = _build_filters(window, domain, body_region, clinician, include_overrides)
    recorder = DiagnosticsRecorder(log_dir=get_settings().diagnostics_log_dir)

    analytics = compute_dashboard_from_snapshot(
        raw,
        filters,
        _parse_as_of(as_of),
        recorder=recorder,
        top_reasons=get_settings().registry_top_reasons,
    )

    if output_json:
        console.print_json(analytics.model_dump_json(by_alias=False))
    else:
        _display_dashboard(analytics)


def _fmt(value: Optional[float], suffix: str = "") -> str:
    return "N/A" if value is None else f"{value:.1f}{suffix}"


def _display_dashboard(analytics):
    """Display dashboard metrics in rich format."""
    from outcome_registry.analytics import integrity_band

    volume = analytics.volume
    console.print(
        Panel(
            f"[bold]Episodes opened:[/bold] {volume.episodes_opened}\n"
            f"[bold]Episodes closed:[/bold] {volume.episodes_closed}\n"
            f"[bold]Care targets:[/bold] {volume.care_targets_created}\n"
            f"[bold]Care targets discharged:[/bold] {volume.care_targets_discharged}",
            title=f"Volume (as of {analytics.as_of:%Y-%m-%d}, window {analytics.filters.time_window.value})",
        )
    )

    resolution = analytics.resolution
    if resolution.discharge_rate_by_domain:
        table = Table(title=f"Discharged by Domain ({resolution.total_discharged} total)")
        table.add_column("Domain")
        table.add_column("Discharged")
        table.add_column("Total")
        table.add_column("Rate")
        for domain, rate in resolution.discharge_rate_by_domain.items():
            table.add_row(domain, str(rate.discharged), str(rate.total), _fmt(rate.rate, "%"))
        console.print(table)

    time_metrics = analytics.time
    console.print(
        Panel(
            f"[bold]Median days:[/bold] {_fmt(time_metrics.median_days_to_resolution)}\n"
            f"[bold]25th-75th percentile:[/bold] {_fmt(time_metrics.percentile_25)} - "
            f"{_fmt(time_metrics.percentile_75)}\n"
            f"[bold]Discharged care targets:[/bold] {time_metrics.count}",
            title="Time to Resolution",
        )
    )

    outcomes = analytics.outcomes
    table = Table(
        title=f"Outcomes (improved {_fmt(outcomes.improved_percentage, '%')}, "
        f"MCID {_fmt(outcomes.mcid_percentage, '%')})"
    )
    table.add_column("Instrument")
    table.add_column("Improved")
    table.add_column("Worsened")
    table.add_column("Unchanged")
    table.add_column("Incomplete")
    table.add_column("Median delta (n)")
    for code, series in outcomes.by_instrument.items():
        table.add_row(
            code,
            str(series.improved),
            str(series.worsened),
            str(series.unchanged),
            str(series.incomplete),
            f"{_fmt(series.median_delta)} ({series.n})",
        )
    console.print(table)
    console.print(f"[dim]{outcomes.mcid_disclaimer}[/dim]")

    complexity = analytics.complexity
    console.print(
        Panel(
            f"[bold]Multi-target episodes:[/bold] {complexity.multi_target_episode_count} "
            f"({_fmt(complexity.multi_target_percentage, '%')})\n"
            f"[bold]Care targets per episode:[/bold] {complexity.average_care_targets_per_episode:.2f}\n"
            f"[bold]Staggered resolution:[/bold] {complexity.staggered_resolution_count} "
            f"({_fmt(complexity.staggered_resolution_percentage, '%')})",
            title="Complexity",
        )
    )

    integrity = analytics.integrity
    band = integrity_band(integrity.complete_symmetry_percentage)
    color = {"good": "green", "warning": "yellow"}.get(band, "red")
    console.print(
        Panel(
            f"[bold]Complete symmetry:[/bold] {integrity.complete_symmetry_count} of "
            f"{integrity.total_care_targets} ({_fmt(integrity.complete_symmetry_percentage, '%')})\n"
            f"[bold]Overrides:[/bold] {integrity.override_count}\n"
            f"[bold]Missing by instrument:[/bold] "
            f"{', '.join(f'{k}: {v}' for k, v in integrity.missingness_by_instrument.items()) or 'none'}",
            title="Integrity",
            border_style=color,
        )
    )

    if analytics.rejected_records:
        console.print(f"[yellow]{analytics.rejected_records} malformed records excluded[/yellow]")


@app.command()
def export(
    snapshot: Path = typer.Argument(..., help="JSON file with episodes, care_targets and scores"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="CSV file (default: generated name in the current directory)"
    ),
    window: Optional[str] = WindowOption,
    domain: Optional[str] = DomainOption,
    body_region: Optional[str] = RegionOption,
    clinician: Optional[str] = ClinicianOption,
    include_overrides: Optional[bool] = OverridesOption,
    as_of: Optional[str] = AsOfOption,
    year: Optional[int] = typer.Option(None, "--year", help="Episode start year"),
    quarter: Optional[int] = typer.Option(None, "--quarter", min=1, max=4, help="Episode start quarter"),
    instrument: Optional[str] = typer.Option(None, "--instrument", help="Instrument code"),
    clinic: Optional[str] = typer.Option(None, "--clinic", help="Clinic id"),
    mcid_only: bool = typer.Option(False, "--mcid-only", help="Only rows that achieved MCID"),
    complete_only: bool = typer.Option(False, "--complete-only", help="Only complete-data rows"),
):
    """Write the registry CSV for a snapshot."""
    from outcome_registry.analytics import analyze, load_snapshot
    from outcome_registry.export import (
        RegistryExportFilters,
        project_registry_rows,
        registry_filename,
        registry_to_csv,
    )
    from outcome_registry.instruments import get_catalog
    from outcome_registry.observability import DiagnosticsRecorder

    raw = _load_snapshot(snapshot)
    filters = _build_filters(window, domain, body_region, clinician, include_overrides)
    reference = _parse_as_of(as_of)
    recorder = DiagnosticsRecorder(log_dir=get_settings().diagnostics_log_dir)

    records = load_snapshot(raw, recorder)
    working_set = analyze(records, filters, reference, get_catalog(), recorder)
    rows = project_registry_rows(
        working_set.outcome_targets,
        RegistryExportFilters(
            year=year,
            quarter=quarter,
            instrument_code=instrument,
            clinic_id=clinic,
            mcid_achieved_only=mcid_only,
            complete_data_only=complete_only,
        ),
    )

    if not rows:
        console.print("[yellow]No records match current filters[/yellow]")
        raise typer.Exit(1)

    target = output or Path(registry_filename(datetime.now(timezone.utc)))
    target.write_text(registry_to_csv(rows))
    console.print(f"[green]Exported {len(rows)} records to {target}[/green]")


@app.command()
def mcid(
    snapshot: Path = typer.Argument(..., help="JSON file with episodes, care_targets and scores"),
    window: Optional[str] = WindowOption,
    include_overrides: Optional[bool] = OverridesOption,
    as_of: Optional[str] = AsOfOption,
):
    """Show MCID achievement per care target and instrument."""
    from outcome_registry.analytics import (
        analyze,
        collect_mcid_achievements,
        load_snapshot,
        summarize_mcid,
    )
    from outcome_registry.instruments import get_catalog
    from outcome_registry.models.metrics import MCID_DISCLAIMER

    raw = _load_snapshot(snapshot)
    filters = _build_filters(window, None, None, None, include_overrides)
    catalog = get_catalog()
    working_set = analyze(load_snapshot(raw), filters, _parse_as_of(as_of), catalog)
    summary = summarize_mcid(collect_mcid_achievements(working_set.outcome_targets, catalog))

    table = Table(title=f"MCID Achievement ({summary.achieved_mcid}/{summary.total_assessments}, {summary.success_level})")
    table.add_column("Care Target")
    table.add_column("Instrument")
    table.add_column("Baseline")
    table.add_column("Discharge")
    table.add_column("Change")
    table.add_column("% of MCID")
    table.add_column("Level")
    for a in summary.achievements:
        table.add_row(
            a.care_target_id,
            a.instrument_code,
            f"{a.baseline_score:g}",
            f"{a.discharge_score:g}",
            f"{a.score_change:g}",
            f"{a.achievement_percentage:.0f}%",
            a.achievement_level.value,
        )
    console.print(table)
    console.print(f"[dim]{MCID_DISCLAIMER}[/dim]")


@app.command()
def instruments():
    """List the instrument catalog."""
    from outcome_registry.instruments import get_catalog

    table = Table(title="Instrument Catalog")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("MCID")
    table.add_column("Direction")
    for instrument in sorted(get_catalog(), key=lambda i: i.code):
        table.add_row(
            instrument.code,
            instrument.name,
            f"{instrument.mcid_threshold:g}",
            instrument.directionality.value,
        )
    console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    console.print(f"Starting outcome registry API server on {host}:{port}")
    uvicorn.run(
        "outcome_registry.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version():
    """Show version information."""
    from outcome_registry import __version__

    console.print(f"outcome-registry v{__version__}")

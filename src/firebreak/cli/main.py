from __future__ import annotations

import json
from contextlib import nullcontext
from pathlib import Path

import click
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from firebreak.analysis import AnalysisResult, analyze_equipment, derive_terrain_from_slope
from firebreak.cli._utils import (
    format_cost,
    format_hours,
    parse_terrain_factors,
    parse_vegetation_factors,
)
from firebreak.core.errors import FirebreakValueError
from firebreak.core.types import DEFAULT_TERRAIN_FACTORS, CompatibilityLevel
from firebreak.logging_config import configure
from firebreak.scenario.contract import AnalysisParameters, AnalysisRequest
from firebreak.scenario.io import CatalogueLoad, load_analysis_request, load_equipment_catalogue
from firebreak.telemetry import AnalysisTelemetryLogger
from firebreak.validation import validate_equipment

app = typer.Typer(add_completion=False, no_args_is_help=True)
equipment_app = typer.Typer(
    add_completion=False, no_args_is_help=True, help="Inspect and check equipment catalogues."
)
app.add_typer(equipment_app, name="equipment")
console = Console()

LOG_LEVEL = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)

_LEVEL_STYLE = {
    CompatibilityLevel.FULL: "green",
    CompatibilityLevel.PARTIAL: "yellow",
    CompatibilityLevel.INCOMPATIBLE: "red",
}


def _load_catalogue_or_exit(path: Path | None) -> CatalogueLoad:
    try:
        return load_equipment_catalogue(path)
    except (FileNotFoundError, FirebreakValueError) as exc:
        console.print(f"[red]Catalogue load failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def _print_skipped(catalogue: CatalogueLoad) -> None:
    for message in catalogue.skipped:
        console.print(f"[yellow]Skipped catalogue {escape(message)}[/yellow]")


def _with_cli_overrides(
    request: AnalysisRequest, terrain_args: list[str] | None, vegetation_args: list[str] | None
) -> AnalysisRequest:
    terrain = parse_terrain_factors(terrain_args)
    vegetation = parse_vegetation_factors(vegetation_args)
    if not terrain and not vegetation:
        return request
    existing = request.parameters or AnalysisParameters()
    parameters = AnalysisParameters(
        terrain_factors={**(existing.terrain_factors or {}), **terrain} or None,
        vegetation_factors={**(existing.vegetation_factors or {}), **vegetation} or None,
    )
    return request.model_copy(update={"parameters": parameters})


def _print_analysis(result: AnalysisResult) -> None:
    env = result.environment
    table = Table(
        title=(
            f"Fire break options ({env.terrain.value} terrain x{env.terrain_factor:g}, "
            f"{env.vegetation.value} x{env.vegetation_factor:g})"
        )
    )
    table.add_column("#", justify="right")
    table.add_column("Equipment")
    table.add_column("Type")
    table.add_column("Compatibility")
    table.add_column("Time", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Notes")
    for rank, calc in enumerate(result.calculations, start=1):
        style = _LEVEL_STYLE[calc.compatibility_level]
        notes = calc.note or ""
        if calc.drops:
            notes = f"{calc.drops} drops" + (f"; {notes}" if notes else "")
        table.add_row(
            str(rank),
            calc.name or calc.id or "?",
            calc.type.value,
            f"[{style}]{calc.compatibility_level.value}[/{style}]",
            format_hours(calc.time),
            format_cost(calc.cost),
            notes,
        )
    console.print(table)
    for summary in result.validation_errors:
        console.print(f"[red]Invalid configuration[/red] {summary}")


@app.command()
def analyze(
    request_file: Path = typer.Argument(..., help="Analysis request (YAML/JSON)."),
    equipment: Path | None = typer.Option(
        None,
        "--equipment",
        "-e",
        help="Equipment catalogue (YAML/JSON/CSV). Defaults to inline equipment, then the bundled catalogue.",
    ),
    terrain_factor: list[str] | None = typer.Option(
        None, "--terrain-factor", help="Override a terrain factor, e.g. moderate=1.4 (repeatable)."
    ),
    vegetation_factor: list[str] | None = typer.Option(
        None,
        "--vegetation-factor",
        help="Override a vegetation factor, e.g. heavyforest=2.5 (repeatable).",
    ),
    include_inactive: bool = typer.Option(
        False, "--include-inactive", help="Analyse catalogue entries marked inactive."
    ),
    out_json: Path | None = typer.Option(None, "--out-json", help="Write the full result as JSON."),
    out_csv: Path | None = typer.Option(None, "--out-csv", help="Write ranked results as CSV."),
    telemetry_log: Path | None = typer.Option(
        None, "--telemetry-log", help="Append a JSONL run record to this path."
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", click_type=LOG_LEVEL, help="Logging level."
    ),
):
    """Rank equipment by compatibility, completion time and cost for a route."""
    configure(log_level)
    try:
        request, inline = load_analysis_request(request_file)
    except (FileNotFoundError, FirebreakValueError) as exc:
        console.print(f"[red]Request load failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    except ValidationError as exc:
        console.print(f"[red]Invalid analysis request:[/red]\n{escape(str(exc))}")
        raise typer.Exit(1)
    request = _with_cli_overrides(request, terrain_factor, vegetation_factor)

    if equipment is not None or inline is None:
        catalogue = _load_catalogue_or_exit(equipment)
    else:
        catalogue = inline
    _print_skipped(catalogue)

    telemetry = (
        AnalysisTelemetryLogger(
            telemetry_log,
            request,
            source="cli",
            context={"request_file": str(request_file), "catalogue": catalogue.source},
        )
        if telemetry_log
        else nullcontext()
    )
    with telemetry as run:
        result = analyze_equipment(request, catalogue.active(include_inactive))
        if run is not None:
            run.record_result(result)

    _print_analysis(result)
    if out_json:
        out_json.parent.mkdir(parents=True, exist_ok=True)
        out_json.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        console.print(f"Saved analysis JSON to {out_json}")
    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        result.to_dataframe().to_csv(out_csv, index=False)
        console.print(f"Saved ranked results to {out_csv}")


@app.command()
def terrain(slope: float = typer.Argument(..., help="Maximum route slope in degrees.")):
    """Show the terrain level and default factor derived from a maximum slope."""
    level = derive_terrain_from_slope(slope)
    console.print(
        f"Slope {slope:g}° → [bold]{level.value}[/bold] (default factor {DEFAULT_TERRAIN_FACTORS[level]:g})"
    )


@equipment_app.command("list")
def list_equipment(
    catalogue_path: Path | None = typer.Argument(None, help="Catalogue file (default: bundled)."),
    include_inactive: bool = typer.Option(False, "--include-inactive"),
):
    """List catalogue entries."""
    catalogue = _load_catalogue_or_exit(catalogue_path)
    table = Table(title=f"Equipment catalogue: {catalogue.source}")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Terrain")
    table.add_column("Vegetation")
    table.add_column("Cost/h", justify="right")
    for spec in catalogue.active(include_inactive):
        table.add_row(
            spec.id,
            spec.name,
            spec.equipment_type.value,
            ", ".join(level.value for level in spec.allowed_terrain),
            ", ".join(veg.value for veg in spec.allowed_vegetation),
            format_cost(spec.cost_per_hour or 0.0),
        )
    console.print(table)
    _print_skipped(catalogue)


@equipment_app.command("validate")
def validate_catalogue(
    catalogue_path: Path | None = typer.Argument(None, help="Catalogue file (default: bundled)."),
):
    """Check every catalogue entry; exit 1 if any entry is invalid or unparseable."""
    catalogue = _load_catalogue_or_exit(catalogue_path)
    _print_skipped(catalogue)
    failures = 0
    for spec in catalogue.equipment:
        errors = validate_equipment(spec)
        if errors:
            failures += 1
            console.print(f"[red]✗[/red] {spec.name or spec.id or '?'}: {', '.join(errors)}")
    total = len(catalogue.equipment)
    console.print(f"{total - failures}/{total} entries valid")
    if failures or catalogue.skipped:
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Serve the analysis API with uvicorn."""
    import uvicorn

    uvicorn.run("firebreak.api.app:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    app()

"""Command-line interface for the wavy grid generator."""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wavegrid.core.config import ContentType
from wavegrid.data.readings import DataSource, TidalReading

app = typer.Typer(
    name="wavegrid",
    help="Wave-distorted grids from live tidal and ship data",
    add_completion=False,
)
console = Console()

SOURCES = ("tidal", "ships")
FORMATS = ("svg", "png")


def _reading_table(reading: DataSource) -> Table:
    if isinstance(reading, TidalReading):
        table = Table(title="Tide")
        table.add_column("Property")
        table.add_column("Value")
        table.add_row("Station", reading.station)
        table.add_row("Level", f"{reading.level:.2f} {reading.unit}")
        table.add_row("Time", reading.time.strftime("%Y-%m-%d %H:%M"))
        if reading.station_id:
            table.add_row("Station ID", reading.station_id)
        return table

    table = Table(title="Ships")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Total", str(reading.total))
    table.add_row("Arrivals", str(reading.arrivals))
    table.add_row("Departures", str(reading.departures))
    table.add_row("Flow", f"{reading.flow:+d}")
    table.add_row("Time", reading.time.strftime("%Y-%m-%d %H:%M"))
    return table


def _check_choice(value: str, choices: tuple[str, ...], name: str) -> str:
    if value not in choices:
        raise typer.BadParameter(f"{name} must be one of: {', '.join(choices)}")
    return value


def _check_sliders(size: Optional[int], amplitude: Optional[float], frequency: Optional[float]) -> None:
    if size is not None and size < 1:
        raise typer.BadParameter(f"size must be at least 1, got {size}")
    if amplitude is not None and amplitude < 0:
        raise typer.BadParameter(f"amplitude must not be negative, got {amplitude}")
    if frequency is not None and frequency <= 0:
        raise typer.BadParameter(f"frequency must be positive, got {frequency}")


def _parse_taxonomy(content_type: Optional[ContentType], tags: Optional[list[str]]):
    from wavegrid.export.metadata import Taxonomy

    if content_type is None:
        return None
    return Taxonomy(content_type=content_type, tags=tags or [])


@app.command()
def conditions(
    source: Annotated[str, typer.Option(help="Data source: tidal/ships")] = "tidal",
    offline: Annotated[bool, typer.Option(help="Use simulated data only")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
):
    """Show the current reading and the wave parameters it produces."""
    from wavegrid.runner import GridRunner

    _check_choice(source, SOURCES, "source")
    runner = GridRunner()
    reading = asyncio.run(runner.fetch(source, offline=offline))
    runner.render()

    if json_output:
        console.print_json(reading.model_dump_json())
        return

    console.print(_reading_table(reading))
    params = runner.wave_params
    console.print(Panel.fit(
        f"[bold]Wave Parameters[/bold]\n"
        f"Amplitude: {params.amplitude:.2f}\n"
        f"Frequency: {params.frequency:.3f}\n"
        f"Phase: {params.phase:.3f} rad"
    ))


@app.command()
def grid(
    source: Annotated[str, typer.Option(help="Data source: tidal/ships")] = "tidal",
    size: Annotated[Optional[int], typer.Option(help="Cells per axis")] = None,
    amplitude: Annotated[Optional[float], typer.Option(help="Base wave amplitude")] = None,
    frequency: Annotated[Optional[float], typer.Option(help="Base wave frequency")] = None,
    fmt: Annotated[str, typer.Option("--format", help="Export format: svg/png")] = "svg",
    output_dir: Annotated[Path, typer.Option(help="Output directory")] = Path("."),
    offline: Annotated[bool, typer.Option(help="Use simulated data only")] = False,
    content_type: Annotated[Optional[ContentType], typer.Option(help="Taxonomy content type")] = None,
    tag: Annotated[Optional[list[str]], typer.Option(help="Taxonomy tag (repeatable)")] = None,
):
    """Generate a data-driven grid and export it."""
    from wavegrid.export.pipeline import ExportError
    from wavegrid.runner import GridRunner

    _check_choice(source, SOURCES, "source")
    _check_choice(fmt, FORMATS, "format")
    _check_sliders(size, amplitude, frequency)
    runner = GridRunner(grid_size=size, base_amplitude=amplitude, base_frequency=frequency)
    reading = asyncio.run(runner.fetch(source, offline=offline))
    paths = runner.render()
    console.print(_reading_table(reading))

    try:
        result = runner.export(
            fmt,
            suffix=source,
            taxonomy=_parse_taxonomy(content_type, tag),
            output_dir=output_dir,
            log_fn=console.print,
        )
    except ExportError as e:
        console.print(f"[red]Export failed:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]Grid exported to {result.path}[/green] ({len(paths)} lines)")
    if result.companion:
        console.print(f"[green]Metadata written to {result.companion}[/green]")


@app.command("tide-table")
def tide_table(
    photo: Annotated[Optional[Path], typer.Argument(help="Photo or companion JSON to date")] = None,
    at: Annotated[Optional[str], typer.Option(help="ISO timestamp, overrides the file")] = None,
    size: Annotated[Optional[int], typer.Option(help="Cells per axis")] = None,
    amplitude: Annotated[Optional[float], typer.Option(help="Base wave amplitude")] = None,
    frequency: Annotated[Optional[float], typer.Option(help="Base wave frequency")] = None,
    fmt: Annotated[str, typer.Option("--format", help="Export format: svg/png")] = "svg",
    output_dir: Annotated[Path, typer.Option(help="Output directory")] = Path("."),
    offline: Annotated[bool, typer.Option(help="Use simulated data only")] = False,
):
    """Generate a grid from the historical tide at a photo's timestamp."""
    from wavegrid.data.timestamps import (
        ExtractedTimestamp,
        TimestampSource,
        extract_timestamp,
        parse_manual_timestamp,
    )
    from wavegrid.export.pipeline import ExportError
    from wavegrid.runner import GridRunner

    _check_choice(fmt, FORMATS, "format")
    _check_sliders(size, amplitude, frequency)

    extracted: ExtractedTimestamp | None = None
    if at is not None:
        timestamp = parse_manual_timestamp(at)
        if timestamp is None:
            console.print(f"[red]Not a valid timestamp:[/red] {at}")
            raise typer.Exit(code=2)
        extracted = ExtractedTimestamp(timestamp=timestamp, source=TimestampSource.MANUAL, confidence="high")
    elif photo is not None:
        if not photo.exists():
            console.print(f"[red]No such file:[/red] {photo}")
            raise typer.Exit(code=2)
        extracted = extract_timestamp(photo)
    else:
        console.print("[red]Provide a file or --at[/red]")
        raise typer.Exit(code=2)

    console.print(
        f"Timestamp: {extracted.timestamp.isoformat()} "
        f"[dim]({extracted.source.value}, {extracted.confidence} confidence)[/dim]"
    )

    runner = GridRunner(grid_size=size, base_amplitude=amplitude, base_frequency=frequency)
    reading = asyncio.run(runner.fetch("tidal", offline=offline, at=extracted.timestamp))
    runner.render()
    console.print(_reading_table(reading))

    try:
        result = runner.export(
            fmt,
            app="tide-table",
            tool_name="tide-table",
            suffix="historical",
            extra_parameters={
                "photoTimestamp": extracted.timestamp.isoformat(),
                "timestampSource": extracted.source.value,
                "timestampConfidence": extracted.confidence,
                "originalFilename": extracted.original_filename,
                "isSimulated": reading.is_simulated,
            },
            output_dir=output_dir,
            log_fn=console.print,
        )
    except ExportError as e:
        console.print(f"[red]Export failed:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]Tide table exported to {result.path}[/green]")


@app.command()
def inspect(
    path: Annotated[Path, typer.Argument(help="Exported SVG, PNG or companion JSON")],
):
    """Show the provenance metadata of an exported asset."""
    from wavegrid.export.metadata import read_companion_json
    from wavegrid.export.pipeline import companion_path
    from wavegrid.export.svg import extract_svg_metadata

    suffix = path.suffix.lower()
    if suffix == ".svg":
        try:
            metadata = extract_svg_metadata(path.read_bytes())
        except OSError:
            metadata = None
    elif suffix == ".json":
        metadata = read_companion_json(path)
    else:
        metadata = read_companion_json(companion_path(path))

    if metadata is None:
        console.print(f"[yellow]No metadata found for {path}[/yellow]")
        raise typer.Exit(code=1)

    console.print_json(metadata.to_json())


@app.command()
def version():
    """Show version information."""
    from wavegrid import __version__
    console.print(f"wavegrid v{__version__}")


if __name__ == "__main__":
    app()

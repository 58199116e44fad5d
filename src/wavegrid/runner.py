"""Grid generation session: reading, render, export."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from wavegrid.core.config import Settings, get_settings
from wavegrid.core.types import RandomSource
from wavegrid.data.readings import DataSource
from wavegrid.data.ships import fetch_ship_data, simulate_ship_reading
from wavegrid.data.tide import (
    fetch_historical_tidal_data,
    fetch_tidal_data,
    simulate_tidal_reading,
)
from wavegrid.export.metadata import Taxonomy, create_asset_metadata
from wavegrid.export.pipeline import ExportPipeline, ExportResult, generate_filename
from wavegrid.export.svg import GridStyle
from wavegrid.models.grid import Bounds, GridSpec, GridSurface, LinePath
from wavegrid.models.wave import WaveParams, compute_wave_params

SourceType = Literal["tidal", "ships"]
ExportFormat = Literal["svg", "png"]


@dataclass
class GridRunner:
    """Holds the slider state and drives one grid from reading to file.

    The pure geometry lives in `wavegrid.models`; this class only keeps the
    current inputs and hands them on.
    """

    settings: Settings = field(default_factory=get_settings)

    # Slider state
    grid_size: int | None = None
    base_amplitude: float | None = None
    base_frequency: float | None = None
    base_phase: float | None = None

    # Current reading and drawing
    reading: DataSource | None = None
    surface: GridSurface | None = None
    wave_params: WaveParams | None = None

    def __post_init__(self):
        grid, wave = self.settings.grid, self.settings.wave
        if self.grid_size is None:
            self.grid_size = grid.size
        if self.base_amplitude is None:
            self.base_amplitude = wave.base_amplitude
        if self.base_frequency is None:
            self.base_frequency = wave.base_frequency
        if self.base_phase is None:
            self.base_phase = wave.base_phase

    @property
    def bounds(self) -> Bounds:
        return Bounds.square(self.settings.grid.canvas_size)

    async def fetch(
        self,
        source: SourceType,
        offline: bool = False,
        at: datetime | None = None,
        rng: RandomSource | None = None,
    ) -> DataSource:
        """Load a reading. `at` selects a historical tide; `offline` skips the network."""
        sources = self.settings.data_sources
        if source == "tidal":
            if offline:
                self.reading = simulate_tidal_reading(at)
            elif at is not None:
                self.reading = await fetch_historical_tidal_data(at, sources)
            else:
                self.reading = await fetch_tidal_data(sources)
        else:
            if offline:
                self.reading = simulate_ship_reading(rng)
            else:
                self.reading = await fetch_ship_data(sources, rng=rng)
        return self.reading

    def render(self) -> list[LinePath]:
        """Redraw the grid from the current sliders and reading."""
        spec = GridSpec(size=self.grid_size, bounds=self.bounds)
        if self.surface is None or self.surface.grid_spec != spec:
            self.surface = GridSurface(grid_spec=spec, segments=self.settings.grid.segments)

        self.wave_params = compute_wave_params(
            self.base_amplitude,
            self.base_frequency,
            self.reading,
            self.base_phase,
        )
        return self.surface.draw(self.wave_params)

    def parameters(self) -> dict[str, Any]:
        """Tool inputs recorded in the asset metadata."""
        return {
            "gridSize": self.grid_size,
            "waveAmplitude": self.base_amplitude,
            "waveFrequency": self.base_frequency,
            "wavePhase": self.base_phase,
        }

    def export(
        self,
        fmt: ExportFormat,
        app: str = "grid-generator",
        tool_name: str = "RTCT-grid",
        suffix: str = "",
        taxonomy: Taxonomy | None = None,
        extra_parameters: dict[str, Any] | None = None,
        output_dir: Path | None = None,
        log_fn=None,
    ) -> ExportResult:
        """Export the current drawing with fresh provenance metadata."""
        paths = self.surface.paths if self.surface is not None else []
        parameters = self.parameters()
        if extra_parameters:
            parameters.update(extra_parameters)

        metadata = create_asset_metadata(
            app,
            parameters,
            self.reading,
            taxonomy,
            settings=self.settings.export,
        )
        pipeline = ExportPipeline(
            bounds=self.bounds,
            style=GridStyle.from_settings(self.settings.grid),
            output_dir=output_dir,
            settings=self.settings.export,
            log_fn=log_fn,
        )
        filename = generate_filename(tool_name, fmt, suffix, now=metadata.timestamp)

        if fmt == "svg":
            return pipeline.export_vector(paths, metadata, filename)
        return pipeline.export_raster(paths, metadata, filename)

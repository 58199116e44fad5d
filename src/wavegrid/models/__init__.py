"""Pure grid geometry: wave mapping, line sampling and grid assembly."""

from wavegrid.models.grid import Bounds, GridSpec, GridSurface, LinePath, render_grid
from wavegrid.models.path import WavyLine, generate_wavy_line
from wavegrid.models.wave import WaveParams, compute_wave_params

__all__ = [
    "Bounds",
    "GridSpec",
    "GridSurface",
    "LinePath",
    "WaveParams",
    "WavyLine",
    "compute_wave_params",
    "generate_wavy_line",
    "render_grid",
]

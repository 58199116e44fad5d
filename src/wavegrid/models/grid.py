"""Grid assembly from wavy lines."""

from dataclasses import dataclass, field

from wavegrid.core.constants import DEFAULT_SEGMENTS
from wavegrid.core.types import Direction
from wavegrid.models.path import WavyLine, generate_wavy_line
from wavegrid.models.wave import WaveParams


@dataclass(frozen=True)
class Bounds:
    """Rendering area."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def square(cls, size: float) -> "Bounds":
        return cls(x=0.0, y=0.0, width=size, height=size)


@dataclass(frozen=True)
class GridSpec:
    """Cell count per axis and the area the grid fills."""

    size: int
    bounds: Bounds

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"grid size must be positive, got {self.size}")

    @property
    def line_count(self) -> int:
        return 2 * (self.size + 1)


@dataclass(frozen=True)
class LinePath:
    """A rendered grid line."""

    direction: Direction
    index: int
    line: WavyLine

    @property
    def d(self) -> str:
        return self.line.to_svg_path()


def render_grid(
    grid_spec: GridSpec,
    wave_params: WaveParams,
    segments: int = DEFAULT_SEGMENTS,
) -> list[LinePath]:
    """Build every line of the grid.

    Horizontal lines come first, then vertical lines, each in increasing
    index order; later lines draw on top of earlier ones.
    """
    b = grid_spec.bounds
    n = grid_spec.size
    cell_w = b.width / n
    cell_h = b.height / n
    paths: list[LinePath] = []

    for i in range(n + 1):
        y = b.y + i * cell_h
        line = generate_wavy_line(b.x, y, b.x + b.width, y, wave_params, "horizontal", i, segments)
        paths.append(LinePath(direction="horizontal", index=i, line=line))

    for i in range(n + 1):
        x = b.x + i * cell_w
        line = generate_wavy_line(x, b.y, x, b.y + b.height, wave_params, "vertical", i, segments)
        paths.append(LinePath(direction="vertical", index=i, line=line))

    return paths


@dataclass
class GridSurface:
    """Drawing surface holding the currently displayed grid.

    Each `draw` replaces the previous geometry; nothing accumulates.
    """

    grid_spec: GridSpec
    segments: int = DEFAULT_SEGMENTS
    wave_params: WaveParams | None = None
    _paths: list[LinePath] = field(default_factory=list, repr=False)

    @property
    def paths(self) -> list[LinePath]:
        return list(self._paths)

    def clear(self) -> None:
        self._paths.clear()
        self.wave_params = None

    def draw(self, wave_params: WaveParams) -> list[LinePath]:
        self.clear()
        self._paths.extend(render_grid(self.grid_spec, wave_params, self.segments))
        self.wave_params = wave_params
        return self.paths

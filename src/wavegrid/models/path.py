"""Wavy line sampling."""

import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from wavegrid.core.constants import DEFAULT_SEGMENTS, LINE_PHASE_OFFSET, TWO_PI
from wavegrid.core.types import Direction, Point
from wavegrid.models.wave import WaveParams


def _lerp(a: float, b: float, t: float) -> float:
    # Exact at both ends: t=0 gives a, t=1 gives b
    return a * (1 - t) + b * t


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass(frozen=True)
class WavyLine:
    """One grid line, sampled lazily.

    Iterating yields `segments + 1` points from the start to the end of the
    segment. The wave offset is applied perpendicular to the direction of
    travel: to y for horizontal lines, to x for vertical lines.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    wave: WaveParams
    direction: Direction
    line_index: int
    segments: int = DEFAULT_SEGMENTS

    def __post_init__(self):
        if self.segments <= 0:
            raise ValueError(f"segments must be positive, got {self.segments}")
        if self.line_index < 0:
            raise ValueError(f"line_index must be non-negative, got {self.line_index}")
        if self.direction not in ("horizontal", "vertical"):
            raise ValueError(f"unknown direction {self.direction!r}")

    def __len__(self) -> int:
        return self.segments + 1

    def __iter__(self) -> Iterator[Point]:
        wave = self.wave
        phase = wave.phase + self.line_index * LINE_PHASE_OFFSET
        horizontal = self.direction == "horizontal"

        for i in range(self.segments + 1):
            t = i / self.segments
            offset = wave.amplitude * math.sin(TWO_PI * wave.frequency * t + phase)
            if horizontal:
                yield (_lerp(self.x1, self.x2, t), self.y1 + offset)
            else:
                yield (self.x1 + offset, _lerp(self.y1, self.y2, t))

    def as_array(self) -> np.ndarray:
        """Points as an (n, 2) float array."""
        return np.array(list(self), dtype=np.float64)

    def to_svg_path(self) -> str:
        """SVG path data: a move to the first point, then line segments."""
        points = iter(self)
        x, y = next(points)
        parts = [f"M {_fmt(x)} {_fmt(y)}"]
        parts.extend(f"L {_fmt(x)} {_fmt(y)}" for x, y in points)
        return " ".join(parts)


def generate_wavy_line(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    wave_params: WaveParams,
    direction: Direction,
    line_index: int,
    segments: int = DEFAULT_SEGMENTS,
) -> WavyLine:
    """Sample a sinusoidally distorted line from (x1, y1) to (x2, y2).

    The `line_index * 0.5` phase term keeps parallel lines out of step so the
    grid reads as a wave field rather than repeated copies of one line.

    Args:
        x1, y1, x2, y2: Segment endpoints.
        wave_params: Distortion amplitude, frequency and phase.
        direction: "horizontal" distorts y, "vertical" distorts x.
        line_index: Position of the line among its parallels (>= 0).
        segments: Number of straight pieces (> 0).

    Returns:
        A restartable iterable of points.
    """
    return WavyLine(
        x1=x1,
        y1=y1,
        x2=x2,
        y2=y2,
        wave=wave_params,
        direction=direction,
        line_index=line_index,
        segments=segments,
    )

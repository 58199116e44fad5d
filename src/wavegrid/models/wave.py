"""Mapping from a real-world reading to wave distortion parameters.

Tide level and ship traffic are normalised against their nominal domains
and scale the base amplitude/frequency sliders. Readings outside the
nominal domain are not clamped: they produce proportionally stronger or
weaker distortion.
"""

from dataclasses import dataclass
from typing import assert_never

from wavegrid.core.constants import (
    AMPLITUDE_FLOOR,
    AMPLITUDE_GAIN,
    SHIP_ACTIVITY_SPAN,
    SHIP_FLOW_OFFSET,
    SHIP_FLOW_SPAN,
    TIDE_FREQUENCY_BASE,
    TIDE_FREQUENCY_GAIN,
    TIDE_MIN_M,
    TIDE_RANGE_M,
    TWO_PI,
)
from wavegrid.data.readings import DataSource, ShipReading, TidalReading


@dataclass(frozen=True)
class WaveParams:
    """Sinusoidal distortion applied to every grid line."""

    amplitude: float  # offset magnitude in drawing units
    frequency: float  # full cycles across a line
    phase: float  # radians


def normalize_tide(level: float) -> float:
    """Map a tide level in mAOD onto [0, 1] over the nominal -2..+4 range."""
    return (level - TIDE_MIN_M) / TIDE_RANGE_M


def normalize_flow(flow: int) -> float:
    """Map net ship flow onto [0, 1] over the nominal -10..+10 range."""
    return (flow + SHIP_FLOW_OFFSET) / SHIP_FLOW_SPAN


def activity_level(total: int) -> float:
    return total / SHIP_ACTIVITY_SPAN


def compute_wave_params(
    base_amplitude: float,
    base_frequency: float,
    reading: DataSource | None = None,
    base_phase: float = 0.0,
) -> WaveParams:
    """Derive wave parameters from the base sliders and an optional reading.

    Args:
        base_amplitude: Amplitude slider value (>= 0).
        base_frequency: Frequency slider value (> 0).
        reading: Tide or ship reading. None leaves the sliders unchanged.
        base_phase: Phase added before any data-driven rotation.

    Returns:
        WaveParams. Identical inputs always give identical output.
    """
    match reading:
        case None:
            return WaveParams(amplitude=base_amplitude, frequency=base_frequency, phase=base_phase)
        case TidalReading(level=level):
            tide = normalize_tide(level)
            return WaveParams(
                amplitude=base_amplitude * (AMPLITUDE_FLOOR + tide * AMPLITUDE_GAIN),
                frequency=base_frequency * (TIDE_FREQUENCY_BASE + tide * TIDE_FREQUENCY_GAIN),
                phase=base_phase + tide * TWO_PI,
            )
        case ShipReading(total=total, flow=flow):
            flow_ratio = normalize_flow(flow)
            activity = activity_level(total)
            return WaveParams(
                amplitude=base_amplitude * (AMPLITUDE_FLOOR + activity * AMPLITUDE_GAIN),
                frequency=base_frequency * (0.5 + flow_ratio * 1.0),
                phase=base_phase + flow_ratio * TWO_PI,
            )
        case _:
            assert_never(reading)

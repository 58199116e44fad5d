"""Tests for the reading to wave parameter mapping."""

import math
from datetime import datetime, timezone

import pytest

from wavegrid.data.readings import ShipReading, TidalReading
from wavegrid.models.wave import WaveParams, compute_wave_params, normalize_tide

T = datetime(2026, 6, 21, 12, 0, tzinfo=timezone.utc)


def tidal(level: float) -> TidalReading:
    return TidalReading(level=level, unit="mAOD", station="Harwich", time=T)


class TestIdentityFallback:
    """No reading leaves the sliders unchanged."""

    def test_no_reading(self):
        params = compute_wave_params(15, 2, None)
        assert params == WaveParams(amplitude=15, frequency=2, phase=0.0)

    def test_base_phase_passed_through(self):
        params = compute_wave_params(15, 2, None, base_phase=1.25)
        assert params.phase == 1.25


class TestTidalMapping:
    """Tide level drives amplitude, frequency and phase."""

    def test_mid_tide_example(self):
        """Level 1 mAOD sits halfway through the -2..+4 range."""
        params = compute_wave_params(15, 2, tidal(1.0))
        assert params.amplitude == pytest.approx(11.25, abs=1e-9)
        assert params.frequency == pytest.approx(2.0, abs=1e-9)
        assert params.phase == pytest.approx(math.pi, abs=1e-9)

    def test_low_and_high_water_extremes(self):
        low = compute_wave_params(10, 1, tidal(-2.0))
        high = compute_wave_params(10, 1, tidal(4.0))
        assert low.amplitude == pytest.approx(5.0)
        assert high.amplitude == pytest.approx(10.0)
        assert low.frequency == pytest.approx(0.8)
        assert high.frequency == pytest.approx(1.2)
        assert low.phase == pytest.approx(0.0)
        assert high.phase == pytest.approx(2 * math.pi)

    def test_monotonic_in_level(self):
        """Rising tide never lowers amplitude or frequency."""
        levels = [-2.0, -1.3, -0.2, 0.0, 0.7, 1.9, 2.5, 3.99, 4.0]
        params = [compute_wave_params(15, 2, tidal(level)) for level in levels]
        for lower, higher in zip(params, params[1:]):
            assert higher.amplitude >= lower.amplitude
            assert higher.frequency >= lower.frequency

    def test_base_phase_added(self):
        params = compute_wave_params(15, 2, tidal(1.0), base_phase=0.5)
        assert params.phase == pytest.approx(math.pi + 0.5)

    def test_out_of_range_level_not_clamped(self):
        """Levels beyond the nominal range extrapolate rather than saturate."""
        assert normalize_tide(7.0) == pytest.approx(1.5)
        params = compute_wave_params(10, 1, tidal(7.0))
        assert params.amplitude == pytest.approx(12.5)
        assert params.frequency == pytest.approx(1.4)

        below = compute_wave_params(10, 1, tidal(-5.0))
        assert below.amplitude == pytest.approx(2.5)


class TestShipMapping:
    """Ship traffic drives amplitude (activity) and frequency/phase (flow)."""

    def test_example_reading(self):
        reading = ShipReading(total=10, arrivals=6, departures=4, flow=2, time=T)
        params = compute_wave_params(20, 3, reading)
        assert params.amplitude == pytest.approx(20 * 0.75)
        assert params.frequency == pytest.approx(3 * 1.1)
        assert params.phase == pytest.approx(0.6 * 2 * math.pi)

    def test_busy_port_exceeds_nominal_range(self):
        """Totals above 20 push amplitude past the base value."""
        reading = ShipReading.from_counts(total=40, arrivals=20, time=T)
        params = compute_wave_params(10, 1, reading)
        assert params.amplitude == pytest.approx(15.0)

    def test_empty_port(self):
        reading = ShipReading.from_counts(total=0, arrivals=0, time=T)
        params = compute_wave_params(10, 2, reading)
        assert params.amplitude == pytest.approx(5.0)
        assert params.frequency == pytest.approx(2.0)
        assert params.phase == pytest.approx(math.pi)


class TestDeterminism:
    """Identical inputs give identical output."""

    @pytest.mark.parametrize(
        "reading",
        [
            None,
            tidal(2.37),
            ShipReading.from_counts(total=13, arrivals=5, time=T),
        ],
    )
    def test_repeated_calls_identical(self, reading):
        results = {compute_wave_params(12.5, 1.7, reading, 0.3) for _ in range(20)}
        assert len(results) == 1

    def test_unknown_reading_type_rejected(self):
        with pytest.raises(AssertionError):
            compute_wave_params(1, 1, object())

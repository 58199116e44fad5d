"""Mathematical constants and mapping coefficients."""

import math

TWO_PI = 2 * math.pi

# Phase step between neighbouring parallel lines (radians)
LINE_PHASE_OFFSET = 0.5

# Default samples per line
DEFAULT_SEGMENTS = 100

# Expected tide domain (mAOD)
TIDE_MIN_M = -2.0
TIDE_RANGE_M = 6.0

# Tidal frequency blend: 0.8 at low water, 1.2 at high water
TIDE_FREQUENCY_BASE = 0.8
TIDE_FREQUENCY_GAIN = 0.4

# Ship flow is expected in [-10, 10], totals up to ~20 vessels
SHIP_FLOW_OFFSET = 10.0
SHIP_FLOW_SPAN = 20.0
SHIP_ACTIVITY_SPAN = 20.0

# Amplitude ranges from 50% to 100% of the base slider
AMPLITUDE_FLOOR = 0.5
AMPLITUDE_GAIN = 0.5

# Semidiurnal tidal cycle (hours) used by the simulated fallback
TIDAL_CYCLE_HOURS = 12.4

# Asset id namespace
ASSET_ID_PREFIX = "ff"

# Unit conversions
SECONDS_TO_MS = 1000

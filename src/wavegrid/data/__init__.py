"""Data sources: tide gauge and ship traffic readings."""

from wavegrid.data.readings import Coordinates, DataSource, ShipReading, TidalReading
from wavegrid.data.ships import fetch_ship_data, simulate_ship_reading
from wavegrid.data.tide import (
    fetch_historical_tidal_data,
    fetch_tidal_data,
    simulate_tidal_reading,
)

__all__ = [
    "Coordinates",
    "DataSource",
    "ShipReading",
    "TidalReading",
    "fetch_historical_tidal_data",
    "fetch_ship_data",
    "fetch_tidal_data",
    "simulate_ship_reading",
    "simulate_tidal_reading",
]

"""Ship traffic readings for the Port of Felixstowe."""

import logging
import math
from datetime import datetime, timezone

import httpx

from wavegrid.core.config import DataSourceSettings, get_settings
from wavegrid.core.types import RandomSource, default_random_source
from wavegrid.data.readings import ShipReading
from wavegrid.data.tide import FETCH_ERRORS

logger = logging.getLogger(__name__)

# Simulated traffic range (vessels)
MIN_SHIPS = 5
MAX_SHIPS = 19


def simulate_ship_reading(
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> ShipReading:
    """Draw a plausible traffic snapshot.

    Total vessels is uniform in 5..19; between 40% and 60% of them are
    arrivals. Pass a seeded generator for reproducible readings.
    """
    if rng is None:
        rng = default_random_source()
    if now is None:
        now = datetime.now(timezone.utc)

    total = int(rng.integers(MIN_SHIPS, MAX_SHIPS + 1))
    arrivals = math.floor(total * (0.4 + float(rng.random()) * 0.2))
    return ShipReading.from_counts(total=total, arrivals=arrivals, time=now)


async def fetch_ship_data(
    settings: DataSourceSettings | None = None,
    client: httpx.AsyncClient | None = None,
    rng: RandomSource | None = None,
) -> ShipReading:
    """Fetch vessel counts from the ship proxy, or simulate them.

    The proxy is expected to answer with `totalShips`, `arrivals` and
    optionally `timestamp`. Without a configured proxy, or on any failure,
    a simulated reading is returned.
    """
    if settings is None:
        settings = get_settings().data_sources

    if settings.ship_api_url:
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=settings.request_timeout) as owned:
                    return await _fetch_proxy_reading(owned, settings.ship_api_url)
            return await _fetch_proxy_reading(client, settings.ship_api_url)
        except FETCH_ERRORS as e:
            logger.warning("Could not fetch ship data, using simulated: %s", e)

    return simulate_ship_reading(rng)


async def _fetch_proxy_reading(client: httpx.AsyncClient, url: str) -> ShipReading:
    response = await client.get(url)
    response.raise_for_status()
    data = response.json()

    total = int(data["totalShips"])
    arrivals = int(data["arrivals"])
    if "timestamp" in data:
        time = datetime.fromisoformat(data["timestamp"])
    else:
        time = datetime.now(timezone.utc)

    return ShipReading.from_counts(total=total, arrivals=arrivals, time=time)

"""Tide gauge readings from the Environment Agency, with simulated fallback."""

import logging
import math
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import ValidationError

from wavegrid.core.config import DataSourceSettings, FelixstoweLocation, get_settings
from wavegrid.core.constants import TIDAL_CYCLE_HOURS, TWO_PI
from wavegrid.data.readings import Coordinates, TidalReading

logger = logging.getLogger(__name__)

# Failures that trigger the simulated fallback
FETCH_ERRORS = (httpx.HTTPError, KeyError, AttributeError, ValueError, TypeError, ValidationError)


def simulate_tidal_reading(timestamp: datetime | None = None) -> TidalReading:
    """Approximate the Harwich tide from the time of day.

    Uses a single semidiurnal sine: level = 2 sin(2 pi h / 12.4) + 1, with h
    the decimal wall-clock hour of `timestamp`. Defaults to the current local
    time. Deterministic for a given timestamp.
    """
    if timestamp is None:
        timestamp = datetime.now().astimezone()

    hours = timestamp.hour + timestamp.minute / 60
    level = 2 * math.sin(hours / TIDAL_CYCLE_HOURS * TWO_PI) + 1

    return TidalReading(
        level=round(level, 2),
        unit="mAOD",
        station=f"{FelixstoweLocation.HARWICH_NAME} (Simulated)",
        time=timestamp,
        station_id=FelixstoweLocation.HARWICH_STATION_ID,
        coordinates=Coordinates(
            lat=FelixstoweLocation.HARWICH_LAT,
            long=FelixstoweLocation.HARWICH_LON,
        ),
    )


async def fetch_tidal_data(
    settings: DataSourceSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> TidalReading:
    """Fetch the latest tide level near Felixstowe.

    Never raises: any network or parse failure yields a simulated reading.

    Args:
        settings: Data source settings. Defaults to global settings.
        client: HTTP client to use. A short-lived client is created if omitted.

    Returns:
        TidalReading from the live gauge, or the simulated fallback.
    """
    if settings is None:
        settings = get_settings().data_sources

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as owned:
                reading = await _fetch_latest_reading(owned, settings)
        else:
            reading = await _fetch_latest_reading(client, settings)
        if reading is not None:
            return reading
    except FETCH_ERRORS as e:
        logger.warning("Could not fetch tidal data, using simulated: %s", e)

    return simulate_tidal_reading()


async def _fetch_latest_reading(
    client: httpx.AsyncClient,
    settings: DataSourceSettings,
) -> TidalReading | None:
    response = await client.get(
        f"{settings.ea_base_url}/id/stations",
        params={
            "type": "TideGauge",
            "lat": settings.search_lat,
            "long": settings.search_lon,
            "dist": settings.search_radius_km,
        },
    )
    response.raise_for_status()
    stations = response.json().get("items", [])
    if not stations:
        logger.info("No tide gauges found near %s", FelixstoweLocation.NAME)
        return None

    # Prefer Harwich, otherwise the first station returned
    station = next(
        (s for s in stations if s.get("stationReference") == settings.preferred_station),
        stations[0],
    )
    station_id = station.get("stationReference") or station["notation"]

    response = await client.get(
        f"{settings.ea_base_url}/id/stations/{station_id}/readings",
        params={"latest": ""},
    )
    response.raise_for_status()
    items = response.json().get("items", [])
    if not items:
        return None

    item = items[0]
    coordinates = None
    if station.get("lat") is not None and station.get("long") is not None:
        coordinates = Coordinates(lat=station["lat"], long=station["long"])

    return TidalReading(
        level=item["value"],
        unit=item.get("unitName") or "mAOD",
        station=station.get("label", station_id),
        time=datetime.fromisoformat(item["dateTime"]),
        station_id=station_id,
        coordinates=coordinates,
    )


async def fetch_historical_tidal_data(
    timestamp: datetime,
    settings: DataSourceSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> TidalReading:
    """Fetch the Harwich tide level closest to `timestamp`.

    Queries readings in a window of +/- `historical_window_minutes` and picks
    the one nearest in time. Falls back to `simulate_tidal_reading(timestamp)`.
    """
    if settings is None:
        settings = get_settings().data_sources

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as owned:
                reading = await _fetch_closest_reading(owned, timestamp, settings)
        else:
            reading = await _fetch_closest_reading(client, timestamp, settings)
        if reading is not None:
            return reading
    except FETCH_ERRORS as e:
        logger.warning("Could not fetch historical tidal data, using simulation: %s", e)

    return simulate_tidal_reading(timestamp)


async def _fetch_closest_reading(
    client: httpx.AsyncClient,
    timestamp: datetime,
    settings: DataSourceSettings,
) -> TidalReading | None:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    window = timedelta(minutes=settings.historical_window_minutes)
    station_id = settings.preferred_station

    response = await client.get(
        f"{settings.ea_base_url}/id/stations/{station_id}/readings",
        params={
            "startdate": _iso_utc(timestamp - window),
            "enddate": _iso_utc(timestamp + window),
        },
    )
    response.raise_for_status()
    items = response.json().get("items", [])
    if not items:
        return None

    def distance(item: dict) -> float:
        return abs((datetime.fromisoformat(item["dateTime"]) - timestamp).total_seconds())

    closest = min(items, key=distance)

    return TidalReading(
        level=closest["value"],
        unit=closest.get("unitName") or "mAOD",
        station=FelixstoweLocation.HARWICH_NAME,
        time=datetime.fromisoformat(closest["dateTime"]),
        station_id=station_id,
        coordinates=Coordinates(
            lat=FelixstoweLocation.HARWICH_LAT,
            long=FelixstoweLocation.HARWICH_LON,
        ),
    )


def _iso_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

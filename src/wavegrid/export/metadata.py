"""Provenance metadata for exported assets.

Every export carries one AssetMetadata record: the producing tool, its
input parameters and, when data-driven, a snapshot of the reading used.
The record is written either inside the SVG or beside a PNG as JSON; both
use `AssetMetadata.to_json()`.
"""

import logging
import secrets
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Literal, TypeAlias, assert_never

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wavegrid.core.config import ContentType, ExportSettings, get_settings
from wavegrid.core.constants import ASSET_ID_PREFIX, SECONDS_TO_MS
from wavegrid.data.readings import Coordinates, DataSource, ShipReading, TidalReading

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
_ID_RANDOM_LENGTH = 7


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Taxonomy(_Record):
    content_type: ContentType = Field(alias="contentType")
    tags: list[str] = Field(default_factory=list)


class TidalSnapshot(_Record):
    type: Literal["tidal"] = "tidal"
    station: str
    station_id: str | None = Field(default=None, alias="stationId")
    level: float
    unit: str
    coordinates: Coordinates | None = None
    timestamp: datetime


class ShipSnapshot(_Record):
    type: Literal["ships"] = "ships"
    total: int
    arrivals: int
    departures: int
    flow: int
    timestamp: datetime


DataSourceSnapshot: TypeAlias = Annotated[TidalSnapshot | ShipSnapshot, Field(discriminator="type")]


class AssetMetadata(_Record):
    """Provenance record for one exported asset. Never mutated after creation."""

    id: str
    app: str
    version: str
    timestamp: datetime  # export instant, distinct from the reading's time
    creator: str
    license: str
    taxonomy: Taxonomy | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    data_source: DataSourceSnapshot | None = Field(default=None, alias="dataSource")

    def to_json(self) -> str:
        """Canonical JSON serialisation (camelCase keys, absent fields omitted)."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    @classmethod
    def from_json(cls, text: str | bytes) -> "AssetMetadata":
        return cls.model_validate_json(text)


def generate_asset_id(now: datetime | None = None) -> str:
    """Unique asset id: ff-{epoch milliseconds}-{7 random base36 chars}."""
    if now is None:
        now = datetime.now(timezone.utc)
    millis = int(now.timestamp() * SECONDS_TO_MS)
    random_part = "".join(secrets.choice(_BASE36) for _ in range(_ID_RANDOM_LENGTH))
    return f"{ASSET_ID_PREFIX}-{millis}-{random_part}"


def snapshot_data_source(reading: DataSource) -> TidalSnapshot | ShipSnapshot:
    """Copy a reading into its metadata form, stamped with the reading time."""
    match reading:
        case TidalReading():
            return TidalSnapshot(
                station=reading.station,
                station_id=reading.station_id,
                level=reading.level,
                unit=reading.unit,
                coordinates=reading.coordinates,
                timestamp=reading.time,
            )
        case ShipReading():
            return ShipSnapshot(
                total=reading.total,
                arrivals=reading.arrivals,
                departures=reading.departures,
                flow=reading.flow,
                timestamp=reading.time,
            )
        case _:
            assert_never(reading)


def create_asset_metadata(
    app: str,
    parameters: dict[str, Any],
    data_source: DataSource | None = None,
    taxonomy: Taxonomy | None = None,
    *,
    settings: ExportSettings | None = None,
    now: datetime | None = None,
) -> AssetMetadata:
    """Build the provenance record for an export.

    Only the id and timestamp depend on when this is called; everything else
    is copied from the arguments and settings.

    Args:
        app: Producing tool name, e.g. "grid-generator".
        parameters: Tool inputs. Copied as-is, not interpreted.
        data_source: Reading that drove the render, if any.
        taxonomy: Optional content type and tags.
        settings: Export settings for version, creator and license.
        now: Export instant. Defaults to the current UTC time.
    """
    if settings is None:
        settings = get_settings().export
    if now is None:
        now = datetime.now(timezone.utc)

    # Millisecond precision, matching the id
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)

    return AssetMetadata(
        id=generate_asset_id(now),
        app=app,
        version=settings.schema_version,
        timestamp=now,
        creator=settings.creator,
        license=settings.license,
        taxonomy=taxonomy,
        parameters=dict(parameters),
        data_source=snapshot_data_source(data_source) if data_source is not None else None,
    )


def read_companion_json(path: Path) -> AssetMetadata | None:
    """Load metadata from a companion JSON file, or None if unreadable."""
    try:
        return AssetMetadata.from_json(Path(path).read_bytes())
    except OSError as e:
        logger.info("No companion metadata at %s: %s", path, e)
    except ValidationError as e:
        logger.info("Malformed companion metadata in %s: %s", path, e.error_count())
    return None

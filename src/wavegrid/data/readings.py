"""Real-world readings that drive the grid distortion."""

from datetime import datetime
from typing import Annotated, Literal, Self, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator


class Coordinates(BaseModel):
    """Station position (WGS84)."""

    model_config = ConfigDict(frozen=True)

    lat: float
    long: float


class TidalReading(BaseModel):
    """Tide gauge level at a point in time."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tidal"] = "tidal"
    level: float  # m above ordnance datum, typically -2..+4
    unit: str = "mAOD"
    station: str
    time: datetime
    station_id: str | None = None
    coordinates: Coordinates | None = None

    @property
    def is_simulated(self) -> bool:
        return "Simulated" in self.station


class ShipReading(BaseModel):
    """Vessel traffic counts at a point in time.

    `departures` and `flow` are derived from `total` and `arrivals`; the
    validator rejects readings where they disagree.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["ships"] = "ships"
    total: NonNegativeInt
    arrivals: NonNegativeInt
    departures: NonNegativeInt
    flow: int
    time: datetime

    @model_validator(mode="after")
    def check_conservation(self) -> Self:
        if self.arrivals > self.total:
            raise ValueError(f"arrivals ({self.arrivals}) exceed total ({self.total})")
        if self.arrivals + self.departures != self.total:
            raise ValueError("arrivals + departures must equal total")
        if self.flow != self.arrivals - self.departures:
            raise ValueError("flow must equal arrivals - departures")
        return self

    @classmethod
    def from_counts(cls, total: int, arrivals: int, time: datetime) -> Self:
        """Build a reading from the two independent counts."""
        departures = total - arrivals
        return cls(
            total=total,
            arrivals=arrivals,
            departures=departures,
            flow=arrivals - departures,
            time=time,
        )


DataSource: TypeAlias = Annotated[TidalReading | ShipReading, Field(discriminator="type")]

"""Configuration and settings for the grid generator."""

from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContentType(str, Enum):
    """Content taxonomy used to classify exported assets."""

    ARTICLE = "article"
    EVENT = "event"
    ARTWORK = "artwork"
    EXHIBITION = "exhibition"
    PROJECT = "project"
    ARCHIVE = "archive"


class FelixstoweLocation:
    """Geographic constants for the festival site and its tide gauge."""

    NAME = "Felixstowe"
    LAT = 52.06
    LON = 1.35
    TIMEZONE = "Europe/London"

    # Harwich tide gauge, ~12 km from Felixstowe
    HARWICH_STATION_ID = "E71439"
    HARWICH_NAME = "Harwich"
    HARWICH_LAT = 51.948
    HARWICH_LON = 1.292


class GridSettings(BaseSettings):
    """Grid geometry and stroke configuration."""

    model_config = SettingsConfigDict(env_prefix="GRID_")

    # Cells per axis
    size: int = Field(default=20, gt=0)

    # Square canvas edge (px)
    canvas_size: float = 800.0

    # Samples per line
    segments: int = Field(default=100, gt=0)

    stroke: str = "#000000"
    stroke_width: float = 1.0
    background: str = "#ffffff"


class WaveSettings(BaseSettings):
    """Base slider values fed to the wave parameter mapping."""

    model_config = SettingsConfigDict(env_prefix="WAVE_")

    base_amplitude: float = Field(default=15.0, ge=0)
    base_frequency: float = Field(default=2.0, gt=0)
    base_phase: float = 0.0


class DataSourceSettings(BaseSettings):
    """External data source configuration."""

    model_config = SettingsConfigDict()

    # UK Environment Agency flood monitoring API
    ea_base_url: str = "https://environment.data.gov.uk/flood-monitoring"

    # Station search around Felixstowe
    search_lat: float = FelixstoweLocation.LAT
    search_lon: float = FelixstoweLocation.LON
    search_radius_km: float = 50.0
    preferred_station: str = FelixstoweLocation.HARWICH_STATION_ID

    # Half-width of the window used for historical lookups (minutes)
    historical_window_minutes: int = 30

    # Optional ship count proxy; simulated traffic when unset
    ship_api_url: str | None = None

    request_timeout: float = 10.0


class ExportSettings(BaseSettings):
    """Export and provenance configuration."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    output_dir: Path = Path(".")

    # Metadata schema
    schema_version: str = "2.0.0"
    creator: str = "Crafting Table"
    license: str = "CC BY-SA 4.0"

    # Raster output resolution
    dpi: int = 100


class Settings(BaseSettings):
    """Master configuration aggregating all subsystems."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    grid: GridSettings = Field(default_factory=GridSettings)
    wave: WaveSettings = Field(default_factory=WaveSettings)
    data_sources: DataSourceSettings = Field(default_factory=DataSourceSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    debug: bool = False


def get_settings() -> Settings:
    """Load settings from environment and .env file."""
    return Settings()

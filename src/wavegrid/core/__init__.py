"""Core configuration, constants and types."""

from wavegrid.core.config import ContentType, Settings, get_settings
from wavegrid.core.types import Direction, Point, RandomSource

__all__ = [
    "ContentType",
    "Direction",
    "Point",
    "RandomSource",
    "Settings",
    "get_settings",
]

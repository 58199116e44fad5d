"""Timestamp extraction for photos and previously exported assets.

Used by the tide table workflow: the timestamp of an uploaded file selects
which historical tide reading drives the grid.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal

from PIL import Image, UnidentifiedImageError

from wavegrid.export.metadata import read_companion_json

logger = logging.getLogger(__name__)

# EXIF tags
EXIF_IFD_POINTER = 0x8769
TAG_DATETIME = 0x0132
TAG_DATETIME_ORIGINAL = 0x9003
TAG_DATETIME_DIGITIZED = 0x9004

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".tif", ".tiff", ".webp", ".heic"}


class TimestampSource(str, Enum):
    EXIF = "exif"
    JSON = "json"
    FILE = "file"
    MANUAL = "manual"


Confidence = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class ExtractedTimestamp:
    """A timestamp and where it came from."""

    timestamp: datetime
    source: TimestampSource
    confidence: Confidence
    original_filename: str | None = None


def extract_timestamp_from_image(path: Path) -> ExtractedTimestamp | None:
    """Read the capture time from EXIF.

    Prefers DateTimeOriginal, then DateTimeDigitized, then DateTime.
    """
    try:
        with Image.open(path) as img:
            exif = img.getexif()
    except (OSError, UnidentifiedImageError) as e:
        logger.info("Failed to read EXIF from %s: %s", path.name, e)
        return None

    # Capture times normally live in the Exif sub-IFD; some writers put them in IFD0
    exif_ifd = exif.get_ifd(EXIF_IFD_POINTER)
    candidates: list[tuple[object, Confidence]] = [
        (exif_ifd.get(TAG_DATETIME_ORIGINAL) or exif.get(TAG_DATETIME_ORIGINAL), "high"),
        (exif_ifd.get(TAG_DATETIME_DIGITIZED) or exif.get(TAG_DATETIME_DIGITIZED), "medium"),
        (exif.get(TAG_DATETIME), "low"),
    ]

    for raw, confidence in candidates:
        if not raw:
            continue
        try:
            timestamp = datetime.strptime(str(raw).strip("\x00 "), EXIF_DATETIME_FORMAT)
        except ValueError:
            continue
        return ExtractedTimestamp(
            timestamp=timestamp,
            source=TimestampSource.EXIF,
            confidence=confidence,
            original_filename=path.name,
        )

    return None


def extract_timestamp_from_json(path: Path) -> ExtractedTimestamp | None:
    """Read the export time from a companion metadata file."""
    metadata = read_companion_json(path)
    if metadata is None:
        return None

    return ExtractedTimestamp(
        timestamp=metadata.timestamp,
        source=TimestampSource.JSON,
        confidence="high",
        original_filename=path.name,
    )


def extract_timestamp_from_file(path: Path) -> ExtractedTimestamp:
    """Fall back to the file's modification time."""
    return ExtractedTimestamp(
        timestamp=datetime.fromtimestamp(path.stat().st_mtime),
        source=TimestampSource.FILE,
        confidence="low",
        original_filename=path.name,
    )


def extract_timestamp(path: Path) -> ExtractedTimestamp:
    """Extract a timestamp from any file, most reliable method first."""
    suffix = path.suffix.lower()

    if suffix == ".json":
        result = extract_timestamp_from_json(path)
        if result is not None:
            return result

    if suffix in IMAGE_SUFFIXES:
        result = extract_timestamp_from_image(path)
        if result is not None:
            return result

    return extract_timestamp_from_file(path)


def parse_manual_timestamp(text: str) -> datetime | None:
    """Parse a user-entered ISO 8601 timestamp, or None if it is not one."""
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return None

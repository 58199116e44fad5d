"""Export pipeline: rendered grid paths to files on disk.

Vector exports embed the metadata inside the SVG. Raster exports write a
PNG plus a same-stem JSON companion. Either every artifact of an export is
written or none is.

State per export:
    idle -> rendering -> serializing -> embedding-metadata -> downloaded   (SVG)
    idle -> rendering -> serializing -> writing-companion-file -> downloaded   (PNG)

A failure at any step raises ExportError and returns the pipeline to idle.
"""

import logging
import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from wavegrid.core.config import ExportSettings, get_settings
from wavegrid.export.metadata import AssetMetadata
from wavegrid.export.raster import rasterize_paths
from wavegrid.export.svg import (
    GridStyle,
    build_svg_document,
    embed_svg_metadata,
    extract_svg_metadata,
    serialize_svg,
)
from wavegrid.models.grid import Bounds, LinePath

# Configure module logger
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

COMPANION_SUFFIX = ".json"


class ExportState(str, Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    SERIALIZING = "serializing"
    EMBEDDING_METADATA = "embedding-metadata"
    WRITING_COMPANION = "writing-companion-file"
    DOWNLOADED = "downloaded"


class ExportError(RuntimeError):
    """An export step failed; no files were left behind."""

    def __init__(self, message: str, state: ExportState):
        super().__init__(f"{message} (while {state.value})")
        self.state = state


@dataclass(frozen=True)
class ExportResult:
    """Files produced by one export."""

    path: Path
    companion: Path | None = None
    metadata: AssetMetadata | None = None


def generate_filename(
    tool_name: str,
    extension: str,
    suffix: str = "",
    now: datetime | None = None,
) -> str:
    """Build `{tool}-{YYYY-MM-DDTHH-MM-SS}[-{suffix}].{ext}` in UTC.

    Names from the same tool sort lexically by export time.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    suffix_part = f"-{suffix}" if suffix else ""
    return f"{tool_name}-{stamp}{suffix_part}.{extension.lstrip('.')}"


def companion_path(image_path: Path) -> Path:
    """Sibling metadata file for a raster export: same stem, .json."""
    return Path(image_path).with_suffix(COMPANION_SUFFIX)


def write_artifacts(artifacts: dict[Path, bytes]) -> None:
    """Write several files so that either all of them appear or none do.

    Each file is first written to a temporary sibling, then all are moved
    into place. Files being overwritten are moved aside first. Any failure
    removes whatever was already written and puts the previous files back.
    """
    staged: dict[Path, Path] = {}
    backups: dict[Path, Path] = {}
    placed: list[Path] = []
    try:
        for target, data in artifacts.items():
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".part")
            staged[target] = Path(tmp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        for target, tmp in staged.items():
            if target.exists():
                backup = tmp.with_suffix(".bak")
                os.replace(target, backup)
                backups[target] = backup
            os.replace(tmp, target)
            placed.append(target)
    except OSError:
        for tmp in staged.values():
            tmp.unlink(missing_ok=True)
        for target in placed:
            target.unlink(missing_ok=True)
        for target, backup in backups.items():
            os.replace(backup, target)
        raise

    for backup in backups.values():
        backup.unlink(missing_ok=True)


class ExportPipeline:
    """Serializes grid paths to SVG or PNG with provenance metadata.

    Single-threaded: one export runs at a time per pipeline instance, and
    nothing is cached between exports.
    """

    def __init__(
        self,
        bounds: Bounds,
        style: GridStyle | None = None,
        output_dir: Path | None = None,
        settings: ExportSettings | None = None,
        log_fn=None,
    ):
        if settings is None:
            settings = get_settings().export
        self.bounds = bounds
        self.style = style or GridStyle()
        self.output_dir = Path(output_dir if output_dir is not None else settings.output_dir)
        self.dpi = settings.dpi
        self.log = log_fn or logger.info

        self._state = ExportState.IDLE

    @property
    def state(self) -> ExportState:
        return self._state

    def _enter(self, state: ExportState) -> None:
        self._state = state
        logger.debug("export state: %s", state.value)

    def _resolve(self, filename: str | Path) -> Path:
        path = Path(filename)
        return path if path.is_absolute() else self.output_dir / path

    def _check_renderable(self, paths: list[LinePath]) -> None:
        if not paths:
            raise ExportError("nothing to render", self._state)

    def export_vector(
        self,
        paths: list[LinePath],
        metadata: AssetMetadata | None,
        filename: str | Path,
    ) -> ExportResult:
        """Write an SVG with `metadata` embedded in a <metadata> block.

        The written document is checked to yield `metadata` back before it
        is placed on disk.
        """
        target = self._resolve(filename)
        try:
            self._enter(ExportState.RENDERING)
            self._check_renderable(paths)
            document = build_svg_document(paths, self.bounds, self.style)

            self._enter(ExportState.SERIALIZING)
            if metadata is not None:
                self._enter(ExportState.EMBEDDING_METADATA)
                document = embed_svg_metadata(document, metadata)
            text = serialize_svg(document)

            if metadata is not None:
                recovered = extract_svg_metadata(text)
                if recovered is None or recovered.to_json() != metadata.to_json():
                    raise ExportError("embedded metadata does not round-trip", self._state)

            write_artifacts({target: text.encode("utf-8")})
        except ExportError:
            self._enter(ExportState.IDLE)
            raise
        except (OSError, ValueError) as e:
            failed = self._state
            self._enter(ExportState.IDLE)
            raise ExportError(str(e), failed) from e

        self._enter(ExportState.DOWNLOADED)
        self.log(f"Exported {target.name} ({len(paths)} paths)")
        return ExportResult(path=target, metadata=metadata)

    def export_raster(
        self,
        paths: list[LinePath],
        metadata: AssetMetadata | None,
        filename: str | Path,
    ) -> ExportResult:
        """Write a PNG and, when `metadata` is given, its JSON companion."""
        target = self._resolve(filename)
        try:
            self._enter(ExportState.RENDERING)
            self._check_renderable(paths)

            self._enter(ExportState.SERIALIZING)
            png = rasterize_paths(paths, self.bounds, self.style, self.dpi)
            artifacts = {target: png}

            companion = None
            if metadata is not None:
                self._enter(ExportState.WRITING_COMPANION)
                companion = companion_path(target)
                artifacts[companion] = metadata.to_json().encode("utf-8")

            write_artifacts(artifacts)
        except ExportError:
            self._enter(ExportState.IDLE)
            raise
        except (OSError, ValueError) as e:
            failed = self._state
            self._enter(ExportState.IDLE)
            raise ExportError(str(e), failed) from e

        self._enter(ExportState.DOWNLOADED)
        if companion is not None:
            self.log(f"Exported {target.name} with {companion.name}")
        else:
            self.log(f"Exported {target.name}")
        return ExportResult(path=target, companion=companion, metadata=metadata)

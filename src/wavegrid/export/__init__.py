"""Asset export: SVG/PNG serialization and provenance metadata."""

from wavegrid.export.metadata import (
    AssetMetadata,
    ShipSnapshot,
    Taxonomy,
    TidalSnapshot,
    create_asset_metadata,
    generate_asset_id,
    read_companion_json,
)
from wavegrid.export.pipeline import (
    ExportError,
    ExportPipeline,
    ExportResult,
    ExportState,
    companion_path,
    generate_filename,
)
from wavegrid.export.svg import GridStyle, embed_svg_metadata, extract_svg_metadata

__all__ = [
    "AssetMetadata",
    "ExportError",
    "ExportPipeline",
    "ExportResult",
    "ExportState",
    "GridStyle",
    "ShipSnapshot",
    "Taxonomy",
    "TidalSnapshot",
    "companion_path",
    "create_asset_metadata",
    "embed_svg_metadata",
    "extract_svg_metadata",
    "generate_asset_id",
    "generate_filename",
    "read_companion_json",
]

"""SVG document construction and embedded metadata."""

import copy
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from pydantic import ValidationError

from wavegrid.core.config import GridSettings
from wavegrid.export.metadata import AssetMetadata
from wavegrid.models.grid import Bounds, LinePath

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
METADATA_TAG = f"{{{SVG_NS}}}metadata"
METADATA_ID = "asset-metadata"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

ET.register_namespace("", SVG_NS)


@dataclass(frozen=True)
class GridStyle:
    """Stroke and fill used for both vector and raster output."""

    stroke: str = "#000000"
    stroke_width: float = 1.0
    background: str = "#ffffff"

    @classmethod
    def from_settings(cls, settings: GridSettings) -> "GridStyle":
        return cls(
            stroke=settings.stroke,
            stroke_width=settings.stroke_width,
            background=settings.background,
        )


def _num(value: float) -> str:
    return f"{value:g}"


def build_svg_document(
    paths: list[LinePath],
    bounds: Bounds,
    style: GridStyle | None = None,
) -> ET.Element:
    """Background rect followed by one <path> per line, in render order."""
    if style is None:
        style = GridStyle()

    root = ET.Element(
        f"{{{SVG_NS}}}svg",
        {
            "width": _num(bounds.width),
            "height": _num(bounds.height),
            "viewBox": f"{_num(bounds.x)} {_num(bounds.y)} {_num(bounds.width)} {_num(bounds.height)}",
        },
    )
    ET.SubElement(
        root,
        f"{{{SVG_NS}}}rect",
        {
            "x": _num(bounds.x),
            "y": _num(bounds.y),
            "width": _num(bounds.width),
            "height": _num(bounds.height),
            "fill": style.background,
        },
    )
    for path in paths:
        ET.SubElement(
            root,
            f"{{{SVG_NS}}}path",
            {
                "d": path.d,
                "stroke": style.stroke,
                "stroke-width": _num(style.stroke_width),
                "fill": "none",
                "data-direction": path.direction,
                "data-index": str(path.index),
            },
        )
    return root


def embed_svg_metadata(svg: ET.Element, metadata: AssetMetadata) -> ET.Element:
    """Return a copy of `svg` with `metadata` as its first child.

    Any existing <metadata> block is replaced, so a document holds at most one.
    """
    svg = copy.deepcopy(svg)
    for existing in svg.findall(METADATA_TAG):
        svg.remove(existing)

    block = ET.Element(METADATA_TAG, {"id": METADATA_ID})
    block.text = "\n" + metadata.to_json() + "\n"
    svg.insert(0, block)
    return svg


def serialize_svg(svg: ET.Element) -> str:
    return XML_DECLARATION + ET.tostring(svg, encoding="unicode")


def extract_svg_metadata(svg_text: str | bytes) -> AssetMetadata | None:
    """Read the embedded metadata back from an SVG document.

    Returns None when the document has no metadata block or either the
    document or the block cannot be parsed.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        logger.info("Failed to parse SVG: %s", e)
        return None

    block = root.find(METADATA_TAG)
    if block is None or not (block.text or "").strip():
        return None

    try:
        return AssetMetadata.from_json(block.text.strip())
    except ValidationError as e:
        logger.info("Failed to extract SVG metadata: %d errors", e.error_count())
        return None

"""PNG rendering of grid paths using matplotlib."""

import io

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from wavegrid.export.svg import GridStyle
from wavegrid.models.grid import Bounds, LinePath

# Use non-interactive backend
matplotlib.use("Agg")

POINTS_PER_INCH = 72


def rasterize_paths(
    paths: list[LinePath],
    bounds: Bounds,
    style: GridStyle | None = None,
    dpi: int = 100,
) -> bytes:
    """Render paths to PNG bytes at one pixel per drawing unit.

    The y axis points down, matching SVG coordinates.
    """
    if not paths:
        raise ValueError("nothing to render")
    if style is None:
        style = GridStyle()

    fig = plt.figure(figsize=(bounds.width / dpi, bounds.height / dpi), dpi=dpi)
    try:
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_xlim(bounds.x, bounds.x + bounds.width)
        ax.set_ylim(bounds.y + bounds.height, bounds.y)
        ax.set_axis_off()
        fig.patch.set_facecolor(style.background)

        # Stroke width is in pixels; matplotlib wants points
        lines = LineCollection(
            [path.line.as_array() for path in paths],
            colors=style.stroke,
            linewidths=style.stroke_width * POINTS_PER_INCH / dpi,
        )
        ax.add_collection(lines)

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=dpi, facecolor=style.background)
        return buf.getvalue()
    finally:
        plt.close(fig)

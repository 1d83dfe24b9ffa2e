"""Drawing surface -- dot list to SVG markup under the shared viewport.

Viewport contract (used identically by every output format)::

    total_radius = spread + dot_size / 1000 + padding / 100
    viewBox      = [-total_radius, -total_radius, 2 * total_radius, 2 * total_radius]

The surface is what the vector and raster exporters serialize.  The
page-description exporter works from the dot list directly and only
reuses ``total_radius``.

Numbers are written the way a browser serializes attribute values
(shortest round-trip form, integral values without ".0"), so markup for a
given dot list is byte-stable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import StringIO
from typing import Sequence

from eightsix.configs.loader import GeneratorConfig
from eightsix.pattern.generator import Dot
from eightsix.utils.formatting import js_number

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class ExportError(Exception):
    """Raised when an export cannot produce its output file."""

    pass


# ---------------------------------------------------------------------------
# Viewport
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ViewBox:
    """SVG viewBox: origin and extent in abstract units."""

    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def half_size(self) -> float:
        return self.width / 2

    def to_attribute(self) -> str:
        return " ".join(
            js_number(v) for v in (self.min_x, self.min_y, self.width, self.height)
        )


def viewport(config: GeneratorConfig) -> ViewBox:
    """Square viewBox centred on the origin for *config*."""
    total_radius = config.total_radius
    size = total_radius * 2
    start = -total_radius
    return ViewBox(min_x=start, min_y=start, width=size, height=size)


# ---------------------------------------------------------------------------
# Surface
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DotSurface:
    """A rendered drawing surface.

    Parameters
    ----------
    markup : str
        Complete, self-contained SVG document.
    view_box : ViewBox
        Viewport the markup was rendered with.
    """

    markup: str
    view_box: ViewBox

    def to_bytes(self) -> bytes:
        return self.markup.encode("utf-8")


def _circle(dot: Dot) -> str:
    return (
        f'<circle cx="{js_number(dot.x)}" cy="{js_number(dot.y)}" '
        f'r="{js_number(dot.r)}" fill="{dot.color}"/>'
    )


def render_surface(dots: Sequence[Dot], config: GeneratorConfig) -> DotSurface:
    """Draw *dots* in list order onto a fresh SVG surface.

    Parameters
    ----------
    dots : Sequence[Dot]
        Generated dots (draw order).
    config : GeneratorConfig
        Supplies the viewport (spread, dot size, padding).

    Returns
    -------
    DotSurface
    """
    view_box = viewport(config)

    buf = StringIO()
    buf.write(f'<svg xmlns="{SVG_NAMESPACE}" viewBox="{view_box.to_attribute()}">')
    buf.write("<g>")
    for dot in dots:
        buf.write(_circle(dot))
    buf.write("</g>")
    buf.write("</svg>")

    logger.debug("Rendered surface with %d dots, viewBox=%s", len(dots), view_box.to_attribute())
    return DotSurface(markup=buf.getvalue(), view_box=view_box)

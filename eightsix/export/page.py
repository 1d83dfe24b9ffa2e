"""Page-description export -- dot list to Encapsulated PostScript.

Works from the dot list and config directly, independent of any drawing
surface.  The page is a fixed ``500 x 500`` document:

    total_radius = spread + dot_size / 1000 + padding / 100
    max_extent   = max(1.1, total_radius)
    scale        = (500 / 2) / max_extent

so ``scale * max_extent`` is always half the document and small patterns
are never blown up past the 1.1 floor.

Coordinate frame:
    Dots use +Y down (SVG convention).  PostScript uses +Y up, so after
    translating to the page centre and scaling, the program applies
    ``1 -1 scale``.  Dot coordinates are emitted untouched.

Gray level convention:
    PostScript ``setgray`` takes 0 = black, so each dot is written as
    ``1 - value`` with 3 decimals; ``x y r`` use 4 decimals.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from io import StringIO
from pathlib import Path
from typing import Sequence

from eightsix.configs.loader import GeneratorConfig
from eightsix.pattern.generator import Dot
from eightsix.utils import fs
from eightsix.utils.formatting import js_number, to_fixed
from eightsix.utils.hashing import sha256_bytes

logger = logging.getLogger(__name__)

EPS_MIME_TYPE = "application/postscript"
EPS_EXTENSION = ".eps"
DOCUMENT_SIZE = 500
MIN_EXTENT = 1.1
CREATOR = "Eightsix Science Logo Generator"
CIRCLE_PROC = "c"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def page_scale(
    config: GeneratorConfig, document_size: float = DOCUMENT_SIZE,
) -> tuple[float, float]:
    """Return ``(max_extent, scale)`` mapping pattern units to page points."""
    max_extent = max(MIN_EXTENT, config.total_radius)
    scale = (document_size / 2) / max_extent
    return max_extent, scale


def _iso_timestamp(created: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return created.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def build_page(
    dots: Sequence[Dot],
    config: GeneratorConfig,
    title: str,
    created: datetime | None = None,
    document_size: float = DOCUMENT_SIZE,
) -> str:
    """Build the complete EPS program text.

    Parameters
    ----------
    dots : Sequence[Dot]
        Dots in draw order.
    config : GeneratorConfig
        Supplies spread, dot size and padding for framing.
    title : str
        Value of the ``%%Title`` comment (the export filename).
    created : datetime | None
        Creation timestamp; defaults to now (UTC).
    document_size : float
        Page edge in points, default 500.

    Returns
    -------
    str
        EPS document ending in ``%%EOF`` (no trailing newline).
    """
    created = created or datetime.now(timezone.utc)
    center = document_size / 2
    _, scale = page_scale(config, document_size)
    size_text = js_number(document_size)

    buf = StringIO()

    # -- header -----------------------------------------------------------
    buf.write("%!PS-Adobe-3.0 EPSF-3.0\n")
    buf.write(f"%%BoundingBox: 0 0 {size_text} {size_text}\n")
    buf.write(f"%%Title: {title}\n")
    buf.write(f"%%Creator: {CREATOR}\n")
    buf.write(f"%%CreationDate: {_iso_timestamp(created)}\n")
    buf.write("%%EndComments\n")
    buf.write("\n")

    # -- filled circle primitive: x y r c ----------------------------------
    buf.write(f"/{CIRCLE_PROC} {{ 0 360 arc fill }} bind def\n")
    buf.write("\n")

    # -- transform: centre, scale, flip Y ---------------------------------
    buf.write(f"{js_number(center)} {js_number(center)} translate\n")
    buf.write(f"{js_number(scale)} {js_number(scale)} scale\n")
    buf.write("1 -1 scale % flip Y: pattern coordinates are Y-down\n")
    buf.write("\n")

    # -- dots ---------------------------------------------------------------
    for dot in dots:
        buf.write(f"{to_fixed(1 - dot.value, 3)} setgray\n")
        buf.write(
            f"{to_fixed(dot.x, 4)} {to_fixed(dot.y, 4)} {to_fixed(dot.r, 4)} {CIRCLE_PROC}\n"
        )

    buf.write("\n%%EOF")
    return buf.getvalue()


def export_page(
    dots: Sequence[Dot],
    config: GeneratorConfig,
    filename: str,
    output_dir: str | Path = ".",
    created: datetime | None = None,
    document_size: float = DOCUMENT_SIZE,
) -> Path:
    """Save the EPS document as ``<output_dir>/<filename>.eps``.

    Returns
    -------
    Path
        Written file.
    """
    path = Path(output_dir) / f"{filename}{EPS_EXTENSION}"
    text = build_page(dots, config, filename, created=created, document_size=document_size)
    data = text.encode("utf-8")
    fs.atomic_write_bytes(path, data)
    logger.info(
        "Wrote %s (%s, %d dots, %d bytes, sha256 %s)",
        path, EPS_MIME_TYPE, len(dots), len(data), sha256_bytes(data)[:12],
    )
    return path

"""Vector export -- write the surface markup verbatim as an .svg file."""

from __future__ import annotations

import logging
from pathlib import Path

from eightsix.export.surface import DotSurface
from eightsix.utils import fs
from eightsix.utils.hashing import sha256_bytes

logger = logging.getLogger(__name__)

SVG_MIME_TYPE = "image/svg+xml;charset=utf-8"
SVG_EXTENSION = ".svg"


def export_vector(
    surface: DotSurface,
    filename: str,
    output_dir: str | Path = ".",
) -> Path:
    """Save *surface* as ``<output_dir>/<filename>.svg``.

    No coordinate transform is applied; the file reuses the surface's
    viewBox.

    Returns
    -------
    Path
        Written file.
    """
    path = Path(output_dir) / f"{filename}{SVG_EXTENSION}"
    data = surface.to_bytes()
    fs.atomic_write_bytes(path, data)
    logger.info(
        "Wrote %s (%s, %d bytes, sha256 %s)",
        path, SVG_MIME_TYPE, len(data), sha256_bytes(data)[:12],
    )
    return path

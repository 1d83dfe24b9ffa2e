"""Export one dot snapshot to several formats.

The surface is rendered once and every requested format is written from
that same dot list, so SVG, PNG and EPS files of one export action match
up to encoding and rounding.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, Sequence

from eightsix.configs.loader import GeneratorConfig
from eightsix.export.page import export_page
from eightsix.export.raster import DEFAULT_SIZE, export_raster
from eightsix.export.surface import render_surface
from eightsix.export.vector import export_vector
from eightsix.pattern.generator import Dot

logger = logging.getLogger(__name__)

FORMATS: tuple[str, ...] = ("svg", "png", "eps")
FILENAME_PREFIX = "eightsix-logo"


def default_filename(now_ms: int | None = None) -> str:
    """``eightsix-logo-<epoch milliseconds>``."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{FILENAME_PREFIX}-{now_ms}"


def export_bundle(
    dots: Sequence[Dot],
    config: GeneratorConfig,
    filename: str,
    output_dir: str | Path = ".",
    formats: Iterable[str] = FORMATS,
    size: int = DEFAULT_SIZE,
) -> dict[str, Path]:
    """Write *dots* in each of *formats*.

    Parameters
    ----------
    dots : Sequence[Dot]
        The snapshot to export; never regenerated here.
    config : GeneratorConfig
        Framing (spread, dot size, padding).
    filename : str
        Shared file stem.
    output_dir : str | Path
        Destination directory.
    formats : Iterable[str]
        Any of ``"svg"``, ``"png"``, ``"eps"``; duplicates are ignored.
    size : int
        PNG edge length in pixels.

    Returns
    -------
    dict[str, Path]
        Format -> written file, in request order.

    Raises
    ------
    ValueError
        If an unknown format is requested (checked before writing anything).
    ExportError
        If an exporter fails; files already written are kept.
    """
    requested = list(dict.fromkeys(fmt.lower() for fmt in formats))
    unknown = [fmt for fmt in requested if fmt not in FORMATS]
    if unknown:
        raise ValueError(f"Unknown export format(s) {unknown}; choose from {list(FORMATS)}")

    snapshot = tuple(dots)
    surface = None
    if "svg" in requested or "png" in requested:
        surface = render_surface(snapshot, config)

    written: dict[str, Path] = {}
    for fmt in requested:
        if fmt == "svg":
            written[fmt] = export_vector(surface, filename, output_dir)
        elif fmt == "png":
            written[fmt] = export_raster(surface, filename, output_dir, size=size)
        else:
            written[fmt] = export_page(snapshot, config, filename, output_dir)

    logger.debug("Exported %s for %s", ", ".join(written), filename)
    return written

"""Raster export -- surface markup to a transparent PNG.

Two explicit stages instead of a load callback:

1. **Decode.**  The SVG bytes are submitted to a worker that runs
   cairosvg and returns the decoded RGBA bitmap as a future.  The caller
   blocks on that future (optionally with a timeout); nothing is drawn
   before decoding has finished.
2. **Rasterize.**  A fully transparent ``size x size`` RGBA canvas is
   allocated, the decoded image is composited over it scaled to fill the
   canvas exactly, and the result is encoded to PNG in memory.

The PNG buffer is written with a single atomic rename, so a failed
export leaves no file behind.  Every failure (decoder error, timeout,
canvas allocation) is reported as :class:`RasterExportError`.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path

import numpy as np
from PIL import Image

from eightsix.export.surface import DotSurface, ExportError
from eightsix.utils import fs
from eightsix.utils.hashing import sha256_bytes

logger = logging.getLogger(__name__)

PNG_MIME_TYPE = "image/png"
PNG_EXTENSION = ".png"
DEFAULT_SIZE = 2048


class RasterExportError(ExportError):
    """Raised when the bitmap cannot be decoded, allocated or encoded."""

    pass


# ---------------------------------------------------------------------------
# Stage 1: decode
# ---------------------------------------------------------------------------


def decode_svg(svg_bytes: bytes, size: int) -> Image.Image:
    """Render SVG bytes to an RGBA image of ``size x size`` pixels.

    cairosvg is imported on first use; it needs the native cairo library.
    """
    import cairosvg

    png = cairosvg.svg2png(
        bytestring=svg_bytes,
        output_width=size,
        output_height=size,
        parent_width=size,
        parent_height=size,
    )
    image = Image.open(io.BytesIO(png))
    image.load()
    return image.convert("RGBA")


# ---------------------------------------------------------------------------
# Stage 2: rasterize
# ---------------------------------------------------------------------------


def allocate_canvas(size: int) -> Image.Image:
    """Allocate a fully transparent square RGBA canvas.

    Raises
    ------
    RasterExportError
        If *size* is not positive or the bitmap cannot be allocated.
    """
    if size <= 0:
        raise RasterExportError(f"Raster size must be positive, got {size}")
    try:
        return Image.new("RGBA", (size, size), (0, 0, 0, 0))
    except (MemoryError, ValueError) as e:
        raise RasterExportError(f"Cannot allocate {size}x{size} canvas: {e}") from e


def rasterize(decoded: Image.Image, size: int) -> np.ndarray:
    """Composite *decoded* onto a transparent canvas, filling it exactly.

    Returns
    -------
    np.ndarray
        (size, size, 4) uint8 RGBA pixels.
    """
    canvas = allocate_canvas(size)
    if decoded.size != (size, size):
        decoded = decoded.resize((size, size), Image.Resampling.LANCZOS)
    canvas.alpha_composite(decoded)
    return np.asarray(canvas, dtype=np.uint8)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def render_png(
    surface: DotSurface,
    size: int = DEFAULT_SIZE,
    decode_timeout: float | None = None,
) -> bytes:
    """Run both stages and return the encoded PNG bytes.

    Raises
    ------
    RasterExportError
        On decode failure, decode timeout or canvas allocation failure.
    """
    if size <= 0:
        raise RasterExportError(f"Raster size must be positive, got {size}")

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="svg-decode")
    try:
        future = executor.submit(decode_svg, surface.to_bytes(), size)
        decoded = future.result(timeout=decode_timeout)
    except FutureTimeoutError as e:
        raise RasterExportError(
            f"SVG decode did not finish within {decode_timeout}s"
        ) from e
    except Exception as e:
        raise RasterExportError(f"SVG decode failed: {e}") from e
    finally:
        # A timed-out decode is abandoned, not awaited
        executor.shutdown(wait=False, cancel_futures=True)

    pixels = rasterize(decoded, size)
    return fs.encode_image(pixels, "PNG")


def export_raster(
    surface: DotSurface,
    filename: str,
    output_dir: str | Path = ".",
    size: int = DEFAULT_SIZE,
    decode_timeout: float | None = None,
) -> Path:
    """Save *surface* as a ``size x size`` PNG at ``<output_dir>/<filename>.png``.

    Parameters
    ----------
    surface : DotSurface
        Rendered surface (same snapshot as the other formats).
    filename : str
        File name without extension.
    output_dir : str | Path
        Destination directory, created if missing.
    size : int
        Bitmap edge length in pixels, default 2048.
    decode_timeout : float | None
        Seconds to wait for the decode stage; None waits indefinitely.

    Returns
    -------
    Path
        Written file.

    Raises
    ------
    RasterExportError
        If no bitmap could be produced.  No file is written in that case.
    """
    path = Path(output_dir) / f"{filename}{PNG_EXTENSION}"
    data = render_png(surface, size=size, decode_timeout=decode_timeout)
    fs.atomic_write_bytes(path, data)
    logger.info(
        "Wrote %s (%s, %dx%d, %d bytes, sha256 %s)",
        path, PNG_MIME_TYPE, size, size, len(data), sha256_bytes(data)[:12],
    )
    return path

"""
Export module.

Serializes a generated dot list to SVG (vector), PNG (raster) and EPS
(page description).  All three honour the same viewport contract.
"""

from eightsix.export.bundle import FORMATS, default_filename, export_bundle
from eightsix.export.page import build_page, export_page, page_scale
from eightsix.export.raster import RasterExportError, export_raster, render_png
from eightsix.export.surface import (
    DotSurface,
    ExportError,
    ViewBox,
    render_surface,
    viewport,
)
from eightsix.export.vector import export_vector

__all__ = [
    "FORMATS",
    "DotSurface",
    "ExportError",
    "RasterExportError",
    "ViewBox",
    "build_page",
    "default_filename",
    "export_bundle",
    "export_page",
    "export_raster",
    "export_vector",
    "page_scale",
    "render_png",
    "render_surface",
    "viewport",
]

"""Eightsix: text-seeded dot pattern generator and multi-format exporter.

This package turns a text string plus a handful of numeric settings into a
reproducible pattern of 86 gray dots on six concentric rings, and writes
that pattern as SVG, PNG or EPS.

Architecture layers (strict one-way dependency):
    cli → export/ → pattern/, configs/ → utils/

Key invariants:
    - Exactly 86 dots per generation, indices 0..85 in draw order
    - Same (text, dot size, spread, seed) always gives the same dots
    - Seeds are wrapped to 32 bits; seeds equal mod 2**32 are equivalent
    - Padding frames exports only and never changes the dots
    - One viewport contract for every format:
      total_radius = spread + dot_size / 1000 + padding / 100
"""

from eightsix.configs.loader import (
    ConfigError,
    GeneratorConfig,
    apply_config_json,
    config_to_json,
    load_config,
)
from eightsix.export import (
    ExportError,
    RasterExportError,
    export_bundle,
    export_page,
    export_raster,
    export_vector,
    render_surface,
)
from eightsix.pattern.generator import Dot, generate_dots, generate_from_config

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "Dot",
    "ExportError",
    "GeneratorConfig",
    "RasterExportError",
    "apply_config_json",
    "config_to_json",
    "export_bundle",
    "export_page",
    "export_raster",
    "export_vector",
    "generate_dots",
    "generate_from_config",
    "load_config",
    "render_surface",
]

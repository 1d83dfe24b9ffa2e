"""
Pattern generation.

Turns text and a seed into the fixed 86-dot ring pattern.  Pure functions
only; nothing here knows about output formats.
"""

from eightsix.pattern.generator import (
    DOT_COUNT,
    RING_COUNTS,
    Dot,
    coerce_seed,
    generate_dots,
    generate_from_config,
    mulberry32,
    ring_positions,
    seeded_permutation,
)

__all__ = [
    "DOT_COUNT",
    "RING_COUNTS",
    "Dot",
    "coerce_seed",
    "generate_dots",
    "generate_from_config",
    "mulberry32",
    "ring_positions",
    "seeded_permutation",
]

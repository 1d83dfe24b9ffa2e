"""Pattern generator -- text + seed to 86 gray-scale dots.

The generator is a pure function: identical inputs always produce an
identical, order-stable dot list, and no input makes it fail.

Pipeline::

    seed ──► mulberry32 ──► Fisher-Yates ──► spatial map (permutation of 0..85)
                                                  │
    ring layout (1, 6, 12, 18, 24, 25) ──► slot ──┴──► text[map[slot] % len]
                                                              │
                                                  token_darkness ──► Dot

Draw order vs sampling order:
    ``Dot.index`` follows ring-then-angle iteration (ring 0 first, each
    ring clockwise from the top).  The spatial map only decides *which
    character* colours each slot, so neighbouring characters of the text
    are scattered across the rings.

Coordinates:
    Abstract units centred on the origin, +Y pointing down (SVG
    convention).  The outer ring sits at ``radius_scale``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING

from eightsix.utils.color import darkness_to_hex, token_darkness
from eightsix.utils.text import utf16_code_units

if TYPE_CHECKING:
    from eightsix.configs.loader import GeneratorConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DOT_COUNT = 86

RING_COUNTS: tuple[int, ...] = (1, 6, 12, 18, 24, 25)
"""Dots per concentric ring, centre outwards.  Sums to ``DOT_COUNT``."""

_UINT32 = 0xFFFFFFFF
_MULBERRY_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Dot:
    """One generated dot.

    Parameters
    ----------
    index : int
        Draw-order position, 0..85.
    x, y : float
        Centre in abstract units (+Y down).
    r : float
        Radius, shared by every dot of one generation.
    value : float
        Darkness in [0.6, 1.0]; 1.0 is black.
    color : str
        ``#rrggbb`` gray derived from ``value``.
    """

    index: int
    x: float
    y: float
    r: float
    value: float
    color: str


# ---------------------------------------------------------------------------
# Seeded permutation
# ---------------------------------------------------------------------------


def coerce_seed(seed: int | float) -> int:
    """Wrap any seed into the unsigned 32-bit PRNG state.

    Seeds congruent modulo 2**32 (including negative ones) map to the
    same state.  Fractional seeds are floored first (-0.5 behaves like
    -1); NaN and infinities map to state 0.
    """
    if isinstance(seed, float) and not math.isfinite(seed):
        return 0
    return math.floor(seed) & _UINT32


def mulberry32(seed: int | float) -> Callable[[], float]:
    """Return a mulberry32 generator yielding floats in [0, 1).

    All arithmetic is reduced modulo 2**32 after every step so the stream
    is bit-identical to 32-bit integer implementations of the same mixer.
    """
    state = coerce_seed(seed)

    def next_float() -> float:
        nonlocal state
        state = (state + _MULBERRY_INCREMENT) & _UINT32
        t = state
        t = ((t ^ (t >> 15)) * (t | 1)) & _UINT32
        t = (t ^ ((t + (((t ^ (t >> 7)) * (t | 61)) & _UINT32)) & _UINT32)) & _UINT32
        return ((t ^ (t >> 14)) & _UINT32) / _TWO_POW_32

    return next_float


def seeded_permutation(n: int, seed: int | float) -> list[int]:
    """Fisher-Yates shuffle of ``range(n)`` driven by :func:`mulberry32`.

    Walks ``i`` from ``n`` down to 1, drawing ``j`` in ``[0, i)`` and
    swapping positions ``i - 1`` and ``j``.
    """
    indices = list(range(n))
    rand = mulberry32(seed)

    for i in range(n, 0, -1):
        j = math.floor(rand() * i)
        indices[i - 1], indices[j] = indices[j], indices[i - 1]

    return indices


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def ring_positions(radius_scale: float) -> list[tuple[float, float]]:
    """Centres of all ring slots in draw order.

    Ring ``k`` has radius ``k * radius_scale / 5``.  The first dot of each
    ring sits at the top (-pi/2); odd rings are rotated by half a slot.
    """
    step = radius_scale / 5
    positions: list[tuple[float, float]] = []

    for ring_index, count in enumerate(RING_COUNTS):
        r = ring_index * step

        for i in range(count):
            if ring_index == 0:
                positions.append((0.0, 0.0))
                continue

            theta = (i / count) * 2 * math.pi
            theta -= math.pi / 2
            if ring_index % 2 != 0:
                theta += math.pi / count

            positions.append((r * math.cos(theta), r * math.sin(theta)))

    return positions


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


def generate_dots(
    text: str,
    dot_radius: float = 0.045,
    radius_scale: float = 0.85,
    seed: int | float = 12345,
) -> list[Dot]:
    """Generate the 86-dot pattern for *text*.

    Parameters
    ----------
    text : str
        Text to encode; may be empty.  Sampled by UTF-16 code unit.
    dot_radius : float
        Radius given to every dot (``dotSize / 1000``).
    radius_scale : float
        Radius of the outer ring (``spread``).
    seed : int
        Any integer; wrapped to 32 bits.

    Returns
    -------
    list[Dot]
        Exactly ``DOT_COUNT`` dots, ``index`` 0..85 in draw order.
    """
    code_units = utf16_code_units(text)
    spatial_map = seeded_permutation(DOT_COUNT, seed)

    dots: list[Dot] = []
    for global_index, (x, y) in enumerate(ring_positions(radius_scale)):
        if code_units:
            mapped_index = spatial_map[global_index]
            darkness = token_darkness(code_units[mapped_index % len(code_units)])
        else:
            darkness = token_darkness(None)

        dots.append(Dot(
            index=global_index,
            x=x,
            y=y,
            r=dot_radius,
            value=darkness,
            color=darkness_to_hex(darkness),
        ))

    logger.debug(
        "Generated %d dots (text_units=%d, radius=%s, scale=%s, seed=%s)",
        len(dots), len(code_units), dot_radius, radius_scale, coerce_seed(seed),
    )
    return dots


def generate_from_config(config: GeneratorConfig) -> list[Dot]:
    """Generate dots from a :class:`GeneratorConfig`.

    Padding is ignored; it only affects export framing.
    """
    return generate_dots(
        config.text,
        dot_radius=config.dot_radius,
        radius_scale=config.spread,
        seed=config.seed,
    )

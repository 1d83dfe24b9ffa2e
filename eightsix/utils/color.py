"""Gray-scale darkness values and their hex color encoding.

Provides:
    - token_darkness(): Character code unit -> darkness in [0.6, 1.0]
    - darkness_to_hex(): Darkness -> "#rrggbb" gray (R = G = B)

Darkness convention:
    1.0 = pure black, 0.0 = pure white. Generated dots never go lighter than
    0.6 so the pattern stays legible on a white page.

Used by:
    - Pattern generator: per-dot value and fill color
"""

import math
from typing import Optional

# Darkness assigned to dots when there is no character to sample
DEFAULT_DARKNESS = 0.6

# Hash parameters: multiply by a prime to scatter neighbouring code units,
# then fold into 0..50
HASH_MULTIPLIER = 37
HASH_MODULUS = 51
DARKNESS_SPAN = 0.4


def token_darkness(code_unit: Optional[int]) -> float:
    """Map a character code unit to a darkness value.

    Parameters
    ----------
    code_unit : Optional[int]
        UTF-16 code unit of the sampled character, or None when there is
        no character (empty text)

    Returns
    -------
    float
        Darkness in [0.6, 1.0]

    Notes
    -----
    hash = (code * 37) mod 51, normalized by 50, then shifted into the
    [0.6, 1.0] band. Visually similar characters land far apart.

    Examples
    --------
    >>> round(token_darkness(ord("A")), 3)  # (65 * 37) % 51 == 8
    0.664
    """
    if code_unit is None:
        return DEFAULT_DARKNESS

    hashed = (code_unit * HASH_MULTIPLIER) % HASH_MODULUS
    normalized = hashed / 50
    return DEFAULT_DARKNESS + normalized * DARKNESS_SPAN


def darkness_to_hex(darkness: float) -> str:
    """Convert darkness to a lowercase gray hex color.

    Parameters
    ----------
    darkness : float
        Darkness value; clamped to [0, 1]

    Returns
    -------
    str
        "#rrggbb" with identical channels

    Notes
    -----
    Gray level is round(255 * (1 - d)) with halves rounded up, so
    darkness_to_hex(1.0) == "#000000" and darkness_to_hex(0.0) == "#ffffff".
    """
    d = max(0.0, min(1.0, darkness))
    val = math.floor(255 * (1 - d) + 0.5)
    channel = f"{val:02x}"
    return f"#{channel}{channel}{channel}"

"""UTF-16 views of text.

Text is measured and sampled by UTF-16 code unit everywhere (generator,
config length limit, log lines).  A character outside the Basic
Multilingual Plane counts as two units, one per surrogate.
"""

import struct
from typing import Tuple


def utf16_code_units(text: str) -> Tuple[int, ...]:
    """Return the UTF-16 code units of *text* in order."""
    raw = text.encode('utf-16-le', 'surrogatepass')
    return struct.unpack(f"<{len(raw) // 2}H", raw)


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units in *text*."""
    return len(text.encode('utf-16-le', 'surrogatepass')) // 2

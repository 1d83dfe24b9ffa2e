"""Number-to-text conversions shared by the SVG and EPS writers.

Both output formats must print coordinates exactly the way a browser
serializes them, otherwise the SVG, PNG and EPS outputs of one export
drift apart by a rounding step.

    js_number(0.0)        -> "0"
    js_number(1e-05)      -> "0.00001"
    js_number(0.085)      -> "0.085"
    to_fixed(-0.147224, 4) -> "-0.1472"
    to_fixed(0.0, 3)       -> "0.000"
"""

import math
from decimal import ROUND_HALF_UP, Decimal

# Shortest-form numbers switch to exponent notation outside this decimal
# exponent range
_FIXED_EXP_MIN = -7
_FIXED_EXP_MAX = 21


def js_number(value: float) -> str:
    """Format a number as the shortest round-trip decimal string.

    Integral values print without a fractional part, negative zero prints
    as "0", and exponent notation is only used for magnitudes below 1e-6
    or at/above 1e21 (written as "1e-7", "1.5e+21").
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if 'e' not in text:
        return text

    mantissa, exp_text = text.split('e')
    exp = int(exp_text)
    if _FIXED_EXP_MIN < exp < _FIXED_EXP_MAX:
        return format(Decimal(text), 'f')

    sign = '+' if exp > 0 else '-'
    return f"{mantissa}e{sign}{abs(exp)}"


def to_fixed(value: float, digits: int) -> str:
    """Format with a fixed number of decimals.

    Rounds the exact binary value half away from zero. A negative value
    that rounds to zero keeps its sign ("-0.0000"); negative zero itself
    prints unsigned.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(float(value)).copy_abs().quantize(quantum, rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f"{sign}{rounded}"

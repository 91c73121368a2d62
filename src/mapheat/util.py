"""Path and decimal helpers.

Binary floats can't represent most decimal degrees exactly, so flooring
with math.floor(value * 100) / 100 turns 0.29 into 0.28 because
0.29 * 100 == 28.999999999999996.  Everything here goes through the shortest
decimal string of the float instead, and shifts the decimal exponent
with Decimal.scaleb, which is exact."""

import math
import os
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP

ROUNDING_MODES = {
    "floor": ROUND_FLOOR,
    "ceil": ROUND_CEILING,
    "round": ROUND_HALF_UP,
}

def safe_path(relative_path):
    """Return an absolute path to a file in the same directory as this module.
    Removes dependency on the current working directory."""

    return os.path.abspath(os.path.join(os.path.dirname(__file__),
                                        relative_path))

def to_decimal(value) -> Decimal:
    """Exact Decimal of the shortest repr of value, e.g. 0.1 -> Decimal('0.1')"""
    if isinstance(value, Decimal):
        return value
    return Decimal(repr(float(value)))

def decimal_adjust(value: float, exp: int = 0, mode: str = "floor") -> float:
    """Round value to exp digits after the decimal point.

    The rounding mode is applied to the magnitude and the sign is put back
    afterwards, so "floor" truncates toward zero for negative values:

        >>> decimal_adjust(123.4432, 1)
        123.4
        >>> decimal_adjust(-123.4432, 1)
        -123.4
        >>> decimal_adjust(1.005, 2, "round")
        1.01

    Args:
        value: number to adjust
        exp: digits after the decimal point to keep
        mode: one of "floor", "ceil", "round" (half away from zero)

    Returns:
        the adjusted float
    """
    try:
        rounding = ROUNDING_MODES[mode]
    except KeyError:
        raise ValueError("Unknown rounding mode: " + str(mode)) from None

    shifted = to_decimal(abs(value)).scaleb(exp)
    adjusted = shifted.to_integral_value(rounding=rounding).scaleb(-exp)
    return math.copysign(float(adjusted), value)

def decimal_floor(value: float, exp: int = 0) -> float:
    return decimal_adjust(value, exp, "floor")

def decimal_ceil(value: float, exp: int = 0) -> float:
    return decimal_adjust(value, exp, "ceil")

def decimal_round(value: float, exp: int = 0) -> float:
    return decimal_adjust(value, exp, "round")

def snap_to_grid(value: float, step: float) -> Decimal:
    """Largest multiple of step that is <= value, computed in decimal.

    Unlike decimal_floor this floors toward negative infinity, so
    -103.412 snaps to -103.5 on a 0.1 grid.  Negative zero is returned as
    plain zero."""
    step = to_decimal(step)
    cells = (to_decimal(value) / step).to_integral_value(rounding=ROUND_FLOOR)
    snapped = cells * step
    if not snapped:
        snapped = snapped.copy_abs()
    return snapped

def decimal_places(step: float) -> int:
    """Number of digits after the decimal point needed to write step.
    0.1 -> 1, 0.25 -> 2, 1.0 -> 0, 10 -> 0"""
    exponent = to_decimal(step).normalize().as_tuple().exponent
    return max(0, -exponent)

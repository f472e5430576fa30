"""
Fixed-point arithmetic for 18-decimal (wad) and 27-decimal (ray) values.

All values are unsigned integers in the uint256 range. Results that would fall outside of that
range raise `ArithmeticOverflow` instead of wrapping or saturating.
"""

from enum import Enum

from debtbook.constants import MAX_UINT256, MIN_UINT256
from debtbook.exceptions.math import ArithmeticOverflow, DivisionByZero

# Wad: decimal numbers with 18 digits of precision
WAD = 10**18
HALF_WAD = 5 * 10**17

# Ray: decimal numbers with 27 digits of precision
RAY = 10**27
HALF_RAY = 5 * 10**26

# Ratio to convert between Wad and Ray
WAD_RAY_RATIO = 10**9


class Rounding(Enum):
    FLOOR = 0
    CEIL = 1


def _raise_on_overflow(value: int) -> None:
    if not MIN_UINT256 <= value <= MAX_UINT256:
        raise ArithmeticOverflow(value)


def _raise_on_zero_division(divisor: int) -> None:
    if divisor == 0:
        raise DivisionByZero


def _check_operands(*values: int) -> None:
    for value in values:
        _raise_on_overflow(value)


def wad_mul(a: int, b: int) -> int:
    """
    Multiplies two wad, rounding half up to the nearest wad.
    """

    _check_operands(a, b)
    _raise_on_overflow(a * b + HALF_WAD)
    return (a * b + HALF_WAD) // WAD


def wad_div(a: int, b: int) -> int:
    """
    Divides two wad, rounding half up to the nearest wad.
    """

    _check_operands(a, b)
    _raise_on_zero_division(b)
    _raise_on_overflow(a * WAD + b // 2)
    return (a * WAD + b // 2) // b


def ray_mul(a: int, b: int, rounding: Rounding | None = None) -> int:
    """
    Multiplies two ray, rounding half up to the nearest ray if a specific rounding mode is not
    specified.
    """

    match rounding:
        case None:
            _check_operands(a, b)
            _raise_on_overflow(a * b + HALF_RAY)
            return (a * b + HALF_RAY) // RAY
        case Rounding.FLOOR:
            return ray_mul_floor(a, b)
        case Rounding.CEIL:
            return ray_mul_ceil(a, b)


def ray_mul_floor(a: int, b: int) -> int:
    _check_operands(a, b)
    _raise_on_overflow(a * b)
    return (a * b) // RAY


def ray_mul_ceil(a: int, b: int) -> int:
    _check_operands(a, b)
    _raise_on_overflow(a * b)
    return ((a * b) // RAY) + ((a * b) % RAY != 0)


def ray_div(a: int, b: int, rounding: Rounding | None = None) -> int:
    """
    Divides two ray, rounding half up to the nearest ray if a specific rounding mode is not
    specified.
    """

    match rounding:
        case None:
            _check_operands(a, b)
            _raise_on_zero_division(b)
            _raise_on_overflow(a * RAY + b // 2)
            return (a * RAY + b // 2) // b
        case Rounding.FLOOR:
            return ray_div_floor(a, b)
        case Rounding.CEIL:
            return ray_div_ceil(a, b)


def ray_div_ceil(a: int, b: int) -> int:
    _check_operands(a, b)
    _raise_on_zero_division(b)
    _raise_on_overflow(a * RAY)
    return ((a * RAY) // b) + (((a * RAY) % b) != 0)


def ray_div_floor(a: int, b: int) -> int:
    _check_operands(a, b)
    _raise_on_zero_division(b)
    _raise_on_overflow(a * RAY)
    return (a * RAY) // b


def ray_to_wad(a: int) -> int:
    """
    Casts ray value down to wad, rounding half up to the nearest wad.
    """

    _raise_on_overflow(a)
    return (a // WAD_RAY_RATIO) + (a % WAD_RAY_RATIO >= WAD_RAY_RATIO // 2)


def wad_to_ray(a: int) -> int:
    """
    Convert wad value up to ray.
    """

    _raise_on_overflow(a)
    _raise_on_overflow(a * WAD_RAY_RATIO)
    return a * WAD_RAY_RATIO

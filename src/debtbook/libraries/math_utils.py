"""
Interest multipliers for a constant annual rate over an elapsed window of seconds.
"""

from debtbook.exceptions.ledger import InvalidTimeRange
from debtbook.libraries.wad_ray_math import RAY, _raise_on_overflow, ray_mul

SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def _elapsed(last_update_timestamp: int, current_timestamp: int) -> int:
    if current_timestamp < last_update_timestamp:
        raise InvalidTimeRange(start=last_update_timestamp, end=current_timestamp)
    return current_timestamp - last_update_timestamp


def calculate_linear_interest(
    rate: int,
    last_update_timestamp: int,
    current_timestamp: int,
) -> int:
    """
    Calculate the simple interest multiplier accumulated over the window, in ray.
    """

    exp = _elapsed(last_update_timestamp, current_timestamp)
    _raise_on_overflow(rate * exp)
    return RAY + (rate * exp) // SECONDS_PER_YEAR


def calculate_compounded_interest(
    rate: int,
    last_update_timestamp: int,
    current_timestamp: int,
) -> int:
    """
    Calculate the interest multiplier compounded per second over the window, in ray.

    The exact value (1 + rate/SECONDS_PER_YEAR) ** exp is approximated by the first four terms
    of its binomial expansion:

        1 + x*exp + exp*(exp-1)/2 * x**2 + exp*(exp-1)*(exp-2)/6 * x**3

    where x is the per-second rate. The approximation slightly undercharges borrowers for long
    windows at high rates, and costs the same regardless of the elapsed time.

    Args:
        rate: The annual interest rate, in ray
        last_update_timestamp: The start of the window, in seconds
        current_timestamp: The end of the window, in seconds

    Returns:
        The multiplier in ray. Exactly RAY for an empty window.

    Raises:
        InvalidTimeRange: If the window ends before it starts
        ArithmeticOverflow: If an intermediate value exceeds the uint256 range
    """

    exp = _elapsed(last_update_timestamp, current_timestamp)
    if exp == 0:
        return RAY

    exp_minus_one = exp - 1
    exp_minus_two = exp - 2 if exp > 2 else 0

    rate_per_second = rate // SECONDS_PER_YEAR

    base_power_two = ray_mul(rate_per_second, rate_per_second)
    base_power_three = ray_mul(base_power_two, rate_per_second)

    second_term = exp * exp_minus_one * base_power_two
    _raise_on_overflow(second_term)
    second_term //= 2

    third_term = exp * exp_minus_one * exp_minus_two * base_power_three
    _raise_on_overflow(third_term)
    third_term //= 6

    result = RAY + rate_per_second * exp + second_term + third_term
    _raise_on_overflow(result)
    return result

import hypothesis
import hypothesis.strategies
import pytest

from debtbook.exceptions.ledger import InvalidTimeRange
from debtbook.libraries.math_utils import (
    SECONDS_PER_YEAR,
    calculate_compounded_interest,
    calculate_linear_interest,
)
from debtbook.libraries.wad_ray_math import RAY, ray_mul

# Chosen so the per-second rate is exactly 10**18 (1e-9 in ray)
EVEN_RATE = SECONDS_PER_YEAR * 10**18


def _ray_pow(base: int, exponent: int) -> int:
    """
    Exponentiation by squaring with ray rounding, as a reference for per-second compounding.
    """

    result = RAY
    while exponent:
        if exponent & 1:
            result = ray_mul(result, base)
        base = ray_mul(base, base)
        exponent >>= 1
    return result


def test_seconds_per_year() -> None:
    assert SECONDS_PER_YEAR == 31_536_000


def test_empty_window_is_exactly_one() -> None:
    assert calculate_compounded_interest(5 * RAY // 100, 1000, 1000) == RAY
    assert calculate_linear_interest(5 * RAY // 100, 1000, 1000) == RAY


def test_zero_rate() -> None:
    assert calculate_compounded_interest(0, 0, 10 * SECONDS_PER_YEAR) == RAY


def test_backward_window_raises() -> None:
    with pytest.raises(InvalidTimeRange):
        calculate_compounded_interest(RAY, 1001, 1000)
    with pytest.raises(InvalidTimeRange):
        calculate_linear_interest(RAY, 1001, 1000)


def test_expansion_terms() -> None:
    # rate per second x = 10**18, x**2 = 10**9, x**3 rounds to 1 (all in ray)
    assert calculate_compounded_interest(EVEN_RATE, 0, 1) == RAY + 10**18
    assert calculate_compounded_interest(EVEN_RATE, 0, 2) == RAY + 2 * 10**18 + 10**9
    assert calculate_compounded_interest(EVEN_RATE, 0, 3) == RAY + 3 * 10**18 + 3 * 10**9 + 1


def test_only_elapsed_time_matters() -> None:
    rate = 5 * RAY // 100
    assert calculate_compounded_interest(rate, 0, 86_400) == calculate_compounded_interest(
        rate, 1_700_000_000, 1_700_086_400
    )


def test_linear_interest() -> None:
    rate = 5 * RAY // 100
    assert calculate_linear_interest(rate, 0, SECONDS_PER_YEAR) == RAY + rate
    assert calculate_linear_interest(rate, 0, SECONDS_PER_YEAR // 2) == RAY + rate // 2


def test_one_year_matches_per_second_compounding() -> None:
    """
    One year at 5% against (1 + r/N)**N with N seconds per year. The three-term expansion drops
    the fourth-order term (about 2.6e-7 at this rate), so the comparison is relative.
    """

    rate = 5 * RAY // 100
    multiplier = calculate_compounded_interest(rate, 0, SECONDS_PER_YEAR)
    reference = _ray_pow(RAY + rate // SECONDS_PER_YEAR, SECONDS_PER_YEAR)

    assert multiplier <= reference
    assert reference - multiplier < RAY // 10**6

    # Compounding beats simple interest over a full year
    assert multiplier > calculate_linear_interest(rate, 0, SECONDS_PER_YEAR)


def test_multi_year_window() -> None:
    rate = 2 * RAY // 100
    two_years = calculate_compounded_interest(rate, 0, 2 * SECONDS_PER_YEAR)
    one_year = calculate_compounded_interest(rate, 0, SECONDS_PER_YEAR)

    # Two separate one-year windows compound on each other and slightly exceed one two-year window
    # computed with the truncated expansion, but both are close to e**0.04
    assert abs(ray_mul(one_year, one_year) - two_years) < RAY // 10**6
    assert two_years > one_year > RAY


@hypothesis.given(
    rate=hypothesis.strategies.integers(min_value=0, max_value=10 * RAY),
    start=hypothesis.strategies.integers(min_value=0, max_value=2**40),
    first=hypothesis.strategies.integers(min_value=0, max_value=5 * SECONDS_PER_YEAR),
    second=hypothesis.strategies.integers(min_value=0, max_value=5 * SECONDS_PER_YEAR),
)
def test_multiplier_is_monotonic(rate: int, start: int, first: int, second: int) -> None:
    shorter = calculate_compounded_interest(rate, start, start + min(first, second))
    longer = calculate_compounded_interest(rate, start, start + max(first, second))
    assert RAY <= shorter <= longer

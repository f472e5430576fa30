"""
Two borrowers against one reserve over two years, one of them holding enough staked balance to
receive the interest discount.

    - User 1 borrows at the start and pays full interest throughout
    - User 2 stakes, borrows one year later, and repays everything at the end of year two
"""

from debtbook.discount import DiscountPolicy, StakedBalances
from debtbook.engine import DebtEngine
from debtbook.libraries.math_utils import SECONDS_PER_YEAR, calculate_compounded_interest
from debtbook.libraries.wad_ray_math import RAY, WAD, ray_div, ray_mul, wad_div
from debtbook.scaled_ledger import REPAY_ALL
from debtbook.store import InMemoryLedgerStore

from tests.conftest import ANNUAL_RATE, ASSET, DISCOUNT_THRESHOLD, START_TIME, USER_1, USER_2

BORROW_AMOUNT = 1000 * WAD


def _expected_index(engine: DebtEngine, now: int) -> int:
    reserve = engine.get_reserve(ASSET)
    return ray_mul(
        reserve.variable_borrow_index,
        calculate_compounded_interest(ANNUAL_RATE, reserve.last_update_timestamp, now),
    )


def test_discount_borrow_flow() -> None:
    staked_balances = StakedBalances({USER_2: DISCOUNT_THRESHOLD})
    engine = DebtEngine(
        store=InMemoryLedgerStore(),
        staked_balances=staked_balances,
        policy=DiscountPolicy(threshold=DISCOUNT_THRESHOLD),
    )
    engine.init_reserve(ASSET, ANNUAL_RATE, START_TIME)

    # User 1 borrows at an index of 1.0
    result = engine.borrow(ASSET, USER_1, BORROW_AMOUNT, START_TIME)
    assert result.balance == BORROW_AMOUNT
    assert engine.get_reserve(ASSET).variable_borrow_index == RAY

    # One year later, user 1's debt has grown by the compounded multiplier
    year_one = START_TIME + SECONDS_PER_YEAR
    index_year_one = _expected_index(engine, year_one)
    assert index_year_one == calculate_compounded_interest(ANNUAL_RATE, START_TIME, year_one)
    assert engine.balance_of(ASSET, USER_1, year_one) == ray_mul(
        engine.scaled_balance_of(ASSET, USER_1), index_year_one
    )
    assert engine.balance_of(ASSET, USER_1, year_one) == ray_mul(BORROW_AMOUNT, index_year_one)

    # User 2 borrows after one year
    result = engine.borrow(ASSET, USER_2, BORROW_AMOUNT, year_one)
    assert abs(result.balance - BORROW_AMOUNT) <= 1
    assert engine.get_reserve(ASSET).variable_borrow_index == index_year_one

    # One more year passes and user 1 borrows again
    year_two = year_one + SECONDS_PER_YEAR
    index_year_two = _expected_index(engine, year_two)
    user_1_scaled = engine.scaled_balance_of(ASSET, USER_1)
    user_2_scaled = engine.scaled_balance_of(ASSET, USER_2)

    result = engine.borrow(ASSET, USER_1, BORROW_AMOUNT, year_two)
    assert engine.get_reserve(ASSET).variable_borrow_index == index_year_two

    user_1_expected_balance = ray_mul(
        user_1_scaled + ray_div(BORROW_AMOUNT, index_year_two), index_year_two
    )
    assert result.balance == user_1_expected_balance
    assert engine.balance_of(ASSET, USER_1, year_two) == user_1_expected_balance

    # User 2 was not touched, but its balance already reflects the discount: 20% of the interest
    # accrued since its borrow is waived
    user_2_no_discount = ray_mul(user_2_scaled, index_year_two)
    balance_increase = user_2_no_discount - ray_mul(user_2_scaled, index_year_one)
    assert abs(balance_increase - (user_2_no_discount - BORROW_AMOUNT)) <= 1

    user_2_expected_discount = wad_div(balance_increase, 5 * WAD)
    assert engine.balance_of(ASSET, USER_2, year_two) == (
        user_2_no_discount - user_2_expected_discount
    )

    # User 1 has no stake, so the interest realized by its second borrow is not discounted
    assert result.event.balance_increase == (
        ray_mul(user_1_scaled, index_year_two) - BORROW_AMOUNT
    )

    # User 2 repays everything one second later
    repay_time = year_two + 1
    index_repay = _expected_index(engine, repay_time)
    user_1_scaled = engine.scaled_balance_of(ASSET, USER_1)

    user_2_no_discount = ray_mul(user_2_scaled, index_repay)
    balance_increase = user_2_no_discount - ray_mul(user_2_scaled, index_year_one)
    user_2_expected_discount = wad_div(balance_increase, 5 * WAD)
    user_2_expected_balance = user_2_no_discount - user_2_expected_discount
    user_2_expected_interest = balance_increase - user_2_expected_discount

    result = engine.repay(ASSET, USER_2, REPAY_ALL, repay_time)

    assert result.amount_repaid == user_2_expected_balance
    assert result.interest_repaid == user_2_expected_interest
    assert result.balance == 0
    assert engine.scaled_balance_of(ASSET, USER_2) == 0
    assert engine.balance_of(ASSET, USER_2, repay_time) == 0

    assert engine.balance_of(ASSET, USER_1, repay_time) == ray_mul(user_1_scaled, index_repay)
    assert engine.get_reserve(ASSET).accrued_to_treasury == user_2_expected_interest

"""
Conversions between scaled and real debt, and scaled balance updates for borrow and repay.

The functions here are stateless: they return updated `DebtPosition` records and leave
committing them to the caller.
"""

import dataclasses

from debtbook.constants import MAX_UINT256
from debtbook.exceptions.ledger import RepayExceedsDebt
from debtbook.libraries.wad_ray_math import ray_div, ray_mul
from debtbook.position import DebtPosition

# Repay sentinel for "the full outstanding balance"
REPAY_ALL = MAX_UINT256


def real_balance(position: DebtPosition, index: int) -> int:
    return ray_mul(position.scaled_balance, index)


def apply_borrow(
    position: DebtPosition,
    principal: int,
    index: int,
    now: int,
) -> DebtPosition:
    """
    Add `principal` to the position at the given borrow index.
    """

    return dataclasses.replace(
        position,
        scaled_balance=position.scaled_balance + ray_div(principal, index),
        last_index=index,
        last_update_timestamp=now,
    )


def apply_repay(
    position: DebtPosition,
    amount: int,
    index: int,
    now: int,
    *,
    outstanding: int,
    strict: bool = False,
) -> tuple[DebtPosition, int]:
    """
    Reduce the position by a repayment at the given borrow index.

    Args:
        position: The position to repay, already accrued to `index`
        amount: The requested repayment, or `REPAY_ALL` to clear the position
        index: The current borrow index
        now: The current timestamp
        outstanding: The real balance owed at `index`
        strict: Reject amounts above the outstanding balance instead of capping them

    Returns:
        A tuple of the updated position and the amount actually repaid

    Raises:
        RepayExceedsDebt: If `strict` is set and `amount` exceeds `outstanding`
    """

    if amount != REPAY_ALL and amount > outstanding and strict:
        raise RepayExceedsDebt(amount=amount, outstanding=outstanding)

    payback = min(amount, outstanding)

    if payback == outstanding:
        new_scaled_balance = 0
    else:
        new_scaled_balance = max(position.scaled_balance - ray_div(payback, index), 0)

    return (
        dataclasses.replace(
            position,
            scaled_balance=new_scaled_balance,
            last_index=index,
            last_update_timestamp=now,
        ),
        payback,
    )

"""
Interest discount for accounts holding a qualifying staked balance.

Eligibility is checked at the moment an account is touched, and the discount covers all interest
accrued since the previous touch. A change in staked balance between touches therefore applies to
the whole interval, not just the portion after the change.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from eth_typing import ChecksumAddress

from debtbook.libraries.wad_ray_math import WAD, ray_div, ray_mul, wad_mul
from debtbook.position import DebtPosition

# 20.00%, in wad
DEFAULT_DISCOUNT_RATE = 2 * 10**17


class StakedBalanceSource(Protocol):
    """Protocol for the external ledger of staked balances."""

    def staked_balance_of(self, account: ChecksumAddress) -> int: ...


class StakedBalances:
    """
    A staked balance source backed by a mapping. Accounts missing from the mapping hold zero.
    """

    def __init__(self, balances: Mapping[ChecksumAddress, int] | None = None) -> None:
        self._balances: dict[ChecksumAddress, int] = dict(balances or {})

    def staked_balance_of(self, account: ChecksumAddress) -> int:
        return self._balances.get(account, 0)

    def set_balance(self, account: ChecksumAddress, balance: int) -> None:
        self._balances[account] = balance


@dataclass(frozen=True, slots=True)
class DiscountPolicy:
    """A single on/off discount: `discount_rate` (wad) of interest is waived above `threshold`."""

    threshold: int
    discount_rate: int = DEFAULT_DISCOUNT_RATE

    def __post_init__(self) -> None:
        if not 0 <= self.discount_rate <= WAD:
            msg = f"Discount rate {self.discount_rate} must be between 0 and {WAD}"
            raise ValueError(msg)
        if self.threshold < 0:
            msg = f"Discount threshold {self.threshold} cannot be negative"
            raise ValueError(msg)

    def is_eligible(self, staked_balance: int) -> bool:
        return staked_balance >= self.threshold


@dataclass(frozen=True, slots=True)
class DiscountResult:
    balance_increase: int
    discount: int
    balance: int


@dataclass(frozen=True, slots=True)
class DebtAccrual:
    """Interest realized for a position at a touch."""

    balance_increase: int  # net of discount
    discount: int
    discount_scaled: int
    balance: int  # discounted real balance at the current index
    index: int


def apply_discount(
    previous_balance: int,
    new_balance_no_discount: int,
    *,
    is_eligible: bool,
    discount_rate: int,
    principal_added: int = 0,
) -> DiscountResult:
    """
    Split the growth from `previous_balance` to `new_balance_no_discount` into interest and
    discount.

    Any principal added in the same call is excluded from the interest. The discount is
    `discount_rate` (wad) of the interest, rounded half up, and only applies to eligible accounts.
    """

    balance_increase = new_balance_no_discount - previous_balance - principal_added

    discount = 0
    if is_eligible and balance_increase > 0 and discount_rate != 0:
        discount = wad_mul(balance_increase, discount_rate)

    return DiscountResult(
        balance_increase=balance_increase - discount,
        discount=discount,
        balance=new_balance_no_discount - discount,
    )


def accrue_debt_on_action(
    position: DebtPosition,
    current_index: int,
    policy: DiscountPolicy,
    staked_balance: int,
) -> DebtAccrual:
    """
    Calculate the interest accrued by a position since its last touch, with the discount applied.

    This is a stateless calculation. The caller burns `discount_scaled` from the position's scaled
    balance to realize the discount.
    """

    previous_balance = ray_mul(position.scaled_balance, position.last_index)
    current_balance = ray_mul(position.scaled_balance, current_index)

    result = apply_discount(
        previous_balance=previous_balance,
        new_balance_no_discount=current_balance,
        is_eligible=policy.is_eligible(staked_balance),
        discount_rate=policy.discount_rate,
    )

    return DebtAccrual(
        balance_increase=result.balance_increase,
        discount=result.discount,
        discount_scaled=ray_div(result.discount, current_index) if result.discount else 0,
        balance=result.balance,
        index=current_index,
    )

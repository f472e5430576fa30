"""Balance change records reported by the engine, mirroring the debt token's Mint/Burn logs."""

from dataclasses import dataclass

from eth_typing import ChecksumAddress


@dataclass(frozen=True, slots=True)
class DebtMintEvent:
    """
    Debt grew: a borrow, or accrued interest larger than a repayment.

    `value` is the net increase in real debt and `balance_increase` the interest realized in the
    same action, net of any discount.
    """

    account: ChecksumAddress
    value: int
    balance_increase: int
    index: int


@dataclass(frozen=True, slots=True)
class DebtBurnEvent:
    """Debt shrank: a repayment at least as large as the accrued interest."""

    account: ChecksumAddress
    value: int
    balance_increase: int
    index: int


@dataclass(frozen=True, slots=True)
class BorrowResult:
    balance: int
    event: DebtMintEvent


@dataclass(frozen=True, slots=True)
class RepayResult:
    amount_repaid: int
    balance: int
    interest_repaid: int
    event: DebtMintEvent | DebtBurnEvent

from typing import Any

from eth_typing import ChecksumAddress

from debtbook.exceptions.base import DebtbookError

"""
Exceptions defined here are raised by the reserve, ledger and engine modules.
"""


class LedgerError(DebtbookError):
    """
    Exception raised inside the debt ledger.
    """


class InvalidTimeRange(LedgerError):
    """
    Raised when a timestamp moves backward relative to the last recorded update.
    """

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(message=f"Timestamp {end} is earlier than the last update at {start}.")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.start, self.end)


class RepayExceedsDebt(LedgerError):
    """
    Raised in strict mode when a repayment amount is larger than the outstanding debt.
    """

    def __init__(self, amount: int, outstanding: int) -> None:
        self.amount = amount
        self.outstanding = outstanding
        super().__init__(
            message=f"Repay amount {amount} exceeds the outstanding debt of {outstanding}."
        )

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.amount, self.outstanding)


class InvalidAmount(LedgerError):
    def __init__(self, amount: int) -> None:
        self.amount = amount
        super().__init__(message=f"Invalid amount: {amount}")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.amount,)


class UnknownReserve(LedgerError):
    def __init__(self, asset: ChecksumAddress) -> None:
        self.asset = asset
        super().__init__(message=f"No reserve has been initialized for asset {asset}.")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.asset,)


class ReserveAlreadyInitialized(LedgerError):
    def __init__(self, asset: ChecksumAddress) -> None:
        self.asset = asset
        super().__init__(message=f"A reserve for asset {asset} already exists.")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.asset,)

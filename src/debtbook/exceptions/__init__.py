from debtbook.exceptions.base import DebtbookError, DebtbookValueError
from debtbook.exceptions.ledger import (
    InvalidAmount,
    InvalidTimeRange,
    LedgerError,
    RepayExceedsDebt,
    ReserveAlreadyInitialized,
    UnknownReserve,
)
from debtbook.exceptions.math import ArithmeticOverflow, DivisionByZero, FixedPointMathError

from . import ledger, math

__all__ = (
    "ArithmeticOverflow",
    "DebtbookError",
    "DebtbookValueError",
    "DivisionByZero",
    "FixedPointMathError",
    "InvalidAmount",
    "InvalidTimeRange",
    "LedgerError",
    "RepayExceedsDebt",
    "ReserveAlreadyInitialized",
    "UnknownReserve",
    "ledger",
    "math",
)

from typing import Any

from debtbook.exceptions.base import DebtbookError

"""
Exceptions defined here are raised by the fixed-point and interest math libraries.
"""


class FixedPointMathError(DebtbookError):
    """
    Raised when a fixed-point operation cannot produce a representable result.
    """


class ArithmeticOverflow(FixedPointMathError):
    """
    Raised when an intermediate or final value falls outside of the uint256 range.
    """

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(message=f"Value {value} is outside of the representable range.")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.value,)


class DivisionByZero(FixedPointMathError):
    def __init__(self) -> None:
        super().__init__(message="Division by zero.")

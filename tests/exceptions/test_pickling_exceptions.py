import pickle

import pytest

from debtbook.cache import get_checksum_address
from debtbook.exceptions import (
    ArithmeticOverflow,
    DebtbookError,
    DivisionByZero,
    InvalidAmount,
    InvalidTimeRange,
    RepayExceedsDebt,
    ReserveAlreadyInitialized,
    UnknownReserve,
)

ASSET = get_checksum_address("0x40D16FC0246aD3160Ccc09B8D0D3A2cD28aE6C2f")


@pytest.mark.parametrize(
    ("exception", "attributes"),
    [
        (ArithmeticOverflow(2**256), {"value": 2**256}),
        (InvalidTimeRange(start=100, end=99), {"start": 100, "end": 99}),
        (RepayExceedsDebt(amount=11, outstanding=10), {"amount": 11, "outstanding": 10}),
        (InvalidAmount(0), {"amount": 0}),
        (UnknownReserve(ASSET), {"asset": ASSET}),
        (ReserveAlreadyInitialized(ASSET), {"asset": ASSET}),
    ],
)
def test_exception_pickling(exception: DebtbookError, attributes: dict[str, object]) -> None:
    """
    Test that exceptions with constructor arguments define a `__reduce__` method that allows them
    to be pickled and unpickled correctly.
    """

    unpickled_exception = pickle.loads(pickle.dumps(exception))

    assert type(unpickled_exception) is type(exception)
    assert unpickled_exception.message == exception.message
    assert str(unpickled_exception) == str(exception)
    for name, value in attributes.items():
        assert getattr(unpickled_exception, name) == value


def test_division_by_zero_pickling() -> None:
    unpickled_exception = pickle.loads(pickle.dumps(DivisionByZero()))
    assert type(unpickled_exception) is DivisionByZero
    assert unpickled_exception.message == "Division by zero."


def test_exception_hierarchy() -> None:
    for exception in (
        ArithmeticOverflow(1),
        DivisionByZero(),
        InvalidTimeRange(1, 0),
        RepayExceedsDebt(1, 0),
    ):
        assert isinstance(exception, DebtbookError)

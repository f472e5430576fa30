import logging

import pytest

from debtbook.cache import get_checksum_address
from debtbook.discount import DiscountPolicy, StakedBalances
from debtbook.engine import DebtEngine
from debtbook.libraries.wad_ray_math import RAY, WAD
from debtbook.logging import logger
from debtbook.store import InMemoryLedgerStore

ASSET = get_checksum_address("0x40D16FC0246aD3160Ccc09B8D0D3A2cD28aE6C2f")
USER_1 = get_checksum_address("0x70997970C51812dc3A010C7d01b50e0d17dc79C8")
USER_2 = get_checksum_address("0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC")

# 2% annual rate, in ray
ANNUAL_RATE = 2 * RAY // 100
DISCOUNT_THRESHOLD = 10 * WAD
START_TIME = 1_700_000_000


@pytest.fixture(scope="session", autouse=True)
def _set_debtbook_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def staked_balances() -> StakedBalances:
    return StakedBalances()


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def engine(store: InMemoryLedgerStore, staked_balances: StakedBalances) -> DebtEngine:
    engine = DebtEngine(
        store=store,
        staked_balances=staked_balances,
        policy=DiscountPolicy(threshold=DISCOUNT_THRESHOLD),
    )
    engine.init_reserve(ASSET, ANNUAL_RATE, START_TIME)
    return engine

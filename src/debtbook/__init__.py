from .config import settings
from .version import __version__

# isort: split

from .discount import DiscountPolicy, StakedBalances, StakedBalanceSource
from .engine import DebtEngine
from .events import BorrowResult, DebtBurnEvent, DebtMintEvent, RepayResult
from .libraries.math_utils import SECONDS_PER_YEAR, calculate_compounded_interest
from .libraries.wad_ray_math import RAY, WAD
from .logging import logger
from .position import DebtPosition
from .reserve import Reserve
from .scaled_ledger import REPAY_ALL
from .store import InMemoryLedgerStore, LedgerStore

__all__ = (
    "RAY",
    "REPAY_ALL",
    "SECONDS_PER_YEAR",
    "WAD",
    "BorrowResult",
    "DebtBurnEvent",
    "DebtEngine",
    "DebtMintEvent",
    "DebtPosition",
    "DiscountPolicy",
    "InMemoryLedgerStore",
    "LedgerStore",
    "RepayResult",
    "Reserve",
    "StakedBalanceSource",
    "StakedBalances",
    "__version__",
    "calculate_compounded_interest",
    "logger",
    "settings",
)

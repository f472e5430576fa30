from dataclasses import dataclass

from eth_typing import ChecksumAddress

from debtbook.libraries.wad_ray_math import RAY


@dataclass(frozen=True, slots=True)
class DebtPosition:
    """
    An account's variable debt in one reserve.

    `scaled_balance` is index-invariant; the real balance is recovered by multiplying it by the
    reserve's current borrow index. `last_index` is the index at the account's last touch and is
    the reference point for the interest accrued since then.
    """

    asset: ChecksumAddress
    account: ChecksumAddress
    scaled_balance: int = 0
    last_index: int = RAY
    last_update_timestamp: int = 0
    accumulated_interest: int = 0

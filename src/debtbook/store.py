"""Storage for reserve and position records. The engine reads and writes through `LedgerStore`."""

from typing import Protocol

from eth_typing import ChecksumAddress

from debtbook.position import DebtPosition
from debtbook.reserve import Reserve


class LedgerStore(Protocol):
    def get_reserve(self, asset: ChecksumAddress) -> Reserve | None: ...
    def put_reserve(self, reserve: Reserve) -> None: ...
    def get_position(
        self, asset: ChecksumAddress, account: ChecksumAddress
    ) -> DebtPosition | None: ...
    def put_position(self, position: DebtPosition) -> None: ...


class InMemoryLedgerStore:
    """
    A dict-backed store. One reserve per asset and one position per (asset, account) pair.
    """

    def __init__(self) -> None:
        self.reserves: dict[ChecksumAddress, Reserve] = {}
        self.positions: dict[tuple[ChecksumAddress, ChecksumAddress], DebtPosition] = {}

    def get_reserve(self, asset: ChecksumAddress) -> Reserve | None:
        return self.reserves.get(asset)

    def put_reserve(self, reserve: Reserve) -> None:
        self.reserves[reserve.asset] = reserve

    def get_position(
        self,
        asset: ChecksumAddress,
        account: ChecksumAddress,
    ) -> DebtPosition | None:
        return self.positions.get((asset, account))

    def put_position(self, position: DebtPosition) -> None:
        self.positions[position.asset, position.account] = position

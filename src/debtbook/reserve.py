"""Reserve-level borrow index state."""

import dataclasses
from dataclasses import dataclass

from eth_typing import ChecksumAddress

from debtbook.exceptions.ledger import InvalidTimeRange
from debtbook.libraries.math_utils import calculate_compounded_interest
from debtbook.libraries.wad_ray_math import RAY, ray_mul
from debtbook.logging import logger


@dataclass(frozen=True, slots=True)
class Reserve:
    """
    The shared borrow state for one asset.

    Records are immutable. Operations that advance the reserve return a new record, which the
    caller commits to its store once the full operation has succeeded.
    """

    asset: ChecksumAddress
    annual_rate: int
    variable_borrow_index: int = RAY
    last_update_timestamp: int = 0
    accrued_to_treasury: int = 0

    def get_normalized_debt(self, now: int) -> int:
        """
        Return the borrow index the reserve would hold at `now`, without advancing it.
        """

        if now < self.last_update_timestamp:
            raise InvalidTimeRange(start=self.last_update_timestamp, end=now)

        if now == self.last_update_timestamp:
            return self.variable_borrow_index

        return ray_mul(
            self.variable_borrow_index,
            calculate_compounded_interest(
                rate=self.annual_rate,
                last_update_timestamp=self.last_update_timestamp,
                current_timestamp=now,
            ),
        )

    def sync_to(self, now: int) -> "Reserve":
        """
        Return the reserve advanced to `now`, with interest compounded since the last update.
        """

        new_index = self.get_normalized_debt(now)
        if now == self.last_update_timestamp:
            return self

        logger.debug(
            f"Reserve {self.asset}: index {self.variable_borrow_index} -> {new_index} "
            f"({self.last_update_timestamp} -> {now})"
        )
        return dataclasses.replace(
            self,
            variable_borrow_index=new_index,
            last_update_timestamp=now,
        )

    def with_rate(self, new_rate: int, now: int) -> "Reserve":
        """
        Return the reserve synced to `now` with a new annual rate applied from that point on.
        """

        return dataclasses.replace(self.sync_to(now), annual_rate=new_rate)

"""
Debt accounting entry points: borrow, repay and balance queries against an injected store.

Every mutating operation follows the same sequence:
    1. Advance the reserve's borrow index to the current time
    2. Realize the interest accrued by the account since its last touch, discounting it if the
       account is currently eligible
    3. Apply the requested principal change to the account's scaled balance
    4. Commit the new reserve and position records

Records are immutable, and nothing is written to the store until every calculation has
succeeded, so an operation that raises leaves the store untouched.
"""

import dataclasses
from typing import TYPE_CHECKING

from eth_typing import ChecksumAddress

from debtbook.cache import get_checksum_address
from debtbook.discount import (
    DebtAccrual,
    DiscountPolicy,
    StakedBalanceSource,
    accrue_debt_on_action,
)
from debtbook.events import BorrowResult, DebtBurnEvent, DebtMintEvent, RepayResult
from debtbook.exceptions import (
    DebtbookValueError,
    InvalidAmount,
    RepayExceedsDebt,
    ReserveAlreadyInitialized,
    UnknownReserve,
)
from debtbook.logging import logger
from debtbook.position import DebtPosition
from debtbook.reserve import Reserve
from debtbook.scaled_ledger import REPAY_ALL, apply_borrow, apply_repay, real_balance

if TYPE_CHECKING:
    from debtbook.config import Settings
    from debtbook.store import LedgerStore


class DebtEngine:
    def __init__(
        self,
        store: "LedgerStore",
        staked_balances: StakedBalanceSource,
        policy: DiscountPolicy,
        *,
        strict_repay: bool = False,
    ) -> None:
        self.store = store
        self.staked_balances = staked_balances
        self.policy = policy
        self.strict_repay = strict_repay

    @classmethod
    def from_settings(
        cls,
        store: "LedgerStore",
        staked_balances: StakedBalanceSource,
        settings: "Settings",
    ) -> "DebtEngine":
        return cls(
            store=store,
            staked_balances=staked_balances,
            policy=DiscountPolicy(
                threshold=settings.discount.threshold,
                discount_rate=settings.discount.rate,
            ),
            strict_repay=settings.ledger.strict_repay,
        )

    def _get_reserve(self, asset: ChecksumAddress) -> Reserve:
        reserve = self.store.get_reserve(asset)
        if reserve is None:
            raise UnknownReserve(asset)
        return reserve

    def _get_position(
        self,
        asset: ChecksumAddress,
        account: ChecksumAddress,
        index: int,
        now: int,
    ) -> DebtPosition:
        position = self.store.get_position(asset, account)
        if position is None:
            position = DebtPosition(
                asset=asset,
                account=account,
                last_index=index,
                last_update_timestamp=now,
            )
        return position

    def _accrue(self, position: DebtPosition, index: int) -> tuple[DebtPosition, DebtAccrual]:
        """
        Realize interest for the position at `index`, burning the discount from its scaled balance.
        """

        accrual = accrue_debt_on_action(
            position=position,
            current_index=index,
            policy=self.policy,
            staked_balance=self.staked_balances.staked_balance_of(position.account),
        )

        if accrual.discount:
            logger.debug(
                f"Discount for {position.account}: interest={accrual.balance_increase + accrual.discount}, "  # noqa: E501
                f"discount={accrual.discount}, discount_scaled={accrual.discount_scaled}"
            )

        return (
            dataclasses.replace(
                position,
                scaled_balance=position.scaled_balance - accrual.discount_scaled,
                accumulated_interest=position.accumulated_interest + accrual.balance_increase,
                last_index=index,
            ),
            accrual,
        )

    def _commit(self, reserve: Reserve, position: DebtPosition) -> None:
        self.store.put_reserve(reserve)
        self.store.put_position(position)

    def init_reserve(self, asset: str, annual_rate: int, now: int) -> Reserve:
        """
        Create the reserve for an asset with a borrow index of 1.0 (ray).
        """

        asset = get_checksum_address(asset)
        if self.store.get_reserve(asset) is not None:
            raise ReserveAlreadyInitialized(asset)
        if annual_rate < 0:
            msg = f"Annual rate {annual_rate} cannot be negative"
            raise DebtbookValueError(msg)

        reserve = Reserve(asset=asset, annual_rate=annual_rate, last_update_timestamp=now)
        self.store.put_reserve(reserve)
        logger.info(f"Initialized reserve {asset} with rate {annual_rate} at {now}")
        return reserve

    def set_reserve_rate(self, asset: str, new_rate: int, now: int) -> Reserve:
        """
        Change the reserve's annual rate, effective from `now`. Interest up to `now` accrues at the
        previous rate.
        """

        asset = get_checksum_address(asset)
        if new_rate < 0:
            msg = f"Annual rate {new_rate} cannot be negative"
            raise DebtbookValueError(msg)

        reserve = self._get_reserve(asset).with_rate(new_rate, now)
        self.store.put_reserve(reserve)
        logger.info(f"Reserve {asset} rate set to {new_rate} at {now}")
        return reserve

    def get_reserve(self, asset: str) -> Reserve:
        return self._get_reserve(get_checksum_address(asset))

    def get_position(self, asset: str, account: str) -> DebtPosition | None:
        return self.store.get_position(get_checksum_address(asset), get_checksum_address(account))

    def scaled_balance_of(self, asset: str, account: str) -> int:
        position = self.get_position(asset, account)
        return 0 if position is None else position.scaled_balance

    def balance_of(self, asset: str, account: str, now: int) -> int:
        """
        Return the account's debt at `now`, with any discount it currently qualifies for.

        The store is not modified.
        """

        asset = get_checksum_address(asset)
        account = get_checksum_address(account)

        index = self._get_reserve(asset).get_normalized_debt(now)
        position = self.store.get_position(asset, account)
        if position is None or position.scaled_balance == 0:
            return 0

        return accrue_debt_on_action(
            position=position,
            current_index=index,
            policy=self.policy,
            staked_balance=self.staked_balances.staked_balance_of(account),
        ).balance

    def borrow(self, asset: str, account: str, principal: int, now: int) -> BorrowResult:
        """
        Add `principal` to the account's debt at `now`.

        Returns:
            A BorrowResult with the new debt balance and the corresponding mint event

        Raises:
            InvalidAmount: If `principal` is not positive
            UnknownReserve: If the asset has no reserve
            InvalidTimeRange: If `now` is earlier than the reserve's last update
        """

        asset = get_checksum_address(asset)
        account = get_checksum_address(account)

        if principal <= 0:
            raise InvalidAmount(principal)

        reserve = self._get_reserve(asset).sync_to(now)
        index = reserve.variable_borrow_index

        position, accrual = self._accrue(self._get_position(asset, account, index, now), index)
        position = apply_borrow(position, principal, index, now)
        balance = real_balance(position, index)

        self._commit(reserve, position)

        logger.info(f"BORROW: {account} borrowed {principal} of {asset}, balance {balance}")
        return BorrowResult(
            balance=balance,
            event=DebtMintEvent(
                account=account,
                value=principal + accrual.balance_increase,
                balance_increase=accrual.balance_increase,
                index=index,
            ),
        )

    def repay(self, asset: str, account: str, amount: int, now: int) -> RepayResult:
        """
        Repay up to `amount` of the account's debt at `now`. Pass `REPAY_ALL` to clear it.

        Amounts above the outstanding debt are capped to it, unless the engine was created with
        `strict_repay`.

        Returns:
            A RepayResult with the amount actually repaid, the new debt balance, the interest
            portion of the repayment, and the corresponding mint or burn event

        Raises:
            InvalidAmount: If `amount` is not positive
            RepayExceedsDebt: In strict mode, if `amount` exceeds the outstanding debt
            UnknownReserve: If the asset has no reserve
            InvalidTimeRange: If `now` is earlier than the reserve's last update
        """

        asset = get_checksum_address(asset)
        account = get_checksum_address(account)

        if amount <= 0:
            raise InvalidAmount(amount)

        reserve = self._get_reserve(asset).sync_to(now)
        index = reserve.variable_borrow_index

        stored_position = self.store.get_position(asset, account)
        if stored_position is None:
            if self.strict_repay and amount != REPAY_ALL:
                raise RepayExceedsDebt(amount, 0)
            logger.debug(f"REPAY: {account} has no {asset} debt, nothing repaid")
            return RepayResult(
                amount_repaid=0,
                balance=0,
                interest_repaid=0,
                event=DebtBurnEvent(account=account, value=0, balance_increase=0, index=index),
            )

        position, accrual = self._accrue(stored_position, index)
        position, amount_repaid = apply_repay(
            position,
            amount,
            index,
            now,
            outstanding=accrual.balance,
            strict=self.strict_repay,
        )

        interest_repaid = min(amount_repaid, position.accumulated_interest)
        position = dataclasses.replace(
            position,
            accumulated_interest=(
                0
                if position.scaled_balance == 0
                else position.accumulated_interest - interest_repaid
            ),
        )
        reserve = dataclasses.replace(
            reserve,
            accrued_to_treasury=reserve.accrued_to_treasury + interest_repaid,
        )
        balance = real_balance(position, index)

        self._commit(reserve, position)

        event: DebtMintEvent | DebtBurnEvent
        if accrual.balance_increase > amount_repaid:
            event = DebtMintEvent(
                account=account,
                value=accrual.balance_increase - amount_repaid,
                balance_increase=accrual.balance_increase,
                index=index,
            )
        else:
            event = DebtBurnEvent(
                account=account,
                value=amount_repaid - accrual.balance_increase,
                balance_increase=accrual.balance_increase,
                index=index,
            )

        logger.info(f"REPAY: {account} repaid {amount_repaid} of {asset}, balance {balance}")
        return RepayResult(
            amount_repaid=amount_repaid,
            balance=balance,
            interest_repaid=interest_repaid,
            event=event,
        )

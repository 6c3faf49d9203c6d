"""Position ledger — per-account collateral and debt with ratio enforcement."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import AsyncIterator, Callable

from . import ratio_math
from .errors import (
    ExcessiveBurn,
    InsufficientCollateral,
    InvalidAmount,
    RatioBreach,
)
from .interfaces.custody import CollateralCustody
from .interfaces.debt_token import DebtToken
from .models import LiquidationPlan, Position, PositionData, ProtocolParameters
from .oracles.client import PriceOracleClient

logger = logging.getLogger(__name__)


def _require_positive(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(f"Amount must be a positive integer, got {amount!r}")


class PositionLedger:
    """Owns every account's Position and serializes all mutations.

    Each mutating call holds one ledger-wide lock, reads the price once before
    touching any balance, commits the new Position, and only then calls the
    debt token or custody. If a collaborator raises, the ledger restores its
    pre-call state before the error propagates.
    """

    def __init__(
        self,
        params: ProtocolParameters,
        oracle: PriceOracleClient,
        debt_token: DebtToken,
        custody: CollateralCustody,
    ) -> None:
        self.params = params
        self.oracle = oracle
        self.debt_token = debt_token
        self.custody = custody
        self._positions: dict[str, Position] = {}
        self._lock = asyncio.Lock()
        self._undo: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def position(self, account: str) -> Position:
        return self._positions.get(account, Position())

    def accounts(self) -> list[str]:
        return sorted(self._positions)

    def total_collateral(self) -> int:
        return sum(p.collateral_amount for p in self._positions.values())

    def total_debt(self) -> int:
        return sum(p.debt_amount for p in self._positions.values())

    async def current_price(self) -> int:
        return await self.oracle.latest_price()

    async def is_undercollateralized(self, account: str) -> bool:
        price = await self.oracle.latest_price()
        position = self.position(account)
        value = ratio_math.collateral_value_usd(position.collateral_amount, price)
        return ratio_math.is_undercollateralized(
            value, position.debt_amount, self.params.liquidation_collateral_ratio
        )

    async def position_data(self, account: str) -> PositionData:
        price = await self.oracle.latest_price()
        return self.describe(account, self.position(account), price)

    def describe(self, account: str, position: Position, price: int) -> PositionData:
        """Build the reporting view of ``position`` at ``price``."""
        value = ratio_math.collateral_value_usd(position.collateral_amount, price)
        ratio = ratio_math.collateral_ratio(value, position.debt_amount)
        return PositionData(
            account=account,
            collateral_amount=position.collateral_amount,
            debt_amount=position.debt_amount,
            price=price,
            collateral_value=value,
            collateral_ratio=ratio,
            health_factor=ratio / self.params.liquidation_collateral_ratio,
            undercollateralized=ratio_math.is_undercollateralized(
                value, position.debt_amount, self.params.liquidation_collateral_ratio
            ),
        )

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Serialize a mutating call and undo everything it did on failure.

        Ledger writes are restored from a snapshot; collaborator effects
        already applied are reversed newest first.
        """
        async with self._lock:
            snapshot = dict(self._positions)
            self._undo = []
            try:
                yield
            except BaseException:
                for undo in reversed(self._undo):
                    undo()
                self._positions = snapshot
                raise
            finally:
                self._undo = []

    def _store(self, account: str, position: Position) -> None:
        if position.is_empty:
            self._positions.pop(account, None)
        else:
            self._positions[account] = position

    def _pull_collateral(self, account: str, amount: int) -> None:
        self.custody.pull(account, amount)
        self._undo.append(lambda: self.custody.push(account, amount))

    def _push_collateral(self, account: str, amount: int) -> None:
        self.custody.push(account, amount)
        self._undo.append(lambda: self.custody.pull(account, amount))

    def _mint_debt(self, account: str, amount: int) -> None:
        self.debt_token.mint(account, amount)
        self._undo.append(lambda: self.debt_token.burn(account, amount))

    def _burn_debt(self, account: str, amount: int) -> None:
        self.debt_token.burn(account, amount)
        self._undo.append(lambda: self.debt_token.mint(account, amount))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def deposit(self, account: str, amount: int) -> PositionData:
        """Lock ``amount`` of collateral for ``account``."""
        _require_positive(amount)
        async with self.transaction():
            price = await self.oracle.latest_price()
            current = self.position(account)
            updated = replace(current, collateral_amount=current.collateral_amount + amount)
            data = self.describe(account, updated, price)

            self._store(account, updated)
            self._pull_collateral(account, amount)

        logger.info("Deposit: %s +%d collateral (now %d)", account, amount, updated.collateral_amount)
        return data

    async def withdraw(self, account: str, amount: int) -> PositionData:
        """Release collateral, keeping the position at or above the minting ratio."""
        _require_positive(amount)
        async with self.transaction():
            price = await self.oracle.latest_price()
            current = self.position(account)
            if current.collateral_amount < amount:
                raise InsufficientCollateral(
                    f"{account} has {current.collateral_amount} collateral, cannot withdraw {amount}"
                )

            updated = replace(current, collateral_amount=current.collateral_amount - amount)
            value_after = ratio_math.collateral_value_usd(updated.collateral_amount, price)
            if not ratio_math.meets_ratio(
                value_after, updated.debt_amount, self.params.minting_collateral_ratio
            ):
                raise RatioBreach(
                    f"Withdrawing {amount} would leave {account} below "
                    f"{self.params.minting_collateral_ratio}% coverage"
                )
            data = self.describe(account, updated, price)

            self._store(account, updated)
            self._push_collateral(account, amount)

        logger.info("Withdraw: %s -%d collateral (now %d)", account, amount, updated.collateral_amount)
        return data

    async def mint(self, account: str, amount: int) -> PositionData:
        """Borrow ``amount`` of the debt token against the account's collateral."""
        _require_positive(amount)
        async with self.transaction():
            price = await self.oracle.latest_price()
            current = self.position(account)
            updated = replace(current, debt_amount=current.debt_amount + amount)

            value = ratio_math.collateral_value_usd(current.collateral_amount, price)
            ceiling = ratio_math.max_mintable(value, self.params.minting_collateral_ratio)
            if updated.debt_amount > ceiling:
                raise InsufficientCollateral(
                    f"Minting {amount} would bring {account} debt to {updated.debt_amount}, "
                    f"above the ceiling of {ceiling}"
                )
            data = self.describe(account, updated, price)

            self._store(account, updated)
            self._mint_debt(account, amount)

        logger.info("Mint: %s +%d debt (now %d)", account, amount, updated.debt_amount)
        return data

    async def burn(self, account: str, amount: int) -> PositionData:
        """Repay ``amount`` of debt, burning it from the account's token balance."""
        _require_positive(amount)
        async with self.transaction():
            price = await self.oracle.latest_price()
            current = self.position(account)
            if current.debt_amount < amount:
                raise ExcessiveBurn(
                    f"{account} owes {current.debt_amount}, cannot burn {amount}"
                )

            updated = replace(current, debt_amount=current.debt_amount - amount)
            data = self.describe(account, updated, price)

            self._store(account, updated)
            self._burn_debt(account, amount)

        logger.info("Burn: %s -%d debt (now %d)", account, amount, updated.debt_amount)
        return data

    def settle_liquidation(self, liquidator: str, plan: LiquidationPlan) -> Position:
        """Apply a liquidation plan. Must run inside ``transaction()``.

        Ledger balances are written first; the liquidator's debt tokens are
        then burned and the seized collateral paid out. A failed payout
        reverses the burn and any earlier payout.
        """
        current = self.position(plan.account)
        updated = Position(
            collateral_amount=current.collateral_amount - plan.collateral_seized,
            debt_amount=current.debt_amount - plan.debt_repaid,
        )
        self._store(plan.account, updated)

        self._burn_debt(liquidator, plan.debt_repaid)
        self._push_collateral(liquidator, plan.liquidator_collateral)
        if plan.protocol_fee and self.params.fee_recipient:
            self._push_collateral(self.params.fee_recipient, plan.protocol_fee)
        return updated

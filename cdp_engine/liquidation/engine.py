"""Liquidation engine — executes the configured policy against the ledger."""
from __future__ import annotations

import logging

from ..errors import InvalidAmount, UnsupportedOperation
from ..ledger import PositionLedger
from ..models import LiquidationPlan, LiquidationPolicy
from .policies import LiquidationStrategy, strategy_for

logger = logging.getLogger(__name__)


class LiquidationEngine:
    """Unwind undercollateralized positions with one policy per deployment.

    Each call takes the ledger's transaction, reads a fresh price, plans the
    liquidation from that price, and settles the plan before releasing the
    lock. Any failure leaves the ledger untouched.
    """

    def __init__(
        self, ledger: PositionLedger, strategy: LiquidationStrategy | None = None
    ) -> None:
        self._ledger = ledger
        self._strategy = strategy or strategy_for(ledger.params.liquidation_policy)

    @property
    def policy(self) -> LiquidationPolicy:
        return self._strategy.policy

    def _require_policy(self, policy: LiquidationPolicy, operation: str) -> None:
        if self._strategy.policy is not policy:
            raise UnsupportedOperation(
                f"{operation} is unavailable under the {self._strategy.policy.value} "
                "liquidation policy"
            )

    async def liquidate(self, liquidator: str, account: str, debt_to_cover: int) -> LiquidationPlan:
        """Repay ``debt_to_cover`` of ``account``'s debt for collateral plus bonus."""
        self._require_policy(LiquidationPolicy.PARTIAL, "liquidate")
        if isinstance(debt_to_cover, bool) or not isinstance(debt_to_cover, int) or debt_to_cover <= 0:
            raise InvalidAmount(f"debt_to_cover must be a positive integer, got {debt_to_cover!r}")
        return await self._execute(liquidator, account, debt_to_cover)

    async def liquidate_full(self, liquidator: str, account: str) -> LiquidationPlan:
        """Repay all of ``account``'s debt and seize principal plus penalty."""
        self._require_policy(LiquidationPolicy.FULL, "liquidate_full")
        return await self._execute(liquidator, account, None)

    async def _execute(
        self, liquidator: str, account: str, debt_to_cover: int | None
    ) -> LiquidationPlan:
        ledger = self._ledger
        async with ledger.transaction():
            price = await ledger.oracle.latest_price()
            plan = self._strategy.plan(
                account, ledger.position(account), price, ledger.params, debt_to_cover
            )
            remaining = ledger.settle_liquidation(liquidator, plan)

        logger.warning(
            "Liquidated %s by %s: debt repaid %d, collateral seized %d "
            "(liquidator %d, protocol fee %d); remaining collateral %d, debt %d",
            account,
            liquidator,
            plan.debt_repaid,
            plan.collateral_seized,
            plan.liquidator_collateral,
            plan.protocol_fee,
            remaining.collateral_amount,
            remaining.debt_amount,
        )
        return plan

"""Liquidation policies — pure planning over a position and a fresh price."""
from __future__ import annotations

from typing import Protocol

from .. import ratio_math
from ..constants import CLOSE_FACTOR_DIVISOR
from ..errors import InsufficientCollateral, LiquidationIneligible
from ..models import LiquidationPlan, LiquidationPolicy, Position, ProtocolParameters


class LiquidationStrategy(Protocol):
    """Computes the balance changes of a liquidation without applying them."""

    policy: LiquidationPolicy

    def plan(
        self,
        account: str,
        position: Position,
        price: int,
        params: ProtocolParameters,
        debt_to_cover: int | None = None,
    ) -> LiquidationPlan: ...


def _require_undercollateralized(
    account: str, position: Position, price: int, params: ProtocolParameters
) -> None:
    value = ratio_math.collateral_value_usd(position.collateral_amount, price)
    if not ratio_math.is_undercollateralized(
        value, position.debt_amount, params.liquidation_collateral_ratio
    ):
        raise LiquidationIneligible(
            f"{account} is not below {params.liquidation_collateral_ratio}% coverage"
        )


class PartialLiquidation:
    """Repay up to half the debt per call; the whole bonus goes to the liquidator."""

    policy = LiquidationPolicy.PARTIAL

    def plan(
        self,
        account: str,
        position: Position,
        price: int,
        params: ProtocolParameters,
        debt_to_cover: int | None = None,
    ) -> LiquidationPlan:
        if debt_to_cover is None:
            raise LiquidationIneligible("Partial liquidation needs an explicit debt_to_cover")

        _require_undercollateralized(account, position, price, params)

        cap = position.debt_amount // CLOSE_FACTOR_DIVISOR
        if debt_to_cover > cap:
            raise LiquidationIneligible(
                f"debt_to_cover {debt_to_cover} exceeds the per-call cap of {cap} for {account}"
            )

        seized = ratio_math.partial_seizure(debt_to_cover, params.liquidation_penalty_bps, price)
        if position.collateral_amount < seized:
            raise InsufficientCollateral(
                f"{account} has {position.collateral_amount} collateral, liquidation needs {seized}"
            )

        if not ratio_math.ratio_improves(
            position.collateral_amount,
            position.debt_amount,
            position.collateral_amount - seized,
            position.debt_amount - debt_to_cover,
        ):
            raise LiquidationIneligible(
                f"Liquidating {debt_to_cover} would not improve the collateral ratio of {account}"
            )

        return LiquidationPlan(
            account=account,
            price=price,
            debt_repaid=debt_to_cover,
            collateral_seized=seized,
            liquidator_collateral=seized,
        )


class FullLiquidation:
    """Close the whole position; split the penalty between liquidator and protocol."""

    policy = LiquidationPolicy.FULL

    def plan(
        self,
        account: str,
        position: Position,
        price: int,
        params: ProtocolParameters,
        debt_to_cover: int | None = None,
    ) -> LiquidationPlan:
        if position.debt_amount == 0:
            raise LiquidationIneligible(f"{account} has no debt")

        _require_undercollateralized(account, position, price, params)

        debt_eth = ratio_math.debt_in_collateral(position.debt_amount, price)
        if debt_eth > position.collateral_amount:
            raise LiquidationIneligible(
                f"{account} collateral {position.collateral_amount} cannot cover "
                f"principal worth {debt_eth}"
            )

        _, bonus, protocol_fee = ratio_math.full_liquidation_split(
            position.debt_amount,
            position.collateral_amount,
            params.liquidation_penalty_bps,
            price,
        )
        # Without a recipient the protocol share stays with the position
        if params.fee_recipient is None:
            protocol_fee = 0

        return LiquidationPlan(
            account=account,
            price=price,
            debt_repaid=position.debt_amount,
            collateral_seized=debt_eth + bonus + protocol_fee,
            liquidator_collateral=debt_eth + bonus,
            protocol_fee=protocol_fee,
        )


_STRATEGIES: dict[LiquidationPolicy, type] = {
    LiquidationPolicy.PARTIAL: PartialLiquidation,
    LiquidationPolicy.FULL: FullLiquidation,
}


def strategy_for(policy: LiquidationPolicy) -> LiquidationStrategy:
    return _STRATEGIES[policy]()

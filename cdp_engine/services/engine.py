"""Engine facade — wires ledger, oracle and liquidation from configuration."""
from __future__ import annotations

import logging
from typing import Any, Callable

from ..collaborators import InMemoryCollateralCustody, InMemoryDebtToken
from ..config import AppConfig, PriceFeedConfig
from ..interfaces.custody import CollateralCustody
from ..interfaces.debt_token import DebtToken
from ..interfaces.price_feed import PriceFeed
from ..ledger import PositionLedger
from ..liquidation import LiquidationEngine
from ..models import LiquidationPlan, Position, PositionData, ProtocolParameters
from ..oracles import FixedPriceFeed, PriceOracleClient, PythPriceFeed

logger = logging.getLogger(__name__)

# Registry of price feed factories keyed by provider name.
_FEED_FACTORIES: dict[str, Callable[[PriceFeedConfig], Any]] = {
    "pyth": lambda cfg: PythPriceFeed(cfg.pyth),
    "fixed": lambda cfg: FixedPriceFeed(cfg.fixed.price, cfg.fixed.decimals),
}


def build_price_feed(config: PriceFeedConfig) -> PriceFeed:
    factory = _FEED_FACTORIES.get(config.provider)
    if factory is None:
        raise ValueError(f"No price feed factory for provider '{config.provider}'")
    return factory(config)


class CollateralEngine:
    """Public surface of the collateralized-debt engine."""

    def __init__(
        self,
        params: ProtocolParameters,
        feed: PriceFeed,
        debt_token: DebtToken | None = None,
        custody: CollateralCustody | None = None,
    ) -> None:
        self.params = params
        self.debt_token = debt_token if debt_token is not None else InMemoryDebtToken()
        self.custody = (
            custody if custody is not None else InMemoryCollateralCustody(params.collateral_asset)
        )
        self.feed = feed
        self.oracle = PriceOracleClient(feed)
        self.ledger = PositionLedger(params, self.oracle, self.debt_token, self.custody)
        self.liquidations = LiquidationEngine(self.ledger)

        logger.info(
            "Engine ready: collateral=%s feed=%s mint=%d%% liquidation=%d%% "
            "penalty=%dbps policy=%s",
            params.collateral_asset,
            params.price_feed,
            params.minting_collateral_ratio,
            params.liquidation_collateral_ratio,
            params.liquidation_penalty_bps,
            params.liquidation_policy.value,
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        debt_token: DebtToken | None = None,
        custody: CollateralCustody | None = None,
    ) -> CollateralEngine:
        return cls(config.parameters(), build_price_feed(config.price_feed), debt_token, custody)

    # ------------------------------------------------------------------
    # Position operations
    # ------------------------------------------------------------------

    async def deposit(self, account: str, amount: int) -> PositionData:
        return await self.ledger.deposit(account, amount)

    async def withdraw(self, account: str, amount: int) -> PositionData:
        return await self.ledger.withdraw(account, amount)

    async def mint(self, account: str, amount: int) -> PositionData:
        return await self.ledger.mint(account, amount)

    async def burn(self, account: str, amount: int) -> PositionData:
        return await self.ledger.burn(account, amount)

    # ------------------------------------------------------------------
    # Liquidation
    # ------------------------------------------------------------------

    async def liquidate(self, liquidator: str, account: str, debt_to_cover: int) -> LiquidationPlan:
        return await self.liquidations.liquidate(liquidator, account, debt_to_cover)

    async def liquidate_full(self, liquidator: str, account: str) -> LiquidationPlan:
        return await self.liquidations.liquidate_full(liquidator, account)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def position(self, account: str) -> Position:
        return self.ledger.position(account)

    async def position_data(self, account: str) -> PositionData:
        return await self.ledger.position_data(account)

    async def is_undercollateralized(self, account: str) -> bool:
        return await self.ledger.is_undercollateralized(account)

    async def current_price(self) -> int:
        return await self.ledger.current_price()

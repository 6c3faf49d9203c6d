"""Data models — all frozen (immutable)."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from .constants import BPS_SCALE, PERCENT
from .errors import InvalidConfiguration


class LiquidationPolicy(str, enum.Enum):
    """Liquidation strategy selected for a deployment."""

    PARTIAL = "partial"
    FULL = "full"


@dataclass(frozen=True)
class Position:
    """Collateral and debt held by one account, in 18-decimal units."""

    collateral_amount: int = 0
    debt_amount: int = 0

    @property
    def is_empty(self) -> bool:
        return self.collateral_amount == 0 and self.debt_amount == 0


@dataclass(frozen=True)
class PriceSnapshot:
    """Raw feed reading, before normalization."""

    price: int
    decimals: int


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class ProtocolParameters:
    """Process-wide risk parameters, validated once at construction.

    Ratios are percentages (150 means collateral must be worth 150% of the
    debt). The liquidation penalty is in basis points for both policies.
    """

    collateral_asset: str
    price_feed: str
    minting_collateral_ratio: int
    liquidation_collateral_ratio: int
    liquidation_penalty_bps: int
    liquidation_policy: LiquidationPolicy = LiquidationPolicy.FULL
    fee_recipient: str | None = None

    def __post_init__(self) -> None:
        if not self.collateral_asset:
            raise InvalidConfiguration("collateral_asset must be set")
        if not self.price_feed:
            raise InvalidConfiguration("price_feed must be set")

        minting = _require_int("minting_collateral_ratio", self.minting_collateral_ratio)
        liquidation = _require_int(
            "liquidation_collateral_ratio", self.liquidation_collateral_ratio
        )
        penalty = _require_int("liquidation_penalty_bps", self.liquidation_penalty_bps)

        if liquidation < PERCENT:
            raise InvalidConfiguration(
                f"liquidation_collateral_ratio must be at least {PERCENT}, got {liquidation}"
            )
        if liquidation >= minting:
            raise InvalidConfiguration(
                "liquidation_collateral_ratio must be strictly less than "
                f"minting_collateral_ratio ({liquidation} >= {minting})"
            )
        if not 0 <= penalty < BPS_SCALE:
            raise InvalidConfiguration(
                f"liquidation_penalty_bps must be in [0, {BPS_SCALE}), got {penalty}"
            )
        if not isinstance(self.liquidation_policy, LiquidationPolicy):
            try:
                policy = LiquidationPolicy(self.liquidation_policy)
            except ValueError as e:
                raise InvalidConfiguration(
                    f"Unknown liquidation_policy {self.liquidation_policy!r}"
                ) from e
            object.__setattr__(self, "liquidation_policy", policy)
        if self.fee_recipient is not None and not self.fee_recipient:
            raise InvalidConfiguration("fee_recipient must be non-empty when set")


@dataclass(frozen=True)
class LiquidationPlan:
    """Balance changes a liquidation will apply, computed before any mutation."""

    account: str
    price: int
    debt_repaid: int
    collateral_seized: int
    liquidator_collateral: int
    protocol_fee: int = 0


@dataclass(frozen=True)
class PositionData:
    """Reporting view of a position at a given normalized price."""

    account: str
    collateral_amount: int
    debt_amount: int
    price: int
    collateral_value: int
    collateral_ratio: float
    health_factor: float
    undercollateralized: bool

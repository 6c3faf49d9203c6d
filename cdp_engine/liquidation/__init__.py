"""Liquidation policies and the engine that applies them."""
from .engine import LiquidationEngine
from .policies import FullLiquidation, LiquidationStrategy, PartialLiquidation, strategy_for

__all__ = [
    "FullLiquidation",
    "LiquidationEngine",
    "LiquidationStrategy",
    "PartialLiquidation",
    "strategy_for",
]

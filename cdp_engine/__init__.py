"""Collateralized-debt accounting engine."""
from .errors import ProtocolError
from .ledger import PositionLedger
from .liquidation import LiquidationEngine
from .models import LiquidationPlan, LiquidationPolicy, Position, PositionData, ProtocolParameters
from .services import CollateralEngine

__all__ = [
    "CollateralEngine",
    "LiquidationEngine",
    "LiquidationPlan",
    "LiquidationPolicy",
    "Position",
    "PositionData",
    "PositionLedger",
    "ProtocolError",
    "ProtocolParameters",
]

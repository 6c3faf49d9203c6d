"""Protocol interfaces for the engine's external collaborators."""
from .custody import CollateralCustody
from .debt_token import DebtToken
from .price_feed import PriceFeed

__all__ = ["CollateralCustody", "DebtToken", "PriceFeed"]

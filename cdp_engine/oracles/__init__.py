"""Price feeds and the normalizing oracle client."""
from .client import PriceOracleClient, normalize_price
from .fixed import FixedPriceFeed
from .pyth import PythPriceFeed

__all__ = ["FixedPriceFeed", "PriceOracleClient", "PythPriceFeed", "normalize_price"]

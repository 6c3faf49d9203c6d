"""Price oracle client — normalizes raw feed readings to 18 decimals."""
from __future__ import annotations

import logging

from ..constants import PRICE_DECIMALS
from ..errors import InvalidPrice
from ..interfaces.price_feed import PriceFeed
from ..models import PriceSnapshot

logger = logging.getLogger(__name__)


def normalize_price(snapshot: PriceSnapshot) -> int:
    """Rescale a raw reading to an 18-decimal fixed-point price.

    Raises:
        InvalidPrice: if the raw price is not positive, the decimal count is
            negative, or the rescaled price truncates to zero.
    """
    if snapshot.price <= 0:
        raise InvalidPrice(f"Price must be positive, got {snapshot.price}")
    if snapshot.decimals < 0:
        raise InvalidPrice(f"Price decimals must be non-negative, got {snapshot.decimals}")

    if snapshot.decimals <= PRICE_DECIMALS:
        return snapshot.price * 10 ** (PRICE_DECIMALS - snapshot.decimals)

    price = snapshot.price // 10 ** (snapshot.decimals - PRICE_DECIMALS)
    if price == 0:
        raise InvalidPrice(
            f"Price {snapshot.price} at {snapshot.decimals} decimals truncates to zero"
        )
    return price


class PriceOracleClient:
    """Wrap a PriceFeed; every call reads the feed afresh."""

    def __init__(self, feed: PriceFeed) -> None:
        self._feed = feed

    async def latest_price(self) -> int:
        """Return the current collateral price as an 18-decimal integer."""
        raw_price, raw_decimals = await self._feed.read()
        price = normalize_price(PriceSnapshot(price=int(raw_price), decimals=int(raw_decimals)))
        logger.debug("Normalized price %d (raw %d, %d decimals)", price, raw_price, raw_decimals)
        return price

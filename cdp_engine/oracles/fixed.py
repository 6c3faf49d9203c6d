"""In-process price feed with a settable reading."""
from __future__ import annotations

from ..errors import FeedUnavailable


class FixedPriceFeed:
    """Serve a fixed ``(price, decimals)`` reading until it is changed.

    Used for dry runs and tests. ``set_unavailable`` makes subsequent reads
    fail the way a real feed outage would.
    """

    def __init__(self, price: int, decimals: int = 8) -> None:
        self.price = price
        self.decimals = decimals
        self.reads = 0
        self._unavailable = False

    def set_price(self, price: int, decimals: int | None = None) -> None:
        self.price = price
        if decimals is not None:
            self.decimals = decimals
        self._unavailable = False

    def set_unavailable(self) -> None:
        self._unavailable = True

    async def read(self) -> tuple[int, int]:
        self.reads += 1
        if self._unavailable:
            raise FeedUnavailable("Fixed price feed marked unavailable")
        return self.price, self.decimals

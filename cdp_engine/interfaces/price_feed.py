"""Price feed protocol — raw price source abstraction."""
from typing import Protocol


class PriceFeed(Protocol):
    """Abstract interface for reading the collateral price.

    ``read`` returns ``(raw_price, raw_decimals)`` and raises
    ``FeedUnavailable`` when the source cannot be reached.
    """

    async def read(self) -> tuple[int, int]: ...

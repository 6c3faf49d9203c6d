"""Pyth Network price feed."""
from __future__ import annotations

import logging
import ssl
import time
from typing import Any

import aiohttp
import certifi

from ..config import PythConfig
from ..errors import FeedUnavailable

logger = logging.getLogger(__name__)


def _normalize_id(feed_id: str) -> str:
    return feed_id.lower().removeprefix("0x")


class PythPriceFeed:
    """Read the collateral price from the Pyth Hermes API."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.feed_id = config.feed_id
        self.timeout = config.timeout
        self.max_price_age_seconds = config.max_price_age_seconds

    async def read(self) -> tuple[int, int]:
        """Fetch the latest ``(price, decimals)`` reading for the configured feed.

        Raises:
            FeedUnavailable: on HTTP or network failure, a missing or malformed
                entry, or a reading older than ``max_price_age_seconds``.
        """
        url = f"{self.hermes_url}?ids[]={self.feed_id}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        raise FeedUnavailable(
                            f"Pyth returned HTTP {response.status} for feed {self.feed_id}"
                        )
                    data = await response.json()
        except FeedUnavailable:
            raise
        except Exception as e:
            logger.error("Error fetching price from Pyth: %s", e)
            raise FeedUnavailable(f"Pyth request failed: {e}") from e

        return self._parse(data)

    def _parse(self, data: dict[str, Any]) -> tuple[int, int]:
        wanted = _normalize_id(self.feed_id)
        for item in data.get("parsed", []):
            if _normalize_id(str(item.get("id", ""))) != wanted:
                continue

            price_data = item.get("price") or {}
            try:
                price_raw = int(price_data["price"])
                expo = int(price_data["expo"])
            except (KeyError, TypeError, ValueError) as e:
                raise FeedUnavailable(f"Malformed Pyth price for feed {self.feed_id}") from e

            self._check_age(price_data.get("publish_time"))

            # Pyth reports price * 10^expo; a negative exponent is the decimal count
            if expo <= 0:
                decimals = -expo
            else:
                price_raw *= 10**expo
                decimals = 0

            logger.debug("Pyth price for %s: %d (decimals=%d)", self.feed_id, price_raw, decimals)
            return price_raw, decimals

        raise FeedUnavailable(f"Feed {self.feed_id} missing from Pyth response")

    def _check_age(self, publish_time: Any) -> None:
        if self.max_price_age_seconds is None or publish_time is None:
            return
        age = time.time() - int(publish_time)
        if age > self.max_price_age_seconds:
            raise FeedUnavailable(
                f"Pyth price for {self.feed_id} is {age:.0f}s old "
                f"(max {self.max_price_age_seconds}s)"
            )

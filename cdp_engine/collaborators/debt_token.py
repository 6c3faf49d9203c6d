"""In-memory debt token balances."""
from __future__ import annotations

import logging
from collections import defaultdict

from ..errors import InsufficientBalance, InvalidAmount

logger = logging.getLogger(__name__)


class InMemoryDebtToken:
    """Fungible balance ledger for the debt token."""

    def __init__(self, symbol: str = "USD") -> None:
        self.symbol = symbol
        self._balances: defaultdict[str, int] = defaultdict(int)
        self.total_supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise InvalidAmount(f"Cannot mint negative amount {amount}")
        self._balances[to] += amount
        self.total_supply += amount
        logger.debug("Minted %d %s to %s", amount, self.symbol, to)

    def burn(self, from_: str, amount: int) -> None:
        if amount < 0:
            raise InvalidAmount(f"Cannot burn negative amount {amount}")
        balance = self.balance_of(from_)
        if balance < amount:
            raise InsufficientBalance(
                f"{from_} holds {balance} {self.symbol}, cannot burn {amount}"
            )
        self._balances[from_] = balance - amount
        self.total_supply -= amount
        logger.debug("Burned %d %s from %s", amount, self.symbol, from_)

    def transfer(self, from_: str, to: str, amount: int) -> None:
        """Move balance between holders, e.g. to fund a liquidator."""
        self.burn(from_, amount)
        self.mint(to, amount)

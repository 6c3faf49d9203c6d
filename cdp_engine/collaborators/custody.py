"""In-memory collateral custody."""
from __future__ import annotations

import logging
from collections import defaultdict

from ..errors import InsufficientBalance, InvalidAmount

logger = logging.getLogger(__name__)


class InMemoryCollateralCustody:
    """Track collateral in account wallets and in the engine's vault.

    ``pull`` moves collateral from a wallet into the vault, ``push`` moves it
    from the vault back out to a wallet.
    """

    def __init__(self, asset: str = "ETH") -> None:
        self.asset = asset
        self._wallets: defaultdict[str, int] = defaultdict(int)
        self.vault_balance = 0

    def wallet_balance(self, account: str) -> int:
        return self._wallets.get(account, 0)

    def credit(self, account: str, amount: int) -> None:
        """Fund a wallet from outside the system."""
        if amount < 0:
            raise InvalidAmount(f"Cannot credit negative amount {amount}")
        self._wallets[account] += amount

    def pull(self, from_: str, amount: int) -> None:
        balance = self.wallet_balance(from_)
        if balance < amount:
            raise InsufficientBalance(
                f"{from_} holds {balance} {self.asset}, cannot deposit {amount}"
            )
        self._wallets[from_] = balance - amount
        self.vault_balance += amount
        logger.debug("Pulled %d %s from %s", amount, self.asset, from_)

    def push(self, to: str, amount: int) -> None:
        if self.vault_balance < amount:
            raise InsufficientBalance(
                f"Vault holds {self.vault_balance} {self.asset}, cannot release {amount}"
            )
        self.vault_balance -= amount
        self._wallets[to] += amount
        logger.debug("Pushed %d %s to %s", amount, self.asset, to)

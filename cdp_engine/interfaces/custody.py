"""Collateral custody protocol — deposit/withdraw transfer mechanics."""
from typing import Protocol


class CollateralCustody(Protocol):
    """Moves collateral between account wallets and the engine's vault.

    Both methods must raise ``InsufficientBalance`` without side effects on
    insufficient balance.
    """

    def pull(self, from_: str, amount: int) -> None: ...

    def push(self, to: str, amount: int) -> None: ...

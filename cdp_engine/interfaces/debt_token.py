"""Debt token protocol — fungible balance ledger for the borrowed asset."""
from typing import Protocol


class DebtToken(Protocol):
    """Mint/burn capability for the debt token.

    ``burn`` must raise ``InsufficientBalance`` without side effects when the
    holder's balance is too small.
    """

    def mint(self, to: str, amount: int) -> None: ...

    def burn(self, from_: str, amount: int) -> None: ...

"""In-memory implementations of the engine's external collaborators."""
from .custody import InMemoryCollateralCustody
from .debt_token import InMemoryDebtToken

__all__ = ["InMemoryCollateralCustody", "InMemoryDebtToken"]

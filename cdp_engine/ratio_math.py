"""Fixed-point ratio arithmetic shared by the ledger and both liquidation policies.

All values are integers. Every multiplication is performed before any
division and every division floors, so collateral is never overvalued and
mint ceilings are never overestimated. Products are checked against the
256-bit word the reference design runs on.
"""
from __future__ import annotations

from .constants import BPS_SCALE, PERCENT, UINT256_MAX, WAD
from .errors import ArithmeticOverflow


def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > UINT256_MAX:
        raise ArithmeticOverflow("Arithmetic overflow in multiplication")
    return result


def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > UINT256_MAX:
        raise ArithmeticOverflow("Arithmetic overflow in addition")
    return result


def checked_div(a: int, b: int) -> int:
    """Floor division; a zero divisor is an arithmetic fault"""
    if b == 0:
        raise ArithmeticOverflow("Division by zero")
    return a // b


def collateral_value_usd(collateral_amount: int, price: int) -> int:
    """USD value (18 decimals) of ``collateral_amount`` at a normalized price."""
    return checked_div(checked_mul(collateral_amount, price), WAD)


def max_mintable(collateral_value: int, ratio: int) -> int:
    """Largest debt a collateral value supports at ``ratio`` percent."""
    return checked_div(checked_mul(collateral_value, PERCENT), ratio)


def is_undercollateralized(collateral_value: int, debt_amount: int, liquidation_ratio: int) -> bool:
    return checked_mul(collateral_value, PERCENT) < checked_mul(debt_amount, liquidation_ratio)


def meets_ratio(collateral_value: int, debt_amount: int, ratio: int) -> bool:
    """True when the position is debt-free or covered at ``ratio`` percent."""
    if debt_amount == 0:
        return True
    return checked_mul(collateral_value, PERCENT) >= checked_mul(debt_amount, ratio)


def collateral_ratio(collateral_value: int, debt_amount: int) -> float:
    """Coverage as a percentage, for reporting only. ``inf`` without debt."""
    if debt_amount == 0:
        return float("inf")
    return collateral_value * PERCENT / debt_amount


def partial_seizure(debt_to_cover: int, penalty_bps: int, price: int) -> int:
    """Collateral (principal plus bonus) owed for repaying ``debt_to_cover``.

    collateral = debt * (BPS + penalty) * WAD / (BPS * price)
    """
    numerator = checked_mul(checked_mul(debt_to_cover, BPS_SCALE + penalty_bps), WAD)
    return checked_div(numerator, checked_mul(BPS_SCALE, price))


def debt_in_collateral(debt_amount: int, price: int) -> int:
    """Collateral units equivalent to ``debt_amount`` at a normalized price."""
    return checked_div(checked_mul(debt_amount, WAD), price)


def full_liquidation_split(
    debt_amount: int, collateral_amount: int, penalty_bps: int, price: int
) -> tuple[int, int, int]:
    """Split a full liquidation into (principal, liquidator bonus, protocol fee).

    The caller must ensure the principal does not exceed ``collateral_amount``.
    The penalty is capped by what collateral remains after the principal, and
    the liquidator receives at most half of the ideal penalty.
    """
    debt_eth = debt_in_collateral(debt_amount, price)
    extra_ideal = checked_div(checked_mul(debt_eth, penalty_bps), BPS_SCALE)
    extra_available = collateral_amount - debt_eth
    actual_extra = min(extra_ideal, extra_available)
    liquidator_bonus = min(actual_extra, extra_ideal // 2)
    protocol_fee = actual_extra - liquidator_bonus
    return debt_eth, liquidator_bonus, protocol_fee


def ratio_improves(
    old_collateral: int, old_debt: int, new_collateral: int, new_debt: int
) -> bool:
    """True when new_collateral / new_debt > old_collateral / old_debt.

    Compared in collateral units so the price cancels and no rounding occurs.
    """
    if new_debt == 0:
        return True
    if old_debt == 0:
        return False
    return checked_mul(new_collateral, old_debt) > checked_mul(old_collateral, new_debt)

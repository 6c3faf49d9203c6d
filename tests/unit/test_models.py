"""Unit tests for data models."""
from __future__ import annotations

import pytest

from cdp_engine.errors import InvalidConfiguration
from cdp_engine.models import LiquidationPolicy, Position, ProtocolParameters


def _params(**overrides) -> ProtocolParameters:
    values = dict(
        collateral_asset="ETH",
        price_feed="fixed",
        minting_collateral_ratio=150,
        liquidation_collateral_ratio=125,
        liquidation_penalty_bps=500,
    )
    values.update(overrides)
    return ProtocolParameters(**values)


class TestPosition:
    def test_defaults_empty(self) -> None:
        p = Position()
        assert p.collateral_amount == 0
        assert p.debt_amount == 0
        assert p.is_empty

    def test_frozen(self) -> None:
        p = Position(collateral_amount=1)
        with pytest.raises(AttributeError):
            p.collateral_amount = 2  # type: ignore[misc]


class TestProtocolParameters:
    def test_valid(self) -> None:
        params = _params()
        assert params.liquidation_policy is LiquidationPolicy.FULL
        assert params.fee_recipient is None

    def test_policy_from_string(self) -> None:
        assert _params(liquidation_policy="partial").liquidation_policy is LiquidationPolicy.PARTIAL

    def test_unknown_policy_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="Unknown liquidation_policy"):
            _params(liquidation_policy="auction")

    def test_liquidation_ratio_equal_to_minting_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="strictly less"):
            _params(liquidation_collateral_ratio=150)

    def test_liquidation_ratio_above_minting_raises(self) -> None:
        with pytest.raises(InvalidConfiguration):
            _params(liquidation_collateral_ratio=160)

    def test_liquidation_ratio_below_100_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="at least 100"):
            _params(liquidation_collateral_ratio=90)

    def test_missing_collateral_asset_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="collateral_asset"):
            _params(collateral_asset="")

    def test_missing_price_feed_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="price_feed"):
            _params(price_feed="")

    def test_penalty_out_of_range_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="liquidation_penalty_bps"):
            _params(liquidation_penalty_bps=10_000)

    def test_float_ratio_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="integer"):
            _params(minting_collateral_ratio=150.0)

    def test_empty_fee_recipient_raises(self) -> None:
        with pytest.raises(InvalidConfiguration, match="fee_recipient"):
            _params(fee_recipient="")

    def test_frozen(self) -> None:
        params = _params()
        with pytest.raises(AttributeError):
            params.minting_collateral_ratio = 200  # type: ignore[misc]

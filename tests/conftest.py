"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from cdp_engine.collaborators import InMemoryCollateralCustody, InMemoryDebtToken
from cdp_engine.config import (
    AppConfig,
    FixedFeedConfig,
    PriceFeedConfig,
    ProtocolSection,
    PythConfig,
)
from cdp_engine.constants import WAD
from cdp_engine.models import LiquidationPolicy, ProtocolParameters
from cdp_engine.oracles import FixedPriceFeed
from cdp_engine.services import CollateralEngine

FEED_DECIMALS = 8


def feed_price(usd: int) -> int:
    """Whole-dollar price at the reference feed's 8 decimals."""
    return usd * 10**FEED_DECIMALS


# ---------------------------------------------------------------------------
# Parameter fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def full_params() -> ProtocolParameters:
    return ProtocolParameters(
        collateral_asset="ETH",
        price_feed="fixed",
        minting_collateral_ratio=150,
        liquidation_collateral_ratio=125,
        liquidation_penalty_bps=500,
        liquidation_policy=LiquidationPolicy.FULL,
        fee_recipient="treasury",
    )


@pytest.fixture()
def partial_params() -> ProtocolParameters:
    return ProtocolParameters(
        collateral_asset="ETH",
        price_feed="fixed",
        minting_collateral_ratio=150,
        liquidation_collateral_ratio=125,
        liquidation_penalty_bps=1000,
        liquidation_policy=LiquidationPolicy.PARTIAL,
    )


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def feed() -> FixedPriceFeed:
    return FixedPriceFeed(feed_price(2000), FEED_DECIMALS)


@pytest.fixture()
def debt_token() -> InMemoryDebtToken:
    return InMemoryDebtToken()


@pytest.fixture()
def custody() -> InMemoryCollateralCustody:
    custody = InMemoryCollateralCustody("ETH")
    custody.credit("alice", 100 * WAD)
    custody.credit("bob", 100 * WAD)
    return custody


@pytest.fixture()
def full_engine(
    full_params: ProtocolParameters,
    feed: FixedPriceFeed,
    debt_token: InMemoryDebtToken,
    custody: InMemoryCollateralCustody,
) -> CollateralEngine:
    return CollateralEngine(full_params, feed, debt_token, custody)


@pytest.fixture()
def partial_engine(
    partial_params: ProtocolParameters,
    feed: FixedPriceFeed,
    debt_token: InMemoryDebtToken,
    custody: InMemoryCollateralCustody,
) -> CollateralEngine:
    return CollateralEngine(partial_params, feed, debt_token, custody)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_pyth_config() -> PythConfig:
    return PythConfig(
        hermes_url="https://hermes.example.com/v2/updates/price/latest",
        feed_id="0xabc123",
        timeout=5,
    )


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        protocol=ProtocolSection(
            collateral_asset="ETH",
            minting_collateral_ratio=150,
            liquidation_collateral_ratio=125,
            liquidation_penalty_bps=500,
            liquidation_policy="full",
            fee_recipient="treasury",
        ),
        price_feed=PriceFeedConfig(
            provider="fixed",
            fixed=FixedFeedConfig(price=feed_price(2000), decimals=FEED_DECIMALS),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    protocol:
      collateral_asset: ETH
      minting_collateral_ratio: 150
      liquidation_collateral_ratio: 125
      liquidation_penalty_bps: 500
      liquidation_policy: full
      fee_recipient: treasury
    price_feed:
      provider: pyth
      pyth:
        hermes_url: "https://hermes.example.com"
        feed_id: "0xabc123"
        timeout: 5
        max_price_age_seconds: 60
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file

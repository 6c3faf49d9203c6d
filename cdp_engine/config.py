"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_LIQ_PENALTY_BPS,
    DEFAULT_LIQUIDATION_RATIO,
    DEFAULT_MINTING_RATIO,
)
from .errors import InvalidConfiguration
from .models import LiquidationPolicy, ProtocolParameters

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProtocolSection:
    collateral_asset: str = "ETH"
    minting_collateral_ratio: int = DEFAULT_MINTING_RATIO
    liquidation_collateral_ratio: int = DEFAULT_LIQUIDATION_RATIO
    liquidation_penalty_bps: int = DEFAULT_LIQ_PENALTY_BPS
    liquidation_policy: str = LiquidationPolicy.FULL.value
    fee_recipient: str | None = None


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feed_id: str = ""
    timeout: int = 10
    max_price_age_seconds: int | None = None


@dataclass(frozen=True)
class FixedFeedConfig:
    price: int = 0
    decimals: int = 8


@dataclass(frozen=True)
class PriceFeedConfig:
    provider: str = "pyth"
    pyth: PythConfig = field(default_factory=PythConfig)
    fixed: FixedFeedConfig = field(default_factory=FixedFeedConfig)

    @property
    def identity(self) -> str:
        if self.provider == "pyth":
            return f"pyth:{self.pyth.feed_id}" if self.pyth.feed_id else ""
        return self.provider


@dataclass(frozen=True)
class AppConfig:
    protocol: ProtocolSection = field(default_factory=ProtocolSection)
    price_feed: PriceFeedConfig = field(default_factory=PriceFeedConfig)

    def parameters(self) -> ProtocolParameters:
        """Build the validated protocol parameters for this deployment."""
        return ProtocolParameters(
            collateral_asset=self.protocol.collateral_asset,
            price_feed=self.price_feed.identity,
            minting_collateral_ratio=self.protocol.minting_collateral_ratio,
            liquidation_collateral_ratio=self.protocol.liquidation_collateral_ratio,
            liquidation_penalty_bps=self.protocol.liquidation_penalty_bps,
            liquidation_policy=self.protocol.liquidation_policy,
            fee_recipient=self.protocol.fee_recipient,
        )


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _as_int(raw: dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"'{key}' must be an integer, got {value!r}") from e


def _as_optional_int(raw: dict[str, Any], key: str) -> int | None:
    if raw.get(key) in (None, ""):
        return None
    return _as_int(raw, key, 0)


def _build_protocol(raw: dict[str, Any]) -> ProtocolSection:
    fee_recipient = raw.get("fee_recipient") or None
    return ProtocolSection(
        collateral_asset=str(raw.get("collateral_asset", "ETH")),
        minting_collateral_ratio=_as_int(
            raw, "minting_collateral_ratio", DEFAULT_MINTING_RATIO
        ),
        liquidation_collateral_ratio=_as_int(
            raw, "liquidation_collateral_ratio", DEFAULT_LIQUIDATION_RATIO
        ),
        liquidation_penalty_bps=_as_int(
            raw, "liquidation_penalty_bps", DEFAULT_LIQ_PENALTY_BPS
        ),
        liquidation_policy=str(
            raw.get("liquidation_policy", LiquidationPolicy.FULL.value)
        ).lower(),
        fee_recipient=fee_recipient,
    )


def _build_price_feed(raw: dict[str, Any]) -> PriceFeedConfig:
    pyth_raw = raw.get("pyth") or {}
    fixed_raw = raw.get("fixed") or {}
    return PriceFeedConfig(
        provider=raw.get("provider", "pyth"),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feed_id=str(pyth_raw.get("feed_id", "")),
            timeout=_as_int(pyth_raw, "timeout", PythConfig.timeout),
            max_price_age_seconds=_as_optional_int(pyth_raw, "max_price_age_seconds"),
        ),
        fixed=FixedFeedConfig(
            price=_as_int(fixed_raw, "price", 0),
            decimals=_as_int(fixed_raw, "decimals", FixedFeedConfig.decimals),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        protocol=_build_protocol(raw.get("protocol") or {}),
        price_feed=_build_price_feed(raw.get("price_feed") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise InvalidConfiguration on invalid configuration."""
    if cfg.price_feed.provider not in ("pyth", "fixed"):
        raise InvalidConfiguration(
            f"Unknown price feed provider '{cfg.price_feed.provider}'"
        )
    if cfg.price_feed.provider == "pyth" and not cfg.price_feed.pyth.feed_id:
        raise InvalidConfiguration("price_feed.pyth.feed_id must be set")
    cfg.parameters()

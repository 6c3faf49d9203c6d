"""Service modules"""
from .engine import CollateralEngine, build_price_feed

__all__ = ["CollateralEngine", "build_price_feed"]

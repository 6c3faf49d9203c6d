"""Command-line interface for the collateralized-debt engine."""
from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation

from . import ratio_math
from .config import load_config
from .constants import WAD
from .logging_setup import configure_logging
from .services import CollateralEngine


def to_units(value: str) -> int:
    """Parse a decimal amount such as ``1.5`` into 18-decimal units."""
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"Not a number: {value!r}") from e
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"Amount must be finite: {value!r}")
    if amount < 0:
        raise argparse.ArgumentTypeError(f"Amount must be non-negative: {value!r}")
    return int(amount * WAD)


def format_units(value: int) -> str:
    return f"{Decimal(value) / WAD:,.6f}"


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="cdp-engine",
        description="Collateralized-debt accounting engine",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("price", help="Read and normalize the collateral price")
    sub.add_parser("params", help="Show the validated protocol parameters")

    health_parser = sub.add_parser(
        "health", help="Evaluate a hypothetical position at the live price"
    )
    health_parser.add_argument("collateral", type=to_units, help="Collateral amount, e.g. 1.5")
    health_parser.add_argument("debt", type=to_units, help="Debt amount, e.g. 1200")

    return parser


def _print_params(engine: CollateralEngine) -> None:
    params = engine.params
    print(f"Collateral asset:     {params.collateral_asset}")
    print(f"Price feed:           {params.price_feed}")
    print(f"Minting ratio:        {params.minting_collateral_ratio}%")
    print(f"Liquidation ratio:    {params.liquidation_collateral_ratio}%")
    print(f"Liquidation penalty:  {params.liquidation_penalty_bps} bps")
    print(f"Liquidation policy:   {params.liquidation_policy.value}")
    print(f"Fee recipient:        {params.fee_recipient or '—'}")


async def _print_health(engine: CollateralEngine, collateral: int, debt: int) -> None:
    price = await engine.current_price()
    params = engine.params
    value = ratio_math.collateral_value_usd(collateral, price)
    ratio = ratio_math.collateral_ratio(value, debt)
    ceiling = ratio_math.max_mintable(value, params.minting_collateral_ratio)
    undercollateralized = ratio_math.is_undercollateralized(
        value, debt, params.liquidation_collateral_ratio
    )

    print(f"Price:              ${format_units(price)}")
    print(f"Collateral value:   ${format_units(value)}")
    print(f"Debt:               {format_units(debt)}")
    print(f"Collateral ratio:   {ratio:.2f}%")
    print(f"Health factor:      {ratio / params.liquidation_collateral_ratio:.2f}")
    print(f"Max mintable:       {format_units(ceiling)}")
    print(f"Liquidatable:       {'yes' if undercollateralized else 'no'}")


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    engine = CollateralEngine.from_config(config)

    if args.command == "price":
        price = await engine.current_price()
        print(f"{engine.params.collateral_asset}/USD: ${format_units(price)} ({price})")
    elif args.command == "params":
        _print_params(engine)
    elif args.command == "health":
        await _print_health(engine, args.collateral, args.debt)
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    asyncio.run(_run(args))

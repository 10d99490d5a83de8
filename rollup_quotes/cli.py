"""
Command-line driver for the quoting core.

Examples:
  rollup-quotes calculate --width 2 --height 2 --demo
  rollup-quotes calculate --width 5 --height 3 --quantity 2 --optional 1 --optional 3 --demo
  rollup-quotes catalog motors --demo
  rollup-quotes init-db
"""

import argparse
import asyncio
import sys
from decimal import Decimal

from rollup_quotes.config.settings import settings
from rollup_quotes.database.base import close_db, get_db_session, init_db
from rollup_quotes.exceptions import QuotingError
from rollup_quotes.schemas import catalog_entry_to_dict
from rollup_quotes.services.quoting import (
    CatalogKind,
    InMemoryCatalogRepository,
    InMemoryQuoteStore,
    QuoteInput,
    QuotingService,
    SelectionMode,
    SQLCatalogRepository,
    SQLQuoteStore,
)
from rollup_quotes.services.quoting.pricing import CalculationResult
from rollup_quotes.utils.logging import setup_logging


def format_result(result: CalculationResult) -> str:
    """Plain-text breakdown of a calculation."""
    data = result.input
    lines = [
        f"{data.quantity}x gate {data.width}m x {data.height}m (roll {data.roll}m)",
        f"Profile:        {result.profile.name}",
        f"Area per gate:  {result.area_per_unit:.2f} m2",
        f"Total area:     {result.total_area:.2f} m2",
        f"Gate weight:    {result.unit_weight:.2f} kg",
        f"Motor:          {result.motor.name if result.motor else 'N/A'}",
        f"Axle:           {result.axle.name if result.axle else 'N/A'}",
        f"Base price:     {result.base_price:.2f}",
        f"Motors:         {result.motor_price:.2f}",
        f"Axles:          {result.axle_price:.2f}",
    ]
    for line in result.optional_lines:
        lines.append(f"Optional:       {line.name}: {line.contribution:.2f}")
    lines.append(f"Price per gate: {result.price_per_unit:.2f}")
    lines.append(f"TOTAL:          {result.total_price:.2f}")
    for issue in result.issues:
        lines.append(f"! {issue}")
    return "\n".join(lines)


def build_input(args: argparse.Namespace, default_profile_id: str | None) -> QuoteInput:
    return QuoteInput(
        width=args.width,
        height=args.height,
        roll=args.roll,
        quantity=args.quantity,
        profile_id=args.profile or default_profile_id or "",
        motor_mode=SelectionMode.MANUAL if args.motor else SelectionMode.AUTOMATIC,
        manual_motor_id=args.motor,
        axle_mode=SelectionMode.MANUAL if args.axle else SelectionMode.AUTOMATIC,
        manual_axle_id=args.axle,
        selected_optional_ids=frozenset(args.optional or ()),
    )


async def _calculate(service: QuotingService, args: argparse.Namespace) -> int:
    catalog = await service.load_catalog()
    default_profile = catalog.profiles[0].id if catalog.profiles else None
    result = await service.compute_quote(build_input(args, default_profile), catalog)
    print(format_result(result))
    return 0 if result.is_valid else 2


async def run_command(args: argparse.Namespace) -> int:
    if args.command == "init-db":
        await init_db()
        await close_db()
        print("Database initialized")
        return 0

    use_demo = getattr(args, "demo", False) or settings.quoting.use_demo_catalog
    if use_demo:
        service = QuotingService(InMemoryCatalogRepository.demo(), InMemoryQuoteStore())
        return await _dispatch(service, args)

    try:
        async with get_db_session() as session:
            service = QuotingService(SQLCatalogRepository(session), SQLQuoteStore(session))
            return await _dispatch(service, args)
    finally:
        await close_db()


async def _dispatch(service: QuotingService, args: argparse.Namespace) -> int:
    if args.command == "calculate":
        return await _calculate(service, args)
    if args.command == "catalog":
        entries = await service.catalog.list_entries(CatalogKind(args.kind))
        for entry in entries:
            print(catalog_entry_to_dict(entry))
        return 0
    raise ValueError(f"Unknown command: {args.command}")


def create_cli_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Roll-up gate quoting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    calc = subparsers.add_parser("calculate", help="Price a gate configuration")
    calc.add_argument("--width", type=Decimal, required=True, help="Width in metres")
    calc.add_argument("--height", type=Decimal, required=True, help="Height in metres")
    calc.add_argument(
        "--roll",
        type=Decimal,
        default=settings.quoting.default_roll,
        help=f"Roll allowance in metres (default: {settings.quoting.default_roll})",
    )
    calc.add_argument("--quantity", type=int, default=1, help="Number of gates")
    calc.add_argument("--profile", help="Profile id (default: first in catalog)")
    calc.add_argument("--motor", help="Motor id for manual selection")
    calc.add_argument("--axle", help="Axle id for manual selection")
    calc.add_argument("--optional", action="append", help="Optional id, repeatable")
    calc.add_argument("--demo", action="store_true", help="Use the offline demo catalog")

    cat = subparsers.add_parser("catalog", help="List a catalog collection")
    cat.add_argument("kind", choices=[k.value for k in CatalogKind])
    cat.add_argument("--demo", action="store_true", help="Use the offline demo catalog")

    subparsers.add_parser("init-db", help="Create database tables")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = create_cli_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging()
    try:
        return asyncio.run(run_command(args))
    except QuotingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Command-line interface for bond-cache.

Usage:
    bondcache demo
    bondcache fetch 20180120 XS0971721963 RU000A0JU4L3
    bondcache fetch 20180120 XS0971721963 --format json
"""

import argparse
import asyncio
import json
import logging
import re
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from bondcache import __version__
from bondcache.clients import BondsClient, SimulatedBondsTransport
from bondcache.config import settings
from bondcache.pipeline import BondDataFetcher

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=1)

DEMO_DATE = "20180120"

# Each step overlaps the cache left by the previous one
DEMO_STEPS = (
    ["ABC-0000-123", "ABC-0000-345", "ABC-0000-567"],
    ["ABC-0000-345", "XYZ-0000-123", "XYZ-0000-345"],
    ["XYZ-0000-345", "ABC-0000-567", "XYZ-0000-567"],
)


def format_quote_date(value: str) -> str:
    """Render a YYYYMMDD date as YYYY.MM.DD; other strings are returned as is."""
    return re.sub(r"^(\d{4})(\d{2})(\d{2})$", r"\1.\2.\3", value)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="bondcache",
        description="bond-cache — read-through cache for bond data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bondcache demo
  bondcache demo --delay 0
  bondcache fetch 20180120 XS0971721963 RU000A0JU4L3 --format json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Walk through cache hits and misses against a simulated API",
    )
    demo_parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Simulated API delay in seconds (default: from settings)",
    )

    # fetch command
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch bond data for a date from the bonds API",
    )
    fetch_parser.add_argument(
        "date",
        type=str,
        help="Quote date (e.g. 20180120)",
    )
    fetch_parser.add_argument(
        "isins",
        nargs="+",
        help="One or more ISINs",
    )
    fetch_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def _run_async(coro):
    """Run an async coroutine from synchronous CLI context.

    Spins up a new event loop in a dedicated thread to avoid conflicts
    with any existing event loop.
    """
    def _target():
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()

    future = _executor.submit(_target)
    return future.result()


async def run_demo(delay: float) -> BondDataFetcher:
    """Run the demo steps against one shared cache, printing its state."""
    fetcher = BondDataFetcher(SimulatedBondsTransport(delay=delay))

    for isins in DEMO_STEPS:
        print(f"\n    Date {format_quote_date(DEMO_DATE)}, instruments: {', '.join(isins)}")
        cached = fetcher.store.list_isins(DEMO_DATE)
        print(
            f"    Cache already holds: {', '.join(cached)}"
            if cached
            else "    Cache holds none of the requested instruments"
        )
        await fetcher.get_bonds_data(DEMO_DATE, isins)
        print(f"    Data received, cache for {DEMO_DATE} now holds:")
        print(f"\n        {', '.join(fetcher.store.list_isins(DEMO_DATE))}")

    return fetcher


async def run_fetch(date: str, isins: list[str]) -> list[dict]:
    """Look up ``isins`` through the bonds API configured in settings."""
    async with BondsClient(
        base_url=settings.bonds_api_url,
        api_key=settings.bonds_api_key,
        rate_limit=settings.bonds_rate_limit,
        timeout=settings.bonds_timeout,
    ) as client:
        fetcher = BondDataFetcher(client)
        records = await fetcher.get_bonds_data(date, isins)
    return [record.model_dump() for record in records]


def cmd_demo(args: argparse.Namespace) -> int:
    """Execute the demo command.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    delay = settings.simulated_delay if args.delay is None else args.delay
    try:
        _run_async(run_demo(delay))
        return 0
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error("Demo failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_fetch(args: argparse.Namespace) -> int:
    """Execute the fetch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        logger.info("Fetching %d ISINs for %s", len(args.isins), args.date)
        records = _run_async(run_fetch(args.date, args.isins))

        if args.format == "json":
            print(json.dumps(records, indent=2))
        else:
            for record in records:
                print(f"{record['isin']}: {json.dumps(record['data'])}")

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error("Fetch failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command."""
    print(f"bond-cache v{__version__}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    # Route to command handler
    if args.command == "demo":
        return cmd_demo(args)
    elif args.command == "fetch":
        return cmd_fetch(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        # No command specified
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()

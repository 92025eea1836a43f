#!/usr/bin/env python3
"""
============================================================================
Cryptsy Private API Client v1.0.0
Read-only API Probe
============================================================================

PURPOSE
-------
Exercise the signed request pipeline against the live venue with one
read-only call. Credentials come from the environment or a .env file
(see cryptsy/config.py).

USAGE
-----
    python scripts/cryptsy_probe.py balances
    python scripts/cryptsy_probe.py markets
    python scripts/cryptsy_probe.py orders
    python scripts/cryptsy_probe.py depth 132
    python scripts/cryptsy_probe.py trades 132

EXIT CODES
----------
    0: OK
    1: Venue rejected the request (ProtocolError)
    2: Transport, decode or configuration failure

============================================================================
"""

import sys
import uuid
import logging
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

from cryptsy import (
    CryptsyClient,
    CryptsyConfig,
    CryptsyError,
    ProtocolError,
)

logger = logging.getLogger("CRYPTSY-PROBE")


def run_command(client: CryptsyClient, args: argparse.Namespace) -> None:
    """Execute one probe command and print its result."""
    if args.command == "balances":
        for code, balance in sorted(client.get_balances().items()):
            print(f"   {code:<8} {balance.available}")

    elif args.command == "markets":
        markets = client.get_markets()
        for key, market in sorted(markets.items(), key=lambda item: item[1].market_id):
            print(f"   {market.market_id:>5}  {market.label:<12} {market.primary_name} / {market.secondary_name}")
        print(f"\n   {len(markets)} markets")

    elif args.command == "orders":
        order_ids = client.get_all_my_orders()
        for order_id in sorted(order_ids):
            print(f"   {order_id}")
        print(f"\n   {len(order_ids)} open orders")

    elif args.command == "depth":
        book = client.get_depth(args.market_id)
        print("   BUY")
        for order in book.buy[:args.limit]:
            print(f"      {order.price:>20}  {order.quantity}")
        print("   SELL")
        for order in book.sell[:args.limit]:
            print(f"      {order.price:>20}  {order.quantity}")

    elif args.command == "trades":
        for trade in client.get_market_trades(args.market_id)[:args.limit]:
            print(f"   {trade.time:%Y-%m-%d %H:%M:%S}  {trade.price:>20}  {trade.quantity}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cryptsy private API probe (read-only)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("balances", help="Available balances (getinfo)")
    subparsers.add_parser("markets", help="Market list (getmarkets)")
    subparsers.add_parser("orders", help="Open order ids (allmyorders)")

    for name, help_text in (("depth", "Order book (depth)"), ("trades", "Recent trades (markettrades)")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("market_id", type=int, help="Venue market id")
        sub.add_argument("--limit", type=int, default=10, help="Rows to print per side")

    return parser


def main(argv=None) -> int:
    """Run the probe. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    correlation_id = str(uuid.uuid4())[:8]

    try:
        config = CryptsyConfig.from_environment(validate=True)
        with CryptsyClient.from_config(config, correlation_id=correlation_id) as client:
            print("=" * 60)
            print(f"CRYPTSY PROBE - {args.command.upper()} | correlation_id={correlation_id}")
            print("=" * 60)
            run_command(client, args)
    except ProtocolError as e:
        print(f"\n   Venue rejected request: {e.message}")
        return 1
    except CryptsyError as e:
        logger.error(f"Probe failed | error={e} | correlation_id={correlation_id}")
        print(f"\n   ERROR: {e}")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Fetch every transaction for one wallet and write an Awaken Tax CSV.

Usage:
    PYTHONPATH=src python scripts/export_wallet.py osmosis osmo1... -o osmo.csv
    PYTHONPATH=src python scripts/export_wallet.py --list
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a wallet's history as Awaken Tax CSV")
    parser.add_argument("chain", nargs="?", help="chain id, e.g. ethereum, osmosis, hyperliquid")
    parser.add_argument("address", nargs="?", help="wallet address")
    parser.add_argument("-o", "--output", type=Path, help="output file (default: <chain>_<address>_awaken.csv)")
    parser.add_argument("--max-pages", type=int, default=None, help="stop after this many pages")
    parser.add_argument("--list", action="store_true", help="list supported chains and exit")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    from chainview.adapters.registry import build_registry
    from chainview.config import settings
    from chainview.exceptions import ChainViewError
    from chainview.infra.http.rate_limited_client import RateLimitedClient
    from chainview.infra.http.relay_client import RelayClient
    from chainview.services.session import TransactionSession

    args = parse_args(argv)

    async with RateLimitedClient(rate_per_second=settings.http_rate_per_second, timeout=settings.http_timeout) as http:
        # Direct calls: no browser, so no CORS relay needed.
        registry = build_registry(http, RelayClient(http, relay_url=""), settings)

        if args.list:
            for chain_id, adapter in registry.items():
                kind = "perps" if adapter.info.is_perps else adapter.info.symbol
                print(f"{chain_id:<20} {adapter.info.name} ({kind})")
            return 0
        if not args.chain or not args.address:
            print("chain and address are required (see --help)", file=sys.stderr)
            return 2

        session = TransactionSession(registry, page_size=settings.page_size)
        try:
            records = await session.fetch_all(args.chain, args.address.strip(), args.max_pages or settings.export_max_pages)
        except ChainViewError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        output = args.output or Path(f"{args.chain}_{args.address[:10]}_awaken.csv")
        output.write_text(session.export_csv(), encoding="utf-8")
        print(f"{len(records)} transactions -> {output}")
        if session.has_more:
            print("More history is available; raise --max-pages to fetch it.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

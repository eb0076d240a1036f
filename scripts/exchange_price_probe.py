# flake8: noqa E402
# Run via uv so project deps are loaded, e.g.:
# uv run scripts/exchange_price_probe.py --provider BINANCE --coin EOS --timestamp 2019-03-01T12:30:00Z
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure the src directory is importable when the script is invoked via uv/python directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import config
from domain.pricing import Coin, ProviderVariant
from services.errors import PriceResolutionError
from services.price_resolver import build_default_resolver


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve a historical fiat price from exchange OHLC data.")
    parser.add_argument(
        "--provider",
        default=ProviderVariant.UNSPECIFIED.value,
        choices=[variant.value for variant in ProviderVariant],
        help="Exchange whose trade log is being priced (default: UNSPECIFIED = Kraken).",
    )
    parser.add_argument("--coin", default="BTC", help="Coin symbol to price, e.g. BTC.")
    parser.add_argument(
        "--timestamp",
        help="ISO8601 timestamp or unix seconds to price at (default: current UTC time).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every page and hop.")
    return parser.parse_args()


def load_timestamp(raw: str | None) -> datetime:
    if not raw:
        return datetime.now(timezone.utc)

    try:
        as_int = int(raw)
        return datetime.fromtimestamp(as_int, tz=timezone.utc)
    except ValueError:
        pass

    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    timestamp = load_timestamp(args.timestamp)
    resolver = build_default_resolver()
    try:
        price = resolver.resolve(ProviderVariant(args.provider), Coin(args.coin.upper()), timestamp)
    except (PriceResolutionError, ValueError) as exc:
        print(f"Failed to resolve price: {exc}", file=sys.stderr)
        return 1

    print(f"{args.coin.upper()} @ {timestamp.isoformat()} via {args.provider} => {price} {config().fiat_coin}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

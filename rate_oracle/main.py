#!/usr/bin/env python3
"""Rate Oracle.

Fetches tickers along a chain of exchange pairs, composes the implied
cross rate and logs the weighted mid price.

Configure via CLI args or env vars. See --help for the source format.
"""

import argparse
import asyncio
import logging
import os
import sys

from .src.adapters import BaseExchangeAdapter, ExchangeAdapterConfig, get_adapter, get_available_adapters
from .src.ExchangePriceSource import ExchangePriceSource, OrientedAdapter
from .src.MetricCollector import MetricCollector
from .src.Ticker import Currency

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_sources(sources_str: str) -> list[tuple[str, Currency, Currency, bool]]:
    """Parse a comma-separated chain of exchange pairs.

    Format: exchange:base/quote[:invert],...
    Example: okx:celo/usdt,kraken:usdt/usd

    :param sources_str: Chain description.
    :returns: List of (exchange, base, quote, invert) in chain order.
    :raises ValueError: If a hop is malformed or names an unknown currency.
    """
    hops = []
    for item in sources_str.split(","):
        item = item.strip()
        if not item:
            continue

        parts = [p.strip() for p in item.split(":")]
        if len(parts) not in (2, 3) or "/" not in parts[1]:
            raise ValueError(
                f"Invalid source '{item}'. Expected 'exchange:base/quote[:invert]'"
            )

        invert = False
        if len(parts) == 3:
            flag = parts[2].lower()
            if flag not in ("true", "false"):
                raise ValueError(f"Invalid invert flag '{parts[2]}' in '{item}'")
            invert = flag == "true"

        base, quote = parts[1].split("/", 1)
        try:
            hops.append((parts[0].lower(), Currency(base.upper()), Currency(quote.upper()), invert))
        except ValueError as e:
            raise ValueError(f"Unknown currency in '{item}': {e}") from e
    return hops


def build_price_source(
    hops: list[tuple[str, Currency, Currency, bool]],
    fetch_timeout: float | None = None,
    metric_collector: MetricCollector | None = None,
) -> ExchangePriceSource:
    """Create a price source from parsed hops.

    :param hops: List of (exchange, base, quote, invert) in chain order.
    :param fetch_timeout: Per-request timeout for every adapter.
    :param metric_collector: Optional collector shared by the source.
    :returns: ExchangePriceSource over the hops.
    """
    adapters = [
        OrientedAdapter(
            adapter=get_adapter(exchange, ExchangeAdapterConfig(base, quote, timeout=fetch_timeout)),
            to_invert=invert,
        )
        for exchange, base, quote, invert in hops
    ]
    return ExchangePriceSource(adapters, metric_collector)


async def run(price_source: ExchangePriceSource, interval: int, once: bool) -> bool:
    """Fetch weighted prices until interrupted (or once).

    :param price_source: Source to poll.
    :param interval: Seconds between fetches.
    :param once: Stop after the first fetch.
    :returns: True if the last fetch succeeded.
    """
    ok = False
    try:
        while True:
            try:
                weighted = await price_source.fetch_weighted_price()
                ok = True
                logger.info(
                    f"{price_source.name()}: price={weighted.price:.8f} "
                    f"weight={weighted.weight:.4f}"
                )
            except Exception as e:
                ok = False
                logger.error(f"{price_source.name()}: fetch failed: {type(e).__name__}: {e}")

            if once:
                return ok
            await asyncio.sleep(interval)
    finally:
        await BaseExchangeAdapter.close_shared_client()


def main() -> None:
    """Main entry point for the Rate Oracle CLI."""
    available_exchanges = get_available_adapters()

    parser = argparse.ArgumentParser(
        description="Rate Oracle: Cross-rate weighted prices from exchange tickers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available exchanges:
  {', '.join(available_exchanges)}

Currencies:
  {', '.join(c.value.lower() for c in Currency)}

Examples:
  # CELO/USDT straight from OKX
  python -m rate_oracle.main --sources okx:celo/usdt --once

  # CELO/USD via USDT, second hop quoted USD/USDT and inverted
  python -m rate_oracle.main --sources okx:celo/usdt,kraken:usdt/usd

Environment variables (CLI args take precedence):
  SOURCES, FETCH_PERIOD, FETCH_TIMEOUT
""",
    )

    parser.add_argument(
        "--sources",
        type=str,
        help="Comma-separated chain of exchange:base/quote[:invert] hops",
        default=os.environ.get("SOURCES") or "okx:celo/usdt",
    )

    parser.add_argument(
        "--interval",
        type=int,
        help="Seconds between fetches (minimum: 1, default: 60)",
        default=int(os.environ.get("FETCH_PERIOD") or "60"),
    )

    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=float,
        help="Timeout for individual exchange requests in seconds (default: 10.0)",
        default=float(os.environ.get("FETCH_TIMEOUT") or "10.0"),
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch a single price and exit",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.interval < 1:
        parser.error("--interval must be at least 1 second")

    if args.fetch_timeout <= 0:
        parser.error("--fetch-timeout must be positive")

    try:
        hops = parse_sources(args.sources)
    except ValueError as e:
        parser.error(str(e))

    if not hops:
        parser.error("At least one source must be specified")

    unknown = [exchange for exchange, _, _, _ in hops if exchange not in available_exchanges]
    if unknown:
        parser.error(
            f"Unknown exchanges: {unknown}. "
            f"Available: {', '.join(available_exchanges)}"
        )

    try:
        price_source = build_price_source(hops, fetch_timeout=args.fetch_timeout)
    except ValueError as e:
        parser.error(str(e))

    logger.info("=" * 60)
    logger.info("Rate Oracle - Cross-Rate Price Source")
    logger.info("=" * 60)
    logger.info(f"Source:            {price_source.name()}")
    logger.info(f"Interval:          {args.interval}s")
    logger.info(f"Fetch Timeout:     {args.fetch_timeout}s")
    logger.info("=" * 60)

    try:
        ok = asyncio.run(run(price_source, args.interval, args.once))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()

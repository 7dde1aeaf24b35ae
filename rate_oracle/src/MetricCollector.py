"""MetricCollector: Best-effort record of raw tickers seen by price sources.

Reporting never raises into the caller. A failure while recording is logged
and the ticker is dropped.
"""

from __future__ import annotations

import logging
from collections import Counter

from .Ticker import Exchange, Ticker

logger = logging.getLogger(__name__)


class MetricCollector:
    """Keeps the latest ticker per (exchange, symbol) and per-exchange counts.

    :ivar last_tickers: Most recent ticker for each (exchange, symbol).
    :ivar ticker_counts: Number of tickers reported per exchange.
    """

    def __init__(self) -> None:
        self.last_tickers: dict[tuple[Exchange, str], Ticker] = {}
        self.ticker_counts: Counter[Exchange] = Counter()

    def ticker(self, ticker: Ticker) -> None:
        """Record a raw ticker fetched from an exchange.

        :param ticker: Ticker as returned by the adapter, before inversion.
        """
        try:
            self.last_tickers[(ticker.source, ticker.symbol)] = ticker
            self.ticker_counts[ticker.source] += 1
            logger.debug(
                f"[{ticker.source.value}] {ticker.symbol}: bid={ticker.bid} "
                f"ask={ticker.ask} base_volume={ticker.base_volume} "
                f"quote_volume={ticker.quote_volume} ts={ticker.timestamp}"
            )
        except Exception as e:
            logger.warning(f"Failed to record ticker metrics: {e}")

    def last_ticker(self, source: Exchange, symbol: str) -> Ticker | None:
        """Get the most recent ticker recorded for an exchange pair.

        :param source: Exchange tag.
        :param symbol: Exchange pair symbol.
        :returns: Last reported ticker or None.
        """
        return self.last_tickers.get((source, symbol))

"""ExchangePriceSource: Weighted price from a chain of exchange tickers.

A price source is an ordered list of adapters whose pairs form a currency
path, e.g. CELO/BTC on one exchange followed by BTC/USD on another. Each call
to :meth:`ExchangePriceSource.fetch_weighted_price`:

    1. Fetches every adapter's ticker concurrently
    2. Reports each raw ticker to the metric collector
    3. Inverts tickers whose adapter is flagged ``to_invert``
    4. Validates every ticker (one invalid ticker fails the whole call)
    5. Composes the implied pair in the given adapter order
    6. Returns the mid price weighted by the implied base volume

.. code-block:: python

    >>> source = ExchangePriceSource([
    ...     OrientedAdapter(get_adapter("okx", okx_config), to_invert=False),
    ... ])
    >>> source.name()
    'OKX:CELO-USDT:false'
    >>> weighted = await source.fetch_weighted_price()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import TYPE_CHECKING

from .ImpliedPair import implied_pair
from .MetricCollector import MetricCollector
from .Ticker import Ticker
from .validators import InvalidTickerError, verify_ticker

if TYPE_CHECKING:
    from .adapters import ExchangeAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrientedAdapter:
    """An adapter and whether its pair must be flipped to fit the chain.

    :ivar adapter: Adapter fetching the exchange's native pair.
    :ivar to_invert: True if the native pair is quoted the other way round.
    """

    adapter: ExchangeAdapter
    to_invert: bool


@dataclass(frozen=True)
class WeightedPrice:
    """Mid price of the implied pair and its liquidity weight.

    :ivar price: (bid + ask) / 2 of the implied pair.
    :ivar weight: Base volume of the implied pair.
    """

    price: Decimal
    weight: Decimal


def invert_ticker(ticker: Ticker) -> Ticker:
    """Flip a ticker to the reverse orientation of its pair.

    Rates become reciprocals with bid and ask swapped, and the base and quote
    volumes trade places.

    :param ticker: Ticker in the exchange's native orientation.
    :returns: Ticker for the inverted pair.
    :raises InvalidTickerError: If bid or ask is missing or zero.
    """
    if not ticker.bid or not ticker.ask:
        raise InvalidTickerError(
            f"{ticker.source.value}:{ticker.symbol} cannot invert ticker "
            f"with bid={ticker.bid} ask={ticker.ask}"
        )
    return replace(
        ticker,
        bid=1 / ticker.ask,
        ask=1 / ticker.bid,
        last_price=1 / ticker.last_price if ticker.last_price else None,
        base_volume=ticker.quote_volume,
        quote_volume=ticker.base_volume,
        high=1 / ticker.low if ticker.low else None,
        low=1 / ticker.high if ticker.high else None,
        open=1 / ticker.open if ticker.open else None,
    )


class ExchangePriceSource:
    """Price source composing tickers from one or more exchange adapters.

    :ivar adapters: Oriented adapters in chain order.
    :ivar metric_collector: Collector receiving every raw ticker.
    """

    def __init__(
        self,
        adapters: list[OrientedAdapter],
        metric_collector: MetricCollector | None = None,
    ) -> None:
        """Initialize the price source.

        :param adapters: Non-empty chain of oriented adapters.
        :param metric_collector: Optional collector for raw tickers.
        :raises ValueError: If ``adapters`` is empty.
        """
        if not adapters:
            raise ValueError("ExchangePriceSource requires at least one adapter")
        self.adapters = list(adapters)
        self.metric_collector = metric_collector or MetricCollector()

    def name(self) -> str:
        """Identity of the source, one segment per adapter in chain order.

        :returns: String like "BINANCE:CELOUSD:false|BITTREX:CELOEUR:false".
        """
        return "|".join(
            f"{a.adapter.exchange_name.value}:{a.adapter.pair_symbol}:"
            f"{str(a.to_invert).lower()}"
            for a in self.adapters
        )

    async def _fetch_ticker(self, oriented: OrientedAdapter) -> Ticker:
        ticker = await oriented.adapter.fetch_ticker()
        self.metric_collector.ticker(ticker)
        return invert_ticker(ticker) if oriented.to_invert else ticker

    async def fetch_weighted_price(self) -> WeightedPrice:
        """Fetch all tickers and compute the weighted price of the implied pair.

        :returns: WeightedPrice of the composed chain.
        :raises InvalidTickerError: If any ticker fails validation.
        :raises Exception: Any adapter error, propagated unchanged.
        """
        tasks = [
            asyncio.ensure_future(self._fetch_ticker(oriented)) for oriented in self.adapters
        ]
        try:
            tickers = await asyncio.gather(*tasks)
        except Exception:
            # A failed call reports nothing further to the collector.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for ticker in tickers:
            verify_ticker(ticker)

        pair = implied_pair([ticker.to_pair_data() for ticker in tickers])
        weighted = WeightedPrice(price=(pair.bid + pair.ask) / 2, weight=pair.base_volume)

        logger.debug(f"{self.name()}: price={weighted.price} weight={weighted.weight}")
        return weighted

"""Ticker: Normalized market snapshots produced by exchange adapters.

A Ticker is one exchange's view of one trading pair at one point in time.
Numeric fields hold ``Decimal`` values parsed from the exchange payload, or
``None`` when the payload value was missing or unparsable. Whether a missing
value is fatal is decided by :mod:`validators`, not here.

.. code-block:: python

    >>> ticker = Ticker(
    ...     source=Exchange.OKX,
    ...     symbol="CELO-USDT",
    ...     bid=Decimal("0.792"),
    ...     ask=Decimal("0.793"),
    ...     last_price=Decimal("0.792"),
    ...     base_volume=Decimal("2177089.7"),
    ...     quote_volume=Decimal("1642445.3"),
    ...     timestamp=1674479195109,
    ... )
    >>> ticker.to_pair_data().bid
    Decimal('0.792')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .ImpliedPair import PairData


class Exchange(str, Enum):
    """Exchange tags rendered in price source identities."""

    BINANCE = "BINANCE"
    BITSTAMP = "BITSTAMP"
    BITTREX = "BITTREX"
    COINBASE = "COINBASE"
    KRAKEN = "KRAKEN"
    NOVADAX = "NOVADAX"
    OKX = "OKX"


class Currency(str, Enum):
    """Currencies the bundled adapters know how to map to exchange symbols."""

    CELO = "CELO"
    USD = "USD"
    EUR = "EUR"
    BRL = "BRL"
    BTC = "BTC"
    ETH = "ETH"
    USDT = "USDT"
    USDC = "USDC"


@dataclass(frozen=True)
class Ticker:
    """Market snapshot for one pair from one exchange.

    :ivar source: Exchange the ticker was fetched from.
    :ivar symbol: Exchange-specific pair symbol (e.g. "CELO-USDT").
    :ivar bid: Best bid.
    :ivar ask: Best ask.
    :ivar last_price: Price of the last trade.
    :ivar base_volume: Traded volume in the base currency.
    :ivar quote_volume: Traded volume in the quote currency.
    :ivar timestamp: Epoch milliseconds reported by the exchange.
    """

    source: Exchange
    symbol: str
    bid: Decimal | None
    ask: Decimal | None
    last_price: Decimal | None
    base_volume: Decimal | None
    quote_volume: Decimal | None
    timestamp: int | None
    high: Decimal | None = None
    low: Decimal | None = None
    open: Decimal | None = None

    def to_pair_data(self) -> PairData:
        """Project the ticker to the fields used by cross-rate composition.

        Only call this on a ticker that passed ``verify_ticker``.

        :returns: PairData with the ticker's bid, ask and volumes.
        :raises ValueError: If bid, ask or a volume is missing.
        """
        if None in (self.bid, self.ask, self.base_volume, self.quote_volume):
            raise ValueError(
                f"{self.source.value}:{self.symbol} has no pair data: "
                f"bid={self.bid} ask={self.ask} "
                f"base_volume={self.base_volume} quote_volume={self.quote_volume}"
            )
        return PairData(
            bid=self.bid,
            ask=self.ask,
            base_volume=self.base_volume,
            quote_volume=self.quote_volume,
        )


@dataclass(frozen=True)
class Trade:
    """A single executed trade reported by an exchange.

    :ivar price: Execution price.
    :ivar amount: Executed amount in the base currency.
    :ivar cost: ``price * amount`` when both are known.
    :ivar side: "buy" or "sell" when the exchange reports it.
    :ivar timestamp: Epoch milliseconds of the execution.
    :ivar id: Exchange trade id, if any.
    """

    source: Exchange
    symbol: str
    price: Decimal | None
    amount: Decimal | None
    cost: Decimal | None
    side: str | None
    timestamp: int | None
    id: str | None = None

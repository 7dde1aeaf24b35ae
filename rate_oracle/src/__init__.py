"""
Rate Oracle - Cross-Rate Exchange Price Source

This module estimates one exchange rate from a chain of exchange tickers:
- Ticker: Normalized market snapshot from one exchange
- validators: Ticker/trade invariants and lenient decimal parsing
- ImpliedPair: Cross-rate composition with bottleneck liquidity
- ExchangePriceSource: Concurrent fetch, inversion, validation and weighting
- MetricCollector: Best-effort record of raw tickers
- adapters: Exchange-specific ticker adapters
"""

from .ExchangePriceSource import ExchangePriceSource, OrientedAdapter, WeightedPrice, invert_ticker
from .ImpliedPair import PairData, implied_pair
from .MetricCollector import MetricCollector
from .Ticker import Currency, Exchange, Ticker, Trade
from .validators import InvalidTickerError, InvalidTradeError, safe_decimal_parse, verify_ticker, verify_trade

__all__ = [
    "Currency",
    "Exchange",
    "ExchangePriceSource",
    "InvalidTickerError",
    "InvalidTradeError",
    "MetricCollector",
    "OrientedAdapter",
    "PairData",
    "Ticker",
    "Trade",
    "WeightedPrice",
    "implied_pair",
    "invert_ticker",
    "safe_decimal_parse",
    "verify_ticker",
    "verify_trade",
]

"""Validation of tickers and trades before they are used for pricing.

Adapters parse exchange payloads leniently with :func:`safe_decimal_parse`,
which yields ``None`` for anything that is not a finite number. The checks
here then fail loudly when a field they need is absent, instead of
substituting a default.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from .Ticker import Ticker, Trade


class InvalidTickerError(ValueError):
    """Raised when a ticker violates the price/volume invariants."""

    pass


class InvalidTradeError(ValueError):
    """Raised when a trade record is unusable."""

    pass


def safe_decimal_parse(value: Any) -> Decimal | None:
    """Parse a raw payload value into a Decimal.

    Floats are converted through their string representation so that
    ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.

    :param value: String, int, float or Decimal from a decoded payload.
    :returns: Finite Decimal, or None if the value is missing or unparsable.

    .. code-block:: python

        >>> safe_decimal_parse("0.792")
        Decimal('0.792')
        >>> safe_decimal_parse("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        parsed = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def _finite(value: Any) -> bool:
    return isinstance(value, Decimal) and value.is_finite()


def _require(ticker: Ticker, field: str) -> Decimal:
    value = getattr(ticker, field)
    if not _finite(value):
        raise InvalidTickerError(
            f"{ticker.source.value}:{ticker.symbol} {field} is missing or not a number"
        )
    return value


def verify_ticker(ticker: Ticker) -> None:
    """Check that a ticker can safely participate in pricing.

    :param ticker: Ticker to check.
    :raises InvalidTickerError: If bid or ask is missing or not positive,
        bid exceeds ask, or a volume is missing or negative.
    """
    bid = _require(ticker, "bid")
    ask = _require(ticker, "ask")
    base_volume = _require(ticker, "base_volume")
    quote_volume = _require(ticker, "quote_volume")

    name = f"{ticker.source.value}:{ticker.symbol}"
    if bid <= 0:
        raise InvalidTickerError(f"{name} bid not positive: {bid}")
    if ask <= 0:
        raise InvalidTickerError(f"{name} ask not positive: {ask}")
    if bid > ask:
        raise InvalidTickerError(f"{name} bid ({bid}) > ask ({ask})")
    if base_volume < 0:
        raise InvalidTickerError(f"{name} base volume negative: {base_volume}")
    if quote_volume < 0:
        raise InvalidTickerError(f"{name} quote volume negative: {quote_volume}")


def verify_trade(trade: Trade) -> None:
    """Check that a trade record has a usable price, amount and timestamp.

    :param trade: Trade to check.
    :raises InvalidTradeError: If price or amount is missing or not positive,
        or the timestamp is missing.
    """
    name = f"{trade.source.value}:{trade.symbol}"
    if not _finite(trade.price) or trade.price <= 0:
        raise InvalidTradeError(f"{name} trade price invalid: {trade.price}")
    if not _finite(trade.amount) or trade.amount <= 0:
        raise InvalidTradeError(f"{name} trade amount invalid: {trade.amount}")
    if trade.timestamp is None:
        raise InvalidTradeError(f"{name} trade timestamp missing")

"""Bitstamp adapter.

Endpoint: https://www.bitstamp.net/api/v2/ticker/{base}{quote}/
Rate Limit: High (no key required)
Trades: Yes (/api/v2/transactions/{base}{quote}/)
"""

import logging
from typing import Any

from ..Ticker import Exchange, Ticker, Trade
from ..validators import safe_decimal_parse, verify_ticker, verify_trade
from .base import BaseExchangeAdapter, ExchangeDataType, ExchangeParseError, register_adapter

logger = logging.getLogger(__name__)

# Bitstamp transaction "type" values
_TRADE_SIDES = {"0": "buy", "1": "sell"}


def _seconds_to_ms(value: Any) -> int | None:
    seconds = safe_decimal_parse(value)
    return int(seconds * 1000) if seconds is not None else None


@register_adapter
class BitstampAdapter(BaseExchangeAdapter):
    """Adapter for the Bitstamp v2 public API."""

    exchange_name = Exchange.BITSTAMP
    BASE_URL = "https://www.bitstamp.net/api/v2"

    def _generate_pair_symbol(self) -> str:
        return f"{self.base_symbol}{self.quote_symbol}".lower()

    async def fetch_ticker(self) -> Ticker:
        """Fetch the ticker for the configured pair.

        :returns: Validated Ticker.
        """
        json = await self._fetch_from_api(ExchangeDataType.TICKER, f"ticker/{self.pair_symbol}/")
        return self.parse_ticker(json)

    async def fetch_trades(self) -> list[Trade]:
        """Fetch recent trades, oldest first.

        :returns: Validated trades sorted by timestamp.
        """
        json = await self._fetch_from_api(
            ExchangeDataType.TRADE, f"transactions/{self.pair_symbol}/"
        )
        return sorted(self.parse_trades(json), key=lambda trade: trade.timestamp)

    def parse_ticker(self, json: Any) -> Ticker:
        """Parse a response from the ticker endpoint.

        Bitstamp reports volume in the base currency only; the quote volume is
        derived from the 24 hour VWAP.

        .. code-block:: json

            {"bid": "0.7921", "ask": "0.7934", "last": "0.7930",
             "volume": "152030.1", "vwap": "0.7811", "high": "0.8100",
             "low": "0.7600", "open": "0.7700", "timestamp": "1674479195"}

        :param json: Decoded response body.
        :returns: Validated Ticker.
        :raises ExchangeParseError: If the payload is not an object.
        :raises InvalidTickerError: If the ticker fails validation.
        """
        if not isinstance(json, dict):
            logger.warning(f"[bitstamp] Unexpected ticker payload for {self.pair_symbol}: {json}")
            raise ExchangeParseError(f"bitstamp ticker payload for {self.pair_symbol} is not an object")

        base_volume = safe_decimal_parse(json.get("volume"))
        vwap = safe_decimal_parse(json.get("vwap"))
        ticker = Ticker(
            **self._ticker_metadata,
            bid=safe_decimal_parse(json.get("bid")),
            ask=safe_decimal_parse(json.get("ask")),
            last_price=safe_decimal_parse(json.get("last")),
            base_volume=base_volume,
            quote_volume=base_volume * vwap if base_volume is not None and vwap is not None else None,
            timestamp=_seconds_to_ms(json.get("timestamp")),
            high=safe_decimal_parse(json.get("high")),
            low=safe_decimal_parse(json.get("low")),
            open=safe_decimal_parse(json.get("open")),
        )
        verify_ticker(ticker)
        return ticker

    def parse_trades(self, json: Any) -> list[Trade]:
        """Parse a response from the transactions endpoint (newest first).

        .. code-block:: json

            [{"date": "1674479195", "tid": "263614981", "price": "0.7930",
              "amount": "120.5", "type": "1"}]

        :param json: Decoded response body.
        :returns: Validated trades in payload order.
        :raises ExchangeParseError: If the payload is not a list.
        :raises InvalidTradeError: If a trade fails validation.
        """
        if not isinstance(json, list):
            raise ExchangeParseError(f"bitstamp trades payload for {self.pair_symbol} is not a list")

        trades = []
        for raw in json:
            if not isinstance(raw, dict):
                raise ExchangeParseError(f"bitstamp trade for {self.pair_symbol} is not an object: {raw}")
            price = safe_decimal_parse(raw.get("price"))
            amount = safe_decimal_parse(raw.get("amount"))
            tid = raw.get("tid")
            trade = Trade(
                **self._ticker_metadata,
                price=price,
                amount=amount,
                cost=price * amount if price is not None and amount is not None else None,
                side=_TRADE_SIDES.get(str(raw.get("type"))),
                timestamp=_seconds_to_ms(raw.get("date")),
                id=str(tid) if tid is not None else None,
            )
            verify_trade(trade)
            trades.append(trade)
        return trades

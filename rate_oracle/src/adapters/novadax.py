"""NovaDAX adapter.

Endpoint: https://api.novadax.com/v1/market/ticker?symbol={BASE}_{QUOTE}
Rate Limit: 60 requests / s (no key required)
Trades: Yes (/v1/market/trades)
"""

import logging
from typing import Any

from ..Ticker import Exchange, Ticker, Trade
from ..validators import safe_decimal_parse, verify_ticker, verify_trade
from .base import BaseExchangeAdapter, ExchangeDataType, ExchangeParseError, register_adapter

logger = logging.getLogger(__name__)


@register_adapter
class NovaDaxAdapter(BaseExchangeAdapter):
    """Adapter for the NovaDAX public market API (BRL pairs)."""

    exchange_name = Exchange.NOVADAX
    BASE_URL = "https://api.novadax.com/v1/market"

    def _generate_pair_symbol(self) -> str:
        return f"{self.base_symbol}_{self.quote_symbol}"

    async def fetch_ticker(self) -> Ticker:
        """Fetch the ticker for the configured pair.

        :returns: Validated Ticker.
        """
        json = await self._fetch_from_api(
            ExchangeDataType.TICKER, "ticker", params={"symbol": self.pair_symbol}
        )
        return self.parse_ticker(json)

    async def fetch_trades(self) -> list[Trade]:
        """Fetch recent trades, oldest first.

        :returns: Validated trades sorted by timestamp.
        """
        json = await self._fetch_from_api(
            ExchangeDataType.TRADE, "trades", params={"symbol": self.pair_symbol}
        )
        return sorted(self.parse_trades(json), key=lambda trade: trade.timestamp)

    def parse_ticker(self, json: Any) -> Ticker:
        """Parse a response from the ticker endpoint.

        .. code-block:: json

            {"code": "A10000", "message": "Success", "data": {
                "ask": "34708.15", "bid": "34621.74", "lastPrice": "34669.81",
                "baseVolume24h": "34.08241488",
                "quoteVolume24h": "1182480.09502814",
                "high24h": "35079.77", "low24h": "34330.64",
                "open24h": "34492.08", "symbol": "BTC_BRL",
                "timestamp": 1571112216346}}

        :param json: Decoded response body.
        :returns: Validated Ticker.
        :raises ExchangeParseError: If the payload has no ticker data.
        :raises InvalidTickerError: If the ticker fails validation.
        """
        data = self._payload_data(json, dict)
        timestamp = safe_decimal_parse(data.get("timestamp"))
        ticker = Ticker(
            **self._ticker_metadata,
            bid=safe_decimal_parse(data.get("bid")),
            ask=safe_decimal_parse(data.get("ask")),
            last_price=safe_decimal_parse(data.get("lastPrice")),
            base_volume=safe_decimal_parse(data.get("baseVolume24h")),
            quote_volume=safe_decimal_parse(data.get("quoteVolume24h")),
            timestamp=int(timestamp) if timestamp is not None else None,
            high=safe_decimal_parse(data.get("high24h")),
            low=safe_decimal_parse(data.get("low24h")),
            open=safe_decimal_parse(data.get("open24h")),
        )
        verify_ticker(ticker)
        return ticker

    def parse_trades(self, json: Any) -> list[Trade]:
        """Parse a response from the trades endpoint.

        .. code-block:: json

            {"code": "A10000", "message": "Success", "data": [
                {"price": "43657.57", "amount": "1", "side": "SELL",
                 "timestamp": 1565007823401}]}

        NovaDAX does not return trade ids.

        :param json: Decoded response body.
        :returns: Validated trades in payload order.
        :raises InvalidTradeError: If a trade fails validation.
        """
        trades = []
        for raw in self._payload_data(json, list):
            if not isinstance(raw, dict):
                raise ExchangeParseError(f"novadax trade for {self.pair_symbol} is not an object: {raw}")
            price = safe_decimal_parse(raw.get("price"))
            amount = safe_decimal_parse(raw.get("amount"))
            timestamp = safe_decimal_parse(raw.get("timestamp"))
            side = raw.get("side")
            trade = Trade(
                **self._ticker_metadata,
                price=price,
                amount=amount,
                cost=price * amount if price is not None and amount is not None else None,
                side=side.lower() if isinstance(side, str) else None,
                timestamp=int(timestamp) if timestamp is not None else None,
            )
            verify_trade(trade)
            trades.append(trade)
        return trades

    def _payload_data(self, json: Any, expected: type) -> Any:
        data = json.get("data") if isinstance(json, dict) else None
        if not isinstance(data, expected):
            logger.warning(f"[novadax] Unexpected payload for {self.pair_symbol}: {json}")
            raise ExchangeParseError(
                f"novadax payload for {self.pair_symbol} has no {expected.__name__} data"
            )
        return data

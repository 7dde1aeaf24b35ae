"""OKX adapter.

Endpoint: https://www.okx.com/api/v5/market/ticker?instId={BASE}-{QUOTE}
Rate Limit: 20 requests / 2s (no key required)
Trades: Not supported
"""

import logging
from typing import Any

from ..Ticker import Exchange, Ticker
from ..validators import safe_decimal_parse, verify_ticker
from .base import BaseExchangeAdapter, ExchangeDataType, ExchangeParseError, register_adapter

logger = logging.getLogger(__name__)


@register_adapter
class OKXAdapter(BaseExchangeAdapter):
    """Adapter for the OKX v5 public market API."""

    exchange_name = Exchange.OKX
    BASE_URL = "https://www.okx.com/api/v5"

    def _generate_pair_symbol(self) -> str:
        return f"{self.base_symbol}-{self.quote_symbol}"

    async def fetch_ticker(self) -> Ticker:
        """Fetch the ticker for the configured instrument.

        :returns: Validated Ticker.
        """
        json = await self._fetch_from_api(
            ExchangeDataType.TICKER,
            "market/ticker",
            params={"instId": self.pair_symbol},
        )
        return self.parse_ticker(json)

    def parse_ticker(self, json: Any) -> Ticker:
        """Parse a response from the ticker endpoint.

        .. code-block:: json

            {"code": "0", "msg": "", "data": [{
                "instId": "CELO-USDT", "last": "0.792",
                "askPx": "0.793", "bidPx": "0.792",
                "open24h": "0.691", "high24h": "0.828", "low24h": "0.665",
                "volCcy24h": "1642445.37682", "vol24h": "2177089.719932",
                "ts": "1674479195109"}]}

        :param json: Decoded response body.
        :returns: Validated Ticker.
        :raises ExchangeParseError: If the payload has no ticker data.
        :raises InvalidTickerError: If the ticker fails validation.
        """
        try:
            data = json["data"][0]
        except (KeyError, TypeError, IndexError) as e:
            logger.warning(f"[okx] Unexpected ticker payload for {self.pair_symbol}: {json}")
            raise ExchangeParseError(
                f"okx ticker payload for {self.pair_symbol} has no data"
            ) from e
        if not isinstance(data, dict):
            raise ExchangeParseError(f"okx ticker data for {self.pair_symbol} is not an object")

        timestamp = safe_decimal_parse(data.get("ts"))
        ticker = Ticker(
            **self._ticker_metadata,
            bid=safe_decimal_parse(data.get("bidPx")),
            ask=safe_decimal_parse(data.get("askPx")),
            last_price=safe_decimal_parse(data.get("last")),
            base_volume=safe_decimal_parse(data.get("vol24h")),
            quote_volume=safe_decimal_parse(data.get("volCcy24h")),
            timestamp=int(timestamp) if timestamp is not None else None,
            high=safe_decimal_parse(data.get("high24h")),
            low=safe_decimal_parse(data.get("low24h")),
            open=safe_decimal_parse(data.get("open24h")),
        )
        verify_ticker(ticker)
        return ticker

    async def is_orderbook_live(self) -> bool:
        """OKX reports ``code == "0"`` for instruments that are trading."""
        json = await self._fetch_from_api(
            ExchangeDataType.ORDERBOOK_STATUS,
            "market/ticker",
            params={"instId": self.pair_symbol},
        )
        return isinstance(json, dict) and json.get("code") == "0"

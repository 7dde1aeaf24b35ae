"""Kraken adapter.

Endpoint: https://api.kraken.com/0/public/Ticker?pair={BASE}{QUOTE}
Rate Limit: High (no key required)
Trades: Not supported
"""

import logging
import time
from typing import Any, ClassVar

from ..Ticker import Currency, Exchange, Ticker
from ..validators import safe_decimal_parse, verify_ticker
from .base import BaseExchangeAdapter, ExchangeDataType, ExchangeParseError, register_adapter

logger = logging.getLogger(__name__)


def _field(pair_data: dict, key: str, index: int) -> Any:
    """Pick ``pair_data[key][index]``, or None if absent."""
    values = pair_data.get(key)
    if isinstance(values, list) and len(values) > index:
        return values[index]
    return None


@register_adapter
class KrakenAdapter(BaseExchangeAdapter):
    """Adapter for the Kraken public REST API."""

    exchange_name = Exchange.KRAKEN
    BASE_URL = "https://api.kraken.com/0/public"

    # Kraken uses non-standard ticker symbols
    STANDARD_TOKEN_SYMBOL_MAP: ClassVar[dict[Currency, str]] = {
        **BaseExchangeAdapter.STANDARD_TOKEN_SYMBOL_MAP,
        Currency.BTC: "XBT",
    }

    def _generate_pair_symbol(self) -> str:
        return f"{self.base_symbol}{self.quote_symbol}"

    async def fetch_ticker(self) -> Ticker:
        """Fetch the ticker for the configured pair.

        :returns: Validated Ticker.
        """
        json = await self._fetch_from_api(
            ExchangeDataType.TICKER, "Ticker", params={"pair": self.pair_symbol}
        )
        return self.parse_ticker(json)

    def parse_ticker(self, json: Any) -> Ticker:
        """Parse a response from the Ticker endpoint.

        Kraken keys the result by its own pair name (e.g. "XXBTZUSD"), so the
        single entry is taken regardless of key. Array fields hold
        ``[today, last 24 hours]``; the 24 hour values are used and the quote
        volume is derived from the 24 hour VWAP. The payload carries no
        timestamp, so the local receive time is used.

        .. code-block:: json

            {"error": [], "result": {"XXBTZUSD": {
                "a": ["35491.8", "1", "1.000"], "b": ["35454.2", "2", "2.000"],
                "c": ["35470.0", "0.01"], "v": ["1200.1", "9.90406756"],
                "p": ["35400.1", "34692.86"], "h": ["35600", "35800"],
                "l": ["35100", "34900"], "o": "35300.0"}}}

        :param json: Decoded response body.
        :returns: Validated Ticker.
        :raises ExchangeParseError: If Kraken reports an error or no result.
        :raises InvalidTickerError: If the ticker fails validation.
        """
        if not isinstance(json, dict):
            raise ExchangeParseError(f"kraken ticker payload for {self.pair_symbol} is not an object")

        errors = json.get("error")
        if errors:
            logger.warning(f"[kraken] API error for {self.pair_symbol}: {errors}")
            raise ExchangeParseError(f"kraken API error for {self.pair_symbol}: {errors}")

        result = json.get("result")
        if not isinstance(result, dict) or not result:
            logger.warning(f"[kraken] No result for {self.pair_symbol}")
            raise ExchangeParseError(f"kraken returned no result for {self.pair_symbol}")

        pair_data = next(iter(result.values()))
        if not isinstance(pair_data, dict):
            raise ExchangeParseError(f"kraken pair data for {self.pair_symbol} is not an object")
        base_volume = safe_decimal_parse(_field(pair_data, "v", 1))
        vwap = safe_decimal_parse(_field(pair_data, "p", 1))
        ticker = Ticker(
            **self._ticker_metadata,
            bid=safe_decimal_parse(_field(pair_data, "b", 0)),
            ask=safe_decimal_parse(_field(pair_data, "a", 0)),
            last_price=safe_decimal_parse(_field(pair_data, "c", 0)),
            base_volume=base_volume,
            quote_volume=base_volume * vwap if base_volume is not None and vwap is not None else None,
            timestamp=int(time.time() * 1000),
            high=safe_decimal_parse(_field(pair_data, "h", 1)),
            low=safe_decimal_parse(_field(pair_data, "l", 1)),
            open=safe_decimal_parse(pair_data.get("o")),
        )
        verify_ticker(ticker)
        return ticker

    async def is_orderbook_live(self) -> bool:
        """Kraken's system status is "online" when the order books trade."""
        json = await self._fetch_from_api(ExchangeDataType.ORDERBOOK_STATUS, "SystemStatus")
        result = json.get("result") if isinstance(json, dict) else None
        return isinstance(result, dict) and result.get("status") == "online"

"""Exchange adapter contract and shared HTTP client management.

Every adapter turns one exchange's REST payloads for one trading pair into
normalized :class:`Ticker` (and optionally :class:`Trade`) objects. Price
sources only depend on the :class:`ExchangeAdapter` protocol; concrete
adapters usually inherit :class:`BaseExchangeAdapter` for the shared
``httpx.AsyncClient`` and symbol mapping.

.. code-block:: python

    @register_adapter
    class MyAdapter(BaseExchangeAdapter):
        exchange_name = Exchange.MYEXCHANGE
        BASE_URL = "https://api.example.com"

        def _generate_pair_symbol(self) -> str:
            return f"{self.base_symbol}-{self.quote_symbol}"

        async def fetch_ticker(self) -> Ticker:
            json = await self._fetch_from_api(
                ExchangeDataType.TICKER, f"ticker/{self.pair_symbol}"
            )
            return self.parse_ticker(json)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

import httpx

from ..Ticker import Currency, Exchange, Ticker, Trade

logger = logging.getLogger(__name__)


class ExchangeAdapterError(Exception):
    """Base exception for adapter errors (network failures, timeouts)."""

    pass


class ExchangeHTTPError(ExchangeAdapterError):
    """Raised when an exchange answers with a non-2xx status.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, status_code: int, message: str):
        """Initialize the HTTP error.

        :param status_code: HTTP status code.
        :param message: Error message from response.
        """
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


class ExchangeParseError(ExchangeAdapterError):
    """Raised when an exchange payload does not have the expected shape."""

    pass


class ExchangeDataType(str, Enum):
    """Kind of data requested from an exchange, used in logs and errors."""

    TICKER = "ticker"
    TRADE = "trade"
    ORDERBOOK_STATUS = "orderbook_status"


@dataclass(frozen=True)
class ExchangeAdapterConfig:
    """Pair and transport settings of an adapter.

    :ivar base_currency: Base currency of the pair.
    :ivar quote_currency: Quote currency of the pair.
    :ivar timeout: Request timeout in seconds (adapter default if None).
    """

    base_currency: Currency
    quote_currency: Currency
    timeout: float | None = None


@runtime_checkable
class ExchangeAdapter(Protocol):
    """What a price source needs from an adapter."""

    exchange_name: Exchange
    pair_symbol: str

    async def fetch_ticker(self) -> Ticker:
        """Fetch the current ticker of the adapter's pair.

        Raises on network failure, non-success response or unusable payload.
        """
        ...


class BaseExchangeAdapter(ABC):
    """Abstract base class for HTTP exchange adapters.

    Subclasses must define:
        - exchange_name: Exchange tag of the adapter
        - BASE_URL: Root of the exchange's REST API
        - _generate_pair_symbol(): Exchange symbol of the configured pair
        - fetch_ticker(): Fetch and parse the pair's ticker

    :cvar exchange_name: Exchange tag.
    :cvar DEFAULT_TIMEOUT: Default HTTP request timeout in seconds.
    :ivar config: Pair and transport settings.
    :ivar pair_symbol: Exchange-specific symbol of the configured pair.
    """

    # Class-level shared HTTP client
    _shared_client: ClassVar[httpx.AsyncClient | None] = None

    exchange_name: ClassVar[Exchange]
    BASE_URL: ClassVar[str] = ""

    # Default timeout for HTTP requests (seconds)
    DEFAULT_TIMEOUT = 10.0

    STANDARD_TOKEN_SYMBOL_MAP: ClassVar[dict[Currency, str]] = {
        currency: currency.value for currency in Currency
    }

    def __init__(self, config: ExchangeAdapterConfig):
        """Initialize the adapter.

        :param config: Pair and transport settings.
        :raises ValueError: If a currency has no symbol on this exchange.
        """
        self.config = config
        self.timeout = config.timeout or self.DEFAULT_TIMEOUT
        self.pair_symbol = self._generate_pair_symbol()

    @property
    def base_symbol(self) -> str:
        """Exchange symbol of the base currency."""
        return self._token_symbol(self.config.base_currency)

    @property
    def quote_symbol(self) -> str:
        """Exchange symbol of the quote currency."""
        return self._token_symbol(self.config.quote_currency)

    def _token_symbol(self, currency: Currency) -> str:
        symbol = self.STANDARD_TOKEN_SYMBOL_MAP.get(currency)
        if symbol is None:
            raise ValueError(
                f"{self.exchange_name.value} has no symbol for {currency.value}"
            )
        return symbol

    @property
    def _ticker_metadata(self) -> dict[str, Any]:
        """Fields shared by every ticker and trade of this adapter."""
        return {"source": self.exchange_name, "symbol": self.pair_symbol}

    @classmethod
    def get_shared_client(cls) -> httpx.AsyncClient:
        """Get or create the shared HTTP client.

        The client is stored on BaseExchangeAdapter so that all adapters
        reuse connections.

        :returns: Shared httpx.AsyncClient instance.
        """
        base = BaseExchangeAdapter
        if base._shared_client is None or base._shared_client.is_closed:
            base._shared_client = httpx.AsyncClient(
                timeout=httpx.Timeout(30.0, connect=10.0),
                limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
                follow_redirects=True,
            )
        return base._shared_client

    @classmethod
    async def close_shared_client(cls) -> None:
        """Close the shared HTTP client."""
        base = BaseExchangeAdapter
        if base._shared_client is not None and not base._shared_client.is_closed:
            await base._shared_client.aclose()
            base._shared_client = None

    @abstractmethod
    def _generate_pair_symbol(self) -> str:
        """Build the exchange's symbol for the configured pair."""
        pass

    @abstractmethod
    async def fetch_ticker(self) -> Ticker:
        """Fetch the current ticker of the configured pair.

        :returns: Validated Ticker.
        :raises ExchangeAdapterError: On transport or payload errors.
        :raises InvalidTickerError: If the parsed ticker is invalid.
        """
        pass

    async def fetch_trades(self) -> list[Trade]:
        """Fetch recent trades of the configured pair, oldest first.

        :returns: Trades sorted by ascending timestamp.
        :raises NotImplementedError: If the exchange adapter has no trades support.
        """
        raise NotImplementedError(
            f"{self.exchange_name.value} adapter does not fetch trades"
        )

    async def is_orderbook_live(self) -> bool:
        """Check whether the exchange order book for the pair is trading.

        Exchanges without a status endpoint are assumed live.

        :returns: True if the order book is live.
        """
        return True

    async def _fetch_from_api(
        self,
        data_type: ExchangeDataType,
        path: str,
        *,
        params: dict | None = None,
    ) -> Any:
        """GET ``BASE_URL/path`` and decode the JSON body.

        :param data_type: Kind of data requested, for error messages.
        :param path: Path relative to BASE_URL.
        :param params: Optional query parameters.
        :returns: Decoded JSON payload.
        :raises ExchangeHTTPError: On non-2xx response.
        :raises ExchangeParseError: If the body is not JSON.
        :raises ExchangeAdapterError: On network/timeout errors.
        """
        url = f"{self.BASE_URL}/{path}"
        client = self.get_shared_client()
        try:
            response = await client.get(url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.warning(f"[{self.exchange_name.value}] {data_type.value} timeout: {e}")
            raise ExchangeAdapterError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.warning(f"[{self.exchange_name.value}] {data_type.value} request failed: {e}")
            raise ExchangeAdapterError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                url,
                response.status_code,
                response.text[:200],
            )
            raise ExchangeHTTPError(response.status_code, response.text[:200])

        try:
            return response.json()
        except ValueError as e:
            raise ExchangeParseError(
                f"{self.exchange_name.value} {data_type.value} response is not JSON: {e}"
            ) from e


# Registry of available adapters (populated by subclass imports)
ADAPTER_REGISTRY: dict[str, type[BaseExchangeAdapter]] = {}


def register_adapter(cls: type[BaseExchangeAdapter]) -> type[BaseExchangeAdapter]:
    """Decorator to register an adapter class under its lowercase exchange tag.

    :param cls: Adapter class to register.
    :returns: The registered class (unchanged).
    :raises ValueError: If the adapter defines no exchange_name.
    """
    exchange = getattr(cls, "exchange_name", None)
    if exchange is None:
        raise ValueError(f"Adapter {cls.__name__} must define an 'exchange_name'")
    ADAPTER_REGISTRY[exchange.value.lower()] = cls
    return cls


def get_adapter(name: str, config: ExchangeAdapterConfig) -> BaseExchangeAdapter:
    """Get an adapter instance by exchange name.

    :param name: Exchange name, case-insensitive (e.g. "okx").
    :param config: Pair and transport settings.
    :returns: Adapter instance.
    :raises ValueError: If the exchange is unknown.
    """
    key = name.lower()
    if key not in ADAPTER_REGISTRY:
        available = ", ".join(sorted(ADAPTER_REGISTRY.keys()))
        raise ValueError(f"Unknown exchange '{name}'. Available: {available}")
    return ADAPTER_REGISTRY[key](config)


def get_available_adapters() -> list[str]:
    """Get list of registered adapter names.

    :returns: Sorted list of lowercase exchange names.
    """
    return sorted(ADAPTER_REGISTRY.keys())

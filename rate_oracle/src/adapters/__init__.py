"""
Exchange adapters for the cross-rate price source.

Each adapter fetches one trading pair from one exchange and normalizes the
response into a Ticker.

Usage:
    from rate_oracle.src.adapters import ExchangeAdapterConfig, get_adapter
    from rate_oracle.src.Ticker import Currency

    # Get list of available adapters
    available = get_available_adapters()
    # ['bitstamp', 'kraken', 'novadax', 'okx']

    # Create an adapter instance
    adapter = get_adapter("okx", ExchangeAdapterConfig(Currency.CELO, Currency.USDT))
    ticker = await adapter.fetch_ticker()
"""

# Import base classes and utilities
from .base import (
    ADAPTER_REGISTRY,
    BaseExchangeAdapter,
    ExchangeAdapter,
    ExchangeAdapterConfig,
    ExchangeAdapterError,
    ExchangeDataType,
    ExchangeHTTPError,
    ExchangeParseError,
    get_adapter,
    get_available_adapters,
    register_adapter,
)

# Import all adapter implementations to trigger registration
from .bitstamp import BitstampAdapter
from .kraken import KrakenAdapter
from .novadax import NovaDaxAdapter
from .okx import OKXAdapter

__all__ = [
    # Base classes
    "BaseExchangeAdapter",
    "ExchangeAdapter",
    "ExchangeAdapterConfig",
    "ExchangeAdapterError",
    "ExchangeDataType",
    "ExchangeHTTPError",
    "ExchangeParseError",
    # Registry functions
    "register_adapter",
    "get_adapter",
    "get_available_adapters",
    "ADAPTER_REGISTRY",
    # Adapter implementations
    "BitstampAdapter",
    "KrakenAdapter",
    "NovaDaxAdapter",
    "OKXAdapter",
]

"""
Market Data Service

CONTRACT:
    Input:  MarketDataRequest (symbol, timeframe, lookback)
    Output: PriceSeries

RESPONSIBILITIES:
    - Fetch close-price history (Yahoo Finance or mock)
    - Normalize symbols and external market-state payloads
    - Serve the USDT pair catalogue for search/autocomplete
    - Surface failures as ExternalUnavailableError

The decision core never talks to a provider directly.
"""

from typing import Optional

from tradeguard.services.market_data.interface import (
    MarketDataProviderInterface,
    MarketDataRequest,
)
from tradeguard.services.market_data.mock_data import MockPriceProvider
from tradeguard.services.market_data.normalize import (
    normalize_symbol,
    normalize_market_state,
    format_adjustments,
    market_state_payload,
)
from tradeguard.services.market_data.symbol_list import (
    get_popular_symbols,
    search_symbols,
)

_provider_instance: Optional[MarketDataProviderInterface] = None


def get_market_data_provider() -> MarketDataProviderInterface:
    """Get or create the configured market-data provider."""
    global _provider_instance
    if _provider_instance is None:
        from tradeguard.core.config import settings

        if settings.market_data_provider == "mock":
            _provider_instance = MockPriceProvider()
        else:
            from tradeguard.services.market_data.yahoo_adapter import YahooPriceProvider

            _provider_instance = YahooPriceProvider()
    return _provider_instance


__all__ = [
    "MarketDataProviderInterface",
    "MarketDataRequest",
    "MockPriceProvider",
    "get_market_data_provider",
    "normalize_symbol",
    "normalize_market_state",
    "format_adjustments",
    "market_state_payload",
    "get_popular_symbols",
    "search_symbols",
]

"""
Mock Price Provider

Generates deterministic mock close prices for development and testing.
The same symbol and timeframe always produce the same series.
"""

import logging
import zlib

import numpy as np

from tradeguard.schemas.market import PriceSeries, Timeframe
from tradeguard.services.market_data.interface import (
    MarketDataProviderInterface,
    MarketDataRequest,
)

logger = logging.getLogger(__name__)


# Base prices for common pairs
SYMBOL_BASE_PRICES = {
    "BTC": 95000.0,
    "ETH": 3200.0,
    "SOL": 140.0,
    "BNB": 600.0,
    "DOGE": 0.35,
}

DEFAULT_BASE_PRICE = 100.0
STEP_VOLATILITY = 0.01  # 1% per bar


def get_base_price(symbol: str) -> float:
    """Get base price for a pair from its base asset."""
    base = symbol.upper().replace("-", "/").split("/")[0]
    return SYMBOL_BASE_PRICES.get(base, DEFAULT_BASE_PRICE)


def generate_mock_prices(
    symbol: str,
    timeframe: Timeframe = Timeframe.M15,
    lookback: int = 300,
    drift: float = 0.0,
) -> list[float]:
    """Geometric random walk seeded from symbol and timeframe."""
    seed = zlib.crc32(f"{symbol.upper()}|{timeframe.value}".encode())
    rng = np.random.default_rng(seed)
    returns = rng.normal(loc=drift, scale=STEP_VOLATILITY, size=lookback)
    prices = get_base_price(symbol) * np.exp(np.cumsum(returns))
    return [round(float(p), 6) for p in prices]


class MockPriceProvider(MarketDataProviderInterface):
    """Offline provider for development and tests."""

    def __init__(self, drift: float = 0.0):
        self.drift = drift

    @property
    def name(self) -> str:
        return "MockPriceProvider"

    async def execute(self, input_data: MarketDataRequest) -> PriceSeries:
        """Generate a deterministic close-price series."""
        logger.info(f"Generating mock prices for {input_data.symbol} ({input_data.timeframe.value})")
        return PriceSeries(
            symbol=input_data.symbol,
            timeframe=input_data.timeframe,
            prices=generate_mock_prices(
                input_data.symbol,
                input_data.timeframe,
                input_data.lookback,
                self.drift,
            ),
        )

    async def health_check(self) -> bool:
        return True

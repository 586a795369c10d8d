"""
Market Data Provider Interface

Defines the contract for price-history providers.
"""

from abc import abstractmethod
from dataclasses import dataclass

from tradeguard.services.base import BaseService
from tradeguard.schemas.market import PriceSeries, Timeframe


@dataclass
class MarketDataRequest:
    """Input for a price-history fetch."""

    symbol: str
    timeframe: Timeframe = Timeframe.M15
    lookback: int = 300


class MarketDataProviderInterface(BaseService[MarketDataRequest, PriceSeries]):
    """
    Market Data Provider Contract.

    INPUT: MarketDataRequest
        - symbol: Normalized pair, e.g. BTC/USDT
        - timeframe: Candle timeframe
        - lookback: Number of closes wanted

    OUTPUT: PriceSeries
        - Close prices, oldest first, at most `lookback` long

    ERRORS:
        - ExternalUnavailableError when the source fails, times out or
          returns no data. Never returns an empty or partial series.
    """

    @property
    def name(self) -> str:
        return "MarketDataProvider"

    @abstractmethod
    async def execute(self, input_data: MarketDataRequest) -> PriceSeries:
        """Fetch close-price history."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the data source."""
        pass

    async def get_price_series(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.M15,
        lookback: int = 300,
    ) -> PriceSeries:
        """Convenience wrapper around execute()."""
        return await self.execute(MarketDataRequest(symbol, timeframe, lookback))

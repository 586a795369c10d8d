"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from tradeguard.services.base import BaseService
from tradeguard.schemas.market import PriceSeries, IndicatorSnapshot


class IndicatorServiceInterface(BaseService[PriceSeries, IndicatorSnapshot]):
    """
    Indicator Engine Service Contract.

    INPUT: PriceSeries
        - symbol, timeframe
        - prices: close prices, oldest first

    OUTPUT: IndicatorSnapshot
        - current_price, rsi, ma50, ma200, ema12, ema200
        - macd: line / signal / histogram / cross_status
        - volatility

    Short histories produce sentinel values, never errors.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: PriceSeries) -> IndicatorSnapshot:
        """Calculate the indicator snapshot for one series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass

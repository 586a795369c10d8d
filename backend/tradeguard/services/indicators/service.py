"""
Indicator Engine Service Implementation

Calculates the indicator snapshot from a close-price series.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.
"""

import logging
from typing import Optional

from tradeguard.schemas.market import PriceSeries, IndicatorSnapshot
from tradeguard.services.indicators.interface import IndicatorServiceInterface
from tradeguard.services.indicators.calculations import compute_indicators

logger = logging.getLogger(__name__)

# Shortest history for which every snapshot field is a real value
FULL_HISTORY = 200


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: PriceSeries) -> IndicatorSnapshot:
        """Calculate the indicator snapshot for one series."""
        if len(input_data.prices) < FULL_HISTORY:
            logger.warning(
                f"{input_data.symbol}: only {len(input_data.prices)} prices, "
                f"some indicators will be sentinel values"
            )
        return compute_indicators(input_data.symbol, input_data.prices)

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance

"""
Position & Risk Service Implementation

Sizes proposals with thresholds taken from settings.
PURE PYTHON - No LLM involvement.
"""

import logging
from typing import Optional

from tradeguard.schemas.trade import TradeProposal, SizingResult
from tradeguard.services.risk.interface import RiskServiceInterface
from tradeguard.services.risk.sizing import (
    compute_sizing,
    DEFAULT_FEE_RATE,
    DEFAULT_MARGIN_WARNING_PERCENT,
    DEFAULT_MAX_MARGIN_USAGE_PERCENT,
)

logger = logging.getLogger(__name__)


class RiskService(RiskServiceInterface):
    """
    Position & Risk Service.

    Risk gating is NON-NEGOTIABLE: an unsafe result always ends in CANCEL.
    """

    def __init__(
        self,
        fee_rate: float = DEFAULT_FEE_RATE,
        margin_warning_percent: float = DEFAULT_MARGIN_WARNING_PERCENT,
        max_margin_usage_percent: float = DEFAULT_MAX_MARGIN_USAGE_PERCENT,
    ):
        self.fee_rate = fee_rate
        self.margin_warning_percent = margin_warning_percent
        self.max_margin_usage_percent = max_margin_usage_percent

    @property
    def name(self) -> str:
        return "RiskService"

    async def execute(self, input_data: TradeProposal) -> SizingResult:
        """Size the proposal and gate it on margin usage."""
        sizing = compute_sizing(
            input_data,
            fee_rate=self.fee_rate,
            margin_warning_percent=self.margin_warning_percent,
            max_margin_usage_percent=self.max_margin_usage_percent,
        )
        if not sizing.is_safe:
            logger.info(
                f"{input_data.symbol} {input_data.side.value}: unsafe sizing "
                f"(margin usage {sizing.margin_usage_percent:.1f}%, warnings={sizing.warnings})"
            )
        return sizing

    async def health_check(self) -> bool:
        """Risk service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[RiskService] = None


def get_risk_service() -> RiskService:
    """Get or create risk service instance."""
    global _service_instance
    if _service_instance is None:
        from tradeguard.core.config import settings

        _service_instance = RiskService(
            fee_rate=settings.fee_rate,
            margin_warning_percent=settings.margin_warning_percent,
            max_margin_usage_percent=settings.max_margin_usage_percent,
        )
    return _service_instance

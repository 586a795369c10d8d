"""
CONTRACT 2: Trade Proposal & Position Sizing

Input: TradeProposal (from the user)
Output: SizingResult (from the Position & Risk Calculator)

CRITICAL: Sizing is derived backward from the acceptable loss.
quantity = (balance x risk%) / |entry - stop|
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from tradeguard.schemas.market import Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class TradeSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


# =============================================================================
# INPUT: TradeProposal
# =============================================================================


def default_timeframe() -> Timeframe:
    """Configured default timeframe (DEFAULT_TIMEFRAME)."""
    from tradeguard.core.config import settings

    return Timeframe(settings.default_timeframe)


class TradeProposal(BaseModel):
    """
    A leveraged position the user wants checked.

    Only risk_percentage and leverage are bounded here. Non-positive
    prices or balance and entry == stop are left to the calculator, which
    answers them with a zeroed, unsafe SizingResult.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1, description="e.g. BTC/USDT")
    side: TradeSide
    timeframe: Timeframe = Field(default_factory=default_timeframe)
    entry_price: float
    stop_loss: float
    take_profit: float = Field(..., ge=0)
    account_balance: float
    risk_percentage: float = Field(..., gt=0, le=100)
    leverage: float = Field(default=1.0, ge=1)
    strategy_id: str = Field(default="MACD_RSI_COMPOSITE")


# =============================================================================
# OUTPUT: SizingResult
# =============================================================================


class SizingResult(BaseModel):
    """
    Derived sizing fields. A pure projection of a TradeProposal.

    is_safe is False when the implied margin exceeds the account balance,
    or when the proposal cannot be sized at all (all numbers zero).
    warnings are advisory and never change is_safe.
    """

    model_config = ConfigDict(frozen=True)

    quantity: float = 0.0
    notional: float = 0.0
    margin: float = 0.0
    estimated_risk_amount: float = 0.0
    estimated_fee: float = 0.0
    margin_usage_percent: float = 0.0
    is_safe: bool = False
    price_distance: float = 0.0
    risk_reward_ratio: float = 0.0
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_degenerate(self) -> bool:
        """True for the zeroed result of a proposal that could not be sized."""
        return self.quantity == 0 and self.price_distance == 0

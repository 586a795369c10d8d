"""
CONTRACT 1: Market Data & Indicators

Input: PriceSeries (from a market-data provider)
Output: IndicatorSnapshot (from the Indicator Engine)

The snapshot is the only market shape the decision core ever sees.
Provider payloads are normalized into it at the boundary.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"


class CrossStatus(str, Enum):
    UP = "UP"  # MACD line crossed above signal on the latest bar
    DOWN = "DOWN"  # MACD line crossed below signal on the latest bar
    NONE = "NONE"


# =============================================================================
# INPUT: PriceSeries
# =============================================================================


class PriceSeries(BaseModel):
    """
    Chronological close prices for one symbol, oldest first.
    Sent by: Market-data provider
    Received by: Indicator Service
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1)
    timeframe: Timeframe = Timeframe.M15
    prices: list[float] = Field(..., min_length=1)

    @field_validator("prices")
    @classmethod
    def prices_must_be_positive(cls, v):
        if any(p <= 0 for p in v):
            raise ValueError("prices must be positive")
        return v

    @property
    def latest(self) -> float:
        return self.prices[-1]


# =============================================================================
# OUTPUT: IndicatorSnapshot
# =============================================================================


class MACDState(BaseModel):
    """MACD (12, 26, 9) at the latest bar."""

    model_config = ConfigDict(frozen=True)

    line: float = 0.0
    signal: float = 0.0
    histogram: float = 0.0
    cross_status: CrossStatus = CrossStatus.NONE


class IndicatorSnapshot(BaseModel):
    """
    Indicator values for one symbol, computed once per analysis.
    Returned by: Indicator Service
    Consumed by: Decision Aggregator, Verdict providers
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "symbol": "BTC/USDT",
                "current_price": 95120.5,
                "rsi": 58.31,
                "ma50": 94710.2,
                "ma200": 92005.8,
                "ema12": 95002.4,
                "ema200": 92440.1,
                "macd": {
                    "line": 112.4051,
                    "signal": 98.2213,
                    "histogram": 14.1838,
                    "cross_status": "NONE",
                },
                "volatility": 310.55,
            }
        },
    )

    symbol: str
    current_price: float = Field(..., ge=0)
    rsi: float = Field(..., ge=0, le=100)
    ma50: float
    ma200: float
    ema12: float
    ema200: float
    macd: MACDState
    volatility: float = Field(..., ge=0)


# =============================================================================
# CATALOGUE: SymbolData
# =============================================================================


class SymbolData(BaseModel):
    """A tradable pair offered to the trade form for autocomplete."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str = Field(..., description="e.g. BTC/USDT")
    base_currency: str
    quote_currency: str

"""
TradeGuard Schema Contracts

This module defines all contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from tradeguard.schemas.market import (
    Timeframe,
    CrossStatus,
    PriceSeries,
    MACDState,
    IndicatorSnapshot,
    SymbolData,
)
from tradeguard.schemas.trade import (
    TradeSide,
    TradeProposal,
    SizingResult,
)
from tradeguard.schemas.analysis import (
    Recommendation,
    DecisionSource,
    AnalysisState,
    StrategyType,
    Strategy,
    StrategyCondition,
    StrategyEvaluation,
    Verdict,
    AnalysisResult,
    AnalysisRecord,
    AnalysisRun,
)

__all__ = [
    # Market
    "Timeframe",
    "CrossStatus",
    "PriceSeries",
    "MACDState",
    "IndicatorSnapshot",
    "SymbolData",
    # Trade
    "TradeSide",
    "TradeProposal",
    "SizingResult",
    # Analysis
    "Recommendation",
    "DecisionSource",
    "AnalysisState",
    "StrategyType",
    "Strategy",
    "StrategyCondition",
    "StrategyEvaluation",
    "Verdict",
    "AnalysisResult",
    "AnalysisRecord",
    "AnalysisRun",
]

"""
Decision Aggregator

CONTRACT:
    Input:  TradeProposal (+ optional IndicatorSnapshot)
    Output: AnalysisRun with an AnalysisResult (EXECUTE / WAIT / CANCEL)

RESPONSIBILITIES:
    - Orchestrate the full pipeline:
        1. Position & Risk Calculator -> SizingResult
        2. Market Data -> PriceSeries
        3. Indicator Engine -> IndicatorSnapshot
        4. Strategy rules -> StrategyEvaluation
        5. Verdict provider (optional) -> Verdict
        6. decide() -> AnalysisResult
    - Track the run state PENDING -> ... -> DONE / FAILED

PRECEDENCE:
    Unsafe sizing -> CANCEL, failed rules -> WAIT, then the external
    verdict, then the rule-based EXECUTE.
"""

# rules and decision load before service; llm.prompts imports rules
from tradeguard.services.strategy.interface import (
    AnalysisServiceInterface,
    AnalysisRequest,
)
from tradeguard.services.strategy.rules import (
    StrategyRules,
    evaluate_strategy,
    get_strategy_rules,
    list_strategies,
)
from tradeguard.services.strategy.decision import decide
from tradeguard.services.strategy.service import AnalysisService, get_analysis_service

__all__ = [
    "AnalysisServiceInterface",
    "AnalysisRequest",
    "StrategyRules",
    "evaluate_strategy",
    "get_strategy_rules",
    "list_strategies",
    "decide",
    "AnalysisService",
    "get_analysis_service",
]

"""
CONTRACT 3: Decision

Input: TradeProposal + IndicatorSnapshot + SizingResult (+ optional Verdict)
Output: AnalysisResult

Rule gates dominate any external opinion:
    unsafe sizing      -> CANCEL
    strategy not met   -> WAIT
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import SizingResult, TradeProposal, TradeSide


# =============================================================================
# ENUMS
# =============================================================================


class Recommendation(str, Enum):
    EXECUTE = "EXECUTE"
    WAIT = "WAIT"
    CANCEL = "CANCEL"


class DecisionSource(str, Enum):
    AI = "AI"  # Taken from an external verdict
    RULES = "RULES"  # Synthesized from rule evaluation


class AnalysisState(str, Enum):
    PENDING = "PENDING"
    FETCHING_MARKET = "FETCHING_MARKET"
    COMPUTING_INDICATORS = "COMPUTING_INDICATORS"
    EVALUATING = "EVALUATING"
    DONE = "DONE"
    FAILED = "FAILED"


class StrategyType(str, Enum):
    BUILTIN = "BUILTIN"
    CUSTOM = "CUSTOM"


# =============================================================================
# STRATEGY EVALUATION
# =============================================================================


class Strategy(BaseModel):
    """A selectable strategy and its rule threshold."""

    id: str
    name: str
    description: str
    strategy_type: StrategyType = StrategyType.BUILTIN
    min_conditions: int = Field(..., ge=1)


class StrategyCondition(BaseModel):
    """One boolean rule and whether the snapshot satisfies it."""

    name: str
    description: str
    met: bool


class StrategyEvaluation(BaseModel):
    """Result of counting a strategy's side-specific conditions."""

    strategy_id: str
    side: TradeSide
    conditions: list[StrategyCondition]
    conditions_met: int = Field(..., ge=0)
    conditions_required: int = Field(..., ge=0)
    passed: bool

    @property
    def score(self) -> int:
        """Conditions met as a 0-100 score."""
        if not self.conditions:
            return 0
        return round(self.conditions_met / len(self.conditions) * 100)


# =============================================================================
# EXTERNAL VERDICT
# =============================================================================


class Verdict(BaseModel):
    """Opinion returned by an external (LLM) verdict provider."""

    recommendation: Recommendation
    confidence_score: float = Field(..., ge=0, le=100)
    reasoning: str
    risk_assessment: str
    suggested_adjustments: Optional[str] = None
    provider: str = "unknown"


# =============================================================================
# OUTPUT: AnalysisResult
# =============================================================================


class AnalysisResult(BaseModel):
    """
    Final recommendation for one analysis run.
    Immutable once produced.
    """

    model_config = ConfigDict(frozen=True)

    recommendation: Recommendation
    confidence_score: float = Field(..., ge=0, le=100)
    reasoning: str
    risk_assessment: str
    suggested_adjustments: Optional[str] = None
    strategy_score: Optional[int] = Field(default=None, ge=0, le=100)
    rule_passed: Optional[bool] = None
    source: DecisionSource = DecisionSource.RULES


class AnalysisRecord(BaseModel):
    """The persisted unit: what was proposed, what the market looked like, what we said."""

    id: str
    timestamp: datetime
    proposal: TradeProposal
    snapshot: IndicatorSnapshot
    result: AnalysisResult


class AnalysisRun(BaseModel):
    """
    One pass through the analysis pipeline.

    Not persisted. On FAILED, result is None and error holds the reason.
    """

    state: AnalysisState = AnalysisState.PENDING
    history: list[AnalysisState] = Field(default_factory=lambda: [AnalysisState.PENDING])
    proposal: TradeProposal
    sizing: Optional[SizingResult] = None
    snapshot: Optional[IndicatorSnapshot] = None
    evaluation: Optional[StrategyEvaluation] = None
    verdict: Optional[Verdict] = None
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    def advance(self, state: AnalysisState) -> None:
        self.state = state
        self.history.append(state)

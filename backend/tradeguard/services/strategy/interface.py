"""
Analysis Service Interface

Orchestrates one trade analysis run.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from tradeguard.services.base import BaseService
from tradeguard.schemas.analysis import AnalysisRun
from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import TradeProposal


@dataclass
class AnalysisRequest:
    """Request for one analysis run."""

    proposal: TradeProposal
    # Pre-computed snapshot; skips the market fetch when given
    snapshot: Optional[IndicatorSnapshot] = None
    use_verdict: bool = True


class AnalysisServiceInterface(BaseService[AnalysisRequest, AnalysisRun]):
    """
    Analysis Service Contract.

    This is the MAIN ORCHESTRATOR that runs the full pipeline.

    INPUT: AnalysisRequest
        - proposal: The user's trade
        - snapshot: Optional pre-computed indicator snapshot
        - use_verdict: Whether to ask the external verdict provider

    OUTPUT: AnalysisRun (state DONE, result set)

    PIPELINE:
        ┌──────────────────┐
        │ PENDING          │ Position & Risk Calculator
        └────────┬─────────┘
                 │
                 ▼
        ┌──────────────────┐
        │ FETCHING_MARKET  │ → PriceSeries
        └────────┬─────────┘
                 │
                 ▼
        ┌──────────────────────┐
        │ COMPUTING_INDICATORS │ → IndicatorSnapshot
        └────────┬─────────────┘
                 │
                 ▼
        ┌──────────────────┐
        │ EVALUATING       │ Strategy rules + verdict → AnalysisResult
        └────────┬─────────┘
                 │
                 ▼
        ┌──────────────────┐
        │ DONE             │
        └──────────────────┘

    Any collaborator failure moves the run to FAILED and raises
    ExternalUnavailableError. No partial result is returned.
    """

    @property
    def name(self) -> str:
        return "AnalysisService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AnalysisRun:
        """Run the complete analysis pipeline."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check health of all dependent services."""
        pass

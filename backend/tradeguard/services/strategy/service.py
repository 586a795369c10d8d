"""
Analysis Service Implementation

Orchestrates one trade analysis run:
    Risk Calculator → Market Data → Indicator Engine → Rules + Verdict → Decision

This is the main entry point for evaluating a proposed trade.
"""

import logging
from typing import Optional

from tradeguard.schemas.analysis import AnalysisRun, AnalysisState
from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import TradeProposal
from tradeguard.services.base import ExternalUnavailableError, ServiceError
from tradeguard.services.indicators import IndicatorServiceInterface, get_indicator_service
from tradeguard.services.llm.interface import VerdictProviderInterface
from tradeguard.services.market_data import (
    MarketDataProviderInterface,
    get_market_data_provider,
    normalize_symbol,
)
from tradeguard.services.risk import RiskServiceInterface, get_risk_service
from tradeguard.services.strategy.decision import decide
from tradeguard.services.strategy.interface import AnalysisServiceInterface, AnalysisRequest
from tradeguard.services.strategy.rules import evaluate_strategy

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LOOKBACK = 300


class AnalysisService(AnalysisServiceInterface):
    """
    Analysis Service.

    Runs the pipeline and tracks the run's state. Collaborators can be
    injected; otherwise the configured singletons are used.
    """

    def __init__(
        self,
        market_provider: Optional[MarketDataProviderInterface] = None,
        indicator_service: Optional[IndicatorServiceInterface] = None,
        risk_service: Optional[RiskServiceInterface] = None,
        verdict_provider: Optional[VerdictProviderInterface] = None,
        history_lookback: int = DEFAULT_HISTORY_LOOKBACK,
    ):
        self._market_provider = market_provider
        self._indicator_service = indicator_service
        self._risk_service = risk_service
        self._verdict_provider = verdict_provider
        self.history_lookback = history_lookback

    @property
    def market_provider(self) -> MarketDataProviderInterface:
        """Lazy load market-data provider."""
        if self._market_provider is None:
            self._market_provider = get_market_data_provider()
        return self._market_provider

    @property
    def indicator_service(self) -> IndicatorServiceInterface:
        """Lazy load indicator service."""
        if self._indicator_service is None:
            self._indicator_service = get_indicator_service()
        return self._indicator_service

    @property
    def risk_service(self) -> RiskServiceInterface:
        """Lazy load risk service."""
        if self._risk_service is None:
            self._risk_service = get_risk_service()
        return self._risk_service

    @property
    def verdict_provider(self) -> VerdictProviderInterface:
        """Lazy load verdict provider."""
        if self._verdict_provider is None:
            from tradeguard.services.llm.verdict import get_verdict_provider

            self._verdict_provider = get_verdict_provider()
        return self._verdict_provider

    @property
    def name(self) -> str:
        return "AnalysisService"

    async def fetch_snapshot(self, proposal: TradeProposal, run: AnalysisRun) -> IndicatorSnapshot:
        """FETCHING_MARKET → COMPUTING_INDICATORS."""
        run.advance(AnalysisState.FETCHING_MARKET)
        try:
            series = await self.market_provider.get_price_series(
                proposal.symbol,
                proposal.timeframe,
                self.history_lookback,
            )
        except ServiceError:
            raise
        except Exception as e:
            raise ExternalUnavailableError(
                self.market_provider.name,
                f"Market data fetch failed for {proposal.symbol}: {e}",
            ) from e
        logger.info(f"Got {len(series.prices)} prices for {proposal.symbol}")

        run.advance(AnalysisState.COMPUTING_INDICATORS)
        return await self.indicator_service.execute(series)

    async def execute(self, input_data: AnalysisRequest) -> AnalysisRun:
        """
        Run the complete analysis pipeline.

        Raises:
            ExternalUnavailableError: Market data could not be obtained.
                details carries the FAILED state and the state history.
        """
        proposal = input_data.proposal.model_copy(
            update={"symbol": normalize_symbol(input_data.proposal.symbol)}
        )
        run = AnalysisRun(proposal=proposal)
        logger.info(
            f"Starting analysis for {proposal.symbol} {proposal.side.value} "
            f"({proposal.timeframe.value}, {proposal.strategy_id})"
        )

        # Sizing runs first and never fails
        run.sizing = await self.risk_service.execute(proposal)

        try:
            snapshot = input_data.snapshot
            if snapshot is None:
                snapshot = await self.fetch_snapshot(proposal, run)
            run.snapshot = snapshot

            run.advance(AnalysisState.EVALUATING)
            run.evaluation = evaluate_strategy(proposal.strategy_id, proposal.side, snapshot)

            # A verdict cannot change a gated outcome, so don't pay for one
            if input_data.use_verdict and run.sizing.is_safe and run.evaluation.passed:
                run.verdict = await self.verdict_provider.get_verdict(proposal, snapshot, run.sizing)
                if run.verdict is None:
                    logger.info("No external verdict available, using rule-based decision")

            run.result = decide(proposal, snapshot, run.sizing, run.verdict)
        except ServiceError as e:
            run.advance(AnalysisState.FAILED)
            run.error = e.message
            run.result = None
            logger.error(f"Analysis failed for {proposal.symbol}: {e}")
            details = {"state": run.state.value, "history": [s.value for s in run.history]}
            if isinstance(e, ExternalUnavailableError):
                e.details.update(details)
                raise
            raise ExternalUnavailableError(e.service_name, e.message, {**e.details, **details}) from e

        run.advance(AnalysisState.DONE)
        logger.info(
            f"Analysis complete for {proposal.symbol}: {run.result.recommendation.value} "
            f"(confidence {run.result.confidence_score:.0f}, source {run.result.source.value})"
        )
        return run

    async def health_check(self) -> bool:
        """Check health of all dependent services."""
        try:
            market_healthy = await self.market_provider.health_check()
            indicator_healthy = await self.indicator_service.health_check()
            risk_healthy = await self.risk_service.health_check()

            if not all([market_healthy, indicator_healthy, risk_healthy]):
                return False

            # Verdicts are optional - rules take over without them
            if not await self.verdict_provider.health_check():
                logger.warning("Verdict provider unavailable - will use rule-based decisions")

            return True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


# Singleton instance
_service_instance: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Get or create analysis service instance."""
    global _service_instance
    if _service_instance is None:
        from tradeguard.core.config import settings

        _service_instance = AnalysisService(history_lookback=settings.history_lookback)
    return _service_instance

"""
Analysis API Endpoints

Main endpoints for checking a trade proposal.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from tradeguard.core.config import settings
from tradeguard.db.database import (
    MAX_HISTORY_LIMIT,
    create_record,
    get_db,
    list_latest_records,
    record_to_schema,
)
from tradeguard.schemas.analysis import AnalysisRecord, AnalysisResult, AnalysisRun
from tradeguard.schemas.trade import SizingResult, TradeProposal
from tradeguard.services.market_data import normalize_market_state
from tradeguard.services.risk import RiskServiceInterface, get_risk_service
from tradeguard.services.strategy import (
    AnalysisRequest,
    AnalysisService,
    get_analysis_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class EvaluateRequest(BaseModel):
    """Request body for a one-off evaluation."""

    proposal: TradeProposal
    market_state: Optional[dict] = Field(
        default=None,
        description="Pre-computed market state (camelCase or snake_case); fetched when omitted",
    )
    use_verdict: bool = Field(default=True, description="Ask the AI verdict provider")


class RunRequest(BaseModel):
    """Request body for a full, persisted analysis run."""

    proposal: TradeProposal
    use_verdict: bool = Field(default=True)


class RunResponse(BaseModel):
    """A finished run and the record stored for it."""

    record: AnalysisRecord
    run: AnalysisRun


@router.post("/sizing", response_model=SizingResult)
async def calculate_sizing(
    proposal: TradeProposal,
    risk_service: RiskServiceInterface = Depends(get_risk_service),
):
    """
    Position size, margin, fees and warnings for a proposal.

    Never fails for a well-formed body: degenerate proposals come back
    zeroed with is_safe = false.
    """
    return await risk_service.execute(proposal)


@router.post("/evaluate", response_model=AnalysisResult)
async def evaluate_proposal(
    request: EvaluateRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    Decide EXECUTE / WAIT / CANCEL for a proposal.

    Uses the supplied market state when given, otherwise fetches prices
    and computes indicators. Nothing is persisted.
    """
    snapshot = None
    if request.market_state is not None:
        snapshot = normalize_market_state(request.market_state)

    run = await service.execute(
        AnalysisRequest(
            proposal=request.proposal,
            snapshot=snapshot,
            use_verdict=request.use_verdict,
        )
    )
    return run.result


@router.post("/run", response_model=RunResponse)
async def run_analysis(
    request: RunRequest,
    service: AnalysisService = Depends(get_analysis_service),
    db: AsyncSession = Depends(get_db),
):
    """
    Run the full pipeline and persist the result.

    This runs:
    1. Position sizing
    2. Fetch market data
    3. Calculate indicators
    4. Strategy rules (+ AI verdict when available)
    5. Store the AnalysisRecord
    """
    run = await service.execute(
        AnalysisRequest(proposal=request.proposal, use_verdict=request.use_verdict)
    )
    row = await create_record(db, run.proposal, run.snapshot, run.result)
    return RunResponse(record=record_to_schema(row), run=run)


@router.get("/records/latest", response_model=list[AnalysisRecord])
async def latest_records(
    limit: int = Query(default=settings.history_default_limit, ge=1, le=MAX_HISTORY_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    """Most recent analysis records, newest first."""
    rows = await list_latest_records(db, limit)
    return [record_to_schema(row) for row in rows]

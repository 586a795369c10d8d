"""
Strategy API Endpoints

Endpoints for the selectable strategies and pipeline health.
"""

from fastapi import APIRouter, Depends

from tradeguard.schemas.analysis import Strategy
from tradeguard.schemas.trade import TradeSide
from tradeguard.services.strategy import (
    AnalysisService,
    get_analysis_service,
    get_strategy_rules,
    list_strategies,
)

router = APIRouter()


@router.get("/list", response_model=list[Strategy])
async def strategy_list():
    """All built-in strategies."""
    return list_strategies()


@router.get("/{strategy_id}/rules")
async def strategy_rules(strategy_id: str):
    """
    Conditions of a strategy per side.

    Unknown ids resolve to the default strategy.
    """
    rules = get_strategy_rules(strategy_id)
    return {
        "strategy": rules.strategy,
        "min_conditions": rules.strategy.min_conditions,
        "rules": {
            side.value: [
                {"name": rule.name, "description": rule.description}
                for rule in rules.rules_for(side)
            ]
            for side in TradeSide
        },
    }


@router.get("/health")
async def strategy_health(service: AnalysisService = Depends(get_analysis_service)):
    """Check health of the analysis pipeline."""
    healthy = await service.health_check()
    return {"healthy": healthy}

"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from tradeguard.api.v1.endpoints import market, analysis, strategy, symbol

router = APIRouter()

# Include all endpoint routers
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(symbol.router, prefix="/symbol", tags=["Symbols"])
router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
router.include_router(strategy.router, prefix="/strategy", tags=["Strategy"])

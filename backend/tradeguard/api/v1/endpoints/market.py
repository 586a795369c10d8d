"""
Market Data API Endpoints

Endpoints for fetching the indicator snapshot of a symbol.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tradeguard.schemas.market import IndicatorSnapshot, Timeframe
from tradeguard.schemas.trade import default_timeframe
from tradeguard.services.indicators import IndicatorServiceInterface, get_indicator_service
from tradeguard.services.market_data import (
    MarketDataProviderInterface,
    get_market_data_provider,
    normalize_symbol,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/state", response_model=IndicatorSnapshot)
async def get_market_state(
    symbol: str = Query(..., description="e.g. BTC/USDT or btc"),
    timeframe: Optional[Timeframe] = Query(default=None, description="Defaults to DEFAULT_TIMEFRAME"),
    provider: MarketDataProviderInterface = Depends(get_market_data_provider),
    indicator_service: IndicatorServiceInterface = Depends(get_indicator_service),
):
    """
    Compute the indicator snapshot for a symbol.

    Returns current price, RSI, MA50/MA200, EMA12/EMA200, MACD with cross
    status and volatility. Responds 503 when market data is unavailable.
    """
    from tradeguard.core.config import settings

    symbol = normalize_symbol(symbol)
    timeframe = timeframe or default_timeframe()
    series = await provider.get_price_series(symbol, timeframe, settings.history_lookback)
    return await indicator_service.execute(series)

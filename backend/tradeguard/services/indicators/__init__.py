"""
Indicator Engine Service

CONTRACT:
    Input:  PriceSeries (close prices, oldest first)
    Output: IndicatorSnapshot

RESPONSIBILITIES:
    - SMA / EMA trend values
    - RSI momentum
    - MACD line, signal, histogram and crossover status
    - Volatility (population standard deviation)

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from tradeguard.services.indicators.interface import IndicatorServiceInterface
from tradeguard.services.indicators.calculations import (
    sma,
    ema,
    macd,
    rsi,
    volatility,
    compute_indicators,
)
from tradeguard.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "sma",
    "ema",
    "macd",
    "rsi",
    "volatility",
    "compute_indicators",
]

"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
NO LLM INVOLVEMENT - All math is deterministic.

Every function takes the full close-price history (oldest first) and
returns the value at the latest bar. Nothing is carried between calls:
callers recompute over the whole history each time.

Insufficient history never raises. It returns a documented sentinel:
    sma / ema   -> 0.0
    rsi         -> 50.0 (neutral)
    macd        -> zeros, cross NONE
    volatility  -> 0.0
"""

from typing import Sequence

import numpy as np

from tradeguard.schemas.market import CrossStatus, IndicatorSnapshot, MACDState

MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9
MACD_LOOKBACK = 50

RSI_PERIOD = 14
RSI_NEUTRAL = 50.0
VOLATILITY_PERIOD = 14


def _as_array(data: Sequence[float]) -> np.ndarray:
    return np.asarray(data, dtype=float)


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def _ema_series(data: np.ndarray, period: int) -> np.ndarray:
    """
    EMA at every bar, seeded at data[0].

    result[i] equals the EMA of data[: i + 1], so any prefix EMA can be read
    off this array without re-walking the series.
    """
    k = 2 / (period + 1)
    result = np.empty(len(data))
    result[0] = data[0]
    for i in range(1, len(data)):
        result[i] = data[i] * k + result[i - 1] * (1 - k)
    return result


def sma(data: Sequence[float], period: int) -> float:
    """Simple Moving Average of the last `period` values."""
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return 0.0
    return round(float(np.mean(values[-period:])), 2)


def ema(data: Sequence[float], period: int) -> float:
    """
    Exponential Moving Average, k = 2 / (period + 1).

    Seeded at the first value and walked across the whole series, so two
    series that differ only in an older prefix give different results.
    """
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return 0.0
    return round(float(_ema_series(values, period)[-1]), 2)


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def macd(data: Sequence[float], lookback: int = MACD_LOOKBACK) -> MACDState:
    """
    MACD (12, 26, 9).

    The signal line needs a history of MACD-line values, so the line is
    materialized at every bar of a trailing window (last `lookback` points):

        line[i] = EMA12(data[:i+1]) - EMA26(data[:i+1])

    where an EMA read at an index below its period falls back to the raw
    price at that index. signal = EMA9 over the window, seeded at its first
    value.

    The window EMAs and the signal stay at full precision; only the
    returned fields are rounded. line is therefore not exactly the
    difference of the 2 dp ema() values and can differ from a pipeline that
    rounds every EMA by about 0.01.

    cross_status compares the histogram of the previous bar with the
    latest one: UP when it goes from <= 0 to > 0, DOWN from >= 0 to < 0.
    """
    values = _as_array(data)
    n = len(values)
    if n < MACD_SLOW:
        return MACDState()

    fast = _ema_series(values, MACD_FAST)
    slow = _ema_series(values, MACD_SLOW)

    idx = np.arange(max(0, n - lookback), n)
    fast_at = np.where(idx < MACD_FAST, values[idx], fast[idx])
    slow_at = np.where(idx < MACD_SLOW, values[idx], slow[idx])
    macd_values = fast_at - slow_at

    signal_values = _ema_series(macd_values, MACD_SIGNAL)
    histogram_values = macd_values - signal_values

    histogram = round(float(histogram_values[-1]), 4)
    prev_histogram = round(float(histogram_values[-2]), 4)

    if prev_histogram <= 0 < histogram:
        cross = CrossStatus.UP
    elif prev_histogram >= 0 > histogram:
        cross = CrossStatus.DOWN
    else:
        cross = CrossStatus.NONE

    return MACDState(
        line=round(float(macd_values[-1]), 4),
        signal=round(float(signal_values[-1]), 4),
        histogram=histogram,
        cross_status=cross,
    )


def rsi(data: Sequence[float], period: int = RSI_PERIOD) -> float:
    """
    Relative Strength Index over the trailing `period` deltas.

    Average gain / average loss of the window only (no Wilder smoothing
    across older bars). 100 when there are no losses in the window.
    """
    _check_period(period)
    values = _as_array(data)
    if len(values) < period + 1:
        return RSI_NEUTRAL

    deltas = np.diff(values[-(period + 1):])
    avg_gain = float(deltas[deltas > 0].sum()) / period
    avg_loss = float(-deltas[deltas < 0].sum()) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return round(100 - (100 / (1 + rs)), 2)


# =============================================================================
# VOLATILITY
# =============================================================================


def volatility(data: Sequence[float], period: int = VOLATILITY_PERIOD) -> float:
    """Population standard deviation of the last `period` values."""
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return 0.0
    return round(float(np.std(values[-period:])), 2)


# =============================================================================
# SNAPSHOT
# =============================================================================


def compute_indicators(symbol: str, data: Sequence[float]) -> IndicatorSnapshot:
    """
    Build the full indicator snapshot for one symbol.

    Raises:
        ValueError: If the series is empty.
    """
    values = _as_array(data)
    if len(values) == 0:
        raise ValueError(f"Empty price series for {symbol}")

    return IndicatorSnapshot(
        symbol=symbol,
        current_price=float(values[-1]),
        rsi=rsi(values),
        ma50=sma(values, 50),
        ma200=sma(values, 200),
        ema12=ema(values, 12),
        ema200=ema(values, 200),
        macd=macd(values),
        volatility=volatility(values),
    )

"""
Boundary Normalization

Backends hand back market state and analysis payloads in either camelCase
or snake_case. Everything is mapped here, once, into the canonical shapes;
the decision core only ever sees IndicatorSnapshot.
"""

from typing import Any, Optional, Union

from tradeguard.schemas.market import CrossStatus, IndicatorSnapshot, MACDState
from tradeguard.services.base import ValidationError

DEFAULT_QUOTE = "USDT"

# canonical field -> accepted payload keys, in priority order
SNAPSHOT_FIELDS = {
    "current_price": ("currentPrice", "current_price"),
    "rsi": ("rsi",),
    "ma50": ("ma50", "ma_50"),
    "ma200": ("ma200", "ma_200"),
    "ema12": ("ema12", "ema_12"),
    "ema200": ("ema200", "ema_200"),
    "volatility": ("volatility",),
}

MACD_FIELDS = {
    "line": ("line",),
    "signal": ("signal",),
    "histogram": ("histogram",),
}


def normalize_symbol(symbol: str) -> str:
    """
    Trim and upper-case a symbol, adding the default quote when missing.

    "btc" -> "BTC/USDT", "eth-usdt" -> "ETH-USDT"
    """
    formatted = symbol.strip().upper()
    if not formatted:
        raise ValidationError("MarketData", "Symbol is empty")
    if "/" not in formatted and "-" not in formatted:
        formatted = f"{formatted}/{DEFAULT_QUOTE}"
    return formatted


def _first(payload: dict, keys: tuple[str, ...], default: Any = 0.0) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return default


def normalize_market_state(payload: Optional[dict]) -> IndicatorSnapshot:
    """
    Map a camelCase or snake_case market-state payload to IndicatorSnapshot.

    Missing numeric fields default to 0 and a missing cross status to NONE.

    Raises:
        ValidationError: If the payload is empty or not a mapping.
    """
    if not payload or not isinstance(payload, dict):
        raise ValidationError("MarketData", "Market data is empty")

    raw_macd = payload.get("macd") or {}
    cross = str(_first(raw_macd, ("crossStatus", "cross_status"), CrossStatus.NONE.value)).upper()
    try:
        cross_status = CrossStatus(cross)
    except ValueError:
        cross_status = CrossStatus.NONE

    # pydantic's ValidationError is a ValueError too
    try:
        fields = {name: float(_first(payload, keys)) for name, keys in SNAPSHOT_FIELDS.items()}
        macd_values = {name: float(_first(raw_macd, keys)) for name, keys in MACD_FIELDS.items()}
        return IndicatorSnapshot(
            symbol=payload.get("symbol") or "",
            macd=MACDState(**macd_values, cross_status=cross_status),
            **fields,
        )
    except (TypeError, ValueError) as e:
        raise ValidationError("MarketData", f"Malformed market data: {e}")


def format_adjustments(adjustments: Union[str, dict, None]) -> Optional[str]:
    """Render suggested adjustments given as a mapping into bullet lines."""
    if not adjustments:
        return None
    if isinstance(adjustments, str):
        return adjustments
    return "\n".join(f"• {key.upper()}: {value}" for key, value in adjustments.items())


def market_state_payload(snapshot: IndicatorSnapshot) -> dict:
    """Inverse of normalize_market_state: the camelCase form stored and served."""
    payload = {keys[0]: getattr(snapshot, name) for name, keys in SNAPSHOT_FIELDS.items()}
    payload["symbol"] = snapshot.symbol
    payload["macd"] = {
        "line": snapshot.macd.line,
        "signal": snapshot.macd.signal,
        "histogram": snapshot.macd.histogram,
        "crossStatus": snapshot.macd.cross_status.value,
    }
    return payload

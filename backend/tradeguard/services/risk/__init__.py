"""
Position & Risk Calculator

CONTRACT:
    Input:  TradeProposal
    Output: SizingResult

RESPONSIBILITIES:
    - Risk-based quantity from balance x risk% and stop distance
    - Notional, margin and margin-usage computation
    - Fee estimate
    - Margin-safety gate (blocking) and advisory warnings

PURE PYTHON - No LLM involvement.
All rules are deterministic and auditable.

CRITICAL: If is_safe is False, the trade cannot proceed.
"""

from tradeguard.services.risk.interface import RiskServiceInterface
from tradeguard.services.risk.sizing import compute_sizing
from tradeguard.services.risk.service import RiskService, get_risk_service

__all__ = [
    "RiskServiceInterface",
    "RiskService",
    "get_risk_service",
    "compute_sizing",
]

"""
Position Sizing Calculations

Risk-based sizing: quantity is derived backward from the amount the trader
is willing to lose, divided by the distance to the stop.

    risk_amount  = balance x (risk% / 100)
    quantity     = risk_amount / |entry - stop|
    notional     = quantity x entry
    margin       = notional / leverage
    margin_usage = margin / balance x 100

A tight stop with a fixed risk % can imply a margin larger than the whole
balance. Such proposals are flagged unsafe instead of being sized.

PURE PYTHON - never raises. Invalid proposals yield the zeroed result.
"""

from typing import Optional

from tradeguard.schemas.trade import SizingResult, TradeProposal, TradeSide

DEFAULT_FEE_RATE = 0.0007  # maker 0.02% + taker 0.05%
DEFAULT_MARGIN_WARNING_PERCENT = 30.0
DEFAULT_MAX_MARGIN_USAGE_PERCENT = 100.0
MARGIN_USAGE_DECIMALS = 6


def _degenerate_reason(proposal: TradeProposal) -> Optional[str]:
    if proposal.entry_price <= 0 or proposal.stop_loss <= 0:
        return "Entry and stop loss must be positive"
    if proposal.entry_price == proposal.stop_loss:
        return "Stop loss equals entry: risk distance is zero"
    if proposal.account_balance <= 0:
        return "Account balance must be positive"
    if proposal.leverage <= 0:
        return "Leverage must be positive"
    return None


def _advisory_warnings(
    proposal: TradeProposal,
    margin_usage_percent: float,
    risk_reward_ratio: float,
    margin_warning_percent: float,
) -> list[str]:
    warnings: list[str] = []
    entry = proposal.entry_price

    if margin_usage_percent > margin_warning_percent:
        warnings.append(
            f"High margin usage: {margin_usage_percent:.1f}% > {margin_warning_percent:.0f}% of balance"
        )

    if proposal.side == TradeSide.LONG:
        if proposal.stop_loss > entry:
            warnings.append("Stop loss is above entry for a LONG position")
        if 0 < proposal.take_profit <= entry:
            warnings.append("Take profit is not above entry for a LONG position")
    else:
        if proposal.stop_loss < entry:
            warnings.append("Stop loss is below entry for a SHORT position")
        if proposal.take_profit >= entry:
            warnings.append("Take profit is not below entry for a SHORT position")

    if 0 < risk_reward_ratio < 1:
        warnings.append(f"Risk-reward ratio below 1: {risk_reward_ratio:.2f}")

    return warnings


def compute_sizing(
    proposal: TradeProposal,
    fee_rate: float = DEFAULT_FEE_RATE,
    margin_warning_percent: float = DEFAULT_MARGIN_WARNING_PERCENT,
    max_margin_usage_percent: float = DEFAULT_MAX_MARGIN_USAGE_PERCENT,
) -> SizingResult:
    """
    Derive quantity, notional, margin and the safety verdict.

    The boundary is inclusive: margin usage of exactly 100% is safe, with
    usage compared at MARGIN_USAGE_DECIMALS places.

    Args:
        proposal: The trade to size.
        fee_rate: Round-trip fee as a fraction of notional.
        margin_warning_percent: Advisory threshold, never blocking.
        max_margin_usage_percent: Blocking threshold for is_safe.

    Returns:
        A full SizingResult, or a zeroed one with is_safe=False.
    """
    reason = _degenerate_reason(proposal)
    if reason is not None:
        return SizingResult(is_safe=False, warnings=[reason])

    balance = proposal.account_balance
    entry = proposal.entry_price

    estimated_risk_amount = balance * (proposal.risk_percentage / 100)
    price_distance = abs(entry - proposal.stop_loss)
    quantity = estimated_risk_amount / price_distance
    notional = quantity * entry
    margin = notional / proposal.leverage
    margin_usage_percent = (margin / balance) * 100
    estimated_fee = notional * fee_rate

    risk_reward_ratio = (
        abs(proposal.take_profit - entry) / price_distance
        if proposal.take_profit > 0
        else 0.0
    )

    return SizingResult(
        quantity=quantity,
        notional=notional,
        margin=margin,
        estimated_risk_amount=estimated_risk_amount,
        estimated_fee=estimated_fee,
        margin_usage_percent=margin_usage_percent,
        # |entry - stop| carries float noise at the 100% boundary
        is_safe=round(margin_usage_percent, MARGIN_USAGE_DECIMALS) <= max_margin_usage_percent,
        price_distance=price_distance,
        risk_reward_ratio=risk_reward_ratio,
        warnings=_advisory_warnings(
            proposal, margin_usage_percent, risk_reward_ratio, margin_warning_percent
        ),
    )

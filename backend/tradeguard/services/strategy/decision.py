"""
Decision Aggregator

Combines the indicator snapshot, the sizing result and an optional external
verdict into the final AnalysisResult.

Precedence (highest first):
    1. Unsafe sizing         -> CANCEL (risk gate)
    2. Strategy rules fail   -> WAIT   (rule gate)
    3. External verdict      -> taken as-is
    4. No verdict            -> EXECUTE synthesized from the rules

The rule evaluation always runs, whether or not a verdict is present.
"""

from typing import Optional

from tradeguard.schemas.analysis import (
    AnalysisResult,
    DecisionSource,
    Recommendation,
    StrategyEvaluation,
    Verdict,
)
from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import SizingResult, TradeProposal
from tradeguard.services.strategy.rules import evaluate_strategy


def _format_conditions(evaluation: StrategyEvaluation) -> str:
    lines = [
        f"{'[x]' if c.met else '[ ]'} {c.description}"
        for c in evaluation.conditions
    ]
    return "\n".join(lines)


def _risk_assessment(proposal: TradeProposal, sizing: SizingResult) -> str:
    parts = [
        f"Risk amount {sizing.estimated_risk_amount:.2f} "
        f"({proposal.risk_percentage:g}% of {proposal.account_balance:.2f}).",
        f"Quantity {sizing.quantity:.6g}, notional {sizing.notional:.2f}, "
        f"margin {sizing.margin:.2f} at {proposal.leverage:g}x "
        f"({sizing.margin_usage_percent:.1f}% of balance).",
        f"Estimated fee {sizing.estimated_fee:.2f}.",
    ]
    if sizing.risk_reward_ratio > 0:
        parts.append(f"Risk-reward 1:{sizing.risk_reward_ratio:.2f}.")
    for warning in sizing.warnings:
        parts.append(f"Warning: {warning}.")
    return " ".join(parts)


def _cancel(proposal: TradeProposal, sizing: SizingResult, evaluation: StrategyEvaluation) -> AnalysisResult:
    if sizing.is_degenerate:
        reasoning = (
            "Position cannot be sized: "
            + ("; ".join(sizing.warnings) or "invalid proposal")
            + ". Trade cancelled."
        )
        risk = "No valid risk distance: prices and balance must be positive and entry must differ from the stop loss."
        adjustments = "Use positive entry, stop loss and balance values, with the stop loss away from the entry."
    else:
        reasoning = (
            f"Excessive margin usage: the required margin {sizing.margin:.2f} is "
            f"{sizing.margin_usage_percent:.1f}% of the account balance "
            f"{proposal.account_balance:.2f}. The stop is too close to entry for "
            f"a {proposal.risk_percentage:g}% risk at {proposal.leverage:g}x leverage."
        )
        risk = _risk_assessment(proposal, sizing)
        adjustments = "Widen the stop loss, lower the risk percentage, or raise leverage so margin fits the balance."

    return AnalysisResult(
        recommendation=Recommendation.CANCEL,
        confidence_score=0,
        reasoning=reasoning,
        risk_assessment=risk,
        suggested_adjustments=adjustments,
        strategy_score=evaluation.score,
        rule_passed=evaluation.passed,
        source=DecisionSource.RULES,
    )


def _wait(
    proposal: TradeProposal,
    sizing: SizingResult,
    evaluation: StrategyEvaluation,
    verdict: Optional[Verdict],
) -> AnalysisResult:
    reasoning = (
        f"{evaluation.strategy_id} {proposal.side.value}: only "
        f"{evaluation.conditions_met} of {len(evaluation.conditions)} conditions met, "
        f"{evaluation.conditions_required} required.\n"
        f"{_format_conditions(evaluation)}"
    )
    if verdict is not None and verdict.recommendation == Recommendation.EXECUTE:
        reasoning += f"\nExternal verdict ({verdict.provider}) suggested EXECUTE; overridden by strategy rules."

    return AnalysisResult(
        recommendation=Recommendation.WAIT,
        confidence_score=evaluation.score,
        reasoning=reasoning,
        risk_assessment=_risk_assessment(proposal, sizing),
        suggested_adjustments="Wait for more strategy conditions to align before entering.",
        strategy_score=evaluation.score,
        rule_passed=False,
        source=DecisionSource.RULES,
    )


def _from_verdict(verdict: Verdict, evaluation: StrategyEvaluation) -> AnalysisResult:
    return AnalysisResult(
        recommendation=verdict.recommendation,
        confidence_score=verdict.confidence_score,
        reasoning=verdict.reasoning,
        risk_assessment=verdict.risk_assessment,
        suggested_adjustments=verdict.suggested_adjustments,
        strategy_score=evaluation.score,
        rule_passed=True,
        source=DecisionSource.AI,
    )


def _from_rules(
    proposal: TradeProposal,
    sizing: SizingResult,
    evaluation: StrategyEvaluation,
) -> AnalysisResult:
    reasoning = (
        f"{evaluation.strategy_id} {proposal.side.value}: "
        f"{evaluation.conditions_met} of {len(evaluation.conditions)} conditions met "
        f"({evaluation.conditions_required} required).\n"
        f"{_format_conditions(evaluation)}"
    )
    adjustments = "; ".join(sizing.warnings) if sizing.warnings else None

    return AnalysisResult(
        recommendation=Recommendation.EXECUTE,
        confidence_score=evaluation.score,
        reasoning=reasoning,
        risk_assessment=_risk_assessment(proposal, sizing),
        suggested_adjustments=adjustments,
        strategy_score=evaluation.score,
        rule_passed=True,
        source=DecisionSource.RULES,
    )


def decide(
    proposal: TradeProposal,
    snapshot: IndicatorSnapshot,
    sizing: SizingResult,
    verdict: Optional[Verdict] = None,
) -> AnalysisResult:
    """Produce the final recommendation for one analysis run."""
    evaluation = evaluate_strategy(proposal.strategy_id, proposal.side, snapshot)

    if not sizing.is_safe:
        return _cancel(proposal, sizing, evaluation)
    if not evaluation.passed:
        return _wait(proposal, sizing, evaluation, verdict)
    if verdict is not None:
        return _from_verdict(verdict, evaluation)
    return _from_rules(proposal, sizing, evaluation)

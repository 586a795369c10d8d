"""Tests for strategy rules and the decision aggregator."""

import pydantic
import pytest

from tradeguard.schemas.analysis import DecisionSource, Recommendation, Verdict
from tradeguard.schemas.market import CrossStatus
from tradeguard.schemas.trade import TradeSide
from tradeguard.services.risk import compute_sizing
from tradeguard.services.strategy import (
    decide,
    evaluate_strategy,
    get_strategy_rules,
    list_strategies,
)
from tests.factories import make_proposal, make_snapshot


# ── Helpers ──────────────────────────────────────────────────────────────


def _verdict(recommendation=Recommendation.EXECUTE, confidence=80.0):
    return Verdict(
        recommendation=recommendation,
        confidence_score=confidence,
        reasoning="Momentum is building.",
        risk_assessment="Stop is well placed.",
        provider="fake",
    )


def _long_setup():
    """All three composite LONG conditions hold."""
    return make_snapshot(cross=CrossStatus.UP, rsi=25.0, current_price=100.0, ema200=90.0)


def _weak_long_setup():
    """Only price > EMA200 holds."""
    return make_snapshot(cross=CrossStatus.NONE, rsi=50.0, current_price=100.0, ema200=90.0)


# ── Strategy lookup ──────────────────────────────────────────────────────


class TestStrategyLookup:
    def test_by_id(self):
        assert get_strategy_rules("MACD_RSI_COMPOSITE").strategy.id == "MACD_RSI_COMPOSITE"

    def test_id_is_case_and_separator_insensitive(self):
        assert get_strategy_rules("macd-rsi-composite").strategy.id == "MACD_RSI_COMPOSITE"

    def test_by_display_name(self):
        assert get_strategy_rules("MACD-RSI Composite").strategy.id == "MACD_RSI_COMPOSITE"

    def test_unknown_falls_back_to_trend_momentum(self):
        assert get_strategy_rules("GRID_BOT").strategy.id == "TREND_MOMENTUM"
        assert get_strategy_rules(None).strategy.id == "TREND_MOMENTUM"

    def test_list(self):
        ids = {s.id for s in list_strategies()}
        assert ids == {"MACD_RSI_COMPOSITE", "TREND_MOMENTUM"}
        assert all(s.min_conditions == 2 for s in list_strategies())


# ── Rule evaluation ──────────────────────────────────────────────────────


class TestEvaluateStrategy:
    def test_composite_long_all_met(self):
        ev = evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.LONG, _long_setup())
        assert ev.conditions_met == 3
        assert ev.conditions_required == 2
        assert ev.passed is True
        assert ev.score == 100

    def test_composite_long_one_of_three(self):
        ev = evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.LONG, _weak_long_setup())
        assert ev.conditions_met == 1
        assert ev.passed is False
        assert ev.score == 33

    def test_composite_short_has_four_conditions(self):
        snap = make_snapshot(cross=CrossStatus.DOWN, rsi=75.0, current_price=100.0, ema12=105.0, ema200=90.0)
        ev = evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.SHORT, snap)
        assert len(ev.conditions) == 4
        assert ev.conditions_met == 4
        assert ev.passed is True

    def test_composite_short_exactly_two_of_four_passes(self):
        # MACD cross down and RSI > 70 only; EMA12 and EMA200 sit at the price
        snap = make_snapshot(cross=CrossStatus.DOWN, rsi=75.0, current_price=100.0, ema12=100.0, ema200=100.0)
        ev = evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.SHORT, snap)
        assert ev.conditions_met == 2
        assert ev.passed is True
        assert ev.score == 50

    def test_composite_short_one_of_four_waits(self):
        snap = make_snapshot(cross=CrossStatus.DOWN, rsi=50.0, current_price=100.0, ema12=100.0, ema200=100.0)
        ev = evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.SHORT, snap)
        assert ev.conditions_met == 1
        assert ev.passed is False

        p = make_proposal(side=TradeSide.SHORT, entry_price=100.0, stop_loss=105.0, take_profit=90.0)
        result = decide(p, snap, compute_sizing(p))
        assert result.recommendation == Recommendation.WAIT

    def test_conditions_are_side_specific(self):
        snap = _long_setup()
        long_names = {c.name for c in evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.LONG, snap).conditions}
        short_names = {c.name for c in evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.SHORT, snap).conditions}
        assert long_names.isdisjoint(short_names)

    def test_trend_momentum_long(self):
        snap = make_snapshot(current_price=110.0, ma50=100.0, ma200=90.0, rsi=55.0)
        ev = evaluate_strategy("TREND_MOMENTUM", TradeSide.LONG, snap)
        assert ev.conditions_met == 3
        assert ev.passed is True

    def test_trend_momentum_short_two_of_three(self):
        snap = make_snapshot(current_price=90.0, ma50=100.0, ma200=110.0, rsi=20.0)
        ev = evaluate_strategy("TREND_MOMENTUM", TradeSide.SHORT, snap)
        assert ev.conditions_met == 2
        assert ev.passed is True

    def test_pure(self):
        snap = _long_setup()
        assert evaluate_strategy("MACD_RSI_COMPOSITE", TradeSide.LONG, snap) == evaluate_strategy(
            "MACD_RSI_COMPOSITE", TradeSide.LONG, snap
        )


# ── Decision precedence ──────────────────────────────────────────────────


class TestDecide:
    def test_rules_fail_forces_wait_over_execute_verdict(self):
        p = make_proposal(strategy_id="MACD_RSI_COMPOSITE")
        result = decide(p, _weak_long_setup(), compute_sizing(p), _verdict(Recommendation.EXECUTE))
        assert result.recommendation == Recommendation.WAIT
        assert result.rule_passed is False
        assert result.source == DecisionSource.RULES
        assert result.confidence_score == 33
        assert "overridden" in result.reasoning

    def test_rules_fail_without_verdict_is_wait(self):
        p = make_proposal()
        result = decide(p, _weak_long_setup(), compute_sizing(p))
        assert result.recommendation == Recommendation.WAIT
        assert "1 of 3 conditions met" in result.reasoning

    def test_unsafe_sizing_cancels_even_when_everything_else_agrees(self):
        p = make_proposal(entry_price=100.0, stop_loss=99.5, leverage=1.0)
        sizing = compute_sizing(p)
        assert sizing.is_safe is False
        result = decide(p, _long_setup(), sizing, _verdict(Recommendation.EXECUTE, 95.0))
        assert result.recommendation == Recommendation.CANCEL
        assert result.confidence_score == 0
        assert result.source == DecisionSource.RULES
        assert "Excessive margin usage" in result.reasoning

    def test_cancel_outranks_wait(self):
        p = make_proposal(entry_price=100.0, stop_loss=99.5, leverage=1.0)
        result = decide(p, _weak_long_setup(), compute_sizing(p))
        assert result.recommendation == Recommendation.CANCEL

    def test_degenerate_proposal_cancels(self):
        p = make_proposal(entry_price=100.0, stop_loss=100.0)
        result = decide(p, _long_setup(), compute_sizing(p))
        assert result.recommendation == Recommendation.CANCEL
        assert result.reasoning.startswith("Position cannot be sized")

    def test_verdict_taken_when_rules_pass(self):
        p = make_proposal()
        result = decide(p, _long_setup(), compute_sizing(p), _verdict(Recommendation.WAIT, 40.0))
        assert result.recommendation == Recommendation.WAIT
        assert result.confidence_score == 40.0
        assert result.source == DecisionSource.AI
        assert result.rule_passed is True
        assert result.strategy_score == 100

    def test_rules_execute_without_verdict(self):
        p = make_proposal()
        result = decide(p, _long_setup(), compute_sizing(p))
        assert result.recommendation == Recommendation.EXECUTE
        assert result.source == DecisionSource.RULES
        assert result.confidence_score == 100
        assert "[x]" in result.reasoning

    def test_rules_execute_carries_sizing_warnings(self):
        p = make_proposal(entry_price=100.0, stop_loss=95.0, take_profit=102.0)
        result = decide(p, _long_setup(), compute_sizing(p))
        assert result.recommendation == Recommendation.EXECUTE
        assert "Risk-reward ratio below 1" in result.suggested_adjustments

    def test_risk_assessment_mentions_margin(self):
        p = make_proposal()
        result = decide(p, _long_setup(), compute_sizing(p))
        assert "margin" in result.risk_assessment

    def test_result_is_frozen(self):
        p = make_proposal()
        result = decide(p, _long_setup(), compute_sizing(p))
        with pytest.raises(pydantic.ValidationError):
            result.recommendation = Recommendation.CANCEL

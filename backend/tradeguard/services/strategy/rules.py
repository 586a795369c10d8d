"""
Strategy Rules

Each strategy is a set of side-specific boolean conditions over an
IndicatorSnapshot plus the number of them that must hold.

MACD_RSI_COMPOSITE
    LONG  (2 of 3): MACD crossed up, RSI < 30, price > EMA200
    SHORT (2 of 4): MACD crossed down, RSI > 70, EMA12 > price, EMA200 < price

TREND_MOMENTUM (also used for unknown strategy ids)
    LONG  (2 of 3): price > MA50, MA50 > MA200, RSI < 70
    SHORT (2 of 3): price < MA50, MA50 < MA200, RSI > 30
"""

from dataclasses import dataclass
from typing import Callable, Optional

from tradeguard.schemas.analysis import (
    Strategy,
    StrategyCondition,
    StrategyEvaluation,
    StrategyType,
)
from tradeguard.schemas.market import CrossStatus, IndicatorSnapshot
from tradeguard.schemas.trade import TradeSide

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0


@dataclass(frozen=True)
class Rule:
    """A named predicate over a snapshot."""

    name: str
    description: str
    check: Callable[[IndicatorSnapshot], bool]

    def evaluate(self, snapshot: IndicatorSnapshot) -> StrategyCondition:
        return StrategyCondition(
            name=self.name,
            description=self.description,
            met=bool(self.check(snapshot)),
        )


@dataclass(frozen=True)
class StrategyRules:
    """A strategy definition together with its rule sets."""

    strategy: Strategy
    long_rules: tuple[Rule, ...]
    short_rules: tuple[Rule, ...]

    def rules_for(self, side: TradeSide) -> tuple[Rule, ...]:
        return self.long_rules if side == TradeSide.LONG else self.short_rules


# =============================================================================
# MACD-RSI COMPOSITE
# =============================================================================

MACD_RSI_COMPOSITE = StrategyRules(
    strategy=Strategy(
        id="MACD_RSI_COMPOSITE",
        name="MACD-RSI Composite",
        description="MACD crossover, RSI extremes and EMA200 trend context; at least 2 conditions must hold",
        strategy_type=StrategyType.BUILTIN,
        min_conditions=2,
    ),
    long_rules=(
        Rule(
            "macd_cross_up",
            "MACD line crossed above signal line",
            lambda s: s.macd.cross_status == CrossStatus.UP,
        ),
        Rule(
            "rsi_oversold",
            f"RSI(14) < {RSI_OVERSOLD:.0f} (oversold)",
            lambda s: s.rsi < RSI_OVERSOLD,
        ),
        Rule(
            "price_above_ema200",
            "Price > EMA200 (long-term uptrend)",
            lambda s: s.current_price > s.ema200,
        ),
    ),
    short_rules=(
        Rule(
            "macd_cross_down",
            "MACD line crossed below signal line",
            lambda s: s.macd.cross_status == CrossStatus.DOWN,
        ),
        Rule(
            "rsi_overbought",
            f"RSI(14) > {RSI_OVERBOUGHT:.0f} (overbought)",
            lambda s: s.rsi > RSI_OVERBOUGHT,
        ),
        Rule(
            "ema12_above_price",
            "EMA12 > price (short-term weakness)",
            lambda s: s.ema12 > s.current_price,
        ),
        Rule(
            "ema200_below_price",
            "EMA200 < price (reversal in uptrend context)",
            lambda s: s.ema200 < s.current_price,
        ),
    ),
)


# =============================================================================
# TREND-MOMENTUM (general validation)
# =============================================================================

TREND_MOMENTUM = StrategyRules(
    strategy=Strategy(
        id="TREND_MOMENTUM",
        name="Trend & Momentum",
        description="Trend alignment via MA50/MA200 and momentum via RSI; at least 2 conditions must hold",
        strategy_type=StrategyType.BUILTIN,
        min_conditions=2,
    ),
    long_rules=(
        Rule("price_above_ma50", "Price > MA50", lambda s: s.current_price > s.ma50),
        Rule("ma50_above_ma200", "MA50 > MA200 (uptrend)", lambda s: s.ma50 > s.ma200),
        Rule(
            "rsi_not_overbought",
            f"RSI(14) < {RSI_OVERBOUGHT:.0f}",
            lambda s: s.rsi < RSI_OVERBOUGHT,
        ),
    ),
    short_rules=(
        Rule("price_below_ma50", "Price < MA50", lambda s: s.current_price < s.ma50),
        Rule("ma50_below_ma200", "MA50 < MA200 (downtrend)", lambda s: s.ma50 < s.ma200),
        Rule(
            "rsi_not_oversold",
            f"RSI(14) > {RSI_OVERSOLD:.0f}",
            lambda s: s.rsi > RSI_OVERSOLD,
        ),
    ),
)


STRATEGY_REGISTRY: dict[str, StrategyRules] = {
    MACD_RSI_COMPOSITE.strategy.id: MACD_RSI_COMPOSITE,
    TREND_MOMENTUM.strategy.id: TREND_MOMENTUM,
}

DEFAULT_STRATEGY = TREND_MOMENTUM


def _normalize_id(strategy_id: str) -> str:
    return strategy_id.strip().upper().replace("-", "_").replace(" ", "_")


def get_strategy_rules(strategy_id: Optional[str]) -> StrategyRules:
    """
    Look up a strategy by id or display name.

    Unknown ids fall back to the general trend/momentum rules.
    """
    if not strategy_id:
        return DEFAULT_STRATEGY
    key = _normalize_id(strategy_id)
    if key in STRATEGY_REGISTRY:
        return STRATEGY_REGISTRY[key]
    for rules in STRATEGY_REGISTRY.values():
        if _normalize_id(rules.strategy.name) == key:
            return rules
    return DEFAULT_STRATEGY


def list_strategies() -> list[Strategy]:
    """All registered strategies."""
    return [rules.strategy for rules in STRATEGY_REGISTRY.values()]


def evaluate_strategy(
    strategy_id: Optional[str],
    side: TradeSide,
    snapshot: IndicatorSnapshot,
) -> StrategyEvaluation:
    """Count the side-specific conditions that hold for the snapshot."""
    rules = get_strategy_rules(strategy_id)
    conditions = [rule.evaluate(snapshot) for rule in rules.rules_for(side)]
    met = sum(1 for c in conditions if c.met)
    required = rules.strategy.min_conditions

    return StrategyEvaluation(
        strategy_id=rules.strategy.id,
        side=side,
        conditions=conditions,
        conditions_met=met,
        conditions_required=required,
        passed=met >= required,
    )

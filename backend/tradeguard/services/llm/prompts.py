"""
LLM Prompt Templates

Structured prompts for the trade verdict.

CRITICAL RULES (enforced in all prompts):
- LLM does NO math - all numbers come from the indicator and sizing engines
- Strategy rules are stated explicitly and must be counted
- Capital protection comes before opportunity
"""

from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import SizingResult, TradeProposal
from tradeguard.services.strategy.rules import get_strategy_rules

# =============================================================================
# VERDICT PROMPTS
# =============================================================================

VERDICT_SYSTEM_PROMPT = """You are a senior quantitative risk manager and crypto trader.
Your goal is to enforce strict discipline and protect capital.

CRITICAL RULES:
1. NEVER do math - every number you need is provided. Do not recalculate anything.
2. Validate the trade strictly against the STRATEGY RULES provided.
3. If fewer conditions than required are met, recommend WAIT.
4. If the position sizing is unsafe for the stop distance, recommend CANCEL.
5. Keep reasoning concise and specific to the data given.

OUTPUT FORMAT:
Respond with a single JSON object and nothing else:
{
  "recommendation": "EXECUTE" | "WAIT" | "CANCEL",
  "confidenceScore": number between 0 and 100,
  "reasoning": string,
  "riskAssessment": string,
  "suggestedAdjustments": string (optional)
}"""

VERDICT_USER_PROMPT_TEMPLATE = """Current market data for {symbol} ({timeframe}):
- Price: {current_price}
- RSI (14): {rsi}
- MA50: {ma50}
- MA200: {ma200}
- EMA12: {ema12}
- EMA200: {ema200}
- MACD Line: {macd_line}
- MACD Signal: {macd_signal}
- MACD Histogram: {macd_histogram}
- MACD Cross: {macd_cross}
- Volatility (14-bar std dev): {volatility}

User proposed trade:
- Side: {side}
- Strategy: {strategy_name}
- Entry: {entry_price}
- Stop Loss: {stop_loss}
- Take Profit: {take_profit}
- Leverage: {leverage}x
- Account Balance: {account_balance}
- Risked Capital: {risk_percentage}%

Position sizing (already computed):
- Quantity: {quantity}
- Notional: {notional}
- Margin: {margin} ({margin_usage_percent}% of balance)
- Risk Amount: {risk_amount}
- Estimated Fee: {estimated_fee}
- Risk-Reward: 1:{risk_reward}

{strategy_rules}

Tasks:
1. Count how many strategy conditions are met for the {side} side.
2. Judge whether leverage and stop distance are reasonable.
3. Give a strictly disciplined recommendation."""


def format_strategy_rules(strategy_id: str, side: str) -> str:
    """Render the strategy's rules for both sides, highlighting the requested one."""
    rules = get_strategy_rules(strategy_id)
    required = rules.strategy.min_conditions

    lines = [f"STRATEGY RULES ({rules.strategy.name}):"]
    for label, side_rules in (("LONG", rules.long_rules), ("SHORT", rules.short_rules)):
        lines.append(f"FOR {label} (must satisfy at least {required} of {len(side_rules)}):")
        lines.extend(f"{i}. {rule.description}" for i, rule in enumerate(side_rules, 1))
    lines.append(f"Requested side: {side}. If fewer than {required} conditions are met, recommend WAIT.")
    return "\n".join(lines)


def format_verdict_prompt(
    proposal: TradeProposal,
    snapshot: IndicatorSnapshot,
    sizing: SizingResult,
) -> str:
    """Format the user prompt for a trade verdict."""
    rules = get_strategy_rules(proposal.strategy_id)
    return VERDICT_USER_PROMPT_TEMPLATE.format(
        symbol=proposal.symbol,
        timeframe=proposal.timeframe.value,
        current_price=snapshot.current_price,
        rsi=snapshot.rsi,
        ma50=snapshot.ma50,
        ma200=snapshot.ma200,
        ema12=snapshot.ema12,
        ema200=snapshot.ema200,
        macd_line=snapshot.macd.line,
        macd_signal=snapshot.macd.signal,
        macd_histogram=snapshot.macd.histogram,
        macd_cross=snapshot.macd.cross_status.value,
        volatility=snapshot.volatility,
        side=proposal.side.value,
        strategy_name=rules.strategy.name,
        entry_price=proposal.entry_price,
        stop_loss=proposal.stop_loss,
        take_profit=proposal.take_profit,
        leverage=f"{proposal.leverage:g}",
        account_balance=proposal.account_balance,
        risk_percentage=f"{proposal.risk_percentage:g}",
        quantity=f"{sizing.quantity:.6g}",
        notional=f"{sizing.notional:.2f}",
        margin=f"{sizing.margin:.2f}",
        margin_usage_percent=f"{sizing.margin_usage_percent:.1f}",
        risk_amount=f"{sizing.estimated_risk_amount:.2f}",
        estimated_fee=f"{sizing.estimated_fee:.2f}",
        risk_reward=f"{sizing.risk_reward_ratio:.2f}",
        strategy_rules=format_strategy_rules(proposal.strategy_id, proposal.side.value),
    )

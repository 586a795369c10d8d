"""
LLM Verdict Service

CONTRACT:
    Input:  TradeProposal + IndicatorSnapshot
    Output: Verdict, or None when unavailable

RESPONSIBILITIES:
    - Prompt the configured LLM with market data, sizing and strategy rules
    - Parse and clamp the returned JSON verdict
    - Switch between Gemini, Anthropic and OpenAI with fallback

CRITICAL RULES:
    - LLM does NO math - all numbers come from the core engines
    - The verdict is advisory; risk and strategy gates override it

FALLBACK BEHAVIOR:
    - If no LLM is configured or the call fails, the verdict is None and
      the decision is synthesized from the strategy rules
"""

from tradeguard.services.llm.interface import VerdictProviderInterface, VerdictInput
from tradeguard.services.llm.client import (
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    get_llm_client,
)
from tradeguard.services.llm.verdict import (
    LLMVerdictProvider,
    NullVerdictProvider,
    parse_verdict,
    get_verdict_provider,
)

__all__ = [
    # Interfaces
    "VerdictProviderInterface",
    "VerdictInput",
    # Client
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "get_llm_client",
    # Providers
    "LLMVerdictProvider",
    "NullVerdictProvider",
    "parse_verdict",
    "get_verdict_provider",
]

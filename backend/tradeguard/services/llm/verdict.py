"""
Verdict Provider Implementations

LLMVerdictProvider asks the configured LLM for an EXECUTE/WAIT/CANCEL
opinion. NullVerdictProvider is always unavailable (rules-only mode).

Any provider failure is logged and reported as "unavailable" (None);
the decision then falls back to the rule-based path.
"""

import json
import logging
from typing import Optional

from tradeguard.schemas.analysis import Recommendation, Verdict
from tradeguard.services.llm.client import LLMClient, get_llm_client
from tradeguard.services.llm.interface import VerdictInput, VerdictProviderInterface
from tradeguard.services.llm.prompts import VERDICT_SYSTEM_PROMPT, format_verdict_prompt
from tradeguard.services.market_data.normalize import format_adjustments

logger = logging.getLogger(__name__)


def _extract_json(content: str) -> dict:
    """Parse a JSON object, tolerating a surrounding markdown code block."""
    content = content.strip()
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1])
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("LLM response is not a JSON object")
    return data


def parse_verdict(content: str, provider: str) -> Verdict:
    """
    Build a Verdict from raw LLM output.

    Accepts camelCase or snake_case keys. Confidence is clamped to [0, 100].

    Raises:
        ValueError: On invalid JSON or an unknown recommendation.
    """
    data = _extract_json(content)

    recommendation = Recommendation(str(data.get("recommendation", "")).upper())
    confidence = data.get("confidenceScore", data.get("confidence_score", 0))
    confidence = max(0.0, min(100.0, float(confidence or 0)))

    return Verdict(
        recommendation=recommendation,
        confidence_score=confidence,
        reasoning=data.get("reasoning") or data.get("reasoning_text") or "No reasoning provided.",
        risk_assessment=(
            data.get("riskAssessment") or data.get("risk_assessment") or "No risk assessment provided."
        ),
        suggested_adjustments=format_adjustments(
            data.get("suggestedAdjustments") or data.get("suggested_adjustments")
        ),
        provider=provider,
    )


class LLMVerdictProvider(VerdictProviderInterface):
    """Verdict provider backed by the unified LLM client."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def name(self) -> str:
        return "LLMVerdictProvider"

    async def execute(self, input_data: VerdictInput) -> Optional[Verdict]:
        """Ask the LLM for a verdict; None if it is unavailable or unparseable."""
        if not self.llm_client.is_configured:
            return None

        user_prompt = format_verdict_prompt(
            input_data.proposal,
            input_data.snapshot,
            input_data.sizing,
        )

        try:
            response = await self.llm_client.generate(
                system_prompt=VERDICT_SYSTEM_PROMPT,
                user_prompt=user_prompt,
                json_output=True,
            )
        except Exception as e:
            logger.warning(f"LLM verdict failed: {e}, falling back to rules")
            return None

        try:
            return parse_verdict(response.content, response.provider.value)
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to parse LLM verdict: {e}")
            logger.error(f"Response content: {response.content[:500]}")
            return None

    async def health_check(self) -> bool:
        """Check LLM API connectivity."""
        try:
            return await self.llm_client.health_check()
        except Exception:
            return False


class NullVerdictProvider(VerdictProviderInterface):
    """Always unavailable. Used when LLM verdicts are disabled."""

    @property
    def name(self) -> str:
        return "NullVerdictProvider"

    async def execute(self, input_data: VerdictInput) -> Optional[Verdict]:
        return None

    async def health_check(self) -> bool:
        return True


# Singleton instance
_provider_instance: Optional[VerdictProviderInterface] = None


def get_verdict_provider() -> VerdictProviderInterface:
    """Get or create the configured verdict provider."""
    global _provider_instance
    if _provider_instance is None:
        from tradeguard.core.config import settings

        if settings.llm_enabled:
            _provider_instance = LLMVerdictProvider()
        else:
            _provider_instance = NullVerdictProvider()
    return _provider_instance

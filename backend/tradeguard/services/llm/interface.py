"""
Verdict Provider Interface

Defines the contract for external (AI) trade verdicts.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from tradeguard.services.base import BaseService
from tradeguard.schemas.analysis import Verdict
from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import SizingResult, TradeProposal


@dataclass
class VerdictInput:
    """Input for a verdict request."""

    proposal: TradeProposal
    snapshot: IndicatorSnapshot
    sizing: SizingResult


class VerdictProviderInterface(BaseService[VerdictInput, Optional[Verdict]]):
    """
    Verdict Provider Contract.

    INPUT: VerdictInput
        - proposal: The user's trade
        - snapshot: Indicator snapshot for the symbol
        - sizing: The run's own sizing result, shown to the provider as-is

    OUTPUT: Verdict, or None when the provider is unavailable

    RULES:
        - Never raises for provider failures; returns None instead
        - The verdict is advisory: rule and risk gates override it
    """

    @property
    def name(self) -> str:
        return "VerdictProvider"

    @abstractmethod
    async def execute(self, input_data: VerdictInput) -> Optional[Verdict]:
        """Ask the provider for a verdict."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check provider connectivity."""
        pass

    async def get_verdict(
        self,
        proposal: TradeProposal,
        snapshot: IndicatorSnapshot,
        sizing: SizingResult,
    ) -> Optional[Verdict]:
        """Convenience wrapper around execute()."""
        return await self.execute(VerdictInput(proposal=proposal, snapshot=snapshot, sizing=sizing))

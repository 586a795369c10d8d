"""
Position & Risk Service Interface

Defines the contract for the sizing and margin-safety layer.
"""

from abc import abstractmethod

from tradeguard.services.base import BaseService
from tradeguard.schemas.trade import TradeProposal, SizingResult


class RiskServiceInterface(BaseService[TradeProposal, SizingResult]):
    """
    Position & Risk Service Contract.

    INPUT: TradeProposal
        - entry_price, stop_loss, take_profit
        - account_balance, risk_percentage, leverage

    OUTPUT: SizingResult
        - quantity, notional, margin, margin_usage_percent
        - estimated_risk_amount, estimated_fee
        - is_safe: False when margin exceeds the balance or the
          proposal cannot be sized
        - warnings: advisory only

    Never raises for a proposal. Invalidity is reported via is_safe.
    """

    @property
    def name(self) -> str:
        return "RiskService"

    @abstractmethod
    async def execute(self, input_data: TradeProposal) -> SizingResult:
        """Size the proposal and gate it on margin usage."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Risk service is always healthy (pure computation)."""
        pass

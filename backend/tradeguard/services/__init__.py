"""
TradeGuard Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from tradeguard.services.base import (
    BaseService,
    ServiceError,
    ValidationError,
    ExternalUnavailableError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "ValidationError",
    "ExternalUnavailableError",
]

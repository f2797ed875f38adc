"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and the clock abstraction.
"""

from app.config import settings
from app.exceptions import (
    ServiceValidationError,
    NotFoundError,
    ForbiddenError,
    ConflictError,
    CancellationWindowExpired,
    OrderAlreadyFinalized,
    QuotaExhaustedError,
)

__all__ = [
    "settings",
    "ServiceValidationError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "CancellationWindowExpired",
    "OrderAlreadyFinalized",
    "QuotaExhaustedError",
]

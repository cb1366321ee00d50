"""Domain Entities - Core gateway objects."""

from .environment import Environment
from .token import AccessToken, EXPIRY_MARGIN_SECONDS
from .callback import AsyncResult, C2BConfirmation, StkCallbackResult

__all__ = [
    "Environment",
    "AccessToken",
    "EXPIRY_MARGIN_SECONDS",
    "AsyncResult",
    "C2BConfirmation",
    "StkCallbackResult",
]

"""External API client implementations."""

from .token_cache import HttpTokenCache
from .dispatcher import (
    AttemptOutcome,
    HttpDispatcher,
    backoff_delay,
    classify_status,
)

__all__ = [
    "HttpTokenCache",
    "HttpDispatcher",
    "AttemptOutcome",
    "backoff_delay",
    "classify_status",
]

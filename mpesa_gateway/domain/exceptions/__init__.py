"""Domain Exceptions - Typed errors raised by the gateway client."""

from .base import ErrorKind, MpesaError
from .validation import ValidationError
from .gateway import ApiError, ApiTimeoutError, AuthError

__all__ = [
    "ErrorKind",
    "MpesaError",
    "ValidationError",
    "AuthError",
    "ApiError",
    "ApiTimeoutError",
]

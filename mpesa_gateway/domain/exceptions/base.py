"""Base domain exception."""

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminant for the closed set of gateway client errors."""

    VALIDATION = "validation"
    AUTH = "auth"
    API = "api"


class MpesaError(Exception):
    """
    Base exception for all M-Pesa client errors.

    Callers branch on ``kind`` rather than on the concrete class:
    validation errors mean "fix my input", auth errors mean the
    gateway rejected the credentials, api errors mean the gateway
    rejected, failed, or timed out a signed request.
    """

    kind: ErrorKind = ErrorKind.API

    def __init__(self, message: str, code: str = "MPESA_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

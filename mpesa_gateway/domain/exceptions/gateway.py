"""Gateway-related domain exceptions."""

from typing import Any

from .base import ErrorKind, MpesaError


class AuthError(MpesaError):
    """Raised when the credential exchange is rejected."""

    kind = ErrorKind.AUTH

    def __init__(self, message: str, status_code: int | None = None, raw_body: str = ""):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
        )
        self.status_code = status_code
        self.raw_body = raw_body


class ApiError(MpesaError):
    """Raised when the gateway rejects or fails a signed request."""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        raw_body: str = "",
        error_code: str | None = None,
        response: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="API_ERROR",
        )
        self.status_code = status_code
        self.raw_body = raw_body
        self.error_code = error_code
        self.response = response or {}

    @property
    def retryable(self) -> bool:
        """Server-side failures may succeed on a later attempt."""
        return self.status_code is not None and self.status_code >= 500


class ApiTimeoutError(ApiError):
    """Raised when a gateway request exceeds the configured timeout."""

    def __init__(self, timeout_ms: int):
        super().__init__(
            message=f"Request timed out after {timeout_ms}ms",
            status_code=None,
        )
        self.code = "API_TIMEOUT"
        self.timeout_ms = timeout_ms

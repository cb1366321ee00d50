"""Input and configuration validation exceptions."""

from .base import ErrorKind, MpesaError


class ValidationError(MpesaError):
    """Raised for bad input that must never reach the gateway."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
        )
        self.field = field

"""Pydantic schemas for API request/response validation."""

from .payment import (
    StkPushRequestSchema,
    StkPushResponseSchema,
    StkQueryResponseSchema,
)
from .callback import AcknowledgementSchema
from .error import ErrorResponseSchema

__all__ = [
    "StkPushRequestSchema",
    "StkPushResponseSchema",
    "StkQueryResponseSchema",
    "AcknowledgementSchema",
    "ErrorResponseSchema",
]

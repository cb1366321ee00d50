"""Pydantic schema for API error responses."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["VALIDATION_ERROR"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=['Invalid phone number "0712": expected 12 digits after formatting, got 7 (2547120)'],
    )
    field: Optional[str] = Field(
        None,
        description="Offending input field, for validation errors",
    )
    gateway_error_code: Optional[str] = Field(
        None,
        description="Error code reported by the gateway, if any",
    )
    request_id: Optional[str] = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "API_ERROR",
                    "message": "Bad Request - Invalid PhoneNumber",
                    "field": None,
                    "gateway_error_code": "400.002.02",
                    "request_id": "abc123",
                }
            ]
        }
    }

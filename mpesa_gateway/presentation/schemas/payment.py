"""Payment-related Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StkPushRequestSchema(BaseModel):
    """Schema for POST /v1/payments/stk-push request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "phone_number": "0712345678",
                    "amount": 100,
                    "account_reference": "Order123",
                    "transaction_desc": "Payment for order",
                }
            ]
        }
    )

    phone_number: str = Field(
        ...,
        min_length=1,
        description="Customer phone number in any Kenyan format",
        examples=["0712345678"],
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Amount to charge in KES (rounded to whole shillings)",
        examples=[100],
    )
    account_reference: str = Field(
        ...,
        min_length=1,
        description="Reference shown on the customer's phone (first 12 characters)",
        examples=["Order123"],
    )
    transaction_desc: str = Field(
        ...,
        min_length=1,
        description="Transaction description (first 13 characters)",
        examples=["Payment"],
    )
    callback_url: Optional[str] = Field(
        None,
        description="Override for the configured callback URL",
    )

    @field_validator("account_reference", "transaction_desc")
    @classmethod
    def strip_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty or whitespace")
        return v.strip()


class StkPushResponseSchema(BaseModel):
    """Schema for POST /v1/payments/stk-push response body."""

    merchant_request_id: str = Field(..., description="Gateway merchant request ID")
    checkout_request_id: str = Field(
        ...,
        description="ID used to correlate the callback and status queries",
        examples=["ws_CO_25022026120000123456"],
    )
    response_code: str = Field(..., description="'0' when the prompt was accepted")
    response_description: str = Field(..., description="Gateway response description")
    customer_message: str = Field(..., description="Message suitable for the customer")


class StkQueryResponseSchema(BaseModel):
    """Schema for GET /v1/payments/stk-push/{checkout_request_id} response."""

    checkout_request_id: str = Field(..., description="Queried checkout request")
    merchant_request_id: str = Field(..., description="Gateway merchant request ID")
    result_code: str = Field(..., description="'0' means the payment succeeded")
    result_desc: str = Field(..., description="Human-readable result")

"""Payment API endpoints backed by the gateway client."""

from typing import Annotated, Any, Mapping

from fastapi import APIRouter, Depends, Path

from mpesa_gateway.application.dto import StkPushRequest, StkQueryRequest
from mpesa_gateway.application.services import MpesaClient
from mpesa_gateway.core.dependencies import get_mpesa_client
from mpesa_gateway.domain.exceptions import ApiError
from mpesa_gateway.presentation.schemas import (
    ErrorResponseSchema,
    StkPushRequestSchema,
    StkPushResponseSchema,
    StkQueryResponseSchema,
)

payments_router = APIRouter(
    prefix="/payments",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        502: {"model": ErrorResponseSchema, "description": "Gateway rejected the request"},
        504: {"model": ErrorResponseSchema, "description": "Gateway timed out"},
    },
)


def _field(response: Mapping[str, Any], key: str) -> str:
    """Read a field the gateway always returns on success."""
    if key not in response:
        raise ApiError(f"Gateway response is missing {key}", response=dict(response))
    return str(response[key])


@payments_router.post(
    "/stk-push",
    response_model=StkPushResponseSchema,
    status_code=200,
    summary="Initiate STK Push",
    description="""Send a payment prompt to the customer's phone.
    The outcome arrives later on the STK callback route.""",
)
async def initiate_stk_push(
    request: StkPushRequestSchema,
    client: Annotated[MpesaClient, Depends(get_mpesa_client)],
) -> StkPushResponseSchema:
    dto = StkPushRequest(
        phone_number=request.phone_number,
        amount=request.amount,
        account_reference=request.account_reference,
        transaction_desc=request.transaction_desc,
        callback_url=request.callback_url,
    )

    response = await client.stk_push(dto)

    return StkPushResponseSchema(
        merchant_request_id=_field(response, "MerchantRequestID"),
        checkout_request_id=_field(response, "CheckoutRequestID"),
        response_code=_field(response, "ResponseCode"),
        response_description=_field(response, "ResponseDescription"),
        customer_message=_field(response, "CustomerMessage"),
    )


@payments_router.get(
    "/stk-push/{checkout_request_id}",
    response_model=StkQueryResponseSchema,
    summary="Query STK Push Status",
    description="Poll the gateway for the outcome of an earlier STK push.",
)
async def query_stk_push(
    checkout_request_id: Annotated[str, Path(min_length=1)],
    client: Annotated[MpesaClient, Depends(get_mpesa_client)],
) -> StkQueryResponseSchema:
    response = await client.stk_query(StkQueryRequest(checkout_request_id=checkout_request_id))

    return StkQueryResponseSchema(
        checkout_request_id=_field(response, "CheckoutRequestID"),
        merchant_request_id=_field(response, "MerchantRequestID"),
        result_code=_field(response, "ResultCode"),
        result_desc=_field(response, "ResultDesc"),
    )

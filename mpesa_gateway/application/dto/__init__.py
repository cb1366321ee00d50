"""Data Transfer Objects for application layer."""

from .requests import (
    AccountBalanceRequest,
    B2BRequest,
    B2CRequest,
    C2BRegisterRequest,
    C2BSimulateRequest,
    DynamicQRRequest,
    FieldError,
    InitiatorOptions,
    ReversalRequest,
    StkPushRequest,
    StkQueryRequest,
    TaxRemittanceRequest,
    TransactionStatusRequest,
    whole_shillings,
)
from .responses import (
    AcceptedResponse,
    C2BRegisterResponse,
    C2BSimulateResponse,
    DynamicQRResponse,
    StkPushResponse,
    StkQueryResponse,
)

__all__ = [
    "AccountBalanceRequest",
    "B2BRequest",
    "B2CRequest",
    "C2BRegisterRequest",
    "C2BSimulateRequest",
    "DynamicQRRequest",
    "FieldError",
    "InitiatorOptions",
    "ReversalRequest",
    "StkPushRequest",
    "StkQueryRequest",
    "TaxRemittanceRequest",
    "TransactionStatusRequest",
    "whole_shillings",
    "AcceptedResponse",
    "C2BRegisterResponse",
    "C2BSimulateResponse",
    "DynamicQRResponse",
    "StkPushResponse",
    "StkQueryResponse",
]

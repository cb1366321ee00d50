"""Gateway response shapes. Field names are fixed by the Daraja API."""

from typing import TypedDict


class StkPushResponse(TypedDict):
    MerchantRequestID: str
    CheckoutRequestID: str
    ResponseCode: str
    ResponseDescription: str
    CustomerMessage: str


class StkQueryResponse(TypedDict):
    ResponseCode: str
    ResponseDescription: str
    MerchantRequestID: str
    CheckoutRequestID: str
    ResultCode: str
    ResultDesc: str


class C2BRegisterResponse(TypedDict):
    OriginatorConversationID: str
    ConversationID: str
    ResponseDescription: str


class C2BSimulateResponse(TypedDict):
    OriginatorConversationID: str
    ConversationID: str
    ResponseDescription: str


class AcceptedResponse(TypedDict):
    """Acknowledgment for operations whose result arrives by callback."""

    OriginatorConversationID: str
    ConversationID: str
    ResponseCode: str
    ResponseDescription: str


class DynamicQRResponse(TypedDict):
    ResponseCode: str
    RequestID: str
    ResponseDescription: str
    QRCode: str

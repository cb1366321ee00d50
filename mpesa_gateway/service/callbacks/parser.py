"""
Normalization of inbound gateway callbacks.

These functions are pure: no I/O, no logging. Well-formed payloads never
raise; payloads missing the expected nesting raise KeyError/TypeError,
which the web handler catches before acknowledging the gateway.
"""

from typing import Any, Dict, List, Optional, Union

from mpesa_gateway.domain.entities import AsyncResult, C2BConfirmation, StkCallbackResult
from mpesa_gateway.service.signing import parse_gateway_date

SUCCESS_CODE = 0

# The fixed body the gateway expects back from every callback endpoint.
ACCEPTED_ACK: Dict[str, Any] = {"ResultCode": 0, "ResultDesc": "Accepted"}


def _to_number(value: Any) -> Optional[Union[int, float]]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return value
    number = float(value)
    return int(number) if number.is_integer() else number


def _flatten(items: Union[Dict[str, Any], List[Dict[str, Any]], None], key: str, value: str) -> Dict[str, Any]:
    """Turn ``[{key: k, value: v}, ...]`` (or a single such item) into ``{k: v}``."""
    if not items:
        return {}
    if isinstance(items, dict):
        items = [items]
    return {item[key]: item.get(value) for item in items}


def parse_stk_callback(payload: Dict[str, Any]) -> StkCallbackResult:
    """
    Parse an STK push callback body into a canonical result.

    Metadata (receipt, date, phone, amount) is read only when the
    result code indicates success.
    """
    callback = payload["Body"]["stkCallback"]
    result_code = int(callback["ResultCode"])
    success = result_code == SUCCESS_CODE

    fields: Dict[str, Any] = {}
    metadata = callback.get("CallbackMetadata")
    if success and metadata:
        items = _flatten(metadata.get("Item"), "Name", "Value")
        if items.get("MpesaReceiptNumber") is not None:
            fields["mpesa_receipt_number"] = str(items["MpesaReceiptNumber"])
        if items.get("TransactionDate") is not None:
            fields["transaction_date"] = parse_gateway_date(items["TransactionDate"])
        if items.get("PhoneNumber") is not None:
            fields["phone_number"] = str(items["PhoneNumber"])
        if items.get("Amount") is not None:
            fields["amount"] = _to_number(items["Amount"])

    return StkCallbackResult(
        success=success,
        result_code=result_code,
        result_desc=callback.get("ResultDesc", ""),
        merchant_request_id=callback.get("MerchantRequestID", ""),
        checkout_request_id=callback.get("CheckoutRequestID", ""),
        **fields,
    )


def parse_async_result(payload: Dict[str, Any]) -> AsyncResult:
    """Parse the generic ``Result`` callback used by initiator operations."""
    result = payload["Result"]
    result_code = int(result["ResultCode"])

    parameters = result.get("ResultParameters") or {}
    reference = result.get("ReferenceData") or {}

    return AsyncResult(
        success=result_code == SUCCESS_CODE,
        result_type=int(result.get("ResultType", 0)),
        result_code=result_code,
        result_desc=result.get("ResultDesc", ""),
        originator_conversation_id=result.get("OriginatorConversationID", ""),
        conversation_id=result.get("ConversationID", ""),
        transaction_id=result.get("TransactionID", ""),
        parameters=_flatten(parameters.get("ResultParameter"), "Key", "Value"),
        reference_data=_flatten(reference.get("ReferenceItem"), "Key", "Value"),
    )


def parse_c2b_confirmation(payload: Dict[str, Any]) -> C2BConfirmation:
    """Parse a C2B validation or confirmation payload."""
    trans_time = payload.get("TransTime")

    return C2BConfirmation(
        transaction_type=payload.get("TransactionType", ""),
        transaction_id=payload["TransID"],
        transaction_time=parse_gateway_date(trans_time) if trans_time else None,
        amount=_to_number(payload["TransAmount"]),
        business_short_code=str(payload.get("BusinessShortCode", "")),
        bill_ref_number=payload.get("BillRefNumber", ""),
        invoice_number=payload.get("InvoiceNumber", ""),
        org_account_balance=_to_number(payload.get("OrgAccountBalance")),
        third_party_transaction_id=payload.get("ThirdPartyTransID", ""),
        msisdn=str(payload.get("MSISDN", "")),
        first_name=payload.get("FirstName", ""),
        middle_name=payload.get("MiddleName", ""),
        last_name=payload.get("LastName", ""),
    )

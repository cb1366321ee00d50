"""Canonical records produced from inbound gateway callbacks."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class StkCallbackResult:
    """
    Flattened outcome of an STK push, as reported by the gateway.

    The optional fields are only populated for successful payments
    whose callback metadata carried the corresponding item.
    """

    success: bool
    result_code: int
    result_desc: str
    merchant_request_id: str
    checkout_request_id: str
    mpesa_receipt_number: Optional[str] = None
    transaction_date: Optional[datetime] = None
    phone_number: Optional[str] = None
    amount: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "result_code": self.result_code,
            "result_desc": self.result_desc,
            "merchant_request_id": self.merchant_request_id,
            "checkout_request_id": self.checkout_request_id,
            "mpesa_receipt_number": self.mpesa_receipt_number,
            "transaction_date": (
                self.transaction_date.isoformat() if self.transaction_date else None
            ),
            "phone_number": self.phone_number,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class AsyncResult:
    """
    Result callback for B2C, B2B, balance, status, reversal and tax
    remittance requests.

    Attributes:
        parameters: ResultParameters flattened to a Key -> Value mapping
        reference_data: ReferenceData items flattened the same way
    """

    success: bool
    result_type: int
    result_code: int
    result_desc: str
    originator_conversation_id: str
    conversation_id: str
    transaction_id: str
    parameters: dict[str, Any] = field(default_factory=dict)
    reference_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class C2BConfirmation:
    """A customer-to-business payment notification (validation or confirmation)."""

    transaction_type: str
    transaction_id: str
    transaction_time: Optional[datetime]
    amount: float
    business_short_code: str
    bill_ref_number: str
    invoice_number: str
    org_account_balance: Optional[float]
    third_party_transaction_id: str
    msisdn: str
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""

"""Data transfer objects for gateway operations."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, NamedTuple, Optional


class FieldError(NamedTuple):
    field: str
    message: str


def _required(errors: List[FieldError], name: str, value: Optional[str]) -> None:
    if not value or not str(value).strip():
        errors.append(FieldError(name, f"{name} is required"))


def whole_shillings(amount: float) -> int:
    """The gateway only accepts whole shillings; round half up."""
    return int(Decimal(str(amount)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _positive(errors: List[FieldError], name: str, value: float) -> None:
    if value is None or value <= 0:
        errors.append(FieldError(name, f"{name} must be positive"))


def _amount(errors: List[FieldError], name: str, value: float) -> None:
    try:
        rounded = whole_shillings(value)
    except (InvalidOperation, TypeError, ValueError, OverflowError):
        rounded = 0
    if rounded < 1:
        errors.append(FieldError(name, f"{name} must be at least 1 whole shilling"))


def _one_of(errors: List[FieldError], name: str, value: str, allowed: tuple) -> None:
    if value not in allowed:
        errors.append(FieldError(name, f"{name} must be one of {', '.join(allowed)}"))


@dataclass(frozen=True, kw_only=True)
class InitiatorOptions:
    """
    Overrides shared by operations that need an initiator credential.

    Anything left unset falls back to the client configuration.
    """

    initiator_name: Optional[str] = None
    security_credential: Optional[str] = None
    result_url: Optional[str] = None
    queue_timeout_url: Optional[str] = None


@dataclass(frozen=True)
class StkPushRequest:
    """Input for a Lipa Na M-Pesa Online (STK push) payment prompt."""

    phone_number: str
    amount: float
    account_reference: str
    transaction_desc: str
    callback_url: Optional[str] = None
    transaction_type: str = "CustomerPayBillOnline"

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "phone_number", self.phone_number)
        _amount(errors, "amount", self.amount)
        _required(errors, "account_reference", self.account_reference)
        _required(errors, "transaction_desc", self.transaction_desc)
        _one_of(
            errors,
            "transaction_type",
            self.transaction_type,
            ("CustomerPayBillOnline", "CustomerBuyGoodsOnline"),
        )
        return errors


@dataclass(frozen=True)
class StkQueryRequest:
    """Input for polling the status of an STK push."""

    checkout_request_id: str

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "checkout_request_id", self.checkout_request_id)
        return errors


@dataclass(frozen=True)
class C2BRegisterRequest:
    """Input for registering C2B validation and confirmation URLs."""

    validation_url: str
    confirmation_url: str
    response_type: str = "Completed"

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "validation_url", self.validation_url)
        _required(errors, "confirmation_url", self.confirmation_url)
        _one_of(errors, "response_type", self.response_type, ("Completed", "Cancelled"))
        return errors


@dataclass(frozen=True)
class C2BSimulateRequest:
    """Input for simulating a customer payment (sandbox only)."""

    phone_number: str
    amount: float
    bill_ref_number: str = ""
    command_id: str = "CustomerPayBillOnline"

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "phone_number", self.phone_number)
        _amount(errors, "amount", self.amount)
        _one_of(
            errors,
            "command_id",
            self.command_id,
            ("CustomerPayBillOnline", "CustomerBuyGoodsOnline"),
        )
        return errors


@dataclass(frozen=True)
class B2CRequest(InitiatorOptions):
    """Input for a business-to-customer payment."""

    phone_number: str
    amount: float
    command_id: str = "BusinessPayment"
    remarks: str = "Payment"
    occasion: str = ""

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "phone_number", self.phone_number)
        _amount(errors, "amount", self.amount)
        _one_of(
            errors,
            "command_id",
            self.command_id,
            ("SalaryPayment", "BusinessPayment", "PromotionPayment"),
        )
        return errors


@dataclass(frozen=True)
class B2BRequest(InitiatorOptions):
    """Input for a business-to-business payment to a paybill or till."""

    receiver_short_code: str
    amount: float
    account_reference: str
    command_id: str = "BusinessPayBill"
    requester: Optional[str] = None
    remarks: str = "Payment"
    occasion: str = ""

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "receiver_short_code", self.receiver_short_code)
        _amount(errors, "amount", self.amount)
        _required(errors, "account_reference", self.account_reference)
        _one_of(
            errors,
            "command_id",
            self.command_id,
            ("BusinessPayBill", "BusinessBuyGoods"),
        )
        return errors


@dataclass(frozen=True)
class AccountBalanceRequest(InitiatorOptions):
    """Input for an account balance query."""

    remarks: str = "Account Balance Query"

    def validate(self) -> List[FieldError]:
        return []


@dataclass(frozen=True)
class TransactionStatusRequest(InitiatorOptions):
    """Input for querying a single M-Pesa transaction."""

    transaction_id: str
    remarks: str = "Transaction Status Query"
    occasion: str = ""

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "transaction_id", self.transaction_id)
        return errors


@dataclass(frozen=True)
class ReversalRequest(InitiatorOptions):
    """Input for reversing a completed transaction."""

    transaction_id: str
    amount: float
    remarks: str = "Reversal"
    occasion: str = ""

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "transaction_id", self.transaction_id)
        _amount(errors, "amount", self.amount)
        return errors


@dataclass(frozen=True)
class DynamicQRRequest:
    """
    Input for generating a dynamic M-Pesa QR code.

    trx_code: BG (buy goods), WA (withdraw at agent), PB (paybill),
    SM (send money), SB (send to business). ``cpi`` is the till,
    paybill, agent or phone number matching the code.
    """

    merchant_name: str
    ref_no: str
    amount: float
    trx_code: str
    cpi: str
    size: int = 300

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _required(errors, "merchant_name", self.merchant_name)
        _required(errors, "ref_no", self.ref_no)
        _amount(errors, "amount", self.amount)
        _one_of(errors, "trx_code", self.trx_code, ("BG", "WA", "PB", "SM", "SB"))
        _required(errors, "cpi", self.cpi)
        _positive(errors, "size", self.size)
        return errors


@dataclass(frozen=True)
class TaxRemittanceRequest(InitiatorOptions):
    """Input for remitting tax to KRA against a payment registration number."""

    amount: float
    account_reference: str
    remarks: str = "Tax Remittance"

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        _amount(errors, "amount", self.amount)
        _required(errors, "account_reference", self.account_reference)
        return errors

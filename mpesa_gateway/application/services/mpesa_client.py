"""M-Pesa client facade - shapes and signs requests for each gateway operation."""

from typing import Any, Dict, Optional, cast

import structlog

from mpesa_gateway.application.dto import (
    AcceptedResponse,
    AccountBalanceRequest,
    B2BRequest,
    B2CRequest,
    C2BRegisterRequest,
    C2BRegisterResponse,
    C2BSimulateRequest,
    C2BSimulateResponse,
    DynamicQRRequest,
    DynamicQRResponse,
    InitiatorOptions,
    ReversalRequest,
    StkPushRequest,
    StkPushResponse,
    StkQueryRequest,
    StkQueryResponse,
    TaxRemittanceRequest,
    TransactionStatusRequest,
    whole_shillings,
)
from mpesa_gateway.core.config import MpesaSettings
from mpesa_gateway.domain.entities import Environment
from mpesa_gateway.domain.exceptions import ValidationError
from mpesa_gateway.domain.interfaces import CredentialEncryptor, GatewayDispatcher
from mpesa_gateway.service.signing import (
    default_certificate,
    encrypt_credential,
    generate_password,
    generate_timestamp,
    load_certificate,
    normalize_phone,
)

logger = structlog.get_logger(__name__)

# Shortcode type "4" is an organization shortcode.
SHORTCODE_IDENTIFIER = "4"
KRA_SHORT_CODE = "572572"
MAX_ACCOUNT_REFERENCE = 12
MAX_TRANSACTION_DESC = 13


class MpesaClient:
    """
    Application service for Daraja API operations.

    Each operation validates its request, builds the gateway body with
    fresh signing material, and hands it to the dispatcher, which owns
    token handling, timeouts and retries.
    """

    STK_PUSH_PATH = "/mpesa/stkpush/v1/processrequest"
    STK_QUERY_PATH = "/mpesa/stkpushquery/v1/query"
    C2B_REGISTER_PATH = "/mpesa/c2b/v1/registerurl"
    C2B_SIMULATE_PATH = "/mpesa/c2b/v1/simulate"
    B2C_PATH = "/mpesa/b2c/v1/paymentrequest"
    B2B_PATH = "/mpesa/b2b/v1/paymentrequest"
    ACCOUNT_BALANCE_PATH = "/mpesa/accountbalance/v1/query"
    TRANSACTION_STATUS_PATH = "/mpesa/transactionstatus/v1/query"
    REVERSAL_PATH = "/mpesa/reversal/v1/request"
    DYNAMIC_QR_PATH = "/mpesa/qrcode/v1/generate"
    TAX_REMITTANCE_PATH = "/mpesa/b2b/v1/remittax"

    def __init__(
        self,
        settings: MpesaSettings,
        dispatcher: GatewayDispatcher,
        encryptor: CredentialEncryptor = encrypt_credential,
        certificate: Optional[bytes] = None,
    ):
        self._settings = settings
        self._dispatcher = dispatcher
        self._encryptor = encryptor
        self._certificate = certificate

    @property
    def settings(self) -> MpesaSettings:
        return self._settings

    # --- STK push -----------------------------------------------------------

    async def stk_push(self, request: StkPushRequest) -> StkPushResponse:
        """
        Send a payment prompt to the customer's phone.

        Raises:
            ValidationError: If the request or phone number is invalid
            AuthError: If the gateway rejects the client credentials
            ApiError: If the gateway rejects or fails the request
        """
        self._check(request)
        phone = normalize_phone(request.phone_number)
        short_code = self._settings.business_short_code

        body = {
            **self._signature(),
            "TransactionType": request.transaction_type,
            "Amount": whole_shillings(request.amount),
            "PartyA": phone,
            "PartyB": short_code,
            "PhoneNumber": phone,
            "CallBackURL": request.callback_url or self._settings.callback_url,
            "AccountReference": request.account_reference[:MAX_ACCOUNT_REFERENCE],
            "TransactionDesc": request.transaction_desc[:MAX_TRANSACTION_DESC],
        }

        logger.info("stk_push_requested", amount=body["Amount"])
        return cast(StkPushResponse, await self._dispatcher.send(self.STK_PUSH_PATH, body))

    async def stk_query(self, request: StkQueryRequest) -> StkQueryResponse:
        """Query the status of an STK push by its CheckoutRequestID."""
        self._check(request)
        body = {
            **self._signature(),
            "CheckoutRequestID": request.checkout_request_id,
        }
        return cast(StkQueryResponse, await self._dispatcher.send(self.STK_QUERY_PATH, body))

    # --- C2B ----------------------------------------------------------------

    async def c2b_register_url(self, request: C2BRegisterRequest) -> C2BRegisterResponse:
        """Tell the gateway where to send C2B validation and confirmation calls."""
        self._check(request)
        body = {
            "ShortCode": self._settings.business_short_code,
            "ResponseType": request.response_type,
            "ConfirmationURL": request.confirmation_url,
            "ValidationURL": request.validation_url,
        }
        return cast(
            C2BRegisterResponse,
            await self._dispatcher.send(self.C2B_REGISTER_PATH, body),
        )

    async def c2b_simulate(self, request: C2BSimulateRequest) -> C2BSimulateResponse:
        """
        Simulate a customer paybill/till payment.

        Raises:
            ValidationError: Outside the sandbox environment
        """
        if self._settings.environment is not Environment.SANDBOX:
            raise ValidationError(
                "C2B simulation is only available in the sandbox environment",
                field="environment",
            )
        self._check(request)
        body = {
            "ShortCode": self._settings.business_short_code,
            "CommandID": request.command_id,
            "Amount": whole_shillings(request.amount),
            "Msisdn": normalize_phone(request.phone_number),
            "BillRefNumber": request.bill_ref_number,
        }
        return cast(
            C2BSimulateResponse,
            await self._dispatcher.send(self.C2B_SIMULATE_PATH, body),
        )

    # --- Initiator operations ------------------------------------------------

    async def b2c_payment(self, request: B2CRequest) -> AcceptedResponse:
        """Send money from the business to a customer."""
        self._check(request)
        body = {
            "InitiatorName": self._initiator_name(request),
            "SecurityCredential": self._security_credential(request),
            "CommandID": request.command_id,
            "Amount": whole_shillings(request.amount),
            "PartyA": self._settings.business_short_code,
            "PartyB": normalize_phone(request.phone_number),
            "Remarks": request.remarks,
            **self._result_urls(request),
            "Occassion": request.occasion,
        }
        logger.info("b2c_payment_requested", amount=body["Amount"], command_id=request.command_id)
        return cast(AcceptedResponse, await self._dispatcher.send(self.B2C_PATH, body))

    async def b2b_payment(self, request: B2BRequest) -> AcceptedResponse:
        """Pay another business's paybill or till from this shortcode."""
        self._check(request)
        body = {
            "Initiator": self._initiator_name(request),
            "SecurityCredential": self._security_credential(request),
            "CommandID": request.command_id,
            "SenderIdentifierType": SHORTCODE_IDENTIFIER,
            "RecieverIdentifierType": SHORTCODE_IDENTIFIER,
            "Amount": whole_shillings(request.amount),
            "PartyA": self._settings.business_short_code,
            "PartyB": request.receiver_short_code,
            "AccountReference": request.account_reference,
            "Remarks": request.remarks,
            **self._result_urls(request),
            "Occassion": request.occasion,
        }
        if request.requester:
            body["Requester"] = normalize_phone(request.requester)

        logger.info("b2b_payment_requested", amount=body["Amount"], command_id=request.command_id)
        return cast(AcceptedResponse, await self._dispatcher.send(self.B2B_PATH, body))

    async def account_balance(
        self,
        request: Optional[AccountBalanceRequest] = None,
    ) -> AcceptedResponse:
        """Request the shortcode's balance; the figures arrive by callback."""
        request = request or AccountBalanceRequest()
        self._check(request)
        body = {
            "Initiator": self._initiator_name(request),
            "SecurityCredential": self._security_credential(request),
            "CommandID": "AccountBalance",
            "PartyA": self._settings.business_short_code,
            "IdentifierType": SHORTCODE_IDENTIFIER,
            "Remarks": request.remarks,
            **self._result_urls(request),
        }
        return cast(
            AcceptedResponse,
            await self._dispatcher.send(self.ACCOUNT_BALANCE_PATH, body),
        )

    async def transaction_status(self, request: TransactionStatusRequest) -> AcceptedResponse:
        """Query the status of a completed M-Pesa transaction."""
        self._check(request)
        body = {
            "Initiator": self._initiator_name(request),
            "SecurityCredential": self._security_credential(request),
            "CommandID": "TransactionStatusQuery",
            "TransactionID": request.transaction_id,
            "PartyA": self._settings.business_short_code,
            "IdentifierType": SHORTCODE_IDENTIFIER,
            **self._result_urls(request),
            "Remarks": request.remarks,
            "Occasion": request.occasion,
        }
        return cast(
            AcceptedResponse,
            await self._dispatcher.send(self.TRANSACTION_STATUS_PATH, body),
        )

    async def reversal(self, request: ReversalRequest) -> AcceptedResponse:
        """Reverse a completed transaction back to the payer."""
        self._check(request)
        body = {
            "Initiator": self._initiator_name(request),
            "SecurityCredential": self._security_credential(request),
            "CommandID": "TransactionReversal",
            "TransactionID": request.transaction_id,
            "Amount": whole_shillings(request.amount),
            "ReceiverParty": self._settings.business_short_code,
            "RecieverIdentifierType": SHORTCODE_IDENTIFIER,
            **self._result_urls(request),
            "Remarks": request.remarks,
            "Occasion": request.occasion,
        }
        logger.info("reversal_requested", transaction_id=request.transaction_id)
        return cast(AcceptedResponse, await self._dispatcher.send(self.REVERSAL_PATH, body))

    async def tax_remittance(self, request: TaxRemittanceRequest) -> AcceptedResponse:
        """Remit tax to KRA against a payment registration number."""
        self._check(request)
        body = {
            "Initiator": self._initiator_name(request),
            "SecurityCredential": self._security_credential(request),
            "CommandID": "PayTaxToKRA",
            "SenderIdentifierType": SHORTCODE_IDENTIFIER,
            "RecieverIdentifierType": SHORTCODE_IDENTIFIER,
            "Amount": whole_shillings(request.amount),
            "PartyA": self._settings.business_short_code,
            "PartyB": KRA_SHORT_CODE,
            "AccountReference": request.account_reference,
            "Remarks": request.remarks,
            **self._result_urls(request),
        }
        return cast(
            AcceptedResponse,
            await self._dispatcher.send(self.TAX_REMITTANCE_PATH, body),
        )

    # --- QR -----------------------------------------------------------------

    async def dynamic_qr(self, request: DynamicQRRequest) -> DynamicQRResponse:
        """Generate a QR code customers can scan to pay."""
        self._check(request)
        body = {
            "MerchantName": request.merchant_name,
            "RefNo": request.ref_no,
            "Amount": whole_shillings(request.amount),
            "TrxCode": request.trx_code,
            "CPI": request.cpi,
            "Size": str(request.size),
        }
        return cast(DynamicQRResponse, await self._dispatcher.send(self.DYNAMIC_QR_PATH, body))

    # --- Helpers ------------------------------------------------------------

    @staticmethod
    def _check(request: Any) -> None:
        errors = request.validate()
        if errors:
            raise ValidationError(
                "; ".join(error.message for error in errors),
                field=errors[0].field,
            )

    def _signature(self) -> Dict[str, str]:
        """Shortcode, password and the timestamp the password was derived from."""
        timestamp = generate_timestamp()
        short_code = self._settings.business_short_code
        return {
            "BusinessShortCode": short_code,
            "Password": generate_password(short_code, self._settings.pass_key, timestamp),
            "Timestamp": timestamp,
        }

    def _result_urls(self, request: InitiatorOptions) -> Dict[str, str]:
        return {
            "QueueTimeOutURL": request.queue_timeout_url or self._settings.callback_url,
            "ResultURL": request.result_url or self._settings.callback_url,
        }

    def _initiator_name(self, request: InitiatorOptions) -> str:
        name = request.initiator_name or self._settings.initiator_name
        if not name:
            raise ValidationError("initiator_name is required", field="initiator_name")
        return name

    def _security_credential(self, request: InitiatorOptions) -> str:
        """Use the caller's credential, or encrypt the configured initiator password."""
        if request.security_credential:
            return request.security_credential

        password = self._settings.initiator_password
        if not password:
            raise ValidationError(
                "security_credential is required when no initiator_password is configured",
                field="security_credential",
            )

        if self._certificate is None:
            if self._settings.certificate_path:
                self._certificate = load_certificate(self._settings.certificate_path)
            else:
                self._certificate = default_certificate(self._settings.environment.value)

        return self._encryptor(password, self._certificate)

"""Webhook endpoints the gateway calls back into.

Every route answers ``{"ResultCode": 0, "ResultDesc": "Accepted"}`` with
HTTP 200, whatever happens while parsing or handling the payload. Any
other answer makes the gateway redeliver the callback indefinitely.
Callers outside the gateway's egress ranges are refused before parsing.
"""

import inspect
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, Request

from mpesa_gateway.core.dependencies import get_trusted_proxies, get_verify_callback_ip
from mpesa_gateway.core.metrics import record_callback
from mpesa_gateway.domain.entities import AsyncResult, C2BConfirmation, StkCallbackResult
from mpesa_gateway.presentation.schemas import AcknowledgementSchema
from mpesa_gateway.service.callbacks import (
    ACCEPTED_ACK,
    is_gateway_ip,
    parse_async_result,
    parse_c2b_confirmation,
    parse_stk_callback,
    resolve_client_ip,
)

logger = structlog.get_logger(__name__)


class UntrustedCallbackSourceError(Exception):
    """Raised when a callback arrives from outside the gateway ranges."""

    def __init__(self, ip: Optional[str]):
        self.ip = ip
        self.code = "UNTRUSTED_CALLBACK_SOURCE"
        self.message = f"Callbacks are not accepted from {ip or 'unknown address'}"
        super().__init__(self.message)


@dataclass
class CallbackHandlers:
    """
    Application hooks invoked with normalized callback records.

    Handlers may be plain functions or coroutines. ``on_error`` receives
    any exception raised while parsing or handling a callback.
    """

    on_stk_result: Optional[Callable[[StkCallbackResult], Any]] = None
    on_c2b_validation: Optional[Callable[[C2BConfirmation], Any]] = None
    on_c2b_confirmation: Optional[Callable[[C2BConfirmation], Any]] = None
    on_async_result: Optional[Callable[[AsyncResult], Any]] = None
    on_timeout: Optional[Callable[[AsyncResult], Any]] = None
    on_error: Optional[Callable[[Exception], Any]] = None


async def _call(handler: Optional[Callable[[Any], Any]], arg: Any) -> None:
    if handler is None:
        return
    result = handler(arg)
    if inspect.isawaitable(result):
        await result


def get_callback_handlers(request: Request) -> CallbackHandlers:
    """Handlers registered on the application at startup."""
    return getattr(request.app.state, "callback_handlers", None) or CallbackHandlers()


async def verify_gateway_source(
    request: Request,
    verify_ip: Annotated[bool, Depends(get_verify_callback_ip)],
    trusted_proxies: Annotated[List[str], Depends(get_trusted_proxies)],
) -> None:
    """Reject callers outside the gateway egress ranges."""
    if not verify_ip:
        return
    ip = resolve_client_ip(
        request.client.host if request.client else None,
        request.headers.get("x-forwarded-for"),
        trusted_proxies,
    )
    if not is_gateway_ip(ip):
        logger.warning("callback_rejected", ip=ip, path=request.url.path)
        record_callback("unknown", "rejected")
        raise UntrustedCallbackSourceError(ip)


async def _acknowledge(
    kind: str,
    request: Request,
    parse: Callable[[Dict[str, Any]], Any],
    handler: Optional[Callable[[Any], Any]],
    handlers: CallbackHandlers,
) -> Dict[str, Any]:
    """Normalize the payload, run the handler, and acknowledge regardless."""
    log = logger.bind(kind=kind)
    try:
        payload = await request.json()
        record = parse(payload)
        await _call(handler, record)
        record_callback(kind, "processed")
        log.info("callback_processed")
    except Exception as exc:
        record_callback(kind, "failed")
        log.exception("callback_processing_failed", error=str(exc))
        try:
            await _call(handlers.on_error, exc)
        except Exception as hook_exc:
            log.error("callback_error_hook_failed", error=str(hook_exc))
    return dict(ACCEPTED_ACK)


callbacks_router = APIRouter(
    prefix="/callbacks",
    dependencies=[Depends(verify_gateway_source)],
    responses={
        403: {"description": "Caller is not a gateway address"},
    },
)


@callbacks_router.post(
    "/stk",
    response_model=AcknowledgementSchema,
    summary="STK Push Result",
)
async def stk_callback(
    request: Request,
    handlers: Annotated[CallbackHandlers, Depends(get_callback_handlers)],
) -> Dict[str, Any]:
    return await _acknowledge("stk", request, parse_stk_callback, handlers.on_stk_result, handlers)


@callbacks_router.post(
    "/c2b/validation",
    response_model=AcknowledgementSchema,
    summary="C2B Validation",
)
async def c2b_validation(
    request: Request,
    handlers: Annotated[CallbackHandlers, Depends(get_callback_handlers)],
) -> Dict[str, Any]:
    return await _acknowledge(
        "c2b", request, parse_c2b_confirmation, handlers.on_c2b_validation, handlers
    )


@callbacks_router.post(
    "/c2b/confirmation",
    response_model=AcknowledgementSchema,
    summary="C2B Confirmation",
)
async def c2b_confirmation(
    request: Request,
    handlers: Annotated[CallbackHandlers, Depends(get_callback_handlers)],
) -> Dict[str, Any]:
    return await _acknowledge(
        "c2b", request, parse_c2b_confirmation, handlers.on_c2b_confirmation, handlers
    )


@callbacks_router.post(
    "/result",
    response_model=AcknowledgementSchema,
    summary="Async Operation Result",
    description="Results for B2C, B2B, balance, status, reversal and tax remittance.",
)
async def async_result(
    request: Request,
    handlers: Annotated[CallbackHandlers, Depends(get_callback_handlers)],
) -> Dict[str, Any]:
    return await _acknowledge(
        "result", request, parse_async_result, handlers.on_async_result, handlers
    )


@callbacks_router.post(
    "/timeout",
    response_model=AcknowledgementSchema,
    summary="Queue Timeout",
)
async def queue_timeout(
    request: Request,
    handlers: Annotated[CallbackHandlers, Depends(get_callback_handlers)],
) -> Dict[str, Any]:
    return await _acknowledge(
        "timeout", request, parse_async_result, handlers.on_timeout, handlers
    )

"""Error handling middleware and exception handlers."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from mpesa_gateway.domain.exceptions import (
    ApiError,
    ApiTimeoutError,
    AuthError,
    MpesaError,
    ValidationError,
)
from mpesa_gateway.presentation.api.v1.callbacks import UntrustedCallbackSourceError
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_body(
    code: str,
    message: str,
    field: Optional[str] = None,
    gateway_error_code: Optional[str] = None,
) -> dict:
    return {
        "error": code,
        "message": message,
        "field": field,
        "gateway_error_code": gateway_error_code,
        "request_id": get_request_id(),
    }


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Validation failures are the caller's fault (400). Gateway rejections
    and credential failures surface as 502, gateway timeouts as 504.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request,
        exc: ValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message, field=exc.field),
        )

    @app.exception_handler(AuthError)
    async def auth_error_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        """Credentials were rejected by the gateway's token endpoint."""
        logger.error(
            "gateway_auth_failed",
            status_code=exc.status_code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=502,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(ApiTimeoutError)
    async def timeout_error_handler(
        request: Request,
        exc: ApiTimeoutError,
    ) -> JSONResponse:
        logger.error("gateway_timeout", timeout_ms=exc.timeout_ms)
        return JSONResponse(
            status_code=504,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(ApiError)
    async def api_error_handler(
        request: Request,
        exc: ApiError,
    ) -> JSONResponse:
        logger.error(
            "gateway_api_error",
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=502,
            content=_error_body(exc.code, exc.message, gateway_error_code=exc.error_code),
        )

    @app.exception_handler(MpesaError)
    async def mpesa_error_handler(
        request: Request,
        exc: MpesaError,
    ) -> JSONResponse:
        logger.warning("mpesa_error", code=exc.code, message=exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(UntrustedCallbackSourceError)
    async def untrusted_source_handler(
        request: Request,
        exc: UntrustedCallbackSourceError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )

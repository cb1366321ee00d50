"""HTTP implementation of GatewayDispatcher."""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
import structlog

from mpesa_gateway.core.metrics import (
    record_request,
    record_request_retry,
    track_request_latency,
)
from mpesa_gateway.domain.exceptions import ApiError, ApiTimeoutError
from mpesa_gateway.domain.interfaces import AccessTokenProvider, GatewayDispatcher

logger = structlog.get_logger(__name__)

BASE_DELAY_MS = 1000
MAX_DELAY_MS = 10000

# Request fields never written to debug logs.
_SECRET_FIELDS = frozenset({"Password", "SecurityCredential"})


class AttemptOutcome(str, Enum):
    """Classification of a single request attempt."""

    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


def classify_status(status_code: int) -> AttemptOutcome:
    """Map an HTTP status to the next state of the retry machine."""
    if 200 <= status_code < 300:
        return AttemptOutcome.SUCCESS
    if status_code >= 500:
        return AttemptOutcome.RETRYABLE
    return AttemptOutcome.TERMINAL


def backoff_delay(attempt: int) -> float:
    """
    Seconds to wait after a failed ``attempt`` (1-based).

    Exponential backoff capped at 10s: 1s, 2s, 4s, 8s, 10s, 10s, ...
    """
    return min(BASE_DELAY_MS * 2 ** (attempt - 1), MAX_DELAY_MS) / 1000


def _redact(body: Dict[str, Any]) -> Dict[str, Any]:
    return {k: ("REDACTED" if k in _SECRET_FIELDS else v) for k, v in body.items()}


def _parse_body(response: httpx.Response) -> Dict[str, Any]:
    """Best-effort JSON parse; anything unparseable becomes an empty dict."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class HttpDispatcher(GatewayDispatcher):
    """
    Sends signed requests to the gateway.

    Each attempt is bounded by the configured timeout. Server errors are
    retried up to ``max_retries`` times with exponential backoff; client
    errors, timeouts and network failures fail immediately.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: AccessTokenProvider,
        timeout: float = 30.0,
        max_retries: int = 3,
        debug: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._timeout = timeout
        self._max_retries = max_retries
        self._debug = debug
        self._transport = transport
        self._sleep = sleep

    async def send(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST ``body`` to ``path``, retrying server errors.

        Raises:
            ApiError: The terminal error, or the last one once retries run out
            AuthError: If no token could be obtained
        """
        attempt = 1
        while True:
            try:
                return await self._attempt(path, body, attempt)
            except ApiError as exc:
                if not exc.retryable or attempt > self._max_retries:
                    if exc.retryable:
                        logger.error(
                            "gateway_request_exhausted_retries",
                            path=path,
                            max_retries=self._max_retries,
                            status_code=exc.status_code,
                        )
                    raise

                delay = backoff_delay(attempt)
                logger.warning(
                    "gateway_request_retrying",
                    path=path,
                    attempt=attempt,
                    max_retries=self._max_retries,
                    status_code=exc.status_code,
                    delay=delay,
                )
                record_request_retry(path)
                await self._sleep(delay)
                attempt += 1

    async def _attempt(self, path: str, body: Dict[str, Any], attempt: int) -> Dict[str, Any]:
        """Perform one HTTP exchange and classify its result."""
        token = await self._token_provider.get_token()
        url = f"{self._base_url}{path}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        log = logger.bind(path=path, attempt=attempt)
        if self._debug:
            log.info("gateway_request", body=_redact(body))

        try:
            with track_request_latency(path):
                async with httpx.AsyncClient(
                    timeout=self._timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.post(url, json=body, headers=headers)
        except httpx.TimeoutException:
            record_request(path, "timeout")
            log.warning("gateway_request_timeout", timeout=self._timeout)
            raise ApiTimeoutError(int(self._timeout * 1000)) from None
        except httpx.RequestError as e:
            record_request(path, "network_error")
            log.error("gateway_request_error", error=str(e))
            raise ApiError(message=f"Request failed: {e}") from e

        data = _parse_body(response)
        if self._debug:
            log.info(
                "gateway_response",
                status_code=response.status_code,
                body=response.text,
            )

        outcome = classify_status(response.status_code)
        if outcome is AttemptOutcome.SUCCESS:
            record_request(path, "success")
            return data

        record_request(
            path,
            "server_error" if outcome is AttemptOutcome.RETRYABLE else "client_error",
        )
        raise ApiError(
            message=(
                data.get("errorMessage")
                or data.get("ResultDesc")
                or f"API request failed: {response.status_code} {response.reason_phrase}"
            ),
            status_code=response.status_code,
            raw_body=response.text,
            error_code=data.get("errorCode"),
            response=data,
        )

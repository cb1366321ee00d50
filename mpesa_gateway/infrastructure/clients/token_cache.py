"""HTTP implementation of AccessTokenProvider."""

import asyncio
import base64
import time
from typing import Callable, Optional

import httpx
import structlog

from mpesa_gateway.core.metrics import record_token_refresh
from mpesa_gateway.domain.entities import AccessToken
from mpesa_gateway.domain.exceptions import ApiError, ApiTimeoutError, AuthError
from mpesa_gateway.domain.interfaces import AccessTokenProvider

logger = structlog.get_logger(__name__)


class HttpTokenCache(AccessTokenProvider):
    """
    Caches the OAuth bearer token and refreshes it when absent or stale.

    Refreshes are single-flight: concurrent callers that find the cache
    empty wait for one exchange and reuse its token. A rejected exchange
    is never retried, since bad credentials will not heal on their own.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        auth_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._auth_url = auth_url
        self._timeout = timeout
        self._transport = transport
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call performs an exchange."""
        self._token = None

    async def get_token(self) -> str:
        token = self._token
        if token is not None and token.is_valid(self._clock()):
            return token.value

        async with self._lock:
            # Another caller may have refreshed while we waited.
            token = self._token
            if token is not None and token.is_valid(self._clock()):
                return token.value

            self._token = await self._exchange()
            return self._token.value

    async def _exchange(self) -> AccessToken:
        """Trade the consumer key and secret for a new bearer token."""
        credentials = base64.b64encode(
            f"{self._consumer_key}:{self._consumer_secret}".encode("utf-8")
        ).decode("ascii")
        headers = {"Authorization": f"Basic {credentials}"}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(self._auth_url, headers=headers)
        except httpx.TimeoutException:
            record_token_refresh("timeout")
            logger.warning("token_exchange_timeout", timeout=self._timeout)
            raise ApiTimeoutError(int(self._timeout * 1000)) from None
        except httpx.RequestError as e:
            record_token_refresh("error")
            logger.error("token_exchange_error", error=str(e))
            raise ApiError(message=f"Token request failed: {e}") from e

        if not response.is_success:
            record_token_refresh("rejected")
            logger.warning("token_exchange_rejected", status_code=response.status_code)
            raise AuthError(
                message=f"Authentication failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                raw_body=response.text,
            )

        try:
            data = response.json()
            value = data["access_token"]
            expires_in = int(data["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            record_token_refresh("rejected")
            raise AuthError(
                message=f"Malformed token response: {e}",
                status_code=response.status_code,
                raw_body=response.text,
            ) from e

        record_token_refresh("success")
        token = AccessToken.issue(value, expires_in, now=self._clock())
        logger.info("token_refreshed", expires_in=expires_in)
        return token

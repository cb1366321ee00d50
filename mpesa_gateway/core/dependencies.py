"""Client wiring and dependency injection for FastAPI."""

import asyncio
from functools import lru_cache
from typing import Any, Awaitable, Callable, List, Mapping, Optional

import httpx

from mpesa_gateway.application.services import MpesaClient
from mpesa_gateway.core.config import MpesaSettings, get_settings, load_settings
from mpesa_gateway.infrastructure.clients import HttpDispatcher, HttpTokenCache


def create_mpesa_client(
    settings: Optional[MpesaSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> MpesaClient:
    """
    Build a client with the HTTP token cache and dispatcher.

    Args:
        settings: Validated settings (default: read from the environment)
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
        sleep: Coroutine used to wait between retries
    """
    settings = settings or get_settings()

    token_cache = HttpTokenCache(
        consumer_key=settings.consumer_key,
        consumer_secret=settings.consumer_secret,
        auth_url=settings.environment.auth_url,
        timeout=settings.timeout,
        transport=transport,
    )
    dispatcher = HttpDispatcher(
        base_url=settings.environment.base_url,
        token_provider=token_cache,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        debug=settings.debug,
        transport=transport,
        sleep=sleep,
    )
    return MpesaClient(settings=settings, dispatcher=dispatcher)


def create_mpesa_client_from_mapping(mapping: Mapping[str, Any]) -> MpesaClient:
    """Validate a key/value configuration and build a client from it."""
    return create_mpesa_client(load_settings(mapping))


# Webhook service dependencies
@lru_cache
def get_mpesa_client() -> MpesaClient:
    """Get the process-wide MpesaClient instance."""
    return create_mpesa_client()


def get_verify_callback_ip() -> bool:
    """Whether callback routes reject callers outside the gateway ranges."""
    return get_settings().verify_callback_ip


def get_trusted_proxies() -> List[str]:
    """Proxy addresses whose X-Forwarded-For header is believed."""
    return get_settings().trusted_proxies

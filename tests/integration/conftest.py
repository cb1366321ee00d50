"""
Fixtures for integration tests.

Provides:
- A mock Daraja gateway served through httpx.MockTransport
- A gateway client wired through the real token cache and dispatcher
- Test clients for the FastAPI app, calling from a gateway address
"""

from typing import AsyncGenerator, Dict, List

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from mpesa_gateway.application.services import MpesaClient
from mpesa_gateway.core.config import get_settings
from mpesa_gateway.core.dependencies import (
    create_mpesa_client,
    get_mpesa_client,
    get_trusted_proxies,
    get_verify_callback_ip,
)
from mpesa_gateway.main import create_app
from mpesa_gateway.presentation.api.v1.callbacks import CallbackHandlers

GATEWAY_CLIENT = ("196.201.214.200", 40123)
OUTSIDE_CLIENT = ("203.0.113.7", 40123)
PROXY_CLIENT = ("10.0.0.5", 40123)


# =============================================================================
# Mock Gateway
# =============================================================================

class MockGateway:
    """
    Stand-in for the Daraja API.

    Tokens are always issued; business endpoints answer with whatever
    has been scripted for their path, defaulting to 200 and an empty body.
    """

    def __init__(self):
        self.replies: Dict[str, List[tuple]] = {}
        self.requests: List[httpx.Request] = []
        self.token_requests = 0
        self.fail_auth = False
        self.timeout_paths: set = set()

    def script(self, path: str, status_code: int, **kwargs) -> None:
        self.replies.setdefault(path, []).append((status_code, kwargs))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/oauth/v1/generate":
            self.token_requests += 1
            if self.fail_auth:
                return httpx.Response(401, text="Invalid credentials")
            return httpx.Response(200, json={"access_token": "mock-token", "expires_in": "3599"})

        self.requests.append(request)
        if path in self.timeout_paths:
            raise httpx.ReadTimeout("timed out", request=request)

        scripted = self.replies.get(path) or [(200, {"json": {}})]
        status_code, kwargs = scripted.pop(0) if len(scripted) > 1 else scripted[0]
        return httpx.Response(status_code, **kwargs)


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def gateway() -> MockGateway:
    return MockGateway()


@pytest.fixture
def retry_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def mpesa_client(settings, gateway, retry_sleep) -> MpesaClient:
    return create_mpesa_client(
        settings,
        transport=httpx.MockTransport(gateway),
        sleep=retry_sleep,
    )


# =============================================================================
# Callback Handler Fixtures
# =============================================================================

class RecordingHandlers:
    """Collects every record passed to the callback hooks."""

    def __init__(self):
        self.stk_results = []
        self.validations = []
        self.confirmations = []
        self.async_results = []
        self.timeouts = []
        self.errors = []

    async def on_stk_result(self, result):
        self.stk_results.append(result)

    def on_c2b_validation(self, record):
        self.validations.append(record)

    async def on_c2b_confirmation(self, record):
        self.confirmations.append(record)

    def on_async_result(self, result):
        self.async_results.append(result)

    def on_timeout(self, result):
        self.timeouts.append(result)

    def on_error(self, exc):
        self.errors.append(exc)

    def as_handlers(self) -> CallbackHandlers:
        return CallbackHandlers(
            on_stk_result=self.on_stk_result,
            on_c2b_validation=self.on_c2b_validation,
            on_c2b_confirmation=self.on_c2b_confirmation,
            on_async_result=self.on_async_result,
            on_timeout=self.on_timeout,
            on_error=self.on_error,
        )


@pytest.fixture
def recorder() -> RecordingHandlers:
    return RecordingHandlers()


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest.fixture
def app(settings, mpesa_client, recorder):
    """Application with settings and the gateway client overridden."""
    app = create_app(handlers=recorder.as_handlers())
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_mpesa_client] = lambda: mpesa_client
    app.dependency_overrides[get_verify_callback_ip] = lambda: True
    app.dependency_overrides[get_trusted_proxies] = lambda: []
    return app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Test client calling from a gateway egress address."""
    transport = ASGITransport(app=app, client=GATEWAY_CLIENT)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def outside_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Test client calling from an address outside the gateway ranges."""
    transport = ASGITransport(app=app, client=OUTSIDE_CLIENT)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def proxied_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Test client calling through a reverse proxy on a private address."""
    transport = ASGITransport(app=app, client=PROXY_CLIENT)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

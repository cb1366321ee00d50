"""
Integration tests for the webhook endpoints.

These tests verify:
1. Every callback route acknowledges with the fixed body
2. Normalized records reach the registered handlers
3. Malformed payloads and failing handlers are still acknowledged
4. Callers outside the gateway ranges are refused
"""

import pytest
from httpx import AsyncClient

from mpesa_gateway.core.dependencies import get_trusted_proxies, get_verify_callback_ip

ACK = {"ResultCode": 0, "ResultDesc": "Accepted"}


class TestStkCallback:
    """Tests for POST /v1/callbacks/stk."""

    @pytest.mark.asyncio
    async def test_successful_payment(self, client: AsyncClient, recorder, stk_success_payload):
        response = await client.post("/v1/callbacks/stk", json=stk_success_payload)

        assert response.status_code == 200
        assert response.json() == ACK

        assert len(recorder.stk_results) == 1
        result = recorder.stk_results[0]
        assert result.success is True
        assert result.mpesa_receipt_number == "NLJ7RT61SV"
        assert result.phone_number == "254708374149"

    @pytest.mark.asyncio
    async def test_cancelled_payment(self, client: AsyncClient, recorder, stk_cancelled_payload):
        response = await client.post("/v1/callbacks/stk", json=stk_cancelled_payload)

        assert response.json() == ACK
        assert recorder.stk_results[0].result_code == 1032
        assert recorder.stk_results[0].mpesa_receipt_number is None

    @pytest.mark.asyncio
    async def test_malformed_payload_is_acknowledged(self, client: AsyncClient, recorder):
        response = await client.post("/v1/callbacks/stk", json={"unexpected": "shape"})

        assert response.status_code == 200
        assert response.json() == ACK
        assert recorder.stk_results == []
        assert len(recorder.errors) == 1
        assert isinstance(recorder.errors[0], KeyError)

    @pytest.mark.asyncio
    async def test_invalid_json_is_acknowledged(self, client: AsyncClient, recorder):
        response = await client.post(
            "/v1/callbacks/stk",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == ACK
        assert len(recorder.errors) == 1

    @pytest.mark.asyncio
    async def test_failing_handler_is_acknowledged(
        self, client: AsyncClient, app, recorder, stk_success_payload
    ):
        def explode(result):
            raise RuntimeError("downstream unavailable")

        app.state.callback_handlers.on_stk_result = explode

        response = await client.post("/v1/callbacks/stk", json=stk_success_payload)

        assert response.status_code == 200
        assert response.json() == ACK
        assert str(recorder.errors[0]) == "downstream unavailable"

    @pytest.mark.asyncio
    async def test_failing_error_hook_is_acknowledged(self, client: AsyncClient, app):
        def explode(exc):
            raise RuntimeError("error hook broke too")

        app.state.callback_handlers.on_error = explode

        response = await client.post("/v1/callbacks/stk", json={})

        assert response.status_code == 200
        assert response.json() == ACK


class TestC2BCallbacks:
    """Tests for the C2B validation and confirmation routes."""

    @pytest.mark.asyncio
    async def test_validation(self, client: AsyncClient, recorder, c2b_payload):
        response = await client.post("/v1/callbacks/c2b/validation", json=c2b_payload)

        assert response.json() == ACK
        assert recorder.validations[0].transaction_id == "RKTQDM7W6S"
        assert recorder.confirmations == []

    @pytest.mark.asyncio
    async def test_confirmation(self, client: AsyncClient, recorder, c2b_payload):
        response = await client.post("/v1/callbacks/c2b/confirmation", json=c2b_payload)

        assert response.json() == ACK
        assert recorder.confirmations[0].amount == 10
        assert recorder.validations == []


class TestAsyncResultCallbacks:
    """Tests for the result and queue timeout routes."""

    @pytest.mark.asyncio
    async def test_result(self, client: AsyncClient, recorder, b2c_result_payload):
        response = await client.post("/v1/callbacks/result", json=b2c_result_payload)

        assert response.json() == ACK
        result = recorder.async_results[0]
        assert result.transaction_id == "NLJ41HAY6Q"
        assert result.parameters["TransactionReceipt"] == "NLJ41HAY6Q"

    @pytest.mark.asyncio
    async def test_timeout(self, client: AsyncClient, recorder, b2c_result_payload):
        response = await client.post("/v1/callbacks/timeout", json=b2c_result_payload)

        assert response.json() == ACK
        assert len(recorder.timeouts) == 1
        assert recorder.async_results == []


class TestCallbackSource:
    """Tests for the gateway IP allow-list."""

    @pytest.mark.asyncio
    async def test_outside_caller_is_refused(
        self, outside_client: AsyncClient, recorder, stk_success_payload
    ):
        response = await outside_client.post("/v1/callbacks/stk", json=stk_success_payload)

        assert response.status_code == 403
        data = response.json()
        assert data["error"] == "UNTRUSTED_CALLBACK_SOURCE"
        assert "203.0.113.7" in data["message"]
        assert recorder.stk_results == []

    @pytest.mark.asyncio
    async def test_check_can_be_disabled(
        self, outside_client: AsyncClient, app, recorder, stk_success_payload
    ):
        app.dependency_overrides[get_verify_callback_ip] = lambda: False

        response = await outside_client.post("/v1/callbacks/stk", json=stk_success_payload)

        assert response.status_code == 200
        assert len(recorder.stk_results) == 1

    @pytest.mark.asyncio
    async def test_forwarded_gateway_address_behind_trusted_proxy(
        self, proxied_client: AsyncClient, app, recorder, stk_success_payload
    ):
        app.dependency_overrides[get_trusted_proxies] = lambda: ["10.0.0.5"]

        response = await proxied_client.post(
            "/v1/callbacks/stk",
            json=stk_success_payload,
            headers={"X-Forwarded-For": "196.201.214.200"},
        )

        assert response.status_code == 200
        assert len(recorder.stk_results) == 1

    @pytest.mark.asyncio
    async def test_forwarded_header_ignored_from_untrusted_peer(
        self, proxied_client: AsyncClient, recorder, stk_success_payload
    ):
        response = await proxied_client.post(
            "/v1/callbacks/stk",
            json=stk_success_payload,
            headers={"X-Forwarded-For": "196.201.214.200"},
        )

        assert response.status_code == 403
        assert "10.0.0.5" in response.json()["message"]
        assert recorder.stk_results == []

    @pytest.mark.asyncio
    async def test_spoofed_forwarded_entry_is_refused(
        self, proxied_client: AsyncClient, app, recorder, stk_success_payload
    ):
        app.dependency_overrides[get_trusted_proxies] = lambda: ["10.0.0.5"]

        response = await proxied_client.post(
            "/v1/callbacks/stk",
            json=stk_success_payload,
            headers={"X-Forwarded-For": "196.201.214.200, 203.0.113.7"},
        )

        assert response.status_code == 403
        assert recorder.stk_results == []


class TestServiceEndpoints:
    """Tests for health, metrics and request tracing."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "sandbox"

    @pytest.mark.asyncio
    async def test_metrics_include_callbacks(self, client: AsyncClient, stk_success_payload):
        await client.post("/v1/callbacks/stk", json=stk_success_payload)

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "mpesa_callback_total" in response.text
        assert "mpesa_http_requests_total" in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.headers["X-Request-ID"]

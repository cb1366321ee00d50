"""Prometheus metrics for the M-Pesa gateway client.

Technical Metrics (for Engineering/SRE):
- mpesa_request_latency_seconds: Gateway request latency per endpoint
- mpesa_request_total: Gateway requests by endpoint and outcome
- mpesa_request_retry_total: Retries after 5xx responses
- mpesa_token_refresh_total: OAuth token exchanges by outcome
- mpesa_callback_total: Inbound callbacks by kind and outcome
- mpesa_http_requests_total: Webhook service HTTP requests
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Gateway Client Metrics
# =============================================================================

request_latency = Histogram(
    "mpesa_request_latency_seconds",
    "Gateway request latency in seconds",
    ["path"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

request_total = Counter(
    "mpesa_request_total",
    "Total number of gateway requests",
    ["path", "outcome"],  # success, client_error, server_error, timeout, network_error
)

request_retries = Counter(
    "mpesa_request_retry_total",
    "Total number of gateway request retries",
    ["path"],
)

token_refresh_total = Counter(
    "mpesa_token_refresh_total",
    "Total number of OAuth token exchanges",
    ["outcome"],  # success, rejected, timeout
)

callback_total = Counter(
    "mpesa_callback_total",
    "Total number of inbound gateway callbacks",
    ["kind", "outcome"],  # kind: stk, c2b, result; outcome: processed, failed, rejected
)

http_requests_total = Counter(
    "mpesa_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "mpesa_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

@contextmanager
def track_request_latency(path: str) -> Generator[None, None, None]:
    """Context manager to track gateway request latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        request_latency.labels(path=path).observe(duration)


def record_request(path: str, outcome: str) -> None:
    """Record a completed gateway request attempt."""
    request_total.labels(path=path, outcome=outcome).inc()


def record_request_retry(path: str) -> None:
    """Record a retry of a gateway request."""
    request_retries.labels(path=path).inc()


def record_token_refresh(outcome: str) -> None:
    """Record an OAuth token exchange."""
    token_refresh_total.labels(outcome=outcome).inc()


def record_callback(kind: str, outcome: str) -> None:
    """Record an inbound callback."""
    callback_total.labels(kind=kind, outcome=outcome).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST

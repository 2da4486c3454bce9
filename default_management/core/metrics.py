"""Prometheus metrics for the Default Management service.

Metrics are organized into two categories:

Business Metrics (for Risk/Operations):
- default_mgmt_application_transitions_total: Lifecycle transitions by operation
- default_mgmt_domain_errors_total: Rejected requests by error code
- default_mgmt_login_total: Login attempts by outcome

Technical Metrics (for Engineering/SRE):
- default_mgmt_lifecycle_latency_seconds: Lifecycle operation latency
- default_mgmt_http_requests_total: HTTP requests by endpoint/status
- default_mgmt_http_request_latency_seconds: HTTP latency by endpoint
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics
# =============================================================================

application_transitions = Counter(
    "default_mgmt_application_transitions_total",
    "Total number of committed application lifecycle transitions",
    ["operation"],  # create, approve, reject, apply_rebirth, approve_rebirth
)

domain_errors = Counter(
    "default_mgmt_domain_errors_total",
    "Total number of requests rejected with a domain error",
    ["kind", "code"],
)

login_total = Counter(
    "default_mgmt_login_total",
    "Total number of login attempts",
    ["outcome"],  # success, failure
)


# =============================================================================
# Technical Metrics
# =============================================================================

lifecycle_latency = Histogram(
    "default_mgmt_lifecycle_latency_seconds",
    "Lifecycle operation latency in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

http_requests_total = Counter(
    "default_mgmt_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "default_mgmt_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_transition(operation: str) -> None:
    """Record a committed lifecycle transition."""
    application_transitions.labels(operation=operation).inc()


def record_domain_error(kind: str, code: str) -> None:
    """Record a request rejected with a domain error."""
    domain_errors.labels(kind=kind, code=code).inc()


def record_login(success: bool) -> None:
    """Record a login attempt."""
    login_total.labels(outcome="success" if success else "failure").inc()


@contextmanager
def track_lifecycle_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track lifecycle operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        lifecycle_latency.labels(operation=operation).observe(duration)


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

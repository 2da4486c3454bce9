"""Request/response logging middleware with timing."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from default_management.core.metrics import record_http_request

from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _endpoint_of(request: Request) -> str:
    # Route templates keep the metric label cardinality bounded
    scope = dict(request.scope, root_path="")
    for route in request.app.router.routes:
        template = getattr(route, "path_format", None)
        if template is not None and route.matches(scope)[0] == Match.FULL:
            return template

    route = request.scope.get("route")
    template = getattr(route, "path_format", None)
    if template is None:
        return request.url.path
    prefix = request.scope.get("root_path", "")
    if template.startswith(prefix):
        return template
    return prefix + template


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs request start, completion, and duration, and records HTTP metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        query = str(request.query_params) if request.query_params else None

        log = logger.bind(
            request_id=get_request_id(),
            method=method,
            path=path,
        )

        log.info("request_started", query=query)

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            record_http_request(method, _endpoint_of(request), response.status_code, duration)

            return response

        except Exception as e:
            duration = time.perf_counter() - start_time

            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            record_http_request(method, _endpoint_of(request), 500, duration)
            raise

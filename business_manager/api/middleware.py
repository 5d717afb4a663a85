"""FastAPI middleware for request tracing and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from business_manager.infrastructure.observability.logging import log_request
from business_manager.infrastructure.observability.metrics import request_duration_histogram

# Paths that match no route share one label, keeping the label set bounded
UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Route template such as /v1/emis/{emi_id}/payment, never the raw path"""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


def current_principal_id(request: Request) -> str | None:
    commands = getattr(request.app.state, "commands", None)
    principal = commands.principal if commands is not None else None
    return principal.uid if principal is not None else None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and log its outcome.

    A caller-supplied X-Request-ID is kept so client and server logs line up.
    The principal is read after the handler runs, so sign-in requests are
    logged against the account they opened.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        log_request(
            request_id,
            request.method,
            endpoint_label(request),
            response.status_code,
            current_principal_id(request),
            (time.time() - start_time) * 1000,
        )
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request latency per route template"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint_label(request),
            status=response.status_code,
        ).observe(time.time() - start_time)
        return response

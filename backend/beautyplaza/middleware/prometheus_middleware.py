"""
Prometheus metrics middleware for HTTP request tracking.

Tracks request duration, status codes and in-progress requests through
the prometheus_metrics module.
"""

import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics

_ULID_SEGMENT = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$", re.IGNORECASE)
_DATE_SEGMENT = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_path(raw_path: str) -> str:
    """Replace id-like path segments with placeholders to bound label cardinality."""
    segments = []
    for segment in raw_path.split("/"):
        if segment.isdigit() or _ULID_SEGMENT.match(segment):
            segments.append(":id")
        elif _DATE_SEGMENT.match(segment):
            segments.append(":date")
        else:
            segments.append(segment)
    return "/".join(segments)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics collection for the metrics endpoint itself
        if request.url.path == "/metrics/prometheus":
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        prometheus_metrics.track_http_request_start(method, path)
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            prometheus_metrics.record_http_request(
                method=method, endpoint=path, duration=duration, status_code=response.status_code
            )

            return response

        finally:
            # Always track request end
            prometheus_metrics.track_http_request_end(method, path)

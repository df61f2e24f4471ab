"""
Prometheus metrics module for Beauty Plaza.

Exposes request and service-operation metrics, the latter fed by the
@BaseService.measure_operation decorator, plus a few booking-specific
counters.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Own registry so the default process collectors stay out of the exposition
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "beautyplaza_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "beautyplaza_http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "beautyplaza_http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "beautyplaza_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "beautyplaza_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "beautyplaza_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

# Booking domain counters
otp_challenges_total = Counter(
    "beautyplaza_otp_challenges_total",
    "OTP challenge events by outcome",
    ["outcome"],  # issued | verified | mismatch | expired | missing | locked
    registry=REGISTRY,
)

appointment_conflicts_total = Counter(
    "beautyplaza_appointment_conflicts_total",
    "Booking attempts rejected because the slot was taken",
    ["source"],  # check | constraint
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade so callers never touch metric objects directly."""

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}
        http_request_duration_seconds.labels(**labels).observe(duration)
        http_requests_total.labels(**labels).inc()

    @staticmethod
    def track_http_request_start(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

    @staticmethod
    def track_http_request_end(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Called by ``BaseService.measure_operation`` after every service call.

        ``status`` is ``success`` or ``error``; failures are also counted in
        ``beautyplaza_errors_total`` under the exception class name.
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_error(error_type: str, service: str = "api", operation: str = "request") -> None:
        errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_otp_event(outcome: str) -> None:
        otp_challenges_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_appointment_conflict(source: str) -> None:
        appointment_conflicts_total.labels(source=source).inc()

    @staticmethod
    def get_metrics() -> bytes:
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()

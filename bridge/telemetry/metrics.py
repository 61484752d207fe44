"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
        60.0,
        120.0,
        300.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

PIPELINE_OUTCOMES = Counter(
    "bridge_pipeline_outcomes_total",
    "Terminal state reached by each /process request",
    ("state",),
)

CAPACITY_REJECTIONS = Counter(
    "bridge_capacity_rejections_total",
    "Requests refused because every pipeline slot was taken",
)

PIPELINES_IN_FLIGHT = Gauge(
    "bridge_pipelines_in_flight",
    "Admitted pipeline executions currently running",
)

UPSTREAM_LATENCY = Histogram(
    "bridge_upstream_request_duration_seconds",
    "Duration of calls to the transcription and inference services",
    ("service", "outcome"),
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_upstream(service: str, outcome: str, duration_seconds: float) -> None:
    """Record the latency of one outbound call."""

    UPSTREAM_LATENCY.labels(service=service, outcome=outcome).observe(
        max(duration_seconds, 0)
    )


def record_pipeline_outcome(state: str) -> None:
    PIPELINE_OUTCOMES.labels(state=state).inc()


def record_capacity_rejection() -> None:
    CAPACITY_REJECTIONS.inc()

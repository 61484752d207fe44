"""Telemetry helpers and metrics."""

from .metrics import (
    CAPACITY_REJECTIONS,
    ERROR_COUNTER,
    PIPELINE_OUTCOMES,
    PIPELINES_IN_FLIGHT,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    UPSTREAM_LATENCY,
    observe_request,
    observe_upstream,
    record_capacity_rejection,
    record_pipeline_outcome,
)

__all__ = [
    "CAPACITY_REJECTIONS",
    "ERROR_COUNTER",
    "PIPELINE_OUTCOMES",
    "PIPELINES_IN_FLIGHT",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "UPSTREAM_LATENCY",
    "observe_request",
    "observe_upstream",
    "record_capacity_rejection",
    "record_pipeline_outcome",
]

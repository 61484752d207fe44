"""Request logging and Prometheus metrics."""

from __future__ import annotations

import logging

import pytest
from prometheus_client.parser import text_string_to_metric_families

from bridge.middleware.logging import COLOR_GREEN, COLOR_RED, COLOR_YELLOW, StructuredLoggingMiddleware


@pytest.fixture
def request_log(caplog):
    request_logger = logging.getLogger("bridge.middleware.structured")
    request_logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="bridge.middleware.structured")
    yield caplog
    request_logger.removeHandler(caplog.handler)


def test_each_request_is_logged_with_status_and_latency(client, request_log, audio_upload):
    client.get("/health")
    client.post("/process", data={})

    messages = [
        record.getMessage()
        for record in request_log.records
        if record.name == "bridge.middleware.structured"
    ]
    assert len(messages) == 2
    assert any("method=GET" in message and "path=/health" in message and "status=200" in message for message in messages)
    assert any("method=POST" in message and "path=/process" in message and "status=400" in message for message in messages)
    assert all("duration_ms=" in message for message in messages)


def test_logging_does_not_alter_the_response(client, upstream, audio_upload):
    upstream.ollama_status = 500

    response = client.post("/process", files=audio_upload)

    assert response.status_code == 200
    assert response.json()["transcription"] == "hello from the tower"


@pytest.mark.parametrize(
    ("status_code", "color"),
    [(200, COLOR_GREEN), (404, COLOR_YELLOW), (503, COLOR_RED)],
)
def test_console_message_color_tracks_status(status_code, color):
    message = StructuredLoggingMiddleware._format_console_message(
        {"method": "POST", "path": "/process", "status_code": status_code, "duration_ms": 1.5}
    )

    assert message.startswith(color)
    assert f"status={status_code}" in message
    assert "client_ip=-" in message


def _samples(body: str) -> dict:
    return {
        (sample.name, frozenset(sample.labels.items())): sample.value
        for family in text_string_to_metric_families(body)
        for sample in family.samples
    }


def _value(samples: dict, name: str, **labels) -> float | None:
    return samples.get((name, frozenset(labels.items())))


def test_metrics_expose_request_and_pipeline_counters(client, upstream, audio_upload):
    client.post("/process", files=audio_upload)
    upstream.whisper_status = 500
    client.post("/process", files=audio_upload)

    samples = _samples(client.get("/metrics").text)

    assert _value(samples, "http_requests_total", method="POST", route="/process", status="200") >= 1
    assert _value(samples, "http_requests_total", method="POST", route="/process", status="500") >= 1
    assert _value(samples, "bridge_pipeline_outcomes_total", state="completed") >= 1
    assert _value(samples, "bridge_pipeline_outcomes_total", state="transcription_failed") >= 1
    assert (
        _value(
            samples,
            "bridge_upstream_request_duration_seconds_count",
            service="whisper",
            outcome="success",
        )
        >= 1
    )
    assert _value(samples, "bridge_pipelines_in_flight") == 0.0


def test_unmatched_paths_share_one_route_label(client):
    assert client.get("/definitely-not-here").status_code == 404

    body = client.get("/metrics").text

    assert 'route="unmatched"' in body
    assert "definitely-not-here" not in body

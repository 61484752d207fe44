"""Shared fixtures: an app wired to in-memory Whisper and Ollama stubs."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from bridge.config.settings import OllamaConfig, Settings, WhisperConfig
from bridge.main import create_app
from bridge.services import OllamaLlmClient, WhisperTranscribeService

WHISPER_HOST = "whisper.test"
OLLAMA_HOST = "ollama.test"


class UpstreamStub:
    """Answers both upstream services from one ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.whisper_status = 200
        self.whisper_payload: Any = {
            "text": "hello from the tower",
            "segments": [{"id": 0, "text": "hello from the tower"}],
            "language": "en",
        }
        self.whisper_delay = 0.0
        self.whisper_gate: asyncio.Event | None = None
        self.ollama_status = 200
        self.ollama_payload: Any = {
            "model": "llama3",
            "response": "Processed transcription",
            "done": True,
        }
        self.ollama_delay = 0.0
        self.ollama_exception: Exception | None = None
        self.transport = httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == WHISPER_HOST:
            if self.whisper_gate is not None:
                await self.whisper_gate.wait()
            if self.whisper_delay:
                await asyncio.sleep(self.whisper_delay)
            return self._respond(self.whisper_status, self.whisper_payload)

        if request.url.host == OLLAMA_HOST:
            if self.ollama_exception is not None:
                raise self.ollama_exception
            if self.ollama_delay:
                await asyncio.sleep(self.ollama_delay)
            return self._respond(self.ollama_status, self.ollama_payload)

        return httpx.Response(404, text="unknown host")

    @staticmethod
    def _respond(status_code: int, payload: Any) -> httpx.Response:
        if isinstance(payload, (dict, list)):
            return httpx.Response(status_code, json=payload)
        return httpx.Response(status_code, text=str(payload))

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]

    @property
    def ollama_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests_to(OLLAMA_HOST)]


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def staging_dir(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def settings(staging_dir) -> Settings:
    return Settings(
        whisper=WhisperConfig(url=f"http://{WHISPER_HOST}"),
        ollama=OllamaConfig(url=f"http://{OLLAMA_HOST}"),
        max_concurrent_requests=2,
        request_timeout=5,
        staging_dir=str(staging_dir),
    )


@pytest.fixture
def app(settings, upstream):
    application = create_app(settings)
    application.state.transcribe_service = WhisperTranscribeService.from_config(
        settings.whisper, transport=upstream.transport
    )
    application.state.llm_client = OllamaLlmClient.from_config(
        settings.ollama, transport=upstream.transport
    )
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def audio_upload():
    return {"file": ("clip.mp3", b"ID3fake-mp3-bytes", "audio/mpeg")}

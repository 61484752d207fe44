"""Thin Ollama client wrapper for non-streaming generation calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import BaseModel

from bridge.config.settings import OllamaConfig

from .upstream import Deadline, UpstreamHttpService

logger = logging.getLogger(__name__)

TRANSCRIPTION_SEPARATOR = "\n\nTranscription: "


@dataclass(frozen=True)
class InferenceResult:
    """Generated text plus the bits of Ollama metadata worth keeping."""

    text: str
    model: str | None = None
    done: bool = False


class OllamaGenerateResponse(BaseModel):
    """JSON body returned by ``/api/generate`` with ``stream: false``."""

    response: str
    model: str | None = None
    done: bool = False

    model_config = {"extra": "ignore"}


def compose_prompt(prompt: str, transcript: str) -> str:
    """Join the caller's instruction and the transcript into one prompt string."""

    return f"{prompt}{TRANSCRIPTION_SEPARATOR}{transcript}"


class OllamaLlmClient(UpstreamHttpService):
    """Invoke Ollama's generation endpoint with a composed prompt."""

    service_name = "ollama"

    def __init__(
        self,
        base_url: str,
        *,
        generate_path: str = "/api/generate",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, transport=transport)
        self._generate_path = generate_path

    @classmethod
    def from_config(
        cls,
        config: OllamaConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "OllamaLlmClient":
        return cls(
            config.url,
            generate_path=config.generate_path,
            transport=transport,
        )

    async def infer(
        self,
        model: str,
        prompt: str,
        transcript: str,
        deadline: Deadline,
    ) -> InferenceResult:
        """Run a single non-streaming generation and return the response text."""

        body = {
            "model": model,
            "prompt": compose_prompt(prompt, transcript),
            "stream": False,
        }
        response = await self._post(self._generate_path, deadline, json=body)
        payload = self._decode(response, OllamaGenerateResponse)

        if not payload.done:
            logger.info("Ollama returned an unfinished generation for model=%s", model)

        return InferenceResult(
            text=payload.response,
            model=payload.model,
            done=payload.done,
        )


__all__ = [
    "InferenceResult",
    "OllamaGenerateResponse",
    "OllamaLlmClient",
    "compose_prompt",
]

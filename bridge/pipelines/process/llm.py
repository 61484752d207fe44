"""Inference stage (Stage 05) of the processing pipeline."""

from __future__ import annotations

import logging

from bridge.errors import InferenceFailure
from bridge.services import Deadline, OllamaLlmClient, ServiceCallError

from .types import PipelineRequest

logger = logging.getLogger("bridge.pipeline")


def _truncate(value: str, max_length: int = 200) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


async def process_transcript(
    client: OllamaLlmClient,
    request: PipelineRequest,
    transcript: str,
    deadline: Deadline,
) -> str:
    """Run the generation call, raising ``InferenceFailure`` on any upstream error."""

    try:
        result = await client.infer(request.model, request.prompt, transcript, deadline)
    except ServiceCallError as exc:
        logger.warning("Ollama processing failed model=%s: %s", request.model, exc)
        raise InferenceFailure(f"Ollama processing failed: {exc}") from exc

    logger.info(
        "Ollama response model=%s done=%s: %s",
        result.model or request.model,
        result.done,
        _truncate(result.text),
    )
    return result.text


__all__ = ["process_transcript"]

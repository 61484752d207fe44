"""Transcription stage (Stage 04) of the processing pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from bridge.errors import TranscriptionFailure
from bridge.services import Deadline, ServiceCallError, WhisperTranscribeService

logger = logging.getLogger("bridge.pipeline")


async def transcribe_audio(
    service: WhisperTranscribeService,
    audio_path: Path,
    deadline: Deadline,
    filename: str | None = None,
) -> str:
    """Delegate to Whisper and turn any failure into a terminal 500."""

    try:
        result = await service.transcribe(audio_path, deadline, filename=filename)
    except ServiceCallError as exc:
        logger.error("Transcription failed for %s: %s", filename or audio_path.name, exc)
        raise TranscriptionFailure(f"Transcription failed: {exc}") from exc

    logger.info(
        "Transcription received file=%s language=%s chars=%d",
        filename or audio_path.name,
        result.language or "-",
        len(result.transcript),
    )
    return result.transcript


__all__ = ["transcribe_audio"]

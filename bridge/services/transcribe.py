"""Whisper ASR webservice integration."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from bridge.config.settings import WhisperConfig

from .errors import ServiceCallError
from .upstream import Deadline, UpstreamHttpService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to the pipeline."""

    transcript: str
    language: str | None = None
    segments: list[Any] = field(default_factory=list)


class WhisperResponse(BaseModel):
    """JSON body returned by the ASR endpoint."""

    text: str
    segments: list[Any] | None = None
    language: str | None = None

    model_config = {"extra": "ignore"}


class WhisperTranscribeService(UpstreamHttpService):
    """Upload staged audio to the Whisper ASR webservice."""

    service_name = "whisper"

    def __init__(
        self,
        base_url: str,
        *,
        asr_path: str = "/asr",
        file_field: str = "audio_file",
        output: str | None = "json",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, transport=transport)
        self._asr_path = asr_path
        self._file_field = file_field
        self._output = output

    @classmethod
    def from_config(
        cls,
        config: WhisperConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "WhisperTranscribeService":
        return cls(
            config.url,
            asr_path=config.asr_path,
            file_field=config.file_field,
            output=config.output or None,
            transport=transport,
        )

    async def transcribe(
        self,
        audio_path: Path,
        deadline: Deadline,
        filename: str | None = None,
    ) -> TranscriptionResult:
        """Send the audio file as a multipart upload and return the transcript."""

        upload_name = filename or audio_path.name
        try:
            audio_bytes = await run_in_threadpool(audio_path.read_bytes)
        except OSError as exc:
            raise ServiceCallError(f"failed to open file: {exc}") from exc

        content_type, _ = mimetypes.guess_type(upload_name)
        files = {
            self._file_field: (
                upload_name,
                audio_bytes,
                content_type or "application/octet-stream",
            )
        }
        params = {"output": self._output} if self._output else None

        logger.debug("Uploading %s (%d bytes) to whisper", upload_name, len(audio_bytes))
        response = await self._post(self._asr_path, deadline, files=files, params=params)
        payload = self._decode(response, WhisperResponse)

        return TranscriptionResult(
            transcript=payload.text,
            language=payload.language,
            segments=list(payload.segments or []),
        )


__all__ = ["TranscriptionResult", "WhisperResponse", "WhisperTranscribeService"]

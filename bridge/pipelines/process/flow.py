"""High-level map of the ``POST /process`` pipeline.

The HTTP controller in ``bridge/controllers/process.py`` holds the
asynchronous choreography; this module names the states a request moves
through and documents the stage order:

1. ``admission`` - take a slot from the capacity limiter or answer 503.
2. ``ingestion`` - parse the multipart form and apply model/prompt defaults.
3. ``staging`` - copy the upload to a temporary file owned by the request.
4. ``transcription`` - send the staged audio to Whisper; failures are terminal.
5. ``llm`` - send the transcript to Ollama; failures degrade to a partial 200.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class PipelineState(str, Enum):
    """Lifecycle states of one ``/process`` request."""

    RECEIVED = "received"
    ADMITTED = "admitted"
    STAGED = "staged"
    TRANSCRIBED = "transcribed"
    COMPLETED = "completed"
    REJECTED = "rejected"
    BAD_REQUEST = "bad_request"
    STAGING_FAILED = "staging_failed"
    TRANSCRIPTION_FAILED = "transcription_failed"
    INFERENCE_FAILED = "inference_failed"
    INTERNAL_ERROR = "internal_error"

    @property
    def is_terminal(self) -> bool:
        return self not in _IN_PROGRESS


_IN_PROGRESS = frozenset(
    {
        PipelineState.RECEIVED,
        PipelineState.ADMITTED,
        PipelineState.STAGED,
        PipelineState.TRANSCRIBED,
    }
)


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the pipeline."""

    order: int
    name: str
    module: str
    summary: str


class ProcessPipeline:
    """Utility wrapper for documenting the ``/process`` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Admission",
            "bridge.services.limiter",
            "Take a capacity token without waiting; reject with 503 when none is left.",
        ),
        PipelineStage(
            2,
            "Ingestion",
            "bridge.pipelines.process.ingestion",
            "Parse the multipart form, require the file field, resolve model and prompt.",
        ),
        PipelineStage(
            3,
            "Staging",
            "bridge.pipelines.process.staging",
            "Copy the upload to a request-scoped temporary file removed on exit.",
        ),
        PipelineStage(
            4,
            "Transcription",
            "bridge.pipelines.process.transcription",
            "Upload the staged audio to Whisper; any failure ends the request with 500.",
        ),
        PipelineStage(
            5,
            "Inference",
            "bridge.pipelines.process.llm",
            "Send prompt plus transcript to Ollama; failures become a partial 200.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


__all__ = ["PipelineStage", "PipelineState", "ProcessPipeline"]

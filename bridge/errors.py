"""Request-level failures and the HTTP status each one maps to.

``InferenceFailure`` is the odd one out: the orchestrator folds it into a
200 response instead of letting it reach the exception handlers.
"""

from __future__ import annotations

from fastapi import status


class PipelineError(Exception):
    """Base class for failures rendered as plain-text HTTP responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class CapacityExceededError(PipelineError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Server is at capacity, please try again later"


class MalformedRequestError(PipelineError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Malformed request"


class StagingError(PipelineError):
    default_detail = "Failed to stage uploaded file"


class TranscriptionFailure(PipelineError):
    default_detail = "Transcription failed"


class InferenceFailure(PipelineError):
    default_detail = "Ollama processing failed"


class InternalPipelineError(PipelineError):
    pass


__all__ = [
    "CapacityExceededError",
    "InferenceFailure",
    "InternalPipelineError",
    "MalformedRequestError",
    "PipelineError",
    "StagingError",
    "TranscriptionFailure",
]

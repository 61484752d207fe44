"""Typed containers shared across the processing pipeline.

They live in their own module so the stages (`ingestion`, `staging`,
`transcription`, `llm`) can import them without circular dependencies.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from starlette.datastructures import UploadFile

from bridge.services import Deadline


@dataclass(frozen=True)
class PipelineRequest:
    """Validated inbound call with model/prompt defaults already applied."""

    upload: UploadFile
    model: str
    prompt: str

    @property
    def filename(self) -> str:
        return self.upload.filename or "audio"


@dataclass(frozen=True)
class PipelineClock:
    """Admission timestamp plus the deadline derived from it."""

    deadline: Deadline
    started_at: float = field(default_factory=time.perf_counter)

    @classmethod
    def start(cls, timeout_seconds: float) -> "PipelineClock":
        return cls(deadline=Deadline.after(timeout_seconds))

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)


__all__ = ["PipelineClock", "PipelineRequest"]

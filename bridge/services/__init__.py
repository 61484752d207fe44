"""Service layer helpers for external integrations."""

from .errors import DecodeError, ServiceCallError, TransportError, UpstreamError
from .limiter import CapacityLimiter
from .llm_client import InferenceResult, OllamaLlmClient, compose_prompt
from .transcribe import TranscriptionResult, WhisperTranscribeService
from .upstream import Deadline, UpstreamHttpService

__all__ = [
    "CapacityLimiter",
    "Deadline",
    "DecodeError",
    "InferenceResult",
    "OllamaLlmClient",
    "ServiceCallError",
    "TranscriptionResult",
    "TransportError",
    "UpstreamError",
    "UpstreamHttpService",
    "WhisperTranscribeService",
    "compose_prompt",
]

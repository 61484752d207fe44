"""Common FastAPI dependencies reused across controllers.

Everything is read from ``app.state``, populated once by ``create_app``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from bridge.config.settings import Settings
from bridge.services import CapacityLimiter, OllamaLlmClient, WhisperTranscribeService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_limiter(request: Request) -> CapacityLimiter:
    return request.app.state.limiter


def get_transcribe_service(request: Request) -> WhisperTranscribeService:
    return request.app.state.transcribe_service


def get_llm_client(request: Request) -> OllamaLlmClient:
    return request.app.state.llm_client


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
LimiterDep = Annotated[CapacityLimiter, Depends(get_limiter)]
TranscribeServiceDep = Annotated[WhisperTranscribeService, Depends(get_transcribe_service)]
LlmClientDep = Annotated[OllamaLlmClient, Depends(get_llm_client)]


__all__ = [
    "LimiterDep",
    "LlmClientDep",
    "SettingsDep",
    "TranscribeServiceDep",
    "get_app_settings",
    "get_limiter",
    "get_llm_client",
    "get_transcribe_service",
]

"""Request ingestion helpers (Stage 02 of the processing pipeline)."""

from __future__ import annotations

from typing import Final

from fastapi import Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from bridge.config.settings import OllamaConfig
from bridge.errors import MalformedRequestError

from .types import PipelineRequest

FILE_FIELD: Final[str] = "file"
MODEL_FIELD: Final[str] = "model"
PROMPT_FIELD: Final[str] = "prompt"


async def read_form(request: Request) -> FormData:
    """Parse the multipart body, mapping parser failures to a 400."""

    try:
        return await request.form()
    except MultiPartException as exc:
        raise MalformedRequestError(f"Failed to parse form: {exc.message}") from exc
    except StarletteHTTPException as exc:
        raise MalformedRequestError(f"Failed to parse form: {exc.detail}") from exc


def _text_field(form: FormData, name: str) -> str:
    value = form.get(name)
    if isinstance(value, str) and value.strip():
        return value
    return ""


def build_pipeline_request(form: FormData, config: OllamaConfig) -> PipelineRequest:
    """Pick the upload and resolve model/prompt, falling back to configured defaults."""

    upload = form.get(FILE_FIELD)
    if upload is None:
        raise MalformedRequestError(
            f"Failed to get audio file: missing form field '{FILE_FIELD}'"
        )
    if not isinstance(upload, UploadFile):
        raise MalformedRequestError(
            f"Failed to get audio file: form field '{FILE_FIELD}' is not a file"
        )

    return PipelineRequest(
        upload=upload,
        model=_text_field(form, MODEL_FIELD) or config.default_model,
        prompt=_text_field(form, PROMPT_FIELD) or config.default_prompt,
    )


__all__ = ["build_pipeline_request", "read_form"]

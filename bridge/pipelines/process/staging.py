"""Upload staging (Stage 03 of the processing pipeline)."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, BinaryIO

from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from bridge.errors import StagingError

logger = logging.getLogger("bridge.pipeline")

STAGED_PREFIX = "upload-"


def _staging_path(directory: str | None, suffix: str) -> Path:
    base = Path(directory) if directory else Path(tempfile.gettempdir())
    return base / f"{STAGED_PREFIX}{uuid.uuid4().hex}{suffix}"


def _copy_to_temp(source: BinaryIO, path: Path) -> None:
    """Synchronous copy of the upload stream into a new file at ``path``."""

    try:
        handle = open(path, "xb")
    except OSError as exc:
        raise StagingError(f"Failed to create temp file: {exc}") from exc

    try:
        with handle:
            source.seek(0)
            shutil.copyfileobj(source, handle)
    except OSError as exc:
        raise StagingError(f"Failed to write temp file: {exc}") from exc


def _remove(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove staged file %s", path, exc_info=True)


@asynccontextmanager
async def staged_upload(
    upload: UploadFile,
    directory: str | None = None,
) -> AsyncIterator[Path]:
    """Stage ``upload`` on disk for the duration of the ``async with`` block.

    The file keeps the upload's extension so the transcription service can
    sniff the container format. Its name is fixed before the copy is handed
    to a worker thread, so it is deleted on every exit path, cancellation
    included.
    """

    path = _staging_path(directory, Path(upload.filename or "").suffix)
    try:
        await run_in_threadpool(_copy_to_temp, upload.file, path)
        logger.debug("Staged upload %s at %s", upload.filename, path)
        yield path
    finally:
        _remove(path)


__all__ = ["STAGED_PREFIX", "staged_upload"]

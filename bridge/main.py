"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from bridge.config.settings import Settings, get_settings
from bridge.controllers import process
from bridge.errors import PipelineError
from bridge.middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from bridge.services import CapacityLimiter, OllamaLlmClient, WhisperTranscribeService

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    """Send application logs to stdout and, when configured, a rotating file."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)

    level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    root_logger.setLevel(level)

    middleware_logger = logging.getLogger("bridge.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    for name in ("httpx", "httpcore", "multipart"):
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    _configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Forwards audio to Whisper and the transcript to Ollama",
    )

    app.state.settings = settings
    app.state.limiter = CapacityLimiter(settings.max_concurrent_requests)
    app.state.transcribe_service = WhisperTranscribeService.from_config(settings.whisper)
    app.state.llm_client = OllamaLlmClient.from_config(settings.ollama)

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.include_router(process.router)

    @app.get("/health", include_in_schema=False, response_class=PlainTextResponse)
    async def health_check() -> str:
        """Liveness probe; never touches the limiter."""

        return "OK"

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(PipelineError)
    async def pipeline_exception_handler(request: Request, exc: PipelineError):
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = str(exc.detail)
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            detail = "Method not allowed"
        return PlainTextResponse(
            detail,
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        logger.info("Starting Whisper-Ollama bridge on port %s", settings.port)
        logger.info("Whisper URL: %s", settings.whisper.url)
        logger.info("Ollama URL: %s", settings.ollama.url)
        logger.info("Max concurrent requests: %d", settings.max_concurrent_requests)
        logger.info("Request timeout: %ss", settings.request_timeout)

    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "bridge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()

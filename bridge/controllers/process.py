"""Audio processing endpoint.

For a stage-by-stage map see `bridge.pipelines.process.flow.ProcessPipeline`.
The POST `/process` pipeline performs:

1. Admission through the capacity limiter (503 when saturated).
2. Form parsing, file staging and transcription (hard failures, 400/500).
3. Inference on the transcript; failures still answer 200 with the
   transcription and an explanatory `response`.
"""

import logging

from fastapi import APIRouter, Request, status
from starlette.datastructures import FormData

from bridge.controllers.dependencies import (
    LimiterDep,
    LlmClientDep,
    SettingsDep,
    TranscribeServiceDep,
)
from bridge.errors import (
    CapacityExceededError,
    InferenceFailure,
    InternalPipelineError,
    MalformedRequestError,
    PipelineError,
    StagingError,
    TranscriptionFailure,
)
from bridge.pipelines.process import (
    PipelineClock,
    PipelineState,
    ProcessPipeline,
    build_pipeline_request,
    process_transcript,
    read_form,
    staged_upload,
    transcribe_audio,
)
from bridge.telemetry import (
    PIPELINES_IN_FLIGHT,
    record_capacity_rejection,
    record_pipeline_outcome,
)
from bridge.views import CombinedResponse

router = APIRouter(tags=["process"])

logger = logging.getLogger("bridge.pipeline")

PIPELINE_STAGES = tuple(ProcessPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

_FAILURE_STATES: dict[type[PipelineError], PipelineState] = {
    CapacityExceededError: PipelineState.REJECTED,
    MalformedRequestError: PipelineState.BAD_REQUEST,
    StagingError: PipelineState.STAGING_FAILED,
    TranscriptionFailure: PipelineState.TRANSCRIPTION_FAILED,
}

_PLAIN_TEXT = {"content": {"text/plain": {}}}


@router.post(
    "/process",
    response_model=CombinedResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: _PLAIN_TEXT,
        status.HTTP_500_INTERNAL_SERVER_ERROR: _PLAIN_TEXT,
        status.HTTP_503_SERVICE_UNAVAILABLE: _PLAIN_TEXT,
    },
)
async def process_audio(
    request: Request,
    settings: SettingsDep,
    limiter: LimiterDep,
    transcribe_service: TranscribeServiceDep,
    llm_client: LlmClientDep,
) -> CombinedResponse:
    """Transcribe the uploaded `file` and run the transcript through Ollama."""

    state = PipelineState.RECEIVED
    try:
        with limiter.admission():
            clock = PipelineClock.start(settings.request_timeout)
            state = PipelineState.ADMITTED
            PIPELINES_IN_FLIGHT.inc()
            form: FormData | None = None
            try:
                form = await read_form(request)
                pipeline_request = build_pipeline_request(form, settings.ollama)

                async with staged_upload(pipeline_request.upload, settings.staging_dir) as audio_path:
                    state = PipelineState.STAGED
                    transcript = await transcribe_audio(
                        transcribe_service,
                        audio_path,
                        clock.deadline,
                        filename=pipeline_request.filename,
                    )
                    state = PipelineState.TRANSCRIBED

                    # Once the transcript exists it is always returned.
                    try:
                        response_text = await process_transcript(
                            llm_client,
                            pipeline_request,
                            transcript,
                            clock.deadline,
                        )
                        state = PipelineState.COMPLETED
                    except InferenceFailure as exc:
                        response_text = exc.detail
                        state = PipelineState.INFERENCE_FAILED

                return CombinedResponse(
                    transcription=transcript,
                    response=response_text,
                    process_time_ms=clock.elapsed_ms(),
                    model=pipeline_request.model,
                )
            finally:
                PIPELINES_IN_FLIGHT.dec()
                if form is not None:
                    await form.close()
    except PipelineError as exc:
        state = _FAILURE_STATES.get(type(exc), PipelineState.INTERNAL_ERROR)
        if state is PipelineState.REJECTED:
            record_capacity_rejection()
        raise
    except Exception as exc:
        state = PipelineState.INTERNAL_ERROR
        logger.exception("Unexpected failure while processing %s", request.url.path)
        raise InternalPipelineError() from exc
    finally:
        record_pipeline_outcome(state.value)
        logger.info("Pipeline finished state=%s", state.value)

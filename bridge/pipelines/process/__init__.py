"""Processing pipeline package.

Modules are organised by the order in which ``POST /process`` executes:

1. `ingestion` - parse the form and resolve model/prompt defaults.
2. `staging` - copy the upload to a request-scoped temporary file.
3. `transcription` - call Whisper; errors end the request.
4. `llm` - call Ollama; errors degrade to a partial result.
5. `flow` - states and a human-readable description of the stages.

The FastAPI controller imports from here so contributors can jump straight
to the relevant stage without wading through a single monolithic file.
"""

from .flow import PipelineStage, PipelineState, ProcessPipeline
from .ingestion import build_pipeline_request, read_form
from .llm import process_transcript
from .staging import staged_upload
from .transcription import transcribe_audio
from .types import PipelineClock, PipelineRequest

__all__ = [
    "PipelineClock",
    "PipelineRequest",
    "PipelineStage",
    "PipelineState",
    "ProcessPipeline",
    "build_pipeline_request",
    "process_transcript",
    "read_form",
    "staged_upload",
    "transcribe_audio",
]

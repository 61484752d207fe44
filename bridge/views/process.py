"""Pydantic schemas for the audio processing endpoint."""

from pydantic import BaseModel, Field


class CombinedResponse(BaseModel):
    transcription: str
    response: str = Field(
        description="Generated text, or the reason the inference step failed.",
    )
    process_time_ms: int = Field(ge=0)
    model: str

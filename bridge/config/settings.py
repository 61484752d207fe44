from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WhisperConfig(BaseSettings):
    """Whisper ASR webservice configuration"""

    url: str = Field(
        default="http://whisper:9000",
        validation_alias="WHISPER_URL",
    )
    asr_path: str = Field(
        default="/asr",
        validation_alias="WHISPER_ASR_PATH",
    )
    file_field: str = Field(
        default="audio_file",
        validation_alias="WHISPER_FILE_FIELD",
    )
    output: Optional[str] = Field(
        default="json",
        validation_alias="WHISPER_OUTPUT",
        description="Value of the `output` query parameter; empty to omit it.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class OllamaConfig(BaseSettings):
    """Ollama inference service configuration"""

    url: str = Field(
        default="http://ollama:11434",
        validation_alias="OLLAMA_URL",
    )
    generate_path: str = Field(
        default="/api/generate",
        validation_alias="OLLAMA_GENERATE_PATH",
    )
    default_model: str = Field(
        default="llama3",
        validation_alias="OLLAMA_DEFAULT_MODEL",
        min_length=1,
    )
    default_prompt: str = Field(
        default="Process this transcription:",
        validation_alias="OLLAMA_DEFAULT_PROMPT",
        min_length=1,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Whisper-Ollama Bridge"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = Field(
        default="0.0.0.0",
        validation_alias="SERVER_HOST",
    )
    port: int = Field(
        default=8080,
        validation_alias="SERVER_PORT",
        ge=1,
        le=65535,
    )
    log_level: str = "INFO"
    log_file: Optional[str] = None

    max_concurrent_requests: int = Field(
        default=50,
        validation_alias="MAX_CONCURRENT_REQUESTS",
        ge=1,
    )
    request_timeout: float = Field(
        default=300,
        validation_alias="REQUEST_TIMEOUT",
        gt=0,
        description="Deadline in seconds covering staging, transcription and inference.",
    )
    staging_dir: Optional[str] = Field(
        default=None,
        validation_alias="STAGING_DIR",
    )

    # Whisper
    whisper: WhisperConfig = Field(default_factory=WhisperConfig)

    # Ollama
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Build the process-wide settings once, on first use."""

    return Settings()

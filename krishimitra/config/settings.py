"""Configuration settings for the KrishiMitra chat service."""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Hosted model gateway (OpenAI-compatible)
    lovable_api_key: Optional[str] = Field(
        default=None,
        description="API key for the hosted model gateway (required for chat)",
    )
    gateway_base_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="Base URL of the OpenAI-compatible model gateway",
    )
    gateway_model: str = Field(
        default="google/gemini-2.5-flash",
        description="Model identifier sent to the gateway",
    )
    gateway_max_tokens: int = Field(
        default=2000, description="Maximum tokens in a generated answer"
    )
    gateway_temperature: float = Field(
        default=0.7, description="Sampling temperature for the gateway"
    )

    # Tavily web search
    tavily_api_key: Optional[str] = Field(
        default=None,
        description="Tavily API key (web search is skipped when unset)",
    )
    search_timeout_seconds: float = Field(
        default=20.0, description="Timeout for a single web search request"
    )

    # ElevenLabs speech-to-text
    elevenlabs_api_key: Optional[str] = Field(
        default=None,
        description="ElevenLabs API key (required for speech transcription)",
    )
    stt_timeout_seconds: float = Field(
        default=60.0, description="Timeout for a transcription request"
    )

    # Conversation
    history_window: int = Field(
        default=6,
        description="Number of previous conversation turns forwarded upstream",
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    environment: str = Field(
        default="development",
        description="Environment: 'development' or 'production'",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()

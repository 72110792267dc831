from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenRouter
    OPENROUTER_API_KEY: str
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"

    # LangSmith
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_PROJECT: str = "conceptmap"
    LANGCHAIN_TRACING_V2: bool = False

    # Text generation client
    GENERATION_MAX_RETRIES: int = 3
    GENERATION_RETRY_BASE_DELAY: float = 2.0
    GENERATION_MAX_CONCURRENT: int = 2
    GENERATION_RATE_LIMIT_PER_MIN: int = 60

    # Pipeline defaults
    REFINE_BY_DEFAULT: bool = True
    MAX_REFINEMENT_ITERATIONS: int = Field(default=2, ge=1)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()

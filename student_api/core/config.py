from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings for the student service."""

    model_config = SettingsConfigDict(
        env_prefix="STUDENT_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    ollama_url: str = "http://localhost:11434/api/generate"
    ollama_model: str = "llama3.2"
    # None keeps the call blocking until the generation service answers or fails
    summary_timeout_seconds: Optional[float] = None


@lru_cache()
def get_settings() -> Settings:
    return Settings()

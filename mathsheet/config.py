"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 60.0
    generation_temperature: float = 0.8
    replacement_temperature: float = 0.9

    # Generator backend: "openai" calls the LLM directly, "remote" posts to a
    # deployed /api/v1/generator endpoint.
    generator_backend: str = "openai"
    generator_service_url: str = "http://localhost:8000/api/v1/generator"
    generator_service_timeout_seconds: float = 90.0

    # Worksheet
    default_grade: str = "3학년"
    default_conceptual_count: int = 5
    default_applied_count: int = 5
    default_advanced_count: int = 0
    difficulty_count_max: int = 15
    export_filename: str = "math_problems.docx"

    # Sessions (in-memory only)
    max_sessions: int = 500
    session_idle_hours: int = 12

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Math Word Problem Worksheet Service"
    version: str = "1.0.0"

    # Rate limiting
    rate_limit_api_per_minute: int = 120       # per IP for general API
    rate_limit_generation_per_hour: int = 60   # per IP for LLM-backed endpoints
    rate_limit_enabled: bool = True

    @property
    def generator_configured(self) -> bool:
        """True when the direct OpenAI backend has a usable key."""
        key = (self.openai_api_key or "").strip()
        return bool(key and not key.startswith("sk-your-"))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Configuration management for the quiz generation service."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False

    # Provider selection (openai, gemini/google, claude/anthropic)
    ai_provider: str = "openai"

    # LLM API Keys and models
    openai_api_key: Optional[str] = None
    openai_model: Optional[str] = None
    openai_organization: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None
    claude_api_key: Optional[str] = None
    claude_model: Optional[str] = None

    # Request limits
    min_content_length: int = 50
    max_file_size: int = 10 * 1024 * 1024  # 10MB

    # HTTP
    cors_origins: List[str] = ["*"]


# Global settings instance
settings = Settings()

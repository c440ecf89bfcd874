"""Configuration management using Pydantic Settings."""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="REFVIEWERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reviewer links
    scholar_search_url: str = Field(
        "https://scholar.google.com/scholar",
        description="Literature search endpoint used for author lookup links",
    )

    # Ranking defaults
    default_top_n: Optional[int] = Field(None, ge=1, description="Rows to show by default (all if unset)")
    min_authorships: int = Field(1, ge=1)

    # Web upload limits
    max_upload_bytes: int = Field(10 * 1024 * 1024, gt=0)
    max_sessions: int = Field(256, ge=1, description="Browser sessions kept in memory")
    session_cookie: str = Field("refviewers_session")

    # Logging
    log_level: str = Field("INFO")
    log_format: str = Field("text", pattern="^(json|text)$")

    @field_validator("scholar_search_url")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        return v.strip().rstrip("?")


# Instantiate global settings
settings = Settings()

"""
Configuration settings for the exercise engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EXERCISE_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Attempt Policy
    # ========================================
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Submissions allowed before the exercise locks without full credit",
    )

    # ========================================
    # Scoring Policy
    # ========================================
    correct_first_try_score: int = Field(
        default=100,
        ge=0,
        le=100,
        description="Score for a fully correct first attempt without hints",
    )
    hint_penalty: int = Field(
        default=2,
        ge=0,
        description="Points deducted per revealed hint on a first-attempt success",
    )
    retry_partial_score: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Flat score for a correct answer reached after one or more retries",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum loguru level for the CLI sink",
    )

    # ========================================
    # Reference Collaborators (CLI only)
    # ========================================
    telemetry_dir: Path = Field(
        default=Path.home() / ".exercise_engine" / "telemetry",
        description="Directory for JSONL telemetry session files",
    )
    telemetry_rotation_mb: int = Field(
        default=10,
        ge=1,
        description="Max telemetry file size before rotation",
    )
    profile_dir: Path = Field(
        default=Path.home() / ".exercise_engine" / "profiles",
        description="Directory for per-learner profile documents",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

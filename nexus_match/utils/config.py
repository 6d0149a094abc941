"""
Configuration management for Nexus Match.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nexus_match.utils.constants import DEFAULT_SCORING_WEIGHTS, LISTING_K, PREVIEW_K


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = ROOT_DIR / "nexus_match"
DATA_DIR = ROOT_DIR / "data"


class DatabaseSettings(BaseSettings):
    """Storage configuration. MongoDB in production, in-memory for tests and demos."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    backend: Literal["mongo", "memory"] = "mongo"
    host: str = "localhost"
    port: int = 27017
    name: str = "nexus_match"
    username: str | None = None
    password: str | None = None


class MatchingSettings(BaseSettings):
    """Scoring pass configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCH_")

    preview_k: int = Field(default=PREVIEW_K, ge=1)
    listing_k: int = Field(default=LISTING_K, ge=1)
    min_score: float = Field(default=0.0, ge=0, le=1)

    # Hard wall-clock budget for one pass
    pass_timeout_ms: int = Field(default=500, ge=1)
    retry_after_seconds: float = Field(default=1.0, gt=0)

    max_workers: int = Field(default=4, ge=1)
    chunk_size: int = Field(default=32, ge=1)

    weights: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_SCORING_WEIGHTS))

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v: dict[str, float]) -> dict[str, float]:
        """Weights must cover every contribution and be non-negative."""
        missing = set(DEFAULT_SCORING_WEIGHTS) - set(v)
        if missing:
            raise ValueError(f"Missing scoring weights: {sorted(missing)}")
        if any(w < 0 for w in v.values()):
            raise ValueError("Scoring weights must be non-negative")
        return v


class SessionSettings(BaseSettings):
    """Real-time match session configuration."""

    model_config = SettingsConfigDict(env_prefix="SESSION_")

    poll_interval_seconds: float = Field(default=2.0, gt=0)
    max_idle_polls: int = Field(default=30, ge=1)


class SnapshotSettings(BaseSettings):
    """Candidate snapshot refresh configuration."""

    model_config = SettingsConfigDict(env_prefix="SNAPSHOT_")

    refresh_interval_seconds: float = Field(default=60.0, gt=0)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "nexus_match.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True
    audit_file_path: Optional[Path] = None
    audit_retention: str = "1 year"


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "Nexus Match"
    version: str = "0.1.0"
    description: str = "Trainer matching and job lifecycle core for L&D Nexus"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    snapshot: SnapshotSettings = Field(default_factory=SnapshotSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings

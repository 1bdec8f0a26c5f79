# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
recommendation engine. Settings are loaded from environment variables
with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.recommendation.struggling_threshold)
    0.7
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Learning database configuration.

    The learning database holds the course catalog, assessment history,
    engagement progress and the recommendation/learning-path tables.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        dsn: Full connection URL; overrides the components when set.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        extra="ignore",
    )

    user: str = "learnpath"
    password: SecretStr = SecretStr("learnpath_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "learnpath"
    dsn: str | None = None
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.dsn:
            return self.dsn
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL points at SQLite."""
        return self.url.startswith("sqlite")


class RecommendationSettings(BaseSettings):
    """Scoring and threshold configuration for recommendations.

    Attributes:
        struggling_threshold: Topic ratio strictly below this is struggling.
        strength_threshold: Topic ratio at or above this is a strength.
        base_score: Starting score for every candidate.
        max_score: Upper clamp for scores.
        level_match_bonus: Bonus when course level fits the learner profile.
        primary_category_bonus: Bonus per primary category on a course.
        title_match_bonus: Bonus per struggling topic found in a title.
        content_match_bonus: Bonus per struggling topic found in a body.
        rich_content_bonus: Bonus for rich content types.
        rich_content_types: Content types that earn the rich content bonus.
        course_limit: Default number of course recommendations.
        content_limit: Default number of content recommendations.
        read_limit: Default number of recommendations returned by reads.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECOMMENDATION_",
        extra="ignore",
    )

    struggling_threshold: float = Field(default=0.70, gt=0.0, le=1.0)
    strength_threshold: float = Field(default=0.80, gt=0.0, le=1.0)
    base_score: int = 50
    max_score: int = 100
    level_match_bonus: int = 10
    primary_category_bonus: int = 5
    title_match_bonus: int = 10
    content_match_bonus: int = 5
    rich_content_bonus: int = 10
    rich_content_types: list[str] = ["interactive", "video", "h5p"]
    course_limit: int = Field(default=5, ge=1)
    content_limit: int = Field(default=5, ge=1)
    read_limit: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def validate_thresholds(self) -> Self:
        """Ensure a topic cannot be both struggling and a strength.

        Raises:
            ValueError: If the strength threshold is below the struggling one.
        """
        if self.strength_threshold < self.struggling_threshold:
            raise ValueError(
                "strength_threshold must be greater than or equal to struggling_threshold"
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Learning database settings.
        recommendation: Recommendation scoring settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    recommendation: RecommendationSettings = Field(default_factory=RecommendationSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with the default password.
        """
        if self.environment == "production" and not self.database.dsn:
            if self.database.password.get_secret_value() == "learnpath_password":
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DATABASE_PASSWORD environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()

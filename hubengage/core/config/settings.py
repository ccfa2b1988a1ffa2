# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for hubengage.
Settings are loaded from environment variables with sensible defaults.
The defaults reproduce the production cadence of the ambient schedulers,
so most deployments only need to set the backend and feed URLs.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from hubengage.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.notifications.visible_seconds
    10.0
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis configuration for the session and persistent stores.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Optional Redis password.
        database: Redis database number.
        socket_timeout: Socket timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    database: int = 0
    socket_timeout: float = 2.0

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        if self.password is not None:
            pwd = self.password.get_secret_value()
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class SessionStoreSettings(BaseSettings):
    """Key-value store configuration.

    The session store holds everything that must survive navigation
    within one browsing session but not a restart (feed cache, dismissal
    counter, pool order). The persistent store holds cross-session
    feedback bookkeeping.

    Attributes:
        backend: "memory" for in-process dicts, "redis" for shared storage.
        session_ttl_seconds: Expiry refreshed on every session-store write.
        key_prefix: Namespace prefix for all keys.
    """

    model_config = SettingsConfigDict(
        env_prefix="SESSION_STORE_",
        extra="ignore",
    )

    backend: Literal["memory", "redis"] = "memory"
    session_ttl_seconds: int = 43200
    key_prefix: str = "hubengage"


class BackendSettings(BaseSettings):
    """Managed database (PostgREST-style) backend configuration.

    Attributes:
        url: Base URL of the backend project.
        api_key: Anon/service key sent as ``apikey`` and bearer token.
        timeout: Request timeout in seconds.
        activity_log_table: Table receiving feedback and Moment Mode notes.
        hard_day_rpc: Database function incrementing the hard day counter.
    """

    model_config = SettingsConfigDict(
        env_prefix="BACKEND_",
        extra="ignore",
    )

    url: str = "http://localhost:54321"
    api_key: SecretStr = SecretStr("")
    timeout: float = 10.0
    activity_log_table: str = "hub_activity_log"
    hard_day_rpc: str = "increment_hard_day_count"

    @property
    def rest_url(self) -> str:
        """Build the REST endpoint root."""
        return f"{self.url.rstrip('/')}/rest/v1"

    @property
    def auth_headers(self) -> dict[str, str]:
        """Build authentication headers for API requests."""
        key = self.api_key.get_secret_value()
        if not key:
            return {}
        return {
            "apikey": key,
            "Authorization": f"Bearer {key}",
        }


class MessageFeedSettings(BaseSettings):
    """Remote CSV feed supplying social-proof messages.

    Attributes:
        url: Published spreadsheet CSV endpoint.
        cache_ttl_seconds: Freshness window of the session-cached copy.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="MESSAGE_FEED_",
        extra="ignore",
    )

    url: str = "https://docs.google.com/spreadsheets/d/e/social-proof/pub?output=csv"
    cache_ttl_seconds: int = 3600
    timeout: float = 10.0


class NotificationSettings(BaseSettings):
    """Social-proof notification scheduler configuration.

    All delays are in seconds and drawn uniformly from [min, max].

    Attributes:
        initial_delay_min: Lower bound before the very first message.
        initial_delay_max: Upper bound before the very first message.
        delay_min: Lower bound between regular messages.
        delay_max: Upper bound between regular messages.
        burst_probability: Chance that a regular message flags a burst follow-up.
        burst_delay_min: Lower bound before a burst follow-up.
        burst_delay_max: Upper bound before a burst follow-up.
        visible_seconds: Fixed visible lifetime of each message.
        dismissal_cap: Manual dismissals allowed per session.
        gated_route_prefixes: Path prefixes where the scheduler never mounts.
        gated_route_patterns: Glob patterns where the scheduler never mounts.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATIONS_",
        extra="ignore",
    )

    initial_delay_min: float = 2.0
    initial_delay_max: float = 5.0
    delay_min: float = 6.0
    delay_max: float = 20.0
    burst_probability: float = 0.3
    burst_delay_min: float = 1.0
    burst_delay_max: float = 3.0
    visible_seconds: float = 10.0
    dismissal_cap: int = 3
    gated_route_prefixes: list[str] = [
        "/admin",
        "/tdi-admin",
        "/creator-portal",
        "/partner-setup",
        "/hub",
        "/partners",
    ]
    gated_route_patterns: list[str] = [
        "/*-dashboard",
        "/*-dashboard/*",
    ]

    @model_validator(mode="after")
    def validate_ranges(self) -> Self:
        """Validate delay ranges and the burst probability.

        Raises:
            ValueError: If a range is inverted or negative, or the
                probability lies outside [0, 1].
        """
        ranges = {
            "initial_delay": (self.initial_delay_min, self.initial_delay_max),
            "delay": (self.delay_min, self.delay_max),
            "burst_delay": (self.burst_delay_min, self.burst_delay_max),
        }
        for name, (low, high) in ranges.items():
            if low < 0 or low > high:
                raise ValueError(f"{name} range must satisfy 0 <= min <= max, got [{low}, {high}]")
        if not 0.0 <= self.burst_probability <= 1.0:
            raise ValueError("burst_probability must be between 0 and 1")
        if self.visible_seconds <= 0:
            raise ValueError("visible_seconds must be positive")
        return self


class FeedbackSettings(BaseSettings):
    """Feedback prompt scheduler and policy configuration.

    Attributes:
        lesson_delay_seconds: Delay before a prompt after lesson completion.
        general_delay_seconds: Delay before a prompt in general browsing.
        thank_you_seconds: How long the thank-you state stays up.
        min_sessions: Sessions required before any prompt appears.
        weekly_prompt_cap: Prompts allowed in a rolling 7-day window.
        course_feedback_weekly_cap: Course prompts allowed in the window.
        feature_request_min_sessions: Sessions required for feature requests.
        course_comment_max: Maximum course feedback comment length.
        satisfaction_comment_max: Maximum satisfaction comment length.
        feature_request_max: Maximum feature request length.
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_",
        extra="ignore",
    )

    lesson_delay_seconds: float = 2.0
    general_delay_seconds: float = 5.0
    thank_you_seconds: float = 1.5
    min_sessions: int = 2
    weekly_prompt_cap: int = 3
    course_feedback_weekly_cap: int = 2
    feature_request_min_sessions: int = 5
    course_comment_max: int = 300
    satisfaction_comment_max: int = 300
    feature_request_max: int = 500


class MomentModeSettings(BaseSettings):
    """Moment Mode overlay configuration.

    Attributes:
        session_seconds: Soft budget before the "need more time?" nudge.
        breathing_phase_seconds: Length of each box breathing phase.
        breathing_cycles: Full cycles before the exercise completes.
        note_max_length: Maximum length of a "send a note" message.
        affirmations_url: Optional JSON feed of affirmations.
        affirmations_timeout: Request timeout for the affirmations feed.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOMENT_",
        extra="ignore",
    )

    session_seconds: int = 180
    breathing_phase_seconds: int = 4
    breathing_cycles: int = 6
    note_max_length: int = 500
    affirmations_url: str | None = None
    affirmations_timeout: float = 5.0


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        redis: Redis settings.
        session_store: Key-value store settings.
        backend: Managed database backend settings.
        message_feed: Social-proof feed settings.
        notifications: Notification scheduler settings.
        feedback: Feedback prompt settings.
        moment: Moment Mode settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    redis: RedisSettings = Field(default_factory=RedisSettings)
    session_store: SessionStoreSettings = Field(default_factory=SessionStoreSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    message_feed: MessageFeedSettings = Field(default_factory=MessageFeedSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    feedback: FeedbackSettings = Field(default_factory=FeedbackSettings)
    moment: MomentModeSettings = Field(default_factory=MomentModeSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with the in-process store,
                which cannot be shared between worker processes.
        """
        if self.environment == "production" and self.session_store.backend == "memory":
            raise ValueError(
                "Session store backend must be 'redis' in production. "
                "Set SESSION_STORE_BACKEND=redis."
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

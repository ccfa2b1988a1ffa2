# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hubengage.core.config.settings import (
    BackendSettings,
    FeedbackSettings,
    MessageFeedSettings,
    MomentModeSettings,
    NotificationSettings,
    RedisSettings,
    SessionStoreSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestRedisSettings:
    """Tests for RedisSettings."""

    def test_default_url(self) -> None:
        """Test URL without password."""
        settings = RedisSettings()

        assert settings.url == "redis://localhost:6379/0"

    def test_url_with_password(self) -> None:
        """Test URL property includes the password."""
        settings = RedisSettings(
            host="cache.example.com",
            port=6380,
            password="secret",  # type: ignore[arg-type]
            database=2,
        )

        assert settings.url == "redis://:secret@cache.example.com:6380/2"


class TestSessionStoreSettings:
    """Tests for SessionStoreSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        settings = SessionStoreSettings()

        assert settings.backend == "memory"
        assert settings.session_ttl_seconds == 43200
        assert settings.key_prefix == "hubengage"

    def test_loads_from_environment(self) -> None:
        """Test that settings load from environment variables."""
        with patch.dict(os.environ, {"SESSION_STORE_BACKEND": "redis"}, clear=False):
            settings = SessionStoreSettings()

        assert settings.backend == "redis"


class TestBackendSettings:
    """Tests for BackendSettings."""

    def test_rest_url_strips_trailing_slash(self) -> None:
        """Test REST root is built from the project URL."""
        settings = BackendSettings(url="https://project.example.co/")

        assert settings.rest_url == "https://project.example.co/rest/v1"

    def test_auth_headers_empty_without_key(self) -> None:
        """Test no auth headers are sent without an API key."""
        assert BackendSettings().auth_headers == {}

    def test_auth_headers_with_key(self) -> None:
        """Test API key is sent as apikey and bearer token."""
        settings = BackendSettings(api_key="anon-key")  # type: ignore[arg-type]

        assert settings.auth_headers == {
            "apikey": "anon-key",
            "Authorization": "Bearer anon-key",
        }


class TestNotificationSettings:
    """Tests for NotificationSettings."""

    def test_default_cadence(self) -> None:
        """Test defaults match the production cadence."""
        settings = NotificationSettings()

        assert (settings.initial_delay_min, settings.initial_delay_max) == (2.0, 5.0)
        assert (settings.delay_min, settings.delay_max) == (6.0, 20.0)
        assert (settings.burst_delay_min, settings.burst_delay_max) == (1.0, 3.0)
        assert settings.burst_probability == 0.3
        assert settings.visible_seconds == 10.0
        assert settings.dismissal_cap == 3
        assert "/hub" in settings.gated_route_prefixes

    def test_inverted_range_rejected(self) -> None:
        """Test min > max raises a validation error."""
        with pytest.raises(ValidationError, match="delay range"):
            NotificationSettings(delay_min=30.0, delay_max=20.0)

    def test_probability_out_of_range_rejected(self) -> None:
        """Test burst probability outside [0, 1] is rejected."""
        with pytest.raises(ValidationError, match="burst_probability"):
            NotificationSettings(burst_probability=1.5)

    def test_non_positive_lifetime_rejected(self) -> None:
        """Test visible lifetime must be positive."""
        with pytest.raises(ValidationError, match="visible_seconds"):
            NotificationSettings(visible_seconds=0)

    def test_loads_from_environment(self) -> None:
        """Test that settings load from environment variables."""
        env = {
            "NOTIFICATIONS_DISMISSAL_CAP": "5",
            "NOTIFICATIONS_BURST_PROBABILITY": "0.5",
        }

        with patch.dict(os.environ, env, clear=False):
            settings = NotificationSettings()

        assert settings.dismissal_cap == 5
        assert settings.burst_probability == 0.5


class TestOtherSubsettings:
    """Tests for feed, feedback and Moment Mode defaults."""

    def test_message_feed_defaults(self) -> None:
        """Test feed cache freshness is one hour."""
        assert MessageFeedSettings().cache_ttl_seconds == 3600

    def test_feedback_defaults(self) -> None:
        """Test feedback delays and caps."""
        settings = FeedbackSettings()

        assert settings.lesson_delay_seconds == 2.0
        assert settings.general_delay_seconds == 5.0
        assert settings.thank_you_seconds == 1.5
        assert settings.min_sessions == 2
        assert settings.weekly_prompt_cap == 3
        assert settings.course_comment_max == 300
        assert settings.feature_request_max == 500

    def test_moment_defaults(self) -> None:
        """Test Moment Mode timings."""
        settings = MomentModeSettings()

        assert settings.session_seconds == 180
        assert settings.breathing_phase_seconds == 4
        assert settings.breathing_cycles == 6
        assert settings.note_max_length == 500
        assert settings.affirmations_url is None


class TestSettings:
    """Tests for main Settings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is True
        assert settings.is_development is True
        assert settings.is_production is False

    def test_production_requires_redis_store(self) -> None:
        """Test production with the in-process store is rejected."""
        with pytest.raises(ValidationError, match="redis"):
            Settings(_env_file=None, environment="production")

    def test_production_with_redis_store(self) -> None:
        """Test production accepts the redis store backend."""
        settings = Settings(
            _env_file=None,
            environment="production",
            session_store=SessionStoreSettings(backend="redis"),
        )

        assert settings.is_production is True


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_cached_instance(self) -> None:
        """Test that get_settings returns cached instance."""
        clear_settings_cache()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_clear_cache_creates_new_instance(self) -> None:
        """Test that clearing cache creates new instance."""
        clear_settings_cache()
        settings1 = get_settings()

        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for hubengage.

Example:
    >>> from hubengage.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

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

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "RedisSettings",
    "SessionStoreSettings",
    "BackendSettings",
    "MessageFeedSettings",
    "NotificationSettings",
    "FeedbackSettings",
    "MomentModeSettings",
]

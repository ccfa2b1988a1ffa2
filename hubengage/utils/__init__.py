# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for hubengage.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from hubengage.utils.datetime import (
    ensure_utc,
    epoch_seconds,
    format_countdown,
    format_iso,
    utc_now,
)
from hubengage.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "epoch_seconds",
    "ensure_utc",
    "format_iso",
    "format_countdown",
]

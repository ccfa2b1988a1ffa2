# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Managed database backend collaborators.

Example:
    from hubengage.infrastructure.backend import ActivityLogService, BackendClient

    client = BackendClient(settings.backend)
    activity_log = ActivityLogService(client)
    await activity_log.log_moment_note(user_id, "Thank you")
"""

from hubengage.infrastructure.backend.activity_log import (
    FEEDBACK_ACTION,
    MOMENT_NOTE_ACTION,
    ActivityLogService,
)
from hubengage.infrastructure.backend.client import BackendClient
from hubengage.infrastructure.backend.exceptions import BackendError, FeedError

__all__ = [
    "ActivityLogService",
    "BackendClient",
    "BackendError",
    "FeedError",
    "FEEDBACK_ACTION",
    "MOMENT_NOTE_ACTION",
]

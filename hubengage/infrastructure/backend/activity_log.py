# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity log collaborator for the Learning Hub.

Feedback submissions and Moment Mode notes both land in the hub activity
log table as ``{user_id, action, metadata}`` rows. The hard day counter is
a database function.

Nothing here raises to callers: the ambient features must never break the
host page, so failures are logged and reported as ``False``.
"""

import logging
from typing import TYPE_CHECKING

from hubengage.infrastructure.backend.client import BackendClient
from hubengage.infrastructure.backend.exceptions import BackendError
from hubengage.utils.datetime import format_iso, utc_now

if TYPE_CHECKING:
    from hubengage.feedback.models import FeedbackData

logger = logging.getLogger(__name__)

FEEDBACK_ACTION = "feedback"
MOMENT_NOTE_ACTION = "moment_note"


class ActivityLogService:
    """Writes hub activity rows through the backend client.

    Attributes:
        table: Activity log table name.
    """

    def __init__(
        self,
        client: BackendClient,
        table: str | None = None,
        hard_day_rpc: str | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Backend client.
            table: Table name. Defaults to the backend settings value.
            hard_day_rpc: Database function name for the hard day counter.
        """
        self._client = client
        self.table = table or client.settings.activity_log_table
        self.hard_day_rpc = hard_day_rpc or client.settings.hard_day_rpc

    async def submit_feedback(self, user_id: str, data: "FeedbackData") -> bool:
        """Store one feedback submission.

        Args:
            user_id: Submitting user.
            data: Validated feedback payload.

        Returns:
            True if the row was stored.
        """
        row = {
            "user_id": user_id,
            "action": FEEDBACK_ACTION,
            "metadata": data.to_activity_metadata(format_iso(utc_now())),
        }
        try:
            await self._client.insert(self.table, row)
        except BackendError as e:
            logger.warning("Feedback submission failed for %s: %s", data.type.value, e)
            return False

        logger.info("Stored %s feedback", data.type.value)
        return True

    async def log_moment_note(self, user_id: str | None, message: str) -> bool:
        """Store a "send a note" message from the Moment Mode overlay.

        Args:
            user_id: Sending user, or None when anonymous.
            message: Note text.

        Returns:
            True if the row was stored.
        """
        row = {
            "user_id": user_id,
            "action": MOMENT_NOTE_ACTION,
            "metadata": {
                "message": message,
                "submitted_at": format_iso(utc_now()),
            },
        }
        try:
            await self._client.insert(self.table, row)
        except BackendError as e:
            logger.warning("Moment note submission failed: %s", e)
            return False

        logger.info("Stored moment note (anonymous=%s)", user_id is None)
        return True

    async def increment_hard_day_count(self) -> None:
        """Bump the user's hard day counter.

        Failures are logged and swallowed; the counter is non-critical.
        """
        try:
            await self._client.rpc(self.hard_day_rpc)
        except BackendError as e:
            logger.error("Error incrementing hard day count: %s", e)

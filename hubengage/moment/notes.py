# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""The "send a note" form under the affirmation card."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class NoteSink(Protocol):
    """Anything that can store a Moment Mode note."""

    async def log_moment_note(self, user_id: str | None, message: str) -> bool:
        ...


class MomentNoteForm:
    """Free-text note to the team, tagged with the user id or anonymous.

    After a successful send the "sent" confirmation stays until the
    overlay closes.
    """

    def __init__(self, sink: NoteSink, user_id: str | None = None, max_length: int = 500) -> None:
        """Initialize the form.

        Args:
            sink: Activity log collaborator.
            user_id: Signed-in user, or None to send anonymously.
            max_length: Maximum note length.
        """
        self._sink = sink
        self.user_id = user_id
        self.max_length = max_length
        self._text = ""
        self.sending = False
        self.sent = False

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value[: self.max_length]

    @property
    def can_submit(self) -> bool:
        return bool(self._text.strip()) and not self.sending

    async def submit(self) -> bool:
        """Send the note.

        Returns:
            True if the note was stored. On failure the text is kept.
        """
        if not self.can_submit:
            return False

        self.sending = True
        try:
            stored = await self._sink.log_moment_note(self.user_id, self._text.strip())
        finally:
            self.sending = False

        if not stored:
            logger.warning("Moment note not stored, keeping text for retry")
            return False

        self._text = ""
        self.sent = True
        return True

    def reset(self) -> None:
        self._text = ""
        self.sending = False
        self.sent = False

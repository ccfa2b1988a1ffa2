# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Journal sub-tool: a private page and an anonymous vent.

Neither tab transmits anything. Private text is never persisted; the vent
clears itself and shows a confirmation.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class JournalTab(str, Enum):
    PRIVATE = "private"
    ANONYMOUS = "anonymous"


class Journal:
    """Local-only journal state."""

    def __init__(self) -> None:
        self.tab = JournalTab.PRIVATE
        self.private_text = ""
        self.vent_text = ""
        self.vent_confirmed = False

    def select_tab(self, tab: JournalTab | str) -> None:
        self.tab = JournalTab(tab)

    def submit_vent(self) -> bool:
        """Let the vent go: clear it and confirm.

        The text is discarded, not sent anywhere.

        Returns:
            False if there was nothing to submit.
        """
        if not self.vent_text.strip():
            return False
        self.vent_text = ""
        self.vent_confirmed = True
        logger.debug("Anonymous vent released locally")
        return True

    def reset(self) -> None:
        self.tab = JournalTab.PRIVATE
        self.private_text = ""
        self.vent_text = ""
        self.vent_confirmed = False

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-session dismissal budget."""

import logging

from hubengage.infrastructure.storage.base import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

DISMISS_COUNT_KEY = "notifications.dismissals"


class DismissalBudget:
    """Counts manual dismissals for the browsing session.

    Once the count reaches the cap the visitor has said "enough" and no
    further notifications may appear in this session, across remounts.
    """

    def __init__(self, store: KeyValueStore, cap: int = 3) -> None:
        """Initialize the budget from the session store.

        Args:
            store: Session-scoped store.
            cap: Dismissals allowed before notifications stop.
        """
        self._store = store
        self.cap = cap
        try:
            self._count = store.get_int(DISMISS_COUNT_KEY)
        except StoreError as e:
            logger.warning("Could not read dismissal count: %s", e)
            self._count = 0

    @property
    def count(self) -> int:
        """Dismissals recorded this session."""
        return self._count

    @property
    def exhausted(self) -> bool:
        """True once the cap has been reached."""
        return self._count >= self.cap

    def record_dismissal(self) -> int:
        """Record one dismissal.

        Returns:
            The new count.
        """
        self._count += 1
        try:
            self._store.set(DISMISS_COUNT_KEY, str(self._count))
        except StoreError as e:
            logger.warning("Could not persist dismissal count: %s", e)
        return self._count

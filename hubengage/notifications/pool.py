# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fair, shuffled round-robin over the active messages.

The pool walks a random permutation of the messages and re-shuffles each
time it wraps, so every message appears exactly once per traversal: no
immediate repeats inside a pass, no starvation. The permutation and the
cursor are kept in the session store, so navigating (and remounting the
scheduler) continues the same traversal instead of starting over.
"""

import logging
import random

from hubengage.infrastructure.storage.base import KeyValueStore, StoreError
from hubengage.notifications.models import NotificationMessage

logger = logging.getLogger(__name__)

ORDER_KEY = "notifications.order"
CURSOR_KEY = "notifications.cursor"


class MessagePool:
    """Shuffled message pool with a persisted cursor.

    The cursor only moves through ``advance()``, which the scheduler calls
    after a message was actually shown.
    """

    def __init__(
        self,
        messages: list[NotificationMessage],
        store: KeyValueStore,
        rng: random.Random,
    ) -> None:
        """Initialize the pool.

        Args:
            messages: Active messages; must not be empty.
            store: Session-scoped store for order and cursor.
            rng: Random source used for shuffling.

        Raises:
            ValueError: If ``messages`` is empty.
        """
        if not messages:
            raise ValueError("MessagePool requires at least one message")
        self._messages = list(messages)
        self._store = store
        self._rng = rng
        self._order: list[int] = []
        self._cursor = 0
        self._restore_or_shuffle()

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def order(self) -> list[int]:
        """Current permutation of message indices."""
        return list(self._order)

    @property
    def cursor(self) -> int:
        """Position of the next message within the permutation."""
        return self._cursor

    def _restore_or_shuffle(self) -> None:
        size = len(self._messages)
        try:
            saved_order = self._store.get_json(ORDER_KEY)
            saved_cursor = self._store.get_int(CURSOR_KEY, default=-1)
        except StoreError as e:
            logger.warning("Could not restore message order: %s", e)
            saved_order, saved_cursor = None, -1

        if (
            isinstance(saved_order, list)
            and sorted(saved_order) == list(range(size))
            and 0 <= saved_cursor < size
        ):
            self._order = saved_order
            self._cursor = saved_cursor
            logger.debug("Restored message order at cursor %d/%d", saved_cursor, size)
            return

        self._order = self._shuffled(list(range(size)))
        self._cursor = 0
        self._persist(order=True)

    def _shuffled(self, indices: list[int]) -> list[int]:
        self._rng.shuffle(indices)
        return indices

    def _persist(self, order: bool) -> None:
        try:
            if order:
                self._store.set_json(ORDER_KEY, self._order)
            self._store.set(CURSOR_KEY, str(self._cursor))
        except StoreError as e:
            # The in-memory traversal stays correct; only resumption suffers
            logger.warning("Could not persist message order: %s", e)

    def peek(self) -> NotificationMessage:
        """Return the message under the cursor without consuming it."""
        return self._messages[self._order[self._cursor]]

    def advance(self) -> None:
        """Consume the current message, re-shuffling on wrap."""
        self._cursor += 1
        wrapped = self._cursor >= len(self._messages)
        if wrapped:
            self._order = self._shuffled(self._order)
            self._cursor = 0
            logger.debug("Message pool wrapped; re-shuffled %d messages", len(self._messages))
        self._persist(order=wrapped)

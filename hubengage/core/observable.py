# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Synchronous listener registry.

Schedulers and the suppression flag push state changes to listeners
(renderers, other schedulers) in the same event-loop turn as the change.
This is what lets a suppression transition hide a visible notification
without any timer delay.

Errors in individual listeners are logged but don't stop other listeners
from being notified.
"""

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Observable(Generic[T]):
    """Holds listeners and notifies them synchronously.

    Example:
        events = Observable[str]()
        unsubscribe = events.subscribe(print)
        events.publish("shown")
        unsubscribe()
    """

    def __init__(self) -> None:
        """Initialize with no listeners."""
        self._listeners: list[Listener[T]] = []

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Callable invoked with every notified value.

        Returns:
            A callable that removes the listener. Calling it twice is safe.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    @property
    def listener_count(self) -> int:
        """Number of registered listeners."""
        return len(self._listeners)

    def publish(self, value: T) -> None:
        # Iterate over a copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(
                    "Listener %r failed: %s",
                    listener,
                    str(e),
                    exc_info=True,
                )

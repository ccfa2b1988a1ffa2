# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cancellable delayed callbacks.

Every wait in the engagement core is a delayed callback on the event loop,
never a blocking sleep. ``TimerService`` is the seam: production code uses
``LoopTimers`` (``loop.call_later``), tests inject a manual clock.

``TimerGroup`` is the single place a component's timers are tracked, so
unmount, suppression and dismissal all go through one ``cancel_all()``
and no callback can fire after its owner stopped caring.
"""

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Handle returned by a timer service."""

    def cancel(self) -> None:
        """Cancel the pending callback."""
        ...


class TimerService(Protocol):
    """Schedules callbacks after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule ``callback`` to run after ``delay`` seconds."""
        ...


class LoopTimers:
    """TimerService backed by the running asyncio event loop.

    The loop is resolved lazily on each call so the service can be created
    before the loop starts (e.g. at import or settings time).
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize the timer service.

        Args:
            loop: Explicit loop to use. Defaults to the running loop.
        """
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """Schedule ``callback`` on the event loop.

        Args:
            delay: Delay in seconds.
            callback: Zero-argument callable.

        Returns:
            The asyncio timer handle.
        """
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay, 0.0), callback)


class TimerGroup:
    """Named set of pending timers owned by one component.

    Scheduling a name that is already pending replaces (and cancels) the
    previous timer, so a component can never hold two timers for the same
    purpose.

    Example:
        group = TimerGroup(LoopTimers())
        group.schedule("emit", 3.0, scheduler.emit)
        group.cancel_all()
    """

    def __init__(self, timers: TimerService) -> None:
        """Initialize the group.

        Args:
            timers: Underlying timer service.
        """
        self._timers = timers
        self._handles: dict[str, TimerHandle] = {}

    def schedule(self, name: str, delay: float, callback: Callable[[], None]) -> None:
        """Arm a named timer, replacing any pending timer of the same name.

        Args:
            name: Timer purpose, unique within the group.
            delay: Delay in seconds.
            callback: Zero-argument callable.
        """
        self.cancel(name)

        def fire() -> None:
            self._handles.pop(name, None)
            callback()

        self._handles[name] = self._timers.call_later(delay, fire)
        logger.debug("Armed timer %s for %.2fs", name, delay)

    def cancel(self, name: str) -> bool:
        """Cancel one named timer.

        Args:
            name: Timer purpose.

        Returns:
            True if a pending timer was cancelled.
        """
        handle = self._handles.pop(name, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        """Cancel every pending timer in the group."""
        for handle in self._handles.values():
            handle.cancel()
        if self._handles:
            logger.debug("Cancelled timers: %s", ", ".join(sorted(self._handles)))
        self._handles.clear()

    def is_pending(self, name: str) -> bool:
        """Check whether a named timer is armed."""
        return name in self._handles

    @property
    def pending_names(self) -> list[str]:
        """Names of all armed timers."""
        return sorted(self._handles)

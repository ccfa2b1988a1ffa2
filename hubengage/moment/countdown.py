# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Soft session budget for the Moment Mode overlay.

The countdown never closes the overlay. At zero it stops and shows a
"need more time?" nudge; the visitor can extend by a full budget or go
back to the hub.
"""

import logging
from typing import Callable

from hubengage.core.observable import Observable
from hubengage.core.timers import TimerGroup, TimerService
from hubengage.utils.datetime import format_countdown

logger = logging.getLogger(__name__)

TICK_TIMER = "tick"


class SessionCountdown:
    """One-second countdown with an expiry nudge.

    Attributes:
        seconds: Full budget in seconds.
        remaining: Seconds left.
        nudge_visible: Whether the "need more time?" nudge is showing.
    """

    def __init__(self, timers: TimerService, seconds: int = 180) -> None:
        self._timers = TimerGroup(timers)
        self.seconds = seconds
        self.remaining = seconds
        self.nudge_visible = False
        self.running = False
        self._ticks: Observable[int] = Observable()

    @property
    def display(self) -> str | None:
        """Remaining time as ``M:SS``, hidden while the nudge shows."""
        if self.nudge_visible:
            return None
        return format_countdown(self.remaining)

    def subscribe(self, listener: Callable[[int], None]) -> Callable[[], None]:
        """Register a listener receiving the remaining seconds on each tick."""
        return self._ticks.subscribe(listener)

    def start(self) -> None:
        if self.running or self.nudge_visible:
            return
        self.running = True
        self._timers.schedule(TICK_TIMER, 1.0, self._tick)

    def stop(self) -> None:
        self.running = False
        self._timers.cancel_all()

    def reset(self) -> None:
        """Stop and restore the full budget."""
        self.stop()
        self.remaining = self.seconds
        self.nudge_visible = False

    def extend(self) -> None:
        """Grant another full budget ("I need more time")."""
        self.reset()
        self.start()
        logger.debug("Moment Mode countdown extended by %ds", self.seconds)

    def _tick(self) -> None:
        if not self.running:
            return
        self.remaining = max(self.remaining - 1, 0)
        if self.remaining == 0:
            self.running = False
            self.nudge_visible = True
            logger.debug("Moment Mode countdown expired, showing nudge")
        else:
            self._timers.schedule(TICK_TIMER, 1.0, self._tick)
        self._ticks.publish(self.remaining)

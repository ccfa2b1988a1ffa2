# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Box breathing exercise.

Four phases of four seconds (inhale, hold, exhale, hold) repeated for six
cycles, then a terminal ``complete`` phase. A one-second tick drives the
per-phase counter. The circle is drawn expanded while inhaling and during
the hold that follows.
"""

import logging
from enum import Enum
from typing import Callable

from hubengage.core.observable import Observable
from hubengage.core.timers import TimerGroup, TimerService

logger = logging.getLogger(__name__)

TICK_TIMER = "tick"
TICK_SECONDS = 1.0


class BreathingPhase(str, Enum):
    """Phases of one breathing cycle."""

    INHALE = "inhale"
    HOLD1 = "hold1"
    EXHALE = "exhale"
    HOLD2 = "hold2"
    COMPLETE = "complete"


_NEXT_PHASE = {
    BreathingPhase.INHALE: BreathingPhase.HOLD1,
    BreathingPhase.HOLD1: BreathingPhase.EXHALE,
    BreathingPhase.EXHALE: BreathingPhase.HOLD2,
}

_PROMPTS = {
    BreathingPhase.INHALE: "Breathe in",
    BreathingPhase.HOLD1: "Hold",
    BreathingPhase.EXHALE: "Breathe out",
    BreathingPhase.HOLD2: "Hold",
    BreathingPhase.COMPLETE: "Well done",
}


class BreathingSession:
    """One run of the breathing exercise.

    A session is created fresh every time the breathing tool opens, so
    re-entering always starts at cycle 1, inhale.

    Attributes:
        phase: Current phase.
        cycle: Current cycle, 1-based.
        seconds_remaining: Seconds left in the current phase.
        transitions: Phase changes so far.
    """

    def __init__(
        self,
        timers: TimerService,
        phase_seconds: int = 4,
        cycles: int = 6,
    ) -> None:
        """Initialize the session.

        Args:
            timers: Timer service for the one-second tick.
            phase_seconds: Length of every phase.
            cycles: Cycles before the exercise completes.
        """
        self._timers = TimerGroup(timers)
        self.phase_seconds = phase_seconds
        self.cycles = cycles

        self.phase = BreathingPhase.INHALE
        self.cycle = 1
        self.seconds_remaining = phase_seconds
        self.transitions = 0
        self.running = False
        self._phase_changes: Observable[BreathingPhase] = Observable()

    @property
    def expanded(self) -> bool:
        """Whether the breathing circle is drawn expanded."""
        return self.phase in (BreathingPhase.INHALE, BreathingPhase.HOLD1)

    @property
    def complete(self) -> bool:
        return self.phase is BreathingPhase.COMPLETE

    @property
    def prompt(self) -> str:
        """Instruction text for the current phase."""
        return _PROMPTS[self.phase]

    def subscribe(self, listener: Callable[[BreathingPhase], None]) -> Callable[[], None]:
        """Register a listener for phase changes."""
        return self._phase_changes.subscribe(listener)

    def start(self) -> None:
        """Start ticking."""
        if self.running or self.complete:
            return
        self.running = True
        self._timers.schedule(TICK_TIMER, TICK_SECONDS, self._tick)

    def stop(self) -> None:
        """Stop ticking and keep the current position."""
        self.running = False
        self._timers.cancel_all()

    def _tick(self) -> None:
        if not self.running:
            return
        self.seconds_remaining -= 1
        if self.seconds_remaining <= 0:
            self._advance()
        if self.complete:
            self.running = False
            logger.debug("Breathing exercise complete after %d transitions", self.transitions)
            return
        self._timers.schedule(TICK_TIMER, TICK_SECONDS, self._tick)

    def _advance(self) -> None:
        if self.phase is BreathingPhase.HOLD2:
            if self.cycle >= self.cycles:
                self.phase = BreathingPhase.COMPLETE
                self.seconds_remaining = 0
            else:
                self.cycle += 1
                self.phase = BreathingPhase.INHALE
                self.seconds_remaining = self.phase_seconds
        else:
            self.phase = _NEXT_PHASE[self.phase]
            self.seconds_remaining = self.phase_seconds
        self.transitions += 1
        self._phase_changes.publish(self.phase)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Moment Mode overlay.

A full-screen "I'm having a hard day" space with four tools: box
breathing, affirmations (with a "send a note" form), gentle tools and a
journal. While it is open the shared suppression flag is raised, so no
notification or feedback prompt can appear. The overlay is the only
writer of that flag.

Top-level states: entry -> {pause, affirmation, gentle, journal} -> entry,
and closed from anywhere. Closing resets every sub-state so the next open
starts clean.
"""

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol

from hubengage.core.config.settings import MomentModeSettings
from hubengage.core.observable import Observable
from hubengage.core.suppression import SuppressionFlag
from hubengage.core.timers import TimerService
from hubengage.moment.affirmations import AffirmationDeck
from hubengage.moment.breathing import BreathingSession
from hubengage.moment.countdown import SessionCountdown
from hubengage.moment.journal import Journal
from hubengage.moment.notes import MomentNoteForm

if TYPE_CHECKING:
    from hubengage.feeds.affirmation_feed import AffirmationFeedClient

logger = logging.getLogger(__name__)

ESCAPE_KEY = "Escape"


class MomentState(str, Enum):
    """Top-level overlay states."""

    CLOSED = "closed"
    ENTRY = "entry"
    PAUSE = "pause"
    AFFIRMATION = "affirmation"
    GENTLE = "gentle"
    JOURNAL = "journal"


class MomentActivityLog(Protocol):
    """Collaborator for notes and the hard day counter."""

    async def log_moment_note(self, user_id: str | None, message: str) -> bool:
        ...

    async def increment_hard_day_count(self) -> None:
        ...


class MomentModeOverlay:
    """State machine behind the Moment Mode overlay.

    Example:
        overlay = MomentModeOverlay(flag, activity_log, LoopTimers(), settings.moment)
        await overlay.open()
        overlay.go_to(MomentState.PAUSE)
        overlay.handle_key("Escape")
    """

    def __init__(
        self,
        flag: SuppressionFlag,
        activity_log: MomentActivityLog,
        timers: TimerService,
        settings: MomentModeSettings,
        rng: random.Random | None = None,
        user_id: str | None = None,
        affirmations: list[str] | None = None,
    ) -> None:
        """Initialize the overlay (closed).

        Args:
            flag: Shared suppression flag, written only here.
            activity_log: Notes and hard day counter collaborator.
            timers: Timer service for countdown and breathing.
            settings: Moment Mode settings.
            rng: Random source for decorative choices.
            user_id: Signed-in user, or None.
            affirmations: Initial affirmations; built-ins when empty.
        """
        self._flag = flag
        self._activity_log = activity_log
        self._timers = timers
        self.settings = settings
        self.user_id = user_id

        self.state = MomentState.CLOSED
        self.countdown = SessionCountdown(timers, settings.session_seconds)
        self.deck = AffirmationDeck(affirmations, rng)
        self.note_form = MomentNoteForm(activity_log, user_id, settings.note_max_length)
        self.journal = Journal()
        self.breathing: BreathingSession | None = None

        self._hard_day_counted = False
        self._state_changes: Observable[MomentState] = Observable()

    @property
    def is_open(self) -> bool:
        return self.state is not MomentState.CLOSED

    def subscribe(self, listener: Callable[[MomentState], None]) -> Callable[[], None]:
        """Register a listener for top-level state changes."""
        return self._state_changes.subscribe(listener)

    # =========================================================================
    # Open / close
    # =========================================================================

    async def open(self) -> None:
        """Open the overlay, raising suppression and starting the countdown."""
        if self.is_open:
            return

        self._set_state(MomentState.ENTRY)
        self._flag.set_active(True)
        self.countdown.start()
        logger.info("Moment Mode opened")

        if not self._hard_day_counted:
            self._hard_day_counted = True
            await self._activity_log.increment_hard_day_count()

    def close(self) -> None:
        """Close from any state and reset everything."""
        if not self.is_open:
            return

        self._stop_breathing()
        self.countdown.reset()
        self.note_form.reset()
        self.journal.reset()
        self.deck.reset()
        self._hard_day_counted = False

        self._set_state(MomentState.CLOSED)
        self._flag.set_active(False)
        logger.info("Moment Mode closed")

    def handle_key(self, key: str) -> bool:
        """Handle a key press.

        Returns:
            True if the key closed the overlay.
        """
        if key != ESCAPE_KEY or not self.is_open:
            return False
        self.close()
        return True

    def need_more_time(self) -> None:
        """Nudge answer: grant another full countdown."""
        if self.is_open:
            self.countdown.extend()

    def back_to_hub(self) -> None:
        """Nudge answer: leave Moment Mode."""
        self.close()

    # =========================================================================
    # Navigation
    # =========================================================================

    def go_to(self, state: MomentState | str) -> bool:
        """Move to another top-level state.

        Args:
            state: Target state; ``closed`` closes the overlay.

        Returns:
            True if the state changed.
        """
        target = MomentState(state)
        if not self.is_open or target is self.state:
            return False
        if target is MomentState.CLOSED:
            self.close()
            return True

        if self.state is MomentState.PAUSE:
            self._stop_breathing()
        if target is MomentState.PAUSE:
            # Fresh session: re-entering always restarts at cycle 1
            self.breathing = BreathingSession(
                self._timers,
                self.settings.breathing_phase_seconds,
                self.settings.breathing_cycles,
            )
            self.breathing.start()

        self._set_state(target)
        return True

    def back(self) -> bool:
        """Return to the entry screen."""
        return self.go_to(MomentState.ENTRY)

    # =========================================================================
    # Content
    # =========================================================================

    async def submit_note(self) -> bool:
        """Send the note typed under the affirmation card."""
        return await self.note_form.submit()

    async def load_affirmations(self, client: "AffirmationFeedClient") -> int:
        """Refresh the deck from the affirmations feed.

        Returns:
            Number of affirmations in the deck afterwards.
        """
        affirmations = await client.fetch_affirmations()
        self.deck.replace(affirmations)
        logger.debug(
            "Affirmation deck holds %d entries (built-ins=%s)",
            len(self.deck),
            self.deck.using_defaults,
        )
        return len(self.deck)

    def _stop_breathing(self) -> None:
        if self.breathing is not None:
            self.breathing.stop()
            self.breathing = None

    def _set_state(self, state: MomentState) -> None:
        self.state = state
        self._state_changes.publish(state)

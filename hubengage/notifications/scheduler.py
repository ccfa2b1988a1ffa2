# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Social-proof notification scheduler.

Shows short messages one at a time at irregular intervals on public pages:

- the first message appears after U[2s, 5s], later ones after U[6s, 20s]
- each message stays visible for 10s unless dismissed
- after a regular message, with probability 0.3, the next one follows
  quickly (U[1s, 3s]); a follow-up never triggers another burst
- three manual dismissals end notifications for the session
- while Moment Mode suppression is active nothing is shown or scheduled

All waiting happens in named timers on a ``TimerGroup``; every stop path
goes through ``cancel_all()`` so no callback fires after the scheduler
stopped caring.
"""

import logging
import random
from typing import Callable, Protocol

from hubengage.core.config.settings import NotificationSettings
from hubengage.core.observable import Observable
from hubengage.core.suppression import SuppressionFlag
from hubengage.core.timers import TimerGroup, TimerService
from hubengage.infrastructure.storage.base import KeyValueStore
from hubengage.notifications.budget import DismissalBudget
from hubengage.notifications.models import (
    NotificationEvent,
    NotificationEventKind,
    NotificationMessage,
    SchedulerPhase,
)
from hubengage.notifications.pool import MessagePool

logger = logging.getLogger(__name__)

EMIT_TIMER = "emit"
HIDE_TIMER = "hide"


class MessageSource(Protocol):
    """Anything that can supply the active messages."""

    async def fetch_messages(self) -> list[NotificationMessage]:
        """Return active messages, empty on failure."""
        ...


class NotificationScheduler:
    """State machine driving one mounted notification bubble.

    One instance corresponds to one mount. Once stopped, dormant or
    exhausted it never shows anything again; the host mounts a fresh
    instance when the visitor comes back to an eligible route.

    Example:
        scheduler = NotificationScheduler(feed, flag, store, settings, LoopTimers())
        scheduler.subscribe(renderer.on_event)
        await scheduler.start()
    """

    def __init__(
        self,
        feed: MessageSource,
        flag: SuppressionFlag,
        store: KeyValueStore,
        settings: NotificationSettings,
        timers: TimerService,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            feed: Message source (usually a MessageFeedClient).
            flag: Shared suppression flag.
            store: Session-scoped store for pool and budget state.
            settings: Timing and cap configuration.
            timers: Timer service.
            rng: Random source for delays, bursts and shuffling.
        """
        self._feed = feed
        self._flag = flag
        self._store = store
        self.settings = settings
        self._timers = TimerGroup(timers)
        self._rng = rng or random.Random()

        self.budget = DismissalBudget(store, settings.dismissal_cap)
        self.pool: MessagePool | None = None

        self._phase = SchedulerPhase.IDLE
        self._visible: NotificationMessage | None = None
        self._visible_is_burst = False
        self._burst_pending = False
        self._next_is_burst = False
        self._events: Observable[NotificationEvent] = Observable()
        self._unsubscribe_flag: Callable[[], None] | None = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def phase(self) -> SchedulerPhase:
        """Current lifecycle phase."""
        return self._phase

    @property
    def visible_message(self) -> NotificationMessage | None:
        """Message currently on screen, if any."""
        return self._visible

    @property
    def visible_is_burst(self) -> bool:
        """Whether the visible message is a burst follow-up."""
        return self._visible_is_burst

    @property
    def burst_pending(self) -> bool:
        """Whether the next emission will follow after a short delay."""
        return self._burst_pending

    @property
    def pending_timers(self) -> list[str]:
        """Names of armed timers."""
        return self._timers.pending_names

    def subscribe(self, listener: Callable[[NotificationEvent], None]) -> Callable[[], None]:
        """Register a renderer for shown/hidden events.

        Args:
            listener: Callable receiving NotificationEvent instances.

        Returns:
            Unsubscribe callable.
        """
        return self._events.subscribe(listener)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Mount the scheduler: load the feed and arm the first emission."""
        if self._phase is not SchedulerPhase.IDLE:
            logger.debug("Scheduler already started (phase=%s)", self._phase.value)
            return

        self._unsubscribe_flag = self._flag.subscribe(self._on_suppression_changed)

        if self.budget.exhausted:
            logger.info("Dismissal budget spent (%d), notifications off", self.budget.count)
            self._phase = SchedulerPhase.EXHAUSTED
            return

        if self._flag.is_active:
            self._go_dormant("suppressed at mount")
            return

        self._phase = SchedulerPhase.LOADING
        try:
            messages = await self._feed.fetch_messages()
        except Exception as e:
            logger.error("Message feed failed, notifications off: %s", str(e), exc_info=True)
            messages = []

        # Stopped or suppressed while the feed was loading
        if self._phase is not SchedulerPhase.LOADING:
            logger.debug("Feed loaded after scheduler left LOADING, not arming")
            return

        if not messages:
            self._go_dormant("no active messages")
            return

        self.pool = MessagePool(messages, self._store, self._rng)
        delay = self._rng.uniform(
            self.settings.initial_delay_min,
            self.settings.initial_delay_max,
        )
        self._arm_emit(delay)
        logger.info("Notification scheduler started with %d messages", len(self.pool))

    def stop(self) -> None:
        """Unmount: cancel every timer and detach from the flag."""
        if self._phase is SchedulerPhase.UNMOUNTED:
            return
        self._timers.cancel_all()
        self._hide("unmounted")
        if self._unsubscribe_flag is not None:
            self._unsubscribe_flag()
            self._unsubscribe_flag = None
        self._burst_pending = False
        self._next_is_burst = False
        self._phase = SchedulerPhase.UNMOUNTED
        logger.info("Notification scheduler stopped")

    def dismiss(self) -> bool:
        """Close the visible message at the visitor's request.

        Returns:
            True if a visible message was dismissed.
        """
        if self._phase is not SchedulerPhase.VISIBLE:
            return False

        self._timers.cancel_all()
        self._hide("dismissed")
        self._burst_pending = False
        self._next_is_burst = False

        count = self.budget.record_dismissal()
        if self.budget.exhausted:
            self._phase = SchedulerPhase.EXHAUSTED
            logger.info("Dismissal cap reached (%d), notifications off for session", count)
            return True

        self._arm_emit(self._regular_delay())
        return True

    # =========================================================================
    # Timer callbacks
    # =========================================================================

    def _emit(self) -> None:
        if self._phase is not SchedulerPhase.WAITING:
            return
        if self._flag.is_active:
            self._go_dormant("suppressed at emission")
            return
        if self.budget.exhausted:
            self._phase = SchedulerPhase.EXHAUSTED
            return
        if self.pool is None or self._visible is not None:
            logger.warning("Emission skipped: scheduler state inconsistent")
            return

        message = self.pool.peek()
        self.pool.advance()

        is_burst = self._next_is_burst
        self._next_is_burst = False
        if not is_burst and self._rng.random() < self.settings.burst_probability:
            self._burst_pending = True

        self._visible = message
        self._visible_is_burst = is_burst
        self._phase = SchedulerPhase.VISIBLE
        self._timers.schedule(HIDE_TIMER, self.settings.visible_seconds, self._on_lifetime_end)

        logger.debug("Showing notification (burst=%s): %s", is_burst, message.text)
        self._events.publish(
            NotificationEvent(NotificationEventKind.SHOWN, message, burst=is_burst)
        )

    def _on_lifetime_end(self) -> None:
        if self._phase is not SchedulerPhase.VISIBLE:
            return
        self._hide("expired")

        if self._burst_pending:
            self._burst_pending = False
            self._next_is_burst = True
            delay = self._rng.uniform(
                self.settings.burst_delay_min,
                self.settings.burst_delay_max,
            )
        else:
            delay = self._regular_delay()
        self._arm_emit(delay)

    def _on_suppression_changed(self, active: bool) -> None:
        if not active:
            # Dormant instances stay dormant until remounted
            return
        if self._phase in (
            SchedulerPhase.UNMOUNTED,
            SchedulerPhase.EXHAUSTED,
            SchedulerPhase.DORMANT,
        ):
            return
        self._timers.cancel_all()
        self._hide("suppressed")
        self._go_dormant("Moment Mode opened")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _regular_delay(self) -> float:
        return self._rng.uniform(self.settings.delay_min, self.settings.delay_max)

    def _arm_emit(self, delay: float) -> None:
        self._phase = SchedulerPhase.WAITING
        self._timers.schedule(EMIT_TIMER, delay, self._emit)

    def _hide(self, reason: str) -> None:
        if self._visible is None:
            return
        message, was_burst = self._visible, self._visible_is_burst
        self._visible = None
        self._visible_is_burst = False
        self._events.publish(
            NotificationEvent(
                NotificationEventKind.HIDDEN,
                message,
                burst=was_burst,
                reason=reason,
            )
        )

    def _go_dormant(self, reason: str) -> None:
        self._timers.cancel_all()
        self._burst_pending = False
        self._next_is_burst = False
        self._phase = SchedulerPhase.DORMANT
        logger.info("Notification scheduler dormant: %s", reason)

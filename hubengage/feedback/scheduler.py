# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Feedback prompt scheduler.

Shows at most one small feedback card, a short delay after a trigger
(2s after finishing a lesson, 5s while browsing), when the policy allows.
Moment Mode suppression blocks new prompts, hides an open one and cancels
a pending one; a trigger that was pending when suppression started is
requested again once it clears, going through the full policy check.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from hubengage.core.config.settings import FeedbackSettings
from hubengage.core.observable import Observable
from hubengage.core.suppression import SuppressionFlag
from hubengage.core.timers import TimerGroup, TimerService
from hubengage.feedback.forms import FeedbackForm, FormIncompleteError, build_form
from hubengage.feedback.models import (
    FeedbackData,
    FeedbackDecision,
    FeedbackType,
    LessonContext,
    PromptEvent,
)
from hubengage.feedback.policy import FeedbackPolicy

logger = logging.getLogger(__name__)

SHOW_TIMER = "show"
THANK_YOU_TIMER = "thank_you"


class FeedbackSubmitter(Protocol):
    """Anything that can store a feedback submission."""

    async def submit_feedback(self, user_id: str, data: FeedbackData) -> bool:
        """Store feedback; return False on failure."""
        ...


@dataclass(frozen=True)
class _Trigger:
    lesson: LessonContext | None
    decision: FeedbackDecision | None = None


class FeedbackPromptScheduler:
    """Decides when the feedback card appears and handles its submission.

    Example:
        scheduler = FeedbackPromptScheduler(policy, activity_log, flag, timers, settings, user_id)
        scheduler.mount()
        scheduler.request_prompt(LessonContext("lesson-1", "course-1"))
    """

    def __init__(
        self,
        policy: FeedbackPolicy,
        submitter: FeedbackSubmitter,
        flag: SuppressionFlag,
        timers: TimerService,
        settings: FeedbackSettings,
        user_id: str | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            policy: Eligibility and variant policy.
            submitter: Feedback sink (usually the ActivityLogService).
            flag: Shared suppression flag.
            timers: Timer service.
            settings: Delays and limits.
            user_id: Signed-in user; prompts need one.
        """
        self.policy = policy
        self._submitter = submitter
        self._flag = flag
        self._timers = TimerGroup(timers)
        self.settings = settings
        self.user_id = user_id

        self.mounted = False
        self.visible = False
        self.submitting = False
        self.submitted = False
        self.decision: FeedbackDecision | None = None
        self.form: FeedbackForm | None = None

        self._pending: _Trigger | None = None
        self._remembered: _Trigger | None = None
        self._events: Observable[PromptEvent] = Observable()
        self._unsubscribe_flag: Callable[[], None] | None = None

    @property
    def feedback_type(self) -> FeedbackType | None:
        """Variant of the open prompt."""
        return self.decision.type if self.decision else None

    @property
    def prompt_pending(self) -> bool:
        """Whether a prompt is armed but not yet shown."""
        return self._timers.is_pending(SHOW_TIMER)

    @property
    def has_remembered_trigger(self) -> bool:
        """Whether a trigger waits for suppression to clear."""
        return self._remembered is not None

    def subscribe(self, listener: Callable[[PromptEvent], None]) -> Callable[[], None]:
        """Register a renderer for prompt state changes."""
        return self._events.subscribe(listener)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def mount(self) -> None:
        """Count the session and start listening to the suppression flag."""
        if self.mounted:
            return
        self.mounted = True
        sessions = self.policy.record_session()
        self._unsubscribe_flag = self._flag.subscribe(self._on_suppression_changed)
        logger.debug("Feedback scheduler mounted (session %d)", sessions)

    def unmount(self) -> None:
        """Cancel timers, forget triggers and detach from the flag."""
        if not self.mounted:
            return
        self._timers.cancel_all()
        self._close()
        self._pending = None
        self._remembered = None
        if self._unsubscribe_flag is not None:
            self._unsubscribe_flag()
            self._unsubscribe_flag = None
        self.mounted = False
        logger.debug("Feedback scheduler unmounted")

    # =========================================================================
    # Triggers
    # =========================================================================

    def request_prompt(self, lesson: LessonContext | None = None) -> bool:
        """Ask for a prompt after a trigger.

        Args:
            lesson: The lesson just completed, for lesson triggers.

        Returns:
            True if a prompt was armed.
        """
        if not self.mounted or not self.user_id:
            return False
        if self._flag.is_active:
            # Re-run once Moment Mode closes
            self._remembered = _Trigger(lesson)
            return False
        if self.visible or self.prompt_pending:
            return False
        if not self.policy.can_show(self._flag.is_active):
            return False

        decision = self.policy.next_decision(lesson)
        if decision is None:
            return False

        self._pending = _Trigger(lesson, decision)
        delay = (
            self.settings.lesson_delay_seconds
            if lesson is not None
            else self.settings.general_delay_seconds
        )
        self._timers.schedule(SHOW_TIMER, delay, self._show)
        logger.debug("Feedback prompt %s armed in %.1fs", decision.type.value, delay)
        return True

    def _show(self) -> None:
        trigger, self._pending = self._pending, None
        if trigger is None or trigger.decision is None:
            return
        if self._flag.is_active:
            self._remembered = _Trigger(trigger.lesson)
            return

        decision = trigger.decision
        self.policy.record_shown(decision.type)
        self.decision = decision
        self.form = build_form(decision, self.settings)
        self.submitted = False
        self.visible = True
        logger.info("Showing %s prompt", decision.type.value)
        self._events.publish(PromptEvent.SHOWN)

    def _on_suppression_changed(self, active: bool) -> None:
        if active:
            if self._pending is not None:
                self._remembered = _Trigger(self._pending.lesson)
                self._pending = None
            self._timers.cancel_all()
            self._close()
            return

        remembered, self._remembered = self._remembered, None
        if remembered is not None:
            logger.debug("Suppression cleared, re-requesting feedback prompt")
            self.request_prompt(remembered.lesson)

    # =========================================================================
    # User actions
    # =========================================================================

    async def submit(self) -> bool:
        """Submit the open form.

        Returns:
            True if the feedback was stored. On False the prompt stays
            open with its input intact so the visitor can retry.

        Raises:
            FormIncompleteError: If no prompt is open or the form is incomplete.
        """
        if not self.visible or self.form is None or self.decision is None:
            raise FormIncompleteError("No feedback prompt is open")
        if self.submitting or self.submitted:
            return False

        payload = self.form.build_payload(self.decision)
        self.submitting = True
        try:
            stored = await self._submitter.submit_feedback(self.user_id or "", payload)
        finally:
            self.submitting = False

        if not stored:
            logger.warning("Feedback not stored, prompt stays open for retry")
            return False

        if not self.visible:
            # Closed while the request was in flight
            return True

        self.submitted = True
        self._events.publish(PromptEvent.SUBMITTED)
        self._timers.schedule(THANK_YOU_TIMER, self.settings.thank_you_seconds, self._close)
        return True

    def dismiss(self) -> bool:
        """Close the prompt without submitting (skip, not now, maybe later).

        Returns:
            True if an open prompt was closed.
        """
        if not self.visible:
            return False
        self._timers.cancel(THANK_YOU_TIMER)
        self._close()
        return True

    def _close(self) -> None:
        if not self.visible:
            return
        self.visible = False
        self.submitted = False
        self.decision = None
        self.form = None
        self._events.publish(PromptEvent.HIDDEN)

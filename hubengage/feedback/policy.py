# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Feedback prompt eligibility and variant selection.

Prompts are rationed so they never feel naggy:
- never during Moment Mode
- never before the visitor's second session
- at most one prompt per session
- at most three prompts in any rolling seven days

The variant is picked by recency: course feedback right after a lesson
(at most twice a week), a feature request for visitors with five or more
sessions (once a week), general satisfaction otherwise, and the least
shown variant when everything has had its turn.

Weekly records and the session counter live in the persistent store; the
"already shown this session" mark lives in the session store.
"""

import logging
from typing import Any, Callable

from hubengage.core.config.settings import FeedbackSettings
from hubengage.feedback.models import FeedbackDecision, FeedbackType, LessonContext
from hubengage.infrastructure.storage.base import KeyValueStore, StoreError
from hubengage.utils.datetime import epoch_seconds

logger = logging.getLogger(__name__)

PROMPTS_KEY = "feedback.prompts"
SESSION_COUNT_KEY = "feedback.session_count"
SHOWN_THIS_SESSION_KEY = "feedback.shown_this_session"

WEEK_SECONDS = 7 * 24 * 60 * 60


class FeedbackPolicy:
    """Decides whether and which feedback prompt may be shown."""

    def __init__(
        self,
        persistent_store: KeyValueStore,
        session_store: KeyValueStore,
        settings: FeedbackSettings,
        clock: Callable[[], float] = epoch_seconds,
    ) -> None:
        """Initialize the policy.

        Args:
            persistent_store: Cross-session store for the user.
            session_store: Store for the current browsing session.
            settings: Caps and thresholds.
            clock: Returns the current time in epoch seconds.
        """
        self._persistent = persistent_store
        self._session = session_store
        self.settings = settings
        self._clock = clock

    # =========================================================================
    # Bookkeeping
    # =========================================================================

    @property
    def session_count(self) -> int:
        """Sessions recorded for this visitor."""
        try:
            return self._persistent.get_int(SESSION_COUNT_KEY)
        except StoreError as e:
            logger.warning("Could not read session count: %s", e)
            return 0

    def record_session(self) -> int:
        """Count one more session. Call once per mount.

        Returns:
            The new session count.
        """
        count = self.session_count + 1
        try:
            self._persistent.set(SESSION_COUNT_KEY, str(count))
        except StoreError as e:
            logger.warning("Could not record session: %s", e)
        return count

    def weekly_prompts(self) -> list[dict[str, Any]]:
        """Prompt records from the last seven days.

        Returns:
            List of ``{"timestamp": float, "type": str}`` records.
        """
        try:
            records = self._persistent.get_json(PROMPTS_KEY)
        except StoreError as e:
            logger.warning("Could not read prompt history: %s", e)
            return []
        if not isinstance(records, list):
            return []

        cutoff = self._clock() - WEEK_SECONDS
        recent = []
        for record in records:
            if not isinstance(record, dict):
                continue
            timestamp = record.get("timestamp")
            if isinstance(timestamp, (int, float)) and timestamp > cutoff:
                recent.append(record)
        return recent

    def shown_this_session(self) -> bool:
        """Whether a prompt already appeared in this session."""
        try:
            return self._session.get(SHOWN_THIS_SESSION_KEY) == "true"
        except StoreError as e:
            logger.warning("Could not read session prompt mark: %s", e)
            # Unknown: err on the side of not prompting
            return True

    def record_shown(self, feedback_type: FeedbackType) -> None:
        """Record that a prompt of this type was shown.

        Args:
            feedback_type: Variant that was shown.
        """
        records = self.weekly_prompts()
        records.append({"timestamp": self._clock(), "type": feedback_type.value})
        try:
            self._persistent.set_json(PROMPTS_KEY, records)
            self._session.set(SHOWN_THIS_SESSION_KEY, "true")
        except StoreError as e:
            logger.warning("Could not record shown prompt: %s", e)

    # =========================================================================
    # Decisions
    # =========================================================================

    def can_show(self, suppressed: bool) -> bool:
        """Check whether any prompt may be shown now.

        Args:
            suppressed: Live value of the Moment Mode flag.

        Returns:
            True if a prompt is allowed.
        """
        if suppressed:
            return False
        if self.session_count < self.settings.min_sessions:
            return False
        if self.shown_this_session():
            return False
        return len(self.weekly_prompts()) < self.settings.weekly_prompt_cap

    def next_decision(self, lesson: LessonContext | None = None) -> FeedbackDecision | None:
        """Pick the prompt variant to show.

        Args:
            lesson: The lesson just completed, if the trigger is a lesson.

        Returns:
            The decision, or None when no variant is eligible.
        """
        sessions = self.session_count
        counts = {feedback_type: 0 for feedback_type in FeedbackType}
        for record in self.weekly_prompts():
            try:
                counts[FeedbackType(record.get("type"))] += 1
            except ValueError:
                continue

        if lesson is not None and (
            counts[FeedbackType.COURSE_FEEDBACK] < self.settings.course_feedback_weekly_cap
        ):
            return FeedbackDecision(
                FeedbackType.COURSE_FEEDBACK,
                lesson_id=lesson.lesson_id,
                course_id=lesson.course_id,
            )

        feature_requests_allowed = sessions >= self.settings.feature_request_min_sessions
        if feature_requests_allowed and counts[FeedbackType.FEATURE_REQUEST] == 0:
            return FeedbackDecision(FeedbackType.FEATURE_REQUEST)

        if counts[FeedbackType.GENERAL_SATISFACTION] == 0:
            return FeedbackDecision(FeedbackType.GENERAL_SATISFACTION)

        # Course feedback is out here: no lesson, or its weekly cap is spent
        eligible = [FeedbackType.GENERAL_SATISFACTION]
        if feature_requests_allowed:
            eligible.append(FeedbackType.FEATURE_REQUEST)

        # min() keeps the first of equal counts, so satisfaction wins ties
        least_shown = min(eligible, key=lambda feedback_type: counts[feedback_type])
        return FeedbackDecision(least_shown)

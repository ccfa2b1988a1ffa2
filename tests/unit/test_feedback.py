# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for feedback policy, forms and the prompt scheduler."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from hubengage.core.config.settings import FeedbackSettings
from hubengage.core.suppression import SuppressionFlag
from hubengage.feedback import (
    CourseFeedbackForm,
    FeatureRequestForm,
    FeedbackData,
    FeedbackDecision,
    FeedbackPolicy,
    FeedbackPromptScheduler,
    FeedbackType,
    FormIncompleteError,
    LessonContext,
    PromptEvent,
    Satisfaction,
    SatisfactionForm,
    build_form,
)
from hubengage.feedback.policy import PROMPTS_KEY, SESSION_COUNT_KEY, WEEK_SECONDS
from hubengage.infrastructure.storage.memory import MemoryStore

NOW = 1_750_000_000.0
LESSON = LessonContext(lesson_id="lesson-7", course_id="course-2", lesson_title="Calm corners")


class Clock:
    """Adjustable epoch clock."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_policy(
    persistent: MemoryStore,
    session: MemoryStore,
    sessions: int = 2,
    prompts: list[tuple[float, str]] | None = None,
    clock: Clock | None = None,
) -> FeedbackPolicy:
    persistent.set(SESSION_COUNT_KEY, str(sessions))
    if prompts:
        persistent.set_json(
            PROMPTS_KEY,
            [{"timestamp": timestamp, "type": kind} for timestamp, kind in prompts],
        )
    return FeedbackPolicy(persistent, session, FeedbackSettings(), clock or Clock())


class TestFeedbackPolicyEligibility:
    """Tests for FeedbackPolicy.can_show."""

    def test_first_session_never_prompts(self, persistent_store, session_store) -> None:
        """Test prompts wait for the second session."""
        policy = make_policy(persistent_store, session_store, sessions=1)

        assert policy.can_show(False) is False

    def test_second_session_prompts(self, persistent_store, session_store) -> None:
        """Test an eligible visitor may be prompted."""
        policy = make_policy(persistent_store, session_store, sessions=2)

        assert policy.can_show(False) is True

    def test_suppression_blocks(self, persistent_store, session_store) -> None:
        """Test Moment Mode blocks every prompt."""
        policy = make_policy(persistent_store, session_store, sessions=10)

        assert policy.can_show(True) is False

    def test_one_prompt_per_session(self, persistent_store, session_store) -> None:
        """Test a shown prompt blocks the rest of the session."""
        policy = make_policy(persistent_store, session_store, sessions=3)

        policy.record_shown(FeedbackType.GENERAL_SATISFACTION)

        assert policy.can_show(False) is False
        assert policy.can_show(False) is False
        fresh_session = FeedbackPolicy(
            persistent_store, MemoryStore(), FeedbackSettings(), Clock()
        )
        assert fresh_session.can_show(False) is True

    def test_weekly_cap(self, persistent_store, session_store) -> None:
        """Test three prompts in seven days block further prompts."""
        prompts = [(NOW - 3600 * hours, "general_satisfaction") for hours in (1, 2, 3)]
        policy = make_policy(persistent_store, session_store, sessions=6, prompts=prompts)

        assert policy.can_show(False) is False

    def test_old_prompts_pruned(self, persistent_store, session_store) -> None:
        """Test records older than a week no longer count."""
        prompts = [(NOW - WEEK_SECONDS - 60, "general_satisfaction")] * 3
        policy = make_policy(persistent_store, session_store, sessions=6, prompts=prompts)

        assert policy.weekly_prompts() == []
        assert policy.can_show(False) is True

    def test_record_session_increments(self, persistent_store, session_store) -> None:
        """Test each mount counts one session."""
        policy = FeedbackPolicy(persistent_store, session_store, FeedbackSettings(), Clock())

        assert policy.record_session() == 1
        assert policy.record_session() == 2
        assert policy.session_count == 2


class TestFeedbackPolicyDecision:
    """Tests for FeedbackPolicy.next_decision."""

    def test_lesson_gives_course_feedback(self, persistent_store, session_store) -> None:
        """Test a lesson trigger asks about that lesson."""
        policy = make_policy(persistent_store, session_store)

        decision = policy.next_decision(LESSON)

        assert decision == FeedbackDecision(
            FeedbackType.COURSE_FEEDBACK, lesson_id="lesson-7", course_id="course-2"
        )

    def test_course_feedback_weekly_cap(self, persistent_store, session_store) -> None:
        """Test course feedback stops after two in a week."""
        prompts = [(NOW - 60, "course_feedback"), (NOW - 120, "course_feedback")]
        policy = make_policy(persistent_store, session_store, prompts=prompts)

        decision = policy.next_decision(LESSON)

        assert decision.type is FeedbackType.GENERAL_SATISFACTION

    def test_feature_request_for_regulars(self, persistent_store, session_store) -> None:
        """Test five sessions unlock the weekly feature request."""
        policy = make_policy(persistent_store, session_store, sessions=5)

        assert policy.next_decision().type is FeedbackType.FEATURE_REQUEST

    def test_general_satisfaction_default(self, persistent_store, session_store) -> None:
        """Test browsing visitors get the satisfaction prompt."""
        policy = make_policy(persistent_store, session_store, sessions=3)

        assert policy.next_decision().type is FeedbackType.GENERAL_SATISFACTION

    def test_least_shown_fallback(self, persistent_store, session_store) -> None:
        """Test the least shown variant wins once all had a turn."""
        prompts = [
            (NOW - 60, "feature_request"),
            (NOW - 120, "general_satisfaction"),
            (NOW - 180, "general_satisfaction"),
        ]
        policy = make_policy(persistent_store, session_store, sessions=8, prompts=prompts)

        assert policy.next_decision().type is FeedbackType.FEATURE_REQUEST

    def test_fallback_without_feature_requests(self, persistent_store, session_store) -> None:
        """Test visitors below five sessions fall back to satisfaction."""
        prompts = [(NOW - 60, "general_satisfaction")]
        policy = make_policy(persistent_store, session_store, sessions=3, prompts=prompts)

        assert policy.next_decision().type is FeedbackType.GENERAL_SATISFACTION


class TestFeedbackForms:
    """Tests for the three forms."""

    def test_course_form_requires_rating(self) -> None:
        """Test the course form needs a star rating."""
        form = CourseFeedbackForm()
        decision = FeedbackDecision(FeedbackType.COURSE_FEEDBACK, "lesson-7", "course-2")

        assert form.can_submit is False
        with pytest.raises(FormIncompleteError):
            form.build_payload(decision)

        form.select_rating(5)
        form.comment = "  Really practical  "
        payload = form.build_payload(decision)

        assert payload.rating == 5
        assert payload.comment == "Really practical"
        assert payload.lesson_id == "lesson-7"

    def test_course_rating_range(self) -> None:
        """Test ratings outside 1-5 are rejected."""
        with pytest.raises(ValueError):
            CourseFeedbackForm().select_rating(6)

    def test_course_comment_truncated(self) -> None:
        """Test comments are cut at 300 characters."""
        form = CourseFeedbackForm()

        form.comment = "x" * 400

        assert len(form.comment) == 300

    def test_satisfaction_comment_after_choice(self) -> None:
        """Test the comment box only accepts text after a choice."""
        form = SatisfactionForm()

        form.comment = "ignored"
        assert form.comment == ""
        assert form.comment_visible is False

        form.choose("needs_work")
        form.comment = "More examples please"
        payload = form.build_payload(FeedbackDecision(FeedbackType.GENERAL_SATISFACTION))

        assert payload.satisfaction is Satisfaction.NEEDS_WORK
        assert payload.comment == "More examples please"

    def test_blank_comment_becomes_none(self) -> None:
        """Test whitespace-only comments are not sent."""
        form = SatisfactionForm()
        form.choose(Satisfaction.GREAT)
        form.comment = "   "

        payload = form.build_payload(FeedbackDecision(FeedbackType.GENERAL_SATISFACTION))

        assert payload.comment is None

    def test_feature_request_requires_text(self) -> None:
        """Test the feature request needs non-blank text."""
        form = FeatureRequestForm()
        form.text = "   "

        assert form.can_submit is False

        form.text = "y" * 600
        assert len(form.text) == 500
        assert form.can_submit is True

    def test_build_form_matches_decision(self) -> None:
        """Test the factory returns the matching form."""
        settings = FeedbackSettings()

        assert isinstance(
            build_form(FeedbackDecision(FeedbackType.COURSE_FEEDBACK), settings), CourseFeedbackForm
        )
        assert isinstance(
            build_form(FeedbackDecision(FeedbackType.GENERAL_SATISFACTION), settings),
            SatisfactionForm,
        )
        assert isinstance(
            build_form(FeedbackDecision(FeedbackType.FEATURE_REQUEST), settings), FeatureRequestForm
        )

    def test_feedback_data_rating_validated(self) -> None:
        """Test out-of-range ratings fail validation."""
        with pytest.raises(ValidationError):
            FeedbackData(type=FeedbackType.COURSE_FEEDBACK, rating=0)


class TestFeedbackPromptScheduler:
    """Tests for FeedbackPromptScheduler."""

    @pytest.fixture
    def submitter(self) -> AsyncMock:
        """Create a mock feedback sink."""
        mock = AsyncMock()
        mock.submit_feedback.return_value = True
        return mock

    @pytest.fixture
    def scheduler(
        self, persistent_store, session_store, suppression_flag, fake_timers, submitter, sample_user_id
    ) -> FeedbackPromptScheduler:
        """Create a mounted scheduler for an eligible visitor (second session)."""
        persistent_store.set(SESSION_COUNT_KEY, "1")
        policy = FeedbackPolicy(persistent_store, session_store, FeedbackSettings(), Clock())
        scheduler = FeedbackPromptScheduler(
            policy, submitter, suppression_flag, fake_timers, FeedbackSettings(), sample_user_id
        )
        scheduler.mount()
        return scheduler

    def test_lesson_prompt_after_two_seconds(self, scheduler, fake_timers) -> None:
        """Test lesson completion shows course feedback 2s later."""
        events: list[PromptEvent] = []
        scheduler.subscribe(events.append)

        assert scheduler.request_prompt(LESSON) is True
        fake_timers.advance(1.9)
        assert scheduler.visible is False

        fake_timers.advance(0.1)
        assert scheduler.visible is True
        assert scheduler.feedback_type is FeedbackType.COURSE_FEEDBACK
        assert isinstance(scheduler.form, CourseFeedbackForm)
        assert events == [PromptEvent.SHOWN]

    def test_general_prompt_after_five_seconds(self, scheduler, fake_timers) -> None:
        """Test browsing triggers wait 5s."""
        scheduler.request_prompt()

        assert fake_timers.next_delay() == pytest.approx(5.0)

    def test_no_user_no_prompt(
        self, persistent_store, session_store, suppression_flag, fake_timers, submitter
    ) -> None:
        """Test anonymous visitors are never prompted."""
        policy = FeedbackPolicy(persistent_store, session_store, FeedbackSettings(), Clock())
        scheduler = FeedbackPromptScheduler(
            policy, submitter, suppression_flag, fake_timers, FeedbackSettings(), None
        )
        scheduler.mount()

        assert scheduler.request_prompt() is False

    def test_first_session_not_prompted(
        self, persistent_store, session_store, suppression_flag, fake_timers, submitter
    ) -> None:
        """Test the mount of a first session does not prompt."""
        policy = FeedbackPolicy(persistent_store, session_store, FeedbackSettings(), Clock())
        scheduler = FeedbackPromptScheduler(
            policy, submitter, suppression_flag, fake_timers, FeedbackSettings(), "user-1"
        )
        scheduler.mount()

        assert scheduler.request_prompt() is False

    def test_single_pending_prompt(self, scheduler) -> None:
        """Test a second trigger is ignored while one is pending."""
        assert scheduler.request_prompt() is True
        assert scheduler.request_prompt(LESSON) is False

    def test_one_prompt_per_session(self, scheduler, fake_timers) -> None:
        """Test a dismissed prompt is not followed by another."""
        scheduler.request_prompt()
        fake_timers.advance(5.0)
        scheduler.dismiss()

        assert scheduler.request_prompt() is False

    def test_suppression_cancels_pending_and_resumes(
        self, scheduler, suppression_flag, fake_timers
    ) -> None:
        """Test a pending prompt is deferred until Moment Mode closes."""
        scheduler.request_prompt(LESSON)

        suppression_flag.set_active(True)
        fake_timers.advance(10.0)
        assert scheduler.visible is False
        assert scheduler.has_remembered_trigger is True

        suppression_flag.set_active(False)
        assert scheduler.prompt_pending is True
        fake_timers.advance(2.0)
        assert scheduler.visible is True
        assert scheduler.feedback_type is FeedbackType.COURSE_FEEDBACK

    def test_suppression_hides_open_prompt(self, scheduler, suppression_flag, fake_timers) -> None:
        """Test raising the flag hides a visible prompt."""
        events: list[PromptEvent] = []
        scheduler.subscribe(events.append)
        scheduler.request_prompt()
        fake_timers.advance(5.0)

        suppression_flag.set_active(True)

        assert scheduler.visible is False
        assert events[-1] is PromptEvent.HIDDEN

    def test_request_during_suppression_is_remembered(
        self, scheduler, suppression_flag, fake_timers
    ) -> None:
        """Test a trigger during Moment Mode runs after it closes."""
        suppression_flag.set_active(True)

        assert scheduler.request_prompt() is False

        suppression_flag.set_active(False)
        fake_timers.advance(5.0)
        assert scheduler.visible is True

    @pytest.mark.asyncio
    async def test_submit_success_shows_thank_you(
        self, scheduler, submitter, fake_timers, sample_user_id
    ) -> None:
        """Test a stored submission thanks and closes after 1.5s."""
        events: list[PromptEvent] = []
        scheduler.subscribe(events.append)
        scheduler.request_prompt(LESSON)
        fake_timers.advance(2.0)
        scheduler.form.select_rating(4)

        assert await scheduler.submit() is True

        assert scheduler.submitted is True
        user_id, payload = submitter.submit_feedback.await_args.args
        assert user_id == sample_user_id
        assert payload.rating == 4
        assert payload.lesson_id == "lesson-7"

        fake_timers.advance(1.5)
        assert scheduler.visible is False
        assert events == [PromptEvent.SHOWN, PromptEvent.SUBMITTED, PromptEvent.HIDDEN]

    @pytest.mark.asyncio
    async def test_submit_failure_keeps_form(self, scheduler, submitter, fake_timers) -> None:
        """Test a failed submission keeps the prompt open for retry."""
        submitter.submit_feedback.return_value = False
        scheduler.request_prompt()
        fake_timers.advance(5.0)
        scheduler.form.choose(Satisfaction.OK)

        assert await scheduler.submit() is False

        assert scheduler.visible is True
        assert scheduler.submitted is False
        assert scheduler.form.satisfaction is Satisfaction.OK

        submitter.submit_feedback.return_value = True
        assert await scheduler.submit() is True

    @pytest.mark.asyncio
    async def test_submit_incomplete_raises(self, scheduler, fake_timers) -> None:
        """Test submitting without a choice raises."""
        scheduler.request_prompt()
        fake_timers.advance(5.0)

        with pytest.raises(FormIncompleteError):
            await scheduler.submit()

    @pytest.mark.asyncio
    async def test_submit_without_prompt_raises(self, scheduler) -> None:
        """Test submitting with nothing open raises."""
        with pytest.raises(FormIncompleteError):
            await scheduler.submit()

    def test_unmount_cancels_pending(self, scheduler, suppression_flag, fake_timers) -> None:
        """Test unmount leaves no timers or listeners behind."""
        scheduler.request_prompt()

        scheduler.unmount()

        assert fake_timers.pending == []
        assert suppression_flag.listener_count == 0

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Input state for the three feedback prompt variants.

Each form enforces its own length limit by truncation and knows when it
is complete enough to submit. ``build_payload`` turns a complete form
into a validated FeedbackData.
"""

from hubengage.core.config.settings import FeedbackSettings
from hubengage.feedback.models import FeedbackData, FeedbackDecision, FeedbackType, Satisfaction


class FormIncompleteError(Exception):
    """Raised when submitting a form that is not ready.

    Attributes:
        message: Human-readable error description.
        feedback_type: Variant of the incomplete form.
    """

    def __init__(self, message: str, feedback_type: FeedbackType | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.feedback_type = feedback_type

    def __str__(self) -> str:
        if self.feedback_type:
            return f"{self.message} ({self.feedback_type.value})"
        return self.message


def _clean_comment(text: str) -> str | None:
    text = text.strip()
    return text or None


class CourseFeedbackForm:
    """Star rating plus optional comment, shown after a lesson."""

    feedback_type = FeedbackType.COURSE_FEEDBACK

    def __init__(self, comment_max: int = 300) -> None:
        self.comment_max = comment_max
        self.rating = 0
        self._comment = ""

    @property
    def comment(self) -> str:
        return self._comment

    @comment.setter
    def comment(self, value: str) -> None:
        self._comment = value[: self.comment_max]

    def select_rating(self, stars: int) -> None:
        """Select a star rating.

        Args:
            stars: Rating from 1 to 5.

        Raises:
            ValueError: If the rating is out of range.
        """
        if not 1 <= stars <= 5:
            raise ValueError(f"Rating must be between 1 and 5, got {stars}")
        self.rating = stars

    @property
    def can_submit(self) -> bool:
        return self.rating > 0

    def build_payload(self, decision: FeedbackDecision) -> FeedbackData:
        """Build the submission payload.

        Args:
            decision: Decision that opened the prompt (carries lesson ids).

        Returns:
            Validated feedback data.

        Raises:
            FormIncompleteError: If no rating was selected.
        """
        if not self.can_submit:
            raise FormIncompleteError("Select a rating first", self.feedback_type)
        return FeedbackData(
            type=self.feedback_type,
            rating=self.rating,
            comment=_clean_comment(self._comment),
            lesson_id=decision.lesson_id,
            course_id=decision.course_id,
        )


class SatisfactionForm:
    """Three-way satisfaction choice; the comment box opens after a choice."""

    feedback_type = FeedbackType.GENERAL_SATISFACTION

    def __init__(self, comment_max: int = 300) -> None:
        self.comment_max = comment_max
        self.satisfaction: Satisfaction | None = None
        self._comment = ""

    @property
    def comment_visible(self) -> bool:
        return self.satisfaction is not None

    @property
    def comment(self) -> str:
        return self._comment

    @comment.setter
    def comment(self, value: str) -> None:
        # No comment box before a choice
        if not self.comment_visible:
            return
        self._comment = value[: self.comment_max]

    def choose(self, satisfaction: Satisfaction | str) -> None:
        """Pick an answer.

        Args:
            satisfaction: great, ok or needs_work.
        """
        self.satisfaction = Satisfaction(satisfaction)

    @property
    def can_submit(self) -> bool:
        return self.satisfaction is not None

    def build_payload(self, decision: FeedbackDecision) -> FeedbackData:
        """Build the submission payload.

        Raises:
            FormIncompleteError: If no answer was chosen.
        """
        if not self.can_submit:
            raise FormIncompleteError("Choose an answer first", self.feedback_type)
        return FeedbackData(
            type=self.feedback_type,
            satisfaction=self.satisfaction,
            comment=_clean_comment(self._comment),
        )


class FeatureRequestForm:
    """Free-text "what would help you most?" prompt."""

    feedback_type = FeedbackType.FEATURE_REQUEST

    def __init__(self, text_max: int = 500) -> None:
        self.text_max = text_max
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value[: self.text_max]

    @property
    def can_submit(self) -> bool:
        return bool(self._text.strip())

    def build_payload(self, decision: FeedbackDecision) -> FeedbackData:
        """Build the submission payload.

        Raises:
            FormIncompleteError: If the request text is blank.
        """
        if not self.can_submit:
            raise FormIncompleteError("Write a request first", self.feedback_type)
        return FeedbackData(type=self.feedback_type, comment=_clean_comment(self._text))


FeedbackForm = CourseFeedbackForm | SatisfactionForm | FeatureRequestForm


def build_form(decision: FeedbackDecision, settings: FeedbackSettings) -> FeedbackForm:
    """Create an empty form for a decision.

    Args:
        decision: Chosen prompt variant.
        settings: Feedback settings (length limits).

    Returns:
        The matching form.
    """
    if decision.type is FeedbackType.COURSE_FEEDBACK:
        return CourseFeedbackForm(settings.course_comment_max)
    if decision.type is FeedbackType.GENERAL_SATISFACTION:
        return SatisfactionForm(settings.satisfaction_comment_max)
    return FeatureRequestForm(settings.feature_request_max)

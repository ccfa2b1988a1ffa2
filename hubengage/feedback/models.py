# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Feedback prompt data types.

Three prompt variants exist:
- Course feedback after finishing a lesson (1-5 stars and a comment)
- General satisfaction while browsing (great / ok / needs work)
- Feature request for returning visitors (free text)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FeedbackType(str, Enum):
    """Feedback prompt variants."""

    COURSE_FEEDBACK = "course_feedback"
    GENERAL_SATISFACTION = "general_satisfaction"
    FEATURE_REQUEST = "feature_request"


class Satisfaction(str, Enum):
    """Answers to the general satisfaction prompt."""

    GREAT = "great"
    OK = "ok"
    NEEDS_WORK = "needs_work"


class FeedbackData(BaseModel):
    """Submitted feedback.

    Attributes:
        type: Prompt variant that produced the feedback.
        rating: Star rating for course feedback.
        satisfaction: Answer to the satisfaction prompt.
        comment: Optional free text (the request text for feature requests).
        lesson_id: Lesson the course feedback refers to.
        course_id: Course the lesson belongs to.
    """

    type: FeedbackType = Field(description="Prompt variant")
    rating: int | None = Field(default=None, ge=1, le=5, description="Stars 1-5")
    satisfaction: Satisfaction | None = Field(default=None, description="Satisfaction answer")
    comment: str | None = Field(default=None, description="Free text")
    lesson_id: str | None = Field(default=None, description="Lesson ID")
    course_id: str | None = Field(default=None, description="Course ID")

    def to_activity_metadata(self, submitted_at: str) -> dict[str, Any]:
        """Build the activity log metadata for this feedback.

        Args:
            submitted_at: ISO timestamp of the submission.

        Returns:
            Metadata dictionary as stored in the activity log.
        """
        return {
            "type": self.type.value,
            "rating": self.rating,
            "satisfaction": self.satisfaction.value if self.satisfaction else None,
            "comment": self.comment or None,
            "lesson_id": self.lesson_id or None,
            "course_id": self.course_id or None,
            "submitted_at": submitted_at,
        }


@dataclass(frozen=True)
class LessonContext:
    """The lesson a visitor just completed."""

    lesson_id: str
    course_id: str
    lesson_title: str | None = None


@dataclass(frozen=True)
class FeedbackDecision:
    """Which prompt to show, with its lesson context for course feedback."""

    type: FeedbackType
    lesson_id: str | None = None
    course_id: str | None = None


class PromptEvent(str, Enum):
    """Prompt state changes pushed to renderers."""

    SHOWN = "shown"
    SUBMITTED = "submitted"
    HIDDEN = "hidden"

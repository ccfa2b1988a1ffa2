# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Feedback prompts for signed-in hub users."""

from hubengage.feedback.forms import (
    CourseFeedbackForm,
    FeatureRequestForm,
    FormIncompleteError,
    SatisfactionForm,
    build_form,
)
from hubengage.feedback.models import (
    FeedbackData,
    FeedbackDecision,
    FeedbackType,
    LessonContext,
    PromptEvent,
    Satisfaction,
)
from hubengage.feedback.policy import FeedbackPolicy
from hubengage.feedback.scheduler import FeedbackPromptScheduler

__all__ = [
    "CourseFeedbackForm",
    "FeatureRequestForm",
    "FeedbackData",
    "FeedbackDecision",
    "FeedbackPolicy",
    "FeedbackPromptScheduler",
    "FeedbackType",
    "FormIncompleteError",
    "LessonContext",
    "PromptEvent",
    "SatisfactionForm",
    "Satisfaction",
    "build_form",
]

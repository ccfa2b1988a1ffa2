# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Moment Mode: the "I'm having a hard day" overlay and its tools."""

from hubengage.moment.affirmations import AFFIRMATION_COLORS, DEFAULT_AFFIRMATIONS, AffirmationDeck
from hubengage.moment.breathing import BreathingPhase, BreathingSession
from hubengage.moment.countdown import SessionCountdown
from hubengage.moment.gentle_tools import GENTLE_TOOLS, GentleTool, ToolCategory, tools_by_category
from hubengage.moment.journal import Journal, JournalTab
from hubengage.moment.notes import MomentNoteForm
from hubengage.moment.overlay import MomentModeOverlay, MomentState

__all__ = [
    "AFFIRMATION_COLORS",
    "AffirmationDeck",
    "BreathingPhase",
    "BreathingSession",
    "DEFAULT_AFFIRMATIONS",
    "GENTLE_TOOLS",
    "GentleTool",
    "Journal",
    "JournalTab",
    "MomentModeOverlay",
    "MomentNoteForm",
    "MomentState",
    "SessionCountdown",
    "ToolCategory",
    "tools_by_category",
]

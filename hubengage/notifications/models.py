# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data types for the social-proof notification scheduler."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class NotificationMessage:
    """One short social-proof message from the remote feed.

    Attributes:
        text: Message shown to the visitor.
        category: Free-form type column from the feed.
        active: Whether the row is enabled in the feed.
    """

    text: str
    category: str = ""
    active: bool = True


class SchedulerPhase(str, Enum):
    """Lifecycle of a notification scheduler instance.

    IDLE -> WAITING -> VISIBLE -> WAITING -> ... with three terminal states:
    DORMANT (suppressed, empty or unreachable feed), EXHAUSTED (dismissal
    budget spent) and UNMOUNTED (stopped by its host).
    """

    IDLE = "idle"
    LOADING = "loading"
    WAITING = "waiting"
    VISIBLE = "visible"
    DORMANT = "dormant"
    EXHAUSTED = "exhausted"
    UNMOUNTED = "unmounted"


class NotificationEventKind(str, Enum):
    """What happened to the visible bubble."""

    SHOWN = "shown"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class NotificationEvent:
    """Event pushed to renderers.

    Attributes:
        kind: Shown or hidden.
        message: The message concerned.
        burst: Whether the message was a burst follow-up.
        reason: Why a message was hidden (expired, dismissed, suppressed, unmounted).
    """

    kind: NotificationEventKind
    message: NotificationMessage
    burst: bool = False
    reason: str | None = None

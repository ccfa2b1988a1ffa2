# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Social-proof notification scheduling.

- models: messages, scheduler phases and renderer events
- pool: shuffled round-robin over active messages
- budget: per-session dismissal cap
- route_gate: where notifications may appear
- scheduler: the timing state machine
- host: mounts schedulers as routes change
"""

from hubengage.notifications.budget import DismissalBudget
from hubengage.notifications.host import NotificationHost
from hubengage.notifications.models import (
    NotificationEvent,
    NotificationEventKind,
    NotificationMessage,
    SchedulerPhase,
)
from hubengage.notifications.pool import MessagePool
from hubengage.notifications.route_gate import RouteGate
from hubengage.notifications.scheduler import NotificationScheduler

__all__ = [
    "DismissalBudget",
    "MessagePool",
    "NotificationEvent",
    "NotificationEventKind",
    "NotificationHost",
    "NotificationMessage",
    "NotificationScheduler",
    "RouteGate",
    "SchedulerPhase",
]

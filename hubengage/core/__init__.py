# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core primitives shared by every scheduler.

- config: Pydantic settings
- observable: synchronous listener registry
- suppression: the shared Moment Mode flag
- timers: cancellable delayed callbacks and per-component timer groups
"""

from hubengage.core.observable import Observable
from hubengage.core.suppression import SuppressionFlag
from hubengage.core.timers import LoopTimers, TimerGroup, TimerHandle, TimerService

__all__ = [
    "Observable",
    "SuppressionFlag",
    "LoopTimers",
    "TimerGroup",
    "TimerHandle",
    "TimerService",
]

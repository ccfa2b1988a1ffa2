# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- A manual clock standing in for the event loop's timers
- Seeded randomness so delays and shuffles are reproducible
- In-memory stores, the shared suppression flag and settings
"""

import random
from typing import Callable

import pytest

from hubengage.core.config.settings import (
    FeedbackSettings,
    MomentModeSettings,
    NotificationSettings,
    Settings,
)
from hubengage.core.suppression import SuppressionFlag
from hubengage.infrastructure.storage import reset_memory_stores
from hubengage.infrastructure.storage.memory import MemoryStore
from hubengage.notifications.models import NotificationMessage


# =============================================================================
# Manual Clock
# =============================================================================


class FakeTimerHandle:
    """Handle returned by FakeTimers.call_later."""

    def __init__(self, when: float, seq: int, callback: Callable[[], None]) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimers:
    """TimerService whose time only moves when a test advances it.

    Callbacks run in due order (ties in scheduling order), and callbacks
    armed by other callbacks run in the same advance() if they fall due.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[FakeTimerHandle] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimerHandle:
        self._seq += 1
        handle = FakeTimerHandle(self.now + max(delay, 0.0), self._seq, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeTimerHandle]:
        """Armed, uncancelled timers in due order."""
        live = [h for h in self._handles if not h.cancelled]
        return sorted(live, key=lambda h: (h.when, h.seq))

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback that falls due."""
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target + 1e-9]
            if not due:
                break
            handle = due[0]
            self._handles.remove(handle)
            self.now = max(self.now, handle.when)
            handle.callback()
        self.now = target
        self._handles = [h for h in self._handles if not h.cancelled]

    def next_delay(self) -> float | None:
        """Seconds until the next armed timer, if any."""
        pending = self.pending
        return pending[0].when - self.now if pending else None


@pytest.fixture
def fake_timers() -> FakeTimers:
    """Provide a manual clock."""
    return FakeTimers()


@pytest.fixture
def rng() -> random.Random:
    """Provide seeded randomness."""
    return random.Random(1234)


# =============================================================================
# State Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_memory_stores():
    """Start every test without in-process persistent stores."""
    reset_memory_stores()
    yield
    reset_memory_stores()


@pytest.fixture
def session_store() -> MemoryStore:
    """Provide an empty session store."""
    return MemoryStore()


@pytest.fixture
def persistent_store() -> MemoryStore:
    """Provide an empty persistent store."""
    return MemoryStore()


@pytest.fixture
def suppression_flag() -> SuppressionFlag:
    """Provide a lowered suppression flag."""
    return SuppressionFlag()


@pytest.fixture
def settings() -> Settings:
    """Provide default settings without reading a .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def notification_settings() -> NotificationSettings:
    return NotificationSettings()


@pytest.fixture
def feedback_settings() -> FeedbackSettings:
    return FeedbackSettings()


@pytest.fixture
def moment_settings() -> MomentModeSettings:
    return MomentModeSettings()


# =============================================================================
# Sample Data
# =============================================================================


class StaticFeed:
    """Message source returning a fixed list."""

    def __init__(self, messages: list[NotificationMessage]) -> None:
        self.messages = messages
        self.calls = 0

    async def fetch_messages(self) -> list[NotificationMessage]:
        self.calls += 1
        return list(self.messages)


@pytest.fixture
def sample_messages() -> list[NotificationMessage]:
    """Provide five active social-proof messages."""
    return [
        NotificationMessage("A teacher in Ohio just joined the Hub", "signup"),
        NotificationMessage("12 educators finished a course today", "course"),
        NotificationMessage("A school in Texas started a partnership", "partner"),
        NotificationMessage("Someone just downloaded a calm-down kit", "download"),
        NotificationMessage("A principal in Maine booked a demo", "demo"),
    ]


@pytest.fixture
def static_feed(sample_messages: list[NotificationMessage]) -> StaticFeed:
    return StaticFeed(sample_messages)


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for hubengage.

All timestamps are timezone-aware UTC. Wall-clock epoch seconds are used
for storage bookkeeping (feed cache age, weekly feedback records) because
they survive serialisation into the key-value stores unchanged.

Usage:
------
    from hubengage.utils.datetime import utc_now, format_iso

    submitted_at = format_iso(utc_now())
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def epoch_seconds() -> float:
    """Get the current wall-clock time as Unix epoch seconds.

    Returns:
        Seconds since the epoch as a float.
    """
    return time.time()


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    dt_utc = ensure_utc(dt)
    return dt_utc.isoformat()


def format_countdown(seconds: int) -> str:
    """Format a countdown as ``M:SS``.

    Args:
        seconds: Remaining whole seconds (negative values clamp to zero).

    Returns:
        String like "3:00" or "0:07".
    """
    seconds = max(seconds, 0)
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}:{remaining:02d}"

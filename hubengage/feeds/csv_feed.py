# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parser for the published social-proof spreadsheet.

Expected shape is a header row followed by ``message,type,active`` rows,
where ``active`` is the literal ``TRUE`` (any case) for rows that should
be shown. Values may be quoted.

The parser never raises on content: rows that do not fit are dropped, and
an empty or header-only body means "no messages".
"""

import csv
import io
import logging

from hubengage.notifications.models import NotificationMessage

logger = logging.getLogger(__name__)

ACTIVE_MARKER = "TRUE"


def _parse_row(row: list[str]) -> NotificationMessage | None:
    """Convert one CSV row, or return None if it does not conform."""
    if len(row) < 3:
        return None
    text, category, active = (value.strip() for value in row[:3])
    return NotificationMessage(
        text=text,
        category=category,
        active=active.upper() == ACTIVE_MARKER,
    )


def parse_message_feed(csv_text: str) -> list[NotificationMessage]:
    """Parse the feed into the active message pool.

    Args:
        csv_text: Raw CSV body, header row first.

    Returns:
        Active messages with non-empty text, in feed order.
    """
    lines = csv_text.strip().splitlines()
    if len(lines) < 2:
        return []

    messages: list[NotificationMessage] = []
    dropped = 0
    for line in lines[1:]:
        try:
            rows = list(csv.reader(io.StringIO(line)))
        except csv.Error:
            dropped += 1
            continue

        message = _parse_row(rows[0]) if rows else None
        if message is None or not message.active or not message.text:
            dropped += 1
            continue
        messages.append(message)

    logger.debug("Parsed message feed: %d active, %d dropped", len(messages), dropped)
    return messages

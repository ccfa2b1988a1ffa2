# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Remote content feeds.

- csv_feed: narrow parser for the social-proof spreadsheet
- message_feed: session-cached fetch of that spreadsheet
- affirmation_feed: Moment Mode affirmations
"""

from hubengage.feeds.affirmation_feed import AffirmationFeedClient
from hubengage.feeds.csv_feed import parse_message_feed
from hubengage.feeds.message_feed import MessageFeedClient

__all__ = [
    "AffirmationFeedClient",
    "MessageFeedClient",
    "parse_message_feed",
]

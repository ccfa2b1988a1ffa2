# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Client for the Moment Mode affirmations feed.

The feed is a JSON document, either a bare list of strings or an object
with an ``affirmations`` list. Any problem yields an empty list, which
makes the deck fall back to its built-in affirmations.
"""

import logging
from typing import Any

import httpx

from hubengage.core.config.settings import MomentModeSettings

logger = logging.getLogger(__name__)


def _extract(document: Any) -> list[str]:
    """Pull non-blank strings out of a feed document."""
    if isinstance(document, dict):
        document = document.get("affirmations", [])
    if not isinstance(document, list):
        return []
    return [item.strip() for item in document if isinstance(item, str) and item.strip()]


class AffirmationFeedClient:
    """Fetches affirmations for the Moment Mode deck."""

    def __init__(self, settings: MomentModeSettings, client: httpx.AsyncClient) -> None:
        """Initialize the client.

        Args:
            settings: Moment Mode settings (feed URL and timeout).
            client: Shared httpx client.
        """
        self.settings = settings
        self._client = client

    async def fetch_affirmations(self) -> list[str]:
        """Fetch the current affirmations.

        Returns:
            Affirmation strings, or an empty list if the feed is not
            configured, unreachable or malformed.
        """
        if not self.settings.affirmations_url:
            return []

        try:
            response = await self._client.get(
                self.settings.affirmations_url,
                timeout=self.settings.affirmations_timeout,
                follow_redirects=True,
            )
            response.raise_for_status()
            document = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("Affirmations feed unavailable, using built-ins: %s", e)
            return []

        affirmations = _extract(document)
        logger.debug("Fetched %d affirmations", len(affirmations))
        return affirmations

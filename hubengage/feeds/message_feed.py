# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session-cached client for the social-proof message feed.

The raw CSV body is cached in the session store together with the time it
was fetched. A cached copy younger than the freshness window is reused;
anything older triggers one GET, and the new body and timestamp replace
the cache.

Failure is never surfaced: the notifications are decoration, so a
network or storage problem is logged and the pool is simply empty.

Example:
    client = MessageFeedClient(settings.message_feed, session_store, http)
    messages = await client.fetch_messages()
"""

import logging

import httpx

from hubengage.core.config.settings import MessageFeedSettings
from hubengage.feeds.csv_feed import parse_message_feed
from hubengage.infrastructure.backend.exceptions import FeedError
from hubengage.infrastructure.storage.base import KeyValueStore, StoreError
from hubengage.notifications.models import NotificationMessage
from hubengage.utils.datetime import epoch_seconds

logger = logging.getLogger(__name__)

CACHE_KEY = "message_feed.csv"
CACHE_TIMESTAMP_KEY = "message_feed.fetched_at"


class MessageFeedClient:
    """Fetches and caches the message feed.

    Attributes:
        settings: Feed URL, freshness window and timeout.
    """

    def __init__(
        self,
        settings: MessageFeedSettings,
        store: KeyValueStore,
        client: httpx.AsyncClient,
    ) -> None:
        """Initialize the feed client.

        Args:
            settings: Feed settings.
            store: Session-scoped store holding the cache.
            client: Shared httpx client.
        """
        self.settings = settings
        self._store = store
        self._client = client

    def _cached_body(self) -> str | None:
        """Return the cached CSV body if it is still fresh."""
        body = self._store.get(CACHE_KEY)
        fetched_at = self._store.get(CACHE_TIMESTAMP_KEY)
        if body is None or fetched_at is None:
            return None
        try:
            age = epoch_seconds() - float(fetched_at)
        except ValueError:
            return None
        if age < self.settings.cache_ttl_seconds:
            logger.debug("Using cached message feed (age %.0fs)", age)
            return body
        return None

    async def _download(self) -> str:
        """GET the feed body.

        Raises:
            FeedError: On transport failure or a non-2xx response.
        """
        try:
            response = await self._client.get(
                self.settings.url,
                timeout=self.settings.timeout,
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FeedError(
                message=f"Failed to fetch message feed: {str(e)}",
                details={"error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            raise FeedError(
                message="Message feed returned an error",
                status_code=response.status_code,
            )
        return response.text

    async def fetch_messages(self) -> list[NotificationMessage]:
        """Return the active message pool.

        Returns:
            Active messages, or an empty list on any failure.
        """
        try:
            body = self._cached_body()
            if body is None:
                body = await self._download()
                self._store.set(CACHE_KEY, body)
                self._store.set(CACHE_TIMESTAMP_KEY, repr(epoch_seconds()))
        except (FeedError, StoreError) as e:
            logger.error("Failed to fetch social proof messages: %s", e)
            return []

        return parse_message_feed(body)

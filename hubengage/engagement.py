# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engagement hub: one browsing session's object graph.

Wires the shared suppression flag, the session and persistent stores, the
backend and feed clients, and the three components that share the flag:

- NotificationHost (social proof on public routes)
- FeedbackPromptScheduler (feedback cards for signed-in users)
- MomentModeOverlay (the only writer of the flag)

Example:
    hub = create_engagement_hub(get_settings(), session_id="sess-1", user_id="u-1")
    await hub.start("/for-schools")
    await hub.navigate("/hub/courses")
    await hub.moment.open()
    await hub.aclose()
"""

import random

import httpx
from redis import Redis

from hubengage.core.config.settings import Settings, get_settings
from hubengage.core.suppression import SuppressionFlag
from hubengage.core.timers import LoopTimers, TimerService
from hubengage.feedback.models import LessonContext
from hubengage.feedback.policy import FeedbackPolicy
from hubengage.feedback.scheduler import FeedbackPromptScheduler
from hubengage.feeds.affirmation_feed import AffirmationFeedClient
from hubengage.feeds.message_feed import MessageFeedClient
from hubengage.infrastructure.backend.activity_log import ActivityLogService
from hubengage.infrastructure.backend.client import BackendClient
from hubengage.infrastructure.storage import (
    KeyValueStore,
    create_persistent_store,
    create_session_store,
)
from hubengage.moment.overlay import MomentModeOverlay
from hubengage.notifications.host import NotificationHost
from hubengage.notifications.route_gate import RouteGate
from hubengage.notifications.scheduler import NotificationScheduler
from hubengage.utils.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)


class EngagementHub:
    """Owns and coordinates the engagement components of one session.

    Attributes:
        flag: Shared Moment Mode suppression flag.
        notifications: Route-driven notification host.
        feedback: Feedback prompt scheduler.
        moment: Moment Mode overlay.
    """

    def __init__(
        self,
        settings: Settings,
        session_id: str,
        user_id: str | None,
        session_store: KeyValueStore,
        persistent_store: KeyValueStore,
        http_client: httpx.AsyncClient,
        timers: TimerService,
        rng: random.Random,
        owns_http_client: bool = False,
    ) -> None:
        """Initialize the hub. Prefer create_engagement_hub().

        Args:
            settings: Application settings.
            session_id: Browsing session identifier.
            user_id: Signed-in user, or None.
            session_store: Session-scoped store.
            persistent_store: Cross-session store for this user or visitor.
            http_client: Shared httpx client.
            timers: Timer service.
            rng: Random source shared by all components.
            owns_http_client: Whether aclose() should close the client.
        """
        self.settings = settings
        self.session_id = session_id
        self.user_id = user_id
        self.session_store = session_store
        self.persistent_store = persistent_store
        self._http = http_client
        self._owns_http = owns_http_client
        self._timers = timers
        self._rng = rng
        self._started = False

        self.flag = SuppressionFlag()

        self.backend = BackendClient(settings.backend, http_client)
        self.activity_log = ActivityLogService(self.backend)
        self.message_feed = MessageFeedClient(settings.message_feed, session_store, http_client)
        self.affirmation_feed = AffirmationFeedClient(settings.moment, http_client)

        self.notifications = NotificationHost(
            self._new_notification_scheduler,
            RouteGate(
                settings.notifications.gated_route_prefixes,
                settings.notifications.gated_route_patterns,
            ),
        )
        self.feedback = FeedbackPromptScheduler(
            FeedbackPolicy(persistent_store, session_store, settings.feedback),
            self.activity_log,
            self.flag,
            timers,
            settings.feedback,
            user_id,
        )
        self.moment = MomentModeOverlay(
            self.flag,
            self.activity_log,
            timers,
            settings.moment,
            rng=rng,
            user_id=user_id,
        )

    def _new_notification_scheduler(self) -> NotificationScheduler:
        return NotificationScheduler(
            self.message_feed,
            self.flag,
            self.session_store,
            self.settings.notifications,
            self._timers,
            self._rng,
        )

    async def start(self, path: str | None = None) -> None:
        """Mount the session's components.

        Args:
            path: Initial route, if known.
        """
        if self._started:
            return
        self._started = True
        bind_context(session_id=self.session_id, user_id=self.user_id)

        self.feedback.mount()
        await self.moment.load_affirmations(self.affirmation_feed)
        if path is not None:
            await self.notifications.navigate(path)
        logger.info("Engagement hub started", path=path)

    async def navigate(self, path: str) -> NotificationScheduler | None:
        """Handle a client-side route change."""
        return await self.notifications.navigate(path)

    def request_feedback(self, lesson: LessonContext | None = None) -> bool:
        """Signal a feedback trigger (lesson completed or browsing heuristic)."""
        return self.feedback.request_prompt(lesson)

    async def aclose(self) -> None:
        """Tear down every component and release owned resources."""
        self.notifications.unmount()
        self.feedback.unmount()
        self.moment.close()
        if self._owns_http:
            await self._http.aclose()
        logger.info("Engagement hub closed")
        clear_context()
        self._started = False


def create_engagement_hub(
    settings: Settings | None = None,
    session_id: str = "default",
    user_id: str | None = None,
    http_client: httpx.AsyncClient | None = None,
    redis_client: Redis | None = None,
    timers: TimerService | None = None,
    rng: random.Random | None = None,
) -> EngagementHub:
    """Build an EngagementHub for one browsing session.

    Args:
        settings: Application settings. Defaults to get_settings().
        session_id: Browsing session identifier (namespaces session keys).
        user_id: Signed-in user, or None for anonymous visitors.
        http_client: Shared httpx client. Created and owned when omitted.
        redis_client: Redis client for the redis store backend.
        timers: Timer service. Defaults to the running event loop.
        rng: Random source. Defaults to a fresh Random.

    Returns:
        A hub ready for start().
    """
    settings = settings or get_settings()
    owns_http = http_client is None
    http = http_client or httpx.AsyncClient(timeout=settings.backend.timeout)

    owner_key = user_id or f"visitor-{session_id}"
    session_store = create_session_store(settings, session_id, redis_client)
    persistent_store = create_persistent_store(settings, owner_key, redis_client)

    return EngagementHub(
        settings=settings,
        session_id=session_id,
        user_id=user_id,
        session_store=session_store,
        persistent_store=persistent_store,
        http_client=http,
        timers=timers or LoopTimers(),
        rng=rng or random.Random(),
        owns_http_client=owns_http,
    )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Route-driven mounting of the notification scheduler.

The host owns at most one scheduler. Gated routes unmount it, eligible
routes mount a fresh one if none is mounted. Navigation between eligible
routes keeps the running instance, so a page change does not re-trigger
the first-emission delay. Renderers subscribe to the host rather than to
individual schedulers and keep receiving events across remounts.
"""

import logging
from typing import Callable

from hubengage.core.observable import Observable
from hubengage.notifications.models import NotificationEvent
from hubengage.notifications.route_gate import RouteGate
from hubengage.notifications.scheduler import NotificationScheduler

logger = logging.getLogger(__name__)


class NotificationHost:
    """Mounts and unmounts notification schedulers as the route changes."""

    def __init__(
        self,
        scheduler_factory: Callable[[], NotificationScheduler],
        gate: RouteGate,
    ) -> None:
        """Initialize the host.

        Args:
            scheduler_factory: Builds a fresh scheduler for each mount.
            gate: Route gate deciding where notifications may appear.
        """
        self._factory = scheduler_factory
        self.gate = gate
        self._scheduler: NotificationScheduler | None = None
        self._detach: Callable[[], None] | None = None
        self._events: Observable[NotificationEvent] = Observable()
        self.mount_count = 0
        self.current_path: str | None = None

    @property
    def scheduler(self) -> NotificationScheduler | None:
        """Currently mounted scheduler."""
        return self._scheduler

    @property
    def mounted(self) -> bool:
        return self._scheduler is not None

    def subscribe(self, listener: Callable[[NotificationEvent], None]) -> Callable[[], None]:
        """Register a renderer for events of whichever scheduler is mounted."""
        return self._events.subscribe(listener)

    async def navigate(self, path: str) -> NotificationScheduler | None:
        """React to a route change.

        Args:
            path: New route.

        Returns:
            The mounted scheduler, or None on a gated route.
        """
        self.current_path = path
        if self.gate.is_gated(path):
            if self._scheduler is not None:
                logger.debug("Route %s is gated, unmounting notifications", path)
            self.unmount()
            return None

        if self._scheduler is None:
            scheduler = self._factory()
            self._scheduler = scheduler
            self._detach = scheduler.subscribe(self._events.publish)
            self.mount_count += 1
            logger.debug("Mounting notifications on %s", path)
            await scheduler.start()

        return self._scheduler

    def dismiss(self) -> bool:
        """Dismiss the visible message of the mounted scheduler."""
        if self._scheduler is None:
            return False
        return self._scheduler.dismiss()

    def unmount(self) -> None:
        """Stop and drop the mounted scheduler, if any."""
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is None:
            return
        scheduler.stop()
        if self._detach is not None:
            self._detach()
            self._detach = None

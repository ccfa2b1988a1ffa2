# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared Moment Mode suppression flag.

While Moment Mode is active no notification or feedback prompt may be
visible or newly scheduled. The Moment Mode overlay is the only writer;
both schedulers read it.

Readers must consult ``is_active`` at the moment they act (including
inside timer callbacks armed long before) and subscribe for transitions
so that an in-flight emission can be hidden immediately.

Example:
    flag = SuppressionFlag()
    flag.subscribe(lambda active: print("moment mode", active))
    flag.set_active(True)
"""

import logging

from hubengage.core.observable import Observable

logger = logging.getLogger(__name__)


class SuppressionFlag(Observable[bool]):
    """Observable "Moment Mode active" boolean.

    Listeners receive the new value synchronously, and only on actual
    transitions; setting the current value again does nothing.
    """

    def __init__(self, active: bool = False) -> None:
        """Initialize the flag.

        Args:
            active: Initial value.
        """
        super().__init__()
        self._active = active

    @property
    def is_active(self) -> bool:
        """Current value of the flag."""
        return self._active

    def set_active(self, active: bool) -> None:
        """Set the flag and notify listeners on a transition.

        Args:
            active: New value.
        """
        if active == self._active:
            return
        self._active = active
        logger.info("Moment Mode suppression %s", "raised" if active else "cleared")
        self.publish(active)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Affirmation deck for the Moment Mode overlay."""

import random

DEFAULT_AFFIRMATIONS = [
    "You are making a difference, even on the hard days.",
    "Your dedication matters more than you know.",
    "It is okay to take things one moment at a time.",
    "You bring light to your students every single day.",
    "Rest is not a reward. It is a requirement.",
    "You are doing better than you think.",
    "Your patience today plants seeds for tomorrow.",
    "This feeling will pass. Your impact will not.",
    "Taking care of yourself is part of the job.",
    "You were made for this, even when it feels hard.",
]

AFFIRMATION_COLORS = ["#2B3A67", "#E8B84B", "#80A4ED", "#7FB685", "#E07A5F"]


class AffirmationDeck:
    """Walks affirmations in order.

    ``next()`` moves sequentially and wraps. Color and side are purely
    decorative: the color is re-rolled and the side alternates on each
    pick.
    """

    def __init__(self, affirmations: list[str] | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._items: list[str] = []
        self.index = 0
        self.color = AFFIRMATION_COLORS[0]
        self.side = "left"
        self.replace(affirmations or [])

    def __len__(self) -> int:
        return len(self._items)

    @property
    def using_defaults(self) -> bool:
        return self._items is DEFAULT_AFFIRMATIONS

    @property
    def current(self) -> str:
        return self._items[self.index]

    def replace(self, affirmations: list[str]) -> None:
        """Swap in a new list; an empty list restores the built-ins."""
        self._items = list(affirmations) if affirmations else DEFAULT_AFFIRMATIONS
        self.index = 0

    def next(self) -> str:
        """Advance to the next affirmation.

        Returns:
            The new current affirmation.
        """
        self.index = (self.index + 1) % len(self._items)
        self.color = self._rng.choice(AFFIRMATION_COLORS)
        self.side = "right" if self.side == "left" else "left"
        return self.current

    def reset(self) -> None:
        self.index = 0
        self.color = AFFIRMATION_COLORS[0]
        self.side = "left"

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Route gating for the social-proof scheduler.

Internal and product routes (admin, partner setup, the authenticated hub,
partner dashboards) never show social proof. Prefixes match on path
segment boundaries, so ``/hub`` gates ``/hub/courses`` but not
``/hubspot-guide``. Patterns use fnmatch globs for route families that
share a suffix rather than a prefix, like ``/asd4-dashboard``.
"""

import fnmatch
from typing import Iterable
from urllib.parse import urlsplit


def normalize_path(path: str) -> str:
    """Reduce a path or URL to a comparable lowercase path.

    Args:
        path: Path, possibly with query string, fragment or full URL.

    Returns:
        Lowercase path with a leading slash and no trailing slash.
    """
    parsed = urlsplit(path.strip())
    cleaned = parsed.path or "/"
    if not cleaned.startswith("/"):
        cleaned = f"/{cleaned}"
    if len(cleaned) > 1:
        cleaned = cleaned.rstrip("/") or "/"
    return cleaned.lower()


class RouteGate:
    """Decides whether a route suppresses the notification scheduler.

    Example:
        gate = RouteGate(["/admin", "/hub"], ["/*-dashboard"])
        gate.is_gated("/hub/courses")  # True
        gate.is_gated("/for-schools")  # False
    """

    def __init__(self, prefixes: Iterable[str], patterns: Iterable[str] = ()) -> None:
        """Initialize the gate.

        Args:
            prefixes: Gated path prefixes.
            patterns: Gated fnmatch patterns.
        """
        self.prefixes = [normalize_path(prefix) for prefix in prefixes]
        self.patterns = [pattern.lower() for pattern in patterns]

    def is_gated(self, path: str) -> bool:
        """Check whether the scheduler must stay off on this route.

        Args:
            path: Current route.

        Returns:
            True if the route is internal, product or partner-facing.
        """
        cleaned = normalize_path(path)
        for prefix in self.prefixes:
            if prefix == "/":
                return True
            if cleaned == prefix or cleaned.startswith(f"{prefix}/"):
                return True
        return any(fnmatch.fnmatchcase(cleaned, pattern) for pattern in self.patterns)

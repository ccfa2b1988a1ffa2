# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for backend collaborators.

This module defines the exception hierarchy for HTTP collaborators:
- BackendError: Base exception for the managed database backend
- FeedError: The remote message or affirmation feed could not be fetched
"""


class BackendError(Exception):
    """Error talking to an HTTP collaborator.

    Raised when a collaborator returns a non-2xx response or is
    unreachable.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code, if a response was received.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        """Initialize backend error.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code from the response.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with status code."""
        base = f"{self.message}"
        if self.status_code:
            base = f"[{self.status_code}] {base}"
        if self.details:
            base = f"{base} - Details: {self.details}"
        return base


class FeedError(BackendError):
    """A remote content feed could not be fetched."""

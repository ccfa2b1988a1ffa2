# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Key-value store interface.

The schedulers never talk to Redis (or anything else) directly; they read
and write small string values through this interface. Session lifetime is
a property of the concrete store, not of the caller.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Exception raised for key-value store failures.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying backend error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the store error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get a value.

        Args:
            key: The key.

        Returns:
            The stored string or None if missing.

        Raises:
            StoreError: If the backend fails.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set a value.

        Raises:
            StoreError: If the backend fails.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a key if present.

        Raises:
            StoreError: If the backend fails.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every key owned by this store.

        Raises:
            StoreError: If the backend fails.
        """
        ...

    def get_int(self, key: str, default: int = 0) -> int:
        """Get a value parsed as an integer.

        Unparseable values are treated as missing.

        Args:
            key: The key.
            default: Value returned when missing or unparseable.

        Returns:
            The parsed integer.
        """
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer value for %s: %r", key, raw)
            return default

    def get_json(self, key: str) -> Any:
        """Get a JSON-decoded value.

        Args:
            key: The key.

        Returns:
            The decoded value, or None if missing or not valid JSON.
        """
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed JSON for %s", key)
            return None

    def set_json(self, key: str, value: Any) -> None:
        """Set a JSON-encoded value.

        Args:
            key: The key.
            value: JSON-serialisable value.
        """
        self.set(key, json.dumps(value, ensure_ascii=False, default=str))

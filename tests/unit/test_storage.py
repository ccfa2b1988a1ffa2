# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the key-value stores."""

from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hubengage.core.config.settings import SessionStoreSettings, Settings
from hubengage.infrastructure.storage import (
    MemoryStore,
    RedisStore,
    StoreError,
    create_persistent_store,
    create_session_store,
    reset_memory_stores,
)


class TestMemoryStore:
    """Tests for MemoryStore and the base helpers."""

    def test_get_set_delete(self) -> None:
        """Test basic operations."""
        store = MemoryStore()

        store.set("notifications.dismissals", "2")
        assert store.get("notifications.dismissals") == "2"

        store.delete("notifications.dismissals")
        assert store.get("notifications.dismissals") is None

    def test_get_int_ignores_garbage(self) -> None:
        """Test non-integer values fall back to the default."""
        store = MemoryStore({"count": "many"})

        assert store.get_int("count") == 0
        assert store.get_int("missing", default=5) == 5

    def test_json_round_trip_and_malformed(self) -> None:
        """Test JSON helpers decode values and tolerate bad JSON."""
        store = MemoryStore({"broken": "{not json"})
        store.set_json("order", [2, 0, 1])

        assert store.get_json("order") == [2, 0, 1]
        assert store.get_json("broken") is None

    def test_clear(self) -> None:
        """Test clear removes everything."""
        store = MemoryStore({"a": "1", "b": "2"})

        store.clear()

        assert len(store) == 0


class TestRedisStore:
    """Tests for RedisStore against a mocked client."""

    @pytest.fixture
    def redis_client(self) -> MagicMock:
        """Create a mock redis client."""
        return MagicMock()

    def test_keys_are_namespaced(self, redis_client: MagicMock) -> None:
        """Test reads and writes use the namespace prefix."""
        redis_client.get.return_value = "3"
        store = RedisStore(redis_client, "hubengage:session:abc")

        value = store.get("notifications.dismissals")
        store.set("notifications.dismissals", "4")

        assert value == "3"
        redis_client.get.assert_called_once_with("hubengage:session:abc:notifications.dismissals")
        redis_client.set.assert_called_once_with(
            "hubengage:session:abc:notifications.dismissals", "4", ex=None
        )

    def test_ttl_applied_on_every_write(self, redis_client: MagicMock) -> None:
        """Test session stores refresh expiry on write."""
        store = RedisStore(redis_client, "ns", ttl_seconds=60)

        store.set("k", "v")

        redis_client.set.assert_called_once_with("ns:k", "v", ex=60)

    def test_decodes_bytes(self, redis_client: MagicMock) -> None:
        """Test byte responses are decoded."""
        redis_client.get.return_value = b"hello"
        store = RedisStore(redis_client, "ns")

        assert store.get("k") == "hello"

    def test_clear_scans_namespace(self, redis_client: MagicMock) -> None:
        """Test clear deletes only the namespace's keys."""
        redis_client.scan_iter.return_value = iter(["ns:a", "ns:b"])
        store = RedisStore(redis_client, "ns")

        store.clear()

        redis_client.scan_iter.assert_called_once_with(match="ns:*")
        redis_client.delete.assert_called_once_with("ns:a", "ns:b")

    def test_redis_errors_wrapped(self, redis_client: MagicMock) -> None:
        """Test redis failures surface as StoreError."""
        redis_client.get.side_effect = RedisConnectionError("down")
        store = RedisStore(redis_client, "ns")

        with pytest.raises(StoreError) as exc_info:
            store.get("k")

        assert "ns:k" in str(exc_info.value)
        assert isinstance(exc_info.value.original_error, RedisConnectionError)


class TestStoreFactories:
    """Tests for create_session_store and create_persistent_store."""

    def test_memory_backend(self) -> None:
        """Test the default backend is in-process."""
        settings = Settings(_env_file=None)

        assert isinstance(create_session_store(settings, "abc"), MemoryStore)
        assert isinstance(create_persistent_store(settings, "user-1"), MemoryStore)

    def test_redis_backend_namespaces(self) -> None:
        """Test redis stores are namespaced per session and per user."""
        settings = Settings(
            _env_file=None,
            session_store=SessionStoreSettings(backend="redis", session_ttl_seconds=600),
        )
        client = MagicMock()

        session = create_session_store(settings, "abc", redis_client=client)
        persistent = create_persistent_store(settings, "user-1", redis_client=client)

        assert isinstance(session, RedisStore)
        assert session.namespace == "hubengage:session:abc"
        assert session.ttl_seconds == 600
        assert isinstance(persistent, RedisStore)
        assert persistent.namespace == "hubengage:user:user-1"
        assert persistent.ttl_seconds is None

    def test_memory_persistent_store_shared_per_owner(self) -> None:
        """Test the memory backend reuses one persistent store per owner."""
        settings = Settings(_env_file=None)

        first = create_persistent_store(settings, "user-1")
        first.set("feedback.session_count", "2")

        assert create_persistent_store(settings, "user-1") is first
        assert create_persistent_store(settings, "user-1").get("feedback.session_count") == "2"
        assert create_persistent_store(settings, "user-2") is not first
        assert create_session_store(settings, "abc") is not create_session_store(settings, "abc")

    def test_reset_memory_stores(self) -> None:
        """Test reset forgets every in-process persistent store."""
        settings = Settings(_env_file=None)
        first = create_persistent_store(settings, "user-1")

        reset_memory_stores()

        assert create_persistent_store(settings, "user-1") is not first

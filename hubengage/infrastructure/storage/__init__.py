# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session-scoped and persistent key-value storage.

Two stores exist per browsing session:
- the session store (feed cache, dismissal counter, pool order), which
  survives navigation but expires with the session;
- the persistent store (feedback bookkeeping), keyed by user.

Example:
    from hubengage.infrastructure.storage import create_session_store

    store = create_session_store(settings, session_id="abc")
    store.set("notifications.dismissals", "2")
"""

from typing import Optional

from redis import Redis

from hubengage.core.config.settings import Settings
from hubengage.infrastructure.storage.base import KeyValueStore, StoreError
from hubengage.infrastructure.storage.memory import MemoryStore
from hubengage.infrastructure.storage.redis_store import RedisStore

# In-process persistent stores, one per owner, shared by every hub in the process
_memory_persistent_stores: dict[str, MemoryStore] = {}


def create_redis_client(settings: Settings) -> Redis:
    """Create a redis-py client from settings.

    Args:
        settings: Application settings.

    Returns:
        A client decoding responses to str.
    """
    return Redis.from_url(
        settings.redis.url,
        decode_responses=True,
        socket_timeout=settings.redis.socket_timeout,
    )


def create_session_store(
    settings: Settings,
    session_id: str,
    redis_client: Optional[Redis] = None,
) -> KeyValueStore:
    """Create the store for one browsing session.

    Args:
        settings: Application settings.
        session_id: Browsing session identifier.
        redis_client: Client to reuse when the backend is redis.

    Returns:
        A MemoryStore or a TTL-bound RedisStore.
    """
    config = settings.session_store
    if config.backend == "memory":
        return MemoryStore()
    return RedisStore(
        redis_client or create_redis_client(settings),
        namespace=f"{config.key_prefix}:session:{session_id}",
        ttl_seconds=config.session_ttl_seconds,
    )


def create_persistent_store(
    settings: Settings,
    owner_key: str,
    redis_client: Optional[Redis] = None,
) -> KeyValueStore:
    """Create the cross-session store for one user (or anonymous visitor).

    With the memory backend the same MemoryStore is returned for the same
    owner on every call, so session counts and weekly prompt records
    outlive a single browsing session.

    Args:
        settings: Application settings.
        owner_key: User id, or a stable visitor key.
        redis_client: Client to reuse when the backend is redis.

    Returns:
        A MemoryStore or a non-expiring RedisStore.
    """
    config = settings.session_store
    if config.backend == "memory":
        return _memory_persistent_stores.setdefault(owner_key, MemoryStore())
    return RedisStore(
        redis_client or create_redis_client(settings),
        namespace=f"{config.key_prefix}:user:{owner_key}",
    )


def reset_memory_stores() -> None:
    """Forget all in-process persistent stores (primarily for testing)."""
    _memory_persistent_stores.clear()


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "StoreError",
    "create_redis_client",
    "create_session_store",
    "create_persistent_store",
    "reset_memory_stores",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis-backed key-value store with namespace isolation.

All keys are prefixed with ``{namespace}:`` so one Redis database can hold
many browsing sessions and users side by side. A store created with
``ttl_seconds`` behaves like session storage: every write refreshes the
key's expiry, so idle sessions disappear on their own. Without a TTL the
keys persist.

The synchronous redis-py client is used because the schedulers read and
write from inside event-loop timer callbacks, which cannot await.

Example:
    from redis import Redis
    from hubengage.infrastructure.storage import RedisStore

    client = Redis.from_url(settings.redis.url, decode_responses=True)
    session = RedisStore(client, "hubengage:session:abc", ttl_seconds=43200)
    session.set("notifications.dismissals", "1")
"""

from typing import Optional

from redis import Redis
from redis.exceptions import RedisError as BaseRedisError

from hubengage.infrastructure.storage.base import KeyValueStore, StoreError


class RedisStore(KeyValueStore):
    """Namespaced Redis store.

    Attributes:
        namespace: Key prefix owned by this store.
        ttl_seconds: Expiry applied on every write, or None to persist.
    """

    def __init__(
        self,
        client: Redis,
        namespace: str,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        """Initialize the store.

        Args:
            client: redis-py client created with ``decode_responses=True``.
            namespace: Key prefix, e.g. ``hubengage:session:<id>``.
            ttl_seconds: Expiry refreshed on every write.
        """
        self._redis = client
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds

    def _key(self, key: str) -> str:
        """Build a namespaced key."""
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        full_key = self._key(key)
        try:
            value = self._redis.get(full_key)
        except BaseRedisError as e:
            raise StoreError(f"Failed to get key: {full_key}", e) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        full_key = self._key(key)
        try:
            self._redis.set(full_key, value, ex=self.ttl_seconds)
        except BaseRedisError as e:
            raise StoreError(f"Failed to set key: {full_key}", e) from e

    def delete(self, key: str) -> None:
        full_key = self._key(key)
        try:
            self._redis.delete(full_key)
        except BaseRedisError as e:
            raise StoreError(f"Failed to delete key: {full_key}", e) from e

    def clear(self) -> None:
        pattern = f"{self.namespace}:*"
        try:
            keys = list(self._redis.scan_iter(match=pattern))
            if keys:
                self._redis.delete(*keys)
        except BaseRedisError as e:
            raise StoreError(f"Failed to clear namespace: {self.namespace}", e) from e

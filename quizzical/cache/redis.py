from __future__ import annotations

import redis


class RedisCache(object):
    """Cache entries kept in Redis under `<namespace>:<key>`, optionally expiring"""

    def __init__(self, client: redis.Redis, namespace: str, ttl_seconds: int | None = None):
        self.client = client
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> str | None:
        value = self.client.get(self._key(key))
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def set(self, key: str, value: str) -> None:
        self.client.set(self._key(key), value, ex=self.ttl_seconds)

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))

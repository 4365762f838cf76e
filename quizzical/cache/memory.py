from __future__ import annotations


class MemoryCache(object):
    """Process-local cache, for local use and tests"""

    def __init__(self, namespace: str = "quizzical:overrides"):
        self.namespace = namespace
        self.entries: dict[str, str] = {}

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> str | None:
        return self.entries.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self.entries[self._key(key)] = value

    def delete(self, key: str) -> None:
        self.entries.pop(self._key(key), None)

    def __contains__(self, key: str) -> bool:
        return self._key(key) in self.entries

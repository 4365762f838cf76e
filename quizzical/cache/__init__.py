__all__ = [
    "CacheBackend",
    "MemoryCache",
    "RedisCache",
]

import typing as t
from abc import abstractmethod


class CacheBackend(t.Protocol):
    """A keyed cache of strings"""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key` if present; removing an absent key is not an error"""
        ...


from .memory import MemoryCache  # noqa: E402
from .redis import RedisCache  # noqa: E402

from __future__ import annotations

import typing as t
from pathlib import Path

import annotated_types as ant
import pydantic as p

from .base import BaseSettings

Port = t.Annotated[int, ant.Gt(0), ant.Le(65535)]


class PostgresqlSettings(BaseSettings):
    host: p.IPvAnyAddress | str | None = None
    port: Port = 5432
    database: str
    driver: t.Literal["postgresql+psycopg"] = "postgresql+psycopg"


class SqliteSettings(BaseSettings):
    """SQLite database; a `path` of None means a private in-memory database."""

    path: Path | None = None
    driver: t.Literal["sqlite+pysqlite"] = "sqlite+pysqlite"


class PersistentSettings(BaseSettings):
    """Exactly one database backend is configured per environment."""

    postgresql: PostgresqlSettings | None = None
    sqlite: SqliteSettings | None = None

    @p.model_validator(mode="after")
    def check_one_backend(self) -> t.Self:
        if (self.postgresql is None) == (self.sqlite is None):
            raise ValueError("configure exactly one of storage.persistent.postgresql, storage.persistent.sqlite")
        return self


class MemoryCacheSettings(BaseSettings):
    namespace: str = "quizzical:overrides"


class RedisSettings(BaseSettings):
    """Redis connection settings.

    Supports either Unix socket or TCP connection.
    If socket_path is set, it takes precedence over host/port.
    """

    socket_path: Path | None = None
    host: str = "localhost"
    port: Port = 6379
    database: int = 0
    namespace: str = "quizzical:overrides"
    ttl_seconds: int | None = 3600


class CacheSettings(BaseSettings):
    memory: MemoryCacheSettings | None = None
    redis: RedisSettings | None = None

    @p.model_validator(mode="after")
    def check_one_backend(self) -> t.Self:
        if self.memory is not None and self.redis is not None:
            raise ValueError("configure at most one of storage.cache.memory, storage.cache.redis")
        return self


class StorageSettings(BaseSettings):
    persistent: PersistentSettings
    cache: CacheSettings = p.Field(default_factory=lambda: CacheSettings(memory=MemoryCacheSettings()))

from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import redis
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
import sqlalchemy.pool
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

import quizzical.lib.json as json
from quizzical.cache import CacheBackend, MemoryCache, RedisCache

from ..config.secrets import PostgresqlSecrets, RedisSecrets
from ..config.storage import CacheSettings, PersistentSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def provide_dsn(config: PersistentSettings, secrets: PostgresqlSecrets | None) -> DSN:
    if config.sqlite is not None:
        # a database of None is SQLite's private in-memory database
        path = config.sqlite.path
        return DSN.create(config.sqlite.driver, database=str(path) if path else None)

    assert config.postgresql is not None
    pg = config.postgresql
    return DSN.create(
        pg.driver,
        database=pg.database,
        username=secrets.username.get_secret_value() if secrets and secrets.username else None,
        password=secrets.password.get_secret_value() if secrets and secrets.password else None,
        port=pg.port,
        host=str(pg.host) if pg.host else None,
    )


def provide_alembic_conf(migration_path: Path, dsn: DSN, root: Path | NotReady) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    escaped_str = dsn.render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(dsn: DSN, logging: LoggingProvider) -> sqlalchemy.Engine:
    logger = logging.get_logger()

    if dsn.get_backend_name() == "sqlite":
        kwargs: dict[str, t.Any] = {}
        if dsn.database is None:
            # every session must see the same in-memory database
            kwargs.update(poolclass=sqlalchemy.pool.StaticPool, connect_args={"check_same_thread": False})
        engine = sqlalchemy.create_engine(dsn, **kwargs)
        sqlalchemy.event.listen(engine, "connect", enable_foreign_keys)
    else:
        engine = sqlalchemy.create_engine(dsn, json_serializer=json.dumps, json_deserializer=json.loads)

    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": dsn.drivername,
            "database": dsn.database,
            "host": dsn.host,
            "port": dsn.port,
        },
    )
    return engine


def enable_foreign_keys(dbapi_conn: t.Any, _: t.Any) -> None:
    """SQLite only enforces foreign keys (and their cascades) when asked to, per connection"""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Caller is responsible for closing it."""
    maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return maker(autobegin=False)


def provide_cache(config: CacheSettings, secrets: RedisSecrets | None, logging: LoggingProvider) -> CacheBackend:
    """Redis if configured, otherwise a process-local cache"""
    logger = logging.get_logger()

    if config.redis is None:
        namespace = config.memory.namespace if config.memory else "quizzical:overrides"
        return MemoryCache(namespace=namespace)

    rc = config.redis
    password = secrets.password.get_secret_value() if secrets and secrets.password else None
    if rc.socket_path:
        client = redis.Redis(unix_socket_path=str(rc.socket_path), db=rc.database, password=password)
    else:
        client = redis.Redis(host=rc.host, port=rc.port, db=rc.database, password=password)
    logger.info(
        "initialized redis cache",
        extra={"host": rc.host, "port": rc.port, "socket_path": rc.socket_path, "namespace": rc.namespace},
    )
    return RedisCache(client, namespace=rc.namespace, ttl_seconds=rc.ttl_seconds)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    secrets = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    settings: Provider[PersistentSettings] = Singleton(PersistentSettings, config)
    dsn: Provider[DSN] = Singleton(
        provide_dsn,
        config=settings,
        secrets=secrets.postgresql.as_(PostgresqlSecrets),
    )
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf,
        migration_path=Path("migrations/"),
        dsn=dsn,
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(provide_engine, dsn=dsn, logging=logging)
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    secrets: Provider[StorageSettings] = Configuration(strict=True)
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, logging=logging, root=root
    )
    cache: Provider[CacheBackend] = Singleton(
        provide_cache,
        config=config.cache.as_(CacheSettings),
        secrets=secrets.redis.as_(RedisSecrets),
        logging=logging,
    )

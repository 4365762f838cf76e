"""Override engine container for dependency injection."""

from __future__ import annotations

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Dependency, Factory, Provider, Singleton
from sqlalchemy.orm import Session

from quizzical.cache import CacheBackend
from quizzical.model import UserID
from quizzical.override import GrantCapabilityChecker, OverrideCache, OverrideEventEmitter, OverrideManager, \
    SQLDirectory, SQLOverrideStore, StoredCalendarSynchronizer


def provide_override_manager(
    actor_id: UserID,
    session: Session,
    cache: OverrideCache,
    events: OverrideEventEmitter,
) -> OverrideManager:
    """A manager acting for `actor_id` whose collaborators all share one session"""
    return OverrideManager(
        actor_id=actor_id,
        store=SQLOverrideStore(session),
        directory=SQLDirectory(session),
        cache=cache,
        events=events,
        calendar=StoredCalendarSynchronizer(session),
        capabilities=GrantCapabilityChecker(session),
    )


class OverrideContainer(DeclarativeContainer):
    """Container for override services; call `manager(actor_id=...)` for a manager."""

    session: Provider[Session] = Dependency(instance_of=Session)
    cache_backend: Provider[CacheBackend] = Dependency()

    events: Provider[OverrideEventEmitter] = Singleton(OverrideEventEmitter)
    cache: Provider[OverrideCache] = Singleton(OverrideCache, backend=cache_backend)
    manager: Provider[OverrideManager] = Factory(
        provide_override_manager,
        session=session,
        cache=cache,
        events=events,
    )

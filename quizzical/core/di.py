from __future__ import annotations

__all__ = [
    "Container",
    "NotReady",
    "Provider",
    "Provide",
    "as_",
    "inject",
    "providers",
    "containers",
]

import typing as t

import dependency_injector.containers as containers
import dependency_injector.providers as providers
import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import Provide, TypeModifier

P = t.ParamSpec("P")
TReturn = t.TypeVar("TReturn")
TAs = t.TypeVar("TAs")


def inject(fn: t.Callable[P, TReturn]) -> t.Callable[P, TReturn]:
    return t.cast(t.Callable[P, TReturn], wiring.inject(fn))


def as_(type_: t.Type[TAs]) -> TypeModifier:
    """Return custom type modifier."""
    # replace wiring.as_ because that one has typing issues
    return TypeModifier(type_)


class NotReady(object):
    """Placeholder for container values that only exist after boot"""

    _instance: t.ClassVar[NotReady | None] = None

    def __new__(cls) -> NotReady:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<NotReady>"

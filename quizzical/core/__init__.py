import typing as t

__all__ = [
    "BootConfiguration",
    "di",
    "QuizzicalContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
    "TimestampProvider",
]


from . import di
from .config import Secrets, Settings
from .provider import LoggingProvider, TimestampProvider

if t.TYPE_CHECKING:
    from .container import BootConfiguration, QuizzicalContainer


def __getattr__(name: str) -> t.Any:
    # containers import the override engine, which imports storage, which needs `di` from here
    if name in ("BootConfiguration", "QuizzicalContainer"):
        from . import container

        return getattr(container, name)
    raise AttributeError(f"module {__name__} has no attribute {name}")

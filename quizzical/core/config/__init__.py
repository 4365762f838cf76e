__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "PersistentSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
]


from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import CacheSettings, PersistentSettings, StorageSettings

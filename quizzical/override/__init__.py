__all__ = [
    "AuthorizationError",
    "CalendarSynchronizer",
    "CapabilityChecker",
    "Directory",
    "GrantCapabilityChecker",
    "NotFoundError",
    "OverrideCache",
    "OverrideError",
    "OverrideEventEmitter",
    "OverrideFormData",
    "OverrideManager",
    "OverrideStore",
    "Rejected",
    "Rule",
    "SQLDirectory",
    "SQLOverrideStore",
    "StoredCalendarSynchronizer",
    "ValidationContext",
    "ValidationError",
    "validate",
]

from .cache import OverrideCache
from .calendar import CalendarSynchronizer, StoredCalendarSynchronizer
from .capability import CapabilityChecker, GrantCapabilityChecker
from .directory import Directory, SQLDirectory
from .errors import AuthorizationError, NotFoundError, OverrideError, ValidationError
from .event import OverrideEventEmitter
from .form import OverrideFormData
from .manager import OverrideManager
from .store import OverrideStore, SQLOverrideStore
from .validator import Rejected, Rule, validate, ValidationContext

__all__ = [
    "DeleteOverrideResult",
    "GetOverridesResult",
    "OverrideFormData",
    "OverrideRecord",
    "OverrideRef",
    "QuizRef",
    "UpsertOverrideResult",
    "delete_overrides",
    "get_overrides",
    "upsert_overrides",
]

from .override import delete_overrides, get_overrides, upsert_overrides
from .view import DeleteOverrideResult, GetOverridesResult, OverrideFormData, OverrideRecord, OverrideRef, \
    QuizRef, UpsertOverrideResult

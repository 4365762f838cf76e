"""Input and result shapes of the batch override calls."""

from __future__ import annotations

import pydantic as p

from quizzical.model import GroupID, OverrideID, QuizID, QuizOverride, UserID
from quizzical.override import OverrideFormData

__all__ = [
    "DeleteOverrideResult",
    "GetOverridesResult",
    "OverrideFormData",
    "OverrideRecord",
    "OverrideRef",
    "QuizRef",
    "UpsertOverrideResult",
]


class QuizRef(p.BaseModel):
    id: QuizID


class OverrideRef(p.BaseModel):
    id: OverrideID


class OverrideRecord(p.BaseModel):
    """An override as returned to callers."""

    id: OverrideID
    quiz: QuizID
    userid: UserID | None = None
    groupid: GroupID | None = None
    timeopen: int | None = None
    timeclose: int | None = None
    timelimit: int | None = None
    attempts: int | None = None
    password: str | None = None

    @classmethod
    def from_override(cls, override: QuizOverride) -> OverrideRecord:
        assert override.override_id is not None
        return cls(
            id=override.override_id,
            quiz=override.quiz_id,
            userid=override.user_id,
            groupid=override.group_id,
            timeopen=override.time_open,
            timeclose=override.time_close,
            timelimit=override.time_limit,
            attempts=override.attempts,
            password=override.password,
        )


class GetOverridesResult(p.BaseModel):
    data: list[OverrideRecord] = []
    error: str | None = None


class UpsertOverrideResult(p.BaseModel):
    id: OverrideID | None = None
    error: str | None = None


class DeleteOverrideResult(p.BaseModel):
    id: OverrideID | None = None
    error: str | None = None

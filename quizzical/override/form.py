from __future__ import annotations

import typing as t

import pydantic as p

from quizzical.model import BaseModel, GroupID, OverrideCandidate, OverrideID, QuizID, QuizOverride, UserID

# submitted field name -> override field name
FORM_FIELDS: t.Final[dict[str, str]] = {
    "userid": "user_id",
    "groupid": "group_id",
    "timeopen": "time_open",
    "timeclose": "time_close",
    "timelimit": "time_limit",
    "attempts": "attempts",
    "password": "password",
}


class OverrideFormData(BaseModel):
    """An override as submitted by a caller.

    Unrecognized fields are dropped. Which fields were present matters: on
    update, an absent field keeps the existing value while an explicit None
    clears it.
    """

    model_config = p.ConfigDict(extra="ignore")

    id: OverrideID | None = None
    quizid: QuizID
    groupid: GroupID | None = None
    userid: UserID | None = None
    timeopen: int | None = None
    timeclose: int | None = None
    timelimit: int | None = None
    attempts: int | None = None
    password: str | None = None

    def to_candidate(self, existing: QuizOverride | None = None) -> OverrideCandidate:
        data: dict[str, t.Any] = OverrideCandidate.from_override(existing).model_dump() if existing else {}
        data.update({FORM_FIELDS[k]: getattr(self, k) for k in self.model_fields_set if k in FORM_FIELDS})
        data.update(override_id=self.id, quiz_id=self.quizid)
        return OverrideCandidate(**data)

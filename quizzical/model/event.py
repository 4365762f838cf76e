import enum

import pydantic as p

from .base import BaseModel
from .id import OverrideID, QuizID
from .override import ScopeKind


class OverrideEventKind(enum.Enum):
    Created = "created"
    Updated = "updated"
    Deleted = "deleted"


class OverrideEvent(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    kind: OverrideEventKind
    scope_kind: ScopeKind
    override_id: OverrideID
    quiz_id: QuizID
    member_id: int

    @property
    def name(self) -> str:
        """e.g. `user_override_created`"""
        return f"{self.scope_kind.value}_override_{self.kind.value}"

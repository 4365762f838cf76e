import enum

from .base import BaseModel
from .id import CalendarEventID, GroupID, QuizID, UserID


class CalendarEventType(enum.Enum):
    Open = "open"
    Close = "close"


class CalendarEvent(BaseModel):
    event_id: CalendarEventID
    quiz_id: QuizID
    user_id: UserID | None = None
    group_id: GroupID | None = None
    event_type: CalendarEventType
    time_start: int
    name: str

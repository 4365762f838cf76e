from .base import BaseModel
from .id import CourseID, QuizID


class QuizSettings(BaseModel):
    """The settings an override may replace, as unix timestamps, seconds and counts"""

    time_open: int | None = None
    time_close: int | None = None
    time_limit: int | None = None
    attempts: int | None = None
    password: str | None = None


class Quiz(QuizSettings):
    quiz_id: QuizID
    course_id: CourseID
    name: str

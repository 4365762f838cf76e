import typing as t

# Row identities are plain database integers; these aliases keep signatures legible
CourseID = t.NewType("CourseID", int)
UserID = t.NewType("UserID", int)
GroupID = t.NewType("GroupID", int)
QuizID = t.NewType("QuizID", int)
OverrideID = t.NewType("OverrideID", int)
CalendarEventID = t.NewType("CalendarEventID", int)

__all__ = [
    # Base
    "BaseModel",
    # Enums
    "DeploymentEnvironment",
    # ID Types
    "CalendarEventID",
    "CourseID",
    "GroupID",
    "OverrideID",
    "QuizID",
    "UserID",
    # Course
    "Capability",
    "CapabilityGrant",
    "Course",
    "Group",
    "User",
    # Quiz
    "Quiz",
    "QuizSettings",
    # Override
    "OVERRIDE_FIELDS",
    "GroupScope",
    "OverrideCandidate",
    "OverrideScope",
    "QuizOverride",
    "ScopeKind",
    "UserScope",
    # Events
    "OverrideEvent",
    "OverrideEventKind",
    # Calendar
    "CalendarEvent",
    "CalendarEventType",
]

from .base import BaseModel
from .calendar import CalendarEvent, CalendarEventType
from .course import Capability, CapabilityGrant, Course, Group, User
from .enum import DeploymentEnvironment
from .event import OverrideEvent, OverrideEventKind
from .id import CalendarEventID, CourseID, GroupID, OverrideID, QuizID, UserID
from .override import GroupScope, OVERRIDE_FIELDS, OverrideCandidate, OverrideScope, QuizOverride, ScopeKind, \
    UserScope
from .quiz import Quiz, QuizSettings

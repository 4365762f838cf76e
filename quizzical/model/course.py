import enum

from pydantic import EmailStr

from .base import BaseModel
from .id import CourseID, GroupID, UserID


class Course(BaseModel):
    course_id: CourseID
    name: str


class User(BaseModel):
    user_id: UserID
    email: EmailStr
    name: str
    deleted: bool = False


class Group(BaseModel):
    group_id: GroupID
    course_id: CourseID
    name: str


class Capability(enum.Enum):
    ManageOverrides = "quiz:manageoverrides"
    ViewOverrides = "quiz:viewoverrides"


class CapabilityGrant(BaseModel):
    user_id: UserID
    course_id: CourseID
    capability: Capability

from __future__ import annotations

import typing as t
from abc import abstractmethod

import quizzical.storage.group as group_storage
import quizzical.storage.quiz as quiz_storage
import quizzical.storage.user as user_storage
from quizzical.model import Group, GroupID, Quiz, QuizID, UserID
from quizzical.storage import Session


class Directory(t.Protocol):
    """Read access to the quizzes, users and groups overrides refer to"""

    @abstractmethod
    def get_quiz(self, quiz_id: QuizID) -> Quiz | None: ...

    @abstractmethod
    def is_real_user(self, user_id: UserID) -> bool: ...

    @abstractmethod
    def get_group(self, group_id: GroupID) -> Group | None: ...


class SQLDirectory(Directory):
    def __init__(self, session: Session):
        self.session = session

    def get_quiz(self, quiz_id: QuizID) -> Quiz | None:
        return quiz_storage.get(quiz_id, session=self.session)

    def is_real_user(self, user_id: UserID) -> bool:
        return user_storage.exists(user_id, session=self.session)

    def get_group(self, group_id: GroupID) -> Group | None:
        return group_storage.get(group_id, session=self.session)

from __future__ import annotations

import logging

from quizzical.cache import CacheBackend
from quizzical.model import GroupID, GroupScope, QuizID, UserID, UserScope

logger = logging.getLogger(__name__)


class OverrideCache(object):
    """Invalidates the per-user and per-group override cache entries of a quiz.

    Readers populate these entries; nothing here ever writes one.
    """

    def __init__(self, backend: CacheBackend):
        self.backend = backend

    @staticmethod
    def user_key(quiz_id: QuizID, user_id: UserID) -> str:
        return f"{quiz_id}_u_{user_id}"

    @staticmethod
    def group_key(quiz_id: QuizID, group_id: GroupID) -> str:
        return f"{quiz_id}_g_{group_id}"

    @classmethod
    def key_for(cls, quiz_id: QuizID, scope: UserScope | GroupScope) -> str:
        match scope:
            case UserScope(user_id=user_id):
                return cls.user_key(quiz_id, user_id)
            case GroupScope(group_id=group_id):
                return cls.group_key(quiz_id, group_id)

    def invalidate(self, quiz_id: QuizID, scope: UserScope | GroupScope) -> None:
        key = self.key_for(quiz_id, scope)
        self.backend.delete(key)
        logger.debug("invalidated override cache entry", extra={"key": key})

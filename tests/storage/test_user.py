"""Tests for quizzical.storage.user module."""

from __future__ import annotations

import typing as t

import pytest
import sqlalchemy.exc
from sqlalchemy.orm import Session

from quizzical.model import User, UserID
from quizzical.storage import user as user_storage


class TestGet(object):
    """Tests for user_storage.get()."""

    def test_get_by_user_id(self, db_session: Session, user_factory: t.Callable[..., User]) -> None:
        """get() with user_id returns the user."""
        user = user_factory(email="test@acme.edu")

        with db_session.begin():
            result = user_storage.get(user.user_id, session=db_session)

        assert result is not None
        assert result.user_id == user.user_id
        assert result.email == "test@acme.edu"
        assert result.deleted is False

    def test_get_by_email(self, db_session: Session, user_factory: t.Callable[..., User]) -> None:
        """get() with email returns the user."""
        user = user_factory(email="findme@acme.edu")

        with db_session.begin():
            result = user_storage.get(email="findme@acme.edu", session=db_session)

        assert result is not None
        assert result.user_id == user.user_id

    def test_get_missing(self, db_session: Session) -> None:
        with db_session.begin():
            assert user_storage.get(UserID(9999), session=db_session) is None

    def test_requires_exactly_one_key(self, db_session: Session) -> None:
        with pytest.raises(ValueError):
            user_storage.get(session=db_session)
        with pytest.raises(ValueError):
            user_storage.get(UserID(1), email="x@acme.edu", session=db_session)


class TestCreate(object):
    """Tests for user_storage.create()."""

    def test_duplicate_email(self, user_factory: t.Callable[..., User]) -> None:
        user_factory(email="twice@acme.edu")

        with pytest.raises(sqlalchemy.exc.IntegrityError):
            user_factory(email="twice@acme.edu")


class TestExists(object):
    """Tests for user_storage.exists()."""

    def test_live_user(self, db_session: Session, test_user: User) -> None:
        with db_session.begin():
            assert user_storage.exists(test_user.user_id, session=db_session)

    def test_deleted_user(self, db_session: Session, user_factory: t.Callable[..., User]) -> None:
        """A deleted account no longer counts as a real user."""
        user = user_factory(deleted=True)

        with db_session.begin():
            assert not user_storage.exists(user.user_id, session=db_session)

    def test_missing_user(self, db_session: Session) -> None:
        with db_session.begin():
            assert not user_storage.exists(UserID(9999), session=db_session)


class TestUpdate(object):
    """Tests for user_storage.update()."""

    def test_update_name(self, db_session: Session, test_user: User) -> None:
        with db_session.begin():
            result = user_storage.update(test_user.user_id, name="Renamed", session=db_session)

        assert result.name == "Renamed"
        assert result.email == test_user.email

    def test_update_missing(self, db_session: Session) -> None:
        with pytest.raises(KeyError):
            with db_session.begin():
                user_storage.update(UserID(9999), name="Nobody", session=db_session)

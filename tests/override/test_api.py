"""Tests for the batch override calls in quizzical.api."""

from __future__ import annotations

import typing as t

import pytest

from quizzical.api import delete_overrides, get_overrides, upsert_overrides
from quizzical.api.view import OverrideFormData, QuizRef
from quizzical.override import AuthorizationError, OverrideManager, Rule
from quizzical.override.memory import MemoryOverrideStore


class TestGetOverrides(object):
    """Tests for get_overrides()."""

    def test_returns_records_per_quiz(self, manager: OverrideManager, ids: t.Any) -> None:
        override_id = manager.upsert_override(
            {"quizid": ids.quiz, "userid": ids.learner, "timeclose": 5000, "password": "pw"}
        )

        results = get_overrides([{"id": ids.quiz}], manager=manager)

        assert len(results) == 1
        assert results[0].error is None
        [record] = results[0].data
        assert record.id == override_id
        assert record.quiz == ids.quiz
        assert record.userid == ids.learner
        assert record.groupid is None
        assert record.timeclose == 5000
        assert record.password == "pw"

    def test_errors_are_per_item(self, manager: OverrideManager, ids: t.Any) -> None:
        """An unknown quiz between two good ones only fails its own item."""
        results = get_overrides([QuizRef(id=ids.quiz), {"id": 9999}, {"id": ids.quiz}], manager=manager)

        assert [r.error is None for r in results] == [True, False, True]
        assert results[1].data == []

    def test_malformed_item(self, manager: OverrideManager) -> None:
        results = get_overrides([{"quiz": "nope"}], manager=manager)

        assert results[0].error is not None
        assert "id" in results[0].error

    def test_unauthorized_item(self, manager_factory: t.Callable[..., OverrideManager], ids: t.Any) -> None:
        results = get_overrides([{"id": ids.quiz}], manager=manager_factory(ids.learner))

        assert results[0].error is not None
        assert results[0].data == []


class TestUpsertOverrides(object):
    """Tests for upsert_overrides()."""

    def test_creates_and_updates(self, manager: OverrideManager, store: MemoryOverrideStore, ids: t.Any) -> None:
        [created] = upsert_overrides([{"quizid": ids.quiz, "userid": ids.learner, "attempts": 3}], manager=manager)
        assert created.error is None
        assert created.id is not None

        [updated] = upsert_overrides(
            [OverrideFormData(id=created.id, quizid=ids.quiz, attempts=5)],
            manager=manager,
        )

        assert updated.error is None
        assert updated.id == created.id
        override = store.get(created.id)
        assert override is not None
        assert override.attempts == 5

    def test_reports_rule_message(self, manager: OverrideManager, ids: t.Any) -> None:
        results = upsert_overrides(
            [
                {"quizid": ids.quiz, "userid": ids.learner, "groupid": ids.group, "attempts": 2},
                {"quizid": ids.quiz, "userid": ids.learner, "attempts": 2},
            ],
            manager=manager,
        )

        assert results[0].error == Rule.CannotSetBoth.message
        assert results[0].id is None
        assert results[1].error is None
        assert results[1].id is not None

    def test_echoes_id_on_failure(self, manager: OverrideManager, ids: t.Any) -> None:
        [result] = upsert_overrides([{"id": 9999, "quizid": ids.quiz, "attempts": 2}], manager=manager)

        assert result.id == 9999
        assert result.error == Rule.OverrideNotFound.message

    def test_malformed_item(self, manager: OverrideManager, ids: t.Any) -> None:
        results = upsert_overrides(
            [{"userid": ids.learner, "attempts": 2}, {"quizid": ids.quiz, "userid": ids.learner, "attempts": 2}],
            manager=manager,
        )

        assert results[0].error is not None
        assert "quizid" in results[0].error
        assert results[1].error is None

    def test_unauthorized_aborts(self, manager_factory: t.Callable[..., OverrideManager], ids: t.Any) -> None:
        with pytest.raises(AuthorizationError):
            upsert_overrides(
                [{"quizid": ids.quiz, "userid": ids.learner, "attempts": 2}],
                manager=manager_factory(ids.viewer),
            )


class TestDeleteOverrides(object):
    """Tests for delete_overrides()."""

    def test_deletes_and_reports(self, manager: OverrideManager, store: MemoryOverrideStore, ids: t.Any) -> None:
        override_id = manager.upsert_override({"quizid": ids.quiz, "userid": ids.learner, "attempts": 3})

        results = delete_overrides([{"id": override_id}, {"id": 9999}], manager=manager)

        assert results[0].id == override_id
        assert results[0].error is None
        assert results[1].id == 9999
        assert results[1].error == Rule.OverrideNotFound.message
        assert store.overrides == {}

    def test_malformed_item(self, manager: OverrideManager, store: MemoryOverrideStore, ids: t.Any) -> None:
        """A malformed item is reported in place and the rest of the batch still runs."""
        first = manager.upsert_override({"quizid": ids.quiz, "userid": ids.learner, "attempts": 3})
        last = manager.upsert_override({"quizid": ids.quiz, "userid": ids.other_learner, "attempts": 3})

        results = delete_overrides([{"id": first}, {"id": "abc"}, {}, {"id": last}], manager=manager)

        assert len(results) == 4
        assert [r.id for r in results] == [first, None, None, last]
        assert [r.error is None for r in results] == [True, False, False, True]
        assert "id" in results[1].error
        assert "id" in results[2].error
        assert store.overrides == {}

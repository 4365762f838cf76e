"""Batch calls over the override manager.

Each call returns one result per input, in input order. Malformed input,
validation failures and unknown ids are reported in that item's `error` and
never stop the items after it. An `AuthorizationError` aborts the whole call,
except in `get_overrides` where an unviewable quiz is reported like an unknown
one.
"""

from __future__ import annotations

import logging
import typing as t

import pydantic as p

from quizzical.override import AuthorizationError, NotFoundError, OverrideManager, ValidationError

from .view import DeleteOverrideResult, GetOverridesResult, OverrideFormData, OverrideRecord, OverrideRef, \
    QuizRef, UpsertOverrideResult

logger = logging.getLogger(__name__)


def describe(e: p.ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors())


def get_overrides(
    quizzes: t.Sequence[QuizRef | t.Mapping[str, t.Any]], *, manager: OverrideManager
) -> list[GetOverridesResult]:
    results: list[GetOverridesResult] = []
    for item in quizzes:
        try:
            ref = QuizRef.model_validate(item)
            overrides = manager.get_all_overrides(ref.id)
        except p.ValidationError as e:
            results.append(GetOverridesResult(error=describe(e)))
        except (NotFoundError, AuthorizationError) as e:
            results.append(GetOverridesResult(error=str(e)))
        else:
            results.append(GetOverridesResult(data=[OverrideRecord.from_override(o) for o in overrides]))
    return results


def upsert_overrides(
    overrides: t.Sequence[OverrideFormData | t.Mapping[str, t.Any]], *, manager: OverrideManager
) -> list[UpsertOverrideResult]:
    results: list[UpsertOverrideResult] = []
    for item in overrides:
        try:
            form = item if isinstance(item, OverrideFormData) else OverrideFormData.model_validate(item)
            override_id = manager.upsert_override(form)
        except p.ValidationError as e:
            results.append(UpsertOverrideResult(error=describe(e)))
        except (ValidationError, NotFoundError) as e:
            logger.debug("override not saved", extra={"error": str(e)})
            results.append(UpsertOverrideResult(id=form.id, error=str(e)))
        else:
            results.append(UpsertOverrideResult(id=override_id))
    return results


def delete_overrides(
    overrides: t.Sequence[OverrideRef | t.Mapping[str, t.Any]], *, manager: OverrideManager
) -> list[DeleteOverrideResult]:
    results: list[DeleteOverrideResult] = []
    for item in overrides:
        try:
            ref = OverrideRef.model_validate(item)
            manager.delete_override(ref.id)
        except p.ValidationError as e:
            results.append(DeleteOverrideResult(error=describe(e)))
        except NotFoundError as e:
            results.append(DeleteOverrideResult(id=ref.id, error=str(e)))
        else:
            results.append(DeleteOverrideResult(id=ref.id))
    return results

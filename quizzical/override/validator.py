"""Rules every created or updated override must satisfy.

The rules run as an ordered pipeline of pure check functions over a fully
populated `OverrideCandidate`. Checks only read: anything that needs storage
(whether a user exists, a group's course, sibling overrides) is reached through
the resolvers carried by `ValidationContext`, so the pipeline can be exercised
with plain callables.

The first failing check wins, and each failure names a distinct `Rule`.
"""

from __future__ import annotations

import enum
import typing as t

import pydantic as p

from quizzical.model import BaseModel, Group, GroupID, OverrideCandidate, Quiz, QuizOverride, UserID


class Rule(enum.Enum):
    MustChangeSetting = "must_change_setting"
    InvalidQuiz = "invalid_quiz"
    CannotSetBoth = "cannot_set_both"
    MustSetUserOrGroup = "must_set_user_or_group"
    InvalidUser = "invalid_user"
    InvalidGroup = "invalid_group"
    TimeCloseBeforeTimeOpen = "time_close_before_time_open"
    InvalidAttempts = "invalid_attempts"
    InvalidTimeLimit = "invalid_time_limit"
    MultipleForUser = "multiple_for_user"
    MultipleForGroup = "multiple_for_group"
    OverrideNotFound = "override_not_found"
    CannotChange = "cannot_change"

    @property
    def message(self) -> str:
        return MESSAGES[self]


MESSAGES: t.Final[dict[Rule, str]] = {
    Rule.MustChangeSetting: "No settings were changed",
    Rule.InvalidQuiz: "Invalid quiz",
    Rule.CannotSetBoth: "Userid and groupid were both set, but only one can be set at once.",
    Rule.MustSetUserOrGroup: "Either userid or groupid must be set",
    Rule.InvalidUser: "User id invalid",
    Rule.InvalidGroup: "Group is invalid",
    Rule.TimeCloseBeforeTimeOpen: "Close time cannot be before or the same as the open time.",
    Rule.InvalidAttempts: "Attempts cannot be negative",
    Rule.InvalidTimeLimit: "Time limit cannot be negative",
    Rule.MultipleForUser: "An override already exists for this user",
    Rule.MultipleForGroup: "An override already exists for this group",
    Rule.OverrideNotFound: "Override does not exist",
    Rule.CannotChange: "The user or group of an existing override cannot be changed",
}


class Rejected(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    rule: Rule

    @property
    def message(self) -> str:
        return self.rule.message


class ValidationContext(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    candidate: OverrideCandidate
    quiz: Quiz | None
    existing: QuizOverride | None = None
    is_update: bool = False

    is_real_user: t.Callable[[UserID], bool]
    get_group: t.Callable[[GroupID], Group | None]
    # (quiz_id, *, user_id, group_id, exclude) -> overrides of the quiz for that user or group
    find_siblings: t.Callable[..., t.Sequence[QuizOverride]]


Check = t.Callable[[ValidationContext], Rejected | None]


def check_has_setting(ctx: ValidationContext) -> Rejected | None:
    if ctx.candidate.is_empty():
        return Rejected(rule=Rule.MustChangeSetting)
    return None


def check_quiz(ctx: ValidationContext) -> Rejected | None:
    if ctx.quiz is None or ctx.quiz.quiz_id != ctx.candidate.quiz_id:
        return Rejected(rule=Rule.InvalidQuiz)
    return None


def check_scope(ctx: ValidationContext) -> Rejected | None:
    c = ctx.candidate
    if c.user_id is not None and c.group_id is not None:
        return Rejected(rule=Rule.CannotSetBoth)
    if c.user_id is None and c.group_id is None:
        return Rejected(rule=Rule.MustSetUserOrGroup)
    return None


def check_member(ctx: ValidationContext) -> Rejected | None:
    c = ctx.candidate
    assert ctx.quiz is not None
    if c.user_id is not None and not ctx.is_real_user(c.user_id):
        return Rejected(rule=Rule.InvalidUser)
    if c.group_id is not None:
        group = ctx.get_group(c.group_id)
        if group is None or group.course_id != ctx.quiz.course_id:
            return Rejected(rule=Rule.InvalidGroup)
    return None


def check_times(ctx: ValidationContext) -> Rejected | None:
    c = ctx.candidate
    assert ctx.quiz is not None
    if c.time_open is None and c.time_close is None:
        return None

    # a cleared value means the quiz's own setting applies
    time_open = c.time_open if c.time_open is not None else ctx.quiz.time_open
    time_close = c.time_close if c.time_close is not None else ctx.quiz.time_close
    if time_open is not None and time_close is not None and time_close <= time_open:
        return Rejected(rule=Rule.TimeCloseBeforeTimeOpen)
    return None


def check_limits(ctx: ValidationContext) -> Rejected | None:
    c = ctx.candidate
    if c.attempts is not None and c.attempts < 0:
        return Rejected(rule=Rule.InvalidAttempts)
    if c.time_limit is not None and c.time_limit < 0:
        return Rejected(rule=Rule.InvalidTimeLimit)
    return None


def check_unique(ctx: ValidationContext) -> Rejected | None:
    c = ctx.candidate
    siblings = ctx.find_siblings(
        c.quiz_id,
        user_id=c.user_id,
        group_id=c.group_id,
        exclude=c.override_id if ctx.is_update else None,
    )
    if siblings:
        return Rejected(rule=Rule.MultipleForUser if c.user_id is not None else Rule.MultipleForGroup)
    return None


def check_existing(ctx: ValidationContext) -> Rejected | None:
    if not ctx.is_update:
        return None

    existing = ctx.existing
    if existing is None or existing.override_id != ctx.candidate.override_id:
        return Rejected(rule=Rule.OverrideNotFound)
    if existing.quiz_id != ctx.candidate.quiz_id:
        return Rejected(rule=Rule.OverrideNotFound)
    if existing.scope != ctx.candidate.scope:
        return Rejected(rule=Rule.CannotChange)
    return None


CHECKS: t.Final[tuple[Check, ...]] = (
    check_has_setting,
    check_quiz,
    check_scope,
    check_member,
    check_times,
    check_limits,
    check_unique,
    check_existing,
)


def validate(ctx: ValidationContext, checks: t.Sequence[Check] = CHECKS) -> Rejected | None:
    for check in checks:
        if (rejected := check(ctx)) is not None:
            return rejected
    return None


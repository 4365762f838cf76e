"""Exceptions raised by override operations."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from .validator import Rule


class OverrideError(Exception):
    """Error during an override operation."""

    pass


class ValidationError(OverrideError):
    """A submitted override broke one of the override rules."""

    def __init__(self, rule: Rule, message: str | None = None) -> None:
        super().__init__(message or rule.message)
        self.rule = rule


class NotFoundError(OverrideError):
    """The quiz or override named by the caller does not exist."""

    pass


class AuthorizationError(OverrideError):
    """The acting user lacks the capability an operation requires."""

    def __init__(self, message: str, capability: str) -> None:
        super().__init__(message)
        self.capability = capability

"""Exceptions raised by the deadline and template engines."""

from __future__ import annotations


class PrelimError(Exception):
    """Base class for all prelim errors."""


class UnknownStateError(PrelimError, KeyError):
    """A deadline was requested for a state with no notice rule.

    Callers must check ``is_notice_required`` before ``calculate_deadline``.
    """

    def __init__(self, state: str):
        self.state = state
        super().__init__(state)

    def __str__(self) -> str:
        return f"No preliminary notice rule for state: {self.state!r}"


class RuleTableError(PrelimError, ValueError):
    """The rule table file is missing, malformed, or holds an invalid rule."""

"""Deadline calculation engine.

Decides whether a preliminary notice is required in a state and computes the
date by which it must be served. Deadlines are calendar days from the job
start (first furnishing); there is no weekend or holiday adjustment.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from prelim.errors import UnknownStateError
from prelim.models import DeadlineStatus, NoticeDeadline, Reminder
from prelim.rules.loader import RuleTable, default_rule_table
from prelim.states import is_valid_state

logger = logging.getLogger(__name__)

REMINDER_OFFSETS: tuple[int, ...] = (7, 3, 1)


def add_calendar_days(start: date, days: int) -> date:
    """Add calendar days."""
    return start + timedelta(days=days)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


class DeadlineResolver:
    """Notice necessity and due dates, backed by a RuleTable.

    Unknown states are treated as "no notice required". Use ``table.lookup``
    directly when a caller needs to tell "not required" from "no rule".
    """

    def __init__(self, table: RuleTable | None = None):
        self.table = table if table is not None else default_rule_table()

    def get_deadline_days(self, state: str) -> int | None:
        rule = self.table.get(state)
        return rule.deadline_days if rule else None

    def is_notice_required(self, state: str) -> bool:
        lookup = self.table.lookup(state)
        if not lookup.found:
            if is_valid_state(state):
                logger.warning("No notice rule for %s; treating notice as not required", state)
            return False
        return lookup.rule.deadline_days > 0

    def calculate_deadline(self, state: str, job_start_date: date | datetime) -> date:
        """Due date for serving notice. Raises UnknownStateError for states with no rule."""
        days = self.get_deadline_days(state)
        if days is None:
            raise UnknownStateError(state)
        return add_calendar_days(_as_date(job_start_date), days)

    def resolve(self, state: str, job_start_date: date | datetime,
                offsets: Sequence[int] | None = None) -> NoticeDeadline:
        """Required flag, due date, and reminder dates for a job in one call."""
        start = _as_date(job_start_date)
        result = NoticeDeadline(
            state=state,
            job_start_date=start,
            notice_required=self.is_notice_required(state),
            deadline_days=self.get_deadline_days(state),
        )
        if result.notice_required:
            result.due_date = self.calculate_deadline(state, start)
            result.reminders = reminder_dates(
                result.due_date, REMINDER_OFFSETS if offsets is None else offsets)
        return result


# ---------------------------------------------------------------------------
# Reminders and status
# ---------------------------------------------------------------------------

def reminder_dates(due_date: date, offsets: Sequence[int] = REMINDER_OFFSETS) -> list[Reminder]:
    """Reminder send dates ahead of a due date, one per offset, in offset order."""
    return [Reminder(days_before=d, send_date=add_calendar_days(due_date, -d)) for d in offsets]


def deadline_status(due_date: date, today: date | None = None) -> DeadlineStatus:
    today = today or date.today()
    days_until = (due_date - today).days
    if days_until < 0:
        return DeadlineStatus.OVERDUE
    if days_until == 0:
        return DeadlineStatus.DUE_TODAY
    if days_until <= 3:
        return DeadlineStatus.DUE_SOON
    return DeadlineStatus.UPCOMING


def format_time_until_deadline(due_date: date, today: date | None = None) -> str:
    today = today or date.today()
    days = (due_date - today).days
    if days < 0:
        return f"{abs(days)} days overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "1 day remaining"
    return f"{days} days remaining"


def get_reminders_due(deadlines: Sequence[NoticeDeadline], today: date | None = None) -> list[NoticeDeadline]:
    """Deadlines with a reminder scheduled for today."""
    today = today or date.today()
    due: list[NoticeDeadline] = []
    for dl in deadlines:
        if any(r.send_date == today for r in dl.reminders):
            due.append(dl)
    return due

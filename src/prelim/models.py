"""Core data models for notice rules, template sections, and deadlines."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SectionType(str, Enum):
    HEADER = "header"
    TITLE = "title"
    WARNING = "warning"
    BODY = "body"
    BLANK = "blank"
    SIGNATURE = "signature"


class DeadlineStatus(str, Enum):
    UPCOMING = "upcoming"
    DUE_SOON = "due_soon"  # within 3 days
    DUE_TODAY = "due_today"
    OVERDUE = "overdue"


# ---------------------------------------------------------------------------
# State Notice Rule (one per state, read-only)
# ---------------------------------------------------------------------------

class StateNoticeRule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    state_name: str
    title: str
    subtitle: str
    warning_text: str
    legal_notice: str
    signature_requirements: str
    additional_clauses: tuple[str, ...] = ()
    deadline_days: int = Field(ge=1, le=365)
    certified_mail_required: bool
    notary_required: bool

    @property
    def notice_required(self) -> bool:
        return self.deadline_days > 0


class RuleLookup(BaseModel):
    """Result of looking a state up in the rule table.

    ``rule`` is set only when ``found`` is True. What to do when nothing is
    found is left to the caller.
    """

    model_config = ConfigDict(frozen=True)

    state: str
    rule: StateNoticeRule | None = None

    @property
    def found(self) -> bool:
        return self.rule is not None


# ---------------------------------------------------------------------------
# Template descriptor
# ---------------------------------------------------------------------------

class Section(BaseModel):
    type: SectionType
    content: str


class NoticeTemplateDescriptor(BaseModel):
    full_name: str
    slug: str
    description: str
    deadline_days: int
    certified_mail_required: bool
    notary_required: bool
    sections: list[Section] = Field(default_factory=list)
    is_default: bool = False


# ---------------------------------------------------------------------------
# Deadline
# ---------------------------------------------------------------------------

class Reminder(BaseModel):
    days_before: int
    send_date: date


class NoticeDeadline(BaseModel):
    state: str
    job_start_date: date
    notice_required: bool
    deadline_days: int | None = None
    due_date: date | None = None
    reminders: list[Reminder] = Field(default_factory=list)

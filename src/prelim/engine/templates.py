"""Notice template resolution and placeholder merging.

A state's rule is projected into an ordered list of sections. Sections carry
``{{identifier}}`` tokens that ``fill_placeholders`` replaces in a single pass.
Missing or blank values become a run of underscores so an incomplete notice is
obvious on the page.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from prelim.models import NoticeTemplateDescriptor, Section, SectionType, StateNoticeRule
from prelim.rules.loader import DEFAULT_RULE_NAME, RuleTable, default_rule_table
from prelim.states import display_name_from_slug, slugify, state_from_slug

logger = logging.getLogger(__name__)

PLACEHOLDER_GLYPH = "_" * 20
TOKEN_RE = re.compile(r"\{\{(\w+)\}\}", re.ASCII)

SENDER_KEYS = ("business_name", "company_name", "address", "phone", "email", "tax_id", "website")
PROJECT_KEYS = ("project_address", "owner_name", "amount_owed", "service_dates",
                "deadline_date", "project_description")

DEFAULT_PLACEHOLDERS: dict[str, str] = {
    "business_name": "Your Business Name",
    "company_name": "Your Company",
    "address": "123 Project Address, City, ST 00000",
    "phone": "(555) 123-4567",
    "email": "team@example.com",
    "tax_id": "XX-XXXXXXX",
    "website": "www.example.com",
    "project_address": "123 Project Address, City, ST 00000",
    "owner_name": "Owner Name",
    "amount_owed": "$0.00",
    "service_dates": "MM/DD/YYYY - MM/DD/YYYY",
    "deadline_date": "MM/DD/YYYY",
    "project_description": "Brief work description",
}

HEADER_BLOCK = "{{business_name}}\n{{company_name}}\n{{address}}\n{{phone}} | {{email}}"
PROJECT_BLOCK = (
    "Project: {{project_address}}\n"
    "Owner: {{owner_name}}\n"
    "Amount owed: {{amount_owed}}\n"
    "Services: {{service_dates}}\n"
    "Deadline: {{deadline_date}}\n"
    "Description: {{project_description}}"
)


# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------

def fill_placeholders(text: str, values: Mapping[str, str]) -> str:
    """Replace every ``{{key}}`` token in one pass; blanks and unknown keys become the glyph."""
    if not isinstance(text, str):
        raise TypeError(f"text must be str, not {type(text).__name__}")
    if not text:
        return ""

    def _sub(match: re.Match) -> str:
        value = values.get(match.group(1))
        if isinstance(value, str) and value.strip():
            return value
        return PLACEHOLDER_GLYPH

    return TOKEN_RE.sub(_sub, text)


def build_placeholders(values: Mapping[str, str] | None = None, *,
                       state_name: str = "", generated_date: str = "") -> dict[str, str]:
    """Layer user values over the defaults and add the derived keys.

    A blank user value keeps the default, the same way a saved customer
    template with an empty field does.
    """
    merged = dict(DEFAULT_PLACEHOLDERS)
    for key, value in (values or {}).items():
        if value is not None and str(value).strip():
            merged[key] = str(value)
    if state_name:
        merged["state_name"] = state_name
    if generated_date:
        merged["generated_date"] = generated_date
    return merged


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def delivery_line(rule: StateNoticeRule) -> str:
    method = "Certified mail recommended" if rule.certified_mail_required else "Mail or personal delivery allowed"
    line = f"Deadline: {rule.deadline_days} days • {method}"
    if rule.notary_required:
        line += " • Notary required"
    return line


def to_sections(state: str, rule: StateNoticeRule) -> list[Section]:
    """Project a rule into the fixed notice section order."""
    sections = [
        Section(type=SectionType.HEADER, content=HEADER_BLOCK),
        Section(type=SectionType.TITLE, content=f"{rule.title}\n{rule.subtitle}"),
        Section(type=SectionType.WARNING, content=rule.warning_text),
        Section(type=SectionType.BODY, content=f"{rule.legal_notice}\n\n{delivery_line(rule)}"),
    ]
    sections.extend(Section(type=SectionType.BODY, content=c) for c in rule.additional_clauses)
    sections.append(Section(type=SectionType.BLANK, content=PROJECT_BLOCK))
    sections.append(Section(
        type=SectionType.SIGNATURE,
        content=f"Signature: ____________________   Date: ________\n{rule.signature_requirements}\nState: {state}",
    ))
    return sections


def describe(rule: StateNoticeRule) -> str:
    method = "Certified mail" if rule.certified_mail_required else "Mail/personal delivery"
    return f"{rule.deadline_days}-day window • {method}"


def to_descriptor(state: str, rule: StateNoticeRule, is_default: bool = False) -> NoticeTemplateDescriptor:
    return NoticeTemplateDescriptor(
        full_name=state,
        slug=slugify(state),
        description=describe(rule),
        deadline_days=rule.deadline_days,
        certified_mail_required=rule.certified_mail_required,
        notary_required=rule.notary_required,
        sections=to_sections(state, rule),
        is_default=is_default,
    )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class TemplateResolver:
    """State template lookup with a generic 30-day fallback for unknown states."""

    def __init__(self, table: RuleTable | None = None):
        self.table = table if table is not None else default_rule_table()

    def _canonical(self, state: str) -> str | None:
        """Canonical table key for a display name or slug."""
        if state in self.table:
            return state
        name = state_from_slug(state)
        if name and name in self.table:
            return name
        slug = slugify(state)
        return next((s for s in self.table if slugify(s) == slug), None) if slug else None

    def get_template(self, state: str) -> StateNoticeRule:
        name = self._canonical(state)
        if name is None:
            logger.info("No template for %r; using the generic notice", state)
            return self.table.default
        return self.table.get(name)

    def display_name(self, state: str) -> str:
        """Name printed on the notice: canonical name, or a readable form of an unknown slug."""
        name = self._canonical(state) or state_from_slug(state)
        if name:
            return name
        return display_name_from_slug(state) if "-" in state or state.islower() else state

    def get_descriptor(self, state: str) -> NoticeTemplateDescriptor | None:
        if not state:
            return None
        name = self._canonical(state)
        if name is not None:
            return to_descriptor(name, self.table.get(name))
        descriptor = to_descriptor(self.display_name(state), self.table.default, is_default=True)
        descriptor.slug = state.lower()
        return descriptor

    def list_templates(self) -> list[NoticeTemplateDescriptor]:
        """Every state template by name, then the generic template."""
        descriptors = [to_descriptor(name, self.table.get(name)) for name in self.table.names()]
        descriptors.append(to_descriptor(DEFAULT_RULE_NAME, self.table.default, is_default=True))
        return descriptors

    def to_sections(self, state: str, rule: StateNoticeRule) -> list[Section]:
        return to_sections(state, rule)

    def fill_placeholders(self, text: str, values: Mapping[str, str]) -> str:
        return fill_placeholders(text, values)

    def merge_template(self, state: str, values: Mapping[str, str]) -> str:
        """Final notice body: each section filled, empty ones dropped, joined by blank lines."""
        rule = self.get_template(state)
        filled = (fill_placeholders(s.content, values) for s in to_sections(self.display_name(state), rule))
        return "\n\n".join(text for text in filled if text)

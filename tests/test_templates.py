from __future__ import annotations

import hypothesis.strategies as st
import pytest
from hypothesis import given

from prelim.engine.templates import (
    DEFAULT_PLACEHOLDERS,
    PLACEHOLDER_GLYPH,
    PROJECT_KEYS,
    SENDER_KEYS,
    TemplateResolver,
    build_placeholders,
    delivery_line,
    fill_placeholders,
    to_sections,
)
from prelim.models import SectionType
from prelim.rules.loader import load_rule_table

TABLE = load_rule_table()
RESOLVER = TemplateResolver(TABLE)

JOB_VALUES = {
    "business_name": "Acme Drywall",
    "company_name": "Acme Drywall LLC",
    "address": "1 Main St, Columbus, OH 43004",
    "phone": "(614) 555-0100",
    "email": "office@acme.test",
    "project_address": "500 Oak Ave, Columbus, OH",
    "owner_name": "Jane Doe",
    "amount_owed": "$12,500.00",
    "service_dates": "01/02/2025 - 02/14/2025",
    "deadline_date": "01/23/2025",
    "project_description": "Hang and finish drywall",
}


# ---------------------------------------------------------------------------
# get_template
# ---------------------------------------------------------------------------

def test_ohio_slug_requires_notary() -> None:
    rule = RESOLVER.get_template("ohio")
    assert rule.state_name == "Ohio"
    assert rule.notary_required is True


def test_unknown_slug_gets_default_rule() -> None:
    rule = RESOLVER.get_template("not-a-real-state")
    assert rule.title == "PRELIMINARY NOTICE"
    assert rule.deadline_days == 30
    assert rule.certified_mail_required is True
    assert rule.notary_required is False


@pytest.mark.parametrize("key", ["New Mexico", "new-mexico", "NEW-MEXICO", "new mexico"])
def test_template_accepts_name_or_slug(key: str) -> None:
    assert RESOLVER.get_template(key).state_name == "New Mexico"


def test_listed_state_without_rule_gets_default() -> None:
    assert RESOLVER.get_template("New York") is TABLE.default
    assert RESOLVER.get_template("") is TABLE.default


# ---------------------------------------------------------------------------
# Sections and descriptors
# ---------------------------------------------------------------------------

def test_section_order() -> None:
    rule = TABLE.get("California")
    sections = to_sections("California", rule)
    types = [s.type for s in sections]
    assert types == (
        [SectionType.HEADER, SectionType.TITLE, SectionType.WARNING, SectionType.BODY]
        + [SectionType.BODY] * len(rule.additional_clauses)
        + [SectionType.BLANK, SectionType.SIGNATURE]
    )
    assert sections[1].content == f"{rule.title}\n{rule.subtitle}"
    assert sections[3].content.endswith("\n\nDeadline: 20 days • Certified mail recommended")
    assert sections[-1].content.endswith("Signature of Claimant or Authorized Representative\nState: California")


def test_delivery_line_variants() -> None:
    assert delivery_line(TABLE.get("Utah")) == "Deadline: 20 days • Mail or personal delivery allowed"
    assert delivery_line(TABLE.get("Ohio")) == "Deadline: 21 days • Certified mail recommended • Notary required"


def test_descriptor_for_state() -> None:
    d = RESOLVER.get_descriptor("north-carolina")
    assert d.full_name == "North Carolina"
    assert d.slug == "north-carolina"
    assert d.description == "15-day window • Mail/personal delivery"
    assert d.is_default is False


def test_descriptor_for_unknown_slug_reconstructs_name() -> None:
    d = RESOLVER.get_descriptor("not-a-real-state")
    assert d.full_name == "Not A Real State"
    assert d.slug == "not-a-real-state"
    assert d.deadline_days == 30
    assert d.is_default is True
    assert d.sections[-1].content.endswith("State: Not A Real State")


def test_descriptor_requires_a_key() -> None:
    assert RESOLVER.get_descriptor("") is None


def test_list_templates_sorted_with_generic_last() -> None:
    templates = RESOLVER.list_templates()
    names = [t.full_name for t in templates]
    assert names[:-1] == sorted(TABLE.names())
    assert names[-1] == "Generic"
    assert templates[-1].slug == "generic"
    assert templates[-1].is_default is True


def test_descriptors_are_rebuilt_per_call() -> None:
    a = RESOLVER.get_descriptor("texas")
    b = RESOLVER.get_descriptor("texas")
    assert a == b
    assert a is not b


# ---------------------------------------------------------------------------
# fill_placeholders
# ---------------------------------------------------------------------------

def test_fill_empty_value_uses_glyph() -> None:
    assert fill_placeholders("Owner: {{owner_name}}", {"owner_name": ""}) == "Owner: ____________________"


def test_fill_value() -> None:
    assert fill_placeholders("Owner: {{owner_name}}", {"owner_name": "Jane Doe"}) == "Owner: Jane Doe"


def test_fill_whitespace_and_unknown_keys() -> None:
    text = "{{owner_name}}|{{no_such_key}}"
    assert fill_placeholders(text, {"owner_name": "   "}) == f"{PLACEHOLDER_GLYPH}|{PLACEHOLDER_GLYPH}"


def test_fill_is_single_pass() -> None:
    values = {"owner_name": "{{amount_owed}}", "amount_owed": "$5"}
    assert fill_placeholders("{{owner_name}}", values) == "{{amount_owed}}"


def test_fill_keeps_value_verbatim() -> None:
    assert fill_placeholders("[{{phone}}]", {"phone": "  555 "}) == "[  555 ]"


def test_fill_ignores_malformed_tokens() -> None:
    text = "{owner_name} {{ owner_name }} {{owner-name}}"
    assert fill_placeholders(text, {"owner_name": "Jane"}) == text


def test_fill_tokens_are_ascii_identifiers() -> None:
    text = "{{ñame}} {{owner_name}}"
    assert fill_placeholders(text, {"ñame": "x", "owner_name": "Jane"}) == "{{ñame}} Jane"


def test_fill_empty_text() -> None:
    assert fill_placeholders("", {"owner_name": "Jane"}) == ""


def test_fill_rejects_non_string() -> None:
    with pytest.raises(TypeError):
        fill_placeholders(None, {})  # type: ignore[arg-type]


@given(text=st.text().filter(lambda t: "{{" not in t))
def test_fill_without_tokens_is_identity(text: str) -> None:
    assert fill_placeholders(text, JOB_VALUES) == text


@given(key=st.from_regex(r"[a-z_]{1,16}", fullmatch=True), blank=st.sampled_from([None, "", " ", "\t\n"]))
def test_missing_or_blank_keys_become_glyph(key: str, blank: str | None) -> None:
    values = {} if blank is None else {key: blank}
    out = fill_placeholders(f"x {{{{{key}}}}} y", values)
    assert out == f"x {PLACEHOLDER_GLYPH} y"
    assert "{{" not in out


@given(values=st.dictionaries(st.sampled_from(SENDER_KEYS + PROJECT_KEYS), st.text(min_size=1)))
def test_fill_is_deterministic(values: dict[str, str]) -> None:
    text = to_sections("Texas", TABLE.get("Texas"))[0].content
    assert fill_placeholders(text, values) == fill_placeholders(text, values)


# ---------------------------------------------------------------------------
# build_placeholders / merge_template
# ---------------------------------------------------------------------------

def test_build_placeholders_layers_over_defaults() -> None:
    merged = build_placeholders({"owner_name": "Jane Doe", "phone": ""},
                                state_name="Ohio", generated_date="January 5, 2025")
    assert merged["owner_name"] == "Jane Doe"
    assert merged["phone"] == DEFAULT_PLACEHOLDERS["phone"]
    assert merged["state_name"] == "Ohio"
    assert merged["generated_date"] == "January 5, 2025"
    assert set(SENDER_KEYS + PROJECT_KEYS) <= set(merged)


def test_merge_template_full_document() -> None:
    text = RESOLVER.merge_template("ohio", JOB_VALUES)
    rule = TABLE.get("Ohio")
    parts = text.split("\n\n")
    assert parts[0] == "Acme Drywall\nAcme Drywall LLC\n1 Main St, Columbus, OH 43004\n(614) 555-0100 | office@acme.test"
    assert parts[1] == f"{rule.title}\n{rule.subtitle}"
    assert "Deadline: 21 days • Certified mail recommended • Notary required" in text
    assert "Owner: Jane Doe\nAmount owed: $12,500.00" in text
    assert text.endswith("State: Ohio")
    assert "{{" not in text
    for clause in rule.additional_clauses:
        assert clause in parts


def test_merge_template_marks_missing_fields() -> None:
    text = RESOLVER.merge_template("Utah", {})
    assert text.startswith("\n".join([PLACEHOLDER_GLYPH] * 3))
    assert f"Owner: {PLACEHOLDER_GLYPH}" in text
    assert "Mail or personal delivery allowed" in text


def test_merge_template_unknown_state_uses_generic() -> None:
    text = RESOLVER.merge_template("not-a-real-state", JOB_VALUES)
    assert "PRELIMINARY NOTICE\nNotice of Furnishing Labor/Materials" in text
    assert "Deadline: 30 days • Certified mail recommended" in text
    assert text.endswith("State: Not A Real State")


def test_merge_with_injected_table(fixture_table) -> None:
    resolver = TemplateResolver(fixture_table)
    text = resolver.merge_template("atlantis", {"owner_name": "Jane"})
    assert "First clause for Jane." in text
    assert "Deadline: 10 days • Mail or personal delivery allowed • Notary required" in text
    assert text.endswith("State: Atlantis")
    assert "GENERIC NOTICE" in resolver.merge_template("California", {})

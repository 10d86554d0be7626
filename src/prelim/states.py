"""Canonical US state names and slug helpers.

This list backs state pickers, form validation, and template URLs. Slugs are
lowercase and hyphenated: "New Mexico" -> "new-mexico".
"""

from __future__ import annotations

import re

US_STATES: tuple[str, ...] = (
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "District of Columbia", "Florida", "Georgia",
    "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky",
    "Louisiana", "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota",
    "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire",
    "New Jersey", "New Mexico", "New York", "North Carolina", "North Dakota",
    "Ohio", "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island",
    "South Carolina", "South Dakota", "Tennessee", "Texas", "Utah", "Vermont",
    "Virginia", "Washington", "West Virginia", "Wisconsin", "Wyoming",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def is_valid_state(name: str) -> bool:
    """Exact, case-sensitive membership check."""
    return name in US_STATES


def slugify(name: str) -> str:
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


_BY_SLUG = {slugify(s): s for s in US_STATES}


def state_from_slug(slug: str) -> str | None:
    """Canonical state name for a slug, or None if no state matches."""
    return _BY_SLUG.get(slug.lower())


def display_name_from_slug(slug: str) -> str:
    """Best-effort human name for an unrecognized slug ("not-a-state" -> "Not A State")."""
    return re.sub(r"\b\w", lambda m: m.group().upper(), slug.replace("-", " "))

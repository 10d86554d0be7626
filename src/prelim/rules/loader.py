"""Rule table loader.

Loads the per-state preliminary notice rules from YAML, validates every entry
once, and hands out a read-only ``RuleTable`` that the deadline and template
resolvers are constructed with.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from functools import cache
from pathlib import Path
from types import MappingProxyType

import yaml
from pydantic import ValidationError

from prelim.config import PACKAGED_RULES_FILE, get_settings
from prelim.errors import RuleTableError
from prelim.models import RuleLookup, StateNoticeRule

logger = logging.getLogger(__name__)

DEFAULT_RULE_NAME = "Generic"


class RuleTable:
    """Immutable mapping of canonical state name -> StateNoticeRule, plus the default rule."""

    def __init__(self, rules: Mapping[str, StateNoticeRule], default: StateNoticeRule):
        self._rules = MappingProxyType(dict(rules))
        self._default = default

    @property
    def default(self) -> StateNoticeRule:
        return self._default

    @property
    def rules(self) -> Mapping[str, StateNoticeRule]:
        return self._rules

    def lookup(self, state: str) -> RuleLookup:
        return RuleLookup(state=state, rule=self._rules.get(state))

    def get(self, state: str) -> StateNoticeRule | None:
        return self._rules.get(state)

    def names(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, state: object) -> bool:
        return state in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def _build_rule(name: str, data: object) -> StateNoticeRule:
    if not isinstance(data, dict):
        raise RuleTableError(f"Rule for {name!r} must be a mapping, got {type(data).__name__}")
    try:
        return StateNoticeRule(state_name=name, **data)
    except ValidationError as e:
        raise RuleTableError(f"Invalid rule for {name!r}: {e}") from e


def parse_rule_table(data: object, source: str = "<memory>") -> RuleTable:
    """Validate a decoded rule document (``states:`` + ``default:``) into a RuleTable."""
    if not isinstance(data, dict):
        raise RuleTableError(f"{source}: expected a mapping at the top level")

    states = data.get("states") or {}
    if not isinstance(states, dict):
        raise RuleTableError(f"{source}: 'states' must be a mapping of state name to rule")
    if "default" not in data:
        raise RuleTableError(f"{source}: missing 'default' rule")

    rules = {str(name): _build_rule(str(name), rule) for name, rule in states.items()}
    default = _build_rule(DEFAULT_RULE_NAME, data["default"])
    return RuleTable(rules, default)


def load_rule_table(path: str | Path | None = None) -> RuleTable:
    """Load and validate a rule table YAML file (the packaged table by default)."""
    path = Path(path) if path else PACKAGED_RULES_FILE
    if not path.exists():
        raise RuleTableError(f"Rule table not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleTableError(f"{path}: invalid YAML: {e}") from e

    table = parse_rule_table(data, source=str(path))
    logger.debug("Loaded %d state notice rules from %s", len(table), path)
    return table


@cache
def default_rule_table() -> RuleTable:
    """The process-wide table named by settings, loaded once."""
    return load_rule_table(get_settings().rules_path)

from __future__ import annotations

import copy
import logging
from pathlib import Path

import pytest
import yaml

from prelim.rules.loader import load_rule_table

FIXTURE_RULES = {
    "states": {
        "Atlantis": {
            "title": "NOTICE OF FURNISHING",
            "subtitle": "Atlantis Code § 1",
            "warning_text": "Owner warning.",
            "legal_notice": "This is not a lien.",
            "signature_requirements": "Signature of Claimant",
            "additional_clauses": ["First clause for {{owner_name}}.", "Second clause."],
            "deadline_days": 10,
            "certified_mail_required": False,
            "notary_required": True,
        },
    },
    "default": {
        "title": "GENERIC NOTICE",
        "subtitle": "Generic subtitle",
        "warning_text": "Generic warning.",
        "legal_notice": "Generic legal notice.",
        "signature_requirements": "Signature",
        "additional_clauses": [],
        "deadline_days": 30,
        "certified_mail_required": True,
        "notary_required": False,
    },
}


@pytest.fixture(scope="session")
def table():
    return load_rule_table()


@pytest.fixture
def rules_data() -> dict:
    return copy.deepcopy(FIXTURE_RULES)


@pytest.fixture
def write_rules(tmp_path: Path):
    def _write(data: dict, name: str = "rules.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def fixture_rules_file(write_rules, rules_data) -> Path:
    return write_rules(rules_data)


@pytest.fixture
def fixture_table(fixture_rules_file: Path):
    return load_rule_table(fixture_rules_file)


@pytest.fixture(autouse=True)
def _reset_prelim_logger():
    """The CLI installs its own handler; give every test the default logger back."""
    logger = logging.getLogger("prelim")
    yield
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

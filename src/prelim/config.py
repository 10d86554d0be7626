"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

PACKAGED_RULES_FILE = Path(__file__).parent / "rules" / "states.yaml"


class Settings(BaseSettings):
    """All configuration is loaded from .env or PRELIM_* environment variables."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "PRELIM_"}

    # Rule table (empty = the table shipped with the package)
    rules_file: str = ""

    # Days before the due date at which reminders go out
    reminder_offsets: list[int] = [7, 3, 1]

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @property
    def rules_path(self) -> Path:
        return Path(self.rules_file) if self.rules_file else PACKAGED_RULES_FILE

    def has_custom_rules(self) -> bool:
        return bool(self.rules_file)


def get_settings() -> Settings:
    return Settings()

"""Shared configuration for the markdown table diff reports.

Defaults can be set in a ``.env`` file at the project root or in the
environment; command-line options override them.

    MD_TABLE_DIFF_KEY_COLUMN        column identifying a record (default: first column)
    MD_TABLE_DIFF_IGNORE_COLS       comma-separated columns excluded from comparison
    MD_TABLE_DIFF_REPORT_SECTIONS   "|"-separated groups to report (added|removed|diffed)
    MD_TABLE_DIFF_FORMAT            markdown or csv
    MD_TABLE_DIFF_OUTPUT_SECTIONS   "|"-separated column prefixes to report, in order (default: all)
    MD_TABLE_DIFF_REPORT_TITLE      title put into generated report names and used to find reports
    MD_TABLE_DIFF_TIMEOUT           seconds allowed for the external diff
    MD_TABLE_DIFF_COMMAND           external line-diff executable
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from md_table_diff.errors import ConfigError
from md_table_diff.tables.patterns import REPORT_SECTIONS

logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

REPORT_FORMATS = ("markdown", "csv")

DEFAULT_DIFF_COMMAND = "diff"
DEFAULT_DIFF_TIMEOUT = 60.0


def parse_list(value: str | None, sep: str = ",") -> list[str]:
    """Split a delimited setting into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(sep) if item.strip()]


class DiffSettings(BaseModel):
    """Validated options for one diff report run."""

    key_column: str | None = None
    ignore_cols: list[str] = Field(default_factory=list)
    report_sections: list[str] = Field(default_factory=lambda: list(REPORT_SECTIONS))
    report_format: str = "markdown"
    section_with_filename: bool = False
    report_base: str | None = None
    report_title: str | None = None
    output_sections: list[str] = Field(default_factory=list)
    diff_command: str = DEFAULT_DIFF_COMMAND
    diff_timeout: float = Field(default=DEFAULT_DIFF_TIMEOUT, gt=0)

    @field_validator("report_sections")
    @classmethod
    def validate_report_sections(cls, value: list[str]) -> list[str]:
        """Only "added", "removed" and "diffed" groups exist."""
        unknown = [section for section in value if section not in REPORT_SECTIONS]
        if unknown:
            raise ValueError(f"Unknown report section(s) {unknown}, expected a subset of {list(REPORT_SECTIONS)}")
        return value

    @field_validator("report_format")
    @classmethod
    def validate_report_format(cls, value: str) -> str:
        """Normalise and check the output format."""
        value = value.strip().lower()
        if value not in REPORT_FORMATS:
            raise ValueError(f"Unknown report format '{value}', expected one of {list(REPORT_FORMATS)}")
        return value


def _env_settings() -> dict:
    """Collect settings from MD_TABLE_DIFF_* environment variables."""
    env = {
        "key_column": os.getenv("MD_TABLE_DIFF_KEY_COLUMN") or None,
        "ignore_cols": parse_list(os.getenv("MD_TABLE_DIFF_IGNORE_COLS")) or None,
        "report_sections": parse_list(os.getenv("MD_TABLE_DIFF_REPORT_SECTIONS"), "|") or None,
        "report_format": os.getenv("MD_TABLE_DIFF_FORMAT") or None,
        "output_sections": parse_list(os.getenv("MD_TABLE_DIFF_OUTPUT_SECTIONS"), "|") or None,
        "report_title": os.getenv("MD_TABLE_DIFF_REPORT_TITLE") or None,
        "diff_timeout": os.getenv("MD_TABLE_DIFF_TIMEOUT") or None,
        "diff_command": os.getenv("MD_TABLE_DIFF_COMMAND") or None,
    }
    return {key: value for key, value in env.items() if value is not None}


def load_settings(**overrides) -> DiffSettings:
    """Build settings from the environment, then apply non-None ``overrides``.

    Raises ConfigError if any value fails validation.
    """
    values = _env_settings()
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        settings = DiffSettings(**values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    logger.debug("Settings: %s", settings.model_dump())
    return settings

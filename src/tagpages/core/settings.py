"""Process-level settings for tag-pages.

Per-entry options (paths, page size, sort field) live in
``tagpages.config``. What stays here is how the process itself behaves:
log level and output format, read from ``TAGPAGES_*`` environment variables
or a ``.env`` file.

Examples:
    >>> from tagpages.core.settings import TagPagesSettings
    >>> TagPagesSettings().log_level
    'INFO'

Tags:
    settings, configuration, pydantic, environment, tag-pages
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TagPagesSettings(BaseSettings):
    """Settings shared by the CLI and embedding applications.

    Fields
    ──────
    log_level    : Structlog log level
    log_format   : ``json`` or ``console``; unset means auto-detect from tty
    service      : Service name stamped on every log event
    """

    model_config = SettingsConfigDict(
        env_prefix="TAGPAGES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: Literal["json", "console"] | None = None
    service: str = "tag-pages"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def json_logs(self) -> bool | None:
        """``configure_logging`` flag derived from ``log_format``."""
        if self.log_format is None:
            return None
        return self.log_format == "json"

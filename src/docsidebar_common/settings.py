"""Settings read from ``DOCSIDEBAR_*`` environment variables.

:class:`SidebarSettings` holds the parsing and rendering options plus a nested
logging section. Invalid values raise
:class:`~docsidebar_common.errors.SettingsError` at construction time.

Examples
--------
>>> from docsidebar_common.settings import load_settings
>>> settings = load_settings(strict_kinds=False)
>>> settings.filename
'sidebar-items.js'
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docsidebar_common.errors import SettingsError
from docsidebar_common.logging import get_logger

__all__ = [
    "LoggingConfig",
    "RenderStyle",
    "SidebarSettings",
    "load_settings",
]

logger = get_logger(__name__)

RenderStyle = Literal["legacy", "window", "json"]

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class LoggingConfig(BaseSettings):
    """Logging toggles (``DOCSIDEBAR_LOG_*`` namespace)."""

    model_config = SettingsConfigDict(env_prefix="DOCSIDEBAR_LOG_", extra="forbid")

    level: str = Field(default="WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    json_format: bool = Field(default=True, description="Emit JSON log lines instead of plain text")

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        normalised = value.upper()
        if normalised not in _LOG_LEVELS:
            msg = f"unsupported log level {value!r}"
            raise ValueError(msg)
        return normalised


class SidebarSettings(BaseSettings):
    """Aggregate configuration loaded from ``DOCSIDEBAR_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSIDEBAR_",
        env_nested_delimiter="__",
        extra="forbid",
        case_sensitive=False,
    )

    strict_kinds: bool = Field(
        default=True, description="Reject category keys outside the rustdoc item kinds"
    )
    require_descriptions: bool = Field(
        default=False, description="Report entries with an empty description as violations"
    )
    filename: str = Field(
        default="sidebar-items.js", description="File name of per-page sidebar tables"
    )
    render_style: RenderStyle = Field(
        default="legacy", description="Default output style for rendered tables"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def __init__(self, **overrides: object) -> None:
        """Read the environment, apply ``overrides`` and raise on bad values."""
        try:
            super().__init__(**overrides)  # type: ignore[arg-type]
        except ValidationError as exc:
            msg = f"Invalid docsidebar settings: {exc}"
            logger.exception(
                "Rejected docsidebar settings",
                extra={"operation": "load_settings", "error_type": type(exc).__name__},
            )
            errors: list[dict[str, object]] = [
                {"field": ".".join(str(part) for part in error["loc"]), "issue": error["msg"]}
                for error in exc.errors()
            ]
            raise SettingsError(msg, errors=errors, cause=exc) from exc


def load_settings(**overrides: object) -> SidebarSettings:
    """Load :class:`SidebarSettings` with optional overrides.

    Raises
    ------
    SettingsError
        If the environment or the overrides fail validation.
    """
    return SidebarSettings(**overrides)

"""Persisted site index documents."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "SIDEBAR_INDEX_SCHEMA_ID",
    "SIDEBAR_INDEX_SCHEMA_VERSION",
    "SidebarIndexDocument",
]

SIDEBAR_INDEX_SCHEMA_ID: Final[str] = "https://docsidebar.dev/schema/sidebar-index.json"
SIDEBAR_INDEX_SCHEMA_VERSION: Final[str] = "1.0.0"


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="seconds")


class SidebarIndexDocument(BaseModel):
    """Every sidebar table of a documentation tree, keyed by page path.

    Page tables use the wire shape ``{kind: [[name, description], ...]}`` in
    their original order.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_version: str = Field(SIDEBAR_INDEX_SCHEMA_VERSION, alias="schemaVersion")
    schema_id: str = Field(SIDEBAR_INDEX_SCHEMA_ID, alias="schemaId")
    generated_at: str = Field(default_factory=_utc_iso_now, alias="generatedAt")
    root: str = ""
    pages: dict[str, dict[str, list[list[str]]]] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)

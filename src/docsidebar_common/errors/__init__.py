"""docsidebar errors and their codes.

Re-exports the exception classes and :class:`ErrorCode` so callers import
from one place.

Examples
--------
>>> from docsidebar_common.errors import DocSidebarError, SidebarNotFoundError
>>> try:
...     raise SidebarNotFoundError("No sidebar for page 'clap/args'")
... except DocSidebarError as e:
...     details = e.to_problem_details(instance="urn:docsidebar:page:clap/args")
...     assert details["type"] == "https://docsidebar.dev/problems/sidebar-not-found"
"""

from __future__ import annotations

from docsidebar_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from docsidebar_common.errors.exceptions import (
    ConfigurationError,
    DocSidebarError,
    DocSidebarErrorConfig,
    DuplicateEntryError,
    IndexDocumentError,
    SettingsError,
    SidebarNotFoundError,
    SidebarParseError,
    SidebarSchemaError,
    SidebarValidationError,
    UnknownItemKindError,
)

__all__ = [
    "BASE_TYPE_URI",
    "ConfigurationError",
    "DocSidebarError",
    "DocSidebarErrorConfig",
    "DuplicateEntryError",
    "ErrorCode",
    "IndexDocumentError",
    "SettingsError",
    "SidebarNotFoundError",
    "SidebarParseError",
    "SidebarSchemaError",
    "SidebarValidationError",
    "UnknownItemKindError",
    "get_type_uri",
]

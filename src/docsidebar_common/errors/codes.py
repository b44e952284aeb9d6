"""Error codes and the Problem Details ``type`` URIs derived from them.

The values appear in rendered payloads and CLI output, so a published code
is never renamed.

Examples
--------
>>> from docsidebar_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.SIDEBAR_PARSE_ERROR)
'https://docsidebar.dev/problems/sidebar-parse-error'
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]


BASE_TYPE_URI: Final[str] = "https://docsidebar.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes for docsidebar exceptions.

    Values are kebab-case and grouped by the area that raises them.
    """

    # Sidebar files
    SIDEBAR_PARSE_ERROR = "sidebar-parse-error"
    SIDEBAR_SCHEMA_INVALID = "sidebar-schema-invalid"
    UNKNOWN_ITEM_KIND = "unknown-item-kind"
    DUPLICATE_ENTRY = "duplicate-entry"
    SIDEBAR_VALIDATION_FAILED = "sidebar-validation-failed"

    # Site index
    SIDEBAR_NOT_FOUND = "sidebar-not-found"
    INDEX_DOCUMENT_INVALID = "index-document-invalid"

    # Configuration & Runtime
    CONFIGURATION_ERROR = "configuration-error"
    RUNTIME_ERROR = "runtime-error"


def get_type_uri(code: ErrorCode) -> str:
    """Return the Problem Details type URI for ``code``.

    Parameters
    ----------
    code : ErrorCode
        Error code to resolve.

    Returns
    -------
    str
        Absolute type URI under :data:`BASE_TYPE_URI`.
    """
    return f"{BASE_TYPE_URI}/{code.value}"

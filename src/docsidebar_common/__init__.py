"""Shared infrastructure for the docsidebar packages.

Logging, typed errors with RFC 9457 Problem Details, JSON Schema helpers,
filesystem utilities and runtime settings live here so the domain package
``sidebar_items`` stays focused on the sidebar index itself.
"""

from __future__ import annotations

from docsidebar_common import (
    errors,
    fs,
    jsonschema_utils,
    logging,
    problem_details,
    settings,
)

__all__ = [
    "errors",
    "fs",
    "jsonschema_utils",
    "logging",
    "problem_details",
    "settings",
]

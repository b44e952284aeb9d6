"""RFC 9457 Problem Details payloads for docsidebar errors.

Every payload produced here is checked against the bundled
``docsidebar_common/schema/problem_details.json`` before it is returned, so
the CLI never prints a document a consumer would reject.

Examples
--------
>>> from docsidebar_common.problem_details import (
...     ProblemDetailsParams,
...     build_problem_details,
...     render_problem,
... )
>>> problem = build_problem_details(
...     ProblemDetailsParams(
...         problem_type="https://docsidebar.dev/problems/sidebar-parse-error",
...         title="Sidebar file could not be parsed",
...         status=422,
...         detail="Expected initSidebarItems(...) call",
...         instance="urn:docsidebar:file:clap/args/sidebar-items.js",
...     )
... )
>>> "sidebar-parse-error" in render_problem(problem)
True
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final, TypedDict, cast

from docsidebar_common.jsonschema_utils import SchemaError, collect_errors, validator_for
from docsidebar_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "JsonPrimitive",
    "JsonValue",
    "ProblemDetails",
    "ProblemDetailsParams",
    "ProblemDetailsValidationError",
    "build_problem_details",
    "problem_from_exception",
    "render_problem",
    "validate_problem_details",
]

logger = get_logger(__name__)

type JsonPrimitive = str | int | float | bool | None
type JsonValue = JsonPrimitive | dict[str, JsonValue] | list[JsonValue]

PROBLEM_DETAILS_SCHEMA_PATH: Final[Path] = (
    Path(__file__).parent / "schema" / "problem_details.json"
)


class ProblemDetails(TypedDict, total=False):
    """Shape of a Problem Details payload."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, JsonValue]


@dataclass(slots=True)
class ProblemDetailsParams:
    """Inputs for :func:`build_problem_details`.

    ``problem_type`` becomes the ``type`` member; ``code`` and ``extensions``
    are omitted from the payload when unset.
    """

    problem_type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str | None = None
    extensions: Mapping[str, JsonValue] | None = None


class ProblemDetailsValidationError(Exception):
    """A payload does not match the Problem Details schema.

    Parameters
    ----------
    message : str
        Summary of the failure.
    validation_errors : list[str] | None, optional
        One rendered message per violation. Defaults to None.
    """

    def __init__(self, message: str, validation_errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.validation_errors = list(validation_errors or [])


def validate_problem_details(payload: Mapping[str, JsonValue]) -> None:
    """Check ``payload`` against the bundled schema.

    Raises
    ------
    ProblemDetailsValidationError
        If the payload has violations, or the schema cannot be loaded.
    """
    try:
        validator = validator_for(PROBLEM_DETAILS_SCHEMA_PATH)
    except (OSError, json.JSONDecodeError, SchemaError) as exc:
        msg = f"Problem Details schema unavailable: {exc}"
        raise ProblemDetailsValidationError(msg) from exc
    errors = collect_errors(validator, payload)
    if errors:
        msg = f"Invalid Problem Details payload: {'; '.join(errors)}"
        raise ProblemDetailsValidationError(msg, validation_errors=errors)


def build_problem_details(params: ProblemDetailsParams, /) -> ProblemDetails:
    """Assemble and validate a payload from ``params``.

    Raises
    ------
    ProblemDetailsValidationError
        If the assembled payload violates the schema.
    """
    payload: dict[str, object] = {
        "type": params.problem_type,
        "title": params.title,
        "status": params.status,
        "detail": params.detail,
        "instance": params.instance,
    }
    if params.code is not None:
        payload["code"] = params.code
    if params.extensions:
        payload["extensions"] = dict(params.extensions)
    validate_problem_details(cast("Mapping[str, JsonValue]", payload))
    return cast("ProblemDetails", payload)


def problem_from_exception(exception: Exception, base: ProblemDetailsParams) -> ProblemDetails:
    """Describe an arbitrary exception using ``base`` for the fixed members.

    ``exception_type`` and ``exception_message`` are added to the extensions;
    an ``exception_message`` already present in ``base`` is kept.
    """
    extensions: dict[str, JsonValue] = {
        **(base.extensions or {}),
        "exception_type": type(exception).__name__,
    }
    extensions.setdefault("exception_message", str(exception))
    logger.debug(
        "Describing exception as Problem Details",
        extra={"operation": "problem_details", "exception_type": type(exception).__name__},
    )
    return build_problem_details(
        ProblemDetailsParams(
            problem_type=base.problem_type,
            title=base.title,
            status=base.status,
            detail=base.detail,
            instance=base.instance,
            code=base.code,
            extensions=extensions,
        )
    )


def render_problem(problem: ProblemDetails | Mapping[str, object]) -> str:
    """Return ``problem`` as indented JSON with sorted keys."""
    return json.dumps(problem, indent=2, sort_keys=True, ensure_ascii=False)

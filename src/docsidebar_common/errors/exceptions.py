"""Exceptions raised by docsidebar.

Every error derives from DocSidebarError. Each carries a stable error code,
the HTTP status used when it is rendered as RFC 9457 Problem Details, and
the log level the CLI reports it at.

Examples
--------
>>> from docsidebar_common.errors import ErrorCode, SidebarParseError
>>> try:
...     raise SidebarParseError("Missing registration call", context={"path": "a/sidebar-items.js"})
... except SidebarParseError as e:
...     assert e.code == ErrorCode.SIDEBAR_PARSE_ERROR
...     assert e.http_status == 422
...     details = e.to_problem_details(instance="urn:docsidebar:file:a")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from docsidebar_common.errors.codes import ErrorCode, get_type_uri
from docsidebar_common.problem_details import ProblemDetailsParams, build_problem_details

if TYPE_CHECKING:
    from docsidebar_common.problem_details import JsonValue, ProblemDetails

__all__ = [
    "ConfigurationError",
    "DocSidebarError",
    "DocSidebarErrorConfig",
    "DuplicateEntryError",
    "IndexDocumentError",
    "SettingsError",
    "SidebarNotFoundError",
    "SidebarParseError",
    "SidebarSchemaError",
    "SidebarValidationError",
    "UnknownItemKindError",
]


@dataclass(slots=True)
class DocSidebarErrorConfig:
    """Configuration options used when instantiating :class:`DocSidebarError`."""

    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    http_status: int = 500
    log_level: int = logging.ERROR
    cause: Exception | None = None
    context: Mapping[str, object] | None = None


class DocSidebarError(Exception):
    """Root of the docsidebar exception hierarchy.

    Parameters
    ----------
    message : str
        What went wrong, for humans.
    config : DocSidebarErrorConfig | None, optional
        Structured configuration for the error. When omitted, the code is
        RUNTIME_ERROR with status 500. Defaults to None.

    Attributes
    ----------
    message : str
        The message passed in.
    code : ErrorCode
        Stable machine-readable code.
    http_status : int
        Status reported in Problem Details payloads.
    log_level : int
        Level the CLI logs this error at.
    context : dict[str, object]
        Structured details copied into the payload extensions.
    """

    def __init__(self, message: str, *, config: DocSidebarErrorConfig | None = None) -> None:
        resolved = config or DocSidebarErrorConfig()
        super().__init__(message)
        self.message = message
        self.code = resolved.code
        self.http_status = resolved.http_status
        self.log_level = resolved.log_level
        self.context = dict(resolved.context) if resolved.context else {}
        if resolved.cause is not None:
            self.__cause__ = resolved.cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Describe this error as a validated Problem Details payload.

        Parameters
        ----------
        instance : str | None, optional
            URN of the failing file or page. Defaults to ``urn:docsidebar:error``.
        title : str | None, optional
            Payload title. Defaults to the class name.

        Returns
        -------
        ProblemDetails
            Payload whose extensions are :attr:`context`, when non-empty.
        """
        return build_problem_details(
            ProblemDetailsParams(
                problem_type=get_type_uri(self.code),
                title=title or type(self).__name__,
                status=self.http_status,
                detail=self.message,
                instance=instance or "urn:docsidebar:error",
                code=self.code.value,
                extensions=cast("Mapping[str, JsonValue] | None", self.context or None),
            )
        )

    def __str__(self) -> str:
        """Return ``ClassName[code]: message`` plus the cause type when chained."""
        text = f"{type(self).__name__}[{self.code.value}]: {self.message}"
        if self.__cause__ is not None:
            text = f"{text} (caused by: {type(self.__cause__).__name__})"
        return text


class SidebarParseError(DocSidebarError):
    """A ``sidebar-items.js`` payload could not be decoded.

    Raised when the registration wrapper is missing, the object literal is
    not valid JSON, or trailing content follows the call.

    Parameters
    ----------
    message : str
        What went wrong.
    cause : Exception | None, optional
        Underlying decoder exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context such as ``path`` or ``position``. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.SIDEBAR_PARSE_ERROR,
                http_status=422,
                log_level=logging.WARNING,
                cause=cause,
                context=context,
            ),
        )


class SidebarSchemaError(DocSidebarError):
    """Decoded payload does not match the ``sidebar_items.json`` schema.

    Parameters
    ----------
    message : str
        What went wrong.
    errors : Sequence[str] | None, optional
        Individual schema violations, one message each. Defaults to None.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Extra structured details. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[str] | None = None,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        combined: dict[str, object] = dict(context or {})
        self.errors: list[str] = list(errors or [])
        if self.errors:
            combined.setdefault("schema_errors", list(self.errors))
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.SIDEBAR_SCHEMA_INVALID,
                http_status=422,
                log_level=logging.WARNING,
                cause=cause,
                context=combined,
            ),
        )


class UnknownItemKindError(DocSidebarError):
    """A category key is outside the recognised rustdoc item kinds."""

    def __init__(self, kind: str, context: Mapping[str, object] | None = None) -> None:
        combined: dict[str, object] = {"kind": kind, **(context or {})}
        self.kind = kind
        super().__init__(
            f"Unknown item kind: {kind!r}",
            config=DocSidebarErrorConfig(
                code=ErrorCode.UNKNOWN_ITEM_KIND,
                http_status=422,
                log_level=logging.WARNING,
                context=combined,
            ),
        )


class DuplicateEntryError(DocSidebarError):
    """Two entries of the same kind share a name on one page."""

    def __init__(self, kind: str, name: str, context: Mapping[str, object] | None = None) -> None:
        combined: dict[str, object] = {"kind": kind, "name": name, **(context or {})}
        self.kind = kind
        self.name = name
        super().__init__(
            f"Duplicate {kind} entry: {name!r}",
            config=DocSidebarErrorConfig(
                code=ErrorCode.DUPLICATE_ENTRY,
                http_status=422,
                log_level=logging.WARNING,
                context=combined,
            ),
        )


class SidebarValidationError(DocSidebarError):
    """Integrity checks reported one or more violations.

    Parameters
    ----------
    message : str
        What went wrong.
    violations : Sequence[str] | None, optional
        Rendered violation messages. Defaults to None.
    context : Mapping[str, object] | None, optional
        Extra structured details. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        violations: Sequence[str] | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        self.violations: list[str] = list(violations or [])
        combined: dict[str, object] = dict(context or {})
        if self.violations:
            combined.setdefault("violations", list(self.violations))
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.SIDEBAR_VALIDATION_FAILED,
                http_status=422,
                log_level=logging.WARNING,
                context=combined,
            ),
        )


class SidebarNotFoundError(DocSidebarError):
    """A sidebar file or index page does not exist."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.SIDEBAR_NOT_FOUND,
                http_status=404,
                log_level=logging.WARNING,
                cause=cause,
                context=context,
            ),
        )


class IndexDocumentError(DocSidebarError):
    """A persisted site index document failed to load or validate."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.INDEX_DOCUMENT_INVALID,
                http_status=422,
                cause=cause,
                context=context,
            ),
        )


class ConfigurationError(DocSidebarError):
    """A setting has a value docsidebar cannot work with.

    Reported with status 500 and logged at CRITICAL.

    Examples
    --------
    >>> error = ConfigurationError.with_details(field="render_style", issue="Unsupported style")
    >>> error.context["field"]
    'render_style'
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.CONFIGURATION_ERROR,
                http_status=500,
                log_level=logging.CRITICAL,
                cause=cause,
                context=context,
            ),
        )

    @classmethod
    def with_details(
        cls,
        *,
        field: str,
        issue: str,
        hint: str | None = None,
    ) -> ConfigurationError:
        """Build an error naming the offending ``field`` and the ``issue`` with it.

        Parameters
        ----------
        field : str
            Name of the offending setting.
        issue : str
            What is wrong with it.
        hint : str | None, optional
            How to fix it. Defaults to None.

        Returns
        -------
        ConfigurationError
            Error whose context carries ``field``, ``issue`` and ``hint``.
        """
        context: dict[str, object] = {"field": field, "issue": issue}
        if hint is not None:
            context["hint"] = hint
        return cls(f"Configuration error for field '{field}': {issue}", context=context)


class SettingsError(DocSidebarError):
    """Runtime settings failed validation.

    Parameters
    ----------
    message : str
        What went wrong.
    errors : list[dict[str, object]] | None, optional
        pydantic error entries, stored under ``validation_errors``. Defaults to None.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Extra structured details. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, object]] | None = None,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        details: dict[str, object] = dict(context or {})
        if errors:
            details.setdefault("validation_errors", [dict(entry) for entry in errors])
        super().__init__(
            message,
            config=DocSidebarErrorConfig(
                code=ErrorCode.CONFIGURATION_ERROR,
                http_status=500,
                cause=cause,
                context=details,
            ),
        )

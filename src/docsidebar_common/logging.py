"""Structured logging for docsidebar.

Library modules log through :func:`get_logger`, which returns a
:class:`LoggerAdapter` bound to a ``NullHandler``-guarded logger. Every
record routed through the adapter carries an ``operation`` and a ``status``,
and picks up the correlation ID of the surrounding :class:`CorrelationContext`.
Only application boundaries (the CLI) call :func:`setup_logging`.

Examples
--------
>>> from docsidebar_common.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Sidebar parsed", extra={"operation": "parse_sidebar", "entries": 6})
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, MutableMapping
    from types import TracebackType

    from docsidebar_common.problem_details import JsonValue

__all__ = [
    "CorrelationContext",
    "JsonFormatter",
    "LoggerAdapter",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "setup_logging",
    "with_fields",
]

_CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "docsidebar_correlation_id", default=None
)

# Emitted right after the fixed header, in this order, when present.
_LEADING_FIELDS = ("correlation_id", "operation", "status", "duration_ms")

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Attributes every LogRecord has; anything else came in through ``extra``.
_BUILTIN_RECORD_KEYS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

_JSON_SCALARS = (str, int, float, bool, list, dict)


def _status_for(level: int) -> str:
    if level >= logging.ERROR:
        return "error"
    if level >= logging.WARNING:
        return "warning"
    return "success"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    The object starts with ``ts``, ``level``, ``name`` and ``message``,
    followed by the leading structured fields and then any other ``extra``
    values that are JSON-compatible.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Return the JSON line for ``record``."""
        created = datetime.fromtimestamp(record.created, tz=UTC)
        payload: dict[str, JsonValue] = {
            "ts": created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{created.microsecond // 1000:03d}Z",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _BUILTIN_RECORD_KEYS and not key.startswith("_")
        }
        extras.setdefault("correlation_id", _CORRELATION_ID.get())
        for key in _LEADING_FIELDS:
            if extras.get(key) is not None:
                payload[key] = extras.pop(key)
        payload.update(
            {
                key: value
                for key, value in extras.items()
                if value is not None and isinstance(value, _JSON_SCALARS)
            }
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


if TYPE_CHECKING:

    class _AdapterBase:  # pragma: no cover - typing helper
        logger: logging.Logger
        extra: Mapping[str, object] | None

        def __init__(
            self,
            logger: logging.Logger,
            extra: Mapping[str, object] | None = None,
        ) -> None: ...

        def isEnabledFor(self, level: int) -> bool: ...  # noqa: N802

        def debug(self, msg: object, *args: object, **kwargs: Any) -> None: ...

        def info(self, msg: object, *args: object, **kwargs: Any) -> None: ...

        def warning(self, msg: object, *args: object, **kwargs: Any) -> None: ...

        def error(self, msg: object, *args: object, **kwargs: Any) -> None: ...

        def exception(self, msg: object, *args: object, **kwargs: Any) -> None: ...

else:
    _AdapterBase = logging.LoggerAdapter


class LoggerAdapter(_AdapterBase):
    """Adapter that fills in ``operation``, ``status`` and ``correlation_id``.

    Fields bound at construction are defaults; values passed in ``extra`` on
    a call win over them.

    Parameters
    ----------
    logger : logging.Logger
        Logger to wrap.
    extra : Mapping[str, object] | None, optional
        Fields attached to every record. Defaults to None.
    """

    logger: logging.Logger

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Combine call-site ``extra`` with bound fields and the correlation ID."""
        call_extra = kwargs.get("extra")
        merged: dict[str, Any] = {**(self.extra or {})}
        if isinstance(call_extra, dict):
            merged.update(call_extra)
        correlation_id = _CORRELATION_ID.get()
        if correlation_id is not None:
            merged.setdefault("correlation_id", correlation_id)
        kwargs["extra"] = merged
        return msg, kwargs

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        """Log ``msg`` at ``level``; the status defaults from the level."""
        if not self.isEnabledFor(level):
            return
        msg, kwargs = self.process(msg, kwargs)
        extra = kwargs["extra"]
        extra.setdefault("operation", "unknown")
        extra.setdefault("status", _status_for(level))
        self.logger.log(level, msg, *args, **kwargs)

    def log_success(
        self,
        message: str,
        *,
        operation: str | None = None,
        duration_ms: float | None = None,
        **fields: object,
    ) -> None:
        """Log a completed operation at INFO.

        Parameters
        ----------
        message : str
            Log message.
        operation : str | None, optional
            Overrides the bound operation name. Defaults to None.
        duration_ms : float | None, optional
            Elapsed time. Defaults to None.
        **fields : object
            Further structured fields.
        """
        extra: dict[str, object] = {**fields, "status": "success"}
        if operation is not None:
            extra["operation"] = operation
        if duration_ms is not None:
            extra["duration_ms"] = round(duration_ms, 3)
        self.info(message, extra=extra)

    def log_failure(
        self,
        message: str,
        *,
        exception: BaseException | None = None,
        operation: str | None = None,
        **fields: object,
    ) -> None:
        """Log a failed operation at ERROR, naming the exception when given."""
        extra: dict[str, object] = {**fields, "status": "error"}
        if operation is not None:
            extra["operation"] = operation
        if exception is not None:
            extra["error_type"] = type(exception).__name__
            extra["error_detail"] = str(exception)
        self.error(message, extra=extra)


def get_logger(name: str) -> LoggerAdapter:
    """Return the structured adapter for logger ``name``.

    A ``NullHandler`` is attached when the logger has no handler, so library
    code stays silent until an application configures logging.
    """
    base = logging.getLogger(name)
    if not base.handlers:
        base.addHandler(logging.NullHandler())
    return LoggerAdapter(base, {})


def setup_logging(level: int | str = logging.INFO, *, json_format: bool = True) -> None:
    """Install a single stderr handler on the root logger.

    Parameters
    ----------
    level : int | str, optional
        Threshold as a number or a name such as ``"DEBUG"``. Unknown names
        fall back to INFO. Defaults to logging.INFO.
    json_format : bool, optional
        Use :class:`JsonFormatter` rather than plain text. Defaults to True.
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation ID for the current context."""
    _CORRELATION_ID.set(correlation_id)


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, if any."""
    return _CORRELATION_ID.get()


class CorrelationContext:
    """Scope a correlation ID to a ``with`` block.

    Examples
    --------
    >>> from docsidebar_common.logging import CorrelationContext, get_correlation_id
    >>> with CorrelationContext("index:doc"):
    ...     get_correlation_id()
    'index:doc'
    """

    def __init__(self, correlation_id: str | None) -> None:
        self.correlation_id = correlation_id
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> Self:
        self._token = _CORRELATION_ID.set(self.correlation_id)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _CORRELATION_ID.reset(self._token)
            self._token = None


@contextmanager
def with_fields(
    logger: logging.Logger | LoggerAdapter, **fields: object
) -> Iterator[LoggerAdapter]:
    """Yield an adapter with ``fields`` bound to every record.

    A string ``correlation_id`` among the fields also becomes the context
    correlation ID for the duration of the block.
    """
    base = logger.logger if isinstance(logger, LoggerAdapter) else logger
    correlation_id = fields.get("correlation_id")
    if isinstance(correlation_id, str):
        with CorrelationContext(correlation_id):
            yield LoggerAdapter(base, fields)
    else:
        yield LoggerAdapter(base, fields)

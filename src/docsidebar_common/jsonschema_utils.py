"""JSON Schema access for the bundled ``schema/*.json`` documents.

All :mod:`jsonschema` imports go through this module. Validators are exposed
through small protocols so callers stay typed, and each bundled schema is read,
meta-validated and compiled once per process.
"""

from __future__ import annotations

import json
from functools import cache
from typing import TYPE_CHECKING, Protocol, cast

from jsonschema.exceptions import SchemaError as _SchemaError
from jsonschema.exceptions import ValidationError as _ValidationError
from jsonschema.validators import Draft202012Validator as _Draft202012Validator

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

__all__ = [
    "SchemaError",
    "SchemaValidator",
    "ValidationError",
    "ValidationErrorProtocol",
    "collect_errors",
    "format_error",
    "load_schema",
    "validator_for",
]


class ValidationErrorProtocol(Protocol):
    """The parts of ``jsonschema.exceptions.ValidationError`` we read."""

    message: str
    absolute_path: Sequence[object]


class SchemaValidator(Protocol):
    """A compiled Draft 2020-12 validator."""

    def iter_errors(self, instance: object) -> Iterator[ValidationErrorProtocol]:
        """Yield every violation of ``instance``."""
        ...

    def is_valid(self, instance: object) -> bool:
        """Return True when ``instance`` has no violations."""
        ...


SchemaError = cast("type[Exception]", _SchemaError)
ValidationError = cast("type[Exception]", _ValidationError)


@cache
def load_schema(path: Path) -> dict[str, object]:
    """Read the schema at ``path`` and check it against the 2020-12 meta-schema.

    Raises
    ------
    OSError
        If the file cannot be read.
    SchemaError
        If the document is not a valid Draft 2020-12 schema.
    """
    schema = cast("dict[str, object]", json.loads(path.read_text(encoding="utf-8")))
    _Draft202012Validator.check_schema(schema)
    return schema


@cache
def validator_for(path: Path) -> SchemaValidator:
    """Return the compiled validator for the schema at ``path``."""
    return cast("SchemaValidator", _Draft202012Validator(load_schema(path)))


def format_error(error: ValidationErrorProtocol) -> str:
    """Render ``error`` as ``$.kind[index]: message``."""
    location = "".join(
        f"[{part}]" if isinstance(part, int) else f".{part}" for part in error.absolute_path
    )
    return f"${location}: {error.message}"


def collect_errors(validator: SchemaValidator, instance: object) -> list[str]:
    """Return every violation of ``instance``, ordered by location."""
    errors = sorted(
        validator.iter_errors(instance),
        key=lambda err: [str(part) for part in err.absolute_path],
    )
    return [format_error(error) for error in errors]

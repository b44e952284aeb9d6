"""Schema validation and integrity checks for sidebar tables.

Two layers:

* :func:`validate_sidebar_payload` checks a decoded object literal against the
  bundled ``sidebar_items.json`` schema before any model is built.
* :func:`check_sidebar_items` inspects a built table and reports violations
  that the schema cannot express. Name uniqueness is not checked here because
  :class:`~sidebar_items.models.SidebarItems` refuses to build without it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from docsidebar_common.errors import SidebarSchemaError, SidebarValidationError
from docsidebar_common.jsonschema_utils import collect_errors, validator_for
from sidebar_items.kinds import is_known_kind

if TYPE_CHECKING:
    from sidebar_items.models import SidebarItems

__all__ = [
    "SIDEBAR_SCHEMA_PATH",
    "Violation",
    "check_sidebar_items",
    "ensure_valid",
    "validate_sidebar_payload",
]

SIDEBAR_SCHEMA_PATH: Final[Path] = Path(__file__).parent / "schema" / "sidebar_items.json"


@dataclass(slots=True, frozen=True)
class Violation:
    """One integrity problem found in a sidebar table."""

    rule: str
    kind: str
    name: str
    message: str

    def __str__(self) -> str:
        return f"{self.rule}: {self.message}"


def validate_sidebar_payload(payload: object) -> None:
    """Validate a decoded sidebar object against the bundled schema.

    Parameters
    ----------
    payload : object
        Decoded JSON value.

    Raises
    ------
    SidebarSchemaError
        If the payload violates the schema; ``errors`` lists every violation.
    """
    errors = collect_errors(validator_for(SIDEBAR_SCHEMA_PATH), payload)
    if errors:
        msg = f"Sidebar payload does not match schema ({len(errors)} error(s))"
        raise SidebarSchemaError(msg, errors=errors)


def check_sidebar_items(
    items: SidebarItems,
    *,
    require_descriptions: bool = False,
) -> list[Violation]:
    """Return every integrity violation in ``items``.

    Parameters
    ----------
    items : SidebarItems
        Table to inspect.
    require_descriptions : bool, optional
        Report entries whose description is empty or blank. Defaults to False,
        since rustdoc writes an empty description for undocumented items.

    Returns
    -------
    list[Violation]
        Violations in table order; empty when the table is clean.
    """
    violations: list[Violation] = []
    for kind in items.kinds:
        if not is_known_kind(kind):
            violations.append(
                Violation("unknown-kind", str(kind), "", f"Unknown item kind {str(kind)!r}")
            )
    for entry in items:
        kind = str(entry.category)
        if not entry.name:
            violations.append(Violation("empty-name", kind, "", f"Empty name in {kind!r}"))
        elif entry.name != entry.name.strip():
            violations.append(
                Violation(
                    "padded-name",
                    kind,
                    entry.name,
                    f"Name {entry.name!r} has surrounding whitespace",
                )
            )
        if require_descriptions and not entry.description.strip():
            violations.append(
                Violation(
                    "empty-description",
                    kind,
                    entry.name,
                    f"{kind} {entry.name!r} has no description",
                )
            )
    return violations


def ensure_valid(items: SidebarItems, *, require_descriptions: bool = False) -> SidebarItems:
    """Return ``items`` unchanged when it has no violations.

    Raises
    ------
    SidebarValidationError
        If :func:`check_sidebar_items` reports anything.
    """
    violations = check_sidebar_items(items, require_descriptions=require_descriptions)
    if violations:
        msg = f"Sidebar table has {len(violations)} violation(s)"
        raise SidebarValidationError(msg, violations=[str(v) for v in violations])
    return items

"""Read and write the ``sidebar-items.js`` file format.

Rustdoc has emitted two shapes of this file over time::

    initSidebarItems({"struct":[["Arg","The abstract representation..."]]});
    window.SIDEBAR_ITEMS = {"struct":["Arg"]};

The first carries ``[name, description]`` pairs, the second bare names. Both
wrap a JSON object literal, so decoding is a JSON decode of the argument plus
a check of the surrounding JavaScript. A bare JSON object is accepted too.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Final

from docsidebar_common.errors import (
    ConfigurationError,
    SidebarParseError,
    UnknownItemKindError,
)
from docsidebar_common.logging import get_logger
from sidebar_items.kinds import is_known_kind
from sidebar_items.models import SidebarItems
from sidebar_items.validation import validate_sidebar_payload

if TYPE_CHECKING:
    from collections.abc import Mapping

    from docsidebar_common.settings import RenderStyle

__all__ = [
    "RENDER_STYLES",
    "detect_style",
    "parse_sidebar_items",
    "render_sidebar_items",
    "sidebar_items_from_dict",
    "sidebar_items_to_dict",
]

logger = get_logger(__name__)

RENDER_STYLES: Final[tuple[str, ...]] = ("legacy", "window", "json")

_LEGACY_PREFIX = re.compile(r"\s*initSidebarItems\s*\(\s*")
_LEGACY_SUFFIX = re.compile(r"\s*\)\s*;?\s*")
_WINDOW_PREFIX = re.compile(r"\s*window\.SIDEBAR_ITEMS\s*=\s*")
_STATEMENT_SUFFIX = re.compile(r"\s*;?\s*")
_JSON_PREFIX = re.compile(r"\s*")
_JSON_SUFFIX = re.compile(r"\s*")


def _reject_duplicate_keys(pairs: list[tuple[str, object]]) -> dict[str, object]:
    result: dict[str, object] = {}
    for key, value in pairs:
        if key in result:
            msg = f"Item kind {key!r} is declared more than once"
            raise SidebarParseError(msg, context={"kind": key})
        result[key] = value
    return result


_DECODER = json.JSONDecoder(object_pairs_hook=_reject_duplicate_keys)


def detect_style(text: str) -> RenderStyle:
    """Return which wrapper ``text`` uses.

    Raises
    ------
    SidebarParseError
        If the text is neither a registration call, a ``window`` assignment
        nor a JSON object.
    """
    stripped = text.lstrip("\ufeff")
    if _LEGACY_PREFIX.match(stripped):
        return "legacy"
    if _WINDOW_PREFIX.match(stripped):
        return "window"
    if stripped.lstrip().startswith("{"):
        return "json"
    msg = "Expected initSidebarItems(...), window.SIDEBAR_ITEMS = ... or a JSON object"
    raise SidebarParseError(msg, context={"head": stripped[:40]})


def _decode(text: str) -> tuple[RenderStyle, object]:
    text = text.lstrip("\ufeff")
    style = detect_style(text)
    prefix, suffix = {
        "legacy": (_LEGACY_PREFIX, _LEGACY_SUFFIX),
        "window": (_WINDOW_PREFIX, _STATEMENT_SUFFIX),
        "json": (_JSON_PREFIX, _JSON_SUFFIX),
    }[style]
    head = prefix.match(text)
    start = head.end() if head else 0
    try:
        payload, end = _DECODER.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        msg = f"Invalid object literal: {exc.msg}"
        raise SidebarParseError(
            msg, cause=exc, context={"line": exc.lineno, "column": exc.colno}
        ) from exc
    if suffix.fullmatch(text, end) is None:
        msg = f"Unexpected content after the sidebar object at offset {end}"
        raise SidebarParseError(msg, context={"position": end, "style": style})
    return style, payload


def _normalise_entry(entry: object) -> tuple[str, str]:
    if isinstance(entry, str):
        return (entry, "")
    pair = [str(part) for part in entry] if isinstance(entry, list) else []
    return (pair[0], pair[1] if len(pair) > 1 else "")


def sidebar_items_from_dict(
    payload: Mapping[str, object],
    *,
    strict_kinds: bool = True,
) -> SidebarItems:
    """Build a table from a decoded sidebar object.

    Parameters
    ----------
    payload : Mapping[str, object]
        Decoded object literal; values are lists of ``[name, description]``
        pairs or bare names.
    strict_kinds : bool, optional
        Reject kinds outside :class:`~sidebar_items.kinds.ItemKind`.
        Defaults to True.

    Returns
    -------
    SidebarItems
        Immutable table in the payload's order.

    Raises
    ------
    SidebarSchemaError
        If the payload does not match the sidebar schema.
    UnknownItemKindError
        If ``strict_kinds`` is set and a kind is not recognised.
    DuplicateEntryError
        If two entries of one kind share a name.
    """
    validate_sidebar_payload(payload)
    if strict_kinds:
        for kind in payload:
            if not is_known_kind(kind):
                raise UnknownItemKindError(kind)
    pairs = {
        kind: [_normalise_entry(entry) for entry in entries]
        for kind, entries in payload.items()
        if isinstance(entries, list)
    }
    return SidebarItems.from_pairs(pairs)


def sidebar_items_to_dict(items: SidebarItems) -> dict[str, list[list[str]]]:
    """Return ``items`` as a JSON-ready ``{kind: [[name, description], ...]}`` mapping."""
    return items.to_dict()


def parse_sidebar_items(text: str, *, strict_kinds: bool = True) -> SidebarItems:
    """Parse the contents of a ``sidebar-items.js`` file.

    Parameters
    ----------
    text : str
        File contents in any supported style.
    strict_kinds : bool, optional
        Reject kinds outside :class:`~sidebar_items.kinds.ItemKind`.
        Defaults to True.

    Returns
    -------
    SidebarItems
        The decoded table.

    Raises
    ------
    SidebarParseError
        If the wrapper or the object literal is malformed.

    Examples
    --------
    >>> items = parse_sidebar_items('initSidebarItems({"mod":[["settings",""]]});')
    >>> items.get_sidebar_items()["mod"]
    (('settings', ''),)
    """
    style, payload = _decode(text)
    if not isinstance(payload, dict):
        msg = f"Sidebar payload must be an object, got {type(payload).__name__}"
        raise SidebarParseError(msg, context={"style": style})
    items = sidebar_items_from_dict(payload, strict_kinds=strict_kinds)
    logger.debug(
        "Parsed sidebar table",
        extra={"operation": "parse_sidebar", "style": style, "entries": len(items)},
    )
    return items


def render_sidebar_items(items: SidebarItems, *, style: RenderStyle = "legacy") -> str:
    """Render ``items`` in one of the supported styles.

    ``legacy`` writes the compact ``initSidebarItems({...});`` call rustdoc
    produces, ``window`` the newer names-only assignment (descriptions are
    not part of that format and are dropped), and ``json`` an indented JSON
    document.

    Raises
    ------
    ConfigurationError
        If ``style`` is not one of :data:`RENDER_STYLES`.
    """
    if style == "legacy":
        body = json.dumps(items.to_dict(), ensure_ascii=False, separators=(",", ":"))
        return f"initSidebarItems({body});"
    if style == "window":
        names = {
            kind: [name for name, _ in pairs] for kind, pairs in items.get_sidebar_items().items()
        }
        body = json.dumps(names, ensure_ascii=False, separators=(",", ":"))
        return f"window.SIDEBAR_ITEMS = {body};"
    if style == "json":
        return json.dumps(items.to_dict(), ensure_ascii=False, indent=2) + "\n"
    raise ConfigurationError.with_details(
        field="style",
        issue=f"Unsupported render style {style!r}",
        hint=f"Use one of: {', '.join(RENDER_STYLES)}",
    )

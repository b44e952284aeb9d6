"""Rustdoc item kinds used as sidebar categories."""

from __future__ import annotations

from enum import StrEnum

__all__ = [
    "KIND_ORDER",
    "ItemKind",
    "coerce_kind",
    "is_known_kind",
]


class ItemKind(StrEnum):
    """Category tags rustdoc writes as keys of a sidebar table.

    Members compare equal to their string value, so ``ItemKind.STRUCT ==
    "struct"`` holds and members can be used directly as JSON keys.
    """

    MODULE = "mod"
    EXTERN_CRATE = "externcrate"
    IMPORT = "import"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    FUNCTION = "fn"
    TYPE_ALIAS = "type"
    STATIC = "static"
    CONSTANT = "constant"
    TRAIT = "trait"
    TRAIT_ALIAS = "traitalias"
    IMPL = "impl"
    TY_METHOD = "tymethod"
    METHOD = "method"
    STRUCT_FIELD = "structfield"
    VARIANT = "variant"
    MACRO = "macro"
    PRIMITIVE = "primitive"
    ASSOCIATED_TYPE = "associatedtype"
    ASSOCIATED_CONSTANT = "associatedconstant"
    FOREIGN_TYPE = "foreigntype"
    KEYWORD = "keyword"
    OPAQUE = "opaque"
    PROC_ATTRIBUTE = "attr"
    PROC_DERIVE = "derive"


# Rank used to order search results of equal score; mirrors declaration order.
KIND_ORDER: dict[str, int] = {kind.value: rank for rank, kind in enumerate(ItemKind)}


def is_known_kind(value: str) -> bool:
    """Return True when ``value`` names a rustdoc item kind."""
    return value in KIND_ORDER


def coerce_kind(value: str) -> ItemKind | str:
    """Return the :class:`ItemKind` for ``value``, or ``value`` itself when unknown."""
    if value in KIND_ORDER:
        return ItemKind(value)
    return value

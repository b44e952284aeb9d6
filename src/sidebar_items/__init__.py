"""Typed access to rustdoc ``sidebar-items.js`` tables.

Each page of rustdoc output ships a small script that registers the items
documented on that page, grouped by kind::

    initSidebarItems({"mod":[["settings",""]],"struct":[["Arg","..."]]});

This package parses those files into immutable :class:`SidebarItems`, checks
them, writes them back out, and indexes whole documentation trees.

Examples
--------
>>> from sidebar_items import parse_sidebar_items
>>> items = parse_sidebar_items('initSidebarItems({"struct":[["Arg","An argument."]]});')
>>> items.get_sidebar_items()["struct"]
(('Arg', 'An argument.'),)
"""

from __future__ import annotations

from sidebar_items.codec import parse_sidebar_items, render_sidebar_items
from sidebar_items.index import SearchHit, SidebarIndex, build_sidebar_index, read_index, write_index
from sidebar_items.kinds import ItemKind
from sidebar_items.loader import SidebarItemsLoader, get_sidebar_items, load_sidebar_items
from sidebar_items.models import SidebarEntry, SidebarItems
from sidebar_items.validation import Violation, check_sidebar_items, ensure_valid

__all__ = [
    "ItemKind",
    "SearchHit",
    "SidebarEntry",
    "SidebarIndex",
    "SidebarItems",
    "SidebarItemsLoader",
    "Violation",
    "build_sidebar_index",
    "check_sidebar_items",
    "ensure_valid",
    "get_sidebar_items",
    "load_sidebar_items",
    "parse_sidebar_items",
    "read_index",
    "render_sidebar_items",
    "write_index",
]

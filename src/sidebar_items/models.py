"""Typed models for sidebar tables.

A sidebar table lists the items documented on one page, grouped by item kind,
in declaration order. Tables are immutable once built: every container is a
tuple or a read-only mapping, so a loaded table can be shared by any number of
readers.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from docsidebar_common.errors import DuplicateEntryError
from sidebar_items.kinds import ItemKind, coerce_kind

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "SidebarEntry",
    "SidebarItems",
    "SidebarItemsDict",
    "SidebarItemsView",
    "SidebarPair",
]

type SidebarPair = tuple[str, str]
type SidebarItemsView = Mapping[str, tuple[SidebarPair, ...]]
type SidebarItemsDict = dict[str, list[list[str]]]


@dataclass(slots=True, frozen=True)
class SidebarEntry:
    """One documented item: its kind, name and one-line description."""

    category: ItemKind | str
    name: str
    description: str = ""

    def as_pair(self) -> SidebarPair:
        """Return the ``(name, description)`` pair used on the wire."""
        return (self.name, self.description)


@dataclass(slots=True, frozen=True)
class SidebarItems:
    """Sidebar table for a single documentation page.

    Attributes
    ----------
    categories : tuple[tuple[ItemKind | str, tuple[SidebarEntry, ...]], ...]
        Kinds in file order, each with its entries in declaration order.

    Raises
    ------
    DuplicateEntryError
        If a kind appears twice, or two entries of one kind share a name.
    ValueError
        If an entry is filed under a kind other than its own ``category``.
    """

    categories: tuple[tuple[ItemKind | str, tuple[SidebarEntry, ...]], ...] = ()
    _view: SidebarItemsView = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        seen_kinds: set[str] = set()
        view: dict[str, tuple[SidebarPair, ...]] = {}
        for kind, entries in self.categories:
            if kind in seen_kinds:
                raise DuplicateEntryError(str(kind), str(kind), context={"scope": "category"})
            seen_kinds.add(kind)
            names: set[str] = set()
            for entry in entries:
                if entry.category != kind:
                    msg = f"Entry {entry.name!r} of kind {entry.category!r} filed under {kind!r}"
                    raise ValueError(msg)
                if entry.name in names:
                    raise DuplicateEntryError(str(kind), entry.name)
                names.add(entry.name)
            view[str(kind)] = tuple(entry.as_pair() for entry in entries)
        object.__setattr__(self, "_view", MappingProxyType(view))

    @classmethod
    def from_pairs(
        cls,
        mapping: Mapping[str, Iterable[Sequence[str]]],
    ) -> SidebarItems:
        """Build a table from ``{kind: [(name, description), ...]}``.

        Kind order follows the mapping's iteration order.

        Examples
        --------
        >>> items = SidebarItems.from_pairs({"struct": [("Arg", "An argument.")]})
        >>> items.get_sidebar_items()["struct"]
        (('Arg', 'An argument.'),)
        """
        categories: list[tuple[ItemKind | str, tuple[SidebarEntry, ...]]] = []
        for raw_kind, pairs in mapping.items():
            kind = coerce_kind(str(raw_kind))
            entries = tuple(
                SidebarEntry(category=kind, name=pair[0], description=pair[1] if len(pair) > 1 else "")
                for pair in pairs
            )
            categories.append((kind, entries))
        return cls(categories=tuple(categories))

    @property
    def kinds(self) -> tuple[ItemKind | str, ...]:
        """Kinds present on the page, in file order."""
        return tuple(kind for kind, _ in self.categories)

    def entries(self, kind: str) -> tuple[SidebarEntry, ...]:
        """Return the entries of ``kind``; empty when the page has none."""
        for candidate, entries in self.categories:
            if candidate == kind:
                return entries
        return ()

    def find(self, name: str, kind: str | None = None) -> SidebarEntry | None:
        """Return the first entry called ``name``, optionally restricted to ``kind``."""
        for entry in self:
            if entry.name == name and (kind is None or entry.category == kind):
                return entry
        return None

    def get_sidebar_items(self) -> SidebarItemsView:
        """Return the table as a read-only ``{kind: ((name, description), ...)}`` mapping.

        The same object is returned on every call.
        """
        return self._view

    def to_dict(self) -> SidebarItemsDict:
        """Return a JSON-ready copy using lists for pairs."""
        return {kind: [list(pair) for pair in pairs] for kind, pairs in self._view.items()}

    def __iter__(self) -> Iterator[SidebarEntry]:
        for _, entries in self.categories:
            yield from entries

    def __len__(self) -> int:
        return sum(len(entries) for _, entries in self.categories)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self)

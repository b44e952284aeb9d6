"""Site-wide sidebar index: page path to sidebar table.

The browser consumer of rustdoc output merges every page's
``sidebar-items.js`` into one global structure. :class:`SidebarIndex` is the
server-side equivalent: built once from a documentation tree, immutable
afterwards, replaced wholesale when the documentation is rebuilt.
"""

from __future__ import annotations

import json
import time
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import ValidationError

from docsidebar_common.errors import DocSidebarError, IndexDocumentError, SidebarNotFoundError
from docsidebar_common.fs import atomic_write, read_text
from docsidebar_common.logging import get_logger, with_fields
from sidebar_items.codec import sidebar_items_from_dict
from sidebar_items.documents import SidebarIndexDocument
from sidebar_items.kinds import KIND_ORDER
from sidebar_items.loader import load_sidebar_items

if TYPE_CHECKING:
    from collections.abc import Collection

    from sidebar_items.models import SidebarItems

__all__ = [
    "SearchHit",
    "SidebarIndex",
    "build_sidebar_index",
    "read_index",
    "write_index",
]

logger = get_logger(__name__)

SCORE_EXACT = 4
SCORE_PREFIX = 3
SCORE_NAME = 2
SCORE_DESCRIPTION = 1


@dataclass(slots=True, frozen=True)
class SearchHit:
    """One search result."""

    page: str
    kind: str
    name: str
    description: str
    score: int


def _score(query: str, name: str, description: str) -> int:
    lowered = name.lower()
    if lowered == query:
        return SCORE_EXACT
    if lowered.startswith(query):
        return SCORE_PREFIX
    if query in lowered:
        return SCORE_NAME
    if query in description.lower():
        return SCORE_DESCRIPTION
    return 0


@dataclass(slots=True, frozen=True)
class SidebarIndex:
    """Immutable mapping from page path to :class:`SidebarItems`.

    Attributes
    ----------
    pages : Mapping[str, SidebarItems]
        Tables keyed by POSIX page path, in sorted path order.
    root : str
        Documentation root the index was built from; empty when unknown.
    skipped : tuple[str, ...]
        Page paths whose files failed to load during a lenient build.
    """

    pages: Mapping[str, SidebarItems] = field(default_factory=dict)
    root: str = ""
    skipped: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        ordered = {page: self.pages[page] for page in sorted(self.pages)}
        object.__setattr__(self, "pages", MappingProxyType(ordered))

    def get(self, page: str) -> SidebarItems | None:
        """Return the table for ``page``, or None when it is not indexed."""
        return self.pages.get(page)

    def require(self, page: str) -> SidebarItems:
        """Return the table for ``page``.

        Raises
        ------
        SidebarNotFoundError
            If ``page`` is not indexed.
        """
        items = self.pages.get(page)
        if items is None:
            msg = f"No sidebar table for page {page!r}"
            raise SidebarNotFoundError(msg, context={"page": page})
        return items

    def merge(self, other: SidebarIndex) -> SidebarIndex:
        """Return a new index holding the pages of both.

        A page present in both is taken wholesale from ``other``; tables are
        never combined entry by entry.
        """
        pages = dict(self.pages)
        pages.update(other.pages)
        skipped = tuple(
            sorted((set(self.skipped) - set(other.pages)) | set(other.skipped))
        )
        return SidebarIndex(pages=pages, root=other.root or self.root, skipped=skipped)

    def search(
        self,
        query: str,
        *,
        kinds: Collection[str] | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """Case-insensitive search over names and descriptions.

        Exact name matches rank first, then name prefixes, then name
        substrings, then description substrings. Ties keep page order, kind
        order and declaration order.

        Parameters
        ----------
        query : str
            Text to look for.
        kinds : Collection[str] | None, optional
            Restrict results to these kinds. Defaults to None (all kinds).
        limit : int | None, optional
            Maximum number of hits. Defaults to None (no limit).

        Returns
        -------
        list[SearchHit]
            Ranked hits.

        Raises
        ------
        ValueError
            If ``query`` is blank or ``limit`` is negative.
        """
        needle = query.strip().lower()
        if not needle:
            msg = "Search query must not be empty"
            raise ValueError(msg)
        if limit is not None and limit < 0:
            msg = f"limit must be non-negative, got {limit}"
            raise ValueError(msg)

        ranked: list[tuple[int, str, int, int, SearchHit]] = []
        for page, items in self.pages.items():
            for kind, entries in items.categories:
                if kinds is not None and kind not in kinds:
                    continue
                kind_rank = KIND_ORDER.get(kind, len(KIND_ORDER))
                for position, entry in enumerate(entries):
                    score = _score(needle, entry.name, entry.description)
                    if score:
                        hit = SearchHit(page, str(kind), entry.name, entry.description, score)
                        ranked.append((-score, page, kind_rank, position, hit))
        ranked.sort(key=lambda row: row[:4])
        hits = [row[4] for row in ranked]
        return hits if limit is None else hits[:limit]

    def to_document(self) -> SidebarIndexDocument:
        """Return the persisted form of this index."""
        return SidebarIndexDocument(
            root=self.root,
            pages={page: items.to_dict() for page, items in self.pages.items()},
            skipped=list(self.skipped),
        )

    @classmethod
    def from_document(
        cls,
        document: SidebarIndexDocument,
        *,
        strict_kinds: bool = True,
    ) -> SidebarIndex:
        """Rebuild an index from its persisted form.

        Every page goes through the same schema and integrity checks as a
        freshly parsed file.
        """
        pages = {
            page: sidebar_items_from_dict(payload, strict_kinds=strict_kinds)
            for page, payload in document.pages.items()
        }
        return cls(pages=pages, root=document.root, skipped=tuple(document.skipped))

    def __len__(self) -> int:
        return len(self.pages)

    def __contains__(self, page: object) -> bool:
        return page in self.pages

    def __iter__(self) -> Iterator[str]:
        return iter(self.pages)


def _page_path(root: Path, sidebar_file: Path) -> str:
    return sidebar_file.parent.relative_to(root).as_posix()


def build_sidebar_index(
    root: Path,
    *,
    filename: str = "sidebar-items.js",
    strict_kinds: bool = True,
    skip_invalid: bool = False,
) -> SidebarIndex:
    """Scan a documentation tree and index every sidebar table in it.

    Parameters
    ----------
    root : Path
        Documentation output directory (for rustdoc, ``target/doc``).
    filename : str, optional
        Name of the per-page table files. Defaults to ``"sidebar-items.js"``.
    strict_kinds : bool, optional
        Reject unknown item kinds. Defaults to True.
    skip_invalid : bool, optional
        Log and skip files that fail to load instead of aborting.
        Defaults to False.

    Returns
    -------
    SidebarIndex
        Index keyed by each file's directory relative to ``root``.

    Raises
    ------
    SidebarNotFoundError
        If ``root`` is not a directory.
    DocSidebarError
        If a file fails to load and ``skip_invalid`` is False.
    """
    if not root.is_dir():
        msg = f"Documentation root is not a directory: {root}"
        raise SidebarNotFoundError(msg, context={"path": str(root)})

    start = time.monotonic()
    pages: dict[str, SidebarItems] = {}
    skipped: list[str] = []
    with with_fields(logger, operation="sidebar_index_build", root=str(root)) as log:
        for sidebar_file in sorted(root.rglob(filename)):
            if not sidebar_file.is_file():
                continue
            page = _page_path(root, sidebar_file)
            try:
                pages[page] = load_sidebar_items(sidebar_file, strict_kinds=strict_kinds)
            except DocSidebarError as exc:
                if not skip_invalid:
                    log.log_failure("Sidebar file rejected", exception=exc, page=page)
                    raise
                log.warning(
                    "Skipping invalid sidebar file",
                    extra={"page": page, "error_code": exc.code.value},
                )
                skipped.append(page)
        log.log_success(
            "Sidebar index built",
            duration_ms=(time.monotonic() - start) * 1000,
            pages=len(pages),
            skipped=len(skipped),
        )
    return SidebarIndex(pages=pages, root=str(root), skipped=tuple(skipped))


def write_index(index: SidebarIndex, path: Path) -> Path:
    """Write ``index`` as a JSON document at ``path`` atomically."""
    document = index.to_document()
    payload = json.dumps(document.model_dump(by_alias=True), ensure_ascii=False, indent=2)
    atomic_write(path, payload + "\n")
    logger.info(
        "Sidebar index written",
        extra={"operation": "sidebar_index_write", "path": str(path), "pages": len(index)},
    )
    return path


def read_index(path: Path, *, strict_kinds: bool = True) -> SidebarIndex:
    """Load an index written by :func:`write_index`.

    Raises
    ------
    SidebarNotFoundError
        If ``path`` does not exist.
    IndexDocumentError
        If the document is not valid JSON or does not match the document model.
    """
    try:
        text = read_text(path)
    except FileNotFoundError as exc:
        msg = f"Sidebar index not found: {path}"
        raise SidebarNotFoundError(msg, cause=exc, context={"path": str(path)}) from exc
    try:
        document = SidebarIndexDocument.model_validate_json(text)
    except ValidationError as exc:
        msg = f"Invalid sidebar index document: {path}"
        raise IndexDocumentError(
            msg, cause=exc, context={"path": str(path), "errors": exc.error_count()}
        ) from exc
    return SidebarIndex.from_document(document, strict_kinds=strict_kinds)

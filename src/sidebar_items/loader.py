"""Serve one page's sidebar table to a rendering layer.

A :class:`SidebarItemsLoader` is bound to a single source. The first read
decodes it; every later :meth:`~SidebarItemsLoader.get_sidebar_items` call
returns the same immutable mapping until :meth:`~SidebarItemsLoader.refresh`
observes a regenerated file and swaps in a whole new snapshot.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from docsidebar_common.errors import (
    ConfigurationError,
    DocSidebarError,
    SidebarNotFoundError,
    SidebarParseError,
)
from docsidebar_common.fs import read_text
from docsidebar_common.logging import get_logger
from sidebar_items.codec import parse_sidebar_items

if TYPE_CHECKING:
    from sidebar_items.models import SidebarItems, SidebarItemsView

__all__ = [
    "SidebarItemsLoader",
    "get_sidebar_items",
    "load_sidebar_items",
]

logger = get_logger(__name__)


def load_sidebar_items(path: Path, *, strict_kinds: bool = True) -> SidebarItems:
    """Read and parse the sidebar file at ``path``.

    Parameters
    ----------
    path : Path
        Location of a ``sidebar-items.js`` file.
    strict_kinds : bool, optional
        Reject unknown item kinds. Defaults to True.

    Returns
    -------
    SidebarItems
        Parsed table.

    Raises
    ------
    SidebarNotFoundError
        If ``path`` does not exist or cannot be read as a file.
    SidebarParseError
        If the file is not UTF-8 or is malformed. The path is added to the
        error context.
    """
    try:
        text = read_text(path)
    except FileNotFoundError as exc:
        msg = f"Sidebar file not found: {path}"
        raise SidebarNotFoundError(msg, cause=exc, context={"path": str(path)}) from exc
    except UnicodeDecodeError as exc:
        msg = f"Sidebar file is not valid UTF-8: {path}"
        raise SidebarParseError(
            msg, cause=exc, context={"path": str(path), "position": exc.start}
        ) from exc
    except OSError as exc:
        msg = f"Sidebar file could not be read: {path} ({exc.strerror or type(exc).__name__})"
        raise SidebarNotFoundError(msg, cause=exc, context={"path": str(path)}) from exc
    try:
        return parse_sidebar_items(text, strict_kinds=strict_kinds)
    except DocSidebarError as exc:
        exc.context.setdefault("path", str(path))
        raise


def get_sidebar_items(path: Path, *, strict_kinds: bool = True) -> SidebarItemsView:
    """Return the ``{kind: ((name, description), ...)}`` mapping stored at ``path``."""
    return load_sidebar_items(path, strict_kinds=strict_kinds).get_sidebar_items()


@dataclass(slots=True, frozen=True)
class _Snapshot:
    items: SidebarItems
    mtime_ns: int | None
    generation: int


class SidebarItemsLoader:
    """Lazily load and cache one sidebar table.

    Parameters
    ----------
    path : Path | None, optional
        File to read. None for loaders built with :meth:`from_text`.
    strict_kinds : bool, optional
        Reject unknown item kinds. Defaults to True.

    Examples
    --------
    >>> loader = SidebarItemsLoader.from_text('initSidebarItems({"fn":[["main",""]]});')
    >>> loader.get_sidebar_items() is loader.get_sidebar_items()
    True
    """

    def __init__(self, path: Path | None = None, *, strict_kinds: bool = True) -> None:
        self.path = path
        self.strict_kinds = strict_kinds
        self._snapshot: _Snapshot | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_path(cls, path: Path | str, *, strict_kinds: bool = True) -> SidebarItemsLoader:
        """Return a loader bound to the file at ``path``."""
        return cls(Path(path), strict_kinds=strict_kinds)

    @classmethod
    def from_text(cls, text: str, *, strict_kinds: bool = True) -> SidebarItemsLoader:
        """Return a loader over in-memory file contents.

        The text is parsed immediately, so malformed input fails here.
        """
        loader = cls(None, strict_kinds=strict_kinds)
        items = parse_sidebar_items(text, strict_kinds=strict_kinds)
        loader._snapshot = _Snapshot(items=items, mtime_ns=None, generation=1)
        return loader

    @property
    def generation(self) -> int:
        """Number of snapshots loaded so far; 0 before the first read."""
        snapshot = self._snapshot
        return snapshot.generation if snapshot is not None else 0

    @property
    def items(self) -> SidebarItems:
        """The current table, loading it on first access."""
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = self._load_initial()
        return snapshot.items

    def get_sidebar_items(self) -> SidebarItemsView:
        """Return the current ``{kind: ((name, description), ...)}`` mapping.

        Repeated calls return the identical object until a refresh loads a new
        generation.
        """
        return self.items.get_sidebar_items()

    def refresh(self) -> bool:
        """Reload the file when its modification time changed.

        Returns
        -------
        bool
            True when a new generation was loaded.
        """
        path = self.path
        if path is None:
            return False
        with self._lock:
            current = self._snapshot
            mtime_ns = self._stat_mtime(path)
            if current is not None and current.mtime_ns == mtime_ns:
                return False
            generation = current.generation + 1 if current is not None else 1
            self._snapshot = self._read(path, mtime_ns, generation)
        logger.info(
            "Sidebar table reloaded",
            extra={"operation": "sidebar_refresh", "path": str(path), "generation": generation},
        )
        return True

    def _load_initial(self) -> _Snapshot:
        with self._lock:
            if self._snapshot is None:
                path = self.path
                if path is None:
                    raise ConfigurationError.with_details(
                        field="path",
                        issue="loader has no source",
                        hint="Use SidebarItemsLoader.from_path or from_text",
                    )
                self._snapshot = self._read(path, self._stat_mtime(path), 1)
            return self._snapshot

    def _stat_mtime(self, path: Path) -> int:
        try:
            return path.stat().st_mtime_ns
        except FileNotFoundError as exc:
            msg = f"Sidebar file not found: {path}"
            raise SidebarNotFoundError(msg, cause=exc, context={"path": str(path)}) from exc
        except OSError as exc:
            msg = f"Sidebar file could not be read: {path} ({exc.strerror or type(exc).__name__})"
            raise SidebarNotFoundError(msg, cause=exc, context={"path": str(path)}) from exc

    def _read(self, path: Path, mtime_ns: int, generation: int) -> _Snapshot:
        items = load_sidebar_items(path, strict_kinds=self.strict_kinds)
        return _Snapshot(items=items, mtime_ns=mtime_ns, generation=generation)

    def __repr__(self) -> str:
        source = str(self.path) if self.path is not None else "<text>"
        return f"{type(self).__name__}({source!r}, generation={self.generation})"

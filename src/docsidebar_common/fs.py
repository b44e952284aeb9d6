"""UTF-8 file access and atomic replacement of generated files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = [
    "atomic_write",
    "ensure_dir",
    "read_text",
]


def ensure_dir(path: Path, *, exist_ok: bool = True) -> Path:
    """Create ``path`` with any missing parents and return it."""
    path.mkdir(parents=True, exist_ok=exist_ok)
    return path


def read_text(path: Path, encoding: str = "utf-8") -> str:
    """Return the contents of ``path``.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    UnicodeDecodeError
        If the bytes are not valid in ``encoding``.
    """
    return path.read_text(encoding=encoding)


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``data`` in a single rename.

    The data is written to a sibling temporary file first, so a reader of
    ``path`` sees the old contents or the new contents and nothing in
    between. Missing parent directories are created.

    Parameters
    ----------
    path : Path
        Destination file.
    data : str
        Text to write; written as-is with no newline translation.
    encoding : str, optional
        Text encoding. Defaults to "utf-8".
    """
    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(data)
        Path(tmp_name).replace(path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

"""Allow ``python -m sidebar_items``."""

from __future__ import annotations

from sidebar_items.cli import app

if __name__ == "__main__":
    app(prog_name="docsidebar")

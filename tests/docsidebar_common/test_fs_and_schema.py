"""Tests for filesystem and JSON Schema helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsidebar_common.fs import atomic_write, ensure_dir, read_text
from docsidebar_common.jsonschema_utils import collect_errors, load_schema, validator_for
from sidebar_items.validation import SIDEBAR_SCHEMA_PATH


class TestFs:
    """Tests for docsidebar_common.fs."""

    def test_atomic_write_creates_parents(self, tmp_path: Path) -> None:
        """Parent directories are created and no temporary files remain."""
        target = tmp_path / "a" / "b" / "sidebar-items.js"
        atomic_write(target, 'initSidebarItems({"fn":[]});')
        assert read_text(target) == 'initSidebarItems({"fn":[]});'
        assert [p.name for p in target.parent.iterdir()] == ["sidebar-items.js"]

    def test_atomic_write_replaces_content(self, tmp_path: Path) -> None:
        """Existing files are replaced wholesale."""
        target = tmp_path / "index.json"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_ensure_dir(self, tmp_path: Path) -> None:
        """ensure_dir is idempotent."""
        path = tmp_path / "x" / "y"
        assert ensure_dir(path) == path
        assert ensure_dir(path).is_dir()

    def test_read_text_missing(self, tmp_path: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "absent")


class TestSchemaHelpers:
    """Tests for docsidebar_common.jsonschema_utils."""

    def test_load_schema_is_cached(self) -> None:
        """Bundled schemas are parsed once."""
        assert load_schema(SIDEBAR_SCHEMA_PATH) is load_schema(SIDEBAR_SCHEMA_PATH)
        assert validator_for(SIDEBAR_SCHEMA_PATH) is validator_for(SIDEBAR_SCHEMA_PATH)

    def test_collect_errors_renders_paths(self) -> None:
        """Errors are rendered with JSONPath-like locations."""
        validator = validator_for(SIDEBAR_SCHEMA_PATH)
        errors = collect_errors(validator, {"mod": ["ok", 3]})
        assert len(errors) == 1
        assert errors[0].startswith("$.mod[1]: ")

    def test_collect_errors_empty_for_valid_instance(self) -> None:
        """Valid instances produce no messages."""
        validator = validator_for(SIDEBAR_SCHEMA_PATH)
        assert collect_errors(validator, {"struct": [["Arg", "An argument."]]}) == []

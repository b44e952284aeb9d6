"""Tests for sidebar_items.index: site-wide sidebar index."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from docsidebar_common.errors import (
    IndexDocumentError,
    SidebarNotFoundError,
    SidebarParseError,
)
from sidebar_items.documents import SIDEBAR_INDEX_SCHEMA_VERSION, SidebarIndexDocument
from sidebar_items.index import SidebarIndex, build_sidebar_index, read_index, write_index
from sidebar_items.models import SidebarItems


class TestBuildSidebarIndex:
    """Tests for build_sidebar_index."""

    def test_pages_keyed_by_relative_directory(self, make_doc_tree: Callable[..., Path]) -> None:
        """Every sidebar file becomes one page in sorted path order."""
        index = build_sidebar_index(make_doc_tree())
        assert list(index) == ["clap", "clap/args", "clap/args/settings"]
        assert len(index) == 3
        assert "clap/args" in index
        assert index.skipped == ()

    def test_root_level_file(self, make_doc_tree: Callable[..., Path]) -> None:
        """A file directly under the root is page ``.``."""
        root = make_doc_tree({".": 'initSidebarItems({"mod":[["clap",""]]});'})
        assert list(build_sidebar_index(root)) == ["."]

    def test_custom_filename(self, tmp_path: Path) -> None:
        """Only files with the configured name are indexed."""
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "items.js").write_text('initSidebarItems({"fn":[["f",""]]});', encoding="utf-8")
        (tmp_path / "a" / "sidebar-items.js").write_text("garbage", encoding="utf-8")
        index = build_sidebar_index(tmp_path, filename="items.js")
        assert list(index) == ["a"]

    def test_invalid_file_aborts_by_default(self, make_doc_tree: Callable[..., Path]) -> None:
        """Strict builds stop on the first bad file."""
        root = make_doc_tree({"good": 'initSidebarItems({"fn":[]});', "bad": "initSidebarItems("})
        with pytest.raises(SidebarParseError) as exc_info:
            build_sidebar_index(root)
        assert exc_info.value.context["path"].endswith("sidebar-items.js")

    def test_skip_invalid(self, make_doc_tree: Callable[..., Path]) -> None:
        """Lenient builds record skipped pages."""
        root = make_doc_tree({"good": 'initSidebarItems({"fn":[]});', "bad": "initSidebarItems("})
        index = build_sidebar_index(root, skip_invalid=True)
        assert list(index) == ["good"]
        assert index.skipped == ("bad",)

    def test_skip_invalid_covers_undecodable_files(
        self, make_doc_tree: Callable[..., Path]
    ) -> None:
        """A file that is not UTF-8 is skipped rather than aborting a lenient build."""
        root = make_doc_tree({"good": 'initSidebarItems({"fn":[]});'})
        (root / "bad").mkdir()
        (root / "bad" / "sidebar-items.js").write_bytes(b"\xff\xfe")
        index = build_sidebar_index(root, skip_invalid=True)
        assert list(index) == ["good"]
        assert index.skipped == ("bad",)

    def test_missing_root(self, tmp_path: Path) -> None:
        """The root must be a directory."""
        with pytest.raises(SidebarNotFoundError):
            build_sidebar_index(tmp_path / "nope")


class TestSidebarIndex:
    """Lookup, merge and search."""

    def test_get_and_require(self, make_doc_tree: Callable[..., Path]) -> None:
        """Pages are looked up by path."""
        index = build_sidebar_index(make_doc_tree())
        table = index.require("clap/args")
        assert isinstance(table, SidebarItems)
        assert index.get("clap/missing") is None
        with pytest.raises(SidebarNotFoundError) as exc_info:
            index.require("clap/missing")
        assert exc_info.value.context["page"] == "clap/missing"

    def test_pages_are_read_only(self) -> None:
        """The page mapping cannot be modified."""
        index = SidebarIndex(pages={"a": SidebarItems()})
        with pytest.raises(TypeError):
            index.pages["b"] = SidebarItems()  # type: ignore[index]

    def test_merge_replaces_pages_wholesale(self) -> None:
        """A page present in both indexes comes from the newer one."""
        old = SidebarIndex(
            pages={
                "a": SidebarItems.from_pairs({"fn": [("f", ""), ("g", "")]}),
                "b": SidebarItems.from_pairs({"fn": [("h", "")]}),
            },
            skipped=("c",),
        )
        new = SidebarIndex(
            pages={
                "a": SidebarItems.from_pairs({"struct": [("S", "")]}),
                "c": SidebarItems.from_pairs({"fn": [("k", "")]}),
            },
            root="/doc",
        )
        merged = old.merge(new)
        assert list(merged) == ["a", "b", "c"]
        assert merged.require("a").kinds == ("struct",)
        assert merged.skipped == ()
        assert merged.root == "/doc"
        assert old.require("a").kinds == ("fn",)

    def test_search_ranking(self, make_doc_tree: Callable[..., Path]) -> None:
        """Exact names beat prefixes, which beat substrings and descriptions."""
        index = build_sidebar_index(make_doc_tree())
        hits = index.search("arg")
        names = [(hit.name, hit.score) for hit in hits]
        assert names[0] == ("Arg", 4)
        assert ("ArgGroup", 3) in names
        assert ("any_arg", 2) in names
        assert ("SubCommand", 1) not in names
        assert [hit.score for hit in hits] == sorted((hit.score for hit in hits), reverse=True)

    def test_search_matches_descriptions(self, make_doc_tree: Callable[..., Path]) -> None:
        """Descriptions are searched case-insensitively."""
        hits = build_sidebar_index(make_doc_tree()).search("SUBCOMMAND")
        assert [(hit.page, hit.name, hit.score) for hit in hits] == [
            ("clap/args", "SubCommand", 4),
        ]
        description_hits = build_sidebar_index(make_doc_tree()).search("runtime")
        assert [(hit.name, hit.score) for hit in description_hits] == [("ArgMatches", 1)]

    def test_search_filters_and_limits(self, make_doc_tree: Callable[..., Path]) -> None:
        """Kinds restrict results and limit truncates them."""
        index = build_sidebar_index(make_doc_tree())
        assert {hit.kind for hit in index.search("arg", kinds={"mod"})} == {"mod"}
        assert len(index.search("arg", limit=2)) == 2
        assert index.search("arg", limit=0) == []

    @pytest.mark.parametrize(("query", "limit"), [("   ", None), ("arg", -1)])
    def test_search_rejects_bad_arguments(
        self, make_doc_tree: Callable[..., Path], query: str, limit: int | None
    ) -> None:
        """Blank queries and negative limits are caller errors."""
        index = build_sidebar_index(make_doc_tree())
        with pytest.raises(ValueError):
            index.search(query, limit=limit)


class TestIndexDocuments:
    """Persistence of the site index."""

    def test_write_and_read(self, make_doc_tree: Callable[..., Path], tmp_path: Path) -> None:
        """A written index reads back with identical pages."""
        index = build_sidebar_index(make_doc_tree())
        target = tmp_path / "out" / "sidebar-index.json"
        write_index(index, target)

        raw = json.loads(target.read_text(encoding="utf-8"))
        assert raw["schemaVersion"] == SIDEBAR_INDEX_SCHEMA_VERSION
        assert "generatedAt" in raw
        assert raw["pages"]["clap/args"]["mod"] == [["any_arg", ""], ["settings", ""]]

        restored = read_index(target)
        assert list(restored) == list(index)
        for page in index:
            assert restored.require(page) == index.require(page)
        assert restored.root == index.root

    def test_document_model_accepts_field_names(self) -> None:
        """Documents can be built by field name or alias."""
        by_name = SidebarIndexDocument(schema_version="1.0.0", pages={})
        by_alias = SidebarIndexDocument.model_validate({"schemaVersion": "1.0.0", "pages": {}})
        assert by_name.schema_version == by_alias.schema_version

    def test_read_missing(self, tmp_path: Path) -> None:
        """A missing document is a not-found error."""
        with pytest.raises(SidebarNotFoundError):
            read_index(tmp_path / "absent.json")

    @pytest.mark.parametrize(
        "content",
        ["not json", '{"pages": {"a": "nope"}}', '{"pages": {}, "extra": 1}'],
    )
    def test_read_invalid_document(self, tmp_path: Path, content: str) -> None:
        """Malformed documents are reported as IndexDocumentError."""
        target = tmp_path / "index.json"
        target.write_text(content, encoding="utf-8")
        with pytest.raises(IndexDocumentError) as exc_info:
            read_index(target)
        assert exc_info.value.context["path"] == str(target)

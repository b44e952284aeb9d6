"""Shared pytest fixtures for the docsidebar test suite.

Fixtures cover:
- The clap ``args`` sidebar file rustdoc generated, byte for byte
- Small documentation trees built under ``tmp_path``
- Environment isolation for ``DOCSIDEBAR_*`` settings
- Root logger restoration after CLI runs reconfigure logging
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from docsidebar_common.logging import set_correlation_id

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CLAP_ARGS_SIDEBAR = FIXTURES_DIR / "clap" / "args" / "sidebar-items.js"

ARG_DESCRIPTION = (
    "The abstract representation of a command line argument. Used to set all the options "
    "and relationships that define a valid argument for the program."
)
ARG_GROUP_DESCRIPTION = (
    "`ArgGroup`s are a family of related arguments and way for you to express, "
    '"Any of these arguments". By placing arguments in a logical group, you can create '
    "easier requirement and exclusion rules instead of having to list each argument "
    'individually, or when you want a rule to apply "any but not all" arguments.'
)
ARG_MATCHES_DESCRIPTION = (
    "Used to get information about the arguments that where supplied to the program at "
    "runtime by the user. New instances of this struct are obtained by using the "
    "`App::get_matches` family of methods."
)
SUB_COMMAND_DESCRIPTION = "The abstract representation of a command line subcommand."


@pytest.fixture(name="clap_args_path")
def _clap_args_path() -> Path:
    return CLAP_ARGS_SIDEBAR


@pytest.fixture(name="clap_args_text")
def _clap_args_text() -> str:
    return CLAP_ARGS_SIDEBAR.read_text(encoding="utf-8")


@pytest.fixture(name="expected_clap_args")
def _expected_clap_args() -> dict[str, tuple[tuple[str, str], ...]]:
    return {
        "mod": (("any_arg", ""), ("settings", "")),
        "struct": (
            ("Arg", ARG_DESCRIPTION),
            ("ArgGroup", ARG_GROUP_DESCRIPTION),
            ("ArgMatches", ARG_MATCHES_DESCRIPTION),
            ("SubCommand", SUB_COMMAND_DESCRIPTION),
        ),
    }


@pytest.fixture(name="make_doc_tree")
def _make_doc_tree(tmp_path: Path, clap_args_text: str) -> Callable[..., Path]:
    """Return a factory that writes sidebar files under ``tmp_path / "doc"``.

    Pages map a relative directory to file contents; by default the tree holds
    the clap crate root, its ``args`` module and one ``settings`` page.
    """

    def factory(pages: dict[str, str] | None = None) -> Path:
        root = tmp_path / "doc"
        layout = pages or {
            "clap": 'initSidebarItems({"mod":[["args",""]],"macro":[["arg_enum","Convenience macro to generate more complete enums."]],"struct":[["App","Used to create a representation of a command line program."]]});',
            "clap/args": clap_args_text,
            "clap/args/settings": 'initSidebarItems({"enum":[["ArgSettings","Various settings that apply to arguments."]]});',
        }
        for page, text in layout.items():
            directory = root / page
            directory.mkdir(parents=True, exist_ok=True)
            (directory / "sidebar-items.js").write_text(text, encoding="utf-8")
        return root

    return factory


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("DOCSIDEBAR_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    set_correlation_id(None)

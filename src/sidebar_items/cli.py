"""``docsidebar`` command line interface."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from docsidebar_common.errors import DocSidebarError, SidebarValidationError
from docsidebar_common.fs import atomic_write
from docsidebar_common.logging import CorrelationContext, get_logger, setup_logging
from docsidebar_common.problem_details import render_problem
from docsidebar_common.settings import SidebarSettings, load_settings
from sidebar_items.codec import render_sidebar_items
from sidebar_items.index import SidebarIndex, build_sidebar_index, read_index, write_index
from sidebar_items.loader import load_sidebar_items
from sidebar_items.validation import check_sidebar_items

__all__ = ["app"]

LOGGER = get_logger(__name__)

app = typer.Typer(
    help="Inspect, validate, convert and index rustdoc sidebar-items.js files.",
    no_args_is_help=True,
    add_completion=False,
)


class Style(StrEnum):
    """Output styles accepted by ``convert``."""

    LEGACY = "legacy"
    WINDOW = "window"
    JSON = "json"


@dataclass(slots=True)
class _State:
    settings: SidebarSettings


def _fail(exc: DocSidebarError, instance: str) -> NoReturn:
    typer.echo(render_problem(exc.to_problem_details(instance=instance)), err=True)
    raise typer.Exit(code=1) from exc


def _settings(ctx: typer.Context) -> SidebarSettings:
    state = ctx.find_object(_State)
    if state is None:
        return load_settings()
    return state.settings


@app.callback()
def main(
    ctx: typer.Context,
    lenient_kinds: Annotated[
        bool,
        typer.Option(
            "--lenient-kinds",
            help="Accept item kinds rustdoc does not define instead of rejecting them.",
        ),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override DOCSIDEBAR_LOG_LEVEL.", metavar="LEVEL"),
    ] = None,
) -> None:
    """Load settings and configure logging for every command."""
    overrides: dict[str, object] = {}
    if lenient_kinds:
        overrides["strict_kinds"] = False
    try:
        settings = load_settings(**overrides)
        if log_level is not None:
            settings = settings.model_copy(
                update={"logging": settings.logging.model_copy(update={"level": log_level.upper()})}
            )
    except DocSidebarError as exc:
        _fail(exc, "urn:docsidebar:settings")
    setup_logging(settings.logging.level, json_format=settings.logging.json_format)
    ctx.obj = _State(settings=settings)


@app.command()
def show(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="sidebar-items.js file to display.")],
    kind: Annotated[
        str | None, typer.Option("--kind", "-k", help="Only show this item kind.")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the table as JSON.")] = False,
) -> None:
    """Print the sidebar table stored in PATH."""
    settings = _settings(ctx)
    try:
        items = load_sidebar_items(path, strict_kinds=settings.strict_kinds)
    except DocSidebarError as exc:
        _fail(exc, f"urn:docsidebar:file:{path}")

    table = items.get_sidebar_items()
    selected = {k: v for k, v in table.items() if kind is None or k == kind}
    if as_json:
        payload = {k: [list(pair) for pair in pairs] for k, pairs in selected.items()}
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    for category, pairs in selected.items():
        typer.echo(f"[{category}]")
        for name, description in pairs:
            typer.echo(f"  {name} - {description}" if description else f"  {name}")


@app.command()
def check(
    ctx: typer.Context,
    paths: Annotated[list[Path], typer.Argument(help="sidebar-items.js files to validate.")],
    require_descriptions: Annotated[
        bool,
        typer.Option(
            "--require-descriptions",
            help="Treat empty descriptions as violations (also DOCSIDEBAR_REQUIRE_DESCRIPTIONS).",
        ),
    ] = False,
) -> None:
    """Validate files; print a Problem Details document for each failure."""
    settings = _settings(ctx)
    strict_descriptions = require_descriptions or settings.require_descriptions
    failures = 0
    for path in paths:
        instance = f"urn:docsidebar:file:{path}"
        try:
            items = load_sidebar_items(path, strict_kinds=settings.strict_kinds)
            violations = check_sidebar_items(items, require_descriptions=strict_descriptions)
            if violations:
                msg = f"{path}: {len(violations)} violation(s)"
                raise SidebarValidationError(  # noqa: TRY301
                    msg, violations=[str(v) for v in violations], context={"path": str(path)}
                )
        except DocSidebarError as exc:
            failures += 1
            LOGGER.warning(
                "Sidebar file failed validation",
                extra={"operation": "sidebar_check", "path": str(path), "error_code": exc.code.value},
            )
            typer.echo(render_problem(exc.to_problem_details(instance=instance)))
            continue
        typer.echo(f"ok {path} ({len(items)} entries)")
    if failures:
        raise typer.Exit(code=1)


@app.command()
def convert(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="sidebar-items.js file to convert.")],
    style: Annotated[
        Style | None, typer.Option("--style", "-s", help="Output style (default from settings).")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write here instead of stdout.")
    ] = None,
) -> None:
    """Re-emit PATH in another style."""
    settings = _settings(ctx)
    target_style = style.value if style is not None else settings.render_style
    try:
        items = load_sidebar_items(path, strict_kinds=settings.strict_kinds)
        rendered = render_sidebar_items(items, style=target_style)
    except DocSidebarError as exc:
        _fail(exc, f"urn:docsidebar:file:{path}")
    if output is None:
        typer.echo(rendered.rstrip("\n"))
        return
    atomic_write(output, rendered)
    typer.echo(f"Wrote {output}")


@app.command()
def index(
    ctx: typer.Context,
    root: Annotated[Path, typer.Argument(help="Documentation output directory.")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the index document here.")
    ] = None,
    skip_invalid: Annotated[
        bool, typer.Option("--skip-invalid", help="Skip files that fail to load.")
    ] = False,
) -> None:
    """Build a site index from every sidebar file under ROOT."""
    settings = _settings(ctx)
    with CorrelationContext(f"index:{root.name}"):
        try:
            site_index = build_sidebar_index(
                root,
                filename=settings.filename,
                strict_kinds=settings.strict_kinds,
                skip_invalid=skip_invalid,
            )
        except DocSidebarError as exc:
            _fail(exc, f"urn:docsidebar:root:{root}")
        if output is None:
            document = site_index.to_document().model_dump(by_alias=True)
            typer.echo(json.dumps(document, ensure_ascii=False, indent=2))
            return
        write_index(site_index, output)
    typer.echo(f"Indexed {len(site_index)} page(s) into {output}")
    for page in site_index.skipped:
        typer.echo(f"skipped {page}")


def _open_index(source: Path, settings: SidebarSettings) -> SidebarIndex:
    if source.is_dir():
        return build_sidebar_index(
            source, filename=settings.filename, strict_kinds=settings.strict_kinds
        )
    return read_index(source, strict_kinds=settings.strict_kinds)


@app.command()
def search(
    ctx: typer.Context,
    source: Annotated[
        Path, typer.Argument(help="Documentation directory or index document.")
    ],
    query: Annotated[str, typer.Argument(help="Text to search for.")],
    kind: Annotated[
        list[str] | None, typer.Option("--kind", "-k", help="Restrict to this item kind.")
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", min=0, help="Maximum number of results.")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print results as JSON.")] = False,
) -> None:
    """Search item names and descriptions."""
    settings = _settings(ctx)
    try:
        site_index = _open_index(source, settings)
    except DocSidebarError as exc:
        _fail(exc, f"urn:docsidebar:source:{source}")
    try:
        hits = site_index.search(query, kinds=kind or None, limit=limit)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="QUERY") from exc
    if as_json:
        payload = [
            {"page": h.page, "kind": h.kind, "name": h.name, "description": h.description, "score": h.score}
            for h in hits
        ]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    for hit in hits:
        typer.echo(f"{hit.page}\t{hit.kind}\t{hit.name}")

"""Tests for docsidebar_common.problem_details."""

from __future__ import annotations

import json

import pytest

from docsidebar_common.problem_details import (
    ProblemDetailsParams,
    ProblemDetailsValidationError,
    build_problem_details,
    problem_from_exception,
    render_problem,
    validate_problem_details,
)


@pytest.fixture(name="params")
def _params() -> ProblemDetailsParams:
    return ProblemDetailsParams(
        problem_type="https://docsidebar.dev/problems/sidebar-parse-error",
        title="Sidebar file could not be parsed",
        status=422,
        detail="Expected initSidebarItems(...) call",
        instance="urn:docsidebar:file:clap/args/sidebar-items.js",
        code="sidebar-parse-error",
    )


def test_build_problem_details(params: ProblemDetailsParams) -> None:
    """Required fields and the code are present; extensions only when given."""
    problem = build_problem_details(params)
    assert problem["status"] == 422
    assert problem["code"] == "sidebar-parse-error"
    assert "extensions" not in problem


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "t", "title": "x", "status": 422, "detail": "d"},
        {"type": "t", "title": "x", "status": 99, "detail": "d", "instance": "i"},
        {"type": "t", "title": "x", "status": 422, "detail": "d", "instance": "i", "code": "Bad_Code"},
        {"type": "t", "title": "x", "status": 422, "detail": "d", "instance": "i", "other": 1},
    ],
)
def test_validate_rejects_invalid_payloads(payload: dict[str, object]) -> None:
    """Missing fields, bad statuses, bad codes and unknown keys are rejected."""
    with pytest.raises(ProblemDetailsValidationError) as exc_info:
        validate_problem_details(payload)  # type: ignore[arg-type]
    assert exc_info.value.validation_errors


def test_problem_from_exception(params: ProblemDetailsParams) -> None:
    """The exception type and message are recorded as extensions."""
    problem = problem_from_exception(ValueError("bad literal"), params)
    assert problem["extensions"] == {
        "exception_type": "ValueError",
        "exception_message": "bad literal",
    }


def test_render_problem_is_sorted_json(params: ProblemDetailsParams) -> None:
    """Rendered problems are stable, indented JSON."""
    rendered = render_problem(build_problem_details(params))
    assert json.loads(rendered)["title"] == "Sidebar file could not be parsed"
    assert rendered.index('"code"') < rendered.index('"detail"')
    assert rendered.startswith("{\n  ")

"""Tests for template queries and path helpers."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from makr.models import ProjectType, Template
from makr.query import (
    expand_tilde,
    filter_templates_by_tag,
    find_templates_by_identifier,
    parse_tags,
    resolve_project_path,
    search_templates,
    sort_templates_by_last_used,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_template(name: str, **kwargs) -> Template:
    kwargs.setdefault("url", f"https://github.com/acme/{name}")
    return Template(name=name, **kwargs)


@pytest.fixture
def templates() -> list[Template]:
    return [
        make_template("next-starter", description="Next.js app", tags=["react", "typescript"]),
        make_template("fastapi-base", description="API service", tags=["python"]),
        make_template("cli-kit", tags=["Rust"]),
    ]


class TestSearchTemplates:
    """Tests for search_templates."""

    def test_matches_name(self, templates: list[Template]) -> None:
        assert [t.name for t in search_templates(templates, "fast")] == ["fastapi-base"]

    def test_matches_description_case_insensitive(self, templates: list[Template]) -> None:
        assert [t.name for t in search_templates(templates, "NEXT.JS")] == ["next-starter"]

    def test_matches_tag_substring(self, templates: list[Template]) -> None:
        assert [t.name for t in search_templates(templates, "rus")] == ["cli-kit"]

    def test_no_match(self, templates: list[Template]) -> None:
        assert search_templates(templates, "haskell") == []

    def test_preserves_input_order(self, templates: list[Template]) -> None:
        # "t" appears in every name
        assert [t.name for t in search_templates(templates, "t")] == [
            "next-starter",
            "fastapi-base",
            "cli-kit",
        ]


class TestFilterTemplatesByTag:
    """Tests for filter_templates_by_tag."""

    def test_exact_tag_match(self, templates: list[Template]) -> None:
        assert [t.name for t in filter_templates_by_tag(templates, "react")] == ["next-starter"]

    def test_case_insensitive(self, templates: list[Template]) -> None:
        assert [t.name for t in filter_templates_by_tag(templates, "rust")] == ["cli-kit"]

    def test_substring_is_not_a_match(self, templates: list[Template]) -> None:
        assert filter_templates_by_tag(templates, "type") == []


class TestSortTemplatesByLastUsed:
    """Tests for sort_templates_by_last_used."""

    def test_most_recent_first_then_unused(self) -> None:
        old = make_template("old", last_used=NOW - timedelta(days=3))
        never_a = make_template("never-a")
        recent = make_template("recent", last_used=NOW)
        never_b = make_template("never-b")

        result = sort_templates_by_last_used([old, never_a, recent, never_b])

        assert [t.name for t in result] == ["recent", "old", "never-a", "never-b"]

    def test_does_not_mutate_input(self) -> None:
        items = [make_template("a"), make_template("b", last_used=NOW)]
        sort_templates_by_last_used(items)
        assert [t.name for t in items] == ["a", "b"]


class TestFindTemplatesByIdentifier:
    """Tests for find_templates_by_identifier."""

    def test_by_name(self, templates: list[Template]) -> None:
        assert find_templates_by_identifier(templates, "cli-kit") == [templates[2]]

    def test_by_id(self, templates: list[Template]) -> None:
        assert find_templates_by_identifier(templates, templates[1].id) == [templates[1]]

    def test_name_colliding_with_id_returns_both(self, templates: list[Template]) -> None:
        impostor = make_template(templates[0].id)
        matches = find_templates_by_identifier([*templates, impostor], templates[0].id)
        assert matches == [templates[0], impostor]

    def test_unknown(self, templates: list[Template]) -> None:
        assert find_templates_by_identifier(templates, "nope") == []


class TestParseTags:
    """Tests for parse_tags."""

    def test_trims_lowercases_and_drops_empty(self) -> None:
        assert parse_tags(" React, TypeScript ,,next ") == ["react", "typescript", "next"]

    @pytest.mark.parametrize("value", [None, "", " , "])
    def test_empty_input(self, value) -> None:
        assert parse_tags(value) == []


class TestProjectPaths:
    """Tests for expand_tilde and resolve_project_path."""

    def test_expand_tilde(self) -> None:
        assert expand_tilde("~/code") == str(Path.home() / "code")

    def test_absolute_path_unchanged(self) -> None:
        assert expand_tilde("/srv/code") == "/srv/code"

    def test_resolve_project_path(self, tmp_path: Path) -> None:
        project_type = ProjectType(name="experiment", path=str(tmp_path / "experiments"))
        assert resolve_project_path(project_type, "python", "demo") == (
            tmp_path / "experiments" / "python" / "demo"
        )

    def test_resolve_project_path_expands_tilde(self) -> None:
        project_type = ProjectType(name="learning", path="~/learning")
        assert resolve_project_path(project_type, "go", "tour") == (
            Path.home() / "learning" / "go" / "tour"
        )

"""Tests for state document backfilling."""

from pathlib import Path

from makr.constants import DEFAULT_LANGUAGES
from makr.storage.migration import backfill_document


class TestBackfillDocument:
    """Tests for backfill_document."""

    def test_first_release_document_gets_every_field(self, home_dir: Path) -> None:
        raw = {"templates": [], "config": {"defaultBranch": "main", "clonePath": "/x"}}

        document, changed = backfill_document(raw, home_dir)

        assert changed is True
        assert document["collections"] == []
        assert document["recentProjects"] == []
        assert document["languages"] == DEFAULT_LANGUAGES
        assert [pt["name"] for pt in document["projectTypes"]] == [
            "official",
            "experiment",
            "learning",
            "playground",
        ]
        assert document["projectTypes"][1]["path"] == str(home_dir / "experiments")
        assert document["config"]["githubToken"] is None

    def test_existing_values_are_kept(self, home_dir: Path) -> None:
        raw = {
            "templates": [],
            "collections": [],
            "projectTypes": [],
            "languages": ["zig"],
            "recentProjects": [],
            "config": {"defaultBranch": "trunk", "clonePath": "/x", "githubToken": "t"},
        }

        document, changed = backfill_document(raw, home_dir)

        assert changed is False
        assert document == raw

    def test_null_fields_are_replaced(self, home_dir: Path) -> None:
        raw = {"templates": None, "config": None}

        document, changed = backfill_document(raw, home_dir)

        assert changed is True
        assert document["templates"] == []
        assert document["config"]["clonePath"] == str(home_dir / "projects")

    def test_input_is_not_mutated(self, home_dir: Path) -> None:
        raw = {"templates": [], "config": {}}
        backfill_document(raw, home_dir)
        assert raw == {"templates": [], "config": {}}

"""Tests for file utility functions."""

import os
from pathlib import Path

import pytest

from makr.utils.file_utils import (
    PRIVATE_FILE_MODE,
    is_directory_empty,
    read_bytes,
    remove_tree,
    write_atomically,
)


class TestWriteAtomically:
    """Tests for write_atomically function."""

    def test_writes_text_as_utf8(self, tmp_path: Path):
        """Should encode text content as UTF-8."""
        fp = tmp_path / "config.json"
        write_atomically(fp, '{"name":"café"}')
        assert fp.read_bytes() == '{"name":"café"}'.encode("utf-8")

    def test_creates_parent_directories(self, tmp_path: Path):
        """Should create missing parent directories."""
        fp = tmp_path / "a" / "b" / "config.json"
        write_atomically(fp, "{}")
        assert read_bytes(fp) == b"{}"

    def test_private_mode(self, tmp_path: Path):
        """Should apply the requested permissions."""
        fp = tmp_path / "config.json"
        write_atomically(fp, "{}", mode=PRIVATE_FILE_MODE)
        assert (fp.stat().st_mode & 0o777) == 0o600

    def test_replaces_existing_file(self, tmp_path: Path):
        """Should replace an existing file."""
        fp = tmp_path / "config.json"
        fp.write_text("old")
        write_atomically(fp, "new")
        assert fp.read_text() == "new"

    def test_failure_keeps_old_content_and_removes_temp(self, tmp_path: Path, monkeypatch):
        """A failed write leaves the previous file untouched."""
        fp = tmp_path / "config.json"
        fp.write_text("old")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(OSError, match="disk full"):
            write_atomically(fp, "new")

        assert fp.read_text() == "old"
        assert not (tmp_path / "config.json.tmp").exists()


class TestDirectoryHelpers:
    """Tests for is_directory_empty and remove_tree."""

    def test_missing_path_counts_as_empty(self, tmp_path: Path):
        assert is_directory_empty(tmp_path / "missing") is True

    def test_empty_directory(self, tmp_path: Path):
        assert is_directory_empty(tmp_path) is True

    def test_non_empty_directory(self, tmp_path: Path):
        (tmp_path / "file.txt").write_text("x")
        assert is_directory_empty(tmp_path) is False

    def test_file_is_not_an_empty_directory(self, tmp_path: Path):
        fp = tmp_path / "file.txt"
        fp.write_text("x")
        assert is_directory_empty(fp) is False

    def test_remove_tree(self, tmp_path: Path):
        git_dir = tmp_path / "repo" / ".git"
        (git_dir / "objects").mkdir(parents=True)
        (git_dir / "HEAD").write_text("ref: refs/heads/main")

        remove_tree(git_dir)

        assert not git_dir.exists()
        assert (tmp_path / "repo").exists()

    def test_remove_tree_missing_path(self, tmp_path: Path):
        remove_tree(tmp_path / "missing")

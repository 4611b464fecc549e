"""Tests for git clone helpers."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from makr.exceptions import ConflictError, GitError
from makr.git import clone_repo, remove_git_metadata, resolve_clone_path


@pytest.fixture
def git_on_path():
    with patch("makr.git.shutil.which", return_value="/usr/bin/git"):
        yield


class TestCloneRepo:
    """Tests for clone_repo."""

    def test_runs_git_clone(self, tmp_path: Path, git_on_path) -> None:
        target = tmp_path / "widgets"
        with patch("makr.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stderr="")
            result = clone_repo("https://github.com/acme/widgets", target)

        assert result == target
        cmd = mock_run.call_args[0][0]
        assert cmd == ["/usr/bin/git", "clone", "https://github.com/acme/widgets", str(target)]
        assert mock_run.call_args[1]["check"] is True

    def test_passes_branch(self, tmp_path: Path, git_on_path) -> None:
        target = tmp_path / "widgets"
        with patch("makr.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stderr="")
            clone_repo("https://github.com/acme/widgets", target, branch="dev")

        cmd = mock_run.call_args[0][0]
        assert cmd[2:4] == ["--branch", "dev"]

    def test_non_empty_target_is_a_conflict(self, tmp_path: Path, git_on_path) -> None:
        (tmp_path / "README.md").write_text("hi")
        with patch("makr.git.subprocess.run") as mock_run:
            with pytest.raises(ConflictError):
                clone_repo("https://github.com/acme/widgets", tmp_path)
        mock_run.assert_not_called()

    def test_failure_carries_stderr(self, tmp_path: Path, git_on_path) -> None:
        error = subprocess.CalledProcessError(
            128, ["git", "clone"], stderr="fatal: repository not found\n"
        )
        with patch("makr.git.subprocess.run", side_effect=error):
            with pytest.raises(GitError) as exc_info:
                clone_repo("https://github.com/acme/missing", tmp_path / "missing")

        assert exc_info.value.details == "fatal: repository not found"

    def test_git_not_installed(self, tmp_path: Path) -> None:
        with patch("makr.git.shutil.which", return_value=None):
            with pytest.raises(GitError, match="git not found"):
                clone_repo("https://github.com/acme/widgets", tmp_path / "widgets")


class TestRemoveGitMetadata:
    """Tests for remove_git_metadata."""

    def test_removes_only_git_directory(self, tmp_path: Path) -> None:
        (tmp_path / ".git" / "refs").mkdir(parents=True)
        (tmp_path / ".gitignore").write_text("node_modules/\n")

        remove_git_metadata(tmp_path)

        assert not (tmp_path / ".git").exists()
        assert (tmp_path / ".gitignore").exists()


class TestResolveClonePath:
    """Tests for resolve_clone_path."""

    def test_default_is_clone_path_plus_name(self, tmp_path: Path) -> None:
        clone_root = tmp_path / "projects"

        target = resolve_clone_path(None, "widgets", str(clone_root))

        assert target == (clone_root / "widgets").resolve()
        assert clone_root.is_dir()

    def test_explicit_directory_wins(self, tmp_path: Path) -> None:
        target = resolve_clone_path(str(tmp_path / "here"), "widgets", "/unused")
        assert target == (tmp_path / "here").resolve()

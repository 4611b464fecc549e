"""Thin wrapper around the ``git`` command line for cloning templates."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from makr.exceptions import ConflictError, GitError
from makr.utils.file_utils import is_directory_empty, remove_tree

logger = logging.getLogger(__name__)


def _git_executable() -> str:
    git = shutil.which("git")
    if git is None:
        raise GitError(
            "git not found. Please install git:\n"
            "  macOS: brew install git\n"
            "  Linux: apt install git"
        )
    return git


def clone_repo(url: str, target_dir: Path, branch: str | None = None) -> Path:
    """Clone ``url`` into ``target_dir``, optionally pinned to ``branch``.

    Raises:
        ConflictError: If the target exists and is not empty.
        GitError: If git is missing or the clone fails.
    """
    if not is_directory_empty(target_dir):
        raise ConflictError(f"Directory already exists: {target_dir}")

    cmd = [_git_executable(), "clone"]
    if branch:
        cmd += ["--branch", branch]
    cmd += [url, str(target_dir)]

    logger.info("Cloning %s into %s", url, target_dir)
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        error_msg = (e.stderr or "").strip() or str(e)
        raise GitError(f"git clone failed for {url}", details=error_msg) from e

    if result.stderr:
        # git writes progress to stderr even on success
        logger.debug("git stderr: %s", result.stderr.strip())
    return target_dir


def remove_git_metadata(target_dir: Path) -> None:
    """Delete ``<target_dir>/.git`` so the clone starts without history."""
    remove_tree(target_dir / ".git")
    logger.debug("Removed git metadata from %s", target_dir)


def resolve_clone_path(specified: str | None, template_name: str, clone_path: str) -> Path:
    """Pick the clone destination and make sure its parent exists.

    An explicit ``specified`` directory wins; otherwise the template is
    cloned to ``<clone_path>/<template_name>``.
    """
    if specified:
        return Path(specified).expanduser().resolve()
    target = (Path(clone_path).expanduser() / template_name).resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    return target

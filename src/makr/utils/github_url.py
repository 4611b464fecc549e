"""GitHub URL validation and normalization helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from makr.exceptions import ValidationError

_HTTPS_PATTERN = re.compile(r"^https?://(www\.)?github\.com/[\w.-]+/[\w.-]+(/.*)?$")
_SSH_PATTERN = re.compile(r"^git@github\.com:([\w.-]+)/([\w.-]+)\.git$")
_HTTPS_BASE = re.compile(r"^https?://(?:www\.)?github\.com/([\w.-]+)/([\w.-]+)")
_REPO_REF = re.compile(r"github\.com[/:]([^/]+)/([^/]+?)(?:\.git)?/?$")
_PROJECT_NAME = re.compile(r"^[\w-]+$")


@dataclass(frozen=True)
class GitHubRepoRef:
    """Owner/repository pair parsed from a GitHub URL."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def validate_github_url(url: str) -> bool:
    """Check that a URL is a GitHub repository URL (HTTPS or SSH).

    Purely syntactic, no network access.

    Examples:
        "https://github.com/acme/widgets" -> True
        "git@github.com:acme/widgets.git" -> True
        "https://gitlab.com/acme/widgets" -> False
    """
    return bool(_HTTPS_PATTERN.match(url) or _SSH_PATTERN.match(url))


def normalize_github_url(url: str) -> str:
    """Canonicalize a GitHub URL to ``https://github.com/<owner>/<repo>``.

    SSH URLs are rewritten to HTTPS, and any ``/tree/...``, ``/blob/...`` or
    other sub-path is dropped. Unrecognized input is returned with a single
    trailing slash stripped.

    Examples:
        "git@github.com:acme/widgets.git" -> "https://github.com/acme/widgets"
        "https://github.com/acme/widgets/tree/main/src" -> "https://github.com/acme/widgets"
    """
    ssh = _SSH_PATTERN.match(url)
    if ssh:
        return f"https://github.com/{ssh.group(1)}/{ssh.group(2)}"

    https = _HTTPS_BASE.match(url)
    if https:
        return f"https://github.com/{https.group(1)}/{https.group(2)}"

    return url[:-1] if url.endswith("/") else url


def parse_github_repo(url: str) -> GitHubRepoRef | None:
    """Extract the owner and repository name from a GitHub URL."""
    match = _REPO_REF.search(url)
    if not match:
        return None
    return GitHubRepoRef(owner=match.group(1), repo=match.group(2))


def validate_project_name(name: str) -> str:
    """Raise ValidationError unless name is usable as a directory name."""
    if not name or not name.strip():
        raise ValidationError("Project name is required")
    if not _PROJECT_NAME.match(name):
        raise ValidationError("Use only letters, numbers, underscores, and hyphens")
    return name

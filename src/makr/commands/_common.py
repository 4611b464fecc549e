"""Shared plumbing for command orchestrators.

Commands reach the store, prompter and GitHub client only through the
factories below, so tests can patch a single place.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.markup import escape

from makr import ui
from makr.config.settings import get_settings
from makr.exceptions import (
    AmbiguousIdentifierError,
    ConfigurationError,
    ConflictError,
    GitError,
    MakrError,
    PromptCancelledError,
    TemplateNotFoundError,
    ValidationError,
)
from makr.git import clone_repo, remove_git_metadata
from makr.github import ForkResult, GitHubClient
from makr.models import GlobalSettings, Template
from makr.prompts import Prompter
from makr.query import find_templates_by_identifier
from makr.storage import ConfigStore
from makr.utils.file_utils import is_directory_empty
from makr.utils.github_url import normalize_github_url, parse_github_repo, validate_github_url

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def get_store() -> ConfigStore:
    """Store at the configured location (``MAKR_CONFIG_DIR``)."""
    try:
        settings = get_settings()
    except PydanticValidationError as e:
        raise ConfigurationError("Invalid MAKR_* environment settings", details=str(e)) from e
    return ConfigStore(settings.config_path)


def get_prompter() -> Prompter:
    return Prompter(console=ui.console)


def get_github_client(token: str) -> GitHubClient:
    settings = get_settings()
    return GitHubClient(token, base_url=settings.github_api_url, timeout=settings.http_timeout)


def command_errors(action: str) -> Callable[[F], F]:
    """Decorator: turn failures into a message and exit code 1.

    A cancelled prompt ends the command quietly with exit code 0.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PromptCancelledError:
                ui.warning("Operation cancelled")
                raise typer.Exit(0)
            except AmbiguousIdentifierError as e:
                ui.error(escape(e.message))
                for template in e.matches:
                    ui.hint(f"{escape(template.name)} ({template.id})")
                raise typer.Exit(1)
            except MakrError as e:
                logger.debug("%s failed", action, exc_info=True)
                ui.error(f"Failed to {action}: {escape(str(e))}")
                raise typer.Exit(1)
            except OSError as e:
                logger.debug("%s failed", action, exc_info=True)
                ui.error(f"Failed to {action}: {escape(str(e))}")
                raise typer.Exit(1)

        return wrapper  # type: ignore[return-value]

    return decorator


def resolve_template(store: ConfigStore, identifier: str) -> Template:
    """Resolve a template name or id to exactly one template.

    Raises:
        TemplateNotFoundError: If nothing matches.
        AmbiguousIdentifierError: If more than one template matches.
    """
    matches = find_templates_by_identifier(store.get_all_templates(), identifier)
    if not matches:
        raise TemplateNotFoundError(
            f'Template "{identifier}" not found. Use "makr list" to see templates.'
        )
    if len(matches) > 1:
        raise AmbiguousIdentifierError(identifier, matches)
    return matches[0]


def url_problem(value: str) -> str | None:
    """Prompt validator for GitHub URLs."""
    if not value:
        return "GitHub URL is required"
    if not validate_github_url(value):
        return "Invalid GitHub URL format"
    return None


def require_github_url(url: str) -> str:
    """Validate and normalize a URL given on the command line."""
    problem = url_problem(url)
    if problem:
        raise ValidationError(problem)
    return normalize_github_url(url)


def resolve_github_token(settings: GlobalSettings) -> str:
    """Token from the state document, else from ``MAKR_GITHUB_TOKEN``."""
    token = settings.github_token or get_settings().github_token
    if not token:
        raise ConfigurationError(
            'GitHub token is required to fork repositories. Run "makr init" to set one.'
        )
    return token


def ask_flag(
    prompter: Prompter, value: bool | None, message: str, default: bool = False
) -> bool:
    """Use an explicit CLI flag when given, otherwise ask."""
    if value is not None:
        return value
    return prompter.confirm(message, default=default)


@dataclass
class CloneOutcome:
    """What happened while materializing a template on disk."""

    target_dir: Path
    clone_url: str
    fork: ForkResult | None = None


def fork_and_clone(
    url: str,
    target_dir: Path,
    settings: GlobalSettings,
    branch: str | None = None,
    fork: bool = False,
    keep_git: bool = False,
    label: str = "template",
) -> CloneOutcome:
    """Optionally fork ``url``, clone it to ``target_dir``, strip history.

    A fork that succeeds is left in place even if the clone then fails;
    the failure message names the fork so the user can clean it up.
    """
    base_url = normalize_github_url(url)
    repo_ref = parse_github_repo(base_url)
    if repo_ref is None:
        raise ValidationError(f"Unable to parse GitHub repository URL: {base_url}")

    if not is_directory_empty(target_dir):
        raise ConflictError(f"Directory already exists: {target_dir}")

    outcome = CloneOutcome(target_dir=target_dir, clone_url=base_url)

    if fork:
        token = resolve_github_token(settings)
        with ui.console.status(f"[cyan]Forking {repo_ref.full_name}...[/cyan]"):
            with get_github_client(token) as client:
                outcome.fork = client.fork_repository(repo_ref.owner, repo_ref.repo)
        outcome.clone_url = outcome.fork.clone_url
        ui.success(f"Fork ready: {outcome.fork.owner}/{outcome.fork.repo}")

    status = f"Cloning {label} ({branch})..." if branch else f"Cloning {label}..."
    try:
        with ui.console.status(f"[cyan]{escape(status)}[/cyan]"):
            target_dir.parent.mkdir(parents=True, exist_ok=True)
            clone_repo(outcome.clone_url, target_dir, branch)
    except GitError as e:
        if outcome.fork:
            e.details = "\n".join(
                filter(None, [e.details, f"The fork {outcome.fork.clone_url} was kept."])
            )
        raise

    if not keep_git:
        remove_git_metadata(target_dir)
        ui.warning(f"Removed .git history for {escape(label)}")

    return outcome

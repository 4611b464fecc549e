"""``makr init``: set clone path, default branch and GitHub token."""

from typing import Optional

import typer
from rich.markup import escape

from makr import ui
from makr.commands import _common
from makr.commands._common import command_errors
from makr.query import expand_tilde


@command_errors("initialize")
def init(
    clone_path: Optional[str] = typer.Option(
        None, "--clone-path", help="Default directory for cloned templates"
    ),
    default_branch: Optional[str] = typer.Option(
        None, "--default-branch", help="Default git branch name"
    ),
    github_token: Optional[str] = typer.Option(
        None,
        "--github-token",
        help="GitHub token (required for forks and private repos)",
    ),
) -> None:
    """Initialize makr configuration."""
    store = _common.get_store()
    prompter = _common.get_prompter()
    current = store.get_settings()

    ui.title("Initialize makr")

    if clone_path is None:
        clone_path = prompter.text("Default clone path:", default=current.clone_path)
    if default_branch is None:
        default_branch = prompter.text("Default branch:", default=current.default_branch)
    if github_token is None:
        github_token = prompter.password(
            "GitHub token (optional, required for forks/private repos; blank keeps current):"
        )

    with ui.console.status("[cyan]Saving configuration...[/cyan]"):
        settings = store.update_settings(
            clone_path=expand_tilde(clone_path) if clone_path else None,
            default_branch=default_branch or None,
            github_token=github_token or None,
        )

    ui.success("Configuration saved successfully!")
    ui.console.print()
    ui.console.print(f"  [dim]Clone path:[/dim] [cyan]{escape(settings.clone_path)}[/cyan]")
    ui.console.print(
        f"  [dim]Default branch:[/dim] [cyan]{escape(settings.default_branch)}[/cyan]"
    )
    if settings.github_token:
        token_state = "[green]✓ Set[/green]"
    else:
        token_state = "[yellow]✗ Not set[/yellow]"
    ui.console.print(f"  [dim]GitHub token:[/dim] {token_state}")
    ui.hint(f"Saved to {escape(str(store.config_path))}")

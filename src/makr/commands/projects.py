"""Recent project commands: list, open, clean, remove, hide, unhide."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from makr import ui
from makr.commands import _common
from makr.commands._common import command_errors
from makr.exceptions import ProjectNotFoundError
from makr.models import RecentProject
from makr.storage import ConfigStore

app = typer.Typer(help="List and manage recent projects.")


def _find_project(store: ConfigStore, name: str) -> RecentProject:
    project = store.find_recent_project(name)
    if project is None:
        raise ProjectNotFoundError(f'Project "{name}" not found in recent projects')
    return project


@app.callback(invoke_without_command=True)
@command_errors("list projects")
def list_projects(
    ctx: typer.Context,
    project_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="Filter by project type"
    ),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Filter by language"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Number of projects to show"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Include hidden projects"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List recent projects, newest first."""
    if ctx.invoked_subcommand is not None:
        return

    projects = _common.get_store().get_recent_projects(
        type=project_type,
        language=language,
        limit=limit,
        include_hidden=show_all,
    )

    if json_output:
        ui.display_json(projects)
        return

    ui.title("Recent Projects")
    ui.display_projects(projects)
    if projects:
        ui.console.print()
        plural = "s" if len(projects) > 1 else ""
        ui.console.print(f"[dim]Showing {len(projects)} project{plural}[/dim]")


def _show_project(project: RecentProject) -> None:
    if not Path(project.path).exists():
        ui.warning(f"Project path no longer exists: {escape(project.path)}")
        raise typer.Exit(1)

    ui.console.print()
    ui.success(f"Project: [bold]{escape(project.name)}[/bold]")
    ui.console.print()
    ui.console.print(f"  [dim]Type:[/dim] {escape(project.type)}")
    ui.console.print(f"  [dim]Language:[/dim] {escape(project.language)}")
    ui.console.print(f"  [dim]Path:[/dim] {escape(project.path)}")
    ui.console.print()
    ui.console.print("  [dim]Navigate with:[/dim]")
    ui.console.print(f"    [bold cyan]cd {escape(project.path)}[/bold cyan]", soft_wrap=True)
    ui.console.print()


@app.command("open")
@command_errors("open project")
def open_project(name: str = typer.Argument(..., help="Project name to open")) -> None:
    """Show a recent project's details and a cd line to reach it."""
    _show_project(_find_project(_common.get_store(), name))


@command_errors("open project")
def open_shortcut(name: str = typer.Argument(..., help="Project name to open")) -> None:
    """Open a project (shows the cd command for easy copy-paste)."""
    store = _common.get_store()
    project = store.find_recent_project(name)
    if project is None:
        ui.error(f'Project "{escape(name)}" not found in recent projects')
        recent = store.get_recent_projects(limit=5)
        if recent:
            ui.console.print("[dim]Available projects:[/dim]")
            for candidate in recent:
                ui.hint(f"- {escape(candidate.name)}")
        ui.hint('Use "makr view" to see all projects')
        raise typer.Exit(1)
    _show_project(project)


@app.command("clean")
@command_errors("clean projects")
def clean() -> None:
    """Forget projects whose directory no longer exists."""
    store = _common.get_store()
    removed = 0
    for project in store.get_recent_projects():
        if Path(project.path).exists():
            continue
        store.remove_recent_project(project.id)
        removed += 1
        ui.info(f"Removed: {escape(project.name)} (path not found)")

    if removed == 0:
        ui.success("All project paths are valid")
    else:
        ui.success(f"Cleaned {removed} stale project{'s' if removed > 1 else ''}")


@app.command("remove")
@command_errors("remove project")
def remove(name: str = typer.Argument(..., help="Project name to remove")) -> None:
    """Forget a project (its files are not deleted)."""
    store = _common.get_store()
    project = _find_project(store, name)
    store.remove_recent_project(project.id)
    ui.success(f'Removed "{escape(name)}" from recent projects')
    ui.hint("Note: Project files were not deleted")


@command_errors("hide project")
def hide(name: str = typer.Argument(..., help="Project name to hide")) -> None:
    """Hide a project from the default projects view."""
    if not _common.get_store().set_project_visibility(name, True):
        raise ProjectNotFoundError(f'Project "{name}" not found')
    ui.success(f'Project "{escape(name)}" is now hidden')
    ui.hint('Use "makr projects --all" to see it')
    ui.hint(f'To unhide: makr unhide "{escape(name)}"')


@command_errors("unhide project")
def unhide(name: str = typer.Argument(..., help="Project name to unhide")) -> None:
    """Show a hidden project in the default projects view again."""
    if not _common.get_store().set_project_visibility(name, False):
        raise ProjectNotFoundError(f'Project "{name}" not found')
    ui.success(f'Project "{escape(name)}" is visible again')

"""Project types and languages offered by ``makr new``."""

import typer
from rich.markup import escape
from rich.table import Table

from makr import ui
from makr.commands import _common
from makr.commands._common import command_errors
from makr.exceptions import DuplicateEntityError, ValidationError
from makr.models import ProjectType
from makr.query import expand_tilde

types_app = typer.Typer(help="Manage project types.", no_args_is_help=True)
languages_app = typer.Typer(help="Manage languages.", no_args_is_help=True)


@types_app.command("list")
@command_errors("list project types")
def list_types() -> None:
    """List project types and where their projects live."""
    project_types = _common.get_store().get_project_types()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Type", style="bold")
    table.add_column("Path", style="dim")
    table.add_column("Description")
    for project_type in project_types:
        table.add_row(
            escape(project_type.name),
            escape(project_type.path),
            escape(project_type.description or "-"),
        )
    ui.console.print(table)


@types_app.command("add")
@command_errors("add project type")
def add_type(
    name: str = typer.Argument(..., help="Type name"),
    path: str = typer.Option(..., "--path", "-p", help="Base directory for this type"),
    description: str = typer.Option("", "--description", "-d", help="Short description"),
) -> None:
    """Add a project type."""
    name = name.strip().lower()
    if not name:
        raise ValidationError("Type name is required")
    added = _common.get_store().add_project_type(
        ProjectType(name=name, path=expand_tilde(path), description=description)
    )
    ui.success(f'Project type "{escape(added.name)}" added ({escape(added.path)})')


@languages_app.command("list")
@command_errors("list languages")
def list_languages() -> None:
    """List languages."""
    for language in _common.get_store().get_languages():
        ui.console.print(f"  • {escape(language)}")


@languages_app.command("add")
@command_errors("add language")
def add_language(language: str = typer.Argument(..., help="Language name")) -> None:
    """Add a language."""
    if not language.strip():
        raise ValidationError("Language name is required")
    if not _common.get_store().add_language(language):
        raise DuplicateEntityError(f'Language "{language.strip().lower()}" already exists')
    ui.success(f'Language "{escape(language.strip().lower())}" added')

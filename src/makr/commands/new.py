"""The ``makr new`` flow: create an organised project folder."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from makr import ui
from makr.commands import _common
from makr.commands._common import command_errors
from makr.constants import STARTER_GITIGNORE
from makr.exceptions import (
    ConflictError,
    ProjectTypeNotFoundError,
    TemplateNotFoundError,
    ValidationError,
)
from makr.prompts import Choice
from makr.query import resolve_project_path
from makr.utils.file_utils import write_atomically
from makr.utils.github_url import validate_project_name

EMPTY, SAVED, URL = "empty", "saved", "url"


def _name_problem(value: str) -> Optional[str]:
    try:
        validate_project_name(value)
    except ValidationError as e:
        return e.message
    return None


def _create_empty_project(target: Path) -> None:
    target.mkdir(parents=True)
    write_atomically(target / ".gitignore", STARTER_GITIGNORE)


@command_errors("create project")
def new(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Project name"),
    project_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="Project type (official, experiment, learning, playground)"
    ),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="Programming language"
    ),
    template_name: Optional[str] = typer.Option(
        None, "--template", help="Use a saved template by name"
    ),
    url: Optional[str] = typer.Option(None, "--url", help="Use a GitHub URL as template"),
    fork: Optional[bool] = typer.Option(
        None, "--fork/--no-fork", help="Fork the template to your GitHub account first"
    ),
) -> None:
    """Create a new project under <type path>/<language>/<name>."""
    store = _common.get_store()
    prompter = _common.get_prompter()
    config = store.load()

    ui.title("Create New Project")

    # Project name
    if name is None:
        name = prompter.text("Project name:", validate=_name_problem)
    validate_project_name(name)

    # Project type
    if project_type is None:
        project_type = prompter.select(
            "What kind of project is this?",
            [
                Choice(value=pt.name, label=pt.name.capitalize(), hint=pt.description)
                for pt in config.project_types
            ],
        )
    selected_type = config.get_project_type(project_type)
    if selected_type is None:
        known = ", ".join(pt.name for pt in config.project_types)
        raise ProjectTypeNotFoundError(
            f"Unknown project type: {project_type}", details=f"Known types: {known}"
        )

    # Language
    if language is None:
        language = prompter.select(
            "Language/Stack:",
            [Choice(value=lang, label=lang.capitalize()) for lang in config.languages],
        )
    language = language.strip().lower()

    # Template source
    if template_name:
        choice = SAVED
    elif url:
        choice = URL
    else:
        options = [Choice(value=EMPTY, label="No, create empty folder", hint="Start from scratch")]
        if config.templates:
            options.append(
                Choice(
                    value=SAVED,
                    label="Yes, from my saved templates",
                    hint=f"{len(config.templates)} available",
                )
            )
        options.append(
            Choice(value=URL, label="Yes, paste a GitHub URL", hint="Clone any public repo")
        )
        choice = prompter.select("Use a GitHub template?", options)

    template_url = None
    if choice == SAVED:
        if not template_name:
            template_name = prompter.select(
                "Select a template:",
                [
                    Choice(value=t.name, label=t.name, hint=t.description or t.url)
                    for t in config.templates
                ],
            )
        template = config.get_template(template_name)
        if template is None:
            raise TemplateNotFoundError(f'Template "{template_name}" not found')
        template_url = template.url
    elif choice == URL:
        if not url:
            url = prompter.text("GitHub URL:", validate=_common.url_problem)
        template_url = _common.require_github_url(url)

    should_fork = False
    if template_url:
        should_fork = _common.ask_flag(prompter, fork, "Fork to your GitHub account first?")

    target = resolve_project_path(selected_type, language, name)
    if target.exists():
        raise ConflictError(f"Directory already exists: {target}")

    ui.console.print()
    ui.info(f"Creating project at: [cyan]{escape(str(target))}[/cyan]")

    if template_url:
        _common.fork_and_clone(
            template_url,
            target,
            config.settings,
            fork=should_fork,
            keep_git=False,
        )
        ui.success("Template cloned")
        if template_name:
            store.update_last_used(template_name)
    else:
        with ui.console.status("[cyan]Creating project folder...[/cyan]"):
            _create_empty_project(target)
        ui.success("Project folder created")

    store.add_recent_project(
        name=name,
        path=str(target),
        type=selected_type.name,
        language=language,
        template_used=template_name or template_url,
    )

    ui.console.print()
    ui.success(f"Created project: [bold]{escape(name)}[/bold]")
    ui.console.print()
    ui.console.print(f"  [dim]Location:[/dim] {escape(str(target))}")
    ui.console.print(f"  [dim]Type:[/dim] {escape(selected_type.name)}")
    ui.console.print(f"  [dim]Language:[/dim] {escape(language)}")
    if template_name:
        ui.console.print(f"  [dim]Template:[/dim] {escape(template_name)}")
    ui.console.print()
    ui.console.print("  [dim]Get started:[/dim]")
    ui.console.print(f"    [cyan]cd {escape(str(target))}[/cyan]", soft_wrap=True)
    ui.console.print()
    ui.console.print("[green]Happy coding![/green]")

"""Template commands: add, list, search, clone, remove."""

from typing import Optional

import typer
from rich.markup import escape

from makr import ui
from makr.commands import _common
from makr.commands._common import command_errors
from makr.exceptions import CollectionNotFoundError, DuplicateEntityError, TemplateNotFoundError
from makr.git import resolve_clone_path
from makr.query import (
    filter_templates_by_tag,
    parse_tags,
    search_templates,
    sort_templates_by_last_used,
)


def _required(label: str):
    return lambda value: None if value else f"{label} is required"


@command_errors("add template")
def add(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Template name"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="GitHub repository URL"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Template description"
    ),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Comma-separated tags"),
) -> None:
    """Add a new GitHub template.

    Missing values are asked for interactively.

    Examples:
        makr add --name next-starter --url https://github.com/acme/next-starter --tags react,next
    """
    store = _common.get_store()
    prompter = _common.get_prompter()

    ui.title("Add New Template")

    if not name:
        name = prompter.text("Template name:", validate=_required("Template name"))
    if store.get_template_by_name(name):
        raise DuplicateEntityError(f'Template "{name}" already exists')

    if url:
        normalized_url = _common.require_github_url(url)
    else:
        normalized_url = _common.require_github_url(
            prompter.text("GitHub URL:", validate=_common.url_problem)
        )

    if description is None:
        description = prompter.text("Description (optional):")
    if tags is None:
        tags = prompter.text("Tags (comma-separated, optional):")
    tag_list = parse_tags(tags)

    with ui.console.status("[cyan]Adding template...[/cyan]"):
        template = store.add_template(name, normalized_url, description or None, tag_list)

    ui.success(f'Template "{escape(template.name)}" added successfully!')
    ui.hint(f"URL: {normalized_url}")
    if tag_list:
        ui.hint(f"Tags: {escape(', '.join(tag_list))}")


@command_errors("list templates")
def list_templates(
    tag: Optional[str] = typer.Option(None, "--filter", "-f", help="Filter by tag"),
    collection: Optional[str] = typer.Option(
        None, "--collection", "-c", help="Filter by collection"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all saved templates, most recently used first."""
    store = _common.get_store()
    templates = store.get_all_templates()

    if collection:
        found = store.get_collection_by_name(collection)
        if found is None:
            raise CollectionNotFoundError(
                f'Collection "{collection}" not found. '
                'Use "makr collection list" to see collections.'
            )
        templates = store.get_templates_by_ids(found.template_ids)

    if tag:
        templates = filter_templates_by_tag(templates, tag)

    templates = sort_templates_by_last_used(templates)

    if json_output:
        ui.display_json(templates)
        return

    if collection and tag:
        ui.title(f"Templates in {collection} with tag: {tag}")
    elif collection:
        ui.title(f"Templates in collection: {collection}")
    elif tag:
        ui.title(f"Templates with tag: {tag}")
    else:
        ui.title("All Templates")

    if not templates:
        if tag:
            ui.info(f'No templates found with tag "{escape(tag)}"')
        else:
            ui.info('No templates saved yet. Use "makr add" to add your first template.')
        return

    ui.console.print(f"[dim]Found {len(templates)} template(s)[/dim]\n")
    ui.display_templates(templates)


@command_errors("search templates")
def search(
    query: str = typer.Argument(..., help="Search query"),
    collection: Optional[str] = typer.Option(
        None, "--collection", "-c", help="Search within a collection"
    ),
) -> None:
    """Search templates by name, description, or tags."""
    store = _common.get_store()
    templates = store.get_all_templates()

    if collection:
        found = store.get_collection_by_name(collection)
        if found is None:
            raise CollectionNotFoundError(
                f'Collection "{collection}" not found. '
                'Use "makr collection list" to see collections.'
            )
        templates = store.get_templates_by_ids(found.template_ids)

    ui.display_search_results(search_templates(templates, query), query)


@command_errors("clone template")
def clone(
    name: str = typer.Argument(..., help="Template name to clone"),
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Target directory (default: <clone path>/<name>)"
    ),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to clone"),
    fork: Optional[bool] = typer.Option(
        None,
        "--fork/--no-fork",
        help="Fork to your GitHub account before cloning (private)",
    ),
    keep_git: Optional[bool] = typer.Option(
        None, "--keep-git/--no-keep-git", help="Keep git history in the cloned folder"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts"),
) -> None:
    """Clone a template to your local machine."""
    store = _common.get_store()
    prompter = _common.get_prompter()

    template = store.get_template_by_name(name)
    if template is None:
        raise TemplateNotFoundError(
            f'Template "{name}" not found. Use "makr list" to see available templates.'
        )

    ui.display_template_details(template)

    if not yes and not prompter.confirm(f'Clone "{template.name}"?', default=True):
        ui.warning("Operation cancelled")
        return

    if yes:
        fork, keep_git = bool(fork), bool(keep_git)
    fork = _common.ask_flag(
        prompter, fork, f'Fork "{template.name}" to your GitHub account first?'
    )
    keep_git = _common.ask_flag(prompter, keep_git, f'Keep git history for "{template.name}"?')

    settings = store.get_settings()
    target = resolve_clone_path(directory, template.name, settings.clone_path)

    _common.fork_and_clone(
        template.url,
        target,
        settings,
        branch=branch,
        fork=fork,
        keep_git=keep_git,
        label=template.name,
    )
    store.update_last_used(template.name)
    if not keep_git:
        ui.hint("Use --keep-git to preserve git history next time")

    ui.success(f"Template cloned to: {escape(str(target))}")
    ui.console.print()
    ui.success("Ready to start coding!")
    ui.hint(f"cd {escape(str(target))}")


@command_errors("remove template")
def remove(
    name: str = typer.Argument(..., help="Template name to remove"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove a saved template (also drops it from every collection)."""
    store = _common.get_store()

    template = store.get_template_by_name(name)
    if template is None:
        raise TemplateNotFoundError(
            f'Template "{name}" not found. Use "makr list" to see available templates.'
        )

    ui.display_template_details(template)

    if not yes:
        prompter = _common.get_prompter()
        if not prompter.confirm(
            "[yellow]Are you sure you want to remove this template?[/yellow]", default=False
        ):
            ui.warning("Operation cancelled")
            return

    if not store.remove_template(name):
        raise TemplateNotFoundError(f'Template "{name}" not found')
    ui.success(f'Template "{escape(name)}" removed successfully')

"""Collection commands: group templates and scaffold them together."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from makr import ui
from makr.commands import _common
from makr.commands._common import command_errors
from makr.exceptions import CollectionNotFoundError, PromptCancelledError
from makr.query import parse_tags
from makr.storage import ConfigStore

app = typer.Typer(help="Manage template collections.", no_args_is_help=True)


def _require_collection(store: ConfigStore, name: str):
    collection = store.get_collection_by_name(name)
    if collection is None:
        raise CollectionNotFoundError(
            f'Collection "{name}" not found. Use "makr collection list" to see collections.'
        )
    return collection


@app.command("add")
@command_errors("create collection")
def add(
    name: str = typer.Argument(..., help="Collection name"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Collection description"
    ),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Comma-separated tags"),
) -> None:
    """Create a new collection."""
    store = _common.get_store()
    prompter = _common.get_prompter()

    ui.title("Create Collection")

    if description is None:
        description = prompter.text("Description (optional):")
    if tags is None:
        tags = prompter.text("Tags (comma-separated, optional):")

    created = store.add_collection(name, description or None, parse_tags(tags))

    ui.success(f'Collection "{escape(created.name)}" created successfully!')
    ui.display_collection_details(created)


@app.command("list")
@command_errors("list collections")
def list_collections(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all collections."""
    collections = _common.get_store().get_all_collections()
    if json_output:
        ui.display_json(collections)
        return
    ui.title("Collections")
    ui.display_collections(collections)


@app.command("show")
@command_errors("show collection")
def show(name: str = typer.Argument(..., help="Collection name")) -> None:
    """Show a collection and its templates."""
    store = _common.get_store()
    collection = _require_collection(store, name)
    ui.display_collection_details(collection)
    ui.display_templates(store.get_templates_by_ids(collection.template_ids))


@app.command("include")
@command_errors("add template to collection")
def include(
    collection_name: str = typer.Argument(..., metavar="COLLECTION", help="Collection name"),
    template_identifier: str = typer.Argument(..., metavar="TEMPLATE", help="Template name or ID"),
) -> None:
    """Add a template to a collection."""
    store = _common.get_store()
    _require_collection(store, collection_name)
    template = _common.resolve_template(store, template_identifier)
    store.add_template_to_collection(collection_name, template.id)
    ui.success(f'Added "{escape(template.name)}" to collection "{escape(collection_name)}"')


@app.command("remove")
@command_errors("remove template from collection")
def remove(
    collection_name: str = typer.Argument(..., metavar="COLLECTION", help="Collection name"),
    template_identifier: str = typer.Argument(..., metavar="TEMPLATE", help="Template name or ID"),
) -> None:
    """Remove a template from a collection."""
    store = _common.get_store()
    _require_collection(store, collection_name)
    template = _common.resolve_template(store, template_identifier)
    store.remove_template_from_collection(collection_name, template.id)
    ui.success(f'Removed "{escape(template.name)}" from collection "{escape(collection_name)}"')


@app.command("delete")
@command_errors("delete collection")
def delete(
    name: str = typer.Argument(..., help="Collection name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a collection (its templates are kept)."""
    store = _common.get_store()
    collection = _require_collection(store, name)
    ui.display_collection_details(collection)

    if not yes and not _common.get_prompter().confirm(
        "[yellow]Delete this collection?[/yellow]", default=False
    ):
        ui.warning("Operation cancelled")
        return

    if not store.remove_collection(name):
        raise CollectionNotFoundError(f'Collection "{name}" not found')
    ui.success(f'Collection "{escape(name)}" deleted successfully')


@app.command("scaffold")
@command_errors("scaffold collection")
def scaffold(
    name: str = typer.Argument(..., help="Collection name"),
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Base directory for clones"
    ),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to clone"),
    fork: Optional[bool] = typer.Option(
        None, "--fork/--no-fork", help="Fork each template before cloning (private)"
    ),
    keep_git: Optional[bool] = typer.Option(
        None, "--keep-git/--no-keep-git", help="Keep git history in cloned folders"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Clone every template without asking"),
) -> None:
    """Clone all templates in a collection."""
    store = _common.get_store()
    collection = _require_collection(store, name)

    templates = store.get_templates_by_ids(collection.template_ids)
    if not templates:
        ui.info(f'Collection "{escape(name)}" has no templates yet.')
        return

    ui.display_collection_details(collection)
    ui.display_templates(templates)

    settings = store.get_settings()
    if directory:
        base_dir = Path(directory).expanduser().resolve()
    else:
        base_dir = Path(settings.clone_path).expanduser() / collection.name
    base_dir.mkdir(parents=True, exist_ok=True)

    if yes:
        fork, keep_git = bool(fork), bool(keep_git)

    prompter = _common.get_prompter()
    cloned = 0
    for template in templates:
        try:
            if not yes and not prompter.confirm(f'Clone "{template.name}"?', default=True):
                ui.info(f"Skipped {escape(template.name)}")
                continue
            fork_this = _common.ask_flag(
                prompter, fork, f'Fork "{template.name}" before cloning?'
            )
            keep_this = _common.ask_flag(
                prompter, keep_git, f'Keep git history for "{template.name}"?'
            )
        except PromptCancelledError:
            ui.warning("Scaffolding cancelled")
            raise typer.Exit(0)

        target = base_dir / template.name
        _common.fork_and_clone(
            template.url,
            target,
            settings,
            branch=branch,
            fork=fork_this,
            keep_git=keep_this,
            label=template.name,
        )
        ui.success(f"Cloned to {escape(str(target))}")
        store.update_last_used(template.name)
        cloned += 1

    ui.success(
        f'Collection "{escape(collection.name)}" scaffolded successfully! ({cloned} cloned)'
    )

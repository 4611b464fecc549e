"""CLI interface for makr."""

import typer

from . import __version__
from .commands import catalog, collection, init, new, projects, templates
from .config.logging import get_logger, setup_logging
from .config.settings import get_settings

app = typer.Typer(
    name="makr",
    help="Organize GitHub templates, collections and local projects.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"makr {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Organize GitHub templates, collections and local projects."""
    if verbose:
        setup_logging(level="DEBUG")
        logger.debug("Verbose logging enabled")


# Templates
app.command("init")(init.init)
app.command("add")(templates.add)
app.command("list")(templates.list_templates)
app.command("search")(templates.search)
app.command("clone")(templates.clone)
app.command("remove")(templates.remove)

# Collections
app.add_typer(collection.app, name="collection")

# Projects
app.command("new")(new.new)
app.add_typer(projects.app, name="projects")
app.add_typer(projects.app, name="view", hidden=True)
app.command("open")(projects.open_shortcut)
app.command("hide")(projects.hide)
app.command("unhide")(projects.unhide)

# Catalog
app.add_typer(catalog.types_app, name="types")
app.add_typer(catalog.languages_app, name="languages")


def main() -> None:
    """Entry point for the CLI."""
    try:
        log_level = get_settings().log_level
    except ValueError:
        # Invalid MAKR_* settings are reported by the command that needs them
        log_level = "WARNING"

    setup_logging(level=log_level)
    app()


if __name__ == "__main__":
    main()

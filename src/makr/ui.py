"""Console output helpers shared by all commands."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Iterable, Sequence

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from makr.models import Collection, RecentProject, Template

console = Console()
err_console = Console(stderr=True)


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def error(message: str) -> None:
    err_console.print(f"[red]✗[/red] {message}")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def hint(message: str) -> None:
    console.print(f"  [dim]{message}[/dim]")


def title(message: str) -> None:
    console.print()
    console.print(f"[bold cyan]┌─ {escape(message)} ─┐[/bold cyan]")
    console.print()


def display_json(records: Sequence[BaseModel]) -> None:
    """Print records as JSON with on-disk (camelCase) keys."""
    payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    typer.echo(json.dumps(payload, indent=2))


def display_templates(templates: Sequence[Template]) -> None:
    if not templates:
        info("No templates found")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("URL", style="dim")
    table.add_column("Tags", style="yellow")
    table.add_column("Description")

    for template in templates:
        table.add_row(
            escape(template.name),
            template.url,
            escape(", ".join(template.tags)) if template.tags else "-",
            escape(template.description or "-"),
        )
    console.print(table)


def display_template_details(template: Template) -> None:
    lines = [
        f"[bold]Name:[/bold] {escape(template.name)}",
        f"[bold]URL:[/bold] {template.url}",
        f"[bold]ID:[/bold] {template.id}",
    ]
    if template.description:
        lines.append(f"[bold]Description:[/bold] {escape(template.description)}")
    if template.tags:
        lines.append(f"[bold]Tags:[/bold] {escape(', '.join(template.tags))}")
    if template.last_used:
        lines.append(f"[bold]Last used:[/bold] {format_relative_date(template.last_used)}")
    console.print(Panel("\n".join(lines), title="Template", border_style="blue"))


def display_search_results(templates: Sequence[Template], query: str) -> None:
    title(f'Search results for "{query}"')
    if not templates:
        info(f'No templates match "{escape(query)}"')
        return
    console.print(f"[dim]Found {len(templates)} template(s)[/dim]\n")
    display_templates(templates)


def display_collections(collections: Sequence[Collection]) -> None:
    if not collections:
        info("No collections found")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Templates", justify="right")
    table.add_column("Tags", style="yellow")
    table.add_column("Description")

    for collection in collections:
        table.add_row(
            escape(collection.name),
            str(len(collection.template_ids)),
            escape(", ".join(collection.tags)) if collection.tags else "-",
            escape(collection.description or "-"),
        )
    console.print(table)


def display_collection_details(collection: Collection) -> None:
    lines = [
        f"[bold]Name:[/bold] {escape(collection.name)}",
        f"[bold]Templates:[/bold] {len(collection.template_ids)}",
    ]
    if collection.description:
        lines.append(f"[bold]Description:[/bold] {escape(collection.description)}")
    if collection.tags:
        lines.append(f"[bold]Tags:[/bold] {escape(', '.join(collection.tags))}")
    console.print(Panel("\n".join(lines), title="Collection", border_style="blue"))


def display_projects(projects: Iterable[RecentProject]) -> None:
    projects = list(projects)
    if not projects:
        info("No recent projects found")
        hint("Create a project with: makr new")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Type", style="yellow")
    table.add_column("Language", style="magenta")
    table.add_column("Path", style="dim")
    table.add_column("Created")

    for project in projects:
        name = escape(project.name)
        if project.hidden:
            name += " [dim](hidden)[/dim]"
        table.add_row(
            name,
            escape(project.type),
            escape(project.language),
            escape(project.path),
            format_relative_date(project.created_at),
        )
    console.print(table)


def format_relative_date(moment: datetime, now: datetime | None = None) -> str:
    """Human-friendly age: Today, Yesterday, N days ago, N weeks ago, or a date."""
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    days = (now - moment).days

    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = days // 7
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"
    return moment.astimezone().strftime("%Y-%m-%d")

"""Read-only views over templates: search, filtering, ordering, lookup.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from makr.models import ProjectType, Template


def search_templates(templates: Iterable[Template], query: str) -> list[Template]:
    """Case-insensitive substring match against name, description and tags."""
    needle = query.lower()
    results = []
    for template in templates:
        if (
            needle in template.name.lower()
            or (template.description and needle in template.description.lower())
            or any(needle in tag.lower() for tag in template.tags)
        ):
            results.append(template)
    return results


def filter_templates_by_tag(templates: Iterable[Template], tag: str) -> list[Template]:
    """Templates carrying ``tag`` (case-insensitive exact match)."""
    wanted = tag.lower()
    return [t for t in templates if any(existing.lower() == wanted for existing in t.tags)]


def sort_templates_by_last_used(templates: Iterable[Template]) -> list[Template]:
    """Most recently used first; never-used templates last, in input order.

    ``sorted`` is stable, so ties and the never-used tail keep their
    relative order.
    """
    items = list(templates)
    used = sorted(
        (t for t in items if t.last_used is not None),
        key=lambda t: t.last_used,
        reverse=True,
    )
    unused = [t for t in items if t.last_used is None]
    return used + unused


def find_templates_by_identifier(templates: Iterable[Template], identifier: str) -> list[Template]:
    """Every template whose id or name equals ``identifier`` exactly.

    The caller decides what an empty or multi-element result means.
    """
    return [t for t in templates if t.id == identifier or t.name == identifier]


def parse_tags(tags: str | None) -> list[str]:
    """Split a comma-separated tag string into trimmed lowercase tags.

    Examples:
        " React, TypeScript ,,next " -> ["react", "typescript", "next"]
    """
    if not tags:
        return []
    return [tag.strip().lower() for tag in tags.split(",") if tag.strip()]


def expand_tilde(path: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    return os.path.expanduser(path)


def resolve_project_path(project_type: ProjectType, language: str, project_name: str) -> Path:
    """On-disk location of a project: ``<type.path>/<language>/<project_name>``."""
    return Path(expand_tilde(project_type.path)) / language / project_name

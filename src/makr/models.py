"""Data models for the makr state document.

The whole tool persists a single JSON document (see ``MakrConfig``):
- Template: a saved reference to a GitHub repository
- Collection: a named group of templates, by template id
- ProjectType / languages: how new projects are laid out on disk
- RecentProject: projects materialized locally by ``makr new``
- GlobalSettings: clone path, default branch, GitHub token

Field names are snake_case in Python and camelCase on disk.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from makr.constants import (
    DEFAULT_BRANCH,
    DEFAULT_CLONE_DIR,
    DEFAULT_LANGUAGES,
    DEFAULT_PROJECT_TYPES,
)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Generate a short opaque id: base-36 millisecond clock + random suffix."""
    n = int(time.time() * 1000)
    clock = ""
    while n:
        n, r = divmod(n, 36)
        clock = _BASE36[r] + clock
    return clock + uuid.uuid4().hex[:8]


class _DocumentModel(BaseModel):
    """Base for every record stored in the state document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Template(_DocumentModel):
    """Saved reference to a GitHub repository."""

    id: str = Field(default_factory=generate_id, description="Opaque immutable id")
    name: str = Field(description="User-chosen label, unique among templates")
    url: str = Field(description="Normalized GitHub URL, e.g. 'https://github.com/acme/widgets'")
    description: Optional[str] = Field(default=None, description="Optional free text")
    tags: List[str] = Field(default_factory=list, description="Lowercase tags")
    created_at: datetime = Field(default_factory=utcnow)
    last_used: Optional[datetime] = Field(
        default=None,
        description="Updated whenever the template is cloned",
    )


class Collection(_DocumentModel):
    """Named, user-curated group of templates."""

    id: str = Field(default_factory=generate_id)
    name: str = Field(description="Unique collection name")
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    template_ids: List[str] = Field(
        default_factory=list,
        description="Ordered member template ids, no duplicates",
    )
    created_at: datetime = Field(default_factory=utcnow)

    def include(self, template_id: str) -> bool:
        """Add a template id. Returns False if it was already a member."""
        if template_id in self.template_ids:
            return False
        self.template_ids.append(template_id)
        return True

    def exclude(self, template_id: str) -> bool:
        """Drop a template id. Returns True if it was a member."""
        original_len = len(self.template_ids)
        self.template_ids = [t for t in self.template_ids if t != template_id]
        return len(self.template_ids) < original_len


class ProjectType(_DocumentModel):
    """Project category with the base directory its projects live under."""

    name: str
    path: str = Field(description="Base directory, e.g. '~/experiments' expanded")
    description: str = ""


class RecentProject(_DocumentModel):
    """A project materialized on local disk."""

    id: str = Field(default_factory=generate_id)
    name: str
    path: str = Field(description="Absolute project directory")
    type: str = Field(description="Project type name")
    language: str
    template_used: Optional[str] = Field(
        default=None,
        description="Template name, or the normalized URL when cloned from a pasted URL",
    )
    hidden: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class GlobalSettings(_DocumentModel):
    """User settings stored under the document's ``config`` key."""

    default_branch: str = DEFAULT_BRANCH
    github_token: Optional[str] = None
    clone_path: str = Field(default_factory=lambda: str(Path.home() / DEFAULT_CLONE_DIR))


def default_project_types(home: Path | None = None) -> list[ProjectType]:
    """Built-in project types rooted at the user's home directory."""
    base = home or Path.home()
    return [
        ProjectType(name=name, path=str(base / dirname), description=description)
        for name, dirname, description in DEFAULT_PROJECT_TYPES
    ]


class MakrConfig(_DocumentModel):
    """Root of the persisted state - stored at ~/.config/makr/config.json."""

    # Keys written by other makr versions are kept on save.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    templates: List[Template] = Field(default_factory=list)
    collections: List[Collection] = Field(default_factory=list)
    project_types: List[ProjectType] = Field(default_factory=default_project_types)
    languages: List[str] = Field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    recent_projects: List[RecentProject] = Field(default_factory=list)
    settings: GlobalSettings = Field(default_factory=GlobalSettings, alias="config")

    def get_template(self, name: str) -> Template | None:
        """Find a template by exact name."""
        for template in self.templates:
            if template.name == name:
                return template
        return None

    def get_collection(self, name: str) -> Collection | None:
        """Find a collection by exact name."""
        for collection in self.collections:
            if collection.name == name:
                return collection
        return None

    def get_project_type(self, name: str) -> ProjectType | None:
        """Find a project type by exact name."""
        for project_type in self.project_types:
            if project_type.name == name:
                return project_type
        return None

    def to_json(self) -> str:
        """Serialize with on-disk (camelCase) keys."""
        return self.model_dump_json(by_alias=True, indent=2)

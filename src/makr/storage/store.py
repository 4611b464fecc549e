"""JSON-file-backed store for templates, collections and recent projects.

Every mutation reads the whole document, changes it in memory and writes it
back whole. There is no locking: two makr processes mutating the same file
at once can lose one of the writes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from makr.constants import MAX_RECENT_PROJECTS
from makr.exceptions import (
    CollectionNotFoundError,
    DuplicateEntityError,
    StorageError,
)
from makr.models import (
    Collection,
    GlobalSettings,
    MakrConfig,
    ProjectType,
    RecentProject,
    Template,
    default_project_types,
    utcnow,
)
from makr.query import find_templates_by_identifier
from makr.utils.file_utils import PRIVATE_FILE_MODE, read_bytes, write_atomically

from .migration import backfill_document

logger = logging.getLogger(__name__)

Reader = Callable[[Path], "str | bytes"]
Writer = Callable[[Path, "str | bytes"], None]


def _private_writer(path: Path, content: str | bytes) -> None:
    write_atomically(path, content, mode=PRIVATE_FILE_MODE)


def default_config(home: Path | None = None) -> MakrConfig:
    """Fresh document: no records, built-in project types and languages."""
    config = MakrConfig(project_types=default_project_types(home))
    if home is not None:
        config.settings = GlobalSettings(clone_path=str(home / "projects"))
    return config


class ConfigStore:
    """CRUD over the makr state document with referential integrity.

    Args:
        config_path: Location of the JSON document.
        reader: Returns the document bytes (or text); raises OSError if absent.
        writer: Replaces the document with the given text.
        home: Home directory for path defaults (tests pass a tmp dir).
    """

    def __init__(
        self,
        config_path: Path,
        reader: Reader | None = None,
        writer: Writer | None = None,
        home: Path | None = None,
    ):
        self.config_path = config_path
        self._read = reader or read_bytes
        self._write = writer or _private_writer
        self._home = home

    # ------------------------------------------------------------------
    # Document I/O
    # ------------------------------------------------------------------

    def load(self) -> MakrConfig:
        """Load the document, creating or repairing it as needed.

        A missing or unparseable document is replaced by the default one
        (an unparseable one is first kept as ``config.json.corrupt``).
        Documents from older versions are backfilled and rewritten.

        Raises:
            StorageError: If the file exists but cannot be read, or the
                default document cannot be written.
        """
        try:
            data = self._read(self.config_path)
        except FileNotFoundError:
            logger.debug("No state document at %s, creating default", self.config_path)
            return self._reset()
        except OSError as e:
            raise StorageError(f"Failed to read {self.config_path}", details=str(e)) from e

        try:
            text = data.decode("utf-8") if isinstance(data, bytes) else data
            raw = json.loads(text)
            if not isinstance(raw, dict):
                raise ValueError("state document is not a JSON object")
            document, changed = backfill_document(raw, self._home)
            config = MakrConfig.model_validate(document)
        except (ValueError, PydanticValidationError) as e:
            # UnicodeDecodeError and json.JSONDecodeError are ValueErrors
            logger.warning("Invalid state document %s: %s", self.config_path, e)
            self._preserve_corrupt(data)
            return self._reset()

        if changed:
            logger.info("Migrated state document %s", self.config_path)
            self.save(config)
        logger.debug(
            "Loaded %d templates, %d collections, %d recent projects",
            len(config.templates),
            len(config.collections),
            len(config.recent_projects),
        )
        return config

    def save(self, config: MakrConfig) -> None:
        """Replace the persisted document with ``config``.

        Raises:
            StorageError: If the location is not writable.
        """
        try:
            self._write(self.config_path, config.to_json())
        except OSError as e:
            raise StorageError(f"Failed to write {self.config_path}", details=str(e)) from e
        logger.debug("Saved state document %s", self.config_path)

    def _reset(self) -> MakrConfig:
        config = default_config(self._home)
        self.save(config)
        return config

    def _preserve_corrupt(self, data: str | bytes) -> None:
        backup = self.config_path.with_name(self.config_path.name + ".corrupt")
        try:
            self._write(backup, data)
            logger.warning("Kept unreadable state document as %s", backup)
        except OSError as e:
            logger.warning("Could not back up unreadable state document: %s", e)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def add_template(
        self,
        name: str,
        url: str,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> Template:
        """Create a template with a fresh id and creation time.

        Raises:
            DuplicateEntityError: If a template with this name exists.
        """
        config = self.load()
        if config.get_template(name):
            raise DuplicateEntityError(f'Template "{name}" already exists')
        template = Template(name=name, url=url, description=description or None, tags=tags or [])
        config.templates.append(template)
        self.save(config)
        logger.info("Added template %s (%s)", template.name, template.id)
        return template

    def get_template_by_name(self, name: str) -> Template | None:
        return self.load().get_template(name)

    def get_template_by_id(self, template_id: str) -> Template | None:
        for template in self.load().templates:
            if template.id == template_id:
                return template
        return None

    def get_all_templates(self) -> list[Template]:
        return self.load().templates

    def get_templates_by_ids(self, ids: list[str]) -> list[Template]:
        """Templates whose id is in ``ids``, in document order."""
        wanted = set(ids)
        return [t for t in self.load().templates if t.id in wanted]

    def find_templates_by_identifier(self, identifier: str) -> list[Template]:
        return find_templates_by_identifier(self.load().templates, identifier)

    def remove_template(self, name: str) -> bool:
        """Delete a template and drop its id from every collection.

        Both changes land in the same write.

        Returns:
            True if the template was removed, False if not found.
        """
        config = self.load()
        removed = config.get_template(name)
        if removed is None:
            return False
        config.templates = [t for t in config.templates if t.id != removed.id]
        for collection in config.collections:
            collection.exclude(removed.id)
        self.save(config)
        logger.info("Removed template %s (%s)", removed.name, removed.id)
        return True

    def update_last_used(self, name: str) -> None:
        """Stamp the template's last use; unknown names are ignored."""
        config = self.load()
        template = config.get_template(name)
        if template is None:
            return
        template.last_used = utcnow()
        self.save(config)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def add_collection(
        self,
        name: str,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> Collection:
        """Create an empty collection.

        Raises:
            DuplicateEntityError: If a collection with this name exists.
        """
        config = self.load()
        if config.get_collection(name):
            raise DuplicateEntityError(f'Collection "{name}" already exists')
        collection = Collection(name=name, description=description or None, tags=tags or [])
        config.collections.append(collection)
        self.save(config)
        logger.info("Added collection %s", name)
        return collection

    def get_collection_by_name(self, name: str) -> Collection | None:
        return self.load().get_collection(name)

    def get_all_collections(self) -> list[Collection]:
        return self.load().collections

    def remove_collection(self, name: str) -> bool:
        """Delete a collection; its templates are left alone."""
        config = self.load()
        original_len = len(config.collections)
        config.collections = [c for c in config.collections if c.name != name]
        if len(config.collections) == original_len:
            return False
        self.save(config)
        logger.info("Removed collection %s", name)
        return True

    def add_template_to_collection(self, collection_name: str, template_id: str) -> Collection:
        """Add a template id to a collection (no-op if already present)."""
        config = self.load()
        collection = self._require_collection(config, collection_name)
        collection.include(template_id)
        self.save(config)
        return collection

    def remove_template_from_collection(self, collection_name: str, template_id: str) -> Collection:
        """Drop a template id from a collection (no-op if absent)."""
        config = self.load()
        collection = self._require_collection(config, collection_name)
        collection.exclude(template_id)
        self.save(config)
        return collection

    @staticmethod
    def _require_collection(config: MakrConfig, name: str) -> Collection:
        collection = config.get_collection(name)
        if collection is None:
            raise CollectionNotFoundError(f'Collection "{name}" not found')
        return collection

    # ------------------------------------------------------------------
    # Project types and languages
    # ------------------------------------------------------------------

    def get_project_types(self) -> list[ProjectType]:
        return self.load().project_types

    def get_project_type_by_name(self, name: str) -> ProjectType | None:
        return self.load().get_project_type(name)

    def add_project_type(self, project_type: ProjectType) -> ProjectType:
        """Register a new project type.

        Raises:
            DuplicateEntityError: If the name is taken.
        """
        config = self.load()
        if config.get_project_type(project_type.name):
            raise DuplicateEntityError(f'Project type "{project_type.name}" already exists')
        config.project_types.append(project_type)
        self.save(config)
        logger.info("Added project type %s -> %s", project_type.name, project_type.path)
        return project_type

    def get_languages(self) -> list[str]:
        return self.load().languages

    def add_language(self, language: str) -> bool:
        """Add a language (lowercased). Returns False if already known."""
        config = self.load()
        normalized = language.strip().lower()
        if normalized in config.languages:
            return False
        config.languages.append(normalized)
        self.save(config)
        return True

    # ------------------------------------------------------------------
    # Recent projects
    # ------------------------------------------------------------------

    def add_recent_project(
        self,
        name: str,
        path: str,
        type: str,
        language: str,
        template_used: str | None = None,
    ) -> RecentProject:
        """Record a project as the most recent one, keeping at most 50."""
        config = self.load()
        project = RecentProject(
            name=name,
            path=path,
            type=type,
            language=language,
            template_used=template_used,
        )
        config.recent_projects.insert(0, project)
        del config.recent_projects[MAX_RECENT_PROJECTS:]
        self.save(config)
        logger.info("Recorded project %s at %s", name, path)
        return project

    def get_recent_projects(
        self,
        type: str | None = None,
        language: str | None = None,
        limit: int | None = None,
        include_hidden: bool = True,
    ) -> list[RecentProject]:
        """Recent projects, newest first, optionally filtered."""
        projects = self.load().recent_projects
        if not include_hidden:
            projects = [p for p in projects if not p.hidden]
        if type:
            projects = [p for p in projects if p.type == type]
        if language:
            projects = [p for p in projects if p.language == language]
        if limit:
            projects = projects[:limit]
        return projects

    def find_recent_project(self, name: str) -> RecentProject | None:
        """Most recent project with this name."""
        for project in self.load().recent_projects:
            if project.name == name:
                return project
        return None

    def remove_recent_project(self, project_id: str) -> bool:
        """Forget a recent project by id. Files on disk are not touched."""
        config = self.load()
        original_len = len(config.recent_projects)
        config.recent_projects = [p for p in config.recent_projects if p.id != project_id]
        if len(config.recent_projects) == original_len:
            return False
        self.save(config)
        return True

    def set_project_visibility(self, name: str, hidden: bool) -> bool:
        """Hide or show the most recent project with this name."""
        config = self.load()
        for project in config.recent_projects:
            if project.name == name:
                project.hidden = hidden
                self.save(config)
                return True
        return False

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self) -> GlobalSettings:
        return self.load().settings

    def update_settings(
        self,
        clone_path: str | None = None,
        default_branch: str | None = None,
        github_token: str | None = None,
        clear_token: bool = False,
    ) -> GlobalSettings:
        """Update user settings; ``None`` leaves a value unchanged."""
        config = self.load()
        if clone_path:
            config.settings.clone_path = clone_path
        if default_branch:
            config.settings.default_branch = default_branch
        if github_token:
            config.settings.github_token = github_token
        elif clear_token:
            config.settings.github_token = None
        self.save(config)
        return config.settings

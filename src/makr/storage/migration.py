"""Forward migration of state documents written by older makr versions.

Older documents predate collections, project types, languages and recent
projects. ``backfill_document`` fills those gaps with the documented
defaults. It never touches the filesystem, the store persists the result.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Callable

from makr.constants import DEFAULT_LANGUAGES
from makr.models import GlobalSettings, default_project_types

logger = logging.getLogger(__name__)


def _default_project_types(home: Path | None) -> list[dict]:
    return [pt.model_dump(by_alias=True) for pt in default_project_types(home)]


def _default_settings(home: Path | None) -> dict:
    settings = GlobalSettings()
    if home is not None:
        settings.clone_path = str(home / "projects")
    return settings.model_dump(by_alias=True)


# Top-level key -> factory for its default, in the order fields were added.
_TOP_LEVEL_DEFAULTS: list[tuple[str, Callable[[Path | None], Any]]] = [
    ("templates", lambda home: []),
    ("config", _default_settings),
    ("collections", lambda home: []),
    ("projectTypes", _default_project_types),
    ("languages", lambda home: list(DEFAULT_LANGUAGES)),
    ("recentProjects", lambda home: []),
]


def backfill_document(raw: dict, home: Path | None = None) -> tuple[dict, bool]:
    """Return a copy of ``raw`` with every missing top-level field filled in.

    Args:
        raw: Parsed JSON document, possibly from an older version.
        home: Home directory used for path defaults (defaults to the real one).

    Returns:
        (document, changed) where ``changed`` is True if anything was added.
    """
    document = copy.deepcopy(raw)
    changed = False
    for key, factory in _TOP_LEVEL_DEFAULTS:
        if document.get(key) is None:
            document[key] = factory(home)
            logger.debug("Backfilled missing '%s' in state document", key)
            changed = True

    # Settings added after the first release.
    settings = document["config"]
    if isinstance(settings, dict):
        for key, value in _default_settings(home).items():
            if key not in settings:
                settings[key] = value
                changed = True

    return document, changed

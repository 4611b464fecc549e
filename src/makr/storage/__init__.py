"""Persistence of the makr state document.

Handles reading/writing ~/.config/makr/config.json.
"""

__all__ = ["ConfigStore", "backfill_document", "default_config"]

from .migration import backfill_document
from .store import ConfigStore, default_config

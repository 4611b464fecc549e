"""File helpers used by the state store and project scaffolding."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

# The state document may hold a GitHub token, keep it user-readable only.
PRIVATE_FILE_MODE = 0o600


def write_atomically(path: Path, content: str | bytes, mode: int | None = None) -> None:
    """Replace ``path`` with ``content`` without ever exposing a partial file.

    The data goes to a sibling ``.tmp`` file which is fsynced and then moved
    over the target with ``os.replace``. The temp file is removed on failure.

    Args:
        path: Target file path. Parent directories are created as needed.
        content: Text (encoded as UTF-8) or raw bytes.
        mode: Optional permissions applied before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    data = content.encode("utf-8") if isinstance(content, str) else content

    try:
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def read_bytes(path: Path) -> bytes:
    """Read a file as raw bytes; decoding is left to the caller."""
    return path.read_bytes()


def is_directory_empty(path: Path) -> bool:
    """Return True if ``path`` does not exist or is an empty directory."""
    if not path.exists():
        return True
    return path.is_dir() and not any(path.iterdir())


def remove_tree(path: Path) -> None:
    """Remove a directory subtree; missing paths are ignored."""
    shutil.rmtree(path, ignore_errors=True)

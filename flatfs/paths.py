"""Path-string helpers for the flat keyspace.

Paths are slash-delimited keys without leading or trailing slashes; ``""``
is the root directory.
"""

from __future__ import annotations

import posixpath

ROOT = ""


def normalize_path(path: str) -> str:
    """Normalize a path into its storage key.

    Strips surrounding slashes and collapses repeated separators, so
    ``"/a//b/"`` becomes ``"a/b"``.

    Raises:
        TypeError: If path is not a string.
        ValueError: If path contains ``.`` or ``..`` segments.
    """
    if not isinstance(path, str):
        raise TypeError(f"Expected str path, got {type(path).__name__}")
    parts = [part for part in path.split("/") if part]
    for part in parts:
        if part in (".", ".."):
            raise ValueError(f"Relative segments are not allowed: '{path}'")
    return "/".join(parts)


def dirname(path: str) -> str:
    """Return the parent path, or ROOT for top-level paths and the root itself."""
    parent = posixpath.dirname(path)
    return ROOT if parent in (".", "/") else parent


def is_in_directory(path: str, directory: str) -> bool:
    """Check whether path lies strictly inside the subtree rooted at directory."""
    if path == directory:
        return False
    return directory == ROOT or path.startswith(directory + "/")


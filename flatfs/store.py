"""Flat path-to-entry storage.

A caller-supplied mapping is validated once when adopted; after that the
store performs no validation and every tree invariant is enforced by
MemoryAdapter on top of it.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping

from .base import DirectoryEntry, Entry, FileEntry
from .paths import ROOT, dirname, normalize_path


class EntryStore:
    """Flat mapping from path to Entry, with the root pre-populated.

    Accepts any ``MutableMapping[str, Entry]`` as backing state. The mapping
    is checked on adoption and owned by the store from then on.

    Example:
        >>> store = EntryStore()
        >>> store.has("")
        True
        >>> store.put("docs", DirectoryEntry())
        >>> store.get("docs")
        DirectoryEntry()
    """

    def __init__(self, state: MutableMapping[str, Entry] | None = None):
        """Initialize the store, taking ownership of the backing mapping.

        Args:
            state: Backing mapping. Defaults to an empty dict. After
                construction the store owns it; changing it directly
                bypasses every tree invariant.

        Raises:
            ValueError: If the mapping holds something other than an entry,
                a key that is not a normalized path, a non-directory at the
                root, or an entry whose parent is not a directory.
        """
        self._state = state if state is not None else {}
        self._check_state()
        self._state.setdefault(ROOT, DirectoryEntry())

    def _check_state(self) -> None:
        """Validate an adopted mapping against the tree invariants.

        A missing root counts as a directory; it is added afterwards.
        """
        for path, entry in self._state.items():
            if not isinstance(entry, (FileEntry, DirectoryEntry)):
                raise ValueError(
                    f"Backing state holds a non-entry value at '{path}': "
                    f"{type(entry).__name__}"
                )
            if path == ROOT:
                if not isinstance(entry, DirectoryEntry):
                    raise ValueError(
                        "Backing state holds a non-directory entry at the root"
                    )
                continue
            if normalize_path(path) != path:
                raise ValueError(f"Backing state key is not a normalized path: '{path}'")
            parent = dirname(path)
            if parent != ROOT and not isinstance(self._state.get(parent), DirectoryEntry):
                raise ValueError(f"Backing state entry '{path}' has no parent directory")

    def has(self, path: str) -> bool:
        return path in self._state

    def get(self, path: str) -> Entry | None:
        """Return the entry at path, or None if nothing is stored there."""
        return self._state.get(path)

    def put(self, path: str, entry: Entry) -> None:
        self._state[path] = entry

    def remove(self, path: str) -> None:
        self._state.pop(path, None)

    def paths(self) -> list[str]:
        """Snapshot of stored paths, in no particular order."""
        return list(self._state.keys())

    def __contains__(self, path: object) -> bool:
        return path in self._state

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())

    def __len__(self) -> int:
        return len(self._state)

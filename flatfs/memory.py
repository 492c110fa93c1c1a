"""In-memory storage adapter.

Emulates a tree of files and directories on top of a flat path-keyed
store. Every path's ancestors exist as directories, deleting a directory
cascades to its subtree, and writes and copies materialize missing
destination directories.
"""

from __future__ import annotations

import io
import logging
import threading
import time
from collections.abc import MutableMapping
from dataclasses import replace
from typing import IO

from .base import DirectoryEntry, Entry, FileEntry, Metadata, MimeInfo, Visibility
from .config import ConfigLike, as_config
from .errors import (
    Failure,
    Outcome,
    Success,
    not_found,
    parent_unavailable,
    type_conflict,
)
from .mimetype import MimetypeGuesser, guess_mimetype
from .paths import ROOT, dirname, is_in_directory, normalize_path
from .store import EntryStore

logger = logging.getLogger(__name__)


def _check_contents(contents: object) -> None:
    if not isinstance(contents, (bytes, bytearray)):
        raise TypeError(f"Expected bytes, got {type(contents).__name__}")


class MemoryAdapter:
    """Volatile filesystem adapter backed by a flat path-to-entry store.

    Paths are slash-delimited strings; ``""`` is the root directory, which
    always exists and is never listed or deleted. Every fallible operation
    returns ``Success`` or ``Failure`` rather than raising.

    All public operations hold a single re-entrant lock for their whole
    duration, so the tree invariants are never observed half-applied by
    another thread.

    Example:
        >>> fs = MemoryAdapter()
        >>> fs.write("docs/readme.txt", b"hello")
        Success(value=Metadata(path='docs/readme.txt', ...))
        >>> fs.has("docs")
        True
        >>> [m.path for m in fs.list_contents("", recursive=True)]
        ['docs', 'docs/readme.txt']
    """

    def __init__(
        self,
        state: MutableMapping[str, Entry] | None = None,
        mimetype_guesser: MimetypeGuesser | None = None,
    ):
        """Initialize the adapter.

        Args:
            state: Backing mapping for entries. Defaults to an empty dict;
                the root directory is added if missing. The adapter takes
                ownership of the mapping: it is validated here and must not
                be changed by the caller afterwards, since direct edits
                bypass the lock and the hierarchy checks.
            mimetype_guesser: Callable ``(path, contents) -> mimetype | None``
                used by get_mimetype(). When it returns None the default
                extension-then-contents detection is used instead.

        Raises:
            ValueError: If state is not a valid tree (non-entry values,
                unnormalized keys, a file at the root, or an entry whose
                parent is not a directory).
        """
        self._store = EntryStore(state)
        self._lock = threading.RLock()
        self._guess_mimetype = mimetype_guesser or guess_mimetype

    @property
    def store(self) -> EntryStore:
        """The underlying entry store (for inspection only)."""
        return self._store

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def has(self, path: str) -> bool:
        """Check if a file or directory exists at path."""
        path = normalize_path(path)
        with self._lock:
            return self._store.has(path)

    def _require_file(self, path: str) -> Outcome[FileEntry]:
        entry = self._store.get(path)
        if entry is None:
            return not_found(path, "file")
        if not isinstance(entry, FileEntry):
            return type_conflict(path, "Is a directory")
        return Success(entry)

    def _require_directory(self, path: str) -> Outcome[DirectoryEntry]:
        entry = self._store.get(path)
        if entry is None:
            return not_found(path, "directory")
        if not isinstance(entry, DirectoryEntry):
            return type_conflict(path, "Not a directory")
        return Success(entry)

    def _failed(self, operation: str, failure: Failure) -> Failure:
        logger.debug(
            "%s failed (%s): %s", operation, failure.code.value, failure.message
        )
        return failure

    def _metadata(self, path: str) -> Metadata:
        return Metadata.of(path, self._store.get(path))

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def _ensure_directory(self, path: str) -> Outcome[Metadata]:
        """Make path a directory, creating missing ancestors top-down.

        Walks upward until an existing directory is found, then creates the
        missing levels from the top. Nothing is created if a file blocks
        the walk.
        """
        missing: list[str] = []
        current = path
        while True:
            entry = self._store.get(current)
            if isinstance(entry, DirectoryEntry):
                break
            if isinstance(entry, FileEntry):
                conflict = type_conflict(current, "A file already exists")
                if current == path:
                    return conflict
                return parent_unavailable(path, conflict)
            missing.append(current)
            if current == ROOT:
                break
            current = dirname(current)

        for directory in reversed(missing):
            self._store.put(directory, DirectoryEntry())
            logger.debug("Created directory '%s'", directory)
        return Success(self._metadata(path))

    def create_dir(self, path: str, config: ConfigLike = None) -> Outcome[Metadata]:
        """Create a directory, including any missing parents.

        Succeeds without changes if the directory already exists.

        Args:
            path: Directory path.
            config: Write options. Directories carry no visibility, so the
                options are validated but otherwise unused.

        Returns:
            Success with the directory's metadata, or Failure with
            TYPE_CONFLICT if path is a file, PARENT_UNAVAILABLE if an
            ancestor is a file.
        """
        path = normalize_path(path)
        as_config(config)
        with self._lock:
            outcome = self._ensure_directory(path)
        if not outcome:
            return self._failed("create_dir", outcome)
        return outcome

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def get_metadata(self, path: str) -> Outcome[Metadata]:
        """Get the metadata view of a file or directory."""
        path = normalize_path(path)
        with self._lock:
            if not self._store.has(path):
                return self._failed("get_metadata", not_found(path))
            return Success(self._metadata(path))

    def get_size(self, path: str) -> Outcome[Metadata]:
        """Get metadata carrying the entry's size."""
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Outcome[Metadata]:
        """Get metadata carrying the entry's modification time."""
        return self.get_metadata(path)

    def get_visibility(self, path: str) -> Outcome[Metadata]:
        """Get metadata carrying the entry's visibility."""
        return self.get_metadata(path)

    def read(self, path: str) -> Outcome[bytes]:
        """Read file contents.

        Returns:
            Success with the contents, or Failure with NOT_FOUND if nothing
            exists at path, TYPE_CONFLICT if path is a directory.
        """
        path = normalize_path(path)
        with self._lock:
            outcome = self._require_file(path)
        if not outcome:
            return self._failed("read", outcome)
        return Success(outcome.value.contents)

    def read_stream(self, path: str) -> Outcome[IO[bytes]]:
        """Open file contents as a binary stream positioned at the start."""
        outcome = self.read(path)
        if not outcome:
            return outcome
        return Success(io.BytesIO(outcome.value))

    def get_mimetype(self, path: str) -> Outcome[MimeInfo]:
        """Detect the mimetype of a file from its path and contents."""
        path = normalize_path(path)
        outcome = self.read(path)
        if not outcome:
            return outcome
        mimetype = self._guess_mimetype(path, outcome.value) or guess_mimetype(
            path, outcome.value
        )
        return Success(MimeInfo(path=path, mimetype=mimetype))

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def _store_contents(
        self, path: str, entry: FileEntry, contents: bytes, config: ConfigLike
    ) -> Metadata:
        visibility = as_config(config).visibility or entry.visibility
        self._store.put(
            path,
            replace(
                entry,
                contents=bytes(contents),
                size=len(contents),
                timestamp=int(time.time()),
                visibility=visibility,
            ),
        )
        return self._metadata(path)

    def write(
        self, path: str, contents: bytes, config: ConfigLike = None
    ) -> Outcome[Metadata]:
        """Write a file, creating parent directories as needed.

        An existing file is replaced and its visibility reset to public
        unless config supplies one.

        Args:
            path: File path.
            contents: File contents (must be bytes).
            config: Write options (``visibility``).

        Returns:
            Success with the file's metadata, or Failure with TYPE_CONFLICT
            if path is a directory (including the root), PARENT_UNAVAILABLE
            if an ancestor is a file.

        Raises:
            TypeError: If contents is not bytes.
        """
        path = normalize_path(path)
        _check_contents(contents)
        as_config(config)
        with self._lock:
            if isinstance(self._store.get(path), DirectoryEntry):
                return self._failed(
                    "write", type_conflict(path, "Cannot write over a directory")
                )
            parent = self._ensure_directory(dirname(path))
            if not parent:
                return self._failed("write", parent_unavailable(path, parent))
            metadata = self._store_contents(path, FileEntry(), contents, config)
        logger.debug("Wrote %d bytes to '%s'", metadata.size, path)
        return Success(metadata)

    def update(
        self, path: str, contents: bytes, config: ConfigLike = None
    ) -> Outcome[Metadata]:
        """Replace the contents of an existing file.

        Keeps the file's visibility unless config supplies one.

        Raises:
            TypeError: If contents is not bytes.
        """
        path = normalize_path(path)
        _check_contents(contents)
        as_config(config)
        with self._lock:
            outcome = self._require_file(path)
            if not outcome:
                return self._failed("update", outcome)
            metadata = self._store_contents(path, outcome.value, contents, config)
        logger.debug("Updated '%s' (%d bytes)", path, metadata.size)
        return Success(metadata)

    def write_stream(
        self, path: str, stream: IO[bytes], config: ConfigLike = None
    ) -> Outcome[Metadata]:
        """Write a file from a binary stream, read to the end."""
        return self.write(path, stream.read(), config)

    def update_stream(
        self, path: str, stream: IO[bytes], config: ConfigLike = None
    ) -> Outcome[Metadata]:
        """Replace a file's contents from a binary stream, read to the end."""
        return self.update(path, stream.read(), config)

    def set_visibility(
        self, path: str, visibility: Visibility | str
    ) -> Outcome[Metadata]:
        """Change the visibility of an existing file.

        Raises:
            ValueError: If visibility is not 'public' or 'private'.
        """
        path = normalize_path(path)
        visibility = Visibility.parse(visibility)
        with self._lock:
            outcome = self._require_file(path)
            if not outcome:
                return self._failed("set_visibility", outcome)
            self._store.put(path, replace(outcome.value, visibility=visibility))
            return Success(self._metadata(path))

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def _collect(self, directory: str, recursive: bool) -> set[str]:
        """Paths that are direct children of directory, or the whole subtree."""
        return {
            path
            for path in self._store.paths()
            if path != directory
            and (
                dirname(path) == directory
                or (recursive and is_in_directory(path, directory))
            )
        }

    def list_contents(
        self, directory: str = ROOT, recursive: bool = False
    ) -> list[Metadata]:
        """List entries below a directory, sorted by path.

        Args:
            directory: Directory to list (default: root).
            recursive: If True, include the whole subtree, not only direct
                children.

        Returns:
            Metadata for each entry; empty if directory has no entries
            below it or does not exist.
        """
        directory = normalize_path(directory)
        with self._lock:
            paths = self._collect(directory, recursive)
            paths.discard(ROOT)
            return [self._metadata(path) for path in sorted(paths)]

    # -------------------------------------------------------------------------
    # Deleting
    # -------------------------------------------------------------------------

    def delete(self, path: str) -> Outcome[None]:
        """Delete a file."""
        path = normalize_path(path)
        with self._lock:
            outcome = self._require_file(path)
            if not outcome:
                return self._failed("delete", outcome)
            self._store.remove(path)
        logger.debug("Deleted '%s'", path)
        return Success(None)

    def delete_dir(self, path: str) -> Outcome[None]:
        """Delete a directory and every entry in its subtree.

        The root directory cannot be deleted.
        """
        path = normalize_path(path)
        with self._lock:
            if path == ROOT:
                return self._failed(
                    "delete_dir", type_conflict(path, "Cannot delete the root directory")
                )
            outcome = self._require_directory(path)
            if not outcome:
                return self._failed("delete_dir", outcome)
            subtree = self._collect(path, recursive=True)
            for descendant in subtree:
                self._store.remove(descendant)
            self._store.remove(path)
        logger.info(
            "Deleted directory '%s' and %d entries below it", path, len(subtree)
        )
        return Success(None)

    # -------------------------------------------------------------------------
    # Copying and moving
    # -------------------------------------------------------------------------

    def _copy(self, src: str, dst: str) -> Outcome[None]:
        entry = self._store.get(src)
        if entry is None:
            return not_found(src)
        target = self._store.get(dst)
        if target is not None and type(target) is not type(entry):
            return type_conflict(
                dst, f"Cannot replace a {target.kind.value} with a {entry.kind.value}"
            )
        parent = self._ensure_directory(dirname(dst))
        if not parent:
            return parent_unavailable(dst, parent)
        self._store.put(dst, entry)
        return Success(None)

    def copy(self, src: str, dst: str) -> Outcome[None]:
        """Copy the entry at src to dst, creating dst's parents as needed.

        Copying a directory copies only the directory entry itself, not
        its contents. An existing file at dst is overwritten.

        Returns:
            Success, or Failure with NOT_FOUND if src does not exist,
            TYPE_CONFLICT if dst holds the other kind of entry,
            PARENT_UNAVAILABLE if an ancestor of dst is a file.
        """
        src = normalize_path(src)
        dst = normalize_path(dst)
        with self._lock:
            outcome = self._copy(src, dst)
        if not outcome:
            return self._failed("copy", outcome)
        logger.debug("Copied '%s' to '%s'", src, dst)
        return outcome

    def _move_plan(
        self, src: str, dst: str, entry: Entry
    ) -> Outcome[list[tuple[str, str]]]:
        """Pair each moved path with its destination, checking for kind clashes."""
        moves = [(src, dst)]
        if isinstance(entry, DirectoryEntry):
            for path in sorted(self._collect(src, recursive=True)):
                relative = path[len(src) + 1 :]
                moves.append((path, f"{dst}/{relative}" if dst else relative))
        vacated = {old for old, _ in moves}
        for old, new in moves:
            if new in vacated:
                continue
            target = self._store.get(new)
            if target is not None and type(target) is not type(self._store.get(old)):
                return type_conflict(new, "Destination holds a different kind of entry")
        return Success(moves)

    def rename(self, src: str, dst: str) -> Outcome[None]:
        """Move the entry at src to dst, creating dst's parents as needed.

        Moving a directory moves its whole subtree.

        Returns:
            Success, or Failure with NOT_FOUND if src does not exist,
            TYPE_CONFLICT for the root, a move into src's own subtree or a
            file/directory clash at the destination, PARENT_UNAVAILABLE if
            an ancestor of dst is a file.
        """
        src = normalize_path(src)
        dst = normalize_path(dst)
        with self._lock:
            outcome = self._rename(src, dst)
        if not outcome:
            return self._failed("rename", outcome)
        logger.debug("Renamed '%s' to '%s'", src, dst)
        return outcome

    def _rename(self, src: str, dst: str) -> Outcome[None]:
        if src == ROOT:
            return type_conflict(src, "Cannot move the root directory")
        entry = self._store.get(src)
        if entry is None:
            return not_found(src)
        if src == dst:
            return Success(None)
        if isinstance(entry, DirectoryEntry) and is_in_directory(dst, src):
            return type_conflict(dst, "Cannot move a directory into itself")

        plan = self._move_plan(src, dst, entry)
        if not plan:
            return plan
        copied = self._copy(src, dst)
        if not copied:
            return copied
        moved = {new: self._store.get(old) for old, new in plan.value[1:]}
        for old, _ in plan.value:
            self._store.remove(old)
        for new, moved_entry in moved.items():
            self._store.put(new, moved_entry)
        return Success(None)

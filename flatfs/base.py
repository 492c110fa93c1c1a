"""Base entry types and the storage adapter interface.

Defines the records kept per path (files and directories), the read-only
metadata view built from them, and the capability surface a filesystem
facade consumes (MemoryAdapter).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import IO, TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import ConfigLike
    from .errors import Outcome


class Visibility(str, Enum):
    """Visibility flag carried by file entries."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: Visibility | str) -> Visibility:
        """Coerce a visibility name into the enum.

        Raises:
            ValueError: If the value is not a known visibility.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown visibility: {value!r}. Use 'public' or 'private'."
            ) from None


class EntryKind(str, Enum):
    """Kind of entry stored at a path."""

    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True)
class FileEntry:
    """A file stored at one path.

    Attributes:
        contents: Raw file contents.
        size: Length of contents in bytes, computed at write time.
        timestamp: Last modification time (epoch seconds).
        visibility: Public or private.
    """

    contents: bytes = b""
    size: int = 0
    timestamp: int = 0
    visibility: Visibility = Visibility.PUBLIC

    kind = EntryKind.FILE


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory stored at one path. Directories carry no attributes."""

    kind = EntryKind.DIRECTORY


Entry = FileEntry | DirectoryEntry


@dataclass(frozen=True)
class Metadata:
    """Read-only view of an entry, never including raw contents.

    Attributes:
        path: Path of the entry ("" is the root).
        kind: File or directory.
        visibility: File visibility (None for directories).
        timestamp: Last modification time in epoch seconds (None for directories).
        size: File size in bytes (None for directories).
    """

    path: str
    kind: EntryKind
    visibility: Visibility | None = None
    timestamp: int | None = None
    size: int | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @classmethod
    def of(cls, path: str, entry: Entry) -> Metadata:
        """Project an entry stored at ``path`` into its metadata view."""
        if isinstance(entry, FileEntry):
            return cls(
                path=path,
                kind=EntryKind.FILE,
                visibility=entry.visibility,
                timestamp=entry.timestamp,
                size=entry.size,
            )
        return cls(path=path, kind=EntryKind.DIRECTORY)

    def to_dict(self) -> dict[str, Any]:
        """Return the view as a plain dict, omitting fields a directory lacks."""
        data: dict[str, Any] = {"type": self.kind.value, "path": self.path}
        if self.visibility is not None:
            data["visibility"] = self.visibility.value
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if self.size is not None:
            data["size"] = self.size
        return data


@dataclass(frozen=True)
class MimeInfo:
    """Result of a mimetype lookup."""

    path: str
    mimetype: str


@runtime_checkable
class StorageAdapter(Protocol):
    """Capability surface consumed by a filesystem facade.

    Every fallible operation returns an Outcome instead of raising; the
    facade decides how failures surface to its users.
    """

    def has(self, path: str) -> bool:
        """Check if any entry exists at path."""
        ...

    def read(self, path: str) -> Outcome[bytes]:
        """Read file contents."""
        ...

    def read_stream(self, path: str) -> Outcome[IO[bytes]]:
        """Open file contents as a binary stream."""
        ...

    def get_metadata(self, path: str) -> Outcome[Metadata]:
        """Get the metadata view of an entry."""
        ...

    def write(
        self, path: str, contents: bytes, config: ConfigLike = None
    ) -> Outcome[Metadata]:
        """Create or replace a file, materializing missing parents."""
        ...

    def update(
        self, path: str, contents: bytes, config: ConfigLike = None
    ) -> Outcome[Metadata]:
        """Replace the contents of an existing file."""
        ...

    def set_visibility(
        self, path: str, visibility: Visibility | str
    ) -> Outcome[Metadata]:
        """Change the visibility of an existing file."""
        ...

    def create_dir(self, path: str, config: ConfigLike = None) -> Outcome[Metadata]:
        """Create a directory and any missing parents."""
        ...

    def delete(self, path: str) -> Outcome[None]:
        """Delete a file."""
        ...

    def delete_dir(self, path: str) -> Outcome[None]:
        """Delete a directory and everything below it."""
        ...

    def copy(self, src: str, dst: str) -> Outcome[None]:
        """Copy an entry to a new path."""
        ...

    def rename(self, src: str, dst: str) -> Outcome[None]:
        """Move an entry to a new path."""
        ...

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> list[Metadata]:
        """List entries below a directory."""
        ...

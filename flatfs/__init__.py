"""flatfs: an in-memory filesystem adapter over a flat path-keyed store."""

from .base import (
    DirectoryEntry,
    Entry,
    EntryKind,
    FileEntry,
    Metadata,
    MimeInfo,
    StorageAdapter,
    Visibility,
)
from .config import WriteConfig, as_config, connect_config
from .errors import (
    EntryNotFoundError,
    EntryTypeError,
    ErrorCode,
    Failure,
    Outcome,
    ParentUnavailableError,
    StorageError,
    Success,
)
from .memory import MemoryAdapter
from .mimetype import guess_mimetype
from .paths import dirname, is_in_directory, normalize_path
from .store import EntryStore

__all__ = [
    "as_config",
    "connect_config",
    "dirname",
    "DirectoryEntry",
    "Entry",
    "EntryKind",
    "EntryNotFoundError",
    "EntryStore",
    "EntryTypeError",
    "ErrorCode",
    "Failure",
    "FileEntry",
    "guess_mimetype",
    "is_in_directory",
    "MemoryAdapter",
    "Metadata",
    "MimeInfo",
    "normalize_path",
    "Outcome",
    "ParentUnavailableError",
    "StorageAdapter",
    "StorageError",
    "Success",
    "Visibility",
    "WriteConfig",
]

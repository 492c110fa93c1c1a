"""Configuration for write operations.

Provides the WriteConfig option bag and the connect_config factory. The
only recognized option is ``visibility``; everything else is looked up
opaquely through ``WriteConfig.get``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .base import Visibility


@dataclass(frozen=True)
class WriteConfig:
    """Options for write, update and create_dir.

    Attributes:
        visibility: Explicit visibility for the written file. None keeps
            the file's current visibility (public for new files).
    """

    visibility: Visibility | None = None

    def __post_init__(self) -> None:
        if self.visibility is not None:
            object.__setattr__(self, "visibility", Visibility.parse(self.visibility))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up an option by name."""
        value = getattr(self, key, None) if key in _OPTION_NAMES else None
        return default if value is None else value


_OPTION_NAMES = frozenset(f.name for f in fields(WriteConfig))

ConfigLike = WriteConfig | Mapping[str, Any] | None


def connect_config(**kwargs: Any) -> WriteConfig:
    """Configure a write.

    Args:
        **kwargs: Options for the write.
            - visibility (str | Visibility): Optional. "public" or "private".

    Returns:
        WriteConfig for the operation.

    Raises:
        ValueError: On unknown options or an unknown visibility.

    Examples:
        >>> connect_config(visibility="private")
        WriteConfig(visibility=<Visibility.PRIVATE: 'private'>)
    """
    visibility = kwargs.pop("visibility", None)
    if kwargs:
        raise ValueError(f"Unexpected arguments for write config: {list(kwargs.keys())}")
    return WriteConfig(visibility=visibility)


def as_config(config: ConfigLike) -> WriteConfig:
    """Coerce None, a mapping, or a WriteConfig into a WriteConfig.

    Keys of a mapping other than the recognized options are ignored.
    """
    if config is None:
        return WriteConfig()
    if isinstance(config, WriteConfig):
        return config
    if isinstance(config, Mapping):
        return WriteConfig(visibility=config.get("visibility"))
    raise TypeError(f"Expected WriteConfig or mapping, got {type(config).__name__}")

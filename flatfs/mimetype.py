"""Default mimetype detection for stored files."""

from __future__ import annotations

import mimetypes
from collections.abc import Callable

MimetypeGuesser = Callable[[str, bytes], str | None]

DEFAULT_TEXT = "text/plain"
DEFAULT_BINARY = "application/octet-stream"


def guess_mimetype(path: str, contents: bytes) -> str:
    """Guess a mimetype from the file extension, falling back on the contents.

    Files without a known extension are reported as text/plain when their contents
    decode as UTF-8, otherwise as application/octet-stream.
    """
    mimetype, _ = mimetypes.guess_type(path, strict=False)
    if mimetype:
        return mimetype
    try:
        contents.decode("utf-8")
    except UnicodeDecodeError:
        return DEFAULT_BINARY
    return DEFAULT_TEXT

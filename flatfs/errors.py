"""Operation outcomes and the error taxonomy.

Adapter operations never raise for expected failures. They return
``Success(value)`` or ``Failure(code, ...)``; ``Success`` is always truthy and
``Failure`` always falsy, so a falsy payload (``b""``) is never mistaken for
a failure. ``unwrap()`` converts a failure into a ``StorageError``.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from enum import Enum
from typing import Generic, NoReturn, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Reason an operation failed."""

    NOT_FOUND = "not_found"
    TYPE_CONFLICT = "type_conflict"
    PARENT_UNAVAILABLE = "parent_unavailable"


class StorageError(OSError):
    """Raised by ``Failure.unwrap()``; carries the originating failure."""

    errno_value = errno.EIO

    def __init__(self, failure: Failure):
        super().__init__(self.errno_value, failure.message, failure.path)
        self.failure = failure

    @property
    def code(self) -> ErrorCode:
        return self.failure.code


class EntryNotFoundError(StorageError, FileNotFoundError):
    errno_value = errno.ENOENT


class EntryTypeError(StorageError):
    errno_value = errno.EEXIST


class ParentUnavailableError(StorageError):
    errno_value = errno.ENOTDIR


_ERRORS: dict[ErrorCode, type[StorageError]] = {
    ErrorCode.NOT_FOUND: EntryNotFoundError,
    ErrorCode.TYPE_CONFLICT: EntryTypeError,
    ErrorCode.PARENT_UNAVAILABLE: ParentUnavailableError,
}


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome holding the operation's value."""

    value: T

    ok = True

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome.

    Attributes:
        code: Error category.
        path: Path the failure refers to.
        message: Human-readable description.
        cause: Underlying failure, e.g. the ancestor that blocked
            directory creation.
    """

    code: ErrorCode
    path: str
    message: str
    cause: Failure | None = None

    ok = False

    def __bool__(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise _ERRORS[self.code](self)

    @property
    def root_cause(self) -> Failure:
        failure = self
        while failure.cause is not None:
            failure = failure.cause
        return failure


Outcome = Success[T] | Failure


def not_found(path: str, what: str = "entry") -> Failure:
    return Failure(ErrorCode.NOT_FOUND, path, f"No such {what}: '{path}'")


def type_conflict(path: str, message: str) -> Failure:
    return Failure(ErrorCode.TYPE_CONFLICT, path, f"{message}: '{path}'")


def parent_unavailable(path: str, cause: Failure) -> Failure:
    return Failure(
        ErrorCode.PARENT_UNAVAILABLE,
        path,
        f"Cannot create parent directories for '{path}': {cause.message}",
        cause,
    )

"""Error types for the mount file system.

Every error raised by a FileSystem operation is a VFSError carrying the
namespace path the caller supplied. Backend exceptions are normalized by
wrap_error() as they cross into the core.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional


class ErrorKind(Enum):
    """Kind of VFS failure."""
    NOT_FOUND = "not_found"
    READ_ONLY = "read_only"
    BAD_ACTION = "bad_action"
    BAD_PATH = "bad_path"
    BACKEND = "backend"


class VFSError(Exception):
    """Base error for all mount file system failures.

    Data sources may raise the subclasses below without a path; the
    FileSystem fills in the path of the queried item before the error
    reaches the caller.

    Attributes:
        kind: The ErrorKind of this error
        path: Namespace path that triggered the error
        cause: Backend exception (BACKEND errors only)
    """

    kind: ErrorKind = ErrorKind.BACKEND

    def __init__(self, path: str = "", cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(path)

    def __str__(self) -> str:
        return f"{self.describe()}: {self.path}"

    def describe(self) -> str:
        return "Invalid error"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path='{self.path}')"


class NotFoundError(VFSError):
    """No item exists at the path."""
    kind = ErrorKind.NOT_FOUND

    def describe(self) -> str:
        return "No item found at path"


class ReadOnlyError(VFSError):
    """A write was attempted on an item that is only mounted for reading."""
    kind = ErrorKind.READ_ONLY

    def describe(self) -> str:
        return "Item at path is read-only"


class BadActionError(VFSError):
    """The action cannot be done with the item (e.g. reading a directory)."""
    kind = ErrorKind.BAD_ACTION

    def describe(self) -> str:
        return "Illegal action for item at path"


class BadPathError(VFSError):
    """The path contains reserved characters or '.'/'..' segments."""
    kind = ErrorKind.BAD_PATH

    def describe(self) -> str:
        return "Path is invalid"


class BackendError(VFSError):
    """A failure raised by a data source, with the namespace path attached."""
    kind = ErrorKind.BACKEND

    def __str__(self) -> str:
        return f"{self._cause_message()} (VFS path: {self.path})"

    def _cause_message(self) -> str:
        # OS errors carry the real file name, which is not part of the namespace
        if isinstance(self.cause, OSError) and self.cause.strerror:
            return self.cause.strerror
        return str(self.cause)


def wrap_error(error: BaseException, path: str) -> VFSError:
    """Normalize an exception raised by a data source.

    Args:
        error: Exception raised by a data source or by the core
        path: Namespace path the caller supplied

    Returns:
        A VFSError annotated with path. Existing VFSErrors keep their kind,
        FileNotFoundError becomes NotFoundError, anything else is wrapped
        in a BackendError.
    """
    if isinstance(error, VFSError):
        error.path = path
        return error

    if isinstance(error, FileNotFoundError):
        return NotFoundError(path)

    return BackendError(path, cause=error)


@contextmanager
def wrapped_errors(path: str) -> Iterator[None]:
    """Context manager re-raising any exception from the block via wrap_error()."""
    try:
        yield
    except VFSError as e:
        e.path = path
        raise
    except Exception as e:
        raise wrap_error(e, path) from e

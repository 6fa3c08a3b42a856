"""
Error kinds raised by the bookmark store.

Core code raises these; the CLI maps every one of them to exit code 1.
None of them is retried: all operations are local and deterministic.
"""

from __future__ import annotations


class ShellmarkError(Exception):
    """Base class for all bookmark store errors."""

    kind = "error"


class InvalidArgumentError(ShellmarkError):
    """Empty or malformed name, path, or directory name."""

    kind = "invalid_argument"


class NotFoundError(ShellmarkError):
    """No entry with the requested name (or its directory is gone)."""

    kind = "not_found"


class StoreNotInitializedError(NotFoundError):
    """A read was attempted on a store file that does not exist yet."""

    kind = "store_not_initialized"

    def __init__(self, path: str):
        super().__init__(f"Bookmark store not initialized: {path}")
        self.path = path


class ConflictError(ShellmarkError):
    """Name or target path collision."""

    kind = "conflict"


class StoreIOError(ShellmarkError):
    """Filesystem failure creating, reading, or writing the store."""

    kind = "io_error"


class InconsistentError(StoreIOError):
    """The directory was renamed but the store could not be updated.

    The bookmark still points at ``moved_from`` while the directory now
    lives at ``moved_to``.
    """

    kind = "inconsistent"

    def __init__(self, message: str, moved_from: str, moved_to: str):
        super().__init__(message)
        self.moved_from = moved_from
        self.moved_to = moved_to

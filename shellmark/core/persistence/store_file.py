"""
Store file persistence — atomic read/write for the bookmark file.

Bookmarks are stored as ``path|name`` lines in a flat text file
(by default ``~/.shell-config/bookmarks/.bookmarks``). Writes are
atomic (write to temp file in the same directory, then replace) so a
crash mid-write leaves either the old file or the new one, never a
truncated mix.

No locking: two processes racing on the same file is last-writer-wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from shellmark.core.errors import StoreIOError, StoreNotInitializedError
from shellmark.core.models.bookmark import Entry, UnparsedLine, parse_store, serialize

logger = logging.getLogger(__name__)

# Default store location (relative to the shellmark home directory)
DEFAULT_BOOKMARK_DIR = "bookmarks"
DEFAULT_BOOKMARK_FILE = ".bookmarks"


def default_store_path(home: Path) -> Path:
    """Get the default bookmark file path under a shellmark home."""
    return home / DEFAULT_BOOKMARK_DIR / DEFAULT_BOOKMARK_FILE


def _read_text(path: Path) -> str:
    if not path.is_file():
        raise StoreNotInitializedError(str(path))

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise StoreIOError(
            f"Bookmark store {path} is not valid UTF-8 (byte {e.start}): {e.reason}"
        ) from e
    except OSError as e:
        raise StoreIOError(f"Cannot read bookmark store {path}: {e}") from e


def read_store(path: Path) -> tuple[list[Entry], list[UnparsedLine]]:
    """Read entries and the unparseable lines kept alongside them.

    Raises:
        StoreNotInitializedError: If the store file does not exist.
        StoreIOError: If the file cannot be read or is not UTF-8 text.
    """
    entries, unparsed = parse_store(_read_text(path))
    logger.debug(
        "Loaded %d bookmarks (%d unparsed lines) from %s",
        len(entries),
        len(unparsed),
        path,
    )
    return entries, unparsed


def read_entries(path: Path) -> list[Entry]:
    """Read all entries from the store file, in file order.

    Raises:
        StoreNotInitializedError: If the store file does not exist.
        StoreIOError: If the file cannot be read or is not UTF-8 text.
    """
    entries, _ = read_store(path)
    return entries


def load_store(path: Path) -> tuple[list[Entry], list[UnparsedLine]]:
    """Read the store for a mutation. A missing store is an empty store."""
    try:
        return read_store(path)
    except StoreNotInitializedError:
        logger.info("No bookmark store at %s — starting empty", path)
        return [], []


def write_entries(
    entries: list[Entry],
    path: Path,
    unparsed: list[UnparsedLine] | None = None,
) -> None:
    """Write the full entry list to the store file (atomic replace).

    Creates the parent directory if needed. ``unparsed`` lines are written
    back verbatim.

    Raises:
        StoreIOError: On any filesystem failure. The original file is
            left untouched and no temp file remains.
    """
    content = serialize(entries, unparsed)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".bookmarks_",
            suffix=".tmp",
        )
    except OSError as e:
        raise StoreIOError(f"Cannot create temp file next to {path}: {e}") from e

    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save bookmarks to %s: %s", path, e)
        raise StoreIOError(f"Cannot write bookmark store {path}: {e}") from e

    logger.debug("Saved %d bookmarks to %s", len(entries), path)

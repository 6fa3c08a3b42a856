"""
Bookmark store — the handle every caller goes through.

A ``BookmarkStore`` owns one store file path. Mutations read the file,
build a Plan, and hand it to the executor (which previews it in
dry-run). Reads go straight to the file and are never cached: active
status is recomputed on every ``list()``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from shellmark.core.engine import planner
from shellmark.core.engine.executor import execute
from shellmark.core.models.bookmark import Entry, ListedEntry
from shellmark.core.models.plan import Receipt
from shellmark.core.persistence.store_file import load_store, read_entries

logger = logging.getLogger(__name__)


class BookmarkStore:
    """Name → directory bookmarks backed by a flat ``path|name`` file."""

    def __init__(self, path: Path):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    # ── Mutations ───────────────────────────────────────────────

    def _apply(self, build, *args, dry_run: bool = False, **kwargs) -> Receipt:
        """Load the store, build a plan with ``build`` and execute it.

        Lines that are not bookmarks ride along on the plan untouched.
        """
        entries, unparsed = load_store(self._path)
        plan = build(entries, self._path, *args, **kwargs)
        plan.unparsed = unparsed
        return execute(plan, dry_run=dry_run)

    def add(
        self,
        name: str,
        path: str | None = None,
        force: bool = False,
        dry_run: bool = False,
    ) -> Receipt:
        """Bookmark ``path`` (default: current directory) as ``name``.

        Raises:
            InvalidArgumentError: Empty name or malformed path.
            ConflictError: The name exists and ``force`` is not set.
        """
        target = path if path is not None else os.getcwd()
        return self._apply(
            planner.build_add_plan, name, target, force=force, dry_run=dry_run
        )

    def remove(self, name: str, dry_run: bool = False) -> Receipt:
        """Remove a bookmark.

        Raises:
            NotFoundError: No such bookmark. The file is left untouched.
        """
        return self._apply(planner.build_remove_plan, name, dry_run=dry_run)

    def rename(self, old_name: str, new_name: str, dry_run: bool = False) -> Receipt:
        """Rename a bookmark, keeping its path and position.

        Raises:
            NotFoundError: ``old_name`` does not exist.
            ConflictError: ``new_name`` already exists.
        """
        return self._apply(planner.build_rename_plan, old_name, new_name, dry_run=dry_run)

    def rename_directory(
        self,
        name: str,
        new_dir_name: str,
        dry_run: bool = False,
    ) -> Receipt:
        """Rename the directory a bookmark points to and update the bookmark.

        Raises:
            NotFoundError: No such bookmark, or its directory is gone.
            ConflictError: The new path already exists.
            StoreIOError: The directory could not be renamed.
            InconsistentError: The directory moved but the store was not updated.
        """
        return self._apply(
            planner.build_rename_dir_plan, name, new_dir_name, dry_run=dry_run
        )

    def prune(self, names: list[str] | None = None, dry_run: bool = False) -> Receipt:
        """Remove inactive bookmarks (all of them, or the named ones)."""
        return self._apply(planner.build_prune_plan, names, dry_run=dry_run)

    # ── Reads ───────────────────────────────────────────────────

    def get(self, name: str) -> Entry:
        """Look up a bookmark by exact trailing-field match.

        Raises:
            StoreNotInitializedError: The store file does not exist.
            NotFoundError: No such bookmark.
        """
        return planner.require_entry(read_entries(self._path), name)

    def resolve(self, name: str) -> str:
        """Path for a bookmark name."""
        return self.get(name).path

    def list(self) -> list[ListedEntry]:
        """All bookmarks in file order, each with its current active status.

        Raises:
            StoreNotInitializedError: The store file does not exist.
        """
        return [
            ListedEntry(path=e.path, name=e.name, active=e.is_active())
            for e in read_entries(self._path)
        ]

    def __repr__(self) -> str:
        return f"<BookmarkStore path={str(self._path)!r}>"

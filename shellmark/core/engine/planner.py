"""
Planner — turns a requested mutation into a Plan.

Every ``build_*_plan`` function takes the current entry list and returns
a Plan with the entry list to write. Planning validates everything
(names, collisions, directory state) and never touches the store file,
so dry-run and real runs fail identically.

Flow:
    entries + request → validate → compute ``after`` → Plan
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from shellmark.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from shellmark.core.models.bookmark import DELIMITER, Entry, normalize_name
from shellmark.core.models.plan import Plan

logger = logging.getLogger(__name__)


# ── Lookup ──────────────────────────────────────────────────────────


def find_entry(entries: list[Entry], name: str) -> Entry | None:
    """Find the first entry whose name field equals ``name``.

    Tries the name as given (trimmed) first, then its normalized form.
    Matching is on the whole trailing field: ``foo`` never matches ``myfoo``.

    Raises:
        InvalidArgumentError: If ``name`` is empty.
    """
    wanted = (name or "").strip()
    if not wanted:
        raise InvalidArgumentError("Bookmark name must not be empty.")

    for entry in entries:
        if entry.name == wanted:
            return entry

    try:
        normalized = normalize_name(wanted)
    except InvalidArgumentError:
        return None
    if normalized == wanted:
        return None

    for entry in entries:
        if entry.name == normalized:
            return entry
    return None


def require_entry(entries: list[Entry], name: str) -> Entry:
    """Like find_entry, but a miss raises NotFoundError."""
    entry = find_entry(entries, name)
    if entry is None:
        raise NotFoundError(f"Bookmark '{name}' not found.")
    return entry


def _without_name(entries: list[Entry], name: str) -> list[Entry]:
    return [e for e in entries if e.name != name]


def _normalized(name: str) -> str | None:
    """Normalized form of a stored name, or None if it has none."""
    try:
        return normalize_name(name)
    except InvalidArgumentError:
        return None


def _claims(entry: Entry, canonical: str) -> bool:
    """Whether ``entry`` already holds the canonical name (legacy spellings too)."""
    return _normalized(entry.name) == canonical


# ── Plans ───────────────────────────────────────────────────────────


def build_add_plan(
    entries: list[Entry],
    store_path: Path,
    name: str,
    path: str,
    force: bool = False,
) -> Plan:
    """Plan adding ``name → path``.

    Raises:
        InvalidArgumentError: Empty/invalid name or a malformed path.
        ConflictError: The name exists and ``force`` is not set.
    """
    if not (name or "").strip():
        raise InvalidArgumentError("Please type a valid name for your bookmark.")
    canonical = normalize_name(name)
    new_entry = Entry.create(path, canonical)

    existing = [e for e in entries if _claims(e, canonical)]
    if existing and not force:
        raise ConflictError(f"Bookmark '{canonical}' already exists.")

    if existing:
        # Replace: drop every old line for the name, append the new one
        after = [e for e in entries if not _claims(e, canonical)] + [new_entry]
        return Plan(
            kind="replace",
            name=canonical,
            store_path=str(store_path),
            before=list(entries),
            after=after,
            note="" if after != entries else f"Bookmark '{canonical}' is unchanged.",
        )

    return Plan(
        kind="add",
        name=canonical,
        store_path=str(store_path),
        before=list(entries),
        after=list(entries) + [new_entry],
    )


def build_remove_plan(entries: list[Entry], store_path: Path, name: str) -> Plan:
    """Plan removing every line whose name field equals ``name``.

    Raises:
        NotFoundError: No such entry.
    """
    entry = require_entry(entries, name)
    return Plan(
        kind="remove",
        name=entry.name,
        store_path=str(store_path),
        before=list(entries),
        after=_without_name(entries, entry.name),
    )


def build_rename_plan(
    entries: list[Entry],
    store_path: Path,
    old_name: str,
    new_name: str,
) -> Plan:
    """Plan renaming a bookmark. Path and line position are preserved.

    Raises:
        NotFoundError: ``old_name`` does not exist.
        InvalidArgumentError: ``new_name`` normalizes to nothing.
        ConflictError: The normalized ``new_name`` already exists.
    """
    entry = require_entry(entries, old_name)
    canonical = normalize_name(new_name)

    taken = canonical == entry.name or any(
        _claims(e, canonical) for e in entries if e.name != entry.name
    )
    if taken:
        raise ConflictError(f"Bookmark '{canonical}' already exists.")

    after = [e.with_name(canonical) if e.name == entry.name else e for e in entries]
    return Plan(
        kind="rename",
        name=canonical,
        store_path=str(store_path),
        before=list(entries),
        after=after,
        note=f"{entry.name} → {canonical}",
    )


def _check_dir_name(new_dir_name: str) -> str:
    value = (new_dir_name or "").strip()
    if not value or value in (".", ".."):
        raise InvalidArgumentError("New directory name must not be empty.")
    if os.sep in value or (os.altsep and os.altsep in value):
        raise InvalidArgumentError(
            f"New directory name must be a single path component: {new_dir_name!r}"
        )
    if DELIMITER in value or "\n" in value:
        raise InvalidArgumentError(
            f"New directory name must not contain '{DELIMITER}' or line breaks."
        )
    return value


def build_rename_dir_plan(
    entries: list[Entry],
    store_path: Path,
    name: str,
    new_dir_name: str,
) -> Plan:
    """Plan renaming the directory a bookmark points to.

    The new path is ``dirname(old_path)/new_dir_name``; the entry keeps its
    name and position, only its path field changes.

    Raises:
        NotFoundError: No such bookmark, or its directory no longer exists.
        InvalidArgumentError: ``new_dir_name`` is not a single component.
        ConflictError: Something already exists at the new path.
    """
    entry = require_entry(entries, name)
    dir_name = _check_dir_name(new_dir_name)

    old_path = entry.path.rstrip("/") or "/"
    if not Path(old_path).expanduser().is_dir():
        raise NotFoundError(
            f"Directory for bookmark '{entry.name}' does not exist: {entry.path}"
        )

    new_path = os.path.join(os.path.dirname(old_path), dir_name)
    target = Path(new_path).expanduser()
    if target.exists() or target.is_symlink():
        raise ConflictError(f"Target path already exists: {new_path}")

    after = [e.with_path(new_path) if e.name == entry.name else e for e in entries]
    return Plan(
        kind="rename_dir",
        name=entry.name,
        store_path=str(store_path),
        before=list(entries),
        after=after,
        move_from=str(Path(old_path).expanduser()),
        move_to=str(target),
    )


def build_prune_plan(
    entries: list[Entry],
    store_path: Path,
    names: list[str] | None = None,
) -> Plan:
    """Plan removing inactive bookmarks.

    With ``names``, only those bookmarks are removed and each must be
    inactive. Without, every inactive bookmark is removed.

    Raises:
        NotFoundError: A named bookmark does not exist.
        ConflictError: A named bookmark still points at a directory.
    """
    if names:
        doomed: set[str] = set()
        for name in names:
            entry = require_entry(entries, name)
            if entry.is_active():
                raise ConflictError(
                    f"Bookmark '{entry.name}' is active ({entry.path}); refusing to prune."
                )
            doomed.add(entry.name)
    else:
        doomed = {e.name for e in entries if not e.is_active()}

    note = "" if doomed else "No inactive bookmarks found."
    return Plan(
        kind="prune",
        name=", ".join(sorted(doomed)),
        store_path=str(store_path),
        before=list(entries),
        after=[e for e in entries if e.name not in doomed],
        note=note,
    )

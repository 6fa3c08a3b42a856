"""
Bookmark models — one stored ``path|name`` pair and its listed form.

The store file is a flat text file with one ``path|name`` line per
bookmark. Parsing splits on the LAST pipe: the final field is the name,
so a lookup is a trailing-field exact match, never a substring search.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ValidationError, field_validator

from shellmark.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DELIMITER = "|"

_SEPARATORS = re.compile(r"[\s./]+")
_INVALID_CHARS = re.compile(r"[^a-z0-9_-]")


def normalize_name(raw: str) -> str:
    """Canonical form of a bookmark name.

    Lowercases, turns whitespace, dots and slashes into ``-`` and drops
    every other character outside ``[a-z0-9_-]``.

    Raises:
        InvalidArgumentError: If nothing usable is left.
    """
    name = (raw or "").strip().lower()
    name = _SEPARATORS.sub("-", name)
    name = _INVALID_CHARS.sub("", name)
    if not name:
        raise InvalidArgumentError(f"Invalid bookmark name: {raw!r}")
    return name


def _check_field(value: str, field_name: str) -> str:
    if not value:
        raise ValueError(f"{field_name} must not be empty")
    if DELIMITER in value:
        raise ValueError(f"{field_name} must not contain '{DELIMITER}'")
    if "\n" in value or "\r" in value:
        raise ValueError(f"{field_name} must not contain a line break")
    return value


class Entry(BaseModel):
    """A stored bookmark: a directory reference and its unique name."""

    model_config = {"frozen": True}

    path: str
    name: str

    @field_validator("path")
    @classmethod
    def _valid_path(cls, v: str) -> str:
        return _check_field(v, "path")

    @field_validator("name")
    @classmethod
    def _valid_name(cls, v: str) -> str:
        return _check_field(v, "name")

    @classmethod
    def create(cls, path: str, name: str) -> Entry:
        """Build an entry, reporting format violations as InvalidArgumentError."""
        try:
            return cls(path=path, name=name)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise InvalidArgumentError(messages) from e

    def to_line(self) -> str:
        """Serialize to the on-disk ``path|name`` form (no newline)."""
        return f"{self.path}{DELIMITER}{self.name}"

    def is_active(self) -> bool:
        """Whether the path currently exists as a directory. Never cached."""
        return Path(self.path).expanduser().is_dir()

    def with_name(self, name: str) -> Entry:
        return Entry.create(self.path, name)

    def with_path(self, path: str) -> Entry:
        return Entry.create(path, self.name)


class ListedEntry(BaseModel):
    """An entry annotated with its active status at listing time."""

    path: str
    name: str
    active: bool

    @property
    def status(self) -> str:
        return "active" if self.active else "inactive"

    def selector_line(self) -> str:
        """Display form consumed by interactive selectors."""
        return f"{self.name} ({self.path}) [{self.status}]"

    def to_dict(self) -> dict:
        return {"name": self.name, "path": self.path, "active": self.active}


class UnparsedLine(BaseModel):
    """A store line that is not a valid ``path|name`` pair.

    Kept verbatim and written back on every rewrite, after the entry line
    it followed when read (``follows``; None means the top of the file).
    """

    model_config = {"frozen": True}

    text: str
    line_num: int = 0
    follows: str | None = None


def parse_line(line: str, line_num: int = 0) -> Entry | None:
    """Parse one store line. Returns None for blank or malformed lines."""
    text = line.rstrip("\r\n")
    if not text.strip():
        return None

    path, sep, name = text.rpartition(DELIMITER)
    if not sep or not path or not name:
        logger.warning("Ignoring malformed bookmark line %d: %r", line_num, text)
        return None

    try:
        return Entry(path=path, name=name)
    except ValidationError as e:
        logger.warning("Ignoring invalid bookmark line %d: %s", line_num, e)
        return None


def parse_store(text: str) -> tuple[list[Entry], list[UnparsedLine]]:
    """Split store content into entries and the lines that are not entries.

    Blank lines are dropped; every other unparseable line is returned so
    a rewrite can carry it through unchanged.
    """
    entries: list[Entry] = []
    unparsed: list[UnparsedLine] = []
    for line_num, line in enumerate(text.splitlines(), start=1):
        entry = parse_line(line, line_num)
        if entry is not None:
            entries.append(entry)
        elif line.strip():
            unparsed.append(
                UnparsedLine(
                    text=line.rstrip("\r\n"),
                    line_num=line_num,
                    follows=entries[-1].to_line() if entries else None,
                )
            )
    return entries, unparsed


def parse_lines(text: str) -> list[Entry]:
    """Parse the full store file content into entries, in file order."""
    entries, _ = parse_store(text)
    return entries


def serialize(entries: list[Entry], unparsed: list[UnparsedLine] | None = None) -> str:
    """Render entries to file content. Empty list → empty file.

    Unparsed lines go back after the entry they followed. When that entry
    is gone, they go to the end of the file.
    """
    pending = list(unparsed or [])
    lines = [u.text for u in pending if u.follows is None]
    pending = [u for u in pending if u.follows is not None]

    for entry in entries:
        line = entry.to_line()
        lines.append(line)
        lines.extend(u.text for u in pending if u.follows == line)
        pending = [u for u in pending if u.follows != line]

    lines.extend(u.text for u in pending)
    return "".join(line + "\n" for line in lines)


def parse_selector_line(line: str) -> str:
    """Recover the name from a ``name (path) [status]`` selector line."""
    name, _, _ = line.strip().partition(" (")
    return name.strip()

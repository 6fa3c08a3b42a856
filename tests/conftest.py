"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from shellmark.core.services.bookmark_store import BookmarkStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.shell-config."""
    for var in (
        "SHELLMARK_CONFIG",
        "SHELLMARK_STORE",
        "SHELLMARK_LOG_LEVEL",
        "SHELLMARK_LOG_FILE",
        "SHELLMARK_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "user-home"))
    home = tmp_path / "shell-config"
    monkeypatch.setenv("SHELLMARK_HOME", str(home))
    return home


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """Path of a not-yet-created bookmark file."""
    return tmp_path / "bookmarks" / ".bookmarks"


@pytest.fixture
def store(store_file: Path) -> BookmarkStore:
    return BookmarkStore(store_file)


@pytest.fixture
def write_store(store_file: Path):
    """Write raw content to the bookmark file and return its path."""

    def _write(content: str) -> Path:
        store_file.parent.mkdir(parents=True, exist_ok=True)
        store_file.write_text(content, encoding="utf-8")
        return store_file

    return _write


@pytest.fixture
def workdirs(tmp_path: Path) -> Path:
    """A parent directory holding two real project directories."""
    root = tmp_path / "work"
    (root / "proj").mkdir(parents=True)
    (root / "docs").mkdir()
    return root


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() calls made by the CLI or logging tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

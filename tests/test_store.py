"""
Tests for the bookmark store — every operation and its guarantees.
"""

import os
import shutil
from pathlib import Path

import pytest

from shellmark.core.errors import (
    ConflictError,
    InconsistentError,
    InvalidArgumentError,
    NotFoundError,
    StoreIOError,
    StoreNotInitializedError,
)
from shellmark.core.services.bookmark_store import BookmarkStore


class TestAdd:
    def test_round_trip(self, store: BookmarkStore):
        store.add("x", "/tmp/x")
        assert store.get("x").path == "/tmp/x"

    def test_creates_store_lazily(self, store: BookmarkStore, store_file: Path):
        assert not store_file.parent.exists()
        store.add("x", "/tmp/x")
        assert store_file.read_text() == "/tmp/x|x\n"

    def test_appends_in_order(self, store: BookmarkStore, store_file: Path):
        store.add("one", "/a")
        store.add("two", "/b")
        assert store_file.read_text() == "/a|one\n/b|two\n"

    def test_defaults_to_cwd(self, store: BookmarkStore, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        store.add("here")
        assert store.get("here").path == os.getcwd()

    def test_normalizes_name(self, store: BookmarkStore, store_file: Path):
        store.add("My Project", "/p")
        assert store_file.read_text() == "/p|my-project\n"

    def test_does_not_validate_existence(self, store: BookmarkStore, tmp_path: Path):
        missing = str(tmp_path / "not-yet")
        store.add("later", missing)
        assert store.get("later").path == missing

    def test_relative_path_kept(self, store: BookmarkStore):
        store.add("rel", "some/dir")
        assert store.get("rel").path == "some/dir"

    def test_existing_name_conflicts(self, store: BookmarkStore, store_file: Path):
        store.add("x", "/a")
        before = store_file.read_bytes()
        with pytest.raises(ConflictError):
            store.add("x", "/b")
        assert store_file.read_bytes() == before

    def test_conflict_after_normalization(self, store: BookmarkStore):
        store.add("work", "/a")
        with pytest.raises(ConflictError):
            store.add("WORK", "/b")

    def test_force_replaces_and_appends(self, store: BookmarkStore, store_file: Path):
        store.add("x", "/a")
        store.add("y", "/b")
        receipt = store.add("x", "/c", force=True)
        assert receipt.kind == "replace"
        assert store_file.read_text() == "/b|y\n/c|x\n"

    def test_uniqueness_after_force(self, store: BookmarkStore):
        store.add("x", "/a")
        store.add("x", "/b", force=True)
        store.add("x", "/c", force=True)
        assert [e.name for e in store.list()] == ["x"]

    def test_force_collapses_legacy_duplicates(self, store: BookmarkStore, write_store):
        path = write_store("/a|x\n/b|x\n/c|y\n")
        store.add("x", "/d", force=True)
        assert path.read_text() == "/c|y\n/d|x\n"

    @pytest.mark.parametrize("name", ["", "   ", "!!!"])
    def test_invalid_name(self, store: BookmarkStore, store_file: Path, name):
        with pytest.raises(InvalidArgumentError):
            store.add(name, "/a")
        assert not store_file.exists()

    def test_pipe_in_path_rejected(self, store: BookmarkStore):
        with pytest.raises(InvalidArgumentError):
            store.add("x", "/a|b")

    def test_dry_run_does_not_create_store(self, store: BookmarkStore, store_file: Path):
        receipt = store.add("x", "/tmp/x", dry_run=True)
        assert receipt.dry_run is True
        assert receipt.status == "skipped"
        assert "+ /tmp/x|x" in receipt.output
        assert not store_file.exists()
        assert not store_file.parent.exists()

    def test_dry_run_still_reports_conflict(self, store: BookmarkStore):
        store.add("x", "/a")
        with pytest.raises(ConflictError):
            store.add("x", "/b", dry_run=True)

    def test_legacy_spelling_conflicts(self, store: BookmarkStore, write_store):
        path = write_store("/old|Work\n")
        with pytest.raises(ConflictError):
            store.add("work", "/new")
        assert path.read_text() == "/old|Work\n"

    def test_force_replaces_legacy_spelling(self, store: BookmarkStore, write_store):
        path = write_store("/old|Work\n/b|y\n/older|WORK\n")
        store.add("work", "/new", force=True)
        assert path.read_text() == "/b|y\n/new|work\n"

    def test_force_same_line_preview_shows_the_move(self, store: BookmarkStore, write_store):
        path = write_store("/a|x\n/b|y\n")
        receipt = store.add("x", "/a", force=True, dry_run=True)
        # The line order changes, so the preview must show a diff
        assert receipt.metadata["removed"]
        assert receipt.metadata["removed"] == receipt.metadata["added"]
        assert path.read_text() == "/a|x\n/b|y\n"

    def test_force_same_line_at_end_is_unchanged(self, store: BookmarkStore, write_store):
        path = write_store("/b|y\n/a|x\n")
        receipt = store.add("x", "/a", force=True)
        assert receipt.status == "skipped"
        assert path.read_text() == "/b|y\n/a|x\n"

    def test_keeps_unparseable_lines(self, store: BookmarkStore, write_store):
        path = write_store("/odd|path|legacy\n/a|one\n")
        store.add("two", "/b")
        assert path.read_text() == "/odd|path|legacy\n/a|one\n/b|two\n"


class TestGet:
    def test_exact_suffix_match(self, store: BookmarkStore, write_store):
        write_store("/a|foo\n/b|myfoo\n")
        assert store.get("foo").path == "/a"
        assert store.get("myfoo").path == "/b"

    def test_no_prefix_match(self, store: BookmarkStore, write_store):
        write_store("/a|foobar\n")
        with pytest.raises(NotFoundError):
            store.get("foo")

    def test_not_found(self, store: BookmarkStore, write_store):
        write_store("/a|x\n")
        with pytest.raises(NotFoundError) as exc:
            store.get("nope")
        assert not isinstance(exc.value, StoreNotInitializedError)

    def test_missing_store_is_distinct(self, store: BookmarkStore):
        with pytest.raises(StoreNotInitializedError):
            store.get("x")

    def test_lookup_tolerates_case(self, store: BookmarkStore):
        store.add("work", "/a")
        assert store.get("Work").path == "/a"

    def test_legacy_mixed_case_name(self, store: BookmarkStore, write_store):
        write_store("/legacy|MyProj\n")
        assert store.get("MyProj").path == "/legacy"

    def test_empty_name(self, store: BookmarkStore, write_store):
        write_store("/a|x\n")
        with pytest.raises(InvalidArgumentError):
            store.get("")

    def test_resolve(self, store: BookmarkStore):
        store.add("x", "/tmp/x")
        assert store.resolve("x") == "/tmp/x"

    def test_path_with_spaces(self, store: BookmarkStore):
        store.add("spaced", "/tmp/with space")
        assert store.get("spaced").path == "/tmp/with space"


class TestRemove:
    def test_remove(self, store: BookmarkStore, write_store):
        path = write_store("/a|foo\n/b|myfoo\n")
        store.remove("foo")
        assert path.read_text() == "/b|myfoo\n"

    def test_absent_is_not_found_and_file_untouched(self, store: BookmarkStore, write_store):
        path = write_store("/a|foo\n/b|bar\n")
        before = path.read_bytes()
        with pytest.raises(NotFoundError):
            store.remove("nonexistent")
        assert path.read_bytes() == before

    def test_missing_store_does_not_create_it(self, store: BookmarkStore, store_file: Path):
        with pytest.raises(NotFoundError):
            store.remove("x")
        assert not store_file.exists()

    def test_removes_duplicates(self, store: BookmarkStore, write_store):
        path = write_store("/a|x\n/b|y\n/c|x\n")
        store.remove("x")
        assert path.read_text() == "/b|y\n"

    def test_dry_run(self, store: BookmarkStore, write_store):
        path = write_store("/a|x\n")
        receipt = store.remove("x", dry_run=True)
        assert "- /a|x" in receipt.output
        assert path.read_text() == "/a|x\n"

    def test_unrelated_unparseable_line_survives(self, store: BookmarkStore, write_store):
        path = write_store("/a|keep\n/odd|path|legacy\n/c|gone\n")
        store.remove("gone")
        assert path.read_text() == "/a|keep\n/odd|path|legacy\n"

    def test_unparseable_line_after_removed_entry_moves_to_end(
        self, store: BookmarkStore, write_store
    ):
        path = write_store("/a|gone\nno separator here\n/c|keep\n")
        store.remove("gone")
        assert path.read_text() == "/c|keep\nno separator here\n"

    def test_dry_run_lists_kept_lines(self, store: BookmarkStore, write_store):
        write_store("/a|x\n/odd|path|legacy\n")
        receipt = store.remove("x", dry_run=True)
        assert "= /odd|path|legacy" in receipt.output

    def test_last_entry_leaves_empty_store(self, store: BookmarkStore, store_file: Path):
        store.add("x", "/a")
        store.remove("x")
        assert store_file.read_text() == ""
        assert store.list() == []


class TestRename:
    def test_scenario_keeps_order_and_path(self, store: BookmarkStore, write_store):
        path = write_store("/home/u/proj|work\n/home/u/docs|notes\n")
        store.rename("work", "office")
        assert path.read_text() == "/home/u/proj|office\n/home/u/docs|notes\n"

    def test_conflict_leaves_store_unchanged(self, store: BookmarkStore, write_store):
        path = write_store("/a|a\n/b|b\n")
        before = path.read_bytes()
        with pytest.raises(ConflictError):
            store.rename("a", "b")
        assert path.read_bytes() == before

    def test_not_found(self, store: BookmarkStore, write_store):
        write_store("/a|a\n")
        with pytest.raises(NotFoundError):
            store.rename("zzz", "b")

    def test_normalizes_new_name(self, store: BookmarkStore):
        store.add("work", "/a")
        store.rename("work", "Office Space")
        assert store.get("office-space").path == "/a"

    def test_invalid_new_name(self, store: BookmarkStore):
        store.add("work", "/a")
        with pytest.raises(InvalidArgumentError):
            store.rename("work", "???")

    def test_same_name_conflicts(self, store: BookmarkStore):
        store.add("work", "/a")
        with pytest.raises(ConflictError):
            store.rename("work", "work")

    def test_conflicts_with_legacy_spelling(self, store: BookmarkStore, write_store):
        path = write_store("/a|proj\n/old|Work\n")
        with pytest.raises(ConflictError):
            store.rename("proj", "work")
        assert path.read_text() == "/a|proj\n/old|Work\n"

    def test_normalizes_legacy_name_in_place(self, store: BookmarkStore, write_store):
        path = write_store("/old|Work\n/b|y\n")
        store.rename("Work", "work")
        assert path.read_text() == "/old|work\n/b|y\n"

    def test_dry_run(self, store: BookmarkStore, write_store):
        path = write_store("/a|work\n")
        receipt = store.rename("work", "office", dry_run=True)
        assert "- /a|work" in receipt.output
        assert "+ /a|office" in receipt.output
        assert path.read_text() == "/a|work\n"


class TestRenameDirectory:
    def test_moves_directory_and_updates_path(self, store: BookmarkStore, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        store.add("docs", str(workdirs / "docs"))

        store.rename_directory("proj", "project")

        assert not (workdirs / "proj").exists()
        assert (workdirs / "project").is_dir()
        assert store.get("proj").path == str(workdirs / "project")
        # Position preserved
        assert [e.name for e in store.list()] == ["proj", "docs"]

    def test_trailing_slash_in_stored_path(self, store: BookmarkStore, workdirs: Path):
        store.add("proj", str(workdirs / "proj") + "/")
        store.rename_directory("proj", "renamed")
        assert store.get("proj").path == str(workdirs / "renamed")

    def test_unknown_bookmark(self, store: BookmarkStore, write_store):
        write_store("/a|x\n")
        with pytest.raises(NotFoundError):
            store.rename_directory("nope", "new")

    def test_missing_directory(self, store: BookmarkStore, tmp_path: Path):
        store.add("gone", str(tmp_path / "gone"))
        with pytest.raises(NotFoundError):
            store.rename_directory("gone", "new")

    def test_target_exists(self, store: BookmarkStore, store_file: Path, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        before = store_file.read_bytes()
        with pytest.raises(ConflictError):
            store.rename_directory("proj", "docs")
        assert (workdirs / "proj").is_dir()
        assert store_file.read_bytes() == before

    @pytest.mark.parametrize("bad", ["", "a/b", "..", "x|y"])
    def test_invalid_dir_name(self, store: BookmarkStore, workdirs: Path, bad):
        store.add("proj", str(workdirs / "proj"))
        with pytest.raises(InvalidArgumentError):
            store.rename_directory("proj", bad)

    def test_dry_run_moves_nothing(self, store: BookmarkStore, store_file: Path, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        before = store_file.read_bytes()
        receipt = store.rename_directory("proj", "project", dry_run=True)
        assert "mv " in receipt.output
        assert (workdirs / "proj").is_dir()
        assert not (workdirs / "project").exists()
        assert store_file.read_bytes() == before

    def test_store_failure_after_move_is_inconsistent(
        self, store: BookmarkStore, workdirs: Path, monkeypatch
    ):
        store.add("proj", str(workdirs / "proj"))

        def fail_write(entries, path, unparsed=None):
            raise StoreIOError("disk full")

        monkeypatch.setattr("shellmark.core.engine.executor.write_entries", fail_write)

        with pytest.raises(InconsistentError) as exc:
            store.rename_directory("proj", "project")

        assert exc.value.moved_to == str(workdirs / "project")
        assert (workdirs / "project").is_dir()
        # Bookmark still points at the old location
        assert store.get("proj").path == str(workdirs / "proj")

    def test_failed_move_changes_nothing(
        self, store: BookmarkStore, store_file: Path, workdirs: Path, monkeypatch
    ):
        store.add("proj", str(workdirs / "proj"))
        before = store_file.read_bytes()

        def fail_rename(self, target):
            raise OSError("permission denied")

        monkeypatch.setattr(Path, "rename", fail_rename)

        with pytest.raises(StoreIOError) as exc:
            store.rename_directory("proj", "project")
        assert not isinstance(exc.value, InconsistentError)
        assert store_file.read_bytes() == before


class TestList:
    def test_missing_store(self, store: BookmarkStore):
        with pytest.raises(StoreNotInitializedError):
            store.list()

    def test_file_order_and_status(self, store: BookmarkStore, workdirs: Path, tmp_path: Path):
        store.add("proj", str(workdirs / "proj"))
        store.add("ghost", str(tmp_path / "ghost"))
        listed = store.list()
        assert [(e.name, e.active) for e in listed] == [("proj", True), ("ghost", False)]

    def test_status_follows_directory_deletion(self, store: BookmarkStore, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        assert store.list()[0].active is True

        shutil.rmtree(workdirs / "proj")
        assert store.list()[0].active is False

        (workdirs / "proj").mkdir()
        assert store.list()[0].active is True


class TestPrune:
    def test_prunes_only_inactive(self, store: BookmarkStore, workdirs: Path, tmp_path: Path):
        store.add("proj", str(workdirs / "proj"))
        store.add("ghost", str(tmp_path / "ghost"))
        store.add("docs", str(workdirs / "docs"))

        store.prune()

        assert [e.name for e in store.list()] == ["proj", "docs"]

    def test_named_inactive(self, store: BookmarkStore, tmp_path: Path):
        store.add("a", str(tmp_path / "a"))
        store.add("b", str(tmp_path / "b"))
        store.prune(["a"])
        assert [e.name for e in store.list()] == ["b"]

    def test_named_active_conflicts(self, store: BookmarkStore, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        with pytest.raises(ConflictError):
            store.prune(["proj"])

    def test_named_unknown(self, store: BookmarkStore, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        with pytest.raises(NotFoundError):
            store.prune(["nope"])

    def test_nothing_to_prune(self, store: BookmarkStore, store_file: Path, workdirs: Path):
        store.add("proj", str(workdirs / "proj"))
        before = store_file.read_bytes()
        receipt = store.prune()
        assert receipt.status == "skipped"
        assert "No inactive bookmarks" in receipt.output
        assert store_file.read_bytes() == before

    def test_dry_run(self, store: BookmarkStore, store_file: Path, tmp_path: Path):
        store.add("ghost", str(tmp_path / "ghost"))
        before = store_file.read_bytes()
        receipt = store.prune(dry_run=True)
        assert "- " in receipt.output
        assert store_file.read_bytes() == before


def test_store_expands_user(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("HOME", str(tmp_path))
    store = BookmarkStore(Path("~/marks"))
    assert store.path == tmp_path / "marks"

"""Tests for Synchronizer - rebuilding the entries under one prefix."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from fzpath.core.errors import ErrorCode, IndexStoreError
from fzpath.files.ops import AccessDenied, list_immediate
from fzpath.index._internal.db import PathStore
from fzpath.index._internal.sync import Synchronizer, prefix_root
from fzpath.index.ops import working_prefix


def _deny(*denied: Path):  # type: ignore[no-untyped-def]
    blocked = {str(d) for d in denied}

    def fake(directory: str):  # type: ignore[no-untyped-def]
        if directory in blocked:
            raise AccessDenied(13, "Permission denied", directory)
        return list_immediate(directory)

    return fake


def _make_undecodable(directory: Path, name: bytes, *, is_dir: bool = False) -> str:
    """Create an entry whose name is not valid UTF-8; skip where the OS refuses."""
    target = os.path.join(os.fsencode(directory), name)
    try:
        if is_dir:
            os.mkdir(target)
        else:
            with open(target, "wb") as f:
                f.write(b"x")
    except (OSError, ValueError):
        pytest.skip("filesystem rejects non-UTF-8 names")
    return os.fsdecode(target)


class TestPrefixRoot:
    def test_strips_trailing_separator(self) -> None:
        assert prefix_root("/home/me/") == "/home/me"

    def test_filesystem_root(self) -> None:
        assert prefix_root("/") == "/"


class TestCoverage:
    """After a pass the store holds exactly the live tree."""

    def test_indexes_every_file_and_directory(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str]
    ) -> None:
        # Given
        prefix = working_prefix(sample_tree)

        # When
        report = Synchronizer(store).synchronize(prefix)

        # Then
        assert set(store.scan_prefix(prefix)) == sample_paths
        assert report.entries_written == len(sample_paths)
        assert report.skipped_dirs == []
        assert report.prefix == prefix

    def test_second_pass_is_idempotent(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str]
    ) -> None:
        prefix = working_prefix(sample_tree)
        sync = Synchronizer(store)

        sync.synchronize(prefix)
        sync.synchronize(prefix)

        assert set(store.scan_prefix(prefix)) == sample_paths
        assert store.count_prefix(prefix) == len(sample_paths)

    def test_removed_entries_disappear(self, store: PathStore, sample_tree: Path) -> None:
        prefix = working_prefix(sample_tree)
        sync = Synchronizer(store)
        sync.synchronize(prefix)

        shutil.rmtree(sample_tree / "a")
        (sample_tree / "new.txt").write_text("n")
        sync.synchronize(prefix)

        paths = set(store.scan_prefix(prefix))
        assert str(sample_tree / "a" / "b.txt") not in paths
        assert str(sample_tree / "a") not in paths
        assert str(sample_tree / "new.txt") in paths

    @pytest.mark.parametrize("workers", [1, 2, 5])
    def test_result_independent_of_pool_size(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str], workers: int
    ) -> None:
        prefix = working_prefix(sample_tree)

        Synchronizer(store, workers=workers).synchronize(prefix)

        assert set(store.scan_prefix(prefix)) == sample_paths

    def test_empty_working_directory(self, store: PathStore, tmp_path: Path) -> None:
        (tmp_path / "blank").mkdir()
        prefix = working_prefix(tmp_path / "blank")

        report = Synchronizer(store).synchronize(prefix)

        assert report.entries_written == 0
        assert store.count_prefix(prefix) == 0


class TestScope:
    """Only rows under the prefix are touched."""

    def test_other_prefixes_untouched(self, store: PathStore, sample_tree: Path) -> None:
        store.insert_many(["/elsewhere/x", "/elsewhere/y"])

        Synchronizer(store).synchronize(working_prefix(sample_tree / "a"))

        assert store.scan_prefix("/elsewhere/") == ["/elsewhere/x", "/elsewhere/y"]
        assert str(sample_tree / "top.txt") not in store.scan_prefix("/")

    def test_subdirectory_sync_keeps_parent_entries(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str]
    ) -> None:
        Synchronizer(store).synchronize(working_prefix(sample_tree))

        (sample_tree / "a" / "fresh.txt").write_text("f")
        Synchronizer(store).synchronize(working_prefix(sample_tree / "a"))

        paths = set(store.scan_prefix(working_prefix(sample_tree)))
        assert paths == sample_paths | {str(sample_tree / "a" / "fresh.txt")}


class TestAccessDenied:
    """Unreadable subtrees are skipped and keep their previous rows."""

    def test_denied_nested_directory_keeps_old_rows(
        self, store: PathStore, sample_tree: Path
    ) -> None:
        # Given - a full index, then deep/ becomes unreadable
        prefix = working_prefix(sample_tree)
        Synchronizer(store).synchronize(prefix)
        denied = sample_tree / "a" / "deep"

        # When
        with patch("fzpath.index._internal.walker.list_immediate", _deny(denied)):
            report = Synchronizer(store).synchronize(prefix)

        # Then
        paths = set(store.scan_prefix(prefix))
        assert report.skipped_dirs == [str(denied)]
        assert str(denied) in paths
        assert str(denied / "d.log") in paths
        assert str(sample_tree / "a" / "b.txt") in paths

    def test_denied_directory_never_indexed_stays_absent(
        self, store: PathStore, sample_tree: Path
    ) -> None:
        prefix = working_prefix(sample_tree)
        denied = sample_tree / "d"

        with patch("fzpath.index._internal.walker.list_immediate", _deny(denied)):
            report = Synchronizer(store).synchronize(prefix)

        paths = set(store.scan_prefix(prefix))
        assert report.dirs_skipped == 1
        assert str(denied) not in paths
        assert str(denied / "e.txt") not in paths
        assert str(sample_tree / "a" / "deep" / "d.log") in paths

    def test_unreadable_working_directory_fails(self, store: PathStore, sample_tree: Path) -> None:
        with (
            patch("fzpath.index._internal.sync.list_immediate", _deny(sample_tree)),
            pytest.raises(IndexStoreError) as exc_info,
        ):
            Synchronizer(store).synchronize(working_prefix(sample_tree))

        assert exc_info.value.code == ErrorCode.WORKDIR_UNREADABLE

    def test_missing_working_directory_fails(self, store: PathStore, tmp_path: Path) -> None:
        with pytest.raises(IndexStoreError) as exc_info:
            Synchronizer(store).synchronize(working_prefix(tmp_path / "gone"))

        assert exc_info.value.code == ErrorCode.WORKDIR_UNREADABLE


class TestFailures:
    """An unexpected walk or write error leaves the index as it was."""

    def test_walk_error_keeps_previous_rows(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str]
    ) -> None:
        prefix = working_prefix(sample_tree)
        Synchronizer(store).synchronize(prefix)
        broken = str(sample_tree / "d")

        def fake(directory: str):  # type: ignore[no-untyped-def]
            if directory == broken:
                raise OSError(5, "Input/output error", directory)
            return list_immediate(directory)

        with (
            patch("fzpath.index._internal.walker.list_immediate", fake),
            pytest.raises(OSError, match="Input/output"),
        ):
            Synchronizer(store).synchronize(prefix)

        assert set(store.scan_prefix(prefix)) == sample_paths

    def test_staging_error_keeps_previous_rows(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str]
    ) -> None:
        """One writer failing rolls back the whole pass, including the other writer."""
        prefix = working_prefix(sample_tree)
        Synchronizer(store).synchronize(prefix)
        shutil.rmtree(sample_tree / "a")
        real_stage = store.stage_many
        calls: list[int] = []

        def flaky(paths):  # type: ignore[no-untyped-def]
            calls.append(1)
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return real_stage(paths)

        with (
            patch.object(store, "stage_many", flaky),
            pytest.raises(RuntimeError, match="disk full"),
        ):
            Synchronizer(store).synchronize(prefix)

        assert set(store.scan_prefix(prefix)) == sample_paths
        assert store.replace_prefix("/nowhere/") == (0, 0)


class TestUnencodableNames:
    """Names that are not valid UTF-8 are skipped and reported."""

    def test_undecodable_file_does_not_lose_other_rows(
        self, store: PathStore, tmp_path: Path
    ) -> None:
        # Given - an indexed directory, then a file with a non-UTF-8 name appears
        work = tmp_path / "work"
        work.mkdir()
        (work / "keep.txt").write_text("k")
        prefix = working_prefix(work)
        Synchronizer(store).synchronize(prefix)
        bad = _make_undecodable(work, b"bad\xff.txt")

        # When
        report = Synchronizer(store).synchronize(prefix)

        # Then
        assert store.scan_prefix(prefix) == [str(work / "keep.txt")]
        assert report.unencodable == [bad]
        assert report.entries_written == 1

    def test_undecodable_directory_is_skipped_with_contents(
        self, store: PathStore, sample_tree: Path, sample_paths: set[str]
    ) -> None:
        bad_dir = _make_undecodable(sample_tree / "a", b"dir\xfe", is_dir=True)
        with open(os.path.join(os.fsencode(bad_dir), b"inner.txt"), "wb") as f:
            f.write(b"i")
        prefix = working_prefix(sample_tree)

        report = Synchronizer(store).synchronize(prefix)

        assert set(store.scan_prefix(prefix)) == sample_paths
        assert report.unencodable == [bad_dir, os.path.join(bad_dir, "inner.txt")]

    def test_undecodable_working_directory_fails(self, store: PathStore, tmp_path: Path) -> None:
        bad_dir = _make_undecodable(tmp_path, b"work\xff", is_dir=True)

        with pytest.raises(IndexStoreError) as exc_info:
            Synchronizer(store).synchronize(working_prefix(bad_dir))

        assert exc_info.value.code == ErrorCode.UNENCODABLE_PATH


class TestManyDeniedDirectories:
    def test_thousands_of_denied_subtrees_keep_their_rows(
        self, store: PathStore, tmp_path: Path
    ) -> None:
        work = tmp_path / "work"
        dirs = [work / f"locked{i:04d}" for i in range(1200)]
        for d in dirs:
            d.mkdir(parents=True)
            (d / "f").write_text("f")
        (work / "open.txt").write_text("o")
        prefix = working_prefix(work)
        Synchronizer(store).synchronize(prefix)
        (work / "open.txt").unlink()

        with patch("fzpath.index._internal.walker.list_immediate", _deny(*dirs)):
            report = Synchronizer(store).synchronize(prefix)

        assert report.dirs_skipped == 1200
        assert store.count_prefix(prefix) == 2400
        assert str(work / "open.txt") not in store.scan_prefix(prefix)

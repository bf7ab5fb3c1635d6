"""Synchronizer - rebuild the index entries under one working-directory prefix.

Flow for ``synchronize(prefix)``:

1. List the working directory's immediate children on the calling thread.
2. Queue every immediate subdirectory; a fixed pool of walker threads pops
   one subdirectory at a time and walks it to full depth.
3. Merge the per-worker results. Directories that denied access (and
   directories that disappeared mid-walk) are dropped from the new set, as
   are names that are not valid UTF-8.
4. Two concurrent writers stage the new set: one the walked paths, one the
   top-level listing. Staged rows are invisible to search.
5. One transaction deletes the old rows under ``prefix`` (keeping the rows
   of denied subtrees) and moves the staged rows in.

Nothing visible changes until step 5 commits. A walk or a staging write that
fails leaves the index exactly as it was.
"""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor

import structlog

from fzpath.config.constants import DEFAULT_SYNC_WORKERS
from fzpath.core.errors import IndexStoreError
from fzpath.files.ops import (
    AccessDenied,
    DirectoryNotFound,
    is_storable,
    list_immediate,
    printable,
)
from fzpath.index._internal.db.store import PathStore
from fzpath.index._internal.pool import WorkQueue, drain
from fzpath.index._internal.walker import TreeWalker
from fzpath.index.models import SyncReport, WalkResult

logger = structlog.get_logger()


def prefix_root(prefix: str) -> str:
    """Directory a working-directory prefix was built from."""
    return prefix.rstrip(os.sep) or os.sep


class Synchronizer:
    """Reconciles the store with the live tree under a prefix."""

    def __init__(
        self,
        store: PathStore,
        *,
        workers: int = DEFAULT_SYNC_WORKERS,
        walker: TreeWalker | None = None,
    ) -> None:
        self._store = store
        self._workers = workers
        self._walker = walker or TreeWalker()

    def synchronize(self, prefix: str) -> SyncReport:
        start = time.perf_counter()
        root = prefix_root(prefix)
        if not is_storable(prefix):
            raise IndexStoreError.unencodable_path(root)

        try:
            top = list_immediate(root)
        except (AccessDenied, DirectoryNotFound) as e:
            raise IndexStoreError.workdir_unreadable(root, str(e)) from e

        logger.info(
            "sync_started",
            prefix=prefix,
            top_level=len(top.entries),
            subdirectories=len(top.subdirectories),
            workers=self._workers,
        )

        walked = self._walk(top.subdirectories)

        excluded = {*walked.skipped, *walked.vanished}
        unencodable = sorted(
            p for p in {*walked.paths, *top.entries} - excluded if not is_storable(p)
        )
        for path in unencodable:
            logger.warning("sync_unencodable_name", path=printable(path))

        dropped = excluded.union(unencodable)
        discovered = sorted(walked.paths - dropped)
        top_level = [p for p in top.entries if p not in dropped]
        keep = [d for d in walked.skipped if is_storable(d)]

        self._store.clear_staging()
        try:
            self._stage(discovered, top_level)
            removed, written = self._store.replace_prefix(prefix, keep=keep)
        except Exception:
            self._store.clear_staging()
            raise

        report = SyncReport(
            prefix=prefix,
            entries_written=written,
            skipped_dirs=sorted(walked.skipped),
            unencodable=unencodable,
            duration_seconds=time.perf_counter() - start,
        )
        logger.info(
            "sync_completed",
            prefix=prefix,
            removed=removed,
            written=written,
            skipped=report.dirs_skipped,
            vanished=len(walked.vanished),
            unencodable=len(unencodable),
            duration_sec=round(report.duration_seconds, 3),
        )
        return report

    def _walk(self, subdirectories: list[str]) -> WalkResult:
        queue = WorkQueue(subdirectories)
        partials = drain(
            queue,
            self._walker.walk_into,
            WalkResult,
            workers=self._workers,
            name="sync",
        )
        merged = WalkResult()
        for partial in partials:
            merged.merge(partial)
        return merged

    def _stage(self, discovered: list[str], top_level: list[str]) -> int:
        """Stage both sets concurrently, each writer on its own session."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="fzpath-writer") as executor:
            futures = [
                executor.submit(self._store.stage_many, discovered),
                executor.submit(self._store.stage_many, top_level),
            ]
        return sum(f.result() for f in futures)

"""High-level entry point for index operations.

``PathIndex`` owns the index file's lifecycle (create, open, clear) and wires
the storage layer to the synchronizer and the search engine. The CLI talks
only to this class.

Updates are serialized per ``PathIndex`` instance by ``_update_lock``. Two
separate processes updating the same index are serialized by SQLite's write
lock instead; each of their writers waits out the busy timeout.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from pathlib import Path

import structlog

from fzpath.config.constants import SQLITE_SIDE_SUFFIXES
from fzpath.config.models import FzPathConfig
from fzpath.core.errors import IndexStoreError
from fzpath.files.ops import delete_file, delete_recursive, exists
from fzpath.index._internal.db import Database, PathStore
from fzpath.index._internal.search import SearchEngine
from fzpath.index._internal.sync import Synchronizer
from fzpath.index.models import ClearResult, SyncReport

logger = structlog.get_logger()


def working_prefix(directory: str | os.PathLike[str] | None = None) -> str:
    """Absolute form of ``directory`` (default: cwd) ending in a separator."""
    path = os.path.abspath(directory if directory is not None else os.getcwd())
    return path if path.endswith(os.sep) else path + os.sep


class PathIndex:
    """The on-disk path index described by a loaded configuration.

    Usage::

        index = PathIndex(load_config())
        index.create()
        index.update(working_prefix())
        hits = index.search(working_prefix(), ["report"])
    """

    def __init__(self, config: FzPathConfig) -> None:
        self._config = config
        self._update_lock = threading.Lock()

    @property
    def data_dir(self) -> Path:
        return Path(self._config.index.data_dir)

    @property
    def db_path(self) -> Path:
        return self._config.index.db_path

    def exists(self) -> bool:
        return self.db_path.is_file()

    def create(self) -> Path:
        """Create an empty index. Refuses to touch an existing one."""
        if self.exists():
            raise IndexStoreError.already_exists(str(self.db_path))
        self._initialize()
        logger.info("index_created", db_path=str(self.db_path))
        return self.db_path

    def update(self, prefix: str) -> SyncReport:
        """Rebuild the entries under ``prefix`` from the live filesystem."""
        with self._update_lock, self._store() as store:
            synchronizer = Synchronizer(store, workers=self._config.sync.workers)
            return synchronizer.synchronize(prefix)

    def search(self, prefix: str, terms: Sequence[str]) -> list[str]:
        """Paths under ``prefix``, relative to it, containing every term."""
        with self._store() as store:
            engine = SearchEngine(
                store,
                workers=self._config.search.workers,
                segment_size=self._config.search.segment_size,
            )
            return engine.search(prefix, terms)

    def count(self, prefix: str | None = None) -> int:
        """Number of indexed paths, optionally limited to ``prefix``."""
        with self._store() as store:
            return store.count() if prefix is None else store.count_prefix(prefix)

    def clear(self, *, delete: bool = False, force: bool = False) -> ClearResult:
        """Empty the index, or remove its whole data directory.

        Without ``delete`` the index file (and SQLite's side files) is removed
        and an empty index is created in its place.

        With ``delete`` the data directory goes away entirely. If it holds
        anything the index did not create, the call refuses unless ``force``.
        """
        self._require()

        if delete:
            others = self._unrelated_entries()
            if others and not force:
                raise IndexStoreError.location_not_empty(str(self.data_dir), others)
            delete_recursive(str(self.data_dir))
            logger.info("index_dir_deleted", data_dir=str(self.data_dir), unrelated=len(others))
            return ClearResult(
                db_path=str(self.db_path),
                deleted_dir=True,
                recreated=False,
                removed=[str(self.data_dir)],
            )

        removed = [str(p) for p in self._owned_files() if exists(str(p))]
        for path in removed:
            delete_file(path)
        self._initialize()
        logger.info("index_cleared", db_path=str(self.db_path), removed=len(removed))
        return ClearResult(
            db_path=str(self.db_path),
            deleted_dir=False,
            recreated=True,
            removed=removed,
        )

    def _require(self) -> None:
        if not self.exists():
            raise IndexStoreError.not_found(str(self.db_path))

    def _open(self) -> Database:
        db_config = self._config.database
        return Database(
            self.db_path,
            max_retries=db_config.max_retries,
            retry_base_delay=db_config.retry_base_delay_sec,
            busy_timeout_ms=db_config.busy_timeout_ms,
        )

    def _initialize(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        db = self._open()
        try:
            db.create_all()
        finally:
            db.close()

    @contextmanager
    def _store(self) -> Generator[PathStore, None, None]:
        self._require()
        db = self._open()
        try:
            db.create_all()
            yield PathStore(db)
        finally:
            db.close()

    def _owned_files(self) -> list[Path]:
        return [self.db_path] + [
            self.db_path.with_name(self.db_path.name + suffix) for suffix in SQLITE_SIDE_SUFFIXES
        ]

    def _unrelated_entries(self) -> list[str]:
        owned = {p.name for p in self._owned_files()}
        return sorted(name for name in os.listdir(self.data_dir) if name not in owned)

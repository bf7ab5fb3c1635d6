"""PathStore - the persisted set of indexed paths.

All prefix operations compare the leading characters of ``path`` exactly
(``substr(path, 1, n) = prefix``) instead of using ``LIKE``, so matching is
case-sensitive and ``%`` or ``_`` inside real path names never act as
wildcards.

Subtrees to preserve during a prefix delete go through a per-connection
temporary table and one ``NOT EXISTS`` test, so the statement size does not
grow with the number of preserved directories.

Every method opens its own session. A store object can be shared between
threads; its sessions and connections cannot.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from typing import Any

import structlog
from sqlalchemy import (
    ColumnElement,
    Connection,
    String,
    and_,
    column,
    delete,
    func,
    insert,
    or_,
    table,
    text,
)
from sqlalchemy import select as sa_select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import select

from fzpath.index._internal.db.database import Database
from fzpath.index.models import IndexedPath, StagedPath

logger = structlog.get_logger()

_indexed = IndexedPath.__table__  # type: ignore[attr-defined]
_staged = StagedPath.__table__  # type: ignore[attr-defined]

_keep = table("fzpath_keep", column("dir", String))
_CREATE_KEEP = "CREATE TEMP TABLE IF NOT EXISTS fzpath_keep (dir TEXT PRIMARY KEY)"


def _under(prefix: str) -> ColumnElement[bool]:
    """Rows whose path starts with ``prefix``."""
    return func.substr(IndexedPath.path, 1, len(prefix)) == prefix


def _ancestors(path: str) -> Iterator[str]:
    parent = os.path.dirname(path)
    while parent != path:
        yield parent
        path, parent = parent, os.path.dirname(parent)


def outermost(directories: Iterable[str]) -> list[str]:
    """Drop every directory that sits inside another one in the list."""
    kept: set[str] = set()
    for d in sorted({d.rstrip(os.sep) or os.sep for d in directories}, key=len):
        if not any(a in kept for a in _ancestors(d)):
            kept.add(d)
    return sorted(kept)


def _delete_under(conn: Connection, prefix: str, keep: Iterable[str]) -> int:
    """Delete rows under ``prefix`` except ``keep`` subtrees, on ``conn``."""
    condition = _under(prefix)
    kept = outermost(keep)
    if kept:
        conn.execute(text(_CREATE_KEEP))
        conn.execute(delete(_keep))
        conn.execute(insert(_keep), [{"dir": d} for d in kept])
        k = _keep.c.dir
        inside = or_(
            IndexedPath.path == k,
            func.substr(IndexedPath.path, 1, func.length(k) + 1) == k + os.sep,
        )
        preserved = sa_select(k).where(inside).correlate(_indexed).exists()
        condition = and_(condition, ~preserved)

    result = conn.execute(delete(IndexedPath).where(condition))
    return int(result.rowcount)


def _count(conn: Connection, tbl: Any) -> int:
    return int(conn.execute(sa_select(func.count()).select_from(tbl)).scalar_one())


class PathStore:
    """Insert, delete and prefix-scan indexed paths."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db

    def insert_if_absent(self, path: str) -> bool:
        """Insert one path; returns False when it was already present."""
        return self.insert_many([path]) == 1

    def insert_many(self, paths: Iterable[str]) -> int:
        """Insert paths with insert-or-ignore semantics.

        Runs in its own BEGIN IMMEDIATE transaction so two writer threads can
        call this concurrently. Returns the number of rows actually added.
        """
        return self._insert_ignore(_indexed, paths, event="store_insert")

    def stage_many(self, paths: Iterable[str]) -> int:
        """Write paths to the staging table; search does not see them yet."""
        return self._insert_ignore(_staged, paths, event="store_stage")

    def clear_staging(self) -> None:
        with self._db.immediate_transaction() as session:
            session.connection().execute(delete(_staged))

    def replace_prefix(self, prefix: str, keep: Iterable[str] = ()) -> tuple[int, int]:
        """Swap the rows under ``prefix`` for the staged rows, atomically.

        Deletes what is under ``prefix`` (except the ``keep`` subtrees), moves
        every staged row into the index in staging order and empties the
        staging table, all in one transaction. Returns ``(removed, added)``.
        """
        move = (
            insert(_indexed)
            .prefix_with("OR IGNORE")
            .from_select(["path"], sa_select(_staged.c.path).order_by(_staged.c.id))
        )
        with self._db.immediate_transaction() as session:
            conn = session.connection()
            removed = _delete_under(conn, prefix, keep)
            before = _count(conn, _indexed)
            conn.execute(move)
            added = _count(conn, _indexed) - before
            conn.execute(delete(_staged))

        logger.debug("store_replace_prefix", prefix=prefix, removed=removed, added=added)
        return removed, added

    def delete_path(self, path: str) -> int:
        """Delete one exact path, returning rows removed."""
        with self._db.immediate_transaction() as session:
            result = session.connection().execute(
                delete(IndexedPath).where(IndexedPath.path == path)
            )
        return int(result.rowcount)

    def delete_prefix(self, prefix: str, keep: Iterable[str] = ()) -> int:
        """Delete every path under ``prefix`` except the ``keep`` subtrees.

        Each entry of ``keep`` is a directory; the directory row and all rows
        beneath it survive.
        """
        with self._db.immediate_transaction() as session:
            removed = _delete_under(session.connection(), prefix, keep)

        logger.debug("store_delete_prefix", prefix=prefix, removed=removed)
        return removed

    def scan_prefix(self, prefix: str) -> list[str]:
        """All paths under ``prefix`` in insertion order."""
        with self._db.session() as session:
            stmt = select(IndexedPath.path).where(_under(prefix)).order_by(IndexedPath.id)
            return list(session.exec(stmt).all())

    def count_prefix(self, prefix: str) -> int:
        with self._db.session() as session:
            stmt = select(func.count()).select_from(IndexedPath).where(_under(prefix))
            return int(session.exec(stmt).one())

    def count(self) -> int:
        with self._db.session() as session:
            stmt = select(func.count()).select_from(IndexedPath)
            return int(session.exec(stmt).one())

    def _insert_ignore(self, tbl: Any, paths: Iterable[str], *, event: str) -> int:
        rows = [{"path": p} for p in paths]
        if not rows:
            return 0

        stmt = sqlite_insert(tbl).on_conflict_do_nothing(index_elements=["path"])
        with self._db.immediate_transaction() as session:
            conn = session.connection()
            before = _count(conn, tbl)
            conn.execute(stmt, rows)
            added = _count(conn, tbl) - before

        logger.debug(event, submitted=len(rows), added=added)
        return added

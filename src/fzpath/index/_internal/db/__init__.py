"""Database layer for the index."""

from fzpath.index._internal.db.database import Database
from fzpath.index._internal.db.store import PathStore

__all__ = [
    "Database",
    "PathStore",
]

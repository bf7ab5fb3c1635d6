"""Index internals: storage, walking, synchronization and search."""

from fzpath.index._internal.db import Database, PathStore
from fzpath.index._internal.pool import WorkQueue, drain
from fzpath.index._internal.search import SearchEngine, partition
from fzpath.index._internal.sync import Synchronizer
from fzpath.index._internal.walker import TreeWalker

__all__ = [
    "Database",
    "PathStore",
    "SearchEngine",
    "Synchronizer",
    "TreeWalker",
    "WorkQueue",
    "drain",
    "partition",
]

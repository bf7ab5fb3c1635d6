"""Path index: persisted set of absolute paths with sync and search."""

from fzpath.index.models import ClearResult, IndexedPath, SyncReport, WalkResult
from fzpath.index.ops import PathIndex, working_prefix

__all__ = [
    "ClearResult",
    "IndexedPath",
    "PathIndex",
    "SyncReport",
    "WalkResult",
    "working_prefix",
]

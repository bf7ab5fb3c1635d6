"""SearchEngine - segmented, multi-threaded substring search over indexed paths."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from fzpath.config.constants import DEFAULT_SEARCH_WORKERS, DEFAULT_SEGMENT_SIZE
from fzpath.core.errors import IndexStoreError
from fzpath.files.ops import is_storable
from fzpath.index._internal.db.store import PathStore
from fzpath.index._internal.pool import WorkQueue, drain

logger = structlog.get_logger()


def partition(paths: Sequence[str], size: int = DEFAULT_SEGMENT_SIZE) -> list[list[str]]:
    """Split ``paths`` into contiguous segments of at most ``size`` entries."""
    if size < 1:
        raise ValueError(f"segment size must be >= 1, got {size}")
    return [list(paths[i : i + size]) for i in range(0, len(paths), size)]


def normalize_terms(terms: Sequence[str]) -> list[str]:
    """Lower-case the query terms, rejecting empty queries."""
    if not terms:
        raise IndexStoreError.invalid_query("at least one search term is required")
    if any(not t.strip() for t in terms):
        raise IndexStoreError.invalid_query("search terms must not be blank")
    return [t.lower() for t in terms]


def matches(path: str, needles: Sequence[str]) -> bool:
    """True if every lower-cased needle occurs in ``path`` ignoring case."""
    haystack = path.lower()
    return all(n in haystack for n in needles)


class SearchEngine:
    """Finds indexed paths under a prefix containing every query term.

    Result order follows worker completion and is not stable between runs;
    treat it as a set.
    """

    def __init__(
        self,
        store: PathStore,
        *,
        workers: int = DEFAULT_SEARCH_WORKERS,
        segment_size: int = DEFAULT_SEGMENT_SIZE,
    ) -> None:
        self._store = store
        self._workers = workers
        self._segment_size = segment_size

    def search(self, prefix: str, terms: Sequence[str]) -> list[str]:
        """Relative paths (prefix stripped) under ``prefix`` matching all terms."""
        needles = normalize_terms(terms)
        if not is_storable(prefix):
            raise IndexStoreError.unencodable_path(prefix)
        relative = [p[len(prefix) :] for p in self._store.scan_prefix(prefix)]
        segments = partition(relative, self._segment_size)

        def scan(segment: list[str], found: list[str]) -> None:
            found.extend(p for p in segment if matches(p, needles))

        partials = drain(
            WorkQueue(segments),
            scan,
            list,
            workers=self._workers,
            name="search",
        )
        results = [p for part in partials for p in part]

        logger.info(
            "search_completed",
            prefix=prefix,
            terms=len(needles),
            candidates=len(relative),
            segments=len(segments),
            matches=len(results),
        )
        return results

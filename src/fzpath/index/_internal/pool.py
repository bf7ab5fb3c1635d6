"""Fixed-size worker pool draining a shared work queue.

Both synchronization (one item = one top-level subdirectory) and search
(one item = one segment of paths) use the same shape:

- a ``WorkQueue`` whose ``pop()`` is a single check-and-remove under a lock,
  so two workers can never claim the same item and a worker sees "empty"
  exactly once;
- ``drain()`` starts ``workers`` threads, each looping on ``pop()`` and
  folding results into its own accumulator;
- accumulators are returned after every thread has joined. A worker
  exception is re-raised on the calling thread at that point, after the
  other workers finished.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


class WorkQueue(Generic[T]):
    """Mutex-guarded FIFO of pending work items."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: deque[T] = deque(items)
        self._lock = threading.Lock()

    def push(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def pop(self) -> T | None:
        """Remove and return the next item, or None once the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def drain(
    queue: WorkQueue[T],
    handle: Callable[[T, R], None],
    make_acc: Callable[[], R],
    *,
    workers: int,
    name: str,
) -> list[R]:
    """Process every queued item with ``workers`` threads.

    ``handle(item, acc)`` processes one item into the worker's own
    accumulator. Returns one accumulator per worker, in worker start order.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    def run(worker_id: int) -> R:
        acc = make_acc()
        processed = 0
        while (item := queue.pop()) is not None:
            handle(item, acc)
            processed += 1
        logger.debug("worker_done", pool=name, worker=worker_id, items=processed)
        return acc

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"fzpath-{name}") as executor:
        futures = [executor.submit(run, i) for i in range(workers)]
        wait(futures)

    # result() re-raises the first worker failure after all workers joined
    return [f.result() for f in futures]

"""Recursive directory enumeration tolerant of access-denied subtrees."""

from __future__ import annotations

import structlog

from fzpath.files.ops import AccessDenied, DirectoryNotFound, list_immediate
from fzpath.index.models import WalkResult

logger = structlog.get_logger()


class TreeWalker:
    """Collects every file and directory beneath a root.

    A directory that refuses listing is recorded in ``WalkResult.skipped``
    and nothing beneath it is visited; its siblings still are. Any other
    ``OSError`` propagates to the caller, except a directory deleted mid-walk,
    which is recorded in ``WalkResult.vanished``.

    Iterative (explicit stack) so depth is bounded by memory, not by the
    interpreter's recursion limit.
    """

    def walk(self, directory: str) -> WalkResult:
        """Walk ``directory``; the root itself is not included in the result."""
        result = WalkResult()
        self.walk_into(directory, result)
        return result

    def walk_into(self, directory: str, result: WalkResult) -> None:
        """Walk ``directory`` accumulating into an existing result."""
        stack = [directory]
        while stack:
            current = stack.pop()
            try:
                listing = list_immediate(current)
            except AccessDenied as e:
                logger.warning("walk_access_denied", directory=current, error=str(e))
                result.skipped.append(current)
                continue
            except DirectoryNotFound:
                # Removed while the walk was running; it no longer belongs in the index
                logger.info("walk_directory_vanished", directory=current)
                result.vanished.append(current)
                continue

            result.paths.update(listing.files)
            result.paths.update(listing.subdirectories)
            stack.extend(reversed(listing.subdirectories))

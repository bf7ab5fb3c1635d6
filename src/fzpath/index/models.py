"""SQLModel table definition and result types for the path index.

Each ``indexed_paths`` row is an absolute, OS-native path of a file or
directory that existed under some working tree when it was last synchronized.
``staged_paths`` only holds rows while a synchronization is in flight.
"""

from dataclasses import dataclass, field

from sqlmodel import Field, SQLModel


class IndexedPath(SQLModel, table=True):
    """A single indexed file or directory path."""

    __tablename__ = "indexed_paths"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    path: str = Field(unique=True, index=True)


class StagedPath(SQLModel, table=True):
    """A path written by a running synchronization, not yet visible to search.

    Rows move into ``indexed_paths`` in the same transaction that removes the
    old entries, then the table is emptied again.
    """

    __tablename__ = "staged_paths"

    id: int | None = Field(default=None, primary_key=True)
    path: str = Field(unique=True)


@dataclass
class WalkResult:
    """Paths discovered under one or more roots.

    ``skipped`` holds directories that denied access; ``vanished`` holds
    directories that were listed by their parent but gone when visited.
    """

    paths: set[str] = field(default_factory=set)
    skipped: list[str] = field(default_factory=list)
    vanished: list[str] = field(default_factory=list)

    def merge(self, other: "WalkResult") -> "WalkResult":
        """Fold ``other`` into this result and return self."""
        self.paths |= other.paths
        self.skipped.extend(other.skipped)
        self.vanished.extend(other.vanished)
        return self


@dataclass
class SyncReport:
    """Outcome of one synchronization pass."""

    prefix: str
    entries_written: int
    skipped_dirs: list[str] = field(default_factory=list)
    unencodable: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def dirs_skipped(self) -> int:
        return len(self.skipped_dirs)


@dataclass
class ClearResult:
    """Outcome of clearing the index."""

    db_path: str
    deleted_dir: bool
    recreated: bool
    removed: list[str] = field(default_factory=list)

"""Shared fixtures for index tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from fzpath.index._internal.db import Database, PathStore


@pytest.fixture
def temp_db(tmp_path: Path) -> Generator[Database, None, None]:
    """Create a temporary database with schema."""
    db = Database(tmp_path / "test.db")
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def store(temp_db: Database) -> PathStore:
    return PathStore(temp_db)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """A working directory with nested files::

        work/
            top.txt
            a/
                b.txt
                c.txt
                deep/
                    d.log
            d/
                e.txt
            empty/
    """
    root = tmp_path / "work"
    (root / "a" / "deep").mkdir(parents=True)
    (root / "d").mkdir()
    (root / "empty").mkdir()
    (root / "top.txt").write_text("t")
    (root / "a" / "b.txt").write_text("b")
    (root / "a" / "c.txt").write_text("c")
    (root / "a" / "deep" / "d.log").write_text("d")
    (root / "d" / "e.txt").write_text("e")
    return root


@pytest.fixture
def sample_paths(sample_tree: Path) -> set[str]:
    """Every file and directory strictly beneath ``sample_tree``."""
    found: set[str] = set()
    for dirpath, dirnames, filenames in os.walk(sample_tree):
        for name in [*dirnames, *filenames]:
            found.add(str(Path(dirpath) / name))
    return found

"""Filesystem primitives used by the synchronizer and the clear command.

Pure filesystem I/O. No index dependency.

Listing distinguishes a directory that denies access (``AccessDenied``) from
one that does not exist (``DirectoryNotFound``); both subclass the matching
builtin ``OSError`` so callers can catch either the specific or the general
type. Symlinks are never followed: a symlink to a directory is listed as a
plain entry, not as a subdirectory.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field


class AccessDenied(PermissionError):
    """Directory listing refused by the OS."""


class DirectoryNotFound(FileNotFoundError):
    """Directory vanished or never existed."""


@dataclass
class DirectoryListing:
    """Immediate children of one directory, as absolute paths."""

    directory: str
    files: list[str] = field(default_factory=list)
    subdirectories: list[str] = field(default_factory=list)

    @property
    def entries(self) -> list[str]:
        return [*self.files, *self.subdirectories]


def list_immediate(directory: str) -> DirectoryListing:
    """List files and subdirectories directly inside ``directory``.

    Raises:
        AccessDenied: The OS refused to list the directory.
        DirectoryNotFound: The directory does not exist.
    """
    listing = DirectoryListing(directory=directory)
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except PermissionError as e:
        raise AccessDenied(e.errno, e.strerror, directory) from e
    except FileNotFoundError as e:
        raise DirectoryNotFound(e.errno, e.strerror, directory) from e

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            listing.subdirectories.append(entry.path)
        else:
            listing.files.append(entry.path)
    return listing


def list_immediate_files(directory: str) -> list[str]:
    return list_immediate(directory).files


def list_immediate_subdirectories(directory: str) -> list[str]:
    return list_immediate(directory).subdirectories


def exists(path: str) -> bool:
    """True if anything (including a dangling symlink) is at ``path``."""
    return os.path.lexists(path)


def delete_recursive(directory: str) -> None:
    """Remove ``directory`` and everything in it."""
    try:
        shutil.rmtree(directory)
    except FileNotFoundError as e:
        raise DirectoryNotFound(e.errno, e.strerror, directory) from e


def delete_file(path: str) -> bool:
    """Remove one file. Returns False if nothing was there."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    return True


def is_storable(path: str) -> bool:
    """False for names holding bytes that did not decode as UTF-8.

    Such names reach Python as lone surrogates (``surrogateescape``) and
    cannot be written to a UTF-8 text column.
    """
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def printable(path: str) -> str:
    """``path`` with undecodable bytes shown as backslash escapes."""
    return path.encode("utf-8", "backslashreplace").decode("utf-8")

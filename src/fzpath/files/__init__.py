"""Filesystem boundary - listing, existence checks, deletion."""

from fzpath.files.ops import (
    AccessDenied,
    DirectoryListing,
    DirectoryNotFound,
    delete_file,
    delete_recursive,
    exists,
    is_storable,
    list_immediate,
    list_immediate_files,
    list_immediate_subdirectories,
    printable,
)

__all__ = [
    "AccessDenied",
    "DirectoryListing",
    "DirectoryNotFound",
    "delete_file",
    "delete_recursive",
    "exists",
    "is_storable",
    "list_immediate",
    "list_immediate_files",
    "list_immediate_subdirectories",
    "printable",
]

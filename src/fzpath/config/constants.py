"""Configuration constants.

Values here are defaults and fixed names. Pool sizes and the segment size are
re-exposed through config models so they can be tuned per machine.
"""

APP_NAME = "fzpath"

# =============================================================================
# Storage
# =============================================================================

DEFAULT_DATA_DIR = "~/.local/share/fzpath"
"""Per-user directory holding the index file."""

INDEX_DB_NAME = "index.db"
"""SQLite file name inside the data directory."""

SQLITE_SIDE_SUFFIXES = ("-wal", "-shm", "-journal")
"""Files SQLite creates next to the database; they belong to the index."""

GLOBAL_CONFIG_FILE = "~/.config/fzpath/config.yaml"

# =============================================================================
# Work distribution
# =============================================================================

DEFAULT_SYNC_WORKERS = 3
"""Threads walking top-level subdirectories during update-index."""

DEFAULT_SEARCH_WORKERS = 3
"""Threads scanning segments during search."""

DEFAULT_SEGMENT_SIZE = 50
"""Maximum paths in one search segment."""

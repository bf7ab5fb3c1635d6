"""Core module exports."""

from fzpath.core.errors import (
    ConfigError,
    ErrorCode,
    FzPathError,
    IndexStoreError,
    InternalError,
)
from fzpath.core.logging import (
    configure_logging,
    current_run_id,
    end_run,
    get_logger,
    log_file,
    start_run,
)
from fzpath.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "FzPathError",
    "ConfigError",
    "ErrorCode",
    "IndexStoreError",
    "InternalError",
    # Logging
    "configure_logging",
    "current_run_id",
    "end_run",
    "get_logger",
    "log_file",
    "start_run",
    # Progress
    "pluralize",
    "spinner",
    "status",
]

"""Config module exports."""

from fzpath.config.loader import load_config
from fzpath.config.models import (
    DatabaseConfig,
    FzPathConfig,
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    SearchConfig,
    SyncConfig,
)

__all__ = [
    "load_config",
    "FzPathConfig",
    "DatabaseConfig",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SearchConfig",
    "SyncConfig",
]

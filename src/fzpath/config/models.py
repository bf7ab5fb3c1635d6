"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (FZPATH__SECTION__KEY)
3. Global YAML (~/.config/fzpath/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    FZPATH__<SECTION>__<KEY>=<VALUE>

Examples:
    FZPATH__LOGGING__LEVEL=DEBUG
    FZPATH__INDEX__DATA_DIR=/tmp/fzpath
    FZPATH__SEARCH__WORKERS=1
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from fzpath.config.constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_SEARCH_WORKERS,
    DEFAULT_SEGMENT_SIZE,
    DEFAULT_SYNC_WORKERS,
    INDEX_DB_NAME,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        FZPATH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. The CLI's -v flag forces DEBUG.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Index storage location.

    Env vars:
        FZPATH__INDEX__DATA_DIR: Directory holding the index file
        FZPATH__INDEX__DB_NAME: Index file name inside data_dir
    """

    data_dir: str = Field(
        default=DEFAULT_DATA_DIR,
        validate_default=True,
        description="Directory holding the index. `clear-index --delete` removes it entirely.",
    )
    db_name: str = Field(
        default=INDEX_DB_NAME,
        description="SQLite file name inside data_dir.",
    )

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: str) -> str:
        return str(Path(v).expanduser())

    @field_validator("db_name")
    @classmethod
    def validate_db_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError(f"db_name must be a bare file name, got {v!r}")
        return v

    @property
    def db_path(self) -> Path:
        return Path(self.data_dir) / self.db_name


class SyncConfig(BaseModel):
    """Synchronization (update-index) configuration.

    Env vars:
        FZPATH__SYNC__WORKERS: Threads walking subdirectories in parallel
    """

    workers: int = Field(
        default=DEFAULT_SYNC_WORKERS,
        ge=1,
        description="Directory walker threads. Fixed pool, not scaled to CPU count.",
    )


class SearchConfig(BaseModel):
    """Search configuration.

    Env vars:
        FZPATH__SEARCH__WORKERS: Threads scanning segments in parallel
        FZPATH__SEARCH__SEGMENT_SIZE: Paths per unit of search work
    """

    workers: int = Field(
        default=DEFAULT_SEARCH_WORKERS,
        ge=1,
        description="Segment search threads.",
    )
    segment_size: int = Field(
        default=DEFAULT_SEGMENT_SIZE,
        ge=1,
        description="Maximum paths per segment handed to one worker.",
    )


class DatabaseConfig(BaseModel):
    """Database connection configuration.

    Env vars:
        FZPATH__DATABASE__BUSY_TIMEOUT_MS: SQLite busy timeout
        FZPATH__DATABASE__MAX_RETRIES: Max retry attempts for locked DB
    """

    busy_timeout_ms: int = Field(
        default=30000,
        ge=0,
        description="SQLite busy timeout (ms). How long a writer waits for the lock.",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Max retry attempts when BEGIN IMMEDIATE reports a locked database.",
    )
    retry_base_delay_sec: float = Field(
        default=0.1,
        ge=0,
        description="Base delay between retries (exponential backoff).",
    )


class FzPathConfig(BaseModel):
    """Root configuration for fzpath."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

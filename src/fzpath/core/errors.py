"""fzpath error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index (3xxx)
    INDEX_NOT_FOUND = 3001
    INDEX_ALREADY_EXISTS = 3002
    INDEX_LOCATION_NOT_EMPTY = 3003
    WORKDIR_UNREADABLE = 3004
    INVALID_QUERY = 3005
    UNENCODABLE_PATH = 3006

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class FzPathError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INDEX_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(FzPathError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class IndexStoreError(FzPathError):
    """User-facing index lifecycle and query errors."""

    @classmethod
    def not_found(cls, db_path: str) -> "IndexStoreError":
        return cls(
            code=ErrorCode.INDEX_NOT_FOUND,
            message="No index found. Create one first with `fzp create-index`.",
            details={"db_path": db_path},
        )

    @classmethod
    def already_exists(cls, db_path: str) -> "IndexStoreError":
        return cls(
            code=ErrorCode.INDEX_ALREADY_EXISTS,
            message=(
                f"Index already exists at {db_path}. "
                "Remove it with `fzp clear-index --delete`, then run this command again."
            ),
            details={"db_path": db_path},
        )

    @classmethod
    def location_not_empty(cls, data_dir: str, others: list[str]) -> "IndexStoreError":
        return cls(
            code=ErrorCode.INDEX_LOCATION_NOT_EMPTY,
            message=(
                f"{data_dir} contains {len(others)} unrelated item(s); "
                "pass --force to delete them along with the index."
            ),
            details={"data_dir": data_dir, "others": others},
        )

    @classmethod
    def workdir_unreadable(cls, directory: str, reason: str) -> "IndexStoreError":
        return cls(
            code=ErrorCode.WORKDIR_UNREADABLE,
            message=f"Cannot list working directory {directory}: {reason}",
            details={"directory": directory, "reason": reason},
        )

    @classmethod
    def invalid_query(cls, reason: str) -> "IndexStoreError":
        return cls(
            code=ErrorCode.INVALID_QUERY,
            message=f"Invalid search query: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def unencodable_path(cls, path: str) -> "IndexStoreError":
        shown = path.encode("utf-8", "backslashreplace").decode("utf-8")
        return cls(
            code=ErrorCode.UNENCODABLE_PATH,
            message=f"Path is not valid UTF-8 and cannot be indexed: {shown}",
            details={"path": shown},
        )


class InternalError(FzPathError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

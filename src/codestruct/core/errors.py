"""codestruct error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Language / registry
- 4xxx: Parse
- 5xxx: Match (per-match, never propagated past a file)
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

    # Language / registry (3xxx)
    UNSUPPORTED_LANGUAGE = 3001
    QUERY_COMPILE_ERROR = 3002
    DUPLICATE_EXTENSION = 3003
    GRAMMAR_UNAVAILABLE = 3004

    # Parse (4xxx)
    PARSE_FAILED = 4001
    FILE_TOO_LARGE = 4002

    # Match (5xxx)
    EMPTY_MATCH = 5001
    MISSING_NODE = 5002
    NO_NAME = 5003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_TIMEOUT = 9002


@dataclass(frozen=True, slots=True)
class CodeStructError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CodeStructError):
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


class StructureError(CodeStructError):
    """Whole-file and registration-time extraction errors."""

    @classmethod
    def unsupported_language(cls, path: str) -> "StructureError":
        return cls(
            code=ErrorCode.UNSUPPORTED_LANGUAGE,
            message=f"No language registered for {path}",
            details={"path": path},
        )

    @classmethod
    def unknown_language(cls, language: str) -> "StructureError":
        return cls(
            code=ErrorCode.UNSUPPORTED_LANGUAGE,
            message=f"Unknown language: {language}",
            details={"language": language},
        )

    @classmethod
    def parse_failed(cls, path: str, language: str) -> "StructureError":
        return cls(
            code=ErrorCode.PARSE_FAILED,
            message=f"Parser produced no tree for {path}",
            details={"path": path, "language": language},
        )

    @classmethod
    def file_too_large(cls, path: str, size: int, limit: int) -> "StructureError":
        return cls(
            code=ErrorCode.FILE_TOO_LARGE,
            message=f"{path} is {size} bytes, limit is {limit}",
            details={"path": path, "size": size, "limit": limit},
        )

    @classmethod
    def query_compile(cls, language: str, reason: str) -> "StructureError":
        return cls(
            code=ErrorCode.QUERY_COMPILE_ERROR,
            message=f"Definition query for {language} does not compile: {reason}",
            details={"language": language, "reason": reason},
        )

    @classmethod
    def duplicate_extension(cls, ext: str, first: str, second: str) -> "StructureError":
        return cls(
            code=ErrorCode.DUPLICATE_EXTENSION,
            message=f"Extension '{ext}' claimed by both {first} and {second}",
            details={"extension": ext, "languages": [first, second]},
        )

    @classmethod
    def grammar_unavailable(cls, language: str, module: str) -> "StructureError":
        return cls(
            code=ErrorCode.GRAMMAR_UNAVAILABLE,
            message=f"Grammar module '{module}' for {language} is not installed",
            details={"language": language, "module": module},
        )


class MatchError(CodeStructError):
    """A single query match that cannot become a Definition."""

    @classmethod
    def empty_match(cls, pattern_index: int) -> "MatchError":
        return cls(
            code=ErrorCode.EMPTY_MATCH,
            message="Match carries no captures",
            details={"pattern_index": pattern_index},
        )

    @classmethod
    def missing_node(cls, pattern_index: int, missing: str) -> "MatchError":
        return cls(
            code=ErrorCode.MISSING_NODE,
            message=f"Match has no usable {missing} anchor",
            details={"pattern_index": pattern_index, "missing": missing},
        )

    @classmethod
    def no_name(cls, pattern_index: int, kind: str) -> "MatchError":
        return cls(
            code=ErrorCode.NO_NAME,
            message=f"Name anchor of {kind} match spans no text",
            details={"pattern_index": pattern_index, "kind": kind},
        )


class InternalError(CodeStructError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def timeout(cls, path: str, seconds: float) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_TIMEOUT,
            message=f"Extraction of {path} exceeded {seconds}s",
            retryable=True,
            details={"path": path, "timeout_sec": seconds},
        )

"""Core module exports."""

from codestruct.core.errors import (
    CodeStructError,
    ConfigError,
    ErrorCode,
    InternalError,
    MatchError,
    StructureError,
)
from codestruct.core.logging import (
    clear_request_id,
    configure_logging,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "CodeStructError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "MatchError",
    "StructureError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_request_id",
    "set_request_id",
]

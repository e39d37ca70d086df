"""Config module exports."""

from codestruct.config.loader import load_config
from codestruct.config.models import (
    CodeStructConfig,
    ExtractionConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "CodeStructConfig",
    "ExtractionConfig",
    "LoggingConfig",
    "LogOutputConfig",
]

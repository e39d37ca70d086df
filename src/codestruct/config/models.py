"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CODESTRUCT__SECTION__KEY)
3. Repo YAML (.codestruct/config.yaml)
4. Global YAML (~/.config/codestruct/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CODESTRUCT__<SECTION>__<KEY>=<VALUE>

Examples:
    CODESTRUCT__LOGGING__LEVEL=DEBUG
    CODESTRUCT__EXTRACTION__INCLUDE_CONTENT=true
    CODESTRUCT__EXTRACTION__MAX_WORKERS=4
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

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
        CODESTRUCT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every skipped match.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Structure extraction configuration.

    Env vars:
        CODESTRUCT__EXTRACTION__INCLUDE_CONTENT: Attach source bytes to definitions
        CODESTRUCT__EXTRACTION__RESOLVE_SCOPES: Annotate enclosing type/function
        CODESTRUCT__EXTRACTION__MAX_WORKERS: Worker processes for batch runs
    """

    include_content: bool = Field(
        default=False,
        description="Attach the definition's exact source span to each definition.",
    )
    resolve_scopes: bool = Field(
        default=False,
        description="Resolve enclosing type and function names for each definition.",
    )
    languages: list[str] | None = Field(
        default=None,
        description="Restrict the registry to these language identifiers. None registers all.",
    )
    strict_queries: bool = Field(
        default=False,
        description="Abort registry construction on the first query that fails to compile.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip files larger than this (MB).",
    )
    max_workers: int = Field(
        default=1,
        description="Worker processes for batch extraction. 1 runs in-process.",
    )
    file_timeout_sec: float | None = Field(
        default=None,
        description="Abandon a single file after this many seconds (process pool only).",
    )

    @field_validator("max_file_size_mb", "max_workers")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be >= 1, got {v}")
        return v

    @field_validator("file_timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class CodeStructConfig(BaseModel):
    """Root configuration for codestruct.

    All settings can be configured via:
    1. Environment variables: CODESTRUCT__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)

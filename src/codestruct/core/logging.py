"""Logging setup: structlog events rendered through stdlib handlers.

Modules hold a lazy proxy, ``log = structlog.get_logger(__name__)``. The proxy
resolves against the current structlog configuration on every event, so
``configure_logging`` may run after the modules are imported.

Each configured output gets its own stdlib handler, level and renderer
(console or JSON lines). The correlation id of a CLI invocation or batch run
lives in structlog's context variables and is merged into every event.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from codestruct.config.models import LoggingConfig, LogOutputConfig

_REQUEST_ID_KEY = "request_id"


def set_request_id(request_id: str | None = None) -> str:
    """Bind a correlation id (generated if omitted) to subsequent events."""
    rid = request_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(**{_REQUEST_ID_KEY: rid})
    return rid


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(_REQUEST_ID_KEY)


def clear_request_id() -> None:
    structlog.contextvars.unbind_contextvars(_REQUEST_ID_KEY)


def _level_number(name: str | None, default: int = logging.INFO) -> int:
    if name is None:
        return default
    return logging.getLevelNamesMapping().get(name.upper(), default)


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def _build_handler(output: LogOutputConfig, root_level: int) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    elif output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = getattr(handler, "stream", None)
        renderer = structlog.dev.ConsoleRenderer(
            colors=bool(stream is not None and stream.isatty()),
        )

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_shared_processors(),
        )
    )
    handler.setLevel(_level_number(output.level, root_level))
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route all logging through the outputs of ``config``.

    Without ``config`` a single stderr output is used, rendered as JSON when
    ``json_format`` is set. Reconfiguring replaces (and closes) the handlers
    installed by a previous call.
    """
    from codestruct.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level_number(config.level)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_build_handler(output, root_level))

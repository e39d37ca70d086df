"""Batch extraction over many files.

Files are independent: each worker process builds its own registry once
(process initializer) and then parses files one at a time. Results come
back in input order.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from codestruct.config.models import ExtractionConfig, LoggingConfig
from codestruct.core.errors import CodeStructError, InternalError, StructureError
from codestruct.core.logging import configure_logging, get_request_id, set_request_id
from codestruct.structure.models import CodeStructure, ParseOptions
from codestruct.structure.parser import StructureParser
from codestruct.structure.registry import LanguageRegistry, build_registry

log = structlog.get_logger(__name__)

_BYTES_PER_MB = 1024 * 1024


@dataclass
class FileResult:
    """Result of extracting one file."""

    file_path: str
    structure: CodeStructure | None = None
    error: dict[str, Any] | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _options(config: ExtractionConfig) -> ParseOptions:
    return ParseOptions(
        include_content=config.include_content,
        resolve_scopes=config.resolve_scopes,
    )


def extract_file(parser: StructureParser, file_path: str, config: ExtractionConfig) -> FileResult:
    """Extract one file, converting failures into ``FileResult.error``."""
    start = time.monotonic()
    result = FileResult(file_path=file_path)
    try:
        path = Path(file_path)
        limit = config.max_file_size_mb * _BYTES_PER_MB
        size = path.stat().st_size
        if size > limit:
            raise StructureError.file_too_large(file_path, size, limit)
        result.structure = parser.parse(path, path.read_bytes(), _options(config))
    except CodeStructError as e:
        result.error = e.to_dict()
    except OSError as e:
        result.error = InternalError.unexpected(str(e), path=file_path).to_dict()
    result.duration_ms = int((time.monotonic() - start) * 1000)
    return result


# -- Worker process state ---------------------------------------------------

_worker_parser: StructureParser | None = None
_worker_config: ExtractionConfig | None = None


def _init_worker(
    config_data: dict[str, Any],
    logging_data: dict[str, Any],
    request_id: str | None = None,
) -> None:
    global _worker_parser, _worker_config
    configure_logging(config=LoggingConfig.model_validate(logging_data))
    if request_id is not None:
        set_request_id(request_id)
    _worker_config = ExtractionConfig.model_validate(config_data)
    registry = build_registry(
        strict=_worker_config.strict_queries,
        languages=_worker_config.languages,
    )
    _worker_parser = StructureParser(registry)


def _worker_log_level() -> str:
    """Name of the parent's effective root level, rounded up to a standard level."""
    level = logging.getLogger().getEffectiveLevel()
    for name, value in (
        ("DEBUG", logging.DEBUG),
        ("INFO", logging.INFO),
        ("WARNING", logging.WARNING),
        ("ERROR", logging.ERROR),
    ):
        if level <= value:
            return name
    return "CRITICAL"


def _extract_in_worker(file_path: str) -> FileResult:
    if _worker_parser is None or _worker_config is None:
        raise RuntimeError("worker process not initialized")
    return extract_file(_worker_parser, file_path, _worker_config)


# -- Public API ---------------------------------------------------------------


def extract_files(
    paths: Iterable[str | Path],
    *,
    config: ExtractionConfig | None = None,
    registry: LanguageRegistry | None = None,
    logging_config: LoggingConfig | None = None,
) -> list[FileResult]:
    """Extract definitions from many files.

    Args:
        paths: Files to extract.
        config: Extraction options; ``max_workers <= 1`` runs in-process.
        registry: Registry for in-process runs. Worker processes always
            build their own from ``config``.
        logging_config: Logging setup for worker processes. Defaults to a
            stderr output at the parent's current root level.

    Returns:
        One FileResult per input path, in input order.
    """
    config = config or ExtractionConfig()
    file_paths = [str(p) for p in paths]
    if not file_paths:
        return []

    if config.max_workers <= 1 or len(file_paths) == 1:
        return _sequential_extract(file_paths, config, registry)
    if logging_config is None:
        logging_config = LoggingConfig(level=_worker_log_level())
    return _parallel_extract(file_paths, config, logging_config)


def _sequential_extract(
    file_paths: list[str],
    config: ExtractionConfig,
    registry: LanguageRegistry | None,
) -> list[FileResult]:
    if registry is None:
        registry = build_registry(strict=config.strict_queries, languages=config.languages)
    parser = StructureParser(registry)
    return [extract_file(parser, path, config) for path in file_paths]


def _parallel_extract(
    file_paths: list[str],
    config: ExtractionConfig,
    logging_config: LoggingConfig,
) -> list[FileResult]:
    """Extract in process pools. A timed-out file is reported, the rest continue.

    A worker stuck on a timed-out file is lost to its pool. When every worker
    of a pool is stuck, the pool is torn down and the remaining files go to a
    fresh one.
    """
    results: list[FileResult | None] = [None] * len(file_paths)
    queue = deque(enumerate(file_paths))
    workers = min(config.max_workers, len(file_paths))
    initargs = (config.model_dump(), logging_config.model_dump(), get_request_id())
    log.debug("batch_start", files=len(file_paths), workers=workers)

    while queue:
        executor = ProcessPoolExecutor(
            max_workers=workers,
            initializer=_init_worker,
            initargs=initargs,
        )
        hung = _run_pool(executor, queue, results, workers, config.file_timeout_sec)
        if hung:
            log.debug("pool_abandoned", hung_workers=hung, remaining=len(queue))
            _terminate(executor)
        else:
            executor.shutdown(wait=True)

    return [r for r in results if r is not None]


def _run_pool(
    executor: ProcessPoolExecutor,
    queue: deque[tuple[int, str]],
    results: list[FileResult | None],
    workers: int,
    timeout: float | None,
) -> int:
    """Feed queued files to ``executor`` until done or no usable worker is left.

    At most one file per usable worker is in flight, so a file's deadline
    runs from its submission. Returns the number of workers left stuck.
    """
    pending: dict[Future[FileResult], tuple[int, str, float]] = {}
    capacity = workers
    while queue or pending:
        while queue and len(pending) < capacity:
            idx, path = queue.popleft()
            try:
                future = executor.submit(_extract_in_worker, path)
            except BrokenProcessPool as e:
                results[idx] = _failed(path, e)
                continue
            pending[future] = (idx, path, time.monotonic())
        if not pending:
            break

        wait_sec = None
        if timeout is not None:
            oldest = min(start for _, _, start in pending.values())
            wait_sec = max(0.0, oldest + timeout - time.monotonic())
        done, _ = wait(pending, timeout=wait_sec, return_when=FIRST_COMPLETED)

        for future in done:
            idx, path, _ = pending.pop(future)
            results[idx] = _collect(future, path)

        if timeout is None:
            continue
        now = time.monotonic()
        for future, (idx, path, start) in list(pending.items()):
            if now - start >= timeout:
                del pending[future]
                capacity -= 1
                log.warning("file_timeout", path=path, timeout_sec=timeout)
                results[idx] = FileResult(
                    file_path=path,
                    error=InternalError.timeout(path, timeout).to_dict(),
                )
    return workers - capacity


def _collect(future: Future[FileResult], path: str) -> FileResult:
    try:
        return future.result()
    except Exception as e:
        return _failed(path, e)


def _failed(path: str, error: Exception) -> FileResult:
    log.error("worker_failed", path=path, error=str(error))
    return FileResult(
        file_path=path,
        error=InternalError.unexpected(str(error), path=path).to_dict(),
    )


def _terminate(executor: ProcessPoolExecutor) -> None:
    """Kill the worker processes of ``executor`` and release it without waiting."""
    # shutdown() drops the process table, so collect it first
    processes = list((executor._processes or {}).values())
    for process in processes:
        if process.is_alive():
            process.terminate()
    executor.shutdown(wait=False, cancel_futures=True)

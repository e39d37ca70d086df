"""Tests for batch extraction."""

from __future__ import annotations

import logging
import os
import time
from unittest.mock import patch

import pytest
import structlog

from codestruct.config.models import ExtractionConfig, LoggingConfig, LogOutputConfig
from codestruct.core.errors import ErrorCode
from codestruct.core.logging import clear_request_id, get_request_id
from codestruct.structure import batch
from codestruct.structure.batch import FileResult, _worker_log_level, extract_file, extract_files
from codestruct.structure.parser import StructureParser


def _write(tmp_path, name: str, content: bytes) -> str:
    path = tmp_path / name
    path.write_bytes(content)
    return str(path)


class TestExtractFile:
    def test_given_go_file_when_extract_then_structure(self, parser, tmp_path) -> None:
        path = _write(tmp_path, "a.go", b"package a\n\nfunc One() {}\n")

        result = extract_file(parser, path, ExtractionConfig())

        assert result.ok
        assert [d.name for d in result.structure.definitions] == ["One"]
        assert result.duration_ms >= 0

    def test_given_unsupported_file_when_extract_then_error_dict(self, parser, tmp_path) -> None:
        path = _write(tmp_path, "notes.txt", b"hello")

        result = extract_file(parser, path, ExtractionConfig())

        assert not result.ok
        assert result.structure is None
        assert result.error["code"] == ErrorCode.UNSUPPORTED_LANGUAGE.value

    def test_given_oversized_file_when_extract_then_too_large(self, parser, tmp_path) -> None:
        path = _write(tmp_path, "big.go", b"x" * (1024 * 1024 + 1))

        result = extract_file(parser, path, ExtractionConfig(max_file_size_mb=1))

        assert result.error["code"] == ErrorCode.FILE_TOO_LARGE.value

    def test_given_missing_file_when_extract_then_internal_error(self, parser, tmp_path) -> None:
        result = extract_file(parser, str(tmp_path / "gone.go"), ExtractionConfig())

        assert result.error["code"] == ErrorCode.INTERNAL_ERROR.value


class TestExtractFiles:
    def test_given_no_paths_when_extract_then_empty(self) -> None:
        assert extract_files([]) == []

    def test_given_mixed_files_when_sequential_then_input_order(self, registry, tmp_path) -> None:
        paths = [
            _write(tmp_path, "b.py", b"def beta():\n    pass\n"),
            _write(tmp_path, "skip.txt", b"nothing"),
            _write(tmp_path, "a.go", b"package a\n\nfunc Alpha() {}\n"),
        ]

        results = extract_files(paths, registry=registry)

        assert [r.file_path for r in results] == paths
        assert [r.ok for r in results] == [True, False, True]
        assert results[0].structure.definitions[0].name == "beta"
        assert results[2].structure.language == "go"

    def test_given_options_when_extract_then_applied(self, registry, tmp_path) -> None:
        path = _write(tmp_path, "c.py", b"class C:\n    def m(self):\n        pass\n")
        config = ExtractionConfig(include_content=True, resolve_scopes=True)

        (result,) = extract_files([path], config=config, registry=registry)

        method = result.structure.definitions[1]
        assert method.enclosing_type == "C"
        assert method.content.startswith(b"def m")

    def test_given_workers_when_extract_then_parallel_keeps_order(self, tmp_path) -> None:
        paths = [
            _write(tmp_path, f"f{i}.go", f"package f\n\nfunc F{i}() {{}}\n".encode())
            for i in range(4)
        ]
        config = ExtractionConfig(max_workers=2, languages=["go"])

        results = extract_files(paths, config=config)

        assert all(isinstance(r, FileResult) for r in results)
        assert [r.file_path for r in results] == paths
        assert [r.structure.definitions[0].name for r in results] == [f"F{i}" for i in range(4)]


class TestFileResult:
    def test_ok_reflects_error(self) -> None:
        assert FileResult(file_path="x.go").ok
        assert not FileResult(file_path="x.go", error={"code": 1}).ok

    def test_parser_fixture_is_structure_parser(self, parser) -> None:
        assert isinstance(parser, StructureParser)


class TestWorkerLogLevel:
    def test_standard_level_passes_through(self, monkeypatch) -> None:
        monkeypatch.setattr(logging.getLogger(), "level", logging.WARNING)

        assert _worker_log_level() == "WARNING"

    def test_notset_and_custom_levels_round_up(self, monkeypatch) -> None:
        monkeypatch.setattr(logging.getLogger(), "level", logging.NOTSET)
        assert _worker_log_level() == "DEBUG"

        monkeypatch.setattr(logging.getLogger(), "level", 25)
        assert _worker_log_level() == "WARNING"


def _fifo(tmp_path, name: str) -> str:
    """A named pipe with no writer: reading it blocks forever."""
    path = tmp_path / name
    os.mkfifo(path)
    return str(path)


needs_fifo = pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes unavailable")


@needs_fifo
class TestFileTimeout:
    TIMEOUT = 3.0

    def test_given_stuck_file_when_extract_then_timeout_and_rest_ok(self, tmp_path) -> None:
        paths = [_fifo(tmp_path, "stuck.go")] + [
            _write(tmp_path, f"ok{i}.go", f"package f\n\nfunc Ok{i}() {{}}\n".encode())
            for i in range(3)
        ]
        config = ExtractionConfig(max_workers=2, languages=["go"], file_timeout_sec=self.TIMEOUT)

        started = time.monotonic()
        results = extract_files(paths, config=config)
        elapsed = time.monotonic() - started

        assert [r.file_path for r in results] == paths
        assert results[0].error["code"] == ErrorCode.INTERNAL_TIMEOUT.value
        assert [r.ok for r in results[1:]] == [True, True, True]
        assert elapsed < self.TIMEOUT * 5

    def test_given_every_worker_stuck_when_extract_then_fresh_pool_finishes(
        self, tmp_path
    ) -> None:
        paths = [
            _fifo(tmp_path, "stuck1.go"),
            _fifo(tmp_path, "stuck2.go"),
            _write(tmp_path, "after.go", b"package f\n\nfunc After() {}\n"),
        ]
        config = ExtractionConfig(max_workers=2, languages=["go"], file_timeout_sec=self.TIMEOUT)

        results = extract_files(paths, config=config)

        codes = [r.error["code"] for r in results[:2]]
        assert codes == [ErrorCode.INTERNAL_TIMEOUT.value] * 2
        assert results[2].ok
        assert results[2].structure.definitions[0].name == "After"


class TestWorkerLogging:
    @pytest.fixture(autouse=True)
    def _restore(self, monkeypatch):
        monkeypatch.setattr(batch, "_worker_parser", None)
        monkeypatch.setattr(batch, "_worker_config", None)
        yield
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        structlog.reset_defaults()
        clear_request_id()

    def test_given_logging_config_when_init_worker_then_outputs_and_request_id(
        self, tmp_path
    ) -> None:
        log_file = tmp_path / "worker.log"
        logging_config = LoggingConfig(
            level="WARNING",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        batch._init_worker(
            ExtractionConfig(languages=["go"]).model_dump(),
            logging_config.model_dump(),
            "run-42",
        )

        root = logging.getLogger()
        assert [h.baseFilename for h in root.handlers] == [str(log_file)]
        assert root.level == logging.WARNING
        assert get_request_id() == "run-42"
        assert batch._worker_parser is not None
        assert batch._worker_parser.registry.languages == ("go",)

    def test_given_logging_config_when_extract_files_then_forwarded(self, tmp_path) -> None:
        paths = [_write(tmp_path, f"{n}.go", b"package f\n") for n in ("a", "b")]
        logging_config = LoggingConfig(level="ERROR")

        with patch.object(batch, "_parallel_extract", return_value=[]) as run:
            extract_files(
                paths, config=ExtractionConfig(max_workers=2), logging_config=logging_config
            )

        assert run.call_args.args[2] is logging_config

    def test_given_no_logging_config_when_extract_files_then_parent_level(
        self, tmp_path, monkeypatch
    ) -> None:
        paths = [_write(tmp_path, f"{n}.go", b"package f\n") for n in ("a", "b")]
        monkeypatch.setattr(logging.getLogger(), "level", logging.ERROR)

        with patch.object(batch, "_parallel_extract", return_value=[]) as run:
            extract_files(paths, config=ExtractionConfig(max_workers=2))

        assert run.call_args.args[2].level == "ERROR"

"""Tests for config models."""

import pytest
from pydantic import ValidationError

from codestruct.config.models import (
    CodeStructConfig,
    ExtractionConfig,
    LoggingConfig,
    LogOutputConfig,
)


class TestLogOutputConfig:
    def test_console_destinations_accepted(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"
        assert LogOutputConfig(destination="stderr").destination == "stderr"

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/out.log")

    def test_absolute_file_destination_accepted(self, tmp_path) -> None:
        path = tmp_path / "out.log"

        assert LogOutputConfig(destination=str(path)).destination == str(path)


class TestExtractionConfig:
    def test_defaults(self) -> None:
        config = ExtractionConfig()

        assert config.include_content is False
        assert config.resolve_scopes is False
        assert config.languages is None
        assert config.strict_queries is False
        assert config.max_file_size_mb == 10
        assert config.max_workers == 1
        assert config.file_timeout_sec is None

    @pytest.mark.parametrize("field", ["max_workers", "max_file_size_mb"])
    def test_non_positive_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            ExtractionConfig(**{field: 0})

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExtractionConfig(file_timeout_sec=0)


class TestCodeStructConfig:
    def test_sections_default(self) -> None:
        config = CodeStructConfig()

        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.extraction, ExtractionConfig)
        assert config.logging.outputs[0].destination == "stderr"

"""Tests for the language registry."""

from __future__ import annotations

import dataclasses
from unittest.mock import patch

import pytest

from codestruct.core.errors import ErrorCode, StructureError
from codestruct.structure.packs import GO_PACK, PYTHON_PACK, all_packs
from codestruct.structure.registry import LanguageRegistry, build_registry, register_pack

BROKEN_GO = dataclasses.replace(GO_PACK, query_text="(no_such_node) @function")


class TestBuiltinRegistry:
    def test_every_builtin_language_registers(self, registry) -> None:
        """All grammars load and all definition queries compile."""
        assert dict(registry.failures) == {}
        assert len(registry) == len(all_packs()) == 14

    def test_extensions_map_to_languages(self, registry) -> None:
        assert registry.extensions["go"] == "go"
        assert registry.extensions["pyi"] == "python"
        assert registry.extensions["tsx"] == "tsx"
        assert registry.extensions["ts"] == "typescript"

    def test_for_path_is_case_insensitive(self, registry) -> None:
        assert registry.for_path("src/Main.JAVA").language == "java"

    def test_for_language_unknown_raises(self, registry) -> None:
        with pytest.raises(StructureError) as exc_info:
            registry.for_language("cobol")

        assert exc_info.value.code is ErrorCode.UNSUPPORTED_LANGUAGE


class TestUnsupportedPath:
    def test_given_txt_when_for_path_then_unsupported_without_parsing(self, registry) -> None:
        with patch("tree_sitter.Parser") as parser_cls:
            with pytest.raises(StructureError) as exc_info:
                registry.for_path("notes.txt")

        assert exc_info.value.code is ErrorCode.UNSUPPORTED_LANGUAGE
        parser_cls.assert_not_called()

    def test_given_no_extension_when_supports_then_false(self, registry) -> None:
        assert not registry.supports("Makefile")
        assert registry.supports("setup.py")


class TestBuildRegistry:
    def test_given_broken_query_and_strict_when_build_then_raises(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            build_registry([BROKEN_GO, PYTHON_PACK], strict=True)

        assert exc_info.value.code is ErrorCode.QUERY_COMPILE_ERROR

    def test_given_broken_query_when_build_then_language_skipped(self) -> None:
        registry = build_registry([BROKEN_GO, PYTHON_PACK])

        assert registry.languages == ("python",)
        assert registry.failures["go"].code is ErrorCode.QUERY_COMPILE_ERROR
        assert not registry.supports("main.go")

    def test_given_missing_grammar_module_when_register_then_unavailable(self) -> None:
        pack = dataclasses.replace(GO_PACK, grammar_module="tree_sitter_not_installed")

        with pytest.raises(StructureError) as exc_info:
            register_pack(pack)

        assert exc_info.value.code is ErrorCode.GRAMMAR_UNAVAILABLE

    def test_given_language_filter_when_build_then_only_selected(self) -> None:
        registry = build_registry(languages=["go", "rust"])

        assert set(registry.languages) == {"go", "rust"}

    def test_given_duplicate_extension_when_build_then_raises(self) -> None:
        clone = dataclasses.replace(GO_PACK, name="go2")

        with pytest.raises(StructureError) as exc_info:
            build_registry([GO_PACK, clone])

        assert exc_info.value.code is ErrorCode.DUPLICATE_EXTENSION
        assert exc_info.value.details["languages"] == ["go", "go2"]


class TestLanguageRegistry:
    def test_empty_registry_supports_nothing(self) -> None:
        registry = LanguageRegistry([])

        assert len(registry) == 0
        assert not registry.supports("a.go")
        assert "go" not in registry

"""Value types produced and consumed by structure extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DefinitionKind(str, Enum):
    """Normalized category assigned to a definition anchor."""

    FUNCTION = "function"
    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    VARIABLE = "variable"
    TYPE_ALIAS = "type_alias"


NAME_CAPTURE = "name"


@dataclass(frozen=True, slots=True)
class Capture:
    """A (name, node) pair bound by a query pattern."""

    name: str
    node: Any  # tree_sitter.Node


@dataclass(frozen=True, slots=True)
class Match:
    """One occurrence of a query pattern, captures in engine order."""

    pattern_index: int
    captures: tuple[Capture, ...]


@dataclass(frozen=True)
class ParseOptions:
    """Per-call extraction options."""

    include_content: bool = False
    resolve_scopes: bool = False


Range = tuple[int, int, int, int]


@dataclass(frozen=True)
class Definition:
    """A named definition with a zero-based [start_line, start_col, end_line, end_col] range."""

    definition_kind: str
    name: str
    range: Range
    content: bytes | None = None
    enclosing_type: str | None = None
    enclosing_function: str | None = None

    @property
    def start(self) -> tuple[int, int]:
        return self.range[0], self.range[1]

    @property
    def end(self) -> tuple[int, int]:
        return self.range[2], self.range[3]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "definition_kind": self.definition_kind,
            "name": self.name,
            "range": list(self.range),
        }
        if self.content is not None:
            data["content"] = self.content.decode("utf-8", errors="replace")
        if self.enclosing_type is not None:
            data["enclosing_type"] = self.enclosing_type
        if self.enclosing_function is not None:
            data["enclosing_function"] = self.enclosing_function
        return data


@dataclass(frozen=True)
class CodeStructure:
    """Per-file extraction result. Definitions keep match-stream order."""

    file_path: str
    language: str
    definitions: tuple[Definition, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "language": self.language,
            "definitions": [d.to_dict() for d in self.definitions],
        }

"""Shared fixtures for structure extraction tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest

from codestruct.structure.parser import StructureParser
from codestruct.structure.registry import LanguageRegistry, build_registry


@dataclass(eq=False)
class FakeNode:
    """Minimal stand-in for tree_sitter.Node, positioned within one line."""

    type: str
    start_byte: int
    end_byte: int
    start_point: tuple[int, int]
    end_point: tuple[int, int]
    parent: FakeNode | None = None
    is_missing: bool = False
    children: list[FakeNode] = field(default_factory=list)
    fields: dict[str, FakeNode] = field(default_factory=dict)
    text: bytes | None = None

    def child_by_field_name(self, name: str) -> FakeNode | None:
        return self.fields.get(name)


def _make_node(
    kind: str,
    start: int,
    end: int,
    *,
    parent: FakeNode | None = None,
    row: int = 0,
    is_missing: bool = False,
) -> FakeNode:
    return FakeNode(
        type=kind,
        start_byte=start,
        end_byte=end,
        start_point=(row, start),
        end_point=(row, end),
        parent=parent,
        is_missing=is_missing,
    )


@pytest.fixture
def make_node() -> Callable[..., FakeNode]:
    """Factory for single-line fake nodes (column == byte offset)."""
    return _make_node


def iter_nodes(node: Any) -> Iterator[Any]:
    yield node
    for child in node.children:
        yield from iter_nodes(child)


def find_node(root: Any, kind: str, text: str | None = None) -> Any:
    """First node of ``kind`` in pre-order, optionally with exact text."""
    for node in iter_nodes(root):
        if node.type == kind and (text is None or node.text.decode() == text):
            return node
    raise AssertionError(f"no {kind} node{' ' + repr(text) if text else ''} in tree")


@pytest.fixture
def node_finder() -> Callable[..., Any]:
    return find_node


@pytest.fixture(scope="session")
def registry() -> LanguageRegistry:
    """Registry of every built-in language (failures recorded, not raised)."""
    return build_registry()


@pytest.fixture
def parser(registry: LanguageRegistry) -> StructureParser:
    return StructureParser(registry)

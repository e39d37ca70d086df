"""Enclosing-scope resolution by ancestor walk.

The walks are pure functions of a node and its (immutable) tree, so both
may run against the same tree at once.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from codestruct.structure.packs import ScopeRules

NodePredicate = Callable[[Any], bool]

# Node kinds tried, in order, when a scope node has no ``name`` field
_NAME_NODE_TYPES = (
    "identifier",
    "type_identifier",
    "constant",
    "name",
    "simple_identifier",
    "field_identifier",
    "property_identifier",
)


def walk_ancestors(
    node: Any,
    is_boundary: NodePredicate,
    *,
    start_at_self: bool = False,
    stop_at: NodePredicate | None = None,
) -> Any | None:
    """Return the nearest ancestor for which ``is_boundary`` holds.

    The walk ends (returning None) at the tree root, at a missing
    (error-recovery) node, or at a node matching ``stop_at`` that is not
    itself a boundary.
    """
    current = node if start_at_self else (node.parent if node is not None else None)
    while current is not None and not current.is_missing:
        if is_boundary(current):
            return current
        if stop_at is not None and stop_at(current):
            return None
        current = current.parent
    return None


def find_enclosing_type(node: Any, rules: ScopeRules) -> Any | None:
    if not rules.type_kinds:
        return None
    return walk_ancestors(
        node,
        lambda n: n.type in rules.type_kinds,
        start_at_self=rules.start_at_self,
    )


def find_enclosing_function(node: Any, rules: ScopeRules) -> Any | None:
    if not rules.function_kinds:
        return None
    stop_at: NodePredicate | None = None
    if rules.stop_function_at_type:
        stop_at = lambda n: n.type in rules.type_kinds  # noqa: E731
    return walk_ancestors(
        node,
        lambda n: n.type in rules.function_kinds,
        start_at_self=rules.start_at_self,
        stop_at=stop_at,
    )


def scope_name(node: Any) -> str | None:
    """Best-effort display name of a scope node.

    Uses the ``name`` field, then the first identifier-like child, then the
    ``name`` field of a direct child (Go ``type_spec``, Rust ``impl`` type).
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        for child in node.children:
            if child.type in _NAME_NODE_TYPES:
                name_node = child
                break
    if name_node is None:
        name_node = node.child_by_field_name("type")
    if name_node is None:
        for child in node.children:
            name_node = child.child_by_field_name("name")
            if name_node is not None:
                break
    if name_node is None or name_node.text is None:
        return None
    return name_node.text.decode("utf-8", errors="replace") or None

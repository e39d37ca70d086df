"""Match resolution: one query match -> one Definition, or a MatchError.

Language independent. Per-language behaviour lives in the processor; this
module only knows the capture naming convention.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from codestruct.core.errors import MatchError
from codestruct.structure.models import NAME_CAPTURE, Capture, Definition, Match, Range
from codestruct.structure.scope import NodePredicate


def select_anchors(
    captures: Sequence[Capture],
    is_tracked: NodePredicate | None = None,
) -> tuple[Capture | None, Capture | None]:
    """Pick (definition anchor, name anchor) from ordered captures.

    The capture named ``name`` is the name anchor. The first capture with
    any other name is the definition anchor; later non-name captures are
    auxiliary and ignored. With ``is_tracked``, captures on nodes it rejects
    are skipped when choosing the definition anchor.
    """
    definition: Capture | None = None
    name: Capture | None = None
    for capture in captures:
        if capture.name == NAME_CAPTURE:
            if name is None:
                name = capture
        elif definition is None and (is_tracked is None or is_tracked(capture.node)):
            # first eligible non-name capture wins
            definition = capture
    return definition, name


def node_range(node: Any) -> Range:
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return (start_row, start_col, end_row, end_col)


def _is_well_formed(rng: Range) -> bool:
    return all(v >= 0 for v in rng) and (rng[0], rng[1]) <= (rng[2], rng[3])


def read_name(node: Any, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def resolve_anchors(
    pattern_index: int,
    definition: Capture | None,
    name: Capture | None,
    source: bytes,
    *,
    include_content: bool = False,
    enclosing_type: str | None = None,
    enclosing_function: str | None = None,
) -> Definition:
    """Build a Definition from already chosen anchors.

    Raises:
        MatchError: MISSING_NODE (no usable definition or name anchor, or an
            ill-formed range), NO_NAME (name anchor spans no text).
    """
    if definition is None or definition.node is None:
        raise MatchError.missing_node(pattern_index, "definition")
    if name is None or name.node is None:
        raise MatchError.missing_node(pattern_index, "name")
    if getattr(definition.node, "is_missing", False):
        raise MatchError.missing_node(pattern_index, "definition")

    name_text = read_name(name.node, source)
    if not name_text:
        raise MatchError.no_name(pattern_index, definition.name)

    rng = node_range(definition.node)
    if not _is_well_formed(rng):
        raise MatchError.missing_node(pattern_index, "definition")

    content = None
    if include_content:
        content = source[definition.node.start_byte : definition.node.end_byte]

    return Definition(
        definition_kind=definition.name,
        name=name_text,
        range=rng,
        content=content,
        enclosing_type=enclosing_type,
        enclosing_function=enclosing_function,
    )


def resolve_match(
    match: Match,
    source: bytes,
    *,
    include_content: bool = False,
    is_tracked: NodePredicate | None = None,
) -> Definition:
    """Turn one match into a Definition, without scope information.

    Raises:
        MatchError: EMPTY_MATCH (no captures), or any error of
            ``resolve_anchors``.
    """
    if not match.captures:
        raise MatchError.empty_match(match.pattern_index)
    definition, name = select_anchors(match.captures, is_tracked)
    return resolve_anchors(
        match.pattern_index, definition, name, source, include_content=include_content
    )

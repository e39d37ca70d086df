"""Query engine adapter over tree-sitter.

Compiles definition queries and turns cursor matches into ordered
``Match`` values. A ``QueryError`` means the query does not fit the
grammar and is fatal; warnings raised while compiling are advisory and
leave a usable query behind.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterator
from typing import TYPE_CHECKING

import structlog
from tree_sitter import Query, QueryCursor, QueryError

from codestruct.core.errors import StructureError
from codestruct.structure.models import Capture, Match

if TYPE_CHECKING:
    from tree_sitter import Language, Node

log = structlog.get_logger(__name__)


def compile_query(language: Language, query_text: str, *, language_name: str = "") -> Query:
    """Compile ``query_text`` against ``language``.

    Advisory diagnostics are logged and the compiled query is returned.

    Raises:
        StructureError: QUERY_COMPILE_ERROR when the query does not fit the
            grammar (unknown node kind or field, syntax error, impossible pattern).
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            query = Query(language, query_text)
        except QueryError as e:
            raise StructureError.query_compile(language_name, str(e) or "unknown") from e

    for w in caught:
        log.warning(
            "query_advisory",
            language=language_name,
            category=w.category.__name__,
            reason=str(w.message),
        )
    return query


def execute(query: Query, root: Node) -> Iterator[Match]:
    """Yield matches for ``query`` under ``root`` in engine order.

    Multi-node captures (quantified patterns) are flattened, one Capture per
    node, keeping the order the engine reported them in.
    """
    cursor = QueryCursor(query)
    for pattern_index, captures_dict in cursor.matches(root):
        captures = tuple(
            Capture(name=name, node=node)
            for name, nodes in captures_dict.items()
            for node in nodes
        )
        yield Match(pattern_index=pattern_index, captures=captures)

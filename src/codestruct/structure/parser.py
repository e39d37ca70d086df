"""File-level driver: path + bytes -> CodeStructure."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog
import tree_sitter

from codestruct.core.errors import MatchError, StructureError
from codestruct.structure.models import CodeStructure, Definition, ParseOptions
from codestruct.structure.query import execute
from codestruct.structure.registry import LanguageConfig, LanguageRegistry, default_registry
from codestruct.structure.resolver import resolve_anchors
from codestruct.structure.scope import scope_name

log = structlog.get_logger(__name__)


@contextmanager
def parsed_tree(config: LanguageConfig, path: str, content: bytes) -> Iterator[Any]:
    """Parse ``content`` and hold the tree for the duration of the block.

    Node references taken from the tree must not escape the block.

    Raises:
        StructureError: PARSE_FAILED if the engine returns no tree.
    """
    parser = tree_sitter.Parser(config.grammar)
    tree = parser.parse(content)
    if tree is None:
        raise StructureError.parse_failed(path, config.language)
    try:
        yield tree
    finally:
        del tree
        del parser


class StructureParser:
    """Extracts definitions from single files.

    Holds only a reference to an immutable registry, so one instance can be
    shared by threads; each ``parse`` call owns its tree and cursor.

    Example::

        parser = StructureParser()
        structure = parser.parse("pkg/math.go", b"package m\\nfunc add() {}\\n")
        [d.name for d in structure.definitions]  # ["add"]
    """

    def __init__(self, registry: LanguageRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> LanguageRegistry:
        return self._registry

    def parse(
        self,
        path: str | Path,
        content: bytes | None = None,
        options: ParseOptions | None = None,
    ) -> CodeStructure:
        """Extract the ordered definitions of one file.

        Args:
            path: File path, used for language lookup and output tagging.
            content: File bytes. If None, reads from path.
            options: Extraction options.

        Raises:
            StructureError: UNSUPPORTED_LANGUAGE (before any parsing) or PARSE_FAILED.
        """
        options = options or ParseOptions()
        file_path = str(path)
        config = self._registry.for_path(file_path)
        if content is None:
            content = Path(path).read_bytes()

        definitions: list[Definition] = []
        skipped = 0
        with parsed_tree(config, file_path, content) as tree:
            for match in execute(config.query, tree.root_node):
                try:
                    definitions.append(self._resolve(config, match, content, options))
                except MatchError as e:
                    skipped += 1
                    log.debug(
                        "match_skipped",
                        path=file_path,
                        language=config.language,
                        error=e.error_name,
                        details=e.details,
                    )

        log.debug(
            "file_parsed",
            path=file_path,
            language=config.language,
            definitions=len(definitions),
            skipped=skipped,
        )
        return CodeStructure(
            file_path=file_path,
            language=config.language,
            definitions=tuple(definitions),
        )

    @staticmethod
    def _resolve(
        config: LanguageConfig,
        match: Any,
        content: bytes,
        options: ParseOptions,
    ) -> Definition:
        processed = config.processor.process_match(match, resolve_scopes=options.resolve_scopes)
        enclosing_type = enclosing_function = None
        if processed.enclosing_type is not None:
            enclosing_type = scope_name(processed.enclosing_type)
        if processed.enclosing_function is not None:
            enclosing_function = scope_name(processed.enclosing_function)
        return resolve_anchors(
            processed.pattern_index,
            processed.definition,
            processed.name,
            content,
            include_content=options.include_content,
            enclosing_type=enclosing_type,
            enclosing_function=enclosing_function,
        )

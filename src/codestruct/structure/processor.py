"""Per-language match processing.

A ``LanguageProcessor`` is data, not a subclass per language: the node kind
table and the ScopeRules of its pack. Everything else is shared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from codestruct.core.errors import MatchError
from codestruct.structure.models import Capture, DefinitionKind, Match
from codestruct.structure.packs import LanguagePack, ScopeRules
from codestruct.structure.resolver import select_anchors
from codestruct.structure.scope import find_enclosing_function, find_enclosing_type


@dataclass(frozen=True)
class ProcessedMatch:
    """Anchor captures chosen for one match, plus optional scope nodes."""

    pattern_index: int
    definition: Capture | None
    name: Capture | None
    enclosing_type: Any | None = None
    enclosing_function: Any | None = None


@dataclass(frozen=True)
class LanguageProcessor:
    language: str
    definition_kinds: dict[str, DefinitionKind]
    scope_rules: ScopeRules

    @classmethod
    def from_pack(cls, pack: LanguagePack) -> LanguageProcessor:
        return cls(
            language=pack.name,
            definition_kinds=dict(pack.definition_kinds),
            scope_rules=pack.scope_rules,
        )

    def is_tracked(self, node: Any) -> bool:
        return node is not None and node.type in self.definition_kinds

    def find_enclosing_type(self, node: Any) -> Any | None:
        return find_enclosing_type(node, self.scope_rules)

    def find_enclosing_function(self, node: Any) -> Any | None:
        return find_enclosing_function(node, self.scope_rules)

    def process_match(self, match: Match, *, resolve_scopes: bool = False) -> ProcessedMatch:
        """Choose the anchors of a match and optionally its enclosing scopes.

        Non-name captures on untracked node kinds never become the
        definition anchor. Scopes are looked up from the anchor's parent,
        giving the nearest scope strictly around the definition.

        Raises:
            MatchError: EMPTY_MATCH if the match has no captures.
        """
        if not match.captures:
            raise MatchError.empty_match(match.pattern_index)

        definition, name = select_anchors(match.captures, self.is_tracked)

        enclosing_type = enclosing_function = None
        anchor = definition.node if definition is not None else None
        if resolve_scopes and anchor is not None and anchor.parent is not None:
            enclosing_type = self.find_enclosing_type(anchor.parent)
            enclosing_function = self.find_enclosing_function(anchor.parent)

        return ProcessedMatch(
            pattern_index=match.pattern_index,
            definition=definition,
            name=name,
            enclosing_type=enclosing_type,
            enclosing_function=enclosing_function,
        )

"""Language registry: language identifier / file extension -> LanguageConfig.

Built once with ``build_registry`` before any concurrent use and never
mutated afterwards, so lookups need no locking.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import PurePath
from types import MappingProxyType
from typing import Any

import structlog
import tree_sitter

from codestruct.core.errors import CodeStructError, ErrorCode, StructureError
from codestruct.structure.packs import LanguagePack, all_packs
from codestruct.structure.processor import LanguageProcessor
from codestruct.structure.query import compile_query

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LanguageConfig:
    """Everything needed to extract definitions for one language."""

    language: str
    grammar: tree_sitter.Language
    query_text: str
    query: tree_sitter.Query
    extensions: frozenset[str]
    processor: LanguageProcessor


class LanguageRegistry:
    """Immutable lookup table of registered languages."""

    def __init__(
        self,
        configs: Iterable[LanguageConfig],
        failures: Mapping[str, CodeStructError] | None = None,
    ) -> None:
        by_language: dict[str, LanguageConfig] = {}
        by_ext: dict[str, LanguageConfig] = {}
        for config in configs:
            by_language[config.language] = config
            for ext in config.extensions:
                ext = ext.lower()
                if ext in by_ext:
                    raise StructureError.duplicate_extension(
                        ext, by_ext[ext].language, config.language
                    )
                by_ext[ext] = config
        self._by_language = MappingProxyType(by_language)
        self._by_ext = MappingProxyType(by_ext)
        self._failures = MappingProxyType(dict(failures or {}))

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self._by_language)

    @property
    def extensions(self) -> Mapping[str, str]:
        """Extension (no dot) -> language identifier."""
        return MappingProxyType({ext: c.language for ext, c in self._by_ext.items()})

    @property
    def failures(self) -> Mapping[str, CodeStructError]:
        """Languages that could not register, with the reason."""
        return self._failures

    def supports(self, path: str | PurePath) -> bool:
        return _extension(path) in self._by_ext

    def for_path(self, path: str | PurePath) -> LanguageConfig:
        """Resolve a file path to its LanguageConfig by extension.

        Raises:
            StructureError: UNSUPPORTED_LANGUAGE if no language claims the extension.
        """
        config = self._by_ext.get(_extension(path))
        if config is None:
            raise StructureError.unsupported_language(str(path))
        return config

    def for_language(self, language: str) -> LanguageConfig:
        config = self._by_language.get(language)
        if config is None:
            raise StructureError.unknown_language(language)
        return config

    def __contains__(self, language: object) -> bool:
        return language in self._by_language

    def __len__(self) -> int:
        return len(self._by_language)


def _extension(path: str | PurePath) -> str:
    return PurePath(path).suffix.lower().lstrip(".")


def load_grammar(pack: LanguagePack) -> tree_sitter.Language:
    """Load the tree-sitter Language for a pack.

    Raises:
        StructureError: GRAMMAR_UNAVAILABLE if the grammar module is not installed.
    """
    try:
        module: Any = importlib.import_module(pack.grammar_module)
        lang_fn = getattr(module, pack.language_func)
    except (ImportError, AttributeError) as err:
        raise StructureError.grammar_unavailable(pack.name, pack.grammar_module) from err
    return tree_sitter.Language(lang_fn())


def register_pack(pack: LanguagePack) -> LanguageConfig:
    """Load the grammar and compile the query for one pack."""
    grammar = load_grammar(pack)
    query = compile_query(grammar, pack.query_text, language_name=pack.name)
    return LanguageConfig(
        language=pack.name,
        grammar=grammar,
        query_text=pack.query_text,
        query=query,
        extensions=frozenset(ext.lower() for ext in pack.extensions),
        processor=LanguageProcessor.from_pack(pack),
    )


def build_registry(
    packs: Iterable[LanguagePack] | None = None,
    *,
    strict: bool = False,
    languages: Iterable[str] | None = None,
) -> LanguageRegistry:
    """Build the registry from language packs.

    Args:
        packs: Packs to register. Defaults to every built-in pack.
        strict: Raise on the first query that does not compile instead of
            skipping that language.
        languages: Only register these language identifiers.

    Raises:
        StructureError: QUERY_COMPILE_ERROR or GRAMMAR_UNAVAILABLE (strict only),
            DUPLICATE_EXTENSION.
    """
    selected = list(packs if packs is not None else all_packs())
    if languages is not None:
        wanted = set(languages)
        unknown = wanted - {p.name for p in selected}
        for name in sorted(unknown):
            log.warning("unknown_language_requested", language=name)
        selected = [p for p in selected if p.name in wanted]

    configs: list[LanguageConfig] = []
    failures: dict[str, CodeStructError] = {}
    for pack in selected:
        try:
            configs.append(register_pack(pack))
        except StructureError as e:
            if strict:
                raise
            failures[pack.name] = e
            if e.code is ErrorCode.GRAMMAR_UNAVAILABLE:
                log.warning("language_unavailable", language=pack.name, reason=e.message)
            else:
                log.error("language_registration_failed", language=pack.name, error=str(e))

    registry = LanguageRegistry(configs, failures)
    log.debug(
        "registry_built",
        languages=len(registry),
        extensions=len(registry.extensions),
        failed=sorted(failures),
    )
    return registry


_default_registry: LanguageRegistry | None = None


def default_registry() -> LanguageRegistry:
    """Process-wide registry of all built-in packs, built on first call."""
    global _default_registry
    if _default_registry is None:
        _default_registry = build_registry()
    return _default_registry

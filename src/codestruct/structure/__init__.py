"""Query-driven structure extraction.

Public API:
- StructureParser: path + bytes -> CodeStructure
- build_registry / default_registry: language lookup tables
- extract_files: many files, optionally across processes
- resolve_match: one query match -> Definition
"""

from codestruct.structure.batch import FileResult, extract_file, extract_files
from codestruct.structure.models import (
    Capture,
    CodeStructure,
    Definition,
    DefinitionKind,
    Match,
    ParseOptions,
)
from codestruct.structure.packs import PACKS, LanguagePack, ScopeRules, get_pack
from codestruct.structure.parser import StructureParser
from codestruct.structure.processor import LanguageProcessor
from codestruct.structure.registry import (
    LanguageConfig,
    LanguageRegistry,
    build_registry,
    default_registry,
)
from codestruct.structure.resolver import resolve_match

__all__ = [
    "Capture",
    "CodeStructure",
    "Definition",
    "DefinitionKind",
    "FileResult",
    "LanguageConfig",
    "LanguagePack",
    "LanguageProcessor",
    "LanguageRegistry",
    "Match",
    "PACKS",
    "ParseOptions",
    "ScopeRules",
    "StructureParser",
    "build_registry",
    "default_registry",
    "extract_file",
    "extract_files",
    "get_pack",
    "resolve_match",
]

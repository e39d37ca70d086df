"""LanguagePack: per-language configuration data for structure extraction.

Every supported language has exactly ONE LanguagePack holding:
- Grammar install metadata (package, module, loader function)
- File extensions (without leading dot, lower-case)
- The definition query (S-expression patterns)
- Node kind -> DefinitionKind table for definition anchors
- ScopeRules driving the enclosing type/function walks

Query conventions: each pattern captures the definition node with the
normalized kind as capture name (``@function``, ``@class``, ...) and the
identifier with ``@name``. The definition capture is the outermost one.

The PACKS registry is the canonical lookup: ``PACKS["go"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from codestruct.structure.models import DefinitionKind

_F = DefinitionKind.FUNCTION
_C = DefinitionKind.CLASS
_S = DefinitionKind.STRUCT
_I = DefinitionKind.INTERFACE
_E = DefinitionKind.ENUM
_V = DefinitionKind.VARIABLE
_T = DefinitionKind.TYPE_ALIAS

# =========================================================================
# Dataclasses
# =========================================================================


@dataclass(frozen=True)
class ScopeRules:
    """Boundary kinds and walk behaviour for enclosing-scope resolution."""

    type_kinds: frozenset[str] = frozenset()
    function_kinds: frozenset[str] = frozenset()
    # Test the starting node itself before moving to its parent
    start_at_self: bool = False
    # Function walk gives up (returns None) when it reaches a type boundary first
    stop_function_at_type: bool = False


@dataclass(frozen=True)
class LanguagePack:
    """Complete tree-sitter configuration for a single language."""

    # -- Identity --
    name: str  # Language identifier ("go", "tsx", ...)

    # -- Grammar install --
    grammar_package: str  # PyPI package ("tree-sitter-go")
    grammar_module: str  # Python import ("tree_sitter_go")
    # Non-standard function name (e.g. "language_typescript", "language_php")
    language_func: str = "language"

    # -- File detection --
    extensions: frozenset[str] = field(default_factory=frozenset)

    # -- Definition extraction --
    query_text: str = ""
    definition_kinds: dict[str, DefinitionKind] = field(default_factory=dict)

    # -- Enclosing scopes --
    scope_rules: ScopeRules = field(default_factory=ScopeRules)


# =========================================================================
# GO
# =========================================================================

GO_PACK = LanguagePack(
    name="go",
    grammar_package="tree-sitter-go",
    grammar_module="tree_sitter_go",
    extensions=frozenset({"go"}),
    query_text="""
        (function_declaration
            name: (identifier) @name) @function
        (method_declaration
            name: (field_identifier) @name) @function
        (type_spec
            name: (type_identifier) @name
            type: (struct_type)) @struct
        (type_spec
            name: (type_identifier) @name
            type: (interface_type)) @interface
        (type_spec
            name: (type_identifier) @name
            type: [(type_identifier) (qualified_type) (generic_type) (pointer_type)
                   (array_type) (slice_type) (map_type) (channel_type)
                   (function_type)]) @type_alias
        (type_alias
            name: (type_identifier) @name) @type_alias
        (const_spec
            name: (identifier) @name) @variable
        (var_spec
            name: (identifier) @name) @variable
    """,
    definition_kinds={
        "function_declaration": _F,
        "method_declaration": _F,
        "type_spec": _S,
        "type_alias": _T,
        "const_spec": _V,
        "var_spec": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"type_spec", "type_alias"}),
        function_kinds=frozenset({"function_declaration", "method_declaration"}),
        start_at_self=True,
    ),
)


# =========================================================================
# PYTHON
# =========================================================================

PYTHON_PACK = LanguagePack(
    name="python",
    grammar_package="tree-sitter-python",
    grammar_module="tree_sitter_python",
    extensions=frozenset({"py", "pyi"}),
    query_text="""
        (function_definition
            name: (identifier) @name) @function
        (class_definition
            name: (identifier) @name) @class
        (module
            (expression_statement
                (assignment
                    left: (identifier) @name) @variable))
    """,
    definition_kinds={
        "function_definition": _F,
        "class_definition": _C,
        "assignment": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class_definition"}),
        function_kinds=frozenset({"function_definition"}),
        stop_function_at_type=True,
    ),
)


# =========================================================================
# JAVA
# =========================================================================

JAVA_PACK = LanguagePack(
    name="java",
    grammar_package="tree-sitter-java",
    grammar_module="tree_sitter_java",
    extensions=frozenset({"java"}),
    query_text="""
        (class_declaration
            name: (identifier) @name) @class
        (interface_declaration
            name: (identifier) @name) @interface
        (annotation_type_declaration
            name: (identifier) @name) @interface
        (enum_declaration
            name: (identifier) @name) @enum
        (record_declaration
            name: (identifier) @name) @class
        (method_declaration
            name: (identifier) @name) @function
        (constructor_declaration
            name: (identifier) @name) @function
        (field_declaration
            declarator: (variable_declarator
                name: (identifier) @name)) @variable
    """,
    definition_kinds={
        "class_declaration": _C,
        "interface_declaration": _I,
        "annotation_type_declaration": _I,
        "enum_declaration": _E,
        "record_declaration": _C,
        "method_declaration": _F,
        "constructor_declaration": _F,
        "field_declaration": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset(
            {
                "class_declaration",
                "interface_declaration",
                "enum_declaration",
                "record_declaration",
            }
        ),
        function_kinds=frozenset({"method_declaration", "constructor_declaration"}),
        start_at_self=True,
    ),
)


# =========================================================================
# JAVASCRIPT / TYPESCRIPT
# =========================================================================

_JS_QUERY = """
    (function_declaration
        name: (identifier) @name) @function
    (generator_function_declaration
        name: (identifier) @name) @function
    (class_declaration
        name: (identifier) @name) @class
    (method_definition
        name: (property_identifier) @name) @function
    (lexical_declaration
        (variable_declarator
            name: (identifier) @name)) @variable
    (variable_declaration
        (variable_declarator
            name: (identifier) @name)) @variable
"""

_JS_KINDS: dict[str, DefinitionKind] = {
    "function_declaration": _F,
    "generator_function_declaration": _F,
    "class_declaration": _C,
    "method_definition": _F,
    "lexical_declaration": _V,
    "variable_declaration": _V,
}

JAVASCRIPT_PACK = LanguagePack(
    name="javascript",
    grammar_package="tree-sitter-javascript",
    grammar_module="tree_sitter_javascript",
    extensions=frozenset({"js", "jsx", "mjs", "cjs"}),
    query_text=_JS_QUERY,
    definition_kinds=_JS_KINDS,
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class_declaration", "class"}),
        function_kinds=frozenset(
            {"function_declaration", "generator_function_declaration", "method_definition"}
        ),
        start_at_self=True,
    ),
)

_TS_QUERY = """
    (function_declaration
        name: (identifier) @name) @function
    (generator_function_declaration
        name: (identifier) @name) @function
    (class_declaration
        name: (type_identifier) @name) @class
    (abstract_class_declaration
        name: (type_identifier) @name) @class
    (interface_declaration
        name: (type_identifier) @name) @interface
    (type_alias_declaration
        name: (type_identifier) @name) @type_alias
    (enum_declaration
        name: (identifier) @name) @enum
    (method_definition
        name: (property_identifier) @name) @function
    (lexical_declaration
        (variable_declarator
            name: (identifier) @name)) @variable
    (variable_declaration
        (variable_declarator
            name: (identifier) @name)) @variable
"""

_TS_KINDS: dict[str, DefinitionKind] = {
    **_JS_KINDS,
    "abstract_class_declaration": _C,
    "interface_declaration": _I,
    "type_alias_declaration": _T,
    "enum_declaration": _E,
}

_TS_SCOPES = ScopeRules(
    type_kinds=frozenset(
        {"class_declaration", "abstract_class_declaration", "interface_declaration", "class"}
    ),
    function_kinds=frozenset(
        {"function_declaration", "generator_function_declaration", "method_definition"}
    ),
    start_at_self=True,
)

TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
    query_text=_TS_QUERY,
    definition_kinds=_TS_KINDS,
    scope_rules=_TS_SCOPES,
)

TSX_PACK = LanguagePack(
    name="tsx",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_tsx",
    extensions=frozenset({"tsx"}),
    query_text=_TS_QUERY,
    definition_kinds=_TS_KINDS,
    scope_rules=_TS_SCOPES,
)


# =========================================================================
# RUST
# =========================================================================

RUST_PACK = LanguagePack(
    name="rust",
    grammar_package="tree-sitter-rust",
    grammar_module="tree_sitter_rust",
    extensions=frozenset({"rs"}),
    query_text="""
        (function_item
            name: (identifier) @name) @function
        (function_signature_item
            name: (identifier) @name) @function
        (struct_item
            name: (type_identifier) @name) @struct
        (union_item
            name: (type_identifier) @name) @struct
        (enum_item
            name: (type_identifier) @name) @enum
        (trait_item
            name: (type_identifier) @name) @interface
        (type_item
            name: (type_identifier) @name) @type_alias
        (const_item
            name: (identifier) @name) @variable
        (static_item
            name: (identifier) @name) @variable
    """,
    definition_kinds={
        "function_item": _F,
        "function_signature_item": _F,
        "struct_item": _S,
        "union_item": _S,
        "enum_item": _E,
        "trait_item": _I,
        "type_item": _T,
        "const_item": _V,
        "static_item": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"struct_item", "enum_item", "trait_item", "impl_item"}),
    ),
)


# =========================================================================
# C / C++
# =========================================================================

C_PACK = LanguagePack(
    name="c",
    grammar_package="tree-sitter-c",
    grammar_module="tree_sitter_c",
    extensions=frozenset({"c", "h"}),
    query_text="""
        (function_definition
            declarator: (function_declarator
                declarator: (identifier) @name)) @function
        (function_definition
            declarator: (pointer_declarator
                declarator: (function_declarator
                    declarator: (identifier) @name))) @function
        (struct_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)) @struct
        (union_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)) @struct
        (enum_specifier
            name: (type_identifier) @name
            body: (enumerator_list)) @enum
        (type_definition
            declarator: (type_identifier) @name) @type_alias
        (translation_unit
            (declaration
                declarator: (init_declarator
                    declarator: (identifier) @name)) @variable)
    """,
    definition_kinds={
        "function_definition": _F,
        "struct_specifier": _S,
        "union_specifier": _S,
        "enum_specifier": _E,
        "type_definition": _T,
        "declaration": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"struct_specifier", "enum_specifier", "union_specifier"}),
    ),
)

CPP_PACK = LanguagePack(
    name="cpp",
    grammar_package="tree-sitter-cpp",
    grammar_module="tree_sitter_cpp",
    extensions=frozenset({"cpp", "cc", "cxx", "hpp", "hh", "hxx"}),
    query_text="""
        (function_definition
            declarator: (function_declarator
                declarator: [(identifier) (field_identifier) (destructor_name)
                             (operator_name)] @name)) @function
        (function_definition
            declarator: (function_declarator
                declarator: (qualified_identifier
                    name: (_) @name))) @function
        (class_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)) @class
        (struct_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)) @struct
        (union_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)) @struct
        (enum_specifier
            name: (type_identifier) @name
            body: (enumerator_list)) @enum
        (alias_declaration
            name: (type_identifier) @name) @type_alias
        (type_definition
            declarator: (type_identifier) @name) @type_alias
    """,
    definition_kinds={
        "function_definition": _F,
        "class_specifier": _C,
        "struct_specifier": _S,
        "union_specifier": _S,
        "enum_specifier": _E,
        "alias_declaration": _T,
        "type_definition": _T,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class_specifier", "struct_specifier"}),
    ),
)


# =========================================================================
# C#
# =========================================================================

CSHARP_PACK = LanguagePack(
    name="csharp",
    grammar_package="tree-sitter-c-sharp",
    grammar_module="tree_sitter_c_sharp",
    extensions=frozenset({"cs"}),
    query_text="""
        (class_declaration
            name: (identifier) @name) @class
        (interface_declaration
            name: (identifier) @name) @interface
        (struct_declaration
            name: (identifier) @name) @struct
        (enum_declaration
            name: (identifier) @name) @enum
        (record_declaration
            name: (identifier) @name) @class
        (method_declaration
            name: (identifier) @name) @function
        (constructor_declaration
            name: (identifier) @name) @function
        (property_declaration
            name: (identifier) @name) @variable
        (field_declaration
            (variable_declaration
                (variable_declarator
                    . (identifier) @name))) @variable
    """,
    definition_kinds={
        "class_declaration": _C,
        "interface_declaration": _I,
        "struct_declaration": _S,
        "enum_declaration": _E,
        "record_declaration": _C,
        "method_declaration": _F,
        "constructor_declaration": _F,
        "property_declaration": _V,
        "field_declaration": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset(
            {
                "class_declaration",
                "struct_declaration",
                "interface_declaration",
                "enum_declaration",
            }
        ),
    ),
)


# =========================================================================
# RUBY
# =========================================================================

RUBY_PACK = LanguagePack(
    name="ruby",
    grammar_package="tree-sitter-ruby",
    grammar_module="tree_sitter_ruby",
    extensions=frozenset({"rb", "rake"}),
    query_text="""
        (method
            name: (_) @name) @function
        (singleton_method
            name: (_) @name) @function
        (class
            name: (_) @name) @class
        (module
            name: (_) @name) @class
        (assignment
            left: (constant) @name) @variable
    """,
    definition_kinds={
        "method": _F,
        "singleton_method": _F,
        "class": _C,
        "module": _C,
        "assignment": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class", "module"}),
    ),
)


# =========================================================================
# PHP
# =========================================================================

PHP_PACK = LanguagePack(
    name="php",
    grammar_package="tree-sitter-php",
    grammar_module="tree_sitter_php",
    language_func="language_php",
    extensions=frozenset({"php"}),
    query_text="""
        (function_definition
            name: (name) @name) @function
        (class_declaration
            name: (name) @name) @class
        (interface_declaration
            name: (name) @name) @interface
        (trait_declaration
            name: (name) @name) @class
        (enum_declaration
            name: (name) @name) @enum
        (method_declaration
            name: (name) @name) @function
        (property_declaration
            (property_element
                (variable_name
                    (name) @name))) @variable
    """,
    definition_kinds={
        "function_definition": _F,
        "class_declaration": _C,
        "interface_declaration": _I,
        "trait_declaration": _C,
        "enum_declaration": _E,
        "method_declaration": _F,
        "property_declaration": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class_declaration", "interface_declaration", "trait_declaration"}),
    ),
)


# =========================================================================
# KOTLIN / SCALA
# =========================================================================

KOTLIN_PACK = LanguagePack(
    name="kotlin",
    grammar_package="tree-sitter-kotlin",
    grammar_module="tree_sitter_kotlin",
    extensions=frozenset({"kt", "kts"}),
    query_text="""
        (class_declaration
            (identifier) @name) @class
        (object_declaration
            (identifier) @name) @class
        (function_declaration
            (identifier) @name) @function
        (property_declaration
            (variable_declaration
                (identifier) @name)) @variable
    """,
    definition_kinds={
        "class_declaration": _C,
        "object_declaration": _C,
        "function_declaration": _F,
        "property_declaration": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class_declaration", "object_declaration"}),
        function_kinds=frozenset({"function_declaration", "secondary_constructor"}),
        start_at_self=True,
    ),
)

SCALA_PACK = LanguagePack(
    name="scala",
    grammar_package="tree-sitter-scala",
    grammar_module="tree_sitter_scala",
    extensions=frozenset({"scala", "sc"}),
    query_text="""
        (function_definition
            name: (identifier) @name) @function
        (class_definition
            name: (identifier) @name) @class
        (object_definition
            name: (identifier) @name) @class
        (trait_definition
            name: (identifier) @name) @interface
        (val_definition
            pattern: (identifier) @name) @variable
        (var_definition
            pattern: (identifier) @name) @variable
    """,
    definition_kinds={
        "function_definition": _F,
        "class_definition": _C,
        "object_definition": _C,
        "trait_definition": _I,
        "val_definition": _V,
        "var_definition": _V,
    },
    scope_rules=ScopeRules(
        type_kinds=frozenset({"class_definition", "object_definition", "trait_definition"}),
        function_kinds=frozenset({"function_definition"}),
        stop_function_at_type=True,
    ),
)


# =========================================================================
# Registry
# =========================================================================

_ALL_PACKS: tuple[LanguagePack, ...] = (
    GO_PACK,
    PYTHON_PACK,
    JAVA_PACK,
    JAVASCRIPT_PACK,
    TYPESCRIPT_PACK,
    TSX_PACK,
    RUST_PACK,
    C_PACK,
    CPP_PACK,
    CSHARP_PACK,
    RUBY_PACK,
    PHP_PACK,
    KOTLIN_PACK,
    SCALA_PACK,
)

PACKS: dict[str, LanguagePack] = {pack.name: pack for pack in _ALL_PACKS}


def get_pack(name: str) -> LanguagePack | None:
    """Get a LanguagePack by language identifier."""
    return PACKS.get(name)


def all_packs() -> tuple[LanguagePack, ...]:
    return _ALL_PACKS

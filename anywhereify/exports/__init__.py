"""
Export specification compiler.

Provides:
- sanitize_exports / parse_exports: validate the raw export document
- declare_exports / declare_global_exports: loading and hoisting fragments
- suppress_scoped_declarations: post-process bundled output
- generate_module_exports: the final ``module.exports`` literal
- packages: top-level package names to install

Usage::

    from anywhereify.exports import sanitize_exports, declare_exports

    tree = sanitize_exports(config.raw_exports)
    stub = declare_exports(tree)
"""

from anywhereify.exports.emit import (
    declare_exports,
    declare_global_exports,
    emit_declaration,
    emit_global_declaration,
    generate_module_exports,
    join_module_path,
    packages,
)
from anywhereify.exports.ids import (
    CounterIdentifierSource,
    IdentifierSource,
    RandomIdentifierSource,
    is_safe_identifier,
)
from anywhereify.exports.sanitize import (
    Parsed,
    ParseResult,
    Rejected,
    parse_exports,
    sanitize_exports,
)
from anywhereify.exports.scope import suppress_scoped_declarations
from anywhereify.exports.tree import (
    ExportNode,
    collect_ids,
    count_nodes,
    produces_binding,
    walk,
)

__all__ = [
    "CounterIdentifierSource",
    "ExportNode",
    "IdentifierSource",
    "ParseResult",
    "Parsed",
    "RandomIdentifierSource",
    "Rejected",
    "collect_ids",
    "count_nodes",
    "declare_exports",
    "declare_global_exports",
    "emit_declaration",
    "emit_global_declaration",
    "generate_module_exports",
    "is_safe_identifier",
    "join_module_path",
    "packages",
    "parse_exports",
    "produces_binding",
    "sanitize_exports",
    "suppress_scoped_declarations",
    "walk",
]

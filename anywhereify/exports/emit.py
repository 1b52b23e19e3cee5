"""
Source emitters for a sanitized export tree.

This module provides:

- emit_declaration: the fragment that loads a single node
- emit_global_declaration: the hoisted (uninitialized) binding for a node
- declare_exports / declare_global_exports: all fragments of a tree
- generate_module_exports: the final ``module.exports`` object literal
- packages: top-level package names, in tree order

The output is CommonJS, meant to be written into a stub file and handed to
the bundler.

Example:
    >>> tree = sanitize_exports([{"name": "left-pad", "alias": "leftPad"}], ids=ids)
    >>> declare_exports(tree)
    'var anywhereA = require("left-pad");'
    >>> print(generate_module_exports(tree))
    module.exports = {
      "leftPad": anywhereA,
    };
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence

from anywhereify.errors import ParentShapeError, UnrepresentableNodeError
from anywhereify.exports.tree import ExportNode, produces_binding, walk

logger = logging.getLogger(__name__)

_REPEATED_SLASHES = re.compile(r"/{2,}")


def _js_string(value: str) -> str:
    return json.dumps(value)


def _require(path: str) -> str:
    return f"require({_js_string(path)})"


def join_module_path(package: str, offset: str) -> str:
    """Join a package name and a sub-path, collapsing repeated slashes."""
    return _REPEATED_SLASHES.sub("/", f"{package}/{offset}")


def emit_declaration(
    node: ExportNode,
    parent: object | None,
    depth: int,
) -> str | None:
    """
    Return the fragment that loads *node*, or ``None`` if it needs none.

    Args:
        node: The node to load.
        parent: The owning node (required at depth 1).
        depth: The node's depth in the tree.

    Raises:
        ParentShapeError: If a depth-1 binding has no parent with a name.
        UnrepresentableNodeError: For any combination a sanitized tree
            cannot produce.
    """
    if not node.alias:
        return _require(node.name)

    if produces_binding(node, depth):
        if depth == 0:
            return f"var {node.id} = {_require(node.name)}"
        parent_name = getattr(parent, "name", None)
        if not isinstance(parent_name, str) or not parent_name:
            raise ParentShapeError(
                f"Expected a parent export with a non-empty String name, "
                f"encountered {parent!r}."
            )
        return f"var {node.id} = {_require(join_module_path(parent_name, node.name))}"

    if depth == 0 and node.has_children:
        # Children declare themselves; the package namespace has no binding.
        return None

    raise UnrepresentableNodeError(
        f"Unable to generate a declaration for {node!r} at depth {depth}."
    )


def emit_global_declaration(node: ExportNode, depth: int) -> str | None:
    """Return the hoisted binding for *node*, or ``None``."""
    if produces_binding(node, depth):
        return f"var {node.id}"
    return None


def _join_statements(fragments: list[str]) -> str:
    if not fragments:
        return ""
    return ";\n".join(fragments) + ";"


def declare_exports(exports: Sequence[ExportNode]) -> str:
    """All non-null declarations, depth-first, as one statement list."""
    return _join_statements(
        [node.declaration for node, _ in walk(exports) if node.declaration]
    )


def declare_global_exports(exports: Sequence[ExportNode]) -> str:
    """All non-null global declarations, depth-first, as one statement list."""
    return _join_statements(
        [node.global_declaration for node, _ in walk(exports) if node.global_declaration]
    )


def packages(exports: Sequence[ExportNode]) -> list[str]:
    """Top-level package names; only depth 0 names are installable."""
    return [node.name for node in exports]


def _collect_properties(
    nodes: Sequence[ExportNode],
    level: str,
) -> dict[str, Any]:
    """Alias -> value for one nesting level, last alias wins in first position."""
    properties: dict[str, Any] = {}
    for node in nodes:
        if not node.alias:
            continue
        if node.alias in properties:
            logger.warning(
                "Duplicate alias %r in %s; %s replaces the earlier binding",
                node.alias,
                level,
                node.name,
            )
        if node.has_children:
            properties[node.alias] = _collect_properties(
                node.children, f"exports of {node.alias!r}"
            )
        else:
            properties[node.alias] = node.id
    return properties


def generate_module_exports(exports: Sequence[ExportNode]) -> str:
    """
    Render the ``module.exports`` object literal for *exports*.

    Top-level aliased nodes without children become flat properties; nodes
    with children become a nested object keyed by the children's aliases.
    Nodes without an alias are left out.
    """
    properties = _collect_properties(exports, "module exports")

    lines = ["module.exports = {"]
    for alias, value in properties.items():
        if isinstance(value, dict):
            lines.append(f"  {_js_string(alias)}: {{")
            for child_alias, child_id in value.items():
                lines.append(f"    {_js_string(child_alias)}: {child_id},")
            lines.append("  },")
        else:
            lines.append(f"  {_js_string(alias)}: {value},")
    lines.append("};")
    return "\n".join(lines)

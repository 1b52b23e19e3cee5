"""
Export tree sanitizer.

Turns the raw, untyped ``exports`` document into an immutable tree of
:class:`ExportNode`. Two entry points:

- sanitize_exports: raises an :class:`ExportSpecError` on the first problem
- parse_exports: returns a tagged result (:class:`Parsed` or
  :class:`Rejected`) instead of raising

Accepted shape::

    [
      {"name": "<package>", "alias": "<binding>", "exports": [
        {"name": "<sub/path>", "alias": "<binding>"}
      ]}
    ]

Nesting is capped at one level, and a node with nested exports needs an
alias since its children are only reachable through the parent namespace.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Mapping, Union

from anywhereify.errors import (
    AliasError,
    DepthError,
    ExportSpecError,
    NestedExportsRequireAliasError,
    ShapeError,
)
from anywhereify.exports.emit import emit_declaration, emit_global_declaration
from anywhereify.exports.ids import IdentifierSource, RandomIdentifierSource
from anywhereify.exports.tree import MAX_DEPTH, ExportNode


def _render(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


def sanitize_alias(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise AliasError(f"Expected non-empty String alias, encountered {_render(value)}.")
    return value


def _sanitize_export(
    raw: Any,
    parent: ExportNode | None,
    depth: int,
    ids: IdentifierSource,
) -> ExportNode:
    if depth > MAX_DEPTH:
        raise DepthError(
            f"It is not possible to define exports at a depth higher than {MAX_DEPTH}. "
            f"Expected depth <= {MAX_DEPTH}, encountered {depth}."
        )
    if not isinstance(raw, Mapping):
        raise ShapeError(f"Expected Object export, encountered {_render(raw)}.")

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise ShapeError(
            "An export must define a name prop. "
            f"Expected non-empty String name, encountered {_render(name)}."
        )

    alias = sanitize_alias(raw["alias"]) if "alias" in raw else None

    head = ExportNode(id=ids.next_id(), name=name, alias=alias)

    children: tuple[ExportNode, ...] = ()
    if "exports" in raw:
        children = tuple(sanitize_exports(raw["exports"], head, depth + 1, ids=ids))

    if children and alias is None:
        raise NestedExportsRequireAliasError(
            f"In order to define nested exports for {_render(name)}, you must "
            "specify an alias for the parent export."
        )

    node = dataclasses.replace(head, children=children)
    return dataclasses.replace(
        node,
        declaration=emit_declaration(node, parent, depth),
        global_declaration=emit_global_declaration(node, depth),
    )


def sanitize_exports(
    raw: Any,
    parent: ExportNode | None = None,
    depth: int = 0,
    *,
    ids: IdentifierSource | None = None,
) -> list[ExportNode]:
    """
    Validate *raw* and build the export tree.

    Args:
        raw: The raw ``exports`` list.
        parent: The owning node when sanitizing nested exports.
        depth: Depth of the elements of *raw*.
        ids: Identifier source; a fresh random source when omitted.

    Returns:
        The sanitized nodes, in input order.

    Raises:
        ShapeError: *raw* is not a non-empty list, or an element is malformed.
        AliasError: An ``alias`` is not a non-empty string.
        DepthError: Exports are nested more than one level deep.
        NestedExportsRequireAliasError: Children declared without a parent alias.
    """
    if ids is None:
        ids = RandomIdentifierSource()
    if not isinstance(raw, list):
        raise ShapeError(f"Expected Array exports, encountered {_render(raw)}.")
    if not raw:
        raise ShapeError(
            "Defined exports must contain at least a single export child, "
            "but the array was empty."
        )
    return [_sanitize_export(item, parent, depth, ids) for item in raw]


# ---------------------------------------------------------------------------
# Tagged result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Parsed:
    """A successfully sanitized export tree."""

    exports: tuple[ExportNode, ...]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """A rejected export document and the reason."""

    error: ExportSpecError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)


ParseResult = Union[Parsed, Rejected]


def parse_exports(raw: Any, *, ids: IdentifierSource | None = None) -> ParseResult:
    """
    Sanitize *raw* without raising for malformed input.

    Example:
        >>> result = parse_exports([{"alias": "x"}])
        >>> result.ok, type(result.error).__name__
        (False, 'ShapeError')
    """
    try:
        return Parsed(tuple(sanitize_exports(raw, ids=ids)))
    except ExportSpecError as e:
        return Rejected(e)

"""
ExportNode: the sanitized, immutable export tree.

A tree is a tuple of top-level nodes (depth 0, one per package). Each may
own a tuple of children (depth 1, paths inside that package). Nodes are
frozen once built; ``declaration`` and ``global_declaration`` are computed
during sanitization and never change afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

MAX_DEPTH = 1


@dataclass(frozen=True)
class ExportNode:
    """
    One exposed package or sub-path.

    Attributes:
        id: Binding identifier, unique within one compilation.
        name: Package name at depth 0, path relative to the parent at depth 1.
        alias: Public name; ``None`` means a side-effect-only load.
        children: Nested exports (depth 1 only).
        declaration: Source fragment that loads this node, if any.
        global_declaration: Hoisted binding fragment, if any.
    """

    id: str
    name: str
    alias: str | None = None
    children: tuple[ExportNode, ...] = field(default_factory=tuple)
    declaration: str | None = None
    global_declaration: str | None = None

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0


def produces_binding(node: ExportNode, depth: int) -> bool:
    """
    Return ``True`` if *node* at *depth* is loaded into its own binding.

    Shared by the declaration and global declaration emitters so the two
    always agree on which nodes are hoisted.
    """
    if not node.alias:
        return False
    return (depth == 0 and not node.has_children) or depth == MAX_DEPTH


def walk(
    nodes: Sequence[ExportNode],
    depth: int = 0,
) -> Iterator[tuple[ExportNode, int]]:
    """Yield ``(node, depth)`` pairs depth-first, in tree order."""
    for node in nodes:
        yield node, depth
        yield from walk(node.children, depth + 1)


def collect_ids(nodes: Sequence[ExportNode]) -> list[str]:
    """Return every node id in the tree, depth-first."""
    return [node.id for node, _ in walk(nodes)]


def count_nodes(nodes: Sequence[ExportNode]) -> int:
    return sum(1 for _ in walk(nodes))

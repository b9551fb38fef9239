"""Expansion-aware linearization of the explorer tree."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from .types import TreeNode


class FlatRow(NamedTuple):
    """One visible row: the node and its display depth."""

    node: TreeNode
    depth: int


def flatten_tree(roots: Iterable[TreeNode]) -> list[FlatRow]:
    """Return visible rows in pre-order.

    A directory's children are visited only when it is expanded and its
    children are loaded. The tree is not modified.
    """
    rows: list[FlatRow] = []

    def walk(nodes: Iterable[TreeNode], depth: int) -> None:
        for node in nodes:
            rows.append(FlatRow(node, depth))
            if node.is_dir and node.expanded and node.children is not None:
                walk(node.children, depth + 1)

    walk(roots, 0)
    return rows


def iter_tree(roots: Iterable[TreeNode]) -> Iterable[TreeNode]:
    """Yield every loaded node in pre-order, ignoring expansion state."""
    for node in roots:
        yield node
        if node.children:
            yield from iter_tree(node.children)


__all__ = [
    "FlatRow",
    "flatten_tree",
    "iter_tree",
]

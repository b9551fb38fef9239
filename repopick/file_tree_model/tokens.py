"""Token aggregation over the explorer tree.

Directory totals always come from the token table, so they are correct
before a directory is ever expanded. Selected totals are derived bottom-up
from loaded children and fall back to the table for selected directories
whose children have not been read yet.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from .types import TokenTable, TreeNode


def file_tokens(path: Path, token_table: TokenTable) -> int:
    """Return the table entry for one file, or ``0`` when absent."""
    return token_table.lookup(path)


def directory_tokens(path: Path, token_table: TokenTable) -> int:
    """Return summed tokens of every table entry nested under ``path``."""
    return token_table.directory_total(path)


def _reuse_children(refreshed: tuple[TreeNode, ...], original: tuple[TreeNode, ...]) -> tuple[TreeNode, ...]:
    """Return ``original`` when refreshing left every child object unchanged."""
    if all(new is old for new, old in zip(refreshed, original)):
        return original
    return refreshed


def _refresh_node_tokens(node: TreeNode, token_table: TokenTable) -> TreeNode:
    if not node.is_dir:
        count = file_tokens(node.path, token_table)
        return node if count == node.token_count else replace(node, token_count=count)

    count = directory_tokens(node.path, token_table)
    children = node.children
    if children is not None:
        children = _reuse_children(tuple(_refresh_node_tokens(child, token_table) for child in children), children)
    if count == node.token_count and children is node.children:
        return node
    return replace(node, token_count=count, children=children)


def refresh_token_counts(roots: Iterable[TreeNode], token_table: TokenTable) -> tuple[TreeNode, ...]:
    """Recompute ``token_count`` for every node, then the selected totals."""
    refreshed = tuple(_refresh_node_tokens(node, token_table) for node in roots)
    return refresh_selected_token_counts(refreshed, token_table)


def _refresh_node_selected(node: TreeNode, token_table: TokenTable) -> TreeNode:
    if not node.is_dir:
        selected_tokens = node.token_count if node.selected else 0
        if selected_tokens == node.selected_token_count:
            return node
        return replace(node, selected_token_count=selected_tokens)

    if node.children is not None:
        children = _reuse_children(
            tuple(_refresh_node_selected(child, token_table) for child in node.children),
            node.children,
        )
        selected_tokens = sum(child.selected_token_count for child in children)
        if children is node.children and selected_tokens == node.selected_token_count:
            return node
        return replace(node, children=children, selected_token_count=selected_tokens)

    selected_tokens = directory_tokens(node.path, token_table) if node.selected else 0
    if selected_tokens == node.selected_token_count:
        return node
    return replace(node, selected_token_count=selected_tokens)


def refresh_selected_token_counts(
    roots: Iterable[TreeNode],
    token_table: TokenTable,
) -> tuple[TreeNode, ...]:
    """Recompute ``selected_token_count`` bottom-up for every node."""
    return tuple(_refresh_node_selected(node, token_table) for node in roots)


def total_selected_tokens(roots: Iterable[TreeNode], token_table: TokenTable) -> int:
    """Sum selected tokens across the whole tree without double counting.

    Selected files count individually. A selected directory counts through
    the table only while its children are unloaded; once loaded, its files
    are visited instead.
    """
    total = 0
    stack = list(roots)
    while stack:
        node = stack.pop()
        if not node.is_dir:
            if node.selected:
                total += node.token_count
            continue
        if node.children is None:
            if node.selected:
                total += directory_tokens(node.path, token_table)
            continue
        stack.extend(node.children)
    return total


def total_available_tokens(roots: Iterable[TreeNode]) -> int:
    """Sum the totals of the top-level nodes."""
    return sum(node.token_count for node in roots)


__all__ = [
    "file_tokens",
    "directory_tokens",
    "refresh_token_counts",
    "refresh_selected_token_counts",
    "total_selected_tokens",
    "total_available_tokens",
]

"""Expand/collapse and tri-state selection over the immutable tree.

Every operation returns new roots. Only the nodes on the path from a root
to the changed node are rebuilt; other subtrees are shared.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path
from typing import NamedTuple

from ..path_filter import PathFilter
from .flatten import flatten_tree, iter_tree
from .fs import read_directory
from .tokens import refresh_selected_token_counts, refresh_token_counts, total_selected_tokens
from .types import TokenTable, TreeNode

Roots = tuple[TreeNode, ...]


class SelectionUpdate(NamedTuple):
    """New roots plus the derived counters after a selection change."""

    roots: Roots
    selected_count: int
    total_selected_tokens: int


def _target_path(node: TreeNode | Path) -> Path:
    return node.path if isinstance(node, TreeNode) else Path(node)


def _update_at(
    nodes: Roots,
    target: Path,
    transform: Callable[[TreeNode], TreeNode],
    rebuild_parent: Callable[[TreeNode, Roots], TreeNode],
) -> tuple[Roots, bool]:
    """Apply ``transform`` to the node at ``target`` and rebuild its ancestors."""
    for index, node in enumerate(nodes):
        if node.path == target:
            return nodes[:index] + (transform(node),) + nodes[index + 1 :], True
        if node.is_dir and node.children and target.is_relative_to(node.path):
            children, found = _update_at(node.children, target, transform, rebuild_parent)
            if found:
                return nodes[:index] + (rebuild_parent(node, children),) + nodes[index + 1 :], True
    return nodes, False


def _attach_children(node: TreeNode, children: Roots) -> TreeNode:
    return replace(node, children=children)


def find_node(roots: Iterable[TreeNode], path: Path) -> TreeNode | None:
    """Return the loaded node whose path is ``path``."""
    for node in iter_tree(roots):
        if node.path == path:
            return node
    return None


def select_subtree(node: TreeNode, selected: bool) -> TreeNode:
    """Set ``selected`` on ``node`` and every loaded descendant."""
    children = node.children
    if children is not None:
        children = tuple(select_subtree(child, selected) for child in children)
    return replace(node, selected=selected, partially_selected=False, children=children)


def derive_selection_state(node: TreeNode, children: Roots | None = None) -> TreeNode:
    """Recompute a directory's tri-state flags from its loaded children.

    A directory with no loaded children keeps its own ``selected`` flag and
    is never partially selected.
    """
    if children is None:
        children = node.children
    if not children:
        return replace(node, children=children, partially_selected=False)
    all_selected = all(child.selected for child in children)
    any_selected = any(child.selected or child.partially_selected for child in children)
    return replace(
        node,
        children=children,
        selected=all_selected,
        partially_selected=any_selected and not all_selected,
    )


def selected_count(roots: Iterable[TreeNode]) -> int:
    """Count selected leaves: files and selected directories without loaded children."""
    return sum(1 for node in iter_tree(roots) if node.selected and not node.children)


def selected_paths(roots: Iterable[TreeNode]) -> list[Path]:
    """Return every selected node path in pre-order, regardless of expansion."""
    return [node.path for node in iter_tree(roots) if node.selected]


def _summarize(roots: Roots, token_table: TokenTable) -> SelectionUpdate:
    roots = refresh_selected_token_counts(roots, token_table)
    return SelectionUpdate(
        roots=roots,
        selected_count=selected_count(roots),
        total_selected_tokens=total_selected_tokens(roots, token_table),
    )


def expand_folder(
    node: TreeNode | Path,
    roots: Roots,
    token_table: TokenTable,
    path_filter: PathFilter | None = None,
) -> Roots:
    """Expand a directory, reading its children on first expansion.

    Children read under a selected directory start out selected. A
    directory that was expanded before keeps its loaded children.
    """
    target = _target_path(node)
    current = find_node(roots, target)
    if current is None or not current.is_dir or current.expanded:
        return roots

    def expand(found: TreeNode) -> TreeNode:
        if found.children is not None:
            return replace(found, expanded=True)
        children = read_directory(found.path, found.depth + 1, token_table, path_filter)
        if found.selected:
            children = tuple(select_subtree(child, True) for child in children)
        return replace(found, expanded=True, children=children)

    updated, _found = _update_at(roots, target, expand, _attach_children)
    return refresh_token_counts(updated, token_table)


def collapse_folder(node: TreeNode | Path, roots: Roots) -> Roots:
    """Collapse a directory; loaded children and their selection are kept."""
    target = _target_path(node)
    current = find_node(roots, target)
    if current is None or not current.is_dir or not current.expanded:
        return roots
    updated, _found = _update_at(roots, target, lambda found: replace(found, expanded=False), _attach_children)
    return updated


def toggle_selection(node: TreeNode | Path, roots: Roots, token_table: TokenTable) -> SelectionUpdate:
    """Flip one node, cascade to its loaded descendants, and re-derive ancestors."""
    target = _target_path(node)

    def toggle(found: TreeNode) -> TreeNode:
        toggled = select_subtree(found, not found.selected)
        return derive_selection_state(toggled) if toggled.is_dir else toggled

    updated, _found = _update_at(roots, target, toggle, derive_selection_state)
    return _summarize(updated, token_table)


def toggle_all(roots: Roots, token_table: TokenTable) -> SelectionUpdate:
    """Select everything unless every visible row is already selected."""
    target_state = not all(row.node.selected for row in flatten_tree(roots))
    updated = tuple(select_subtree(node, target_state) for node in roots)
    return _summarize(updated, token_table)


__all__ = [
    "Roots",
    "SelectionUpdate",
    "find_node",
    "select_subtree",
    "derive_selection_state",
    "selected_count",
    "selected_paths",
    "expand_folder",
    "collapse_folder",
    "toggle_selection",
    "toggle_all",
]

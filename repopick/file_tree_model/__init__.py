"""Domain model for the selectable, lazily loaded file tree.

This package contains non-UI tree primitives:
- tree node and token table datatypes
- filesystem listing for one directory level at a time
- expansion-aware flattening for cursor navigation
- tri-state selection and token aggregation
"""

from __future__ import annotations

from .flatten import FlatRow, flatten_tree, iter_tree
from .fs import DirectoryChild, list_directory_children, read_directory
from .selection import (
    Roots,
    SelectionUpdate,
    collapse_folder,
    derive_selection_state,
    expand_folder,
    find_node,
    select_subtree,
    selected_count,
    selected_paths,
    toggle_all,
    toggle_selection,
)
from .tokens import (
    directory_tokens,
    file_tokens,
    refresh_selected_token_counts,
    refresh_token_counts,
    total_available_tokens,
    total_selected_tokens,
)
from .types import TokenTable, TreeNode, normalize_table_key

__all__ = [
    "TreeNode",
    "TokenTable",
    "normalize_table_key",
    "DirectoryChild",
    "list_directory_children",
    "read_directory",
    "FlatRow",
    "flatten_tree",
    "iter_tree",
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
    "file_tokens",
    "directory_tokens",
    "refresh_token_counts",
    "refresh_selected_token_counts",
    "total_selected_tokens",
    "total_available_tokens",
]

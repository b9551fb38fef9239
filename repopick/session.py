"""Explorer session: the single mutation entry point for the UI layer.

Holds the tree roots, cursor and derived counters. Each public mutation
computes a complete new tree and counters first and then swaps them in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from .errors import ActionResult, EmptySelectionError, PackerError
from .file_tree_model import (
    FlatRow,
    Roots,
    SelectionUpdate,
    TokenTable,
    TreeNode,
    collapse_folder,
    expand_folder,
    flatten_tree,
    read_directory,
    refresh_token_counts,
    selected_count,
    selected_paths,
    toggle_all,
    toggle_selection,
    total_available_tokens,
    total_selected_tokens,
)
from .packer import expand_selection, run_repomix_with_selection
from .path_filter import PathFilter

logger = logging.getLogger(__name__)

PackAction = Callable[[Sequence[Path], Path], None]


class ExplorerSession:
    """Selection state for one browsed directory."""

    def __init__(
        self,
        root: Path,
        token_table: TokenTable,
        path_filter: PathFilter | None = None,
        roots: Roots | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.token_table = token_table
        self.path_filter = path_filter
        if roots is None:
            roots = read_directory(self.root, 0, token_table, path_filter)
        self.roots: Roots = ()
        self.cursor_index = 0
        self.selected_count = 0
        self.total_selected_tokens = 0
        self._commit(refresh_token_counts(roots, token_table))

    def _commit(self, roots: Roots, update: SelectionUpdate | None = None) -> None:
        """Swap in ``roots`` with counters from ``update`` or recounted from the tree."""
        if update is None:
            update = SelectionUpdate(roots, selected_count(roots), total_selected_tokens(roots, self.token_table))
        self.roots = roots
        self.selected_count = update.selected_count
        self.total_selected_tokens = update.total_selected_tokens
        self.cursor_index = max(0, min(self.cursor_index, len(self.rows()) - 1))

    def rows(self) -> list[FlatRow]:
        return flatten_tree(self.roots)

    @property
    def current_node(self) -> TreeNode | None:
        rows = self.rows()
        if not rows:
            return None
        return rows[self.cursor_index].node

    @property
    def total_available_tokens(self) -> int:
        return total_available_tokens(self.roots)

    def _resolve(self, node: TreeNode | None) -> TreeNode | None:
        return node if node is not None else self.current_node

    def expand(self, node: TreeNode | None = None) -> None:
        target = self._resolve(node)
        if target is None:
            return
        self._commit(expand_folder(target, self.roots, self.token_table, self.path_filter))

    def collapse(self, node: TreeNode | None = None) -> None:
        target = self._resolve(node)
        if target is None:
            return
        self._commit(collapse_folder(target, self.roots))

    def toggle_selection(self, node: TreeNode | None = None) -> None:
        target = self._resolve(node)
        if target is None:
            return
        update = toggle_selection(target, self.roots, self.token_table)
        self._commit(update.roots, update)

    def toggle_all(self) -> None:
        update = toggle_all(self.roots, self.token_table)
        self._commit(update.roots, update)

    def move_cursor(self, delta: int) -> bool:
        """Move the cursor by ``delta`` rows; moves past either end do nothing."""
        target = self.cursor_index + delta
        if target < 0 or target >= len(self.rows()):
            return False
        self.cursor_index = target
        return True

    def move_to(self, index: int) -> None:
        """Jump to ``index`` clamped to the visible rows."""
        self.cursor_index = max(0, min(index, len(self.rows()) - 1))

    def parent_row_index(self) -> int | None:
        """Return the row index of the current row's parent directory."""
        rows = self.rows()
        if not rows:
            return None
        current_depth = rows[self.cursor_index].depth
        if current_depth == 0:
            return None
        for index in range(self.cursor_index - 1, -1, -1):
            if rows[index].depth < current_depth:
                return index
        return None

    def move_to_parent(self) -> bool:
        index = self.parent_row_index()
        if index is None:
            return False
        self.cursor_index = index
        return True

    def selected_paths(self) -> list[Path]:
        return selected_paths(self.roots)

    def execute(self, pack: PackAction = run_repomix_with_selection) -> ActionResult:
        """Run the packing action on the selection and report the outcome.

        Selected directories are handed over as the visible files beneath
        them, so ignored files never reach the pack action.
        """
        paths = expand_selection(self.selected_paths(), self.path_filter)
        if not paths:
            return ActionResult.failure(str(EmptySelectionError()))
        try:
            pack(paths, self.root)
        except EmptySelectionError as exc:
            return ActionResult.failure(str(exc))
        except PackerError as exc:
            logger.warning("packing failed: %s", exc)
            return ActionResult.failure(str(exc))
        return ActionResult.success()


__all__ = [
    "ExplorerSession",
    "PackAction",
]

"""Filesystem listing and node construction for lazily loaded directories."""

from __future__ import annotations

import locale
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..path_filter import PathFilter
from .tokens import file_tokens
from .types import TokenTable, TreeNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryChild:
    """One visible directory entry before it becomes a tree node."""

    name: str
    path: Path
    is_dir: bool


def _sort_key(child: DirectoryChild) -> tuple[bool, str, str]:
    return (not child.is_dir, locale.strxfrm(child.name.casefold()), locale.strxfrm(child.name))


def list_directory_children(
    directory: Path,
    path_filter: PathFilter | None = None,
) -> tuple[list[DirectoryChild], OSError | None]:
    """List non-ignored children, directories first, then by name.

    Returns ``(children, scan_error)``. ``scan_error`` is set when the
    directory cannot be scanned, in which case ``children`` is empty.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                child_path = Path(directory) / entry.name
                if path_filter is not None and path_filter.is_ignored(child_path):
                    continue
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    is_dir = False
                children.append(DirectoryChild(name=entry.name, path=child_path, is_dir=is_dir))
    except OSError as exc:
        return [], exc

    children.sort(key=_sort_key)
    return children, None


def read_directory(
    directory: Path,
    depth: int,
    token_table: TokenTable,
    path_filter: PathFilter | None = None,
) -> tuple[TreeNode, ...]:
    """Return unloaded nodes for the immediate children of ``directory``.

    File nodes carry their table token count. Directory nodes start at zero
    and must be refreshed by the caller from the token table. Listing
    failures yield an empty tuple.
    """
    children, scan_error = list_directory_children(directory, path_filter)
    if scan_error is not None:
        logger.debug("cannot list %s: %s", directory, scan_error)
        return ()

    return tuple(
        TreeNode(
            name=child.name,
            path=child.path,
            is_dir=child.is_dir,
            depth=depth,
            token_count=0 if child.is_dir else file_tokens(child.path, token_table),
        )
        for child in children
    )


__all__ = [
    "DirectoryChild",
    "list_directory_children",
    "read_directory",
]

"""Domain datatypes for the selectable file tree and the token table."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from types import MappingProxyType


@dataclass(frozen=True)
class TreeNode:
    """One file or directory in the explorer tree.

    ``children`` is ``None`` until a directory has been read from disk; a
    loaded directory with no entries holds an empty tuple. Nodes are never
    mutated in place: operations build replacements with
    ``dataclasses.replace`` and share untouched subtrees.
    """

    name: str
    path: Path
    is_dir: bool
    depth: int = 0
    expanded: bool = False
    children: tuple["TreeNode", ...] | None = None
    selected: bool = False
    partially_selected: bool = False
    token_count: int = 0
    selected_token_count: int = 0

    @property
    def is_loaded(self) -> bool:
        """Return whether this directory's children have been read."""
        return self.children is not None


def normalize_table_key(key: str) -> str:
    """Normalize a token-table key to a forward-slash relative path."""
    normalized = key.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.rstrip("/")


def _directory_totals(counts: Mapping[str, int], base: Path) -> dict[str, int]:
    """Sum every table entry into each of its ancestor directory keys."""
    base_posix = base.as_posix().rstrip("/")
    totals: dict[str, int] = {}
    for raw_key, tokens in counts.items():
        key = normalize_table_key(raw_key)
        if key.startswith(base_posix + "/"):
            key = key[len(base_posix) + 1 :]
        elif key.startswith("/"):
            continue
        for parent in PurePosixPath(key).parents:
            parent_key = str(parent)
            if parent_key == ".":
                parent_key = ""
            totals[parent_key] = totals.get(parent_key, 0) + int(tokens)
    return totals


@dataclass(frozen=True)
class TokenTable:
    """Read-only ``relative path -> token count`` table for one session.

    Keys are relative to ``base``. The table is fetched once and passed
    explicitly to every operation that needs it.
    """

    counts: Mapping[str, int] = field(default_factory=dict)
    base: Path = field(default_factory=lambda: Path(os.curdir).resolve())
    _dir_totals: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        frozen_counts = MappingProxyType(dict(self.counts))
        object.__setattr__(self, "counts", frozen_counts)
        object.__setattr__(self, "base", Path(self.base))
        object.__setattr__(self, "_dir_totals", MappingProxyType(_directory_totals(frozen_counts, self.base)))

    def relative_key(self, path: Path) -> str:
        """Return ``path`` relative to ``base`` with forward slashes."""
        relative = os.path.relpath(path, self.base)
        if relative == os.curdir:
            return ""
        return relative.replace("\\", "/")

    def lookup(self, path: Path) -> int:
        """Return tokens for a file path, trying each supported key form."""
        raw_relative = os.path.relpath(path, self.base)
        normalized = raw_relative.replace("\\", "/")
        for key in (normalized, raw_relative, str(path), f"./{normalized}"):
            if key in self.counts:
                return int(self.counts[key])
        return 0

    def directory_total(self, path: Path) -> int:
        """Return summed tokens of every table entry nested under ``path``."""
        key = self.relative_key(path)
        if key.startswith("../"):
            return 0
        return int(self._dir_totals.get(key, 0))

    @property
    def total(self) -> int:
        """Return the sum of every entry in the table."""
        return int(self._dir_totals.get("", 0))

    def __len__(self) -> int:
        return len(self.counts)


__all__ = [
    "TreeNode",
    "TokenTable",
    "normalize_table_key",
]

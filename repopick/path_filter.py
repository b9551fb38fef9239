"""Ignore predicate used when listing and counting project files."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath

from .gitignore import get_gitignore_matcher

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".tox",
    ".venv",
    "venv",
    ".idea",
    ".vscode",
    ".DS_Store",
    "Thumbs.db",
    "*.pyc",
    "*.pyo",
    "*.lock",
    "package-lock.json",
    "repomix-output.*",
)


def pattern_matches(relative_path: str, pattern: str) -> bool:
    """Return whether ``pattern`` matches the path or any of its components.

    Patterns containing ``/`` are matched against the whole relative path;
    others are matched against each path component.
    """
    normalized = relative_path.replace("\\", "/").strip("/")
    if not normalized:
        return False
    if "/" in pattern:
        anchored = pattern.strip("/")
        return fnmatchcase(normalized, anchored) or fnmatchcase(normalized, anchored + "/*")
    return any(fnmatchcase(part, pattern) for part in PurePosixPath(normalized).parts)


@dataclass(frozen=True)
class PathFilter:
    """Wrap an externally supplied ``should_ignore(relative_path)`` predicate.

    ``root`` is the directory relative paths are computed from.
    """

    root: Path
    predicate: Callable[[str], bool]

    def relative(self, path: Path) -> str:
        return os.path.relpath(path, self.root).replace("\\", "/")

    def should_ignore(self, relative_path: str) -> bool:
        return bool(self.predicate(relative_path))

    def is_ignored(self, path: Path) -> bool:
        return self.should_ignore(self.relative(path))


def allow_all(root: Path) -> PathFilter:
    """Return a filter that ignores nothing."""
    return PathFilter(root=Path(root), predicate=lambda _relative_path: False)


def build_path_filter(
    root: Path,
    extra_patterns: Iterable[str] = (),
    use_gitignore: bool = True,
    default_patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS,
) -> PathFilter:
    """Compose default patterns, extra patterns and gitignore into one filter."""
    root = Path(root).resolve()
    patterns = tuple(default_patterns) + tuple(p for p in extra_patterns if p)
    matcher = get_gitignore_matcher(root) if use_gitignore else None

    def should_ignore(relative_path: str) -> bool:
        if any(pattern_matches(relative_path, pattern) for pattern in patterns):
            return True
        return matcher is not None and matcher.is_ignored(relative_path)

    return PathFilter(root=root, predicate=should_ignore)


__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "PathFilter",
    "allow_all",
    "build_path_filter",
    "pattern_matches",
]

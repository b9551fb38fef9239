"""Gitignore-aware ignore predicate.

Asks git once for the ignored files and directories under a root and
answers ``is_ignored(relative_path)`` from that snapshot. Matchers are
kept in a small per-root cache that expires after a few seconds or
when the root directory changes.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

MATCHER_CACHE_SIZE = 16
MATCHER_TTL_SECONDS = 2.0

LS_IGNORED_ARGS = ("ls-files", "-z", "--others", "-i", "--exclude-standard", "--directory")


@dataclass(frozen=True)
class GitIgnoreMatcher:
    """Ignored-path snapshot for one project root.

    Paths are stored relative to ``root`` in POSIX form so a query walks
    the relative path's parents instead of resolving anything on disk.
    """

    root: Path
    ignored_files: frozenset[str]
    ignored_dirs: frozenset[str]

    def is_ignored(self, relative_path: str) -> bool:
        """Return whether ``relative_path`` (relative to ``root``) is ignored."""
        candidate = relative_path.replace("\\", "/").strip("/")
        if not candidate or candidate.startswith("../"):
            return False
        if candidate in self.ignored_files or candidate in self.ignored_dirs:
            return True
        return any(str(parent) in self.ignored_dirs for parent in PurePosixPath(candidate).parents)


_matchers: OrderedDict[Path, tuple[GitIgnoreMatcher | None, int | None, float]] = OrderedDict()


def clear_gitignore_cache() -> None:
    _matchers.clear()


def _git_output(cwd: Path, *args: str) -> bytes | None:
    """Run ``git -C cwd args`` and return stdout, or ``None`` on failure."""
    try:
        proc = subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("git %s in %s failed: %s", args[0], cwd, exc)
        return None
    return proc.stdout


def _split_listing(listing: bytes, repo_root: Path, root: Path) -> tuple[set[str], set[str]]:
    """Sort NUL-separated ``ls-files`` entries into files and directories under ``root``."""
    files: set[str] = set()
    dirs: set[str] = set()
    for raw in listing.split(b"\x00"):
        entry = raw.decode("utf-8", errors="replace")
        trimmed = entry.rstrip("/")
        if not trimmed:
            continue
        absolute = repo_root / trimmed
        if absolute == root or not absolute.is_relative_to(root):
            continue
        key = absolute.relative_to(root).as_posix()
        if entry.endswith("/") or absolute.is_dir():
            dirs.add(key)
        else:
            files.add(key)
    return files, dirs


def _load_matcher(root: Path) -> GitIgnoreMatcher | None:
    """Build a matcher for ``root``.

    Returns ``None`` when git is unavailable or ``root`` is not inside a
    work tree. Entries from a higher repository top level that fall
    outside ``root`` are dropped.
    """
    if shutil.which("git") is None:
        return None

    root = root.resolve()
    toplevel = _git_output(root, "rev-parse", "--show-toplevel")
    if not toplevel or not toplevel.strip():
        return None
    repo_root = Path(toplevel.decode("utf-8", errors="replace").strip()).resolve()
    if not root.is_relative_to(repo_root):
        return None

    listing = _git_output(repo_root, *LS_IGNORED_ARGS)
    if listing is None:
        return None
    files, dirs = _split_listing(listing, repo_root, root)
    logger.debug("gitignore under %s: %d files, %d dirs", root, len(files), len(dirs))
    return GitIgnoreMatcher(root=root, ignored_files=frozenset(files), ignored_dirs=frozenset(dirs))


def get_gitignore_matcher(root: Path) -> GitIgnoreMatcher | None:
    """Return the matcher for ``root``.

    A cached matcher is reused until it is older than the TTL or the root
    directory's mtime changes.
    """
    key = root.resolve()
    try:
        mtime_ns: int | None = key.stat().st_mtime_ns
    except OSError:
        mtime_ns = None
    now = time.monotonic()
    cached = _matchers.get(key)
    if cached is not None:
        matcher, cached_mtime, loaded_at = cached
        if cached_mtime == mtime_ns and now - loaded_at <= MATCHER_TTL_SECONDS:
            _matchers.move_to_end(key)
            return matcher

    matcher = _load_matcher(key)
    _matchers[key] = (matcher, mtime_ns, now)
    _matchers.move_to_end(key)
    while len(_matchers) > MATCHER_CACHE_SIZE:
        _matchers.popitem(last=False)
    return matcher

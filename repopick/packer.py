"""Hand the current selection to the ``repomix`` packing tool."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from .errors import EmptySelectionError, PackerError
from .file_tree_model import TreeNode, list_directory_children, selected_paths
from .path_filter import PathFilter

logger = logging.getLogger(__name__)

REPOMIX_EXECUTABLE = "repomix"
PACK_TIMEOUT_SECONDS = 300.0


def selected_file_paths(roots: Iterable[TreeNode]) -> list[Path]:
    """Return every selected path in pre-order, regardless of expansion."""
    return selected_paths(roots)


def _visible_files(directory: Path, path_filter: PathFilter | None, visited: set[Path]) -> Iterator[Path]:
    real = directory.resolve()
    if real in visited:
        return
    visited.add(real)
    children, scan_error = list_directory_children(directory, path_filter)
    if scan_error is not None:
        logger.debug("cannot list %s: %s", directory, scan_error)
        return
    for child in children:
        if child.is_dir:
            yield from _visible_files(child.path, path_filter, visited)
        else:
            yield child.path


def expand_selection(selected: Iterable[Path], path_filter: PathFilter | None = None) -> list[Path]:
    """Replace selected directories with the files the explorer shows under them.

    Files hidden by ``path_filter`` are left out, so the packed set matches
    the rows and token totals the user saw. Order is kept and duplicates
    from a selected directory and its selected children are dropped.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    visited: set[Path] = set()
    for path in selected:
        path = Path(path)
        candidates = _visible_files(path, path_filter, visited) if path.is_dir() else (path,)
        for candidate in candidates:
            if candidate not in seen:
                seen.add(candidate)
                files.append(candidate)
    return files


def include_patterns(selected_files: Sequence[Path], cwd: Path) -> list[str]:
    """Convert selected paths into repomix ``--include`` patterns.

    Directories become ``dir/**`` globs and paths already covered by a
    selected ancestor directory are dropped.
    """
    patterns: list[str] = []
    covered: list[str] = []
    for path in selected_files:
        relative = os.path.relpath(path, cwd).replace("\\", "/")
        if any(relative.startswith(prefix + "/") for prefix in covered):
            continue
        if Path(path).is_dir():
            covered.append(relative)
            patterns.append(f"{relative}/**")
        else:
            patterns.append(relative)
    return patterns


def repomix_command() -> list[str]:
    """Return the argv prefix used to invoke repomix."""
    executable = shutil.which(REPOMIX_EXECUTABLE)
    if executable is not None:
        return [executable]
    npx = shutil.which("npx")
    if npx is not None:
        return [npx, "--yes", REPOMIX_EXECUTABLE]
    raise PackerError("repomix not found (install it with `npm install -g repomix`)")


def run_repomix_with_selection(selected_files: Sequence[Path], cwd: Path) -> None:
    """Pack ``selected_files`` with repomix and copy the output to the clipboard.

    Raises ``EmptySelectionError`` before running anything when nothing is
    selected, and ``PackerError`` when repomix is missing or fails.
    """
    if not selected_files:
        raise EmptySelectionError()

    cwd = Path(cwd)
    command = [
        *repomix_command(),
        "--include",
        ",".join(include_patterns(selected_files, cwd)),
        "--copy",
        "--quiet",
    ]
    logger.info("running %s in %s", command[0], cwd)
    try:
        subprocess.run(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
            timeout=PACK_TIMEOUT_SECONDS,
        )
    except subprocess.CalledProcessError as exc:
        cause = (exc.stderr or exc.stdout or "").strip().splitlines()
        message = cause[-1] if cause else f"repomix exited with status {exc.returncode}"
        logger.warning("repomix failed: %s", message)
        raise PackerError(message) from exc
    except subprocess.TimeoutExpired as exc:
        raise PackerError("repomix timed out") from exc
    except OSError as exc:
        raise PackerError(str(exc)) from exc


__all__ = [
    "REPOMIX_EXECUTABLE",
    "selected_file_paths",
    "expand_selection",
    "include_patterns",
    "repomix_command",
    "run_repomix_with_selection",
]

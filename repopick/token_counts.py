"""Per-file token counting for a project root.

Produces the session's token table: every non-ignored text file under the
root mapped (by POSIX path relative to the root) to its tiktoken count.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

import tiktoken

from .file_tree_model import TokenTable
from .path_filter import PathFilter, allow_all

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_ENCODING = "o200k_base"
MAX_TOKEN_FILE_BYTES = 4 * 1024 * 1024
BINARY_SNIFF_BYTES = 8192


@lru_cache(maxsize=4)
def get_encoding(encoding_name: str) -> tiktoken.Encoding:
    return tiktoken.get_encoding(encoding_name)


def read_countable_text(path: Path) -> str | None:
    """Return file text, or ``None`` for oversized, binary, or unreadable files."""
    try:
        if path.stat().st_size > MAX_TOKEN_FILE_BYTES:
            return None
        data = path.read_bytes()
    except OSError:
        return None
    if b"\x00" in data[:BINARY_SNIFF_BYTES]:
        return None
    return data.decode("utf-8", errors="replace")


def count_text_tokens(text: str, encoding_name: str = DEFAULT_TOKEN_ENCODING) -> int:
    return len(get_encoding(encoding_name).encode(text, disallowed_special=()))


def count_project_tokens(
    root: Path,
    path_filter: PathFilter | None = None,
    encoding_name: str = DEFAULT_TOKEN_ENCODING,
) -> dict[str, int]:
    """Walk ``root`` and count tokens of every included text file."""
    root = Path(root).resolve()
    active_filter = path_filter or allow_all(root)
    counts: dict[str, int] = {}

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = sorted(name for name in dirnames if not active_filter.is_ignored(current / name))
        for filename in sorted(filenames):
            file_path = current / filename
            if active_filter.is_ignored(file_path):
                continue
            text = read_countable_text(file_path)
            if text is None:
                continue
            relative = file_path.relative_to(root).as_posix()
            counts[relative] = count_text_tokens(text, encoding_name)

    logger.info("counted tokens for %d files under %s", len(counts), root)
    return counts


def fetch_token_table(
    root: Path,
    path_filter: PathFilter | None = None,
    encoding_name: str = DEFAULT_TOKEN_ENCODING,
) -> TokenTable:
    """Return the session token table; failures yield an empty table."""
    root = Path(root).resolve()
    try:
        counts = count_project_tokens(root, path_filter, encoding_name)
    except Exception as exc:
        logger.warning("failed to count tokens under %s: %s", root, exc)
        counts = {}
    return TokenTable(counts=counts, base=root)


__all__ = [
    "DEFAULT_TOKEN_ENCODING",
    "MAX_TOKEN_FILE_BYTES",
    "get_encoding",
    "read_countable_text",
    "count_text_tokens",
    "count_project_tokens",
    "fetch_token_table",
]

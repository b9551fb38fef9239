"""Command-line front door for repopick.

Parses CLI options, configures logging, resolves the target directory and
either prints a token summary or launches the interactive explorer.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from platformdirs import user_log_dir

from .file_tree_model import TokenTable, read_directory, refresh_token_counts
from .path_filter import PathFilter, build_path_filter
from .render import format_token_count
from .runtime import config, run_explorer
from .token_counts import fetch_token_table
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(log_file: str | None, verbose: bool) -> logging.Logger:
    """Attach a file handler to the ``repopick`` logger.

    The terminal belongs to the UI, so logs only go to a file: ``log_file``
    when given, or the platform log directory when ``verbose`` is set.
    Without either, logging stays silent.
    """
    logger = logging.getLogger("repopick")
    if log_file is None and not verbose:
        return logger
    if log_file is None:
        log_dir = Path(user_log_dir("repopick", appauthor=False))
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = str(log_dir / "repopick.log")

    for handler in logger.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.debug("logging to %s", log_file)
    return logger


def summarize_tokens(root: Path, token_table: TokenTable, path_filter: PathFilter | None = None) -> str:
    """Return a plain-text summary of top-level entries and their token totals."""
    roots = refresh_token_counts(read_directory(root, 0, token_table, path_filter), token_table)
    total = sum(node.token_count for node in roots)
    width = max((len(node.name) + (1 if node.is_dir else 0) for node in roots), default=0)
    lines = []
    for node in roots:
        label = node.name + ("/" if node.is_dir else "")
        lines.append(f"{label.ljust(width)}  {format_token_count(node.token_count) or '0'}")
    lines.append(f"{'total'.ljust(width)}  {format_token_count(total) or '0'} ({len(token_table)} files)")
    return "\n".join(lines) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repopick",
        description="Pick files from a directory tree and pack them with repomix.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to browse. Defaults to current directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); a known name is remembered.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--encoding", default=None, help="tiktoken encoding used for token counts.")
    parser.add_argument("--no-gitignore", action="store_true", help="Show files ignored by git.")
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Extra glob pattern to hide (repeatable).",
    )
    parser.add_argument("--list", action="store_true", help="Print token totals and exit.")
    parser.add_argument("--log-file", default=None, help="Write logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Sequence[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and run repopick.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    if default_path is None:
        default_path = Path.cwd()
    root = Path(args.path or default_path)
    if not root.exists():
        raise SystemExit(f"Path not found: {root}")
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")
    root = root.resolve()

    if args.theme is not None and args.theme.strip().lower() in available_theme_names():
        config.save_theme_name(args.theme.strip().lower())
    theme_name = args.theme or config.load_theme_name()
    encoding = args.encoding or config.load_token_encoding()
    use_gitignore = config.load_use_gitignore() and not args.no_gitignore
    ignore_patterns = config.load_ignore_patterns() + list(args.ignore)

    if args.list:
        path_filter = build_path_filter(root, ignore_patterns, use_gitignore=use_gitignore)
        token_table = fetch_token_table(root, path_filter, encoding)
        sys.stdout.write(summarize_tokens(root, token_table, path_filter))
        return

    run_explorer(
        root,
        theme_name=theme_name,
        no_color=args.no_color,
        use_gitignore=use_gitignore,
        ignore_patterns=ignore_patterns,
        token_encoding=encoding,
    )


if __name__ == "__main__":
    main()

"""Public runtime orchestration entry points.

This package groups the interactive explorer bootstrap (``run_explorer``)
and the lower-level event loop used by tests and composition code.
"""

from __future__ import annotations


def run_explorer(*args, **kwargs):
    """Lazily import the explorer entrypoint to avoid terminal imports on load."""
    from .app import run_explorer as _run_explorer

    return _run_explorer(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


__all__ = [
    "run_explorer",
    "run_main_loop",
]

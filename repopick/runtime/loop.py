"""Main interactive event loop for the explorer.

The loop only polls, paints and forwards keys; behavior lives on the app.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..input import read_key
from ..render import paint
from .terminal import TerminalController

if TYPE_CHECKING:
    from .app import ExplorerApp


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    idle_poll_ms: int


def run_main_loop(
    app: "ExplorerApp",
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
) -> None:
    """Run until a quit action; repaint only when state is dirty or the size changes."""
    state = app.state
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while not state.quit:
            app.tick()
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                state.dirty = True
            if state.dirty:
                terminal.write(paint(app.screen_lines(term.lines, term.columns)))
                state.dirty = False
            key = read_key(stdin_fd, timeout_ms=timing.idle_poll_ms)
            app.handle_key(key)

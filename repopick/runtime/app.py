"""Explorer application wiring: background tasks, keys, and screen state."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from ..errors import ActionResult
from ..file_tree_model import TokenTable
from ..packer import run_repomix_with_selection
from ..path_filter import PathFilter, build_path_filter
from ..render import build_explorer_lines, loading_lines, processing_lines, result_lines, status_text
from ..session import ExplorerSession, PackAction
from ..token_counts import DEFAULT_TOKEN_ENCODING, fetch_token_table
from ..ui_theme import UITheme, resolve_theme
from .background import SingleFlightTask
from .keys import handle_key
from .loop import RuntimeLoopTiming, run_main_loop
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

TokenTableLoader = Callable[[Path, PathFilter | None, str], TokenTable]


class ExplorerApp:
    """Own the UI state and the two single-flight background requests."""

    def __init__(
        self,
        root: Path,
        path_filter: PathFilter | None,
        token_encoding: str,
        theme: UITheme,
        load_token_table: TokenTableLoader = fetch_token_table,
        pack: PackAction = run_repomix_with_selection,
    ) -> None:
        self.root = Path(root).resolve()
        self.path_filter = path_filter
        self.token_encoding = token_encoding
        self.theme = theme
        self.state = AppState(root=self.root)
        self._load_token_table = load_token_table
        self._pack = pack
        self._session_task: SingleFlightTask[ExplorerSession] = SingleFlightTask(name="repopick-token-count")
        self._pack_task: SingleFlightTask[ActionResult] = SingleFlightTask(name="repopick-pack")

    def _open_session(self) -> ExplorerSession:
        token_table = self._load_token_table(self.root, self.path_filter, self.token_encoding)
        return ExplorerSession(self.root, token_table, self.path_filter)

    def start(self) -> bool:
        """Begin the one-time token count; the session opens when it finishes."""
        return self._session_task.start(self._open_session)

    def start_execute(self) -> bool:
        """Start packing unless loading or a previous pack is still running."""
        session = self.state.session
        if session is None or self.state.executing:
            return False
        if not self._pack_task.start(lambda: session.execute(self._pack)):
            return False
        self.state.executing = True
        self.state.dirty = True
        return True

    def tick(self) -> None:
        """Collect finished background work and advance the loading animation."""
        state = self.state
        loaded = self._session_task.poll()
        if loaded is not None:
            if loaded.ok and loaded.value is not None:
                state.session = loaded.value
            else:
                logger.warning("token count failed, continuing without counts: %s", loaded.error)
                state.session = ExplorerSession(self.root, TokenTable(base=self.root), self.path_filter)
            state.dirty = True
        elif state.loading:
            state.loading_frame += 1
            state.dirty = True

        packed = self._pack_task.poll()
        if packed is not None:
            if packed.ok and packed.value is not None:
                state.result = packed.value
            else:
                state.result = ActionResult.failure(str(packed.error))
            state.executing = False
            state.dirty = True

    def handle_key(self, key: str) -> bool:
        return handle_key(key, self.state, self.start_execute)

    def screen_lines(self, height: int, width: int) -> list[str]:
        state = self.state
        session = state.session
        if session is None:
            return loading_lines(state.loading_frame, height, width, self.theme)
        if state.executing:
            return processing_lines(height, width, self.theme)
        if state.result is not None:
            return result_lines(state.result.ok, state.result.message, height, width, self.theme)
        rows = session.rows()
        status = status_text(
            session.selected_count,
            session.total_selected_tokens,
            session.total_available_tokens,
            session.cursor_index,
            len(rows),
            str(self.root),
        )
        return build_explorer_lines(rows, session.cursor_index, status, height, width, self.theme)


def run_explorer(
    root: Path,
    theme_name: str | None = None,
    no_color: bool = False,
    use_gitignore: bool = True,
    ignore_patterns: Sequence[str] = (),
    token_encoding: str = DEFAULT_TOKEN_ENCODING,
) -> None:
    """Run the interactive explorer on ``root`` until the user quits."""
    if not (os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())):
        raise SystemExit("repopick needs an interactive terminal.")

    path_filter = build_path_filter(root, ignore_patterns, use_gitignore=use_gitignore)
    app = ExplorerApp(
        root,
        path_filter,
        token_encoding,
        resolve_theme(theme_name, no_color=no_color),
    )
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    app.start()
    run_main_loop(app, terminal, sys.stdin.fileno(), RuntimeLoopTiming(idle_poll_ms=120))

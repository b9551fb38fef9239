"""Key dispatch for the explorer screen."""

from __future__ import annotations

from collections.abc import Callable

from .state import AppState

QUIT_KEYS = frozenset({"q", "ESC"})
ENTER_KEYS = frozenset({"ENTER_CR", "ENTER_LF"})
PAGE_ROWS = 10


def handle_key(key: str, state: AppState, start_execute: Callable[[], None]) -> bool:
    """Apply one key token to ``state``; return whether anything changed.

    While a result message is shown, any key only dismisses it. Input is
    ignored while loading or while a pack is running, except ``CTRL_C``.
    """
    if not key:
        return False
    if key == "CTRL_C":
        state.quit = True
        return True
    if state.result is not None:
        state.result = None
        state.dirty = True
        return True
    session = state.session
    if session is None or state.executing:
        return False

    if key in QUIT_KEYS:
        state.quit = True
        return True
    if key in ENTER_KEYS:
        start_execute()
        state.dirty = True
        return True

    node = session.current_node
    if key in {"UP", "k"}:
        changed = session.move_cursor(-1)
    elif key in {"DOWN", "j"}:
        changed = session.move_cursor(1)
    elif key == "HOME":
        session.move_to(0)
        changed = True
    elif key == "END":
        session.move_to(len(session.rows()) - 1)
        changed = True
    elif key == "PAGE_UP":
        session.move_to(session.cursor_index - PAGE_ROWS)
        changed = True
    elif key == "PAGE_DOWN":
        session.move_to(session.cursor_index + PAGE_ROWS)
        changed = True
    elif key in {"RIGHT", "l"}:
        if node is not None and node.is_dir and not node.expanded:
            session.expand(node)
            changed = True
        else:
            changed = session.move_cursor(1)
    elif key in {"LEFT", "h"}:
        if node is not None and node.is_dir and node.expanded:
            session.collapse(node)
            changed = True
        else:
            changed = session.move_to_parent()
    elif key == "SPACE":
        if node is None:
            return False
        session.toggle_selection(node)
        changed = True
    elif key == "a":
        session.toggle_all()
        changed = True
    else:
        return False

    if changed:
        state.dirty = True
    return changed

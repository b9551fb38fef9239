"""Screen composition for the explorer: rows, status line, and modal screens."""

from __future__ import annotations

from collections.abc import Sequence

from .file_tree_model import FlatRow, TreeNode
from .ui_theme import DEFAULT_THEME, UITheme

HINT_LINE = "↑/↓ move • → expand • ← collapse/parent • Space select • a toggle all • Enter execute • q quit"
Segment = tuple[str, str]


def format_token_count(count: int) -> str:
    """Format a token count compactly: ``""``, ``"950"``, ``"1.2k"``, ``"3.4m"``."""
    if count == 0:
        return ""
    if count < 1000:
        return f"{count}"
    if count < 1_000_000:
        return f"{count / 1000:.1f}k"
    return f"{count / 1_000_000:.1f}m"


def token_label(node: TreeNode) -> str:
    """Return the token text shown after a row's name."""
    if node.is_dir and node.partially_selected:
        return f"{format_token_count(node.selected_token_count)}/{format_token_count(node.token_count)}"
    if node.is_dir and node.selected:
        return format_token_count(node.selected_token_count)
    return format_token_count(node.token_count)


def checkbox_for(node: TreeNode) -> str:
    if node.selected:
        return "[✓]"
    if node.partially_selected:
        return "[◐]"
    return "[ ]"


def compose(segments: Sequence[Segment], width: int, reset: str) -> str:
    """Join colored segments, truncating visible text to ``width`` cells."""
    out: list[str] = []
    remaining = max(0, width)
    for color, text in segments:
        if remaining <= 0:
            break
        if len(text) > remaining:
            text = text[:remaining]
        remaining -= len(text)
        if color:
            out.append(f"{color}{text}{reset}")
        else:
            out.append(text)
    return "".join(out)


def format_tree_row(row: FlatRow, is_active: bool, width: int, theme: UITheme | None = None) -> str:
    """Render one tree row as ANSI-styled text."""
    active_theme = theme or DEFAULT_THEME
    node = row.node
    if node.selected:
        checkbox_color = active_theme.checkbox_selected
    elif node.partially_selected:
        checkbox_color = active_theme.checkbox_partial
    else:
        checkbox_color = ""
    icon = ("▾" if node.expanded else "▸") if node.is_dir else "·"
    if node.selected:
        name_color = active_theme.name_selected
    else:
        name_color = active_theme.tree_dir if node.is_dir else active_theme.tree_file
    segments: list[Segment] = [
        (active_theme.cursor, "▍ " if is_active else "  "),
        (checkbox_color, checkbox_for(node)),
        ("", " " + "  " * row.depth),
        (active_theme.tree_marker, icon),
        (name_color, f" {node.name}"),
    ]
    label = token_label(node)
    if label:
        token_color = active_theme.tokens_active if (node.selected or node.partially_selected) else active_theme.tokens_idle
        segments.append((token_color, f" ({label})"))
    return compose(segments, width, active_theme.reset)


def visible_window(cursor_index: int, row_count: int, height: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the row slice that keeps the cursor centred."""
    height = max(1, height)
    start = max(0, min(cursor_index - height // 2, row_count - height))
    end = min(row_count, start + height)
    return start, end


def status_text(
    selected_count: int,
    selected_tokens: int,
    available_tokens: int,
    cursor_index: int,
    row_count: int,
    root_label: str,
) -> str:
    return (
        f"{selected_count} selected • {format_token_count(selected_tokens) or 0}/"
        f"{format_token_count(available_tokens) or 0} tokens • {cursor_index + 1}/{row_count} • {root_label}"
    )


def build_explorer_lines(
    rows: Sequence[FlatRow],
    cursor_index: int,
    status: str,
    height: int,
    width: int,
    theme: UITheme | None = None,
) -> list[str]:
    """Compose the hint line, visible tree rows, and the status line."""
    active_theme = theme or DEFAULT_THEME
    tree_height = max(1, height - 3)
    start, end = visible_window(cursor_index, len(rows), tree_height)
    lines = [compose([(active_theme.hint, HINT_LINE)], width, active_theme.reset), ""]
    for index in range(start, end):
        lines.append(format_tree_row(rows[index], index == cursor_index, width, active_theme))
    while len(lines) < height - 1:
        lines.append("")
    lines.append(compose([(active_theme.status, status)], width, active_theme.reset))
    return lines


def build_message_lines(
    messages: Sequence[Segment],
    height: int,
    width: int,
    theme: UITheme | None = None,
) -> list[str]:
    """Center ``messages`` (one per line) vertically and horizontally."""
    active_theme = theme or DEFAULT_THEME
    top = max(0, (height - len(messages)) // 2)
    lines = [""] * top
    for color, text in messages:
        pad = max(0, (width - len(text)) // 2)
        lines.append(" " * pad + compose([(color, text)], width - pad, active_theme.reset))
    while len(lines) < height:
        lines.append("")
    return lines[:height]


def loading_lines(frame: int, height: int, width: int, theme: UITheme | None = None) -> list[str]:
    active_theme = theme or DEFAULT_THEME
    text = "Counting tokens" + "." * (frame % 4)
    return build_message_lines([(active_theme.processing, text.ljust(len("Counting tokens") + 3))], height, width, active_theme)


def processing_lines(height: int, width: int, theme: UITheme | None = None) -> list[str]:
    active_theme = theme or DEFAULT_THEME
    return build_message_lines([(active_theme.processing, "Processing...")], height, width, active_theme)


def result_lines(ok: bool, message: str, height: int, width: int, theme: UITheme | None = None) -> list[str]:
    active_theme = theme or DEFAULT_THEME
    text = f"✅ {message}" if ok else f"❌ {message}"
    return build_message_lines(
        [("", text), ("", ""), (active_theme.hint, "Press any key to continue...")],
        height,
        width,
        active_theme,
    )


def paint(lines: Sequence[str]) -> str:
    """Return the escape sequence that redraws the whole screen with ``lines``."""
    return "\033[H" + "\r\n".join(f"{line}\033[K" for line in lines) + "\033[J"


__all__ = [
    "HINT_LINE",
    "format_token_count",
    "token_label",
    "checkbox_for",
    "compose",
    "format_tree_row",
    "visible_window",
    "status_text",
    "build_explorer_lines",
    "build_message_lines",
    "loading_lines",
    "processing_lines",
    "result_lines",
    "paint",
]

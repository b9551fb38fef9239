"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the explorer rows and chrome.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    hint: str
    cursor: str
    checkbox_selected: str
    checkbox_partial: str
    tree_marker: str
    tree_dir: str
    tree_file: str
    name_selected: str
    tokens_active: str
    tokens_idle: str
    status: str
    processing: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    hint="\033[90m",
    cursor="\033[1;36m",
    checkbox_selected="\033[32m",
    checkbox_partial="\033[33m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_file="\033[38;5;252m",
    name_selected="\033[1;37m",
    tokens_active="\033[36m",
    tokens_idle="\033[90m",
    status="\033[90m",
    processing="\033[33m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    hint="\033[2;38;5;110m",
    cursor="\033[1;38;5;45m",
    checkbox_selected="\033[38;5;42m",
    checkbox_partial="\033[38;5;214m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_file="\033[38;5;153m",
    name_selected="\033[1;38;5;231m",
    tokens_active="\033[38;5;81m",
    tokens_idle="\033[2;38;5;73m",
    status="\033[2;38;5;110m",
    processing="\033[38;5;229m",
)

MONO_THEME = UITheme(
    name="mono",
    reset="",
    hint="",
    cursor="",
    checkbox_selected="",
    checkbox_partial="",
    tree_marker="",
    tree_dir="",
    tree_file="",
    name_selected="",
    tokens_active="",
    tokens_idle="",
    status="",
    processing="",
)

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME, MONO_THEME)}


def available_theme_names() -> list[str]:
    return sorted(_THEMES)


def resolve_theme(name: str | None, no_color: bool = False) -> UITheme:
    """Return the named theme, ``mono`` when color is off, else the default."""
    if no_color:
        return MONO_THEME
    if name is None:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)

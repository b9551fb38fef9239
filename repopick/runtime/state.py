"""Mutable UI state for one interactive run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import ActionResult
from ..session import ExplorerSession


@dataclass
class AppState:
    root: Path
    session: ExplorerSession | None = None
    executing: bool = False
    result: ActionResult | None = None
    loading_frame: int = 0
    dirty: bool = True
    quit: bool = False

    @property
    def loading(self) -> bool:
        return self.session is None

"""Error types and action results shared by the session and its adapters."""

from __future__ import annotations

from dataclasses import dataclass


class RepopickError(Exception):
    """Base class for errors raised by repopick."""


class EmptySelectionError(RepopickError):
    """Raised when packing is requested with nothing selected."""

    def __init__(self, message: str = "No files selected") -> None:
        super().__init__(message)


class PackerError(RepopickError):
    """Raised when the external packing tool is missing or fails."""


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an external action, surfaced as a value instead of raising."""

    ok: bool
    message: str

    @classmethod
    def success(cls, message: str = "Complete") -> "ActionResult":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> "ActionResult":
        return cls(ok=False, message=message or "Error")


__all__ = [
    "RepopickError",
    "EmptySelectionError",
    "PackerError",
    "ActionResult",
]

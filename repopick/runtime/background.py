"""Single in-flight background task runner.

Used for the start-up token count and for packing, both of which must not
run twice concurrently. The UI thread polls for the outcome.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TaskOutcome(Generic[T]):
    """Finished task value, or the exception it raised."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SingleFlightTask(Generic[T]):
    """Run at most one callable at a time on a daemon thread."""

    def __init__(self, name: str = "repopick-task") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._running = False
        self._outcome: TaskOutcome[T] | None = None
        self._done = threading.Event()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def start(self, func: Callable[[], T]) -> bool:
        """Start ``func`` unless a previous request is still outstanding."""
        with self._lock:
            if self._running:
                return False
            self._running = True
            self._outcome = None
            self._done.clear()

        def worker() -> None:
            try:
                outcome: TaskOutcome[T] = TaskOutcome(value=func())
            except Exception as exc:
                outcome = TaskOutcome(error=exc)
            with self._lock:
                self._outcome = outcome
                self._running = False
            self._done.set()

        threading.Thread(target=worker, name=self._name, daemon=True).start()
        return True

    def poll(self) -> TaskOutcome[T] | None:
        """Return the finished outcome once, or ``None`` while pending/idle."""
        with self._lock:
            outcome = self._outcome
            self._outcome = None
            return outcome

    def wait(self, timeout: float | None = None) -> TaskOutcome[T] | None:
        """Block until the current task finishes, then return its outcome."""
        self._done.wait(timeout)
        return self.poll()


__all__ = [
    "TaskOutcome",
    "SingleFlightTask",
]

"""Per-evaluation context: roll ceiling, shared roll counter, deadline, cancellation."""
from __future__ import annotations

import sys
import threading
import time
from typing import Any, Mapping

from dice_eval.errors import CancelledError, MaxRollsExceededError

DEFAULT_MAX_ROLLS = sys.maxsize
DEFAULT_MAX_REROLLS = 1000


class EvaluationContext:
    """Scoped state passed through every roll of one evaluation.

    Never store a context on a long-lived entity; pass it to each call.
    """

    def __init__(
        self,
        max_rolls: int = DEFAULT_MAX_ROLLS,
        max_rerolls: int = DEFAULT_MAX_REROLLS,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ):
        self.max_rolls = max_rolls
        self.max_rerolls = max_rerolls
        self.params: dict[str, Any] = dict(params or {})
        self.deadline: float | None = time.monotonic() + timeout if timeout else None
        self._rolls = 0
        self._lock = threading.Lock()
        self._cancelled = threading.Event()

    @property
    def rolls_counter(self) -> int:
        return self._rolls

    def bump_rolls(self) -> int:
        """Count one roll. Raises MaxRollsExceededError if the ceiling would be passed."""
        self.check()
        with self._lock:
            if self._rolls >= self.max_rolls:
                raise MaxRollsExceededError(f"exceeded maximum of {self.max_rolls} rolls")
            self._rolls += 1
            return self._rolls

    def release_roll(self) -> None:
        """Give back a slot taken by bump_rolls for a draw that failed."""
        with self._lock:
            self._rolls -= 1

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def check(self) -> None:
        """Raise CancelledError if cancelled or past the deadline."""
        if self._cancelled.is_set():
            raise CancelledError("evaluation cancelled")
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise CancelledError("evaluation deadline exceeded")

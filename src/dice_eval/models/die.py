"""A single physical die and its roll lifecycle.

unrolled -> rolled (roll) -> rerolled any number of times (reroll); the
dropped flag can be toggled at any point.
"""
from __future__ import annotations

import threading
from typing import Any

from dice_eval import random_source
from dice_eval.context import EvaluationContext
from dice_eval.errors import (
    AlreadyRolledError,
    ExpressionError,
    SizeZeroError,
    UnrolledError,
)
from dice_eval.models.modifiers import modifiers_notation
from dice_eval.models.properties import DieKind


class Die:
    def __init__(
        self,
        size: int,
        kind: DieKind = DieKind.POLYHEDRON,
        modifiers: list | None = None,
        result: int | None = None,
        dropped: bool = False,
    ):
        if size < 1:
            raise SizeZeroError(f"d{size}")
        self.kind = DieKind(kind)
        self.size = size
        self.modifiers = list(modifiers or [])
        self.result = result
        self.dropped = dropped
        self.rerolls = 0
        self._lock = threading.RLock()

    @property
    def rolled(self) -> bool:
        return self.result is not None

    def _draw(self, ctx: EvaluationContext) -> int:
        ctx.bump_rolls()
        try:
            if self.kind == DieKind.FUDGE:
                return random_source.uniform_int(3) - 1
            return 1 + random_source.uniform_int(self.size)
        except Exception:
            ctx.release_roll()
            raise

    def roll(self, ctx: EvaluationContext) -> None:
        with self._lock:
            if self.result is not None:
                raise AlreadyRolledError(f"die {self} has already been rolled")
            self.result = self._draw(ctx)

    def reroll(self, ctx: EvaluationContext) -> None:
        """Replace the result with a fresh draw. Modifiers are not re-applied."""
        with self._lock:
            if self.result is None:
                raise UnrolledError(f"die {self} has not been rolled")
            self.result = self._draw(ctx)
            self.rerolls += 1

    def full_roll(self, ctx: EvaluationContext) -> None:
        """Roll, then apply each die modifier in order."""
        with self._lock:
            self.roll(ctx)
            for modifier in self.modifiers:
                modifier.apply(ctx, self)

    def total(self, ctx: EvaluationContext) -> float:
        """The die's contribution to a sum: 0 if dropped. Rolls an unrolled die first."""
        with self._lock:
            if self.result is None:
                self.roll(ctx)
            if self.dropped:
                return 0.0
            try:
                return float(self.result)
            except OverflowError:
                raise ExpressionError(f"result of d{self.size} is too large to sum") from None

    def value(self) -> int:
        """The rolled result, ignoring the dropped flag."""
        with self._lock:
            if self.result is None:
                raise UnrolledError(f"die {self} has not been rolled")
            return self.result

    def drop(self, ctx: EvaluationContext, dropped: bool = True) -> None:
        with self._lock:
            self.dropped = dropped

    def dice(self) -> list[Die]:
        return [self]

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            data: dict[str, Any] = {"type": self.kind.value, "size": self.size}
            if self.result is not None:
                data["result"] = self.result
            if self.dropped:
                data["dropped"] = True
            if self.modifiers:
                data["modifiers"] = [m.model_dump(mode="json") for m in self.modifiers]
            return data

    def __str__(self) -> str:
        with self._lock:
            if self.result is not None:
                return str(self.result)
            notation = "dF" if self.kind == DieKind.FUDGE else f"d{self.size}"
            return notation + modifiers_notation(self.modifiers)

    def __repr__(self) -> str:
        return (
            f"Die(size={self.size}, kind={self.kind.value!r}, "
            f"result={self.result!r}, dropped={self.dropped!r})"
        )

"""Ordered collections of dice.

A Group fans roll/reroll/total/drop out over its children (dice or nested
groups) in insertion order. A RollerGroup adds group-level modifiers that run
after every roll of the whole group.
"""
from __future__ import annotations

from typing import Any, Iterator

from dice_eval.context import EvaluationContext
from dice_eval.models.die import Die
from dice_eval.utils import expression


class Group:
    def __init__(self, children: list | None = None):
        self.children: list[Die | Group] = list(children or [])

    def __iter__(self) -> Iterator[Die | Group]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def roll(self, ctx: EvaluationContext) -> None:
        for child in self.children:
            child.roll(ctx)

    def reroll(self, ctx: EvaluationContext) -> None:
        for child in self.children:
            child.reroll(ctx)

    def full_roll(self, ctx: EvaluationContext) -> None:
        for child in self.children:
            child.full_roll(ctx)

    def total(self, ctx: EvaluationContext) -> float:
        return sum((child.total(ctx) for child in self.children), 0.0)

    def drop(self, ctx: EvaluationContext, dropped: bool = True) -> None:
        for child in self.children:
            child.drop(ctx, dropped)

    def dice(self) -> list[Die]:
        """All dice in the group, flattened, in order."""
        found: list[Die] = []
        for child in self.children:
            found.extend(child.dice())
        return found

    def expression(self) -> str:
        """Expanded form: the non-dropped results in order, '0' if none count."""
        terms = []
        for child in self.children:
            if isinstance(child, Group):
                terms.append(f"({child.expression()})")
            elif not child.dropped:
                terms.append(str(child))
        return expression(terms) if terms else "0"

    def to_dict(self) -> dict[str, Any]:
        return {"group": [child.to_dict() for child in self.children]}

    def __str__(self) -> str:
        return expression(self.children)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.children!r})"


class RollerGroup(Group):
    def __init__(self, children: list | None = None, modifiers: list | None = None):
        super().__init__(children)
        self.modifiers = list(modifiers or [])

    def _apply_modifiers(self, ctx: EvaluationContext) -> None:
        for modifier in self.modifiers:
            ctx.check()
            modifier.apply(ctx, self)

    def full_roll(self, ctx: EvaluationContext) -> None:
        super().full_roll(ctx)
        self._apply_modifiers(ctx)

    def reroll(self, ctx: EvaluationContext) -> None:
        """Clear drops, reroll every child, then re-apply the group modifiers."""
        self.drop(ctx, False)
        super().reroll(ctx)
        self._apply_modifiers(ctx)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.modifiers:
            data["modifiers"] = [m.model_dump(mode="json") for m in self.modifiers]
        return data

    def __repr__(self) -> str:
        return f"RollerGroup({self.children!r}, modifiers={self.modifiers!r})"

"""Dice modifiers: transformations applied to a single die or a dice group.

Modifiers are pydantic models so they serialise as tagged objects
({"type": "reroll", ...}) and can be validated back from JSON.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import BaseModel, Field

from dice_eval.errors import DiceError, RerollLimitExceededError, TypeMismatchError

if TYPE_CHECKING:
    from dice_eval.context import EvaluationContext

logger = logging.getLogger(__name__)


class CompareOp(str, Enum):
    EQ = "="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="


class RerollModifier(BaseModel):
    """Reroll a die while its total satisfies the comparison against target.

    `<` and `<=` both reroll while total <= target; `>` and `>=` both reroll
    while total >= target.
    """

    type: Literal["reroll"] = "reroll"
    compare: CompareOp = CompareOp.EQ
    target: int
    once: bool = False

    def is_valid(self, total: float) -> bool:
        """True when the die no longer needs rerolling."""
        if self.compare == CompareOp.EQ:
            return total != self.target
        if self.compare in (CompareOp.LT, CompareOp.LE):
            return total > self.target
        return total < self.target

    def apply(self, ctx: EvaluationContext, roller) -> None:
        total = roller.total(ctx)
        rerolls = 0
        while not self.is_valid(total):
            if self.once and rerolls:
                break
            if rerolls >= ctx.max_rerolls:
                raise RerollLimitExceededError(
                    f"modifier {self} exceeded {ctx.max_rerolls} rerolls"
                )
            ctx.check()
            roller.reroll(ctx)
            rerolls += 1
            total = roller.total(ctx)
        if rerolls:
            logger.debug("Modifier %s rerolled %d time(s), final total %s.", self, rerolls, total)

    def __str__(self) -> str:
        once = "o" if self.once else ""
        # '=' is implied when omitted
        compare = "" if self.compare == CompareOp.EQ else self.compare.value
        return f"r{once}{compare}{self.target}"


class DropKeepMethod(str, Enum):
    DROP = "d"
    DROP_LOWEST = "dl"
    DROP_HIGHEST = "dh"
    KEEP = "k"
    KEEP_LOWEST = "kl"
    KEEP_HIGHEST = "kh"


class DropKeepModifier(BaseModel):
    """Mark the highest or lowest `num` members of a group as dropped."""

    type: Literal["drop_keep"] = "drop_keep"
    method: DropKeepMethod
    num: int = 1

    def apply(self, ctx: EvaluationContext, roller) -> None:
        from dice_eval.models.group import Group

        if not isinstance(roller, Group):
            raise TypeMismatchError(f"target for modifier {self} is not a dice group")

        # sorted() is stable, so ties keep their original order
        ranked = sorted(roller.children, key=lambda child: child.total(ctx))
        n = min(self.num, len(ranked))
        if self.method in (DropKeepMethod.DROP, DropKeepMethod.DROP_LOWEST):
            dropped = ranked[:n]
        elif self.method == DropKeepMethod.DROP_HIGHEST:
            dropped = ranked[len(ranked) - n:]
        elif self.method in (DropKeepMethod.KEEP, DropKeepMethod.KEEP_HIGHEST):
            dropped = ranked[:len(ranked) - n]
        else:
            dropped = ranked[n:]

        for child in dropped:
            child.drop(ctx, True)

    def __str__(self) -> str:
        return f"{self.method.value}{self.num}"


class SortModifier(BaseModel):
    """Reserved: recognised in notation, not yet applied."""

    type: Literal["sort"] = "sort"
    direction: Literal["asc", "desc"] = "asc"

    def apply(self, ctx: EvaluationContext, roller) -> None:
        raise DiceError(f"modifier {self} is reserved and cannot be applied")

    def __str__(self) -> str:
        return "sd" if self.direction == "desc" else "s"


class ExplodeModifier(BaseModel):
    """Reserved: explode (`!`), compound (`!!`) and penetrate (`!p`)."""

    type: Literal["explode"] = "explode"
    variant: Literal["explode", "compound", "penetrate"] = "explode"
    compare: CompareOp = CompareOp.EQ
    target: int | None = None

    def apply(self, ctx: EvaluationContext, roller) -> None:
        raise DiceError(f"modifier {self} is reserved and cannot be applied")

    def __str__(self) -> str:
        prefix = {"explode": "!", "compound": "!!", "penetrate": "!p"}[self.variant]
        if self.target is None:
            return prefix
        compare = "" if self.compare == CompareOp.EQ else self.compare.value
        return f"{prefix}{compare}{self.target}"


class CriticalModifier(BaseModel):
    """Reserved: critical success (`cs`) and critical failure (`cf`) markers."""

    type: Literal["critical"] = "critical"
    kind: Literal["success", "failure"] = "success"
    compare: CompareOp = CompareOp.EQ
    target: int

    def apply(self, ctx: EvaluationContext, roller) -> None:
        raise DiceError(f"modifier {self} is reserved and cannot be applied")

    def __str__(self) -> str:
        prefix = "cs" if self.kind == "success" else "cf"
        compare = "" if self.compare == CompareOp.EQ else self.compare.value
        return f"{prefix}{compare}{self.target}"


Modifier = Annotated[
    Union[RerollModifier, DropKeepModifier, SortModifier, ExplodeModifier, CriticalModifier],
    Field(discriminator="type"),
]


def modifiers_notation(modifiers: list) -> str:
    return "".join(str(m) for m in modifiers)

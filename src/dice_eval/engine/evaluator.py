"""Expression evaluator: roll every dice token, then do the arithmetic.

    >>> str(evaluate(EvaluationContext(), "2d1+3"))
    '(1+1)+3 = 5'
"""
from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from dice_eval.context import EvaluationContext
from dice_eval.mechanics.arithmetic import evaluate_arithmetic
from dice_eval.mechanics.factory import new_roller_group
from dice_eval.mechanics.notation import DICE_EXPRESSION_RE, parse_notation
from dice_eval.models.group import RollerGroup
from dice_eval.utils import format_number

logger = logging.getLogger(__name__)


class ExpressionResult(BaseModel):
    """An evaluated expression.

    Attributes:
        original: The expression as given.
        rolled: The expression with each dice token replaced by its expanded form.
        result: The numeric value of `rolled`.
        dice: The dice groups rolled, in the order they appear.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    original: str
    rolled: str = ""
    result: float = 0.0
    dice: list[RollerGroup] = Field(default_factory=list)

    @field_serializer("dice")
    def _serialize_dice(self, dice: list[RollerGroup]) -> list[dict[str, Any]]:
        return [group.to_dict() for group in dice]

    def __str__(self) -> str:
        return f"{self.rolled} = {format_number(self.result)}"


def roll_dice(ctx: EvaluationContext, expression: str) -> tuple[str, list[RollerGroup]]:
    """Roll each dice token in expression and substitute its expanded form.

    Returns the substituted string and the rolled groups.
    """
    groups: list[RollerGroup] = []

    def _substitute(match: re.Match) -> str:
        ctx.check()
        group = new_roller_group(parse_notation(match.group(0)))
        group.full_roll(ctx)
        groups.append(group)
        return f"({group.expression()})"

    rolled = DICE_EXPRESSION_RE.sub(_substitute, expression)
    return rolled, groups


def evaluate(ctx: EvaluationContext, expression: str) -> ExpressionResult:
    """Evaluate a dice expression such as 'floor(max(d20,d12)/2+3)'."""
    rolled, groups = roll_dice(ctx, expression)
    result = evaluate_arithmetic(rolled, ctx.params)
    logger.debug("Evaluated %r as %r = %s (%d rolls).", expression, rolled, result, ctx.rolls_counter)
    return ExpressionResult(original=expression, rolled=rolled, result=result, dice=groups)

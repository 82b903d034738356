"""Dice-notation parsing, rolling and expression evaluation."""
from __future__ import annotations

from dice_eval.context import EvaluationContext
from dice_eval.engine.evaluator import ExpressionResult, evaluate
from dice_eval.errors import (
    AlreadyRolledError,
    CancelledError,
    DiceError,
    ExpressionError,
    InternalError,
    InvalidArgCountError,
    MaxRollsExceededError,
    NotEnoughArgsError,
    ParseError,
    RerollLimitExceededError,
    SizeZeroError,
    TypeMismatchError,
    UnknownDieTypeError,
    UnrolledError,
)
from dice_eval.mechanics.factory import new_roller_group
from dice_eval.mechanics.notation import parse_notation
from dice_eval.models import Die, DieKind, Group, RollerGroup, RollerProperties

__all__ = [
    "AlreadyRolledError",
    "CancelledError",
    "DiceError",
    "Die",
    "DieKind",
    "EvaluationContext",
    "ExpressionError",
    "ExpressionResult",
    "Group",
    "InternalError",
    "InvalidArgCountError",
    "MaxRollsExceededError",
    "NotEnoughArgsError",
    "ParseError",
    "RerollLimitExceededError",
    "RollerGroup",
    "RollerProperties",
    "SizeZeroError",
    "TypeMismatchError",
    "UnknownDieTypeError",
    "UnrolledError",
    "evaluate",
    "new_roller_group",
    "parse_notation",
]

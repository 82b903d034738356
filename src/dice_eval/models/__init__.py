from __future__ import annotations

from dice_eval.models.die import Die
from dice_eval.models.group import Group, RollerGroup
from dice_eval.models.modifiers import (
    CompareOp,
    CriticalModifier,
    DropKeepMethod,
    DropKeepModifier,
    ExplodeModifier,
    Modifier,
    RerollModifier,
    SortModifier,
)
from dice_eval.models.properties import DieKind, RollerProperties

__all__ = [
    "CompareOp",
    "CriticalModifier",
    "Die",
    "DieKind",
    "DropKeepMethod",
    "DropKeepModifier",
    "ExplodeModifier",
    "Group",
    "Modifier",
    "RerollModifier",
    "RollerGroup",
    "RollerProperties",
    "SortModifier",
]

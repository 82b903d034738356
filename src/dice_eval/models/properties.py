from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from dice_eval.models.modifiers import Modifier, modifiers_notation


class DieKind(str, Enum):
    POLYHEDRON = "polyhedron"
    FUDGE = "fudge"


class RollerProperties(BaseModel):
    """Parsed, pre-roll description of a dice group."""

    kind: DieKind = DieKind.POLYHEDRON
    size: int = 0
    count: int = 1
    die_modifiers: list[Modifier] = Field(default_factory=list)
    group_modifiers: list[Modifier] = Field(default_factory=list)

    def notation(self) -> str:
        """Canonical notation that parses back to an equal RollerProperties."""
        size = "F" if self.kind == DieKind.FUDGE else str(self.size)
        return (
            f"{self.count}d{size}"
            f"{modifiers_notation(self.die_modifiers)}"
            f"{modifiers_notation(self.group_modifiers)}"
        )

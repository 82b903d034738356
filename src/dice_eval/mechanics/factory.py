"""Build rollable dice groups from parsed properties."""
from __future__ import annotations

from dice_eval.errors import UnknownDieTypeError
from dice_eval.models.die import Die
from dice_eval.models.group import RollerGroup
from dice_eval.models.properties import DieKind, RollerProperties


def new_roller_group(props: RollerProperties) -> RollerGroup:
    """Create a RollerGroup of `count` fresh, unrolled dice.

    Each die gets its own copy of the per-die modifiers; the group owns a copy
    of the group modifiers.
    """
    if props.kind not in (DieKind.POLYHEDRON, DieKind.FUDGE):
        raise UnknownDieTypeError(f"unknown die type: {props.kind!r}")

    dice = [
        Die(
            size=props.size,
            kind=props.kind,
            modifiers=[m.model_copy() for m in props.die_modifiers],
        )
        for _ in range(props.count)
    ]
    return RollerGroup(dice, modifiers=[m.model_copy() for m in props.group_modifiers])

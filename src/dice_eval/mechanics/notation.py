"""Dice notation parser: `<count>d<size><modifiers...>` -> RollerProperties.

Modifiers are scanned greedily left to right. The first character of the
remaining suffix picks a modifier family, that family's pattern consumes the
longest match at the front, and scanning continues on what is left. An
unknown prefix ends the scan; the rest of the suffix is discarded.

    >>> parse_notation("4d6kh3").group_modifiers
    [DropKeepModifier(type='drop_keep', method=<DropKeepMethod.KEEP_HIGHEST: 'kh'>, num=3)]
"""
from __future__ import annotations

import logging
import re
from typing import Callable

from dice_eval.errors import ParseError, SizeZeroError
from dice_eval.models.modifiers import (
    CompareOp,
    DropKeepMethod,
    DropKeepModifier,
    RerollModifier,
)
from dice_eval.models.properties import DieKind, RollerProperties

logger = logging.getLogger(__name__)

DICE_NOTATION_PATTERN = r"(?P<count>\d+)?[dD](?P<size>\d+|[fF])"
COMPARE_POINT_PATTERN = r"(?P<compare><=|>=|[=<>])?(?P<target>\d+)"

# A dice token inside a larger expression. Tokens glued to a preceding
# identifier or number (e.g. "mod6") are not dice.
DICE_EXPRESSION_RE = re.compile(
    r"(?<![\w.])" + DICE_NOTATION_PATTERN + r"(?P<modifiers>[!a-zA-Z=<>\d]*)"
)

_HEAD_RE = re.compile(DICE_NOTATION_PATTERN + r"(?P<modifiers>.*)", re.DOTALL)
_LOOSE_HEAD_RE = re.compile(r"(?P<count>\d*)[dD](?P<size>\S*)")

_REROLL_RE = re.compile(r"r(?P<once>o)?" + COMPARE_POINT_PATTERN)
_SORT_RE = re.compile(r"s(?P<direction>a|d(?![lh\d]))?")
_DROP_KEEP_RE = re.compile(r"(?P<method>[dk][lh]?)(?P<num>\d+)?")
_CRITICAL_RE = re.compile(r"c(?P<kind>[sf])" + COMPARE_POINT_PATTERN)
_EXPLODE_RE = re.compile(r"!(?P<variant>!|p)?(?:" + COMPARE_POINT_PATTERN + r")?")


def _add_reroll(match: re.Match, props: RollerProperties) -> None:
    props.die_modifiers.append(RerollModifier(
        compare=CompareOp(match.group("compare") or "="),
        target=int(match.group("target")),
        once=bool(match.group("once")),
    ))


def _add_drop_keep(match: re.Match, props: RollerProperties) -> None:
    num = match.group("num")
    props.group_modifiers.append(DropKeepModifier(
        method=DropKeepMethod(match.group("method")),
        num=int(num) if num else 1,
    ))


def _reserved(match: re.Match, props: RollerProperties) -> None:
    logger.debug("Modifier %r is reserved; ignoring.", match.group(0))


_FAMILIES: dict[str, tuple[re.Pattern, Callable[[re.Match, RollerProperties], None]]] = {
    "r": (_REROLL_RE, _add_reroll),
    "s": (_SORT_RE, _reserved),
    "d": (_DROP_KEEP_RE, _add_drop_keep),
    "k": (_DROP_KEEP_RE, _add_drop_keep),
    "c": (_CRITICAL_RE, _reserved),
    "!": (_EXPLODE_RE, _reserved),
}


def _parse_size(notation: str, raw: str) -> tuple[DieKind, int]:
    if raw in ("F", "f"):
        return DieKind.FUDGE, 1
    try:
        size = int(raw)
    except ValueError:
        raise ParseError(
            notation, "size", raw, f"parsing dice string {notation!r}: invalid size {raw!r}"
        ) from None
    if size <= 0:
        raise SizeZeroError(notation)
    return DieKind.POLYHEDRON, size


def parse_modifiers(modifiers: str, props: RollerProperties) -> None:
    """Consume a modifier suffix into props, stopping at the first unknown token."""
    rest = modifiers
    while rest:
        family = _FAMILIES.get(rest[0])
        match = family[0].match(rest) if family else None
        if match is None:
            logger.debug("Discarding unparseable modifier suffix %r.", rest)
            return
        family[1](match, props)
        rest = rest[match.end():]


def parse_notation(notation: str) -> RollerProperties:
    """Parse a single dice group such as '3d6', 'D20', '2dF' or '4d6ro1kh3'.

    Raises:
        SizeZeroError: if the die has 0 sides.
        ParseError: if the string is not dice notation.
    """
    text = notation.strip()
    match = _HEAD_RE.match(text)
    if match is None:
        loose = _LOOSE_HEAD_RE.match(text)
        if loose is not None:
            raise ParseError(notation, "size", loose.group("size"),
                             f"parsing dice string {notation!r}: invalid size {loose.group('size')!r}")
        raise ParseError(notation, "notation", text,
                         f"parsing dice string {notation!r}: expected <count>d<size>")

    kind, size = _parse_size(notation, match.group("size"))
    count = match.group("count")
    props = RollerProperties(kind=kind, size=size, count=int(count) if count else 1)
    parse_modifiers(match.group("modifiers"), props)
    return props

"""Exception hierarchy for dice parsing, rolling and evaluation.

Every error raised by the package derives from DiceError, which is itself a
ValueError so callers that only care about "bad input" can keep catching that.
"""
from __future__ import annotations


class DiceError(ValueError):
    """Base class for all dice errors."""


class ParseError(DiceError):
    """A notation string could not be parsed.

    Attributes:
        notation: The full notation being parsed.
        element: Which part of the notation failed (e.g. "size").
        value: The offending text.
    """

    def __init__(self, notation: str, element: str = "", value: str = "", message: str = ""):
        self.notation = notation
        self.element = element
        self.value = value
        if not message:
            message = f"parsing dice string {notation!r}: cannot parse {value!r} as {element!r}"
        super().__init__(message)


class SizeZeroError(ParseError):
    """A die was declared with zero sides."""

    def __init__(self, notation: str = ""):
        super().__init__(notation, "size", "0", f"parsing dice string {notation!r}: die size cannot be 0")


class UnknownDieTypeError(DiceError):
    pass


class AlreadyRolledError(DiceError):
    """roll() was called on a die that already has a result."""


class UnrolledError(DiceError):
    """reroll() was called on a die with no result."""


class RerollLimitExceededError(DiceError):
    pass


class MaxRollsExceededError(DiceError):
    pass


class TypeMismatchError(DiceError):
    """A modifier was applied to the wrong kind of roller."""


class InvalidArgCountError(DiceError):
    pass


class NotEnoughArgsError(DiceError):
    pass


class CancelledError(DiceError):
    """The evaluation was cancelled or ran past its deadline."""


class InternalError(DiceError):
    """The randomness source failed."""


class ExpressionError(DiceError):
    """The arithmetic part of an expression is invalid."""

"""Shared helpers for building and printing arithmetic strings."""
from __future__ import annotations


def expression(values) -> str:
    """Join values into an addition expression, folding '+-' into '-'.

    expression([5, -1, 2]) -> '5-1+2'
    """
    return "+".join(str(v) for v in values).replace("+-", "-")


def format_number(value: float) -> str:
    """Render whole floats without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))

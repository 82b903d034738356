"""Shared fixtures for the dice test suite."""
from __future__ import annotations

import pytest

from dice_eval import random_source
from dice_eval.context import EvaluationContext


class QueueSource:
    """Random source that hands out queued values in order.

    For a polyhedron of size s a queued value v rolls v + 1; for a fudge die
    it rolls v - 1.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls: list[int] = []

    def uniform_int(self, n: int) -> int:
        if not self.values:
            raise AssertionError(f"QueueSource exhausted (asked for uniform_int({n}))")
        value = self.values.pop(0)
        assert 0 <= value < n, f"queued value {value} out of range for n={n}"
        self.calls.append(n)
        return value

    def seed(self, value: int) -> None:
        pass


@pytest.fixture(autouse=True)
def _restore_source():
    previous = random_source.get_source()
    yield
    random_source.set_source(previous)


@pytest.fixture
def queue_source():
    """Install a QueueSource: queue_source(4, 1, 5) makes the next d6 rolls 5, 2, 6."""
    def _install(*values: int) -> QueueSource:
        source = QueueSource(values)
        random_source.set_source(source)
        return source

    return _install


@pytest.fixture
def ctx() -> EvaluationContext:
    return EvaluationContext()

"""Tests for src/dice_eval/models/die.py."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from dice_eval import random_source
from dice_eval.context import EvaluationContext
from dice_eval.errors import (
    AlreadyRolledError,
    CancelledError,
    ExpressionError,
    InternalError,
    MaxRollsExceededError,
    SizeZeroError,
    UnrolledError,
)
from dice_eval.models.die import Die
from dice_eval.models.modifiers import CompareOp, RerollModifier
from dice_eval.models.properties import DieKind


class TestRollRange:
    @pytest.mark.parametrize("size", [1, 2, 6, 20, 100])
    def test_polyhedron_in_range(self, size):
        for _ in range(100):
            die = Die(size)
            die.roll(EvaluationContext())
            assert 1 <= die.result <= size

    def test_fudge_in_range(self, ctx):
        seen = set()
        for _ in range(200):
            die = Die(1, kind=DieKind.FUDGE)
            die.roll(ctx)
            seen.add(die.result)
        assert seen <= {-1, 0, 1}

    def test_fudge_draws_from_three(self, ctx, queue_source):
        source = queue_source(0, 2)
        low, high = Die(1, kind=DieKind.FUDGE), Die(1, kind=DieKind.FUDGE)
        low.roll(ctx)
        high.roll(ctx)
        assert (low.result, high.result) == (-1, 1)
        assert source.calls == [3, 3]

    def test_size_zero_rejected(self):
        with pytest.raises(SizeZeroError):
            Die(0)


class TestLifecycle:
    def test_roll_twice_raises(self, ctx, queue_source):
        queue_source(3)
        die = Die(6)
        die.roll(ctx)
        with pytest.raises(AlreadyRolledError):
            die.roll(ctx)
        assert die.result == 4

    def test_reroll_unrolled_raises(self, ctx):
        with pytest.raises(UnrolledError):
            Die(6).reroll(ctx)

    def test_reroll_replaces_result(self, ctx, queue_source):
        queue_source(0, 5)
        die = Die(6)
        die.roll(ctx)
        die.reroll(ctx)
        assert die.result == 6
        assert die.rerolls == 1
        assert ctx.rolls_counter == 2

    def test_total_rolls_unrolled_die(self, ctx, queue_source):
        queue_source(4)
        die = Die(6)
        assert die.total(ctx) == 5.0
        assert die.rolled

    def test_drop_keeps_result(self, ctx, queue_source):
        queue_source(4)
        die = Die(6)
        die.roll(ctx)
        die.drop(ctx, True)
        assert die.total(ctx) == 0.0
        assert die.result == 5
        assert die.value() == 5
        die.drop(ctx, False)
        assert die.total(ctx) == 5.0

    def test_value_unrolled_raises(self):
        with pytest.raises(UnrolledError):
            Die(6).value()

    def test_full_roll_applies_modifiers(self, ctx, queue_source):
        queue_source(0, 4)
        die = Die(6, modifiers=[RerollModifier(compare=CompareOp.EQ, target=1)])
        die.full_roll(ctx)
        assert die.result == 5
        assert die.rerolls == 1


class TestLimits:
    def test_max_rolls(self, queue_source):
        queue_source(0, 0)
        ctx = EvaluationContext(max_rolls=1)
        die = Die(6)
        die.roll(ctx)
        with pytest.raises(MaxRollsExceededError):
            die.reroll(ctx)
        assert ctx.rolls_counter == 1
        assert die.result == 1

    def test_cancelled_context(self, ctx):
        ctx.cancel()
        with pytest.raises(CancelledError):
            Die(6).roll(ctx)

    def test_concurrent_total_rolls_once(self, ctx):
        die = Die(20)
        with ThreadPoolExecutor(max_workers=8) as pool:
            totals = list(pool.map(lambda _: die.total(ctx), range(64)))
        assert len(set(totals)) == 1
        assert ctx.rolls_counter == 1

    def test_failed_draw_not_counted(self, ctx, monkeypatch):
        def _boom(n):
            raise OSError("no entropy")

        monkeypatch.setattr(random_source.secrets, "randbelow", _boom)
        random_source.set_source(random_source.SystemSource())
        die = Die(6)
        with pytest.raises(InternalError):
            die.roll(ctx)
        assert ctx.rolls_counter == 0
        assert not die.rolled

    def test_failed_reroll_not_counted(self, ctx, queue_source):
        queue_source(3)
        die = Die(6)
        die.roll(ctx)
        with pytest.raises(AssertionError):
            die.reroll(ctx)
        assert ctx.rolls_counter == 1
        assert die.result == 4
        assert die.rerolls == 0

    def test_total_too_large(self, ctx):
        with pytest.raises(ExpressionError, match="too large"):
            Die(6, result=10 ** 400).total(ctx)


class TestStringAndDict:
    def test_unrolled_notation(self):
        assert str(Die(6)) == "d6"
        assert str(Die(1, kind=DieKind.FUDGE)) == "dF"

    def test_unrolled_with_modifiers(self):
        die = Die(6, modifiers=[RerollModifier(target=1), RerollModifier(compare=CompareOp.GT, target=4, once=True)])
        assert str(die) == "d6r1ro>4"

    def test_rolled_shows_result(self):
        assert str(Die(6, result=4)) == "4"
        assert str(Die(1, kind=DieKind.FUDGE, result=-1)) == "-1"

    def test_to_dict_unrolled(self):
        assert Die(8).to_dict() == {"type": "polyhedron", "size": 8}

    def test_to_dict_rolled_dropped(self):
        die = Die(1, kind=DieKind.FUDGE, result=0, dropped=True)
        assert die.to_dict() == {"type": "fudge", "size": 1, "result": 0, "dropped": True}

    def test_to_dict_modifiers(self):
        die = Die(6, modifiers=[RerollModifier(target=1)])
        assert die.to_dict()["modifiers"] == [
            {"type": "reroll", "compare": "=", "target": 1, "once": False}
        ]

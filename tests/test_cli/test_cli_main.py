"""Tests for src/dice_eval/cli/main.py."""
from __future__ import annotations

import json

import pytest
import yaml
from typer.testing import CliRunner

from dice_eval.cli.main import app

runner = CliRunner()


class TestEval:
    def test_text(self, queue_source):
        queue_source(16, 7)
        result = runner.invoke(app, ["eval", "floor(max(d20,d12)/2+3)"])
        assert result.exit_code == 0
        assert result.output.strip() == "floor(max((17),(8))/2+3) = 11"

    def test_json(self, queue_source):
        queue_source(4, 1, 5)
        result = runner.invoke(app, ["--format", "json", "eval", "3d6+2"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["rolled"] == "(5+2+6)+2"
        assert data["result"] == 15.0
        assert len(data["dice"][0]["group"]) == 3

    def test_yaml(self, queue_source):
        queue_source(0)
        result = runner.invoke(app, ["-f", "yaml", "eval", "d4"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["original"] == "d4"
        assert data["rolled"] == "(1)"

    def test_table(self, queue_source):
        queue_source(0)
        result = runner.invoke(app, ["--format", "table", "eval", "d4+1"])
        assert result.exit_code == 0
        assert "rolled" in result.output
        assert "(1)+1" in result.output

    def test_error_exit_code(self):
        result = runner.invoke(app, ["eval", "d0"])
        assert result.exit_code == 1

    def test_overflow_reported_cleanly(self):
        assert runner.invoke(app, ["eval", "floor(1e308*10)"]).output.strip() == "floor(1e308*10) = inf"
        result = runner.invoke(app, ["eval", "1" + "0" * 400])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_seed_is_reproducible(self):
        first = runner.invoke(app, ["--seed", "12", "eval", "4d6"])
        second = runner.invoke(app, ["--seed", "12", "eval", "4d6"])
        assert first.exit_code == 0
        assert first.output == second.output

    def test_unknown_format(self):
        result = runner.invoke(app, ["--format", "xml", "eval", "1"])
        assert result.exit_code != 0


class TestRoll:
    def test_text(self, queue_source):
        queue_source(4, 1, 5, 2)
        result = runner.invoke(app, ["roll", "4d6kh3"])
        assert result.exit_code == 0
        assert result.output.strip() == "5+2+6+3 = 14"

    def test_json(self, queue_source):
        queue_source(2)
        result = runner.invoke(app, ["--format", "json", "roll", "d8"])
        data = json.loads(result.output)
        assert data == {
            "notation": "d8",
            "rolled": "3",
            "result": 3.0,
            "dice": {"group": [{"type": "polyhedron", "size": 8, "result": 3}]},
        }

    @pytest.mark.parametrize("notation", ["d0", "xyz"])
    def test_bad_notation(self, notation):
        assert runner.invoke(app, ["roll", notation]).exit_code == 1


class TestRepl:
    def test_reads_until_quit(self, queue_source):
        queue_source(5)
        result = runner.invoke(app, ["repl"], input="1+1\n\nd0\nd6\nquit\n2+2\n")
        assert result.exit_code == 0
        assert "1+1 = 2" in result.output
        assert "(6) = 6" in result.output
        assert "2+2 = 4" not in result.output

    def test_eof_ends(self):
        result = runner.invoke(app, ["repl"], input="3*3\n")
        assert result.exit_code == 0
        assert "3*3 = 9" in result.output


def test_functions():
    result = runner.invoke(app, ["functions"])
    assert result.exit_code == 0
    assert result.output.split() == ["abs", "ceil", "floor", "max", "min", "round"]


def test_config_file(tmp_path, queue_source):
    path = tmp_path / "dice.toml"
    path.write_text("[limits]\nmax_rolls = 1\n")
    queue_source(0, 0)
    result = runner.invoke(app, ["--config", str(path), "eval", "2d6"])
    assert result.exit_code == 1

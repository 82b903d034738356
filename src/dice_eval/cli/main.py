"""Typer CLI application."""
from __future__ import annotations

import logging
import sys
from typing import Optional

import typer

from dice_eval import random_source
from dice_eval.config import Settings, load_config
from dice_eval.errors import DiceError

app = typer.Typer(
    name="dice",
    help="Roll dice and evaluate dice-notation expressions",
    no_args_is_help=True,
)

REPL_PROMPT = ">>> "
FORMATS = ("text", "json", "yaml", "yml", "table")


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _display(ctx: typer.Context):
    from dice_eval.cli.display import Display

    return Display(fmt=ctx.obj["format"])


@app.callback()
def main(
    ctx: typer.Context,
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: text, json, yaml, table"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a dice.toml file"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Use a seeded, reproducible random source"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Dice roller."""
    if verbose:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_time=False)],
        )
    settings = load_config(config)
    output_format = (fmt or settings.output.format).lower()
    if output_format not in FORMATS:
        raise typer.BadParameter(f"unknown format {output_format!r}", param_hint="--format")
    if seed is not None:
        random_source.set_source(random_source.SeededSource(seed))
    ctx.obj = {"settings": settings, "format": output_format}


@app.command()
def roll(ctx: typer.Context, notation: str = typer.Argument(..., help="Dice notation, e.g. 4d6kh3")) -> None:
    """Roll a single dice group and print the dice."""
    from dice_eval.mechanics.factory import new_roller_group
    from dice_eval.mechanics.notation import parse_notation

    display = _display(ctx)
    eval_ctx = _settings(ctx).new_context()
    try:
        group = new_roller_group(parse_notation(notation))
        group.full_roll(eval_ctx)
        total = group.total(eval_ctx)
    except DiceError as exc:
        display.show_error(exc)
        raise typer.Exit(code=1)
    display.show_roll(notation, group, total)


@app.command("eval")
def eval_(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression, e.g. 'floor(max(d20,d12)/2+3)'"),
) -> None:
    """Evaluate a dice expression and print the result."""
    from dice_eval.engine.evaluator import evaluate

    display = _display(ctx)
    try:
        result = evaluate(_settings(ctx).new_context(), expression)
    except DiceError as exc:
        display.show_error(exc)
        raise typer.Exit(code=1)
    display.show_expression(result)


@app.command()
def repl(ctx: typer.Context) -> None:
    """Evaluate one expression per line from stdin until EOF or 'quit'."""
    from dice_eval.engine.evaluator import evaluate

    display = _display(ctx)
    settings = _settings(ctx)
    stdin = sys.stdin
    interactive = stdin.isatty()
    while True:
        if interactive:
            typer.echo(REPL_PROMPT, nl=False, err=True)
        line = stdin.readline()
        if not line:
            return
        line = line.strip()
        if line == "quit":
            return
        if not line:
            continue
        try:
            result = evaluate(settings.new_context(), line)
        except DiceError as exc:
            display.show_error(exc)
            continue
        display.show_expression(result)


@app.command()
def functions(ctx: typer.Context) -> None:
    """List the functions usable in expressions."""
    from dice_eval.mechanics.arithmetic import list_functions

    _display(ctx).show_functions(list_functions())


if __name__ == "__main__":
    app()

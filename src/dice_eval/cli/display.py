"""Rich/plain renderers for roll and expression results."""
from __future__ import annotations

import json
from typing import Any

import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from dice_eval.engine.evaluator import ExpressionResult
from dice_eval.utils import format_number

console = Console()
err_console = Console(stderr=True)


def expression_data(result: ExpressionResult) -> dict[str, Any]:
    return result.model_dump(mode="json")


def roll_data(notation: str, group, total: float) -> dict[str, Any]:
    return {
        "notation": notation,
        "rolled": str(group),
        "result": total,
        "dice": group.to_dict(),
    }


def build_table(data: dict[str, Any]) -> Table:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("field", style="cyan bold")
    table.add_column("value")
    for key in sorted(data):
        value = data[key]
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        table.add_row(key, str(value))
    return table


def render(data: dict[str, Any], text: str, fmt: str) -> str | Table:
    """Render `data` in the requested format; `text` is used for the plain format."""
    if fmt == "text":
        return text
    if fmt == "json":
        return json.dumps(data)
    if fmt in ("yaml", "yml"):
        return yaml.safe_dump(data, sort_keys=False).strip()
    if fmt == "table":
        return build_table(data)
    raise ValueError(f"requested format {fmt!r} unhandled")


class Display:
    def __init__(self, fmt: str = "text"):
        self.console = console
        self.fmt = fmt

    def _print(self, output: str | Table) -> None:
        if isinstance(output, Table):
            self.console.print(output)
        else:
            self.console.print(output, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def show_expression(self, result: ExpressionResult) -> None:
        self._print(render(expression_data(result), str(result), self.fmt))

    def show_roll(self, notation: str, group, total: float) -> None:
        text = f"{group} = {format_number(total)}"
        self._print(render(roll_data(notation, group, total), text, self.fmt))

    def show_functions(self, names: list[str]) -> None:
        for name in names:
            self._print(name)

    def show_error(self, exc: Exception) -> None:
        err_console.print(f"[bold red]error:[/bold red] {exc}", highlight=False)

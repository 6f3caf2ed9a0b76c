"""Output formatters for chart rows."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

Row = Mapping[str, object]

_NUMERIC_TYPES = (Decimal, int, float)


def format_cell(value: object) -> object:
    """Shape a row value for output.

    Decimals lose the trailing zeros of the stored ``DECIMAL(38, 18)`` scale and
    are written in plain notation, datetimes become ISO 8601 strings. Other
    values pass through unchanged.
    """

    if isinstance(value, Decimal):
        text = format(value.normalize(), "f")
        return "0" if text == "-0" else text
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _is_numeric(value: object) -> bool:
    return isinstance(value, _NUMERIC_TYPES) and not isinstance(value, bool)


def _resolve_columns(rows: Sequence[Row], columns: Sequence[str] | None) -> list[str]:
    if columns:
        return list(columns)
    return list(rows[0].keys()) if rows else []


class OutputFormatter:
    """Base class for chart row formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        """Render the provided rows to the target stream."""

        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render chart rows as a Rich table, numeric columns right-aligned."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        resolved_columns = _resolve_columns(rows, columns)
        if not rows:
            console.print("No cached chart data.")
            return

        table = Table(box=SIMPLE, show_lines=False)
        header_style = "" if self.no_color else "bold"
        for column in resolved_columns:
            numeric = any(_is_numeric(row.get(column)) for row in rows)
            table.add_column(column, header_style=header_style, justify="right" if numeric else "left")
        for row in rows:
            cells = (format_cell(row.get(column)) for column in resolved_columns)
            table.add_row(*("-" if cell is None else str(cell) for cell in cells))
        console.print(table)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render chart rows as JSON Lines with decimals as strings."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        resolved_columns = _resolve_columns(rows, columns)
        for row in rows:
            payload = {column: format_cell(row.get(column)) for column in resolved_columns}
            json.dump(payload, stream, ensure_ascii=False, default=str)
            stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: table, jsonl."
    raise ValueError(msg)


__all__ = ["JSONLFormatter", "OutputFormatter", "TableFormatter", "create_formatter", "format_cell"]

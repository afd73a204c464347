"""Output formatting utilities for CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import rich_click as click


def print_table(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int] | None = None,
    separator_width: int = 50,
) -> None:
    """Print a formatted table with headers.

    Args:
        headers: Column header strings
        rows: List of rows, each row is a list of cell values
        widths: Optional column widths. If None, fits the widest cell.
        separator_width: Width of the separator line
    """
    if widths is None:
        widths = [
            max([len(h)] + [len(row[i]) for row in rows if i < len(row)])
            for i, h in enumerate(headers)
        ]

    fmt_parts = []
    for i, width in enumerate(widths):
        if i == len(widths) - 1:
            # Last column doesn't need padding
            fmt_parts.append("{}")
        else:
            fmt_parts.append(f"{{:<{width}}}")
    fmt = "  ".join(fmt_parts)

    click.echo(fmt.format(*headers))
    click.echo("-" * separator_width)

    for row in rows:
        padded_row = list(row) + [""] * (len(headers) - len(row))
        click.echo(fmt.format(*padded_row[: len(headers)]))


def print_fields(data: dict[str, Any], keys: list[str]) -> None:
    """Print selected keys of a result as a two-column table.

    Keys missing from the result are skipped.
    """
    rows = [[key, format_value(data[key])] for key in keys if key in data]
    print_table(["Field", "Value"], rows)


def format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def output_json(data: Any, indent: int = 2) -> None:
    """Output data as formatted JSON."""
    click.echo(json.dumps(data, indent=indent))


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)

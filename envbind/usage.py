"""
Usage Reports for envbind

This module renders the variables a config class reads as a table, so an
application can tell its operator what to set. Rendering only consumes the
resolved variables; it never looks anything up.

Formatters:
- TableUsage: plain text aligned in columns
- RichUsage: a rich table, for terminals

Example Usage:
    from envbind import NotSetError, load, usage

    try:
        load(cfg)
    except NotSetError:
        usage(cfg)
        raise

Output:
    Usage:
      DB_HOST    str              required          database host
      HTTP_PORT  int              default 8080      http server port
      TIMEOUTS   list[timedelta]  default 1s 2s 3s  timeout steps
"""

import sys
from typing import Any, List, Optional, Protocol, Sequence, TextIO

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .coercion import type_name
from .loader import Loader, check_target
from .models import Options, Var

EMPTY = "<empty>"


class UsageFormatter(Protocol):
    """Renders resolved variables."""

    def render(self, variables: Sequence[Var], file: TextIO) -> None:
        ...


def _default_column(v: Var) -> str:
    if v.required:
        return "required"
    return f"default {v.default or EMPTY}"


def _rows(variables: Sequence[Var]) -> List[List[str]]:
    rows = []
    for v in variables:
        row = [v.name, type_name(v.type), _default_column(v)]
        if v.desc:
            row.append(v.desc)
        rows.append(row)
    return rows


class TableUsage:
    """Plain text table with columns separated by padding."""

    def __init__(self, padding: int = 2, header: str = "Usage:"):
        self.padding = padding
        self.header = header

    def render(self, variables: Sequence[Var], file: TextIO) -> None:
        rows = _rows(variables)

        # the last cell of a row is never padded
        widths: List[int] = []
        for row in rows:
            for i, cell in enumerate(row[:-1]):
                if i == len(widths):
                    widths.append(0)
                widths[i] = max(widths[i], len(cell))

        file.write(f"{self.header}\n")
        indent = " " * self.padding
        for row in rows:
            cells = [cell.ljust(widths[i] + self.padding) for i, cell in enumerate(row[:-1])]
            file.write(indent + "".join(cells) + row[-1] + "\n")


class RichUsage:
    """Table rendered with rich."""

    def __init__(self, title: str = "Environment Variables", width: Optional[int] = None):
        self.title = title
        self.width = width

    def render(self, variables: Sequence[Var], file: TextIO) -> None:
        table = Table(title=self.title, box=box.SIMPLE)
        table.add_column("Variable", style="cyan", no_wrap=True)
        table.add_column("Type", style="magenta")
        table.add_column("Default")
        table.add_column("Description")

        for v in variables:
            if v.required:
                default = Text("required", style="bold red")
            else:
                default = Text(v.default or EMPTY)
            table.add_row(Text(v.name), Text(type_name(v.type)), default, Text(v.desc))

        console = Console(file=file, width=self.width)
        console.print(table)


def usage(
    cfg: Any,
    file: Optional[TextIO] = None,
    options: Optional[Options] = None,
    formatter: Optional[UsageFormatter] = None,
) -> None:
    """Write a usage report documenting the variables of cfg.

    Variables cached by a previous load of the same class under the same
    options are reused; otherwise they are resolved from cfg without querying any source.

    Args:
        cfg: Dataclass or pydantic model instance.
        file: Output stream. Defaults to sys.stdout.
        options: Loader options.
        formatter: Report formatter. Defaults to TableUsage.
    """
    options = options or Options()
    cfg_type = check_target(cfg)

    loader = Loader(options=options)
    variables = options.cache.get(loader.cache_key(cfg_type)) if options.cache is not None else None
    if variables is None:
        variables = loader.collect(cfg)

    formatter = formatter or TableUsage()
    formatter.render(variables, file if file is not None else sys.stdout)

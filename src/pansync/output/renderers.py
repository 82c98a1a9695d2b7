"""Rich renderers for ServiceResult.

Rendering happens into an in-memory console so callers get a string.
Rich drops the color codes when the real stream is not a terminal.
"""

from __future__ import annotations

import json
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

if TYPE_CHECKING:
    from pansync.services.result import ServiceResult

THEME = Theme(
    {
        "ok": "bold green",
        "error": "bold red",
        "op": "bold cyan",
        "key": "dim",
        "path": "dim",
        "code": "red",
        "remote": "bold blue",
    }
)

# Field name to style; anything else is unstyled.
_FIELD_STYLES = {
    "path": "path",
    "file": "path",
    "code": "code",
    "remote_id": "remote",
}


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """``OK: op`` plus one line per data field, or ``ERROR: op — message``.

    Error detail is only shown with *verbose*. Query rows become a table.
    """
    buffer = StringIO()
    console = Console(file=buffer, theme=THEME, highlight=False, soft_wrap=True)
    if result.ok:
        _headline(console, "OK", "ok", result.op)
        for key, value in result.data.items():
            if key != "rows":
                _field(console, key, value)
        if result.data.get("rows"):
            _rows(console, result.data["rows"])
    else:
        message = result.error.message if result.error else "Unknown error"
        _headline(console, "ERROR", "error", f"{result.op} — {message}")
        if result.error is not None:
            _field(console, "code", result.error.code)
            if verbose:
                for key, value in result.error.detail.items():
                    _field(console, key, value)
    return buffer.getvalue().rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line: ``OK: op`` or ``ERROR: op — message``."""
    if result.ok:
        return f"OK: {result.op}"
    message = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {message}"


def _headline(console: Console, label: str, style: str, rest: str) -> None:
    console.print(Text(label, style=style), Text(f": {rest}", style="op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        shown = json.dumps(value, separators=(",", ":"), default=str)
    else:
        shown = str(value)
    console.print(
        Text(f"  {key}: ", style="key"),
        Text(shown, style=_FIELD_STYLES.get(key, "")),
        sep="",
    )


def _rows(console: Console, rows: list[list[Any]]) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    console.print(table)

"""Paint a :class:`ListView` as text with rich."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .controller import ListView
from .rows import RowViewState


def _checkbox(row: RowViewState) -> str:
    mark = escape("[x]" if row.done else "[ ]")
    return mark if row.checkbox_enabled else f"[dim]{mark}[/dim]"


def _name_cell(row: RowViewState) -> str:
    name = escape(row.name)
    if row.editing:
        return f"[bold]> {escape(row.draft_name)}[/bold] [dim](editing)[/dim]"
    if row.done:
        return f"[strike]{name}[/strike]"
    return name


def render_list(view: ListView, width: int = 80, console: Optional[Console] = None) -> str:
    """Render *view* and return the plain text that was printed.

    Args:
        view: Snapshot from :meth:`ListController.view`.
        width: Console width used when no console is given.
        console: Optional console to print to; must be created with ``record=True``.

    Returns:
        The exported text of the rendering.
    """
    console = console or Console(record=True, width=width)

    if view.add_pending:
        console.print(f"[dim]Adding {escape(repr(view.add_draft))}...[/dim]")

    if view.empty:
        console.print(Panel(view.placeholder or "", expand=False))
        return console.export_text()

    table = Table(show_header=True, box=None)
    table.add_column("", no_wrap=True)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Task")
    table.add_column("", no_wrap=True)
    for row in view.rows:
        table.add_row(
            _checkbox(row),
            str(row.task_id),
            _name_cell(row),
            "[yellow]pending[/yellow]" if row.pending else "",
        )
    console.print(table)
    return console.export_text()

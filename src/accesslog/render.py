"""Rich-powered tables for parsed access-log entries."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .matcher import FieldMap

_console = Console()


def print_entries_table(
    entries: list[FieldMap],
    fields: list[str] | None = None,
    title: str = "Log Entries",
    max_rows: int = 100,
) -> None:
    """Render parsed entries as a Rich table.

    Args:
        entries:   Field dicts returned by the parser.
        fields:    Columns to display. Defaults to the keys of the first entry,
                   which follow the order of the format's directives.
        title:     Table title shown in the header.
        max_rows:  Hard cap — large streams are truncated with a notice.
    """
    if not entries:
        _console.print("[yellow]No entries to display.[/yellow]")
        return

    cols = fields or list(entries[0].keys())
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=60)

    for entry in entries[:max_rows]:
        style = "red" if entry.get("status", "").startswith("5") else ""
        table.add_row(*[escape(entry.get(c, "")) for c in cols], style=style)

    _console.print(table)
    if len(entries) > max_rows:
        _console.print(
            f"[dim]... and {len(entries) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def print_fields_table(fields: list[tuple[str, str]], title: str = "Fields") -> None:
    """Render (directive, field key) pairs of a compiled format."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column("Directive")
    table.add_column("Field", style="cyan")

    for rank, (directive, field) in enumerate(fields, start=1):
        table.add_row(str(rank), escape(directive), escape(field))

    _console.print(table)


def print_check_summary(matched: int, unmatched: int, title: str = "Format check") -> None:
    """Render matched/unmatched line counts."""
    total = matched + unmatched
    table = Table(title=title, box=box.MINIMAL_DOUBLE_HEAD)
    table.add_column("Lines", style="bold")
    table.add_column("Count", justify="right", style="cyan")
    table.add_column("%", justify="right", style="dim")

    for label, count in (("matched", matched), ("unmatched", unmatched), ("total", total)):
        pct = count / total * 100 if total else 0.0
        table.add_row(label, str(count), f"{pct:.1f}")

    _console.print(table)

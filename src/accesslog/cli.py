"""accesslog CLI — entry point.

Commands:
    accesslog parse   <file>     Parse a log file with a LogFormat
    accesslog compile <format>   Show the regex and fields a format compiles to
    accesslog check   <file>     Count lines that do / do not match a format
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .compiler import FormatError
from .config import settings
from .formats import NAMED_FORMATS
from .parser import LogFormatParser

console = Console()
err_console = Console(stderr=True)

_FORMAT_HELP = (
    "LogFormat string or one of: " + ", ".join(NAMED_FORMATS)
    + f" (default: {settings.default_format})."
)


def _make_parser(fmt: str | None) -> LogFormatParser:
    """Build a parser, turning a bad format into a usage error."""
    try:
        return LogFormatParser(fmt or settings.default_format)
    except FormatError as exc:
        raise click.BadParameter(str(exc), param_hint="'--format'") from exc


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="accesslog")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """accesslog — parse access logs written with any Apache LogFormat."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "-f", "fmt", default=None, help=_FORMAT_HELP)
@click.option(
    "--output", "-o", "output_fmt", default="table",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max entries to display (0 = all).")
@click.option("--fields", default="", help="Comma-separated fields to include.")
def parse(file: Path, fmt: str | None, output_fmt: str, limit: int, fields: str) -> None:
    """Parse a log file and display the fields of each matching line.

    \b
    Examples:
      accesslog parse access.log
      accesslog parse access.log --format common --output json
      accesslog parse access.log -f '%h %t "%r" %>s %D' --fields host,status
    """
    parser = _make_parser(fmt)
    selected_fields = [f.strip() for f in fields.split(",") if f.strip()]

    collected: list[dict[str, str]] = []
    # Read to the end past --limit so the skipped-line count covers the whole file
    for entry in parser.parse_file(str(file)):
        if limit and len(collected) >= limit:
            continue
        if selected_fields:
            entry = {k: entry[k] for k in selected_fields if k in entry}
        collected.append(entry)

    if output_fmt == "json":
        for entry in collected:
            click.echo(json.dumps(entry))
    else:
        from .render import print_entries_table

        print_entries_table(
            collected,
            fields=selected_fields or None,
            title=file.name,
            max_rows=limit or settings.max_rows,
        )

    stats = parser.stats
    if stats.unmatched:
        err_console.print(f"[yellow]Skipped {stats.unmatched} non-matching lines[/yellow]")
    err_console.print(f"[dim]Parsed {len(collected)} entries from {file.name}[/dim]")


# ── compile ──────────────────────────────────────────────────────────────────


@main.command(name="compile")
@click.argument("log_format")
def compile_cmd(log_format: str) -> None:
    """Show the regular expression and field keys a LogFormat compiles to.

    \b
    Examples:
      accesslog compile combined
      accesslog compile '%h %{X-Forwarded-For}i %>s'
    """
    from .compiler import compile_format
    from .formats import resolve_format
    from .render import print_fields_table

    try:
        compiled = compile_format(resolve_format(log_format))
    except FormatError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(compiled.pattern)
    print_fields_table(
        [(c.directive, c.field) for c in compiled.captures],
        title=escape(f"Fields of {compiled.format!r}"),
    )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "-f", "fmt", default=None, help=_FORMAT_HELP)
@click.option("--show-unmatched", is_flag=True, help="Print each line that does not match.")
def check(file: Path, fmt: str | None, show_unmatched: bool) -> None:
    """Check that every line of a log file matches a LogFormat.

    Exits with status 1 when at least one non-blank line does not match.

    \b
    Examples:
      accesslog check access.log --format combined
      accesslog check access.log -f common --show-unmatched
    """
    from .render import print_check_summary

    parser = _make_parser(fmt)
    matched = unmatched = 0

    with file.open(encoding="utf-8", errors="replace") as fh:
        numbered = [(line_no, line) for line_no, line in enumerate(fh, start=1) if line.strip()]

    results = parser.parse_lines(line for _, line in numbered)
    for (line_no, line), result in zip(numbered, results):
        if result is not None:
            matched += 1
            continue
        unmatched += 1
        if show_unmatched:
            console.print(f"[red]{line_no}:[/red] {escape(line.rstrip())}", highlight=False)

    print_check_summary(matched, unmatched, title=escape(f"{file.name} vs {parser.format!r}"))
    if unmatched:
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Rich output formatting for the sqlqualify CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that machine-readable output on *stdout* is never
polluted with human-readable decoration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qualify_engine.models.events import EventLevel

if TYPE_CHECKING:
    from qualify_engine.config import QualifierConfig
    from qualify_engine.models.results import RunResult
    from qualify_engine.telemetry.profiling import ProfileStats

    from qualify_cli.report import ArtifactPaths


# ---------------------------------------------------------------------------
# Level colour mapping
# ---------------------------------------------------------------------------

_LEVEL_COLOURS: dict[EventLevel, str] = {
    EventLevel.INFO: "cyan",
    EventLevel.WARNING: "yellow",
    EventLevel.ERROR: "red",
}


def _coloured_level(level: EventLevel) -> str:
    """Return a Rich markup string with the event level colour-coded."""
    colour = _LEVEL_COLOURS.get(level, "white")
    return f"[{colour}]{level.value}[/{colour}]"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def display_configuration(
    console: Console,
    config: QualifierConfig,
    input_path: str,
    *,
    preview: bool,
    paths: ArtifactPaths | None = None,
) -> None:
    """Render the run configuration panel.

    Parameters
    ----------
    console:
        Rich console to write to (typically stderr).
    config:
        Target names and non-prod databases of the run.
    input_path:
        The top-level input file.
    preview:
        Whether the run only previews changes.
    paths:
        Artefact locations in execute mode; ``None`` in preview mode.
    """
    mode = "[yellow]PREVIEW[/yellow]" if preview else "[green]EXECUTE[/green]"
    lines = [
        f"[bold]Mode:[/bold]        {mode}",
        f"[bold]DBNAME:[/bold]      {escape(config.dbname)}",
        f"[bold]SCHEMANAME:[/bold]  {escape(config.schemaname)}",
        f"[bold]Input file:[/bold]  {escape(input_path)}",
    ]
    if paths is not None:
        lines.append(f"[bold]Output file:[/bold] {escape(str(paths.output_file))}")
        lines.append(f"[bold]Summary:[/bold]     {escape(str(paths.summary_file))}")
    lines.append(f"[bold]Non-prod:[/bold]    {escape(', '.join(config.non_prod_databases))}")

    title = "SQL Qualifier (preview - no files will be modified)" if preview else "SQL Qualifier"
    console.print(Panel("\n".join(lines), title=title, border_style="blue"))


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


def display_preview(console: Console, run: RunResult) -> None:
    """Render every statement that would change, grouped by file."""
    console.print()
    console.print("[bold]Changes that would be made:[/bold]")

    if not run.all_changes():
        console.print("[dim]No changes would be made to the SQL files.[/dim]")
        return

    for file_result in run.files:
        if not file_result.changes:
            continue
        console.print()
        console.print(f"[bold]Analyzing file:[/bold] {escape(file_result.path)}")
        for change in file_result.changes:
            console.print(f"  [dim]Lines {change.start_line}-{change.end_line}[/dim]")
            for note in change.notes:
                console.print(f"    [green]*[/green] {escape(note)}")
            console.print("    [bold]Before:[/bold]")
            for line in change.before.split("\n"):
                console.print(f"      {escape(line)}", highlight=False)
            console.print("    [bold]After:[/bold]")
            for line in change.after.split("\n"):
                console.print(f"      {escape(line)}", highlight=False)


def display_preview_footer(console: Console) -> None:
    console.print()
    console.print("[dim]Preview complete. No files were modified.[/dim]")
    console.print("[dim]To apply these changes, rerun with --no-preview.[/dim]")


# ---------------------------------------------------------------------------
# Event summary
# ---------------------------------------------------------------------------


def display_event_summary(console: Console, run: RunResult, *, verbose: bool = False) -> None:
    """Render the processing events as a table followed by per-level counts.

    INFO events are listed only when *verbose* is set; warnings and errors
    are always listed.
    """
    events = run.all_events()
    listed = [event for event in events if verbose or event.level != EventLevel.INFO]

    if listed:
        table = Table(
            title="Processing Details",
            show_lines=False,
            pad_edge=True,
            expand=False,
        )
        table.add_column("Level", justify="center")
        table.add_column("File", style="bold")
        table.add_column("Lines", justify="right")
        table.add_column("Message")

        for event in listed:
            lines = "-"
            if event.start_line is not None:
                lines = f"{event.start_line}-{event.end_line or event.start_line}"
            table.add_row(
                _coloured_level(event.level),
                escape(event.file or "-"),
                lines,
                escape(event.message),
            )
        console.print(table)
    else:
        console.print("[dim]No issues found.[/dim]")

    errors = run.count(EventLevel.ERROR)
    warnings = run.count(EventLevel.WARNING)
    infos = run.count(EventLevel.INFO)
    files = sum(1 for f in run.files if f.found)
    console.print(
        f"\n-- {files} file(s) processed, {len(run.all_changes())} statement(s) changed, "
        f"[red]{errors} error(s)[/red], [yellow]{warnings} warning(s)[/yellow], {infos} info\n"
    )


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


def display_completion(console: Console, paths: ArtifactPaths) -> None:
    console.print("[green]Processing complete.[/green]")
    console.print("Files generated:")
    console.print(f"  - {escape(str(paths.output_file))} (combined SQL)")
    console.print(f"  - {escape(str(paths.summary_file))} (detailed summary)")


def display_profile(console: Console, stats: list[ProfileStats]) -> None:
    """Render collected processing timings."""
    if not stats:
        return
    table = Table(title="Timings (ms)", show_lines=False, expand=False)
    table.add_column("Operation", style="bold")
    table.add_column("Calls", justify="right")
    table.add_column("Mean", justify="right")
    table.add_column("p50", justify="right")
    table.add_column("p95", justify="right")
    table.add_column("p99", justify="right")
    table.add_column("Max", justify="right")
    for entry in stats:
        table.add_row(
            entry.operation,
            str(entry.count),
            f"{entry.mean_ms:.3f}",
            f"{entry.p50_ms:.3f}",
            f"{entry.p95_ms:.3f}",
            f"{entry.p99_ms:.3f}",
            f"{entry.max_ms:.3f}",
        )
    console.print(table)

"""``sqlqualify process`` -- qualify the object names of a SQL deployment script.

The input is either a single SQL file or a file listing SQL file paths,
one per line.  In execute mode the rewritten files are concatenated into
``combined_output_<timestamp>.sql`` and every event is written to
``processing_summary_<timestamp>.txt``.  In preview mode nothing is
written; the changes that would be made are shown instead.
"""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from qualify_engine.config import ConfigurationError, Settings, load_settings
from qualify_engine.models.events import EventLevel
from qualify_engine.processor import InputError, process_input
from qualify_engine.telemetry.log_format import configure_logging
from qualify_engine.telemetry.profiling import get_collector

logger = logging.getLogger(__name__)

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


def _prompt_value(prompt: str, name: str) -> str:
    """Prompt until a non-blank value is entered."""
    while True:
        value = typer.prompt(prompt, default="", show_default=False, err=True).strip()
        if value:
            return value
        console.print(f"[yellow]{name} cannot be empty. Please try again.[/yellow]")


def _prompt_input_file() -> str:
    """Prompt until the path of an existing file is entered."""
    while True:
        value = _prompt_value(
            "Enter input file (single SQL file or file containing list of SQL files)",
            "Input file",
        )
        if Path(value).is_file():
            return value
        console.print(f"[yellow]File '{value}' not found. Please try again.[/yellow]")


# ---------------------------------------------------------------------------
# Process command
# ---------------------------------------------------------------------------


def process_command(
    input_path: str | None = typer.Option(
        None,
        "--input",
        "-i",
        help="SQL file, or a file listing SQL file paths one per line.",
    ),
    dbname: str | None = typer.Option(
        None,
        "--dbname",
        "-d",
        help="Target database name (default: SQLQ_DBNAME, otherwise prompted).",
    ),
    schemaname: str | None = typer.Option(
        None,
        "--schema",
        "-s",
        help="Target schema name (default: SQLQ_SCHEMANAME, otherwise prompted).",
    ),
    preview: bool | None = typer.Option(
        None,
        "--preview/--no-preview",
        help="Show the changes that would be made without writing any file.",
    ),
    non_prod: list[str] | None = typer.Option(
        None,
        "--non-prod",
        help="Non-production database name to flag (repeatable; replaces the configured list).",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the combined SQL and summary files.",
    ),
    fail_on_warn: bool = typer.Option(
        False,
        "--fail-on-warn",
        help="Treat warnings as failures (exit code 1).",
    ),
) -> None:
    """Qualify object names and add SET SCHEMA directives and missing semicolons.

    Examples::

        sqlqualify process -i deploy.sql -d PRODDB -s SALES --preview
        sqlqualify process -i release_files.txt -d PRODDB -s SALES -o out/
        sqlqualify --json process -i deploy.sql -d PRODDB -s SALES --fail-on-warn
    """
    # Import app-level globals from the parent module.
    from qualify_cli.app import _emit_metrics, _json_output, _verbose

    try:
        settings = load_settings()
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        raise typer.Exit(code=3) from exc

    configure_logging(structured=settings.structured_logging, verbose=_verbose or settings.debug)

    dbname = _resolve(dbname, settings.dbname) or _prompt_value("Enter DBNAME (target database name)", "DBNAME")
    schemaname = _resolve(schemaname, settings.schemaname) or _prompt_value(
        "Enter SCHEMANAME (target schema name)", "SCHEMANAME"
    )
    input_path = _resolve(input_path, None) or _prompt_input_file()
    preview_mode = settings.preview if preview is None else preview

    try:
        config = _with_overrides(settings, dbname, schemaname, non_prod).to_qualifier_config()
    except (ConfigurationError, ValidationError) as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        raise typer.Exit(code=3) from exc

    from qualify_cli.display import (
        display_completion,
        display_configuration,
        display_event_summary,
        display_preview,
        display_preview_footer,
        display_profile,
    )
    from qualify_cli.report import artifact_paths, write_artifacts

    generated_at = datetime.now()
    target_dir = output_dir if output_dir is not None else settings.output_dir
    paths = None if preview_mode else artifact_paths(target_dir, generated_at)

    if not _json_output:
        display_configuration(console, config, input_path, preview=preview_mode, paths=paths)

    start_time = time.monotonic()
    try:
        run = process_input(input_path, config)
    except InputError as exc:
        console.print(f"[red]{exc}[/red]")
        _emit_metrics("qualify.error", {"error": str(exc), "input": input_path})
        raise typer.Exit(code=3) from exc

    if not preview_mode:
        try:
            paths = write_artifacts(run, config, target_dir, generated_at)
        except OSError as exc:
            console.print(f"[red]Failed to write output files: {exc}[/red]")
            _emit_metrics("qualify.error", {"error": str(exc), "input": input_path})
            raise typer.Exit(code=3) from exc

    elapsed_ms = int((time.monotonic() - start_time) * 1000)

    _emit_metrics(
        "qualify.complete",
        {
            "input": input_path,
            "input_kind": run.input_kind.value,
            "preview": preview_mode,
            "files_processed": sum(1 for f in run.files if f.found),
            "files_skipped": sum(1 for f in run.files if not f.found),
            "statements_changed": len(run.all_changes()),
            "errors": run.count(EventLevel.ERROR),
            "warnings": run.count(EventLevel.WARNING),
            "elapsed_ms": elapsed_ms,
        },
    )

    if _json_output:
        sys.stdout.write(run.model_dump_json(indent=2) + "\n")
    elif preview_mode:
        display_preview(console, run)
        display_event_summary(console, run, verbose=True)
        display_preview_footer(console)
    else:
        display_event_summary(console, run, verbose=_verbose)
        if paths is not None:
            display_completion(console, paths)

    if _verbose and not _json_output:
        display_profile(console, get_collector().all_stats())

    # Exit code: 0 = clean, 1 = errors (or warnings with --fail-on-warn).
    if run.has_errors:
        raise typer.Exit(code=1)
    if fail_on_warn and run.has_warnings:
        raise typer.Exit(code=1)


def _resolve(value: str | None, fallback: str | None) -> str | None:
    """Return the trimmed option value, else the configured fallback."""
    if value is not None and value.strip():
        return value.strip()
    return fallback


def _with_overrides(
    settings: Settings,
    dbname: str,
    schemaname: str,
    non_prod: list[str] | None,
) -> Settings:
    update: dict[str, object] = {"dbname": dbname, "schemaname": schemaname}
    if non_prod:
        update["non_prod_databases"] = [name for value in non_prod for name in value.replace(",", " ").split()]
    logger.debug("Resolved target %s.%s", dbname, schemaname)
    return settings.model_copy(update=update)

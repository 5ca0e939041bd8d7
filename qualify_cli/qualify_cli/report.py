"""Rendering and writing of the execute-mode artefacts.

Two files are produced per run, both stamped with the run timestamp:

- ``combined_output_<YYYYmmdd_HHMMSS>.sql``: the rewritten body of every
  processed file, each wrapped in a header and trailer comment.
- ``processing_summary_<YYYYmmdd_HHMMSS>.txt``: the run configuration
  followed by one line per processing event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from qualify_engine.config import QualifierConfig
from qualify_engine.models.events import ProcessingEvent
from qualify_engine.models.results import RunResult

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class ArtifactPaths:
    """Locations of the files written for one run."""

    output_file: Path
    summary_file: Path


def artifact_paths(output_dir: Path, generated_at: datetime) -> ArtifactPaths:
    stamp = generated_at.strftime(TIMESTAMP_FORMAT)
    return ArtifactPaths(
        output_file=output_dir / f"combined_output_{stamp}.sql",
        summary_file=output_dir / f"processing_summary_{stamp}.txt",
    )


def format_summary_line(event: ProcessingEvent) -> str:
    """Render one event the way it appears in the summary file.

    ``LEVEL: File: F, Lines: a-b - message`` for statement events, with the
    location parts omitted when the event has none.
    """
    location: list[str] = []
    if event.file is not None:
        location.append(f"File: {event.file}")
    if event.start_line is not None:
        end_line = event.end_line if event.end_line is not None else event.start_line
        location.append(f"Lines: {event.start_line}-{end_line}")

    if location:
        return f"{event.level.value}: {', '.join(location)} - {event.message}"
    return f"{event.level.value}: {event.message}"


def render_combined_output(run: RunResult, config: QualifierConfig, generated_at: datetime) -> str:
    """Concatenate the rewritten files of *run* into one SQL script.

    Files that could not be read contribute nothing; their failure is
    recorded in the summary instead.
    """
    stamp = generated_at.strftime(_DISPLAY_FORMAT)
    lines = [
        "-- Combined SQL Output",
        f"-- Generated on: {stamp}",
        f"-- DBNAME: {config.dbname}",
        f"-- SCHEMANAME: {config.schemaname}",
        f"-- Source: {run.input_path}",
        "",
    ]
    for file_result in run.files:
        if not file_result.found:
            continue
        lines.append(f"-- File: {file_result.path}")
        lines.append(f"-- Processed on: {stamp}")
        lines.append("")
        lines.extend(file_result.output_lines)
        lines.append("")
        lines.append(f"-- End of file: {file_result.path}")
        lines.append("")
    lines.append("")
    lines.append("-- End of combined SQL output")
    return "\n".join(lines) + "\n"


def render_summary(
    run: RunResult,
    config: QualifierConfig,
    generated_at: datetime,
    output_file: Path,
) -> str:
    """Render the processing summary: configuration header and event details."""
    lines = [
        "=== SQL Processing Summary ===",
        f"Generated on: {generated_at.strftime(_DISPLAY_FORMAT)}",
        f"DBNAME: {config.dbname}",
        f"SCHEMANAME: {config.schemaname}",
        f"Input file: {run.input_path}",
        f"Output file: {output_file}",
        "",
        f"Non-prod databases configured: {' '.join(config.non_prod_databases)}",
        "",
        "=== Processing Details ===",
    ]
    lines.extend(format_summary_line(event) for event in run.all_events())
    lines.append("")
    lines.append("=== End of Summary ===")
    return "\n".join(lines) + "\n"


def write_artifacts(
    run: RunResult,
    config: QualifierConfig,
    output_dir: Path,
    generated_at: datetime,
) -> ArtifactPaths:
    """Write the combined SQL script and the summary file into *output_dir*.

    Raises
    ------
    OSError
        If the directory cannot be created or a file cannot be written.
    """
    paths = artifact_paths(output_dir, generated_at)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths.output_file.write_text(render_combined_output(run, config, generated_at), encoding="utf-8")
    paths.summary_file.write_text(
        render_summary(run, config, generated_at, paths.output_file),
        encoding="utf-8",
    )
    logger.info("Wrote %s and %s", paths.output_file, paths.summary_file)
    return paths

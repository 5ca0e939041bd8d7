"""sqlqualify CLI application -- Typer-based interface to the qualification engine.

Human-readable output goes to *stderr* via Rich; machine-readable output
(the run result with ``--json``, metrics) goes to stdout or to files on
disk so that pipelines can compose cleanly.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="sqlqualify",
    help="Qualify object names in SQL deployment scripts for a target database and schema.",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Register the commands.
from qualify_cli.commands.process import process_command  # noqa: E402

app.command(name="process")(process_command)

# Mutable global options populated by the Typer callback.
_json_output: bool = False
_metrics_file: Path | None = None
_verbose: bool = False


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit the run result as JSON on stdout instead of human-readable output.",
    ),
    metrics_file: Path | None = typer.Option(
        None,
        "--metrics-file",
        help="Write metrics events to this file (JSONL).",
        envvar="SQLQ_METRICS_FILE",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output and list informational events.",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output, _metrics_file, _verbose  # noqa: PLW0603
    _json_output = json_mode
    _metrics_file = metrics_file
    _verbose = verbose


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_metrics(event: str, data: dict[str, Any]) -> None:
    """Append a timestamped metrics event to the metrics file, if configured.

    Failures never propagate; the command result does not depend on
    metrics being written.
    """
    if _metrics_file is None:
        return
    record = {
        "event": event,
        "timestamp": datetime.now(UTC).isoformat(),
        "data": data,
    }
    try:
        with _metrics_file.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, sort_keys=True, default=str) + "\n")
    except OSError:
        # Read-only filesystem, disk full, permission denied.
        pass

"""Result models returned by file and run processing.

These replace the process-wide accumulators of a shell pipeline: every
call returns the output lines, events and preview changes it produced, and
the caller decides whether to write files or render a preview.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from qualify_engine.models.events import EventLevel, ProcessingEvent


class InputKind(str, Enum):
    """How the top-level input was interpreted."""

    SQL_FILE = "SQL_FILE"
    FILE_LIST = "FILE_LIST"


class PreviewChange(BaseModel):
    """Before/after record of a statement the engine changed."""

    file: str = Field(
        description="Path of the file containing the statement.",
    )
    start_line: int = Field(
        ge=1,
        description="First line of the statement.",
    )
    end_line: int = Field(
        ge=1,
        description="Last line of the statement.",
    )
    before: str = Field(
        description="Statement text as read from the input.",
    )
    after: str = Field(
        description="Statement text as it would be written, including any inserted SET SCHEMA line.",
    )
    notes: list[str] = Field(
        default_factory=list,
        description="One note per individual edit, in the order they were applied.",
    )


class FileResult(BaseModel):
    """Everything produced while processing one SQL file."""

    path: str = Field(
        description="Path of the file as given in the input.",
    )
    found: bool = Field(
        default=True,
        description="False when the file could not be read and was skipped.",
    )
    output_lines: list[str] = Field(
        default_factory=list,
        description="Rewritten file body: pass-through lines, SET SCHEMA lines and statements.",
    )
    events: list[ProcessingEvent] = Field(
        default_factory=list,
        description="Events emitted for this file, in processing order.",
    )
    changes: list[PreviewChange] = Field(
        default_factory=list,
        description="Statements that were changed, in processing order.",
    )

    @property
    def output_text(self) -> str:
        return "\n".join(self.output_lines)


class RunResult(BaseModel):
    """Aggregate result of processing a top-level input."""

    input_path: str = Field(
        description="The top-level input as given by the caller.",
    )
    input_kind: InputKind = Field(
        description="Whether the input was a SQL file or a list of SQL files.",
    )
    events: list[ProcessingEvent] = Field(
        default_factory=list,
        description="Run-level events emitted before any file was processed.",
    )
    files: list[FileResult] = Field(
        default_factory=list,
        description="Per-file results in processing order.",
    )

    def all_events(self) -> list[ProcessingEvent]:
        """Return the complete event stream in processing order."""
        combined = list(self.events)
        for file_result in self.files:
            combined.extend(file_result.events)
        return combined

    def all_changes(self) -> list[PreviewChange]:
        changes: list[PreviewChange] = []
        for file_result in self.files:
            changes.extend(file_result.changes)
        return changes

    def count(self, level: EventLevel) -> int:
        return sum(1 for event in self.all_events() if event.level == level)

    @property
    def has_errors(self) -> bool:
        return self.count(EventLevel.ERROR) > 0

    @property
    def has_warnings(self) -> bool:
        return self.count(EventLevel.WARNING) > 0

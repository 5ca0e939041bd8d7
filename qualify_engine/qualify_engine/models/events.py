"""Structured processing events emitted by the qualification engine.

Every decision the engine takes while rewriting a script (a qualifier
added, a ``SET SCHEMA`` inserted, a semicolon repaired, a foreign database
referenced) is recorded as a :class:`ProcessingEvent`.  The engine never
formats events; report rendering is left to the caller.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class EventLevel(str, Enum):
    """Severity of a processing event."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class EventCode(str, Enum):
    """Machine-readable classification of a processing event."""

    INPUT_SINGLE_FILE = "INPUT_SINGLE_FILE"
    INPUT_FILE_LIST = "INPUT_FILE_LIST"
    FILE_STARTED = "FILE_STARTED"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_UNREADABLE = "FILE_UNREADABLE"
    SCHEMA_DIRECTIVE_FOUND = "SCHEMA_DIRECTIVE_FOUND"
    SCHEMA_DIRECTIVE_ADDED = "SCHEMA_DIRECTIVE_ADDED"
    SCHEMA_ALREADY_IN_EFFECT = "SCHEMA_ALREADY_IN_EFFECT"
    OBJECT_ALREADY_QUALIFIED = "OBJECT_ALREADY_QUALIFIED"
    DATABASE_ADDED = "DATABASE_ADDED"
    DATABASE_SCHEMA_ADDED = "DATABASE_SCHEMA_ADDED"
    SEMICOLON_ADDED = "SEMICOLON_ADDED"
    CROSS_DATABASE_REFERENCE = "CROSS_DATABASE_REFERENCE"
    NON_PROD_REFERENCE = "NON_PROD_REFERENCE"


class ProcessingEvent(BaseModel):
    """A single entry of the append-only event stream."""

    level: EventLevel = Field(
        description="Severity of the event.",
    )
    code: EventCode = Field(
        description="Classification of the event.",
    )
    message: str = Field(
        description="Human-readable description of what happened.",
    )
    file: str | None = Field(
        default=None,
        description="Path of the file being processed, if any.",
    )
    start_line: int | None = Field(
        default=None,
        ge=1,
        description="First line (1-based) of the statement the event refers to.",
    )
    end_line: int | None = Field(
        default=None,
        ge=1,
        description="Last line (1-based) of the statement the event refers to.",
    )

    @property
    def is_warning(self) -> bool:
        return self.level == EventLevel.WARNING

    @property
    def is_error(self) -> bool:
        return self.level == EventLevel.ERROR

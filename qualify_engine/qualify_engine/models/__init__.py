"""Domain models for the SQL qualification engine."""

from qualify_engine.models.events import EventCode, EventLevel, ProcessingEvent
from qualify_engine.models.results import FileResult, InputKind, PreviewChange, RunResult
from qualify_engine.models.statement import (
    Classification,
    Line,
    QualifiedName,
    Statement,
    StatementKind,
)

__all__ = [
    "Classification",
    "EventCode",
    "EventLevel",
    "FileResult",
    "InputKind",
    "Line",
    "PreviewChange",
    "ProcessingEvent",
    "QualifiedName",
    "RunResult",
    "Statement",
    "StatementKind",
]

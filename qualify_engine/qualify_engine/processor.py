"""Statement, file and run processing for the qualification engine.

Processing is strictly sequential: a statement is assembled, classified,
qualified and scanned before the next one begins, and files are handled
one at a time in the order given.  Nothing here keeps module-level state;
each call returns a result value (:class:`FileResult`, :class:`RunResult`)
holding the rewritten lines, the events and the preview changes it
produced.

The top-level input is either a SQL file or a newline-delimited list of
SQL file paths.  It is a SQL file when its first non-blank line starts
with an introducer keyword, ``--`` or ``/``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from qualify_engine.config import QualifierConfig
from qualify_engine.models.events import EventCode, EventLevel, ProcessingEvent
from qualify_engine.models.results import FileResult, InputKind, PreviewChange, RunResult
from qualify_engine.models.statement import Statement
from qualify_engine.parser.assembler import PassThrough, assemble
from qualify_engine.parser.classifier import StatementClassifier, extract_set_schema
from qualify_engine.parser.cross_reference import CrossReference, CrossReferenceScanner
from qualify_engine.parser.text import is_blank_statement, starts_statement
from qualify_engine.qualifier.name_qualifier import NameQualifier, QualificationNote
from qualify_engine.qualifier.schema_state import SchemaState
from qualify_engine.telemetry.profiling import profile_operation

logger = logging.getLogger(__name__)


class InputError(Exception):
    """Raised when the top-level input cannot be read."""


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------


def split_lines(text: str) -> list[str]:
    """Split file content into lines, dropping carriage returns."""
    text = text.replace("\r", "")
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def read_lines(path: Path) -> list[str]:
    """Read *path* as UTF-8 (undecodable bytes replaced) and split it into lines."""
    return split_lines(path.read_text(encoding="utf-8", errors="replace"))


def detect_input_kind(lines: Sequence[str]) -> InputKind:
    """Decide whether *lines* hold SQL or a list of SQL file paths.

    Only the first non-blank line is inspected.  An input without any
    non-blank line counts as an (empty) SQL file.
    """
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if starts_statement(stripped) or stripped.startswith(("--", "/")):
            return InputKind.SQL_FILE
        return InputKind.FILE_LIST
    return InputKind.SQL_FILE


def read_file_list(lines: Iterable[str]) -> list[str]:
    """Return the trimmed file paths of a file list, skipping blanks and ``#`` lines."""
    paths: list[str] = []
    for line in lines:
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        paths.append(entry)
    return paths


# ---------------------------------------------------------------------------
# Statement processing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatementOutcome:
    """Output lines, events and preview change produced by one statement."""

    output_lines: tuple[str, ...]
    events: tuple[ProcessingEvent, ...] = field(default_factory=tuple)
    change: PreviewChange | None = None


class StatementProcessor:
    """Runs one complete statement through classification, qualification and scanning."""

    def __init__(
        self,
        config: QualifierConfig,
        classifier: StatementClassifier | None = None,
    ) -> None:
        self._config = config
        self._classifier = classifier or StatementClassifier()
        self._qualifier = NameQualifier(config)
        self._scanner = CrossReferenceScanner(config)

    @property
    def config(self) -> QualifierConfig:
        return self._config

    def process(self, statement: Statement, state: SchemaState, file: str) -> StatementOutcome:
        """Rewrite *statement* and describe what was done.

        Statements holding only comments and whitespace pass through
        untouched and produce no events.
        """
        text = statement.text
        if is_blank_statement(text):
            return StatementOutcome(output_lines=tuple(text.split("\n")))

        references: list[CrossReference] = []
        schema = extract_set_schema(text)
        if schema is not None:
            qualification = self._qualifier.apply_directive(text, schema, state)
        else:
            classification = self._classifier.classify(text)
            qualification = self._qualifier.qualify(text, classification, state)
            references = self._scanner.scan(text)

        final_text, terminator_note = self._qualifier.complete_terminator(
            qualification.text,
            directive=schema is not None,
        )

        notes: list[QualificationNote] = list(qualification.notes)
        events = [self._event(note, statement, file) for note in notes]
        events.extend(self._reference_event(ref, statement, file) for ref in references)
        if terminator_note is not None:
            notes.append(terminator_note)
            events.append(self._event(terminator_note, statement, file))

        output_lines: list[str] = []
        if qualification.schema_directive is not None:
            output_lines.append(qualification.schema_directive)
        output_lines.extend(final_text.split("\n"))

        change = None
        changes = [note.change for note in notes if note.change is not None]
        if changes:
            change = PreviewChange(
                file=file,
                start_line=statement.start_line,
                end_line=statement.end_line,
                before=text,
                after="\n".join(output_lines),
                notes=changes,
            )

        return StatementOutcome(output_lines=tuple(output_lines), events=tuple(events), change=change)

    @staticmethod
    def _event(note: QualificationNote, statement: Statement, file: str) -> ProcessingEvent:
        return ProcessingEvent(
            level=EventLevel.INFO,
            code=note.code,
            message=note.message,
            file=file,
            start_line=statement.start_line,
            end_line=statement.end_line,
        )

    @staticmethod
    def _reference_event(reference: CrossReference, statement: Statement, file: str) -> ProcessingEvent:
        if reference.non_prod:
            level = EventLevel.WARNING
            code = EventCode.NON_PROD_REFERENCE
            message = f"NON-PROD database reference found: {reference.database} in object {reference.name.token}"
        else:
            level = EventLevel.INFO
            code = EventCode.CROSS_DATABASE_REFERENCE
            message = f"Cross-database reference found: {reference.database} in object {reference.name.token}"
        return ProcessingEvent(
            level=level,
            code=code,
            message=message,
            file=file,
            start_line=statement.start_line,
            end_line=statement.end_line,
        )


# ---------------------------------------------------------------------------
# File processing
# ---------------------------------------------------------------------------


@profile_operation("qualify.file")
def process_lines(
    lines: Iterable[str],
    config: QualifierConfig,
    *,
    file: str,
    processor: StatementProcessor | None = None,
) -> FileResult:
    """Process the lines of one SQL file with a fresh :class:`SchemaState`."""
    if processor is None:
        processor = StatementProcessor(config)

    result = FileResult(path=file)
    result.events.append(
        ProcessingEvent(
            level=EventLevel.INFO,
            code=EventCode.FILE_STARTED,
            message=f"Processing file: {file}",
            file=file,
        )
    )

    state = SchemaState()
    statements = 0
    for fragment in assemble(lines):
        if isinstance(fragment, PassThrough):
            result.output_lines.append(fragment.line.text)
            continue

        statements += 1
        outcome = processor.process(fragment.statement, state, file)
        result.output_lines.extend(outcome.output_lines)
        result.events.extend(outcome.events)
        if outcome.change is not None:
            result.changes.append(outcome.change)

    logger.info(
        "Processed %s: %d statement(s), %d changed",
        file,
        statements,
        len(result.changes),
    )
    return result


def process_file(
    path: str | Path,
    config: QualifierConfig,
    *,
    processor: StatementProcessor | None = None,
) -> FileResult:
    """Process one SQL file from disk.

    A missing or unreadable file is not fatal: it yields a result with
    ``found=False`` and a single ERROR event.
    """
    label = str(path)
    try:
        lines = read_lines(Path(path))
    except FileNotFoundError:
        return _skipped(label, EventCode.FILE_NOT_FOUND, f"File not found: {label}")
    except OSError as exc:
        return _skipped(label, EventCode.FILE_UNREADABLE, f"Could not read file: {label} ({exc})")

    return process_lines(lines, config, file=label, processor=processor)


def _skipped(label: str, code: EventCode, message: str) -> FileResult:
    event = ProcessingEvent(level=EventLevel.ERROR, code=code, message=message, file=label)
    logger.warning("Skipping %s: %s", label, message, extra={"event": event.model_dump(mode="json")})
    return FileResult(path=label, found=False, events=[event])


# ---------------------------------------------------------------------------
# Run processing
# ---------------------------------------------------------------------------


@profile_operation("qualify.run")
def process_input(path: str | Path, config: QualifierConfig) -> RunResult:
    """Process a top-level input: one SQL file, or every file of a file list.

    Raises
    ------
    InputError
        If the top-level input itself cannot be read.  This is the only
        condition that ends a run.
    """
    label = str(path)
    try:
        lines = read_lines(Path(path))
    except OSError as exc:
        raise InputError(f"Cannot read input file '{label}': {exc}") from exc

    processor = StatementProcessor(config)
    kind = detect_input_kind(lines)

    if kind is InputKind.SQL_FILE:
        logger.info("Processing single SQL file: %s", label)
        event = ProcessingEvent(
            level=EventLevel.INFO,
            code=EventCode.INPUT_SINGLE_FILE,
            message=f"Processing single SQL file: {label}",
        )
        files = [process_lines(lines, config, file=label, processor=processor)]
    else:
        paths = read_file_list(lines)
        logger.info("Processing file list: %s (%d file(s))", label, len(paths))
        event = ProcessingEvent(
            level=EventLevel.INFO,
            code=EventCode.INPUT_FILE_LIST,
            message=f"Processing file list: {label}",
        )
        files = [process_file(entry, config, processor=processor) for entry in paths]

    return RunResult(input_path=label, input_kind=kind, events=[event], files=files)

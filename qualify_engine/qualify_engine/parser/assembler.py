"""Line-driven assembly of logical SQL statements.

The assembler is a two-state machine.  While idle, blank lines, comment
lines and any line that does not start with an introducer keyword are
handed back untouched.  An introducer line opens a statement; from then
on every line is buffered until the buffered text ends with ``;`` (after
comments and trailing whitespace are ignored).  A statement still open at
end of input is flushed as-is so that its terminator can be repaired.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from qualify_engine.models.statement import Line, Statement
from qualify_engine.parser.text import is_statement_complete, starts_statement

logger = logging.getLogger(__name__)


class AssemblerState(str, enum.Enum):
    IDLE = "IDLE"
    IN_STATEMENT = "IN_STATEMENT"


@dataclass(frozen=True)
class PassThrough:
    """A line outside any statement, to be echoed verbatim."""

    line: Line


@dataclass(frozen=True)
class CompleteStatement:
    """A statement ready for classification.

    ``terminated`` is False only for a statement flushed at end of input.
    """

    statement: Statement
    terminated: bool = True


Fragment = PassThrough | CompleteStatement


class StatementAssembler:
    """Groups raw lines into complete statements."""

    def __init__(self) -> None:
        self._state = AssemblerState.IDLE
        self._buffer: list[Line] = []

    @property
    def state(self) -> AssemblerState:
        return self._state

    def feed(self, line: Line) -> list[Fragment]:
        """Consume one line and return the fragments it completes."""
        if self._state is AssemblerState.IDLE:
            if not starts_statement(line.text):
                return [PassThrough(line)]
            self._state = AssemblerState.IN_STATEMENT
            self._buffer = [line]
            logger.debug("Statement opened at line %d", line.number)
        else:
            self._buffer.append(line)

        # Buffered lines were incomplete, so only the newest one can end the statement.
        if not is_statement_complete(line.text):
            return []

        statement = Statement(lines=tuple(self._buffer))
        self._reset()
        return [CompleteStatement(statement)]

    def finish(self) -> list[Fragment]:
        """Flush a statement left open at end of input."""
        if self._state is AssemblerState.IDLE or not self._buffer:
            self._reset()
            return []

        statement = Statement(lines=tuple(self._buffer))
        self._reset()
        if not statement.text:
            return []
        logger.debug(
            "Flushing unterminated statement at lines %d-%d",
            statement.start_line,
            statement.end_line,
        )
        return [CompleteStatement(statement, terminated=False)]

    def _reset(self) -> None:
        self._state = AssemblerState.IDLE
        self._buffer = []


def assemble(lines: Iterable[str]) -> Iterator[Fragment]:
    """Assemble *lines* (without line terminators) into fragments.

    Line numbers start at 1.
    """
    assembler = StatementAssembler()
    for number, text in enumerate(lines, start=1):
        yield from assembler.feed(Line(number=number, text=text))
    yield from assembler.finish()

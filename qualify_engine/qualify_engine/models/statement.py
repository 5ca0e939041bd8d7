"""Value objects for raw lines, assembled statements and object names."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Line:
    """A raw text line and its 1-based position within its file."""

    number: int
    text: str


@dataclass(frozen=True)
class Statement:
    """A logical SQL statement made of one or more consecutive lines."""

    lines: tuple[Line, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    @property
    def start_line(self) -> int:
        return self.lines[0].number if self.lines else 0

    @property
    def end_line(self) -> int:
        return self.lines[-1].number if self.lines else 0


@dataclass(frozen=True)
class QualifiedName:
    """An object reference split into its dotted parts.

    ``token`` keeps the identifier exactly as it appeared in the input
    (minus trailing punctuation) so that rewrites can target it.
    """

    token: str
    object: str
    schema: str | None = None
    database: str | None = None


class StatementKind(str, Enum):
    """Statement kinds recognised by keyword-prefix classification."""

    CREATE_TABLE = "CREATE TABLE"
    CREATE_OR_REPLACE_VIEW = "CREATE OR REPLACE VIEW"
    CREATE_VIEW = "CREATE VIEW"
    CREATE_UNIQUE_INDEX = "CREATE UNIQUE INDEX"
    CREATE_INDEX = "CREATE INDEX"
    CREATE_PROCEDURE = "CREATE PROCEDURE"
    CREATE_FUNCTION = "CREATE FUNCTION"
    DROP_TABLE = "DROP TABLE"
    DROP_VIEW = "DROP VIEW"
    DROP_INDEX = "DROP INDEX"
    ALTER_TABLE = "ALTER TABLE"
    INSERT_INTO = "INSERT INTO"
    UPDATE = "UPDATE"
    DELETE_FROM = "DELETE FROM"
    TRUNCATE_TABLE = "TRUNCATE TABLE"


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a statement.

    Both fields are ``None`` when no rule matched.
    """

    kind: StatementKind | None = None
    object_name: str | None = None

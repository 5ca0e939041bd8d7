"""Detection of cross-database references in FROM and JOIN clauses.

The scanner reports, it never rewrites: a reference to another database
is surfaced as an event and the statement text is left untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from qualify_engine.config import QualifierConfig
from qualify_engine.models.statement import QualifiedName
from qualify_engine.parser.names import split_qualified_name
from qualify_engine.parser.text import strip_line_comments

logger = logging.getLogger(__name__)

_REFERENCE_RE = re.compile(
    r"\b(FROM|(?:(?:INNER|CROSS|(?:LEFT|RIGHT|FULL)(?:\s+OUTER)?)\s+)?JOIN)\s+([^\s,();]+)",
    re.IGNORECASE,
)
_MULTI_SPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class TableReference:
    """An identifier found after ``FROM`` or a ``JOIN`` keyword."""

    clause: str
    name: QualifiedName


@dataclass(frozen=True)
class CrossReference:
    """A reference whose database differs from the target database."""

    clause: str
    name: QualifiedName
    non_prod: bool

    @property
    def database(self) -> str:
        return self.name.database or ""


def find_table_references(text: str) -> list[TableReference]:
    """Return every FROM/JOIN target in *text*, in statement order.

    ``--`` comments are ignored; the clause keyword is returned upper-cased
    with single spaces (``LEFT OUTER JOIN``).
    """
    references: list[TableReference] = []
    for match in _REFERENCE_RE.finditer(strip_line_comments(text)):
        clause = _MULTI_SPACE_RE.sub(" ", match.group(1)).upper()
        references.append(TableReference(clause=clause, name=split_qualified_name(match.group(2))))
    return references


class CrossReferenceScanner:
    """Classifies FROM/JOIN targets against the target and non-prod databases."""

    def __init__(self, config: QualifierConfig) -> None:
        self._config = config

    def scan(self, text: str) -> list[CrossReference]:
        """Return the references in *text* that point at another database.

        References without a database part, or whose database equals the
        configured target database (case-insensitively), are skipped.
        """
        found: list[CrossReference] = []
        target = self._config.dbname.upper()

        for reference in find_table_references(text):
            database = reference.name.database
            if not database or database.upper() == target:
                continue
            non_prod = self._config.is_non_prod(database)
            logger.debug(
                "Cross-database reference %s (%s, non_prod=%s)",
                reference.name.token,
                reference.clause,
                non_prod,
            )
            found.append(CrossReference(clause=reference.clause, name=reference.name, non_prod=non_prod))

        return found

"""Keyword-prefix statement classification.

Statements are classified by testing an ordered list of literal keyword
prefixes against the comment-stripped, whitespace-collapsed, upper-cased
statement text.  The first matching rule wins, so a specific prefix such
as ``CREATE UNIQUE INDEX`` must be listed before ``CREATE INDEX``.
There is no grammar: anything the rules do not cover is unclassified.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from qualify_engine.models.statement import Classification, StatementKind
from qualify_engine.parser.text import collapse_whitespace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """A literal keyword prefix and the statement kind it identifies."""

    prefix: str
    kind: StatementKind

    def matches(self, normalized_upper: str) -> bool:
        return normalized_upper.startswith(self.prefix + " ")


# Order matters: first match wins.
DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("CREATE TABLE", StatementKind.CREATE_TABLE),
    ClassificationRule("CREATE OR REPLACE VIEW", StatementKind.CREATE_OR_REPLACE_VIEW),
    ClassificationRule("CREATE VIEW", StatementKind.CREATE_VIEW),
    ClassificationRule("CREATE UNIQUE INDEX", StatementKind.CREATE_UNIQUE_INDEX),
    ClassificationRule("CREATE INDEX", StatementKind.CREATE_INDEX),
    ClassificationRule("CREATE PROCEDURE", StatementKind.CREATE_PROCEDURE),
    ClassificationRule("CREATE FUNCTION", StatementKind.CREATE_FUNCTION),
    ClassificationRule("DROP TABLE", StatementKind.DROP_TABLE),
    ClassificationRule("DROP VIEW", StatementKind.DROP_VIEW),
    ClassificationRule("DROP INDEX", StatementKind.DROP_INDEX),
    ClassificationRule("ALTER TABLE", StatementKind.ALTER_TABLE),
    ClassificationRule("INSERT INTO", StatementKind.INSERT_INTO),
    ClassificationRule("UPDATE", StatementKind.UPDATE),
    ClassificationRule("DELETE FROM", StatementKind.DELETE_FROM),
    ClassificationRule("TRUNCATE TABLE", StatementKind.TRUNCATE_TABLE),
)

_EXISTENCE_GUARDS: tuple[str, ...] = ("IF NOT EXISTS ", "IF EXISTS ")
_OBJECT_TOKEN_RE = re.compile(r"[^\s,();]+")
_SET_SCHEMA_RE = re.compile(
    r"^SET\s+(?:CURRENT\s+)?SCHEMA\b\s*(?:=\s*)?([^\s;=]+)",
    re.IGNORECASE,
)


def extract_set_schema(text: str) -> str | None:
    """Return the schema named by a ``SET SCHEMA`` directive, else ``None``.

    Accepts ``SET SCHEMA x``, ``SET SCHEMA = x`` and ``SET CURRENT SCHEMA
    x``.  The schema keeps its input casing.
    """
    match = _SET_SCHEMA_RE.match(collapse_whitespace(text))
    if match is None:
        return None
    return match.group(1)


class StatementClassifier:
    """Recognises statement kinds and their target object with prioritized rules."""

    def __init__(self, rules: tuple[ClassificationRule, ...] = DEFAULT_RULES) -> None:
        self._rules = rules

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def classify(self, text: str) -> Classification:
        """Classify *text* and extract the first object token after the prefix.

        The object name keeps its input casing.  An ``IF EXISTS`` or ``IF
        NOT EXISTS`` guard directly after the prefix is skipped.
        """
        normalized = collapse_whitespace(text)
        normalized_upper = normalized.upper()

        for rule in self._rules:
            if not rule.matches(normalized_upper):
                continue

            remainder = normalized[len(rule.prefix) :].lstrip()
            for guard in _EXISTENCE_GUARDS:
                if remainder.upper().startswith(guard):
                    remainder = remainder[len(guard) :].lstrip()
                    break

            match = _OBJECT_TOKEN_RE.match(remainder)
            object_name = match.group(0) if match else None
            logger.debug("Classified statement as %s (object=%s)", rule.kind.value, object_name)
            return Classification(kind=rule.kind, object_name=object_name)

        return Classification()

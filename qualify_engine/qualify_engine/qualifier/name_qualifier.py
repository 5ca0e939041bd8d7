"""Object-name qualification and ``SET SCHEMA`` management.

Given the object a statement targets, the qualifier decides whether the
name needs a database and/or schema prefix, rewrites every whole-word
occurrence of it, and decides whether a ``SET SCHEMA`` directive must be
placed in front of the statement:

==========================  ===============================  =========================
Parsed form                 Rewrite                          Schema required
==========================  ===============================  =========================
``db.schema.object``        none                             ``schema``
``schema.object``           ``DBNAME.schema.object``         ``schema``
``object``                  ``DBNAME.SCHEMANAME.object``     ``SCHEMANAME``
==========================  ===============================  =========================

A directive is emitted only when the required schema differs
(case-insensitively) from the one already in effect in the current file.
The qualifier is the only component that changes :class:`SchemaState`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from qualify_engine.config import QualifierConfig
from qualify_engine.models.events import EventCode
from qualify_engine.models.statement import Classification, QualifiedName
from qualify_engine.parser.names import replace_identifier, split_qualified_name
from qualify_engine.parser.text import add_terminator, is_statement_complete
from qualify_engine.qualifier.schema_state import SchemaState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QualificationNote:
    """One decision taken while qualifying a statement.

    ``change`` is the preview note for decisions that alter the output and
    ``None`` for purely informational ones.
    """

    code: EventCode
    message: str
    change: str | None = None


@dataclass(frozen=True)
class Qualification:
    """Rewritten statement text plus the directive to place before it."""

    text: str
    schema_directive: str | None = None
    notes: tuple[QualificationNote, ...] = field(default_factory=tuple)


def schema_directive(schema: str) -> str:
    return f"SET SCHEMA {schema};"


class NameQualifier:
    """Rewrites object references into ``DBNAME.schema.object`` form."""

    def __init__(self, config: QualifierConfig) -> None:
        self._config = config

    def qualify(self, text: str, classification: Classification, state: SchemaState) -> Qualification:
        """Qualify the target object of a classified statement.

        Unclassified statements are returned unchanged with no notes.
        """
        if classification.kind is None or not classification.object_name:
            return Qualification(text=text)

        kind = classification.kind.value
        name = split_qualified_name(classification.object_name)
        notes: list[QualificationNote] = []

        if name.database is not None and name.schema is not None:
            notes.append(
                QualificationNote(
                    code=EventCode.OBJECT_ALREADY_QUALIFIED,
                    message=f"{kind} statement already has database qualifier ({name.database}) - no modification needed",
                )
            )
            required_schema = name.schema
        elif name.schema is not None:
            text = self._rewrite(text, name, kind, own_schema=True, notes=notes)
            required_schema = name.schema
        else:
            text = self._rewrite(text, name, kind, own_schema=False, notes=notes)
            required_schema = self._config.schemaname

        directive = self._require_schema(required_schema, state, notes)
        return Qualification(text=text, schema_directive=directive, notes=tuple(notes))

    def apply_directive(self, text: str, schema: str, state: SchemaState) -> Qualification:
        """Record an existing ``SET SCHEMA`` statement; the text is not rewritten."""
        state.put_in_effect(schema)
        logger.debug("Schema %s put in effect by existing directive", schema)
        return Qualification(
            text=text,
            notes=(
                QualificationNote(
                    code=EventCode.SCHEMA_DIRECTIVE_FOUND,
                    message=f"Found existing SET SCHEMA {schema}",
                ),
            ),
        )

    def complete_terminator(self, text: str, *, directive: bool = False) -> tuple[str, QualificationNote | None]:
        """Add a missing ``;`` after all other edits have been applied."""
        if is_statement_complete(text):
            return text, None
        target = " to SET SCHEMA" if directive else ""
        note = QualificationNote(
            code=EventCode.SEMICOLON_ADDED,
            message=f"Added missing semicolon{target}",
            change=f"Would add missing semicolon{target}",
        )
        return add_terminator(text), note

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rewrite(
        self,
        text: str,
        name: QualifiedName,
        kind: str,
        *,
        own_schema: bool,
        notes: list[QualificationNote],
    ) -> str:
        dbname = self._config.dbname
        default_schema = self._config.schemaname

        def qualified(matched: str) -> str:
            parts = split_qualified_name(matched)
            schema = parts.schema if own_schema and parts.schema else default_schema
            return f"{dbname}.{schema}.{parts.object}"

        rewritten, count = replace_identifier(text, name.token, qualified)
        if count == 0:
            logger.debug("Object %s not found as a whole word; nothing rewritten", name.token)
            return text

        new_name = qualified(name.token)
        if own_schema:
            code, added = EventCode.DATABASE_ADDED, "DBNAME"
        else:
            code, added = EventCode.DATABASE_SCHEMA_ADDED, "DBNAME.SCHEMANAME"
        notes.append(
            QualificationNote(
                code=code,
                message=f"Added {added} to {kind}: {name.token} -> {new_name}",
                change=f"Would change {kind} object: {name.token} -> {new_name}",
            )
        )
        return rewritten

    def _require_schema(
        self,
        schema: str,
        state: SchemaState,
        notes: list[QualificationNote],
    ) -> str | None:
        if state.is_in_effect(schema):
            notes.append(
                QualificationNote(
                    code=EventCode.SCHEMA_ALREADY_IN_EFFECT,
                    message=f"SET SCHEMA {schema} already in effect, skipping",
                )
            )
            return None

        state.put_in_effect(schema)
        directive = schema_directive(schema)
        notes.append(
            QualificationNote(
                code=EventCode.SCHEMA_DIRECTIVE_ADDED,
                message=f"Added {directive}",
                change=f"Would add {directive}",
            )
        )
        return directive

"""Object-name qualification and per-file schema tracking."""

from qualify_engine.qualifier.name_qualifier import (
    NameQualifier,
    Qualification,
    QualificationNote,
    schema_directive,
)
from qualify_engine.qualifier.schema_state import SchemaState

__all__ = [
    "NameQualifier",
    "Qualification",
    "QualificationNote",
    "SchemaState",
    "schema_directive",
]

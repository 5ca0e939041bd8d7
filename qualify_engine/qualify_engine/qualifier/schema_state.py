"""Per-file record of the schema currently in effect."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SchemaState:
    """The last schema put into effect within one file.

    A fresh instance is created for every file; state is never carried
    from one file to the next.
    """

    last_set_schema: str | None = None

    def is_in_effect(self, schema: str) -> bool:
        """Return True if *schema* (case-insensitively) is already in effect."""
        if self.last_set_schema is None:
            return False
        return self.last_set_schema.upper() == schema.upper()

    def put_in_effect(self, schema: str) -> None:
        self.last_set_schema = schema

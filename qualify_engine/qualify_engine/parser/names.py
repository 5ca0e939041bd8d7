"""Dotted identifier splitting and boundary-aware identifier replacement."""

from __future__ import annotations

import re
from collections.abc import Callable

from qualify_engine.models.statement import QualifiedName

_TRAILING_PUNCT_RE = re.compile(r"[(),;\s]+$")

# Characters that may continue an identifier.  A match touching one of
# these on either side is part of a longer name and must not be replaced.
_IDENT_CHARS = r"\w$#@"


def clean_token(token: str) -> str:
    """Trim *token* and drop trailing parentheses, commas and semicolons."""
    return _TRAILING_PUNCT_RE.sub("", token.strip())


def split_qualified_name(token: str) -> QualifiedName:
    """Split *token* into database, schema and object parts by counting dots.

    Two dots give all three parts, one dot gives schema and object, and
    anything else (no dot, or more than two) is treated as a bare object
    name covering the whole token.  Empty parts, as in ``DB..T``, are
    reported as missing.
    """
    cleaned = clean_token(token)
    parts = cleaned.split(".")

    if len(parts) == 3:
        database, schema, obj = parts
        return QualifiedName(
            token=cleaned,
            database=database or None,
            schema=schema or None,
            object=obj,
        )
    if len(parts) == 2:
        schema, obj = parts
        return QualifiedName(token=cleaned, schema=schema or None, object=obj)
    return QualifiedName(token=cleaned, object=cleaned)


def _token_pattern(token: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?<![{_IDENT_CHARS}.]){re.escape(token)}(?![{_IDENT_CHARS}])",
        re.IGNORECASE,
    )


_DOTTED_CONTINUATION_RE = re.compile(rf"\.[{_IDENT_CHARS}]")

# Keywords after which a name refers to a table rather than a column.
_TABLE_POSITION_RE = re.compile(r"\b(?:FROM|JOIN|INTO|UPDATE|TABLE|VIEW)\s+$", re.IGNORECASE)


def _heads_table_name(text: str, match: re.Match[str]) -> bool:
    """Return True when *match* is the first part of a dotted table reference."""
    if not _DOTTED_CONTINUATION_RE.match(text, match.end()):
        return False
    return _TABLE_POSITION_RE.search(text[: match.start()]) is not None


def replace_identifier(
    text: str,
    token: str,
    replacement: Callable[[str], str],
) -> tuple[str, int]:
    """Replace every whole-identifier occurrence of *token* in *text*.

    Matching is case-insensitive.  An occurrence preceded by an identifier
    character or a ``.`` (the tail of another qualified name), or followed
    by an identifier character, is left alone.  An occurrence followed by
    ``.name`` is replaced only outside table positions: ``orders.id`` in a
    select list is a column of ``orders``, while ``FROM orders.archive``
    names another table.  *replacement* receives the matched text so each
    occurrence keeps its own casing.

    Returns the new text and the number of replacements made.
    """
    if not token:
        return text, 0

    count = 0

    def substitute(match: re.Match[str]) -> str:
        nonlocal count
        if _heads_table_name(text, match):
            return match.group(0)
        count += 1
        return replacement(match.group(0))

    return _token_pattern(token).sub(substitute, text), count

"""Line-level text heuristics shared by the assembler, classifier and scanner.

None of these helpers understand SQL string literals or block comments; a
``;`` or ``--`` inside a literal is treated like any other.
"""

from __future__ import annotations

import re

INTRODUCER_KEYWORDS: tuple[str, ...] = (
    "CREATE",
    "INSERT",
    "UPDATE",
    "DELETE",
    "SELECT",
    "WITH",
    "SET",
    "DROP",
    "ALTER",
    "GRANT",
    "REVOKE",
    "TRUNCATE",
)

_LINE_COMMENT_RE = re.compile(r"--[^\n]*")
_MULTI_SPACE_RE = re.compile(r"\s+")
_INTRODUCER_RE = re.compile(r"^(?:" + "|".join(INTRODUCER_KEYWORDS) + r")(?![A-Za-z0-9_$#@])")


def strip_line_comments(text: str) -> str:
    """Remove every ``--`` comment, leaving line breaks in place."""
    return _LINE_COMMENT_RE.sub("", text)


def code_text(text: str) -> str:
    """Return *text* without ``--`` comments and without trailing whitespace.

    Trailing whitespace is removed from every line and from the end of the
    whole text, so trailing comment-only or blank lines vanish.
    """
    lines = [strip_line_comments(line).rstrip() for line in text.split("\n")]
    return "\n".join(lines).rstrip()


def is_statement_complete(text: str) -> bool:
    """Return True when the code part of *text* ends with ``;``."""
    return code_text(text).endswith(";")


def is_blank_statement(text: str) -> bool:
    """Return True when *text* holds nothing but comments and whitespace."""
    return not code_text(text).strip()


def collapse_whitespace(text: str) -> str:
    """Strip comments and fold all whitespace runs (newlines included) to one space."""
    return _MULTI_SPACE_RE.sub(" ", strip_line_comments(text)).strip()


def starts_statement(line: str) -> bool:
    """Return True when *line* opens a statement with an introducer keyword."""
    return _INTRODUCER_RE.match(line.strip().upper()) is not None


def add_terminator(text: str) -> str:
    """Insert ``;`` directly after the last code character of *text*.

    A trailing ``--`` comment or trailing blank lines stay after the new
    terminator so that it is never swallowed by a comment.
    """
    lines = text.split("\n")
    for index in range(len(lines) - 1, -1, -1):
        code = strip_line_comments(lines[index]).rstrip()
        if code:
            lines[index] = code + ";" + lines[index][len(code) :]
            return "\n".join(lines)
    return text + ";"

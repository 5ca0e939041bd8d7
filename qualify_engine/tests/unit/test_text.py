"""Unit tests for qualify_engine.parser.text."""

from __future__ import annotations

import pytest

from qualify_engine.parser.text import (
    add_terminator,
    code_text,
    collapse_whitespace,
    is_blank_statement,
    is_statement_complete,
    starts_statement,
    strip_line_comments,
)

# ---------------------------------------------------------------------------
# Comments and completeness
# ---------------------------------------------------------------------------


class TestCompleteness:
    def test_trailing_semicolon_is_complete(self):
        assert is_statement_complete("DROP TABLE t;")

    def test_semicolon_before_comment_is_complete(self):
        assert is_statement_complete("DROP TABLE t; -- gone")

    def test_semicolon_inside_comment_is_not_complete(self):
        assert not is_statement_complete("DROP TABLE t -- ;")

    def test_trailing_whitespace_ignored(self):
        assert is_statement_complete("DROP TABLE t;   \t")

    def test_trailing_comment_lines_ignored(self):
        assert is_statement_complete("DROP TABLE t;\n-- done\n\n")

    def test_no_semicolon(self):
        assert not is_statement_complete("CREATE TABLE t (\n  id INT\n)")

    def test_code_text_strips_comments_per_line(self):
        assert code_text("SELECT 1 -- a\nFROM t -- b\n") == "SELECT 1\nFROM t"

    def test_strip_line_comments_keeps_line_breaks(self):
        assert strip_line_comments("a -- x\nb") == "a \nb"


class TestBlankStatement:
    @pytest.mark.parametrize("text", ["", "   ", "-- only a comment", "\n-- x\n  \n"])
    def test_blank(self, text):
        assert is_blank_statement(text)

    def test_code_is_not_blank(self):
        assert not is_blank_statement("-- header\nSELECT 1")


# ---------------------------------------------------------------------------
# Introducer detection
# ---------------------------------------------------------------------------


class TestStartsStatement:
    @pytest.mark.parametrize(
        "line",
        [
            "CREATE TABLE t (id INT)",
            "  insert into t values (1);",
            "Select 1;",
            "WITH x AS (SELECT 1)",
            "set schema sales;",
            "TRUNCATE TABLE t;",
            "GRANT SELECT ON t TO r;",
            "REVOKE SELECT ON t FROM r;",
            "SELECT",
        ],
    )
    def test_introducers(self, line):
        assert starts_statement(line)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "-- CREATE TABLE t",
            "CREATED_AT TIMESTAMP,",
            "SETTINGS = 1",
            "selection",
            "/* block */",
            "GO",
        ],
    )
    def test_non_introducers(self, line):
        assert not starts_statement(line)


# ---------------------------------------------------------------------------
# Whitespace and terminators
# ---------------------------------------------------------------------------


class TestCollapseWhitespace:
    def test_collapses_newlines_and_tabs(self):
        assert collapse_whitespace("CREATE\tTABLE\n  t\n(id INT)") == "CREATE TABLE t (id INT)"

    def test_drops_comments(self):
        assert collapse_whitespace("DROP -- why\nTABLE t") == "DROP TABLE t"


class TestAddTerminator:
    def test_single_line(self):
        assert add_terminator("DROP TABLE t") == "DROP TABLE t;"

    def test_before_trailing_comment(self):
        assert add_terminator("DROP TABLE t -- old") == "DROP TABLE t; -- old"

    def test_before_trailing_blank_lines(self):
        assert add_terminator("CREATE TABLE t (\n  id INT\n)\n\n") == "CREATE TABLE t (\n  id INT\n);\n\n"

    def test_after_last_code_line_not_comment_line(self):
        text = "DELETE FROM t\n-- trailing note"
        assert add_terminator(text) == "DELETE FROM t;\n-- trailing note"

    def test_trailing_spaces_kept_after_semicolon(self):
        assert add_terminator("DROP TABLE t   ") == "DROP TABLE t;   "

    def test_adds_exactly_one(self):
        result = add_terminator("UPDATE t SET a = 1")
        assert result.count(";") == 1

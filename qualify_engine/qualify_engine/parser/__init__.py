"""Statement assembly, classification and reference scanning."""

from qualify_engine.parser.assembler import (
    AssemblerState,
    CompleteStatement,
    Fragment,
    PassThrough,
    StatementAssembler,
    assemble,
)
from qualify_engine.parser.classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    StatementClassifier,
    extract_set_schema,
)
from qualify_engine.parser.cross_reference import (
    CrossReference,
    CrossReferenceScanner,
    TableReference,
    find_table_references,
)
from qualify_engine.parser.names import (
    clean_token,
    replace_identifier,
    split_qualified_name,
)
from qualify_engine.parser.text import (
    INTRODUCER_KEYWORDS,
    add_terminator,
    collapse_whitespace,
    is_blank_statement,
    is_statement_complete,
    starts_statement,
)

__all__ = [
    "DEFAULT_RULES",
    "INTRODUCER_KEYWORDS",
    "AssemblerState",
    "ClassificationRule",
    "CompleteStatement",
    "CrossReference",
    "CrossReferenceScanner",
    "Fragment",
    "PassThrough",
    "StatementAssembler",
    "StatementClassifier",
    "TableReference",
    "add_terminator",
    "assemble",
    "clean_token",
    "collapse_whitespace",
    "extract_set_schema",
    "find_table_references",
    "is_blank_statement",
    "is_statement_complete",
    "replace_identifier",
    "split_qualified_name",
    "starts_statement",
]

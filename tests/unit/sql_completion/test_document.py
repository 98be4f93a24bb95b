"""Tests for whole-document scans."""

from sqlsense.domains.query.completion.document import word_at_cursor
from sqlsense.sql_completion import (
    CatalogIndex,
    CompletionRequest,
    DdlWarning,
    HoverInfo,
    Schema,
    SemanticToken,
    SemanticTokenType,
    Table,
    encode_semantic_tokens,
    find_ddl_warnings,
    hover_info,
    scan_semantic_tokens,
)

COLUMN = SemanticTokenType.COLUMN
SCHEMA = SemanticTokenType.SCHEMA
TABLE = SemanticTokenType.TABLE


class TestHoverInfo:
    """Tests for hover descriptions."""

    def test_builtin(self, index, config):
        assert hover_info("nvl", index, config) == HoverInfo(
            title="NVL",
            contents=("Replace NULL with a default value", "Example: NVL(commission, 0)"),
        )

    def test_schema_table_count(self, index, config):
        assert hover_info("hr", index, config) == HoverInfo(title="HR", contents=("2 tables",))

    def test_builtin_of_other_database_is_unknown(self, index, config):
        assert hover_info("COALESCE", index, config) is None

    def test_unknown_or_empty_word(self, index, config):
        assert hover_info("EMP", index, config) is None
        assert hover_info("", index, config) is None

    def test_word_spans_both_sides_of_cursor(self):
        assert word_at_cursor("SELECT NV", "L(x, 0)") == "NVL"
        assert word_at_cursor("SELECT ", "") == ""

    def test_engine_hover(self, engine):
        request = CompletionRequest(text_before_cursor="SELECT * FROM H", text_after_cursor="R.EMP")
        assert engine.hover(request).title == "HR"


class TestSemanticTokens:
    """Tests for catalog name scanning."""

    def test_names_outside_comments_and_literals(self, index):
        lines = ["SELECT e.NAME FROM HR.EMP e", "-- HR in a comment", "WHERE NAME = 'EMP'"]
        assert scan_semantic_tokens(lines, index) == [
            SemanticToken(0, 9, 4, COLUMN),
            SemanticToken(0, 19, 2, SCHEMA),
            SemanticToken(0, 22, 3, TABLE),
            SemanticToken(2, 6, 4, COLUMN),
        ]

    def test_matching_ignores_case(self, index):
        assert scan_semantic_tokens(["select id from hr.emp"], index) == [
            SemanticToken(0, 7, 2, COLUMN),
            SemanticToken(0, 15, 2, SCHEMA),
            SemanticToken(0, 18, 3, TABLE),
        ]

    def test_multi_line_literal_keeps_line_numbers(self, index):
        assert scan_semantic_tokens(["SELECT 'a", "HR' FROM HR.EMP"], index) == [
            SemanticToken(1, 9, 2, SCHEMA),
            SemanticToken(1, 12, 3, TABLE),
        ]

    def test_schema_wins_over_table_and_column(self):
        index = CatalogIndex.build([Schema("S", (Table("T", ("S", "T", "C")),))])
        assert [t.token_type for t in scan_semantic_tokens(["S T C"], index)] == [SCHEMA, TABLE, COLUMN]

    def test_empty_catalog(self):
        assert scan_semantic_tokens(["SELECT * FROM HR.EMP"], CatalogIndex.empty()) == []

    def test_relative_encoding(self):
        tokens = [
            SemanticToken(0, 9, 4, COLUMN),
            SemanticToken(0, 19, 2, SCHEMA),
            SemanticToken(2, 6, 4, COLUMN),
        ]
        assert encode_semantic_tokens(tokens) == [0, 9, 4, 2, 0, 0, 10, 2, 0, 0, 2, 6, 4, 2, 0]

    def test_engine_reads_document_lines(self, engine):
        request = CompletionRequest(text_before_cursor="", document_lines=("SELECT * FROM SALES.ORDERS",))
        assert engine.semantic_tokens(request) == [
            SemanticToken(0, 14, 5, SCHEMA),
            SemanticToken(0, 20, 6, TABLE),
        ]


class TestDdlWarnings:
    """Tests for DDL keyword detection."""

    def test_keywords_outside_comments_and_literals(self):
        lines = [
            "SELECT 1;",
            "drop table HR.EMP;",
            "-- CREATE nothing",
            "SELECT 'ALTER' FROM dual; CREATE INDEX i ON t(x)",
        ]
        assert find_ddl_warnings(lines) == [
            DdlWarning(line=2, column=1, end_column=5, keyword="DROP"),
            DdlWarning(line=4, column=27, end_column=33, keyword="CREATE"),
        ]

    def test_message(self):
        assert find_ddl_warnings(["ALTER TABLE t ADD c INT"])[0].message == "DDL not allowed"

    def test_keyword_inside_identifier_is_ignored(self):
        assert find_ddl_warnings(["SELECT CREATED_AT, DROP_REASON FROM t"]) == []

    def test_engine_reads_document_lines(self, engine):
        request = CompletionRequest(text_before_cursor="", document_lines=("SELECT 1", "ALTER SESSION SET x = 1"))
        assert [(w.line, w.keyword) for w in engine.ddl_warnings(request)] == [(2, "ALTER")]

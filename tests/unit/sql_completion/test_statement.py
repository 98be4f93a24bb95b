"""Tests for statement segmentation, literal stripping and comment masking."""

from sqlsense.domains.query.completion.statement import (
    current_statement,
    get_current_word,
    is_inside_comment,
    is_inside_string,
    mask_comments,
    statement_continuation,
    strip_string_literals,
)


class TestCurrentStatement:
    """Tests for isolating the statement that contains the cursor."""

    def test_without_terminator_whole_text(self):
        assert current_statement("SELECT * FROM ") == "SELECT * FROM "

    def test_returns_trailing_segment(self):
        assert current_statement("SELECT 1 FROM dual; SELECT * FROM ") == " SELECT * FROM "

    def test_terminator_at_end_gives_empty_statement(self):
        assert current_statement("SELECT 1;") == ""

    def test_ignores_semicolon_in_string(self):
        text = "SELECT * FROM t WHERE a = ';' AND "
        assert current_statement(text) == text

    def test_continuation_stops_at_terminator(self):
        assert statement_continuation(" FROM t e; SELECT 2") == " FROM t e"
        assert statement_continuation(" FROM t") == " FROM t"


class TestStripStringLiterals:
    """Tests for blanking literal contents."""

    def test_blanks_interior_and_keeps_quotes(self):
        assert strip_string_literals("SELECT 'a(b' FROM t") == "SELECT '   ' FROM t"

    def test_double_quoted(self):
        assert strip_string_literals('SELECT "x y" FROM t') == 'SELECT "   " FROM t'

    def test_doubled_quote_escape(self):
        assert strip_string_literals("x = 'it''s' AND") == "x = '     ' AND"

    def test_unterminated_literal_blanked_to_end(self):
        assert strip_string_literals("WHERE a = 'abc") == "WHERE a = '   "

    def test_preserves_length(self):
        text = "SELECT 'FROM (x' , \"WHERE\" FROM t WHERE b = 'open"
        assert len(strip_string_literals(text)) == len(text)

    def test_no_literals_unchanged(self):
        assert strip_string_literals("SELECT a FROM t") == "SELECT a FROM t"


class TestIsInsideString:
    """Tests for unterminated literal detection."""

    def test_inside_single_quotes(self):
        assert is_inside_string("SELECT * FROM t WHERE name = 'Jo")

    def test_inside_double_quotes(self):
        assert is_inside_string('SELECT "col')

    def test_closed_literal(self):
        assert not is_inside_string("SELECT 'a' FROM ")

    def test_escaped_quote_still_closed(self):
        assert not is_inside_string("SELECT 'a''b' FROM ")


class TestComments:
    """Tests for comment masking and detection."""

    def test_line_comment_masked_keeping_newline(self):
        text = "SELECT 1 -- hi\nFROM t"
        masked = mask_comments(text)
        assert len(masked) == len(text)
        assert "hi" not in masked
        assert masked.endswith("\nFROM t")

    def test_block_comment_masked(self):
        assert mask_comments("SELECT /* c */ 1") == "SELECT " + " " * len("/* c */") + " 1"

    def test_comment_markers_in_strings_are_kept(self):
        assert mask_comments("SELECT '--x' FROM t") == "SELECT '--x' FROM t"

    def test_semicolon_in_comment_does_not_split(self):
        text = "SELECT * -- a; b\nFROM "
        assert current_statement(mask_comments(text)).strip().startswith("SELECT")

    def test_inside_line_comment(self):
        assert is_inside_comment("SELECT 1 -- foo")

    def test_after_line_comment(self):
        assert not is_inside_comment("SELECT 1 -- foo\n")

    def test_inside_unclosed_block_comment(self):
        assert is_inside_comment("SELECT /* open")

    def test_after_closed_block_comment(self):
        assert not is_inside_comment("SELECT /* x */ ")

    def test_no_comment(self):
        assert not is_inside_comment("SELECT * FROM ")


class TestGetCurrentWord:
    """Tests for the typed word before the cursor."""

    def test_partial_word(self):
        assert get_current_word("SELECT na") == "na"

    def test_after_space(self):
        assert get_current_word("SELECT ") == ""

    def test_after_dot(self):
        assert get_current_word("SELECT e.") == ""
        assert get_current_word("SELECT e.na") == "na"

    def test_cursor_position(self):
        assert get_current_word("SELECT name FROM t", 9) == "na"

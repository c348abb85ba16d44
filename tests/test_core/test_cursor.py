"""Tests for caret classification."""

import pytest

from whenkit.cursor import ContextKind, classify, count_unescaped_quotes, token_start


class TestClassify:
    def test_empty_document(self):
        result = classify("", 1, document="")
        assert result.context.kind == ContextKind.DOCUMENT_START
        assert result.token_start == 0

    def test_blank_line_of_empty_document(self):
        assert classify("   ", 4, document="   ").context.kind == ContextKind.DOCUMENT_START

    def test_blank_line_after_first_is_not_document_start(self):
        result = classify("", 1, line_number=2, document="\n")
        assert result.context.kind == ContextKind.OTHER

    def test_non_empty_document_blank_line(self):
        result = classify("", 1, line_number=2, document='{\n\n}')
        assert result.context.kind == ContextKind.OTHER

    def test_inside_string(self):
        line = '  "&temp": "$'
        result = classify(line, len(line) + 1)
        assert result.context.kind == ContextKind.INSIDE_STRING
        assert result.token_start == len(line) - 1

    def test_after_colon(self):
        line = '  "&sensor": '
        result = classify(line, len(line) + 1)
        assert result.context.kind == ContextKind.AFTER_COLON
        assert result.context.after_each_t_key is False

    def test_after_each_t_colon(self):
        line = '{ "$each_t": '
        result = classify(line, len(line) + 1)
        assert result.context.kind == ContextKind.AFTER_COLON
        assert result.context.after_each_t_key is True

    def test_after_brace(self):
        result = classify("  { ", 5)
        assert result.context.kind == ContextKind.AFTER_BRACE_OR_BARE_KEY

    def test_bare_key(self):
        result = classify("  $an", 6)
        assert result.context.kind == ContextKind.AFTER_BRACE_OR_BARE_KEY
        assert result.token_start == 2
        assert result.prefix == "  $an"

    def test_colon_inside_string_is_string(self):
        line = '"a: '
        assert classify(line, len(line) + 1).context.kind == ContextKind.INSIDE_STRING

    def test_escaped_quote_does_not_close_string(self):
        line = '"a\\" '
        assert classify(line, len(line) + 1).context.kind == ContextKind.INSIDE_STRING

    def test_only_prefix_considered(self):
        result = classify('{ "a": 1 }', 2)
        assert result.prefix == "{"
        assert result.context.kind == ContextKind.AFTER_BRACE_OR_BARE_KEY

    @pytest.mark.parametrize("column", [-5, 0, 1, 100])
    def test_column_clamped(self, column):
        result = classify("{ ", column, document="{ ")
        assert 0 <= result.token_start <= 2
        assert len(result.prefix) <= 2


class TestHelpers:
    def test_count_unescaped_quotes(self):
        assert count_unescaped_quotes('"a" "b') == 3
        assert count_unescaped_quotes('"a\\"') == 1
        assert count_unescaped_quotes('"\\\\"') == 2

    def test_token_start(self):
        assert token_start('  "&label') == 3
        assert token_start("{ #ctx") == 2
        assert token_start("@x") == 0
        assert token_start("a ") == 2
        assert token_start("") == 0

"""Tests for range selector parsing and code extraction."""

import pytest

from crexport_core.errors import RangeSelectorError, ResolutionError
from crexport_core.ranges import (
    Span,
    decode_code,
    encode_code,
    extract_span,
    join_spans,
    parse_selector,
    resolve_code,
    sort_selector,
)

NUMBERED = [f"line{i}" for i in range(1, 11)]


class TestParseSelector:
    def test_single_token(self):
        assert parse_selector("2:0-2:5") == [Span(2, 0, 2, 5)]

    def test_compound_selector_keeps_input_order(self):
        assert parse_selector("18:1-19:40|12:3-15:6") == [Span(18, 1, 19, 40), Span(12, 3, 15, 6)]

    def test_empty_selector(self):
        assert parse_selector("") == []
        assert parse_selector("   ") == []
        assert parse_selector(None) == []

    def test_whitespace_around_tokens_is_ignored(self):
        assert parse_selector(" 1:0-1:4 | 3:0-3:2 ") == [Span(1, 0, 1, 4), Span(3, 0, 3, 2)]

    @pytest.mark.parametrize("selector", ["12:3", "12:3-15", "12-15:6", "a:b-c:d", "1:0-2:3|", "1:-1-2:0"])
    def test_malformed_tokens_raise(self, selector):
        with pytest.raises(RangeSelectorError):
            parse_selector(selector)

    def test_span_str_round_trips(self):
        assert str(Span(12, 3, 15, 6)) == "12:3-15:6"


class TestSortSelector:
    def test_sorts_by_start_line(self):
        assert sort_selector("18:1-19:40|12:3-15:6") == "12:3-15:6|18:1-19:40"

    def test_sorts_by_start_column_on_same_line(self):
        assert sort_selector("4:10-4:12|4:2-4:5") == "4:2-4:5|4:10-4:12"

    def test_empty_selector_stays_empty(self):
        assert sort_selector("") == ""


class TestExtractSpan:
    def test_columns_are_zero_indexed_end_exclusive(self):
        lines = ["const a = 1;", "return x;"]
        assert extract_span(lines, Span(2, 0, 2, 5)) == "retur"

    def test_full_single_line(self):
        assert extract_span(["return x;"], Span(1, 0, 1, 9)) == "return x;"

    def test_multi_line_span_includes_lines_in_between(self):
        lines = ["a = 1", "    b = 2", "    c = 3", "d"]
        assert extract_span(lines, Span(1, 4, 3, 9)) == "1\n    b = 2\n    c = 3"

    def test_end_column_zero_stops_at_previous_line(self):
        assert extract_span(NUMBERED, Span(2, 0, 4, 0)) == "line2\nline3"

    def test_line_past_end_of_file_raises(self):
        with pytest.raises(ResolutionError):
            extract_span(NUMBERED, Span(9, 0, 12, 0))

    def test_selection_through_trailing_line_break(self):
        lines = ["def g():", "    pass"]
        assert extract_span(lines, Span(1, 0, 3, 0)) == "def g():\n    pass"

    def test_column_past_last_line_raises(self):
        with pytest.raises(ResolutionError):
            extract_span(NUMBERED, Span(9, 0, 11, 1))

    def test_line_zero_raises(self):
        with pytest.raises(ResolutionError):
            extract_span(NUMBERED, Span(0, 0, 1, 2))

    def test_reversed_span_raises(self):
        with pytest.raises(ResolutionError):
            extract_span(NUMBERED, Span(5, 0, 3, 0))


class TestJoinSpans:
    def test_spans_are_joined_in_document_order(self):
        result = join_spans(NUMBERED, [Span(8, 0, 8, 5), Span(1, 0, 2, 5)])
        assert result == "line1\nline2\n...\nline8"

    def test_adjacent_spans_have_no_separator(self):
        assert join_spans(NUMBERED, [Span(2, 0, 2, 5), Span(1, 0, 1, 5)]) == "line1\nline2"

    def test_shared_indentation_is_removed(self):
        lines = ["class A:", "    def f(self):", "        return 1"]
        assert join_spans(lines, [Span(2, 0, 3, 16)]) == "def f(self):\n    return 1"

    def test_shared_indentation_is_removed_across_gaps(self):
        lines = [
            "class A:",
            "    def f(self):",
            "        return 1",
            "",
            "    @property",
            "    def g(self):",
            "        return 2",
        ]
        result = join_spans(lines, [Span(6, 0, 7, 16), Span(2, 0, 3, 16)])
        assert result == "def f(self):\n    return 1\n...\ndef g(self):\n    return 2"

    def test_unresolvable_span_is_skipped(self):
        assert join_spans(NUMBERED, [Span(50, 0, 51, 0), Span(1, 0, 1, 5)]) == "line1"

    def test_no_resolvable_span_raises(self):
        with pytest.raises(ResolutionError):
            join_spans(NUMBERED, [Span(50, 0, 51, 0)])


class TestResolveCode:
    @pytest.mark.asyncio
    async def test_reads_file_and_extracts(self, tmp_path):
        source = tmp_path / "a.ts"
        source.write_text("function f() {\nreturn x;\n}\n")
        assert await resolve_code(source, "2:0-2:5") == "retur"

    @pytest.mark.asyncio
    async def test_selection_to_end_of_file(self, tmp_path):
        source = tmp_path / "b.py"
        source.write_text("def g():\n    pass\n")
        assert await resolve_code(source, "1:0-3:0") == "def g():\n    pass"

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ResolutionError, match="not found"):
            await resolve_code(tmp_path / "nope.py", "1:0-1:1")

    @pytest.mark.asyncio
    async def test_empty_selector_returns_empty_without_reading(self, tmp_path):
        assert await resolve_code(tmp_path / "nope.py", "") == ""

    @pytest.mark.asyncio
    async def test_malformed_selector_raises_before_reading(self, tmp_path):
        with pytest.raises(RangeSelectorError):
            await resolve_code(tmp_path / "nope.py", "1:0")


class TestCodeEncoding:
    def test_round_trip(self):
        code = 'if (a < b) {\n  print("ü & <tag>");\n}'
        encoded = encode_code(code)
        assert "<" not in encoded and "\n" not in encoded
        assert decode_code(encoded) == code

    def test_decode_empty(self):
        assert decode_code("") == ""
        assert decode_code(None) == ""

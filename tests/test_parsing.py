import pytest
from trustscore.utils.parsing import (
    extract_json_block,
    extract_fenced_blocks,
    find_json_object_span,
    loads_object,
    parse_numeric_value,
)


class TestFindJsonObjectSpan:
    """Tests for the brace-matching scanner."""

    def test_simple_object(self):
        text = 'before {"a": 1} after'
        assert find_json_object_span(text) == '{"a": 1}'

    def test_nested_object(self):
        text = 'x {"outer": {"inner": {"deep": true}}} y'
        assert find_json_object_span(text) == '{"outer": {"inner": {"deep": true}}}'

    def test_braces_inside_strings_ignored(self):
        text = 'note {"reasoning": "uses } and { freely", "trust_score": 70} end'
        assert find_json_object_span(text) == '{"reasoning": "uses } and { freely", "trust_score": 70}'

    def test_escaped_quote_inside_string(self):
        text = r'{"reasoning": "the source says \"}\" here", "trust_score": 55} trailing'
        span = find_json_object_span(text)
        assert span == r'{"reasoning": "the source says \"}\" here", "trust_score": 55}'
        assert loads_object(span)["trust_score"] == 55

    def test_unbalanced(self):
        assert find_json_object_span('{"a": {"b": 1}') is None

    def test_no_brace(self):
        assert find_json_object_span("no json here") is None

    def test_none_input(self):
        assert find_json_object_span(None) is None


class TestExtractJsonBlock:
    def test_valid_json(self):
        """Test extracting valid JSON from text."""
        text = 'Some text before {"key": "value", "num": 123} some text after'
        assert extract_json_block(text) == {"key": "value", "num": 123}

    def test_invalid_json(self):
        """Test with malformed JSON."""
        assert extract_json_block('Text {"key": "value", "bad": } end') is None

    def test_json_with_control_characters(self):
        """Control characters inside strings are stripped before a second attempt."""
        result = extract_json_block('{"key": "value\x00\x01\x02"}')
        assert result == {"key": "value"}

    def test_empty_string(self):
        assert extract_json_block("") is None


class TestLoadsObject:
    def test_object(self):
        assert loads_object('{"a": 1}') == {"a": 1}

    def test_array_is_rejected(self):
        assert loads_object("[1, 2, 3]") is None

    def test_scalar_is_rejected(self):
        assert loads_object("42") is None

    def test_invalid(self):
        assert loads_object("{not json") is None


class TestExtractFencedBlocks:
    def test_json_fence(self):
        text = 'Here:\n```json\n{"trust_score": 80}\n```\nDone'
        assert extract_fenced_blocks(text)[0] == '{"trust_score": 80}'

    def test_generic_fence(self):
        text = 'Here:\n```\n{"trust_score": 80}\n```'
        assert extract_fenced_blocks(text) == ['{"trust_score": 80}']

    def test_inline_json_fence(self):
        text = '```json{"trust_score": 80}```'
        assert extract_fenced_blocks(text) == ['{"trust_score": 80}']

    def test_no_fence(self):
        assert extract_fenced_blocks('{"trust_score": 80}') == []


class TestParseNumericValue:
    @pytest.mark.parametrize("value,expected", [
        ("123", 123.0),
        ("123.456", 123.456),
        ("1,234", 1234.0),
        ("85%", 85.0),
        (" 72 ", 72.0),
        ("-5", -5.0),
        (90, 90.0),
        (87.5, 87.5),
    ])
    def test_parses(self, value, expected):
        assert parse_numeric_value(value) == expected

    @pytest.mark.parametrize("value", [None, "", "high", True, False])
    def test_rejects(self, value):
        assert parse_numeric_value(value) is None

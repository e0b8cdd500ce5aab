"""
Tests for JSON recovery of model responses
"""

from classreplay.services.infrastructure.parsing import (
    escape_bare_newlines,
    extract_first_balanced_json,
    extract_largest_balanced_json,
    fix_json_escapes,
    loads_or_none,
    parse_json_object,
    repair_json_text,
    strip_code_fences,
    strip_trailing_commas,
    trim_to_outermost_brackets,
)


class TestStripCodeFences:
    def test_removes_fence_lines(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_text_untouched(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'
        assert strip_code_fences("") == ""


class TestBalancedExtraction:
    def test_first_object_in_prose(self):
        text = '好的，结果如下：{"a": {"b": 1}} 以及 {"c": 2}'
        assert extract_first_balanced_json(text) == '{"a": {"b": 1}}'

    def test_braces_inside_strings_ignored(self):
        text = '{"text": "a } b", "n": 1}'
        assert extract_first_balanced_json(text) == text

    def test_array_opener(self):
        assert extract_first_balanced_json('x [1, [2]] y', "[") == "[1, [2]]"

    def test_largest_object(self):
        text = '{"a": 1} then {"slides": [1, 2, 3]}'
        assert extract_largest_balanced_json(text) == '{"slides": [1, 2, 3]}'

    def test_largest_array(self):
        assert extract_largest_balanced_json("[1] [1, 2]", expect_array=True) == "[1, 2]"

    def test_unbalanced_returns_none(self):
        assert extract_first_balanced_json('{"a": [1, 2') is None


class TestRepairs:
    def test_trim_to_outermost_brackets(self):
        assert trim_to_outermost_brackets('here: {"a": 1} thanks') == '{"a": 1}'
        assert trim_to_outermost_brackets("no json") == "no json"

    def test_strip_trailing_commas_outside_strings(self):
        assert strip_trailing_commas('{"a": [1, 2,], "b": "x,]",}') == '{"a": [1, 2], "b": "x,]"}'

    def test_escape_bare_newlines_in_strings_only(self):
        assert escape_bare_newlines('{"a": "line1\nline2"}\n') == '{"a": "line1\\nline2"}\n'

    def test_fix_json_escapes(self):
        assert fix_json_escapes(r'{"f": "\frac \alpha \n"}') == r'{"f": "\frac \\alpha \n"}'

    def test_repair_json_text(self):
        broken = '```json\n{"slides": [{"script": "第一句\n第二句",},],}\n```'
        assert loads_or_none(repair_json_text(broken)) == {"slides": [{"script": "第一句\n第二句"}]}


class TestParseJsonObject:
    def test_clean_json(self):
        assert parse_json_object('{"knowledgePoint": "勾股定理"}') == {"knowledgePoint": "勾股定理"}

    def test_fenced_json_with_prose(self):
        assert parse_json_object('分析如下\n```json\n{"subject": "math"}\n```') == {"subject": "math"}

    def test_needs_repair(self):
        assert parse_json_object('{"summary": "a\nb", "keyPoints": ["x",],}') == {"summary": "a\nb", "keyPoints": ["x"]}

    def test_unusable(self):
        assert parse_json_object("") is None
        assert parse_json_object("我不知道") is None
        assert parse_json_object("[1, 2]") is None

    def test_loads_or_none(self):
        assert loads_or_none(None) is None
        assert loads_or_none("{bad") is None
        assert loads_or_none("[1]") == [1]

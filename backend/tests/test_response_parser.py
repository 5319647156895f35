"""Tests for completion payload extraction and reshaping"""

from types import SimpleNamespace

import pytest

from careercard.services.response_parser import (
    LLMResponseError,
    extract_payload,
    shape_items,
    shape_object,
    strip_code_fences,
)


class TestStripCodeFences:

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n[1, 2]\n```') == '[1, 2]'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_empty(self):
        assert strip_code_fences(None) == ""


class TestExtractPayload:

    def test_tool_call_arguments(self, make_completion):
        completion = make_completion(arguments={"experiences": []})
        assert extract_payload(completion) == {"experiences": []}

    def test_first_tool_call_wins(self, make_completion):
        completion = make_completion(arguments='{"n": 1}')
        completion.choices[0].message.tool_calls.append(
            SimpleNamespace(function=SimpleNamespace(name='tool', arguments='{"n": 2}'))
        )
        assert extract_payload(completion) == {"n": 1}

    def test_content_fallback_with_fences(self, make_completion):
        completion = make_completion(content='```json\n[{"title": "Engineer"}]\n```')
        assert extract_payload(completion) == [{"title": "Engineer"}]

    def test_unparseable_arguments(self, make_completion):
        with pytest.raises(LLMResponseError):
            extract_payload(make_completion(arguments='{"broken": '))

    def test_no_tool_call_no_content(self, make_completion):
        with pytest.raises(LLMResponseError):
            extract_payload(make_completion())

    def test_no_choices(self):
        with pytest.raises(LLMResponseError):
            extract_payload(SimpleNamespace(choices=[]))


class TestShaping:

    def test_shape_object_keeps_declared_fields(self):
        result = shape_object({"name": " Jane ", "age": 30}, ("name", "title"))
        assert result == {"name": "Jane", "title": ""}

    def test_shape_object_non_dict(self):
        assert shape_object("Jane", ("name",)) == {"name": ""}

    def test_shape_items_adds_unique_ids(self):
        items = [{"name": "A"}, {"name": "B"}]
        shaped = shape_items(items, ("name",))
        assert [item["name"] for item in shaped] == ["A", "B"]
        assert shaped[0]["id"] != shaped[1]["id"]

    def test_shape_items_drops_junk(self):
        items = ["text", None, {"name": ""}, {"other": "x"}, {"name": "Kept"}]
        shaped = shape_items(items, ("name",))
        assert len(shaped) == 1
        assert shaped[0]["name"] == "Kept"

    def test_shape_items_joins_lists(self):
        shaped = shape_items([{"technologies": ["React", "Node"]}], ("technologies",))
        assert shaped[0]["technologies"] == "React, Node"

    def test_shape_items_non_list(self):
        assert shape_items({"name": "A"}, ("name",)) == []

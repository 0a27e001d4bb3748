import json

import pytest

from json_repair import parse_model_json, repair_json
from pipeline_errors import UnparseableResponse


def test_strips_markdown_fences():
    raw = '```json\n{"name": "Asha", "skills": ["Python"]}\n```'
    assert parse_model_json(raw) == {"name": "Asha", "skills": ["Python"]}


def test_ignores_prose_around_object():
    raw = 'Here is the analysis: {"a": {"b": 2}} Let me know if you need more.'
    assert repair_json(raw) == '{"a": {"b": 2}}'


def test_closes_truncated_array_and_object():
    assert json.loads(repair_json('{"skills": ["Python", "SQL"')) == {"skills": ["Python", "SQL"]}


def test_closes_unterminated_string():
    assert json.loads(repair_json('{"summary": "Built pipel')) == {"summary": "Built pipel"}


def test_drops_key_without_value():
    assert json.loads(repair_json('{"S": 0.8, "D":')) == {"S": 0.8}


def test_drops_truncated_key():
    assert json.loads(repair_json('{"S": 0.8, "jus')) == {"S": 0.8}


def test_drops_dangling_comma():
    assert json.loads(repair_json('{"S": 0.8, "D": 0.7,')) == {"S": 0.8, "D": 0.7}


def test_braces_inside_strings_are_not_structure():
    raw = '{"note": "uses {curly} and [square]", "n": 1'
    assert json.loads(repair_json(raw)) == {"note": "uses {curly} and [square]", "n": 1}


def test_truncated_nested_object():
    raw = '{"S": 0.8, "justifications": {"skill_relevance": "Strong Python'
    assert parse_model_json(raw) == {
        "S": 0.8,
        "justifications": {"skill_relevance": "Strong Python"},
    }


def test_non_object_response_is_unparseable():
    with pytest.raises(UnparseableResponse):
        parse_model_json("[1, 2, 3]")


def test_plain_text_is_unparseable():
    with pytest.raises(UnparseableResponse) as exc_info:
        parse_model_json("I cannot help with that.")
    assert exc_info.value.raw == "I cannot help with that."
    assert exc_info.value.error_code == "unparseable_response"


def test_truncated_array_of_objects():
    obj = {"name": "Asha", "work_experience": [{"company": "Acme", "title": "Eng"}]}
    assert parse_model_json(json.dumps(obj)[:-3]) == obj

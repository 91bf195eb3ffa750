# tests/test_profile_parser.py
"""Tests for reading model responses into profile fields."""
from __future__ import annotations

import pytest

from ai.profile_parser import ProfileParseError, parse_profile_response, strip_code_fence


def test_plain_object():
    result = parse_profile_response(
        '{"name": "Маша", "age": 21, "height": 177, "weight": 58, '
        '"measurements": "90/60/90", "about": "Обожаю танцевать"}'
    )
    assert result == {
        "name": "Маша",
        "age": 21,
        "height": 177,
        "weight": 58,
        "measurements": "90/60/90",
        "about": "Обожаю танцевать",
        "notes": None,
    }


def test_strips_fenced_block():
    raw = '```json\n{"name": "Аня", "age": 24}\n```'
    result = parse_profile_response(raw)
    assert result["name"] == "Аня"
    assert result["age"] == 24


def test_strips_fence_without_language():
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'


def test_array_takes_first_element():
    result = parse_profile_response('[{"name": "Kate"}, {"name": "Other"}]')
    assert result["name"] == "Kate"


def test_wrong_types_become_none():
    result = parse_profile_response(
        '{"name": 5, "age": "21", "height": true, "weight": null, "measurements": [90, 60, 90], "about": {}}'
    )
    assert all(value is None for value in result.values())


def test_absent_fields_become_none():
    result = parse_profile_response('{"name": "Маша"}')
    assert result["age"] is None
    assert result["about"] is None


def test_fractional_numbers_are_rounded():
    result = parse_profile_response('{"height": 172.6, "weight": 58.0}')
    assert result["height"] == 173
    assert result["weight"] == 58
    assert isinstance(result["weight"], int)


def test_notes_kept_when_text():
    assert parse_profile_response('{"notes": "unclear age"}')["notes"] == "unclear age"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_response_is_an_error(raw):
    with pytest.raises(ProfileParseError):
        parse_profile_response(raw)


@pytest.mark.parametrize("raw", ["not json", "{name: Маша}", '{"name": "Маша"'])
def test_invalid_json_is_an_error(raw):
    with pytest.raises(ProfileParseError):
        parse_profile_response(raw)


@pytest.mark.parametrize("raw", ["42", '"text"', "null", "[]", "[1, 2]"])
def test_non_object_is_an_error(raw):
    with pytest.raises(ProfileParseError):
        parse_profile_response(raw)

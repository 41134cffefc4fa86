import pytest

from propsort.core.processor import CoreProcessor
from propsort.parsing.jsonc import JsonParser


def run(text, **options):
    options.setdefault("file_type", "json")
    return CoreProcessor().process_text(text, options)


def test_custom_key_order_then_alphabetical():
    """
    CUSTOM ORDER TEST: Listed keys lead in list order; the rest follow
    alphabetically. Commas stay in their slots.
    """
    source = '{"name": "x", "b": 1, "version": "1", "a": 2}'
    result = run(source, custom_key_order=["version", "name"])
    assert result.success is True
    assert result.processed_text == '{"version": "1", "name": "x", "a": 2, "b": 1}'


def test_numeric_keys_by_value():
    result = run('{"alpha": 1, "10": 2, "2": 3}')
    assert result.processed_text == '{"2": 3, "10": 2, "alpha": 1}'


def test_nested_objects_sorted():
    result = run('{"b": {"d": 1, "c": 2}, "a": 0}')
    assert result.processed_text == '{"a": 0, "b": {"c": 2, "d": 1}}'


def test_arrays_keep_order_by_default():
    result = run('{"list": [3, 1, 2]}')
    assert result.processed_text == '{"list": [3, 1, 2]}'
    assert any("already sorted" in w for w in result.warnings)


def test_arrays_sorted_when_requested():
    result = run('{"list": ["c", "a", "b"]}', preserve_array_order=False)
    assert result.processed_text == '{"list": ["a", "b", "c"]}'


def test_multiline_document_keeps_layout():
    source = '{\n  "zeta": true,\n\n  "alpha": [\n    1\n  ]\n}\n'
    result = run(source)
    assert result.processed_text == '{\n  "alpha": [\n    1\n  ],\n\n  "zeta": true\n}\n'


def test_jsonc_comments_follow_their_keys():
    source = '{\n  // b comment\n  "b": 1,\n  "a": 2 // a note\n}'
    result = run(source, file_type="jsonc")
    assert result.processed_text == '{\n  "a": 2, // a note\n  // b comment\n  "b": 1\n}'


def test_schema_grouping():
    source = '{"zeta": 1, "description": "d", "name": "n", "id": 7}'
    result = run(source, group_by_schema=True)
    assert result.processed_text == '{"id": 7, "name": "n", "description": "d", "zeta": 1}'


def test_crlf_output_on_request():
    source = '{\n  "b": 1,\n  "a": 2\n}'
    result = run(source, line_ending="crlf")
    assert result.processed_text == '{\r\n  "a": 2,\r\n  "b": 1\r\n}'


def test_invalid_json_fails_with_parse_error():
    result = run('{"a": }')
    assert result.success is False
    assert result.errors[0].startswith("No sortable entities found")
    assert any("JSON parsing error" in e for e in result.errors)


def test_empty_object_is_not_sortable():
    result = run("{}")
    assert result.success is False


def test_parser_marks_containers():
    parsed = JsonParser().parse('{"a": [1, 2], "b": {"c": null}}')
    root = parsed.entities[0]
    assert root.type == "json-object"
    a, b = root.properties
    assert a.container == "[]"
    assert [p.name for p in a.nested_properties] == ["0", "1"]
    assert b.container == "{}"
    assert b.nested_properties[0].name == "c"


if __name__ == "__main__":
    pytest.main([__file__])

import pytest
from ruamel.yaml import YAML

from propsort.core.processor import CoreProcessor
from propsort.parsing.yamldoc import YamlParser


def run(text, **options):
    options.setdefault("file_type", "yaml")
    return CoreProcessor().process_text(text, options)


def test_mapping_sorted_with_comments_and_nesting():
    """
    BASELINE: Keys sort at every level; the header comment stays on top,
    a comment directly above a key moves with it.
    """
    source = (
        "# config\n"
        "zeta: 1\n"
        "alpha:\n"
        "  # inner\n"
        "  y: 2\n"
        "  x: 1\n"
        "beta: 3\n"
    )
    result = run(source)
    assert result.success is True
    assert result.processed_text == (
        "# config\n"
        "alpha:\n"
        "  x: 1\n"
        "  # inner\n"
        "  y: 2\n"
        "beta: 3\n"
        "zeta: 1\n"
    )


def test_sorted_output_loads_to_same_data():
    """
    SEMANTIC TEST: Sorting reorders text only; the loaded data is equal.
    """
    source = "b:\n  - 1\n  - 2\na: 'quoted'\nc: {y: 1, x: 2}\n"
    result = run(source)
    loader = YAML(typ="safe")
    assert loader.load(result.processed_text) == loader.load(source)
    assert list(loader.load(result.processed_text)) == ["a", "b", "c"]


def test_multi_document_stream():
    source = "b: 1\na: 2\n---\nd: 1\nc: 2\n"
    result = run(source)
    assert result.entities_processed == 2
    assert result.processed_text == "a: 2\nb: 1\n---\nc: 2\nd: 1\n"


def test_sequence_of_mappings():
    source = "- b: 1\n  a: 2\n- d: 3\n  c: 4\n"
    result = run(source)
    assert result.processed_text == "- a: 2\n  b: 1\n- c: 4\n  d: 3\n"


def test_sequence_values_sorted_when_requested():
    result = run("- c\n- a\n- b\n", preserve_array_order=False)
    assert result.processed_text == "- a\n- b\n- c\n"


def test_anchor_stays_ahead_of_alias():
    source = "zeta: &base\n  x: 1\nalpha: *base\n"
    result = run(source)
    assert result.processed_text == source
    assert any("already sorted" in w for w in result.warnings)


def test_custom_key_order():
    source = "name: app\nkind: Service\napiVersion: v1\n"
    result = run(source, yaml_custom_key_order=["apiVersion", "kind"])
    assert result.processed_text == "apiVersion: v1\nkind: Service\nname: app\n"


def test_flow_root_is_redumped_in_order():
    result = run("{b: 1, a: 2}\n")
    assert result.success is True
    data = YAML(typ="safe").load(result.processed_text)
    assert list(data) == ["a", "b"]
    assert result.processed_text.startswith("{")


def test_broken_yaml_reports_parse_error():
    result = run("a: [1, 2\nb: 3\n")
    assert result.success is False
    assert any("YAML parsing error" in e for e in result.errors)


def test_parser_entries():
    parsed = YamlParser().parse("top:\n  inner: 1\nlist:\n  - x\n")
    root = parsed.entities[0]
    assert root.type == "yaml-object"
    top, items = root.properties
    assert top.name == "top"
    assert top.container == "{}"
    assert items.container == "[]"
    assert [p.name for p in items.nested_properties] == ["0"]


if __name__ == "__main__":
    pytest.main([__file__])

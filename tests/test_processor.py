import re

import pytest

from propsort.core import processor as processor_module
from propsort.core.errors import PropSortError, SortError
from propsort.core.options import SortOptions, detect_file_type, load_config
from propsort.core.processor import CoreProcessor, process_text, sort_text
from propsort.sorting.base import PropertySorter

SCENARIOS = [
    ("typescript", "interface User { email: string; age: number; name: string; }", {},
     ["age", "email", "name"]),
    ("css", ".btn { z-index: 1; color: red; }", {"groupByCategory": True},
     ["color", "z-index"]),
    ("go", 'type T struct {\n\tB string `json:"a" xml:"b"`\n\tC int\n\tZ string `json:"x" db:"y"`\n'
           '\tA string `json:"q" xml:"r"`\n}\n',
     {"sortStructFields": "preserve-tags"}, ["Z string", "A string", "B string", "C int"]),
    ("json", '{"name": "x", "b": 1, "version": "1", "a": 2}', {"customKeyOrder": ["version", "name"]},
     ['"version"', '"name"', '"a"', '"b"']),
    ("json", '{"alpha": 1, "10": 2, "2": 3}', {}, ['"2"', '"10"', '"alpha"']),
]


@pytest.mark.parametrize("file_type, source, options, expected", SCENARIOS)
def test_reference_scenarios(file_type, source, options, expected):
    """
    SCENARIO TEST: Each marker appears in the output in the expected order.
    """
    result = CoreProcessor().process_text(source, dict(options, fileType=file_type))
    assert result.success is True, result.errors
    positions = [result.processed_text.index(marker) for marker in expected]
    assert positions == sorted(positions)


@pytest.mark.parametrize("file_type, source, options, expected", SCENARIOS)
def test_second_pass_is_a_no_op(file_type, source, options, expected):
    """IDEMPOTENCY TEST: Sorted output is reported as already sorted."""
    first = process_text(source, dict(options, fileType=file_type))
    second = process_text(first.processed_text, dict(options, fileType=file_type))
    assert second.success is True
    assert second.processed_text == first.processed_text
    assert second.warnings[-1] == "Properties are already sorted in the specified order"


def test_comments_never_duplicated():
    source = (
        "// header\n"
        "interface A {\n"
        "  /** doc c */\n"
        "  c: string; // after c\n"
        "  // before b\n"
        "  b: string;\n"
        "  /* lonely */\n"
        "\n"
        "  a: string;\n"
        "}\n"
    )
    result = process_text(source, {"fileType": "typescript"})
    assert result.success is True
    for raw in re.findall(r"//[^\n]*|/\*.*?\*/", source):
        assert result.processed_text.count(raw) == source.count(raw)


def test_result_wire_shape():
    result = process_text("interface A { b: 1; a: 2; }", {"fileType": "typescript"})
    assert result.to_dict() == {
        "success": True,
        "entitiesProcessed": 1,
        "errors": [],
        "warnings": [],
        "processedText": "interface A { a: 2; b: 1; }",
    }


def test_default_options_process_every_language():
    """
    DEFAULTS TEST: A bare file type is enough; every option default is
    accepted by validation.
    """
    assert SortOptions().property_spacing is None
    sources = {
        "typescript": "interface User { email: string; age: number; name: string; }",
        "css": ".a { z-index: 1; color: red; }",
        "go": "type T struct {\n\tB int\n\tA int\n}\n",
        "json": '{"b": 1, "a": 2}',
        "yaml": "b: 1\na: 2\n",
    }
    for file_type, source in sources.items():
        result = process_text(source, {"fileType": file_type})
        assert result.success is True, (file_type, result.errors)
        assert result.processed_text != source


def test_sort_failure_leaves_entity_as_written(monkeypatch):
    """
    RECOVERY TEST: An entity whose sort fails is kept as written and
    reported as a warning; the other entities still sort.
    """
    class BrittleSorter(PropertySorter):
        def sort_entity(self, entity):
            if entity.name == "Broken":
                raise SortError("Property has no usable name")
            return super().sort_entity(entity)

    monkeypatch.setattr(processor_module, "get_sorter", lambda opts: BrittleSorter(opts))
    source = "interface Broken { b: 1; a: 2; }\ninterface Good { d: 1; c: 2; }\n"
    result = process_text(source, {"fileType": "typescript"})

    assert result.success is True
    assert result.entities_processed == 2
    assert result.warnings == ["Sorting error: Property has no usable name"]
    assert result.processed_text == "interface Broken { b: 1; a: 2; }\ninterface Good { c: 2; d: 1; }\n"


def test_no_entities_fails_outside_css():
    result = process_text("const x = 1;", {"fileType": "typescript"})
    assert result.success is False
    assert result.errors == ["No sortable entities found (interfaces, objects, or type aliases)"]


def test_bad_options_become_processing_failure():
    result = process_text("{}", {"fileType": "rust"})
    assert result.success is False
    assert result.errors[0].startswith("Processing failed:")


def test_sort_text_shortcut():
    assert sort_text('{"b": 1, "a": 2}', {"fileType": "json"}) == '{"a": 2, "b": 1}'
    assert sort_text("not json", {"fileType": "json"}) is None


def test_preview_lists_names_per_entity():
    preview = CoreProcessor().preview("interface A { b: 1; a: 2; }")
    assert preview == [{"entity": "A", "original": ["b", "a"], "sorted": ["a", "b"], "changes": True}]


def test_options_accept_camel_case_and_defaults():
    options = SortOptions.from_mapping({"sortOrder": "descending", "customKeyOrder": ["a"], "unknownKey": 1})
    assert options.sort_order == "desc"
    assert options.custom_key_order == ["a"]
    assert options.preserve_formatting is True
    assert options.indentation_size == 4
    assert options.language == "typescript"


def test_options_validation():
    with pytest.raises(PropSortError):
        SortOptions(sort_order="sideways")
    with pytest.raises(PropSortError):
        SortOptions(file_type="cobol")
    assert SortOptions(indentation="  ").indentation_size == 2


def test_file_type_detection():
    assert detect_file_type("a/b/component.tsx") == "typescript"
    assert detect_file_type("styles.SCSS") == "scss"
    assert detect_file_type("deploy.yml") == "yml"
    assert detect_file_type("README") == "typescript"
    assert SortOptions.for_file("x.go").language == "go"


def test_load_config_reads_editor_section(tmp_path):
    config = tmp_path / "settings.json"
    config.write_text('{"propertySorter": {"sortOrder": "desc", "naturalSort": true}}', encoding="utf-8")
    data = load_config(str(config))
    assert data == {"sortOrder": "desc", "naturalSort": True}
    assert SortOptions.from_mapping(data).natural_sort is True


def test_load_config_rejects_non_mapping(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(PropSortError):
        load_config(str(config))


if __name__ == "__main__":
    pytest.main([__file__])

import pytest

from propsort.core.processor import CoreProcessor
from propsort.parsing.typescript import TypeScriptParser


def run(text, **options):
    options.setdefault("file_type", "typescript")
    return CoreProcessor().process_text(text, options)


def test_interface_sorted_ascending():
    """
    BASELINE: Members of a single-line interface come back in name order
    with their own punctuation and spacing.
    """
    result = run("interface User { email: string; age: number; name: string; }")

    assert result.success is True
    assert result.entities_processed == 1
    assert result.processed_text == "interface User { age: number; email: string; name: string; }"


def test_interface_sorted_descending():
    result = run("interface User { email: string; age: number; name: string; }", sort_order="desc")
    assert result.processed_text == "interface User { name: string; email: string; age: number; }"


def test_comments_travel_with_their_member():
    """
    COMMENT TEST: A leading comment moves with the member below it and a
    same-line comment stays on its member's line.
    """
    source = (
        "interface User {\n"
        "  // the email\n"
        "  email: string;\n"
        "  age: number; // years\n"
        "  name: string;\n"
        "}\n"
    )
    result = run(source)

    assert result.processed_text == (
        "interface User {\n"
        "  age: number; // years\n"
        "  // the email\n"
        "  email: string;\n"
        "  name: string;\n"
        "}\n"
    )


def test_text_outside_entities_is_untouched():
    source = (
        "import { x } from './x';\n"
        "\n"
        "export interface Point { y: number; x: number; }\n"
        "\n"
        "console.log(x);\n"
    )
    result = run(source)

    assert result.processed_text == (
        "import { x } from './x';\n"
        "\n"
        "export interface Point { x: number; y: number; }\n"
        "\n"
        "console.log(x);\n"
    )


def test_numeric_names_sort_by_value_first():
    """Quoted numeric keys order by value ahead of the other names."""
    result = run('interface N { alpha: string; "10": string; "2": string; }')
    assert result.processed_text == 'interface N { "2": string; "10": string; alpha: string; }'


def test_spread_keeps_its_position():
    """
    PINNING TEST: '...rest' stays in slot 1 while the other members sort
    around it; the unterminated last member stays unterminated.
    """
    result = run("const o = { b: 1, ...rest, a: 2 };")
    assert result.processed_text == "const o = { a: 2, ...rest, b: 1 };"


def test_method_chain_members_are_pinned_first():
    result = run("const q = { b: 1, run: db.select().from(t), a: 2 };")
    assert result.processed_text == "const q = { run: db.select().from(t), a: 2, b: 1 };"


def test_method_chain_pinning_can_be_disabled():
    result = run("const q = { b: 1, run: db.select().from(t), a: 2 };", preserve_method_chaining=False)
    assert result.processed_text == "const q = { a: 2, b: 1, run: db.select().from(t) };"


def test_trailing_comma_removed_on_request():
    source = "const o = {\n  b: 1,\n  a: 2,\n};\n"
    result = run(source, trailing_commas="remove")
    assert result.processed_text == "const o = {\n  a: 2,\n  b: 1\n};\n"


def test_nested_objects_sort_recursively():
    source = "const cfg = {\n  z: { d: 1, c: 2 },\n  a: 1,\n};\n"
    result = run(source)
    assert result.processed_text == "const cfg = {\n  a: 1,\n  z: { c: 2, d: 1 },\n};\n"


def test_nested_sorting_can_be_disabled():
    source = "const cfg = {\n  z: { d: 1, c: 2 },\n  a: 1,\n};\n"
    result = run(source, sort_nested_objects=False)
    assert result.processed_text == "const cfg = {\n  a: 1,\n  z: { d: 1, c: 2 },\n};\n"


def test_already_sorted_is_idempotent():
    """
    IDEMPOTENCY TEST: Sorting the output again changes nothing and says so.
    """
    first = run("interface User { email: string; age: number; name: string; }")
    second = run(first.processed_text)

    assert second.success is True
    assert second.processed_text == first.processed_text
    assert any("already sorted" in w for w in second.warnings)


def test_aligned_spacing_rebuilds_the_body():
    source = "interface A {\n  bb: string;\n  a: number;\n}\n"
    result = run(source, property_spacing="aligned")
    assert result.processed_text == "interface A {\n  a:  number;\n  bb: string;\n}\n"


def test_comment_style_single_line():
    source = "interface A {\n  /* note */\n  b: string;\n  a: string;\n}\n"
    result = run(source, comment_style="single-line")
    assert result.processed_text == "interface A {\n  a: string;\n  // note\n  b: string;\n}\n"


def test_block_comment_ending_on_member_line_leads_it():
    """
    A block comment opened after '{' and closed on a member's line leads
    that member; restyling keeps it above the member with a clean indent.
    """
    source = "interface A { /* multi\n line */ b: 1; a: 2; }"
    entity = TypeScriptParser().parse(source).entities[0]
    b, a = entity.properties
    assert [c.raw for c in b.comments] == ["/* multi\n line */"]
    assert not entity.dangling_comments
    assert entity.indent == ""

    result = run(source, comment_style="multi-line")
    out = result.processed_text
    assert out.count("multi") == 1
    assert out.index("a: 2;") < out.index("multi") < out.index("b: 1;")
    assert "\n    a: 2;" in out
    assert "\n    b: 1;" in out


def test_comments_dropped_when_disabled():
    source = "interface A {\n  /* note */\n  b: string;\n  a: string;\n}\n"
    result = run(source, include_comments=False)
    assert result.processed_text == "interface A {\n  a: string;\n  b: string;\n}\n"


def test_empty_interface_is_not_sortable():
    result = run("interface Empty {}")
    assert result.success is False
    assert result.errors[0].startswith("No sortable entities found")


def test_parser_records_member_details():
    parsed = TypeScriptParser().parse(
        "interface Api {\n  get(id: string): Item;\n  readonly name?: string;\n}\n"
    )
    assert not parsed.errors
    entity = parsed.entities[0]
    assert entity.type == "interface"
    assert entity.name == "Api"

    method, name = entity.properties
    assert method.name == "get"
    assert method.member_kind == "method"
    assert name.name == "name"
    assert name.optional is True
    assert name.value == "string"


def test_unbalanced_braces_reported_as_warning():
    """Parse problems degrade to warnings when entities were still found."""
    result = run("interface A { b: string; a: string; }\n}")
    assert result.success is True
    assert any("Unbalanced braces" in w for w in result.warnings)


if __name__ == "__main__":
    pytest.main([__file__])

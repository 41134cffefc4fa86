import pytest

from propsort.core.processor import CoreProcessor
from propsort.parsing.css import CssParser, classify_selector, selector_specificity, vendor_prefix_of
from propsort.parsing.sass import to_braced


def run(text, **options):
    options.setdefault("file_type", "css")
    return CoreProcessor().process_text(text, options)


def test_declarations_sorted_alphabetically():
    result = run(".btn { z-index: 1; color: red; background: blue; }")
    assert result.success is True
    assert result.processed_text == ".btn { background: blue; color: red; z-index: 1; }"


def test_group_by_category_puts_typography_before_uncategorized():
    """
    CATEGORY TEST: 'color' belongs to a category bucket, 'z-index' to none,
    so color leads.
    """
    result = run(".btn { z-index: 1; color: red; }", group_by_category=True)
    assert result.processed_text == ".btn { color: red; z-index: 1; }"


def test_category_buckets_keep_written_order():
    result = run(".a { top: 0; width: 1px; position: absolute; }", group_by_category=True)
    # positioning bucket (top, position as written) then box model
    assert result.processed_text == ".a { top: 0; position: absolute; width: 1px; }"


def test_unterminated_last_declaration_stays_unterminated():
    result = run(".a { b: 1; a: 2 }")
    assert result.processed_text == ".a { a: 2; b: 1 }"


def test_vendor_prefix_groups():
    source = ".a { transition: x; -moz-transition: x; -webkit-transition: x; }"
    result = run(source, group_vendor_prefixes=True)
    assert result.processed_text == ".a { -webkit-transition: x; -moz-transition: x; transition: x; }"


def test_important_declarations_first():
    result = run(".a { b: 1; c: 2 !important; a: 3; }", sort_by_importance=True)
    assert result.processed_text == ".a { c: 2 !important; a: 3; b: 1; }"


def test_custom_properties_lead_as_written():
    result = run(":root { color: red; --z: 1; --a: 2; }")
    assert result.processed_text == ":root { --z: 1; --a: 2; color: red; }"


def test_multiline_rule_with_comments():
    source = (
        "/* Buttons */\n"
        ".btn {\n"
        "  /* stacking */\n"
        "  z-index: 1;\n"
        "  color: red; /* brand */\n"
        "}\n"
    )
    result = run(source)
    assert result.processed_text == (
        "/* Buttons */\n"
        ".btn {\n"
        "  color: red; /* brand */\n"
        "  /* stacking */\n"
        "  z-index: 1;\n"
        "}\n"
    )
    # No comment was duplicated or lost
    for raw in ("/* Buttons */", "/* stacking */", "/* brand */"):
        assert result.processed_text.count(raw) == source.count(raw)


def test_keyframe_steps_keep_order_by_default():
    source = "@keyframes fade {\n  to { opacity: 1; }\n  from { opacity: 0; }\n}\n"
    result = run(source)
    assert result.processed_text == source
    assert any("already sorted" in w for w in result.warnings)


def test_keyframe_steps_sorted_by_percentage():
    source = "@keyframes fade {\n  to { opacity: 1; }\n  from { opacity: 0; }\n}\n"
    result = run(source, sort_keyframes=True)
    assert result.processed_text == "@keyframes fade {\n  from { opacity: 0; }\n  to { opacity: 1; }\n}\n"


def test_scss_mixed_body_sorts_each_run():
    """
    SCSS TEST: Declarations around a nested rule sort in place; the nested
    rule sorts on its own.
    """
    source = ".a {\n  z: 1;\n  b: 2;\n  .c { y: 1; x: 2; }\n}\n"
    result = run(source, file_type="scss")
    assert result.processed_text == ".a {\n  b: 2;\n  z: 1;\n  .c { x: 2; y: 1; }\n}\n"


def test_less_line_comments_are_kept():
    source = ".a {\n  // second\n  b: 1;\n  a: 2;\n}\n"
    result = run(source, file_type="less")
    assert result.processed_text == ".a {\n  a: 2;\n  // second\n  b: 1;\n}\n"


def test_sass_indented_syntax():
    source = ".a\n  color: red\n  background: blue\n"
    result = run(source, file_type="sass")
    assert result.success is True
    assert result.processed_text == ".a\n  background: blue\n  color: red\n"


def test_sass_rewrite_adds_braces_without_moving_lines():
    braced, _ = to_braced(".a\n  color: red\n")
    assert braced == ".a {\n  color: red;}\n"


def test_no_rules_is_a_successful_no_op():
    result = run("/* nothing to see */\n")
    assert result.success is True
    assert result.warnings == ["No CSS rules found to sort"]
    assert result.processed_text == "/* nothing to see */\n"


def test_parser_entity_metadata():
    parsed = CssParser().parse("@media (min-width: 1px) {\n  #id .x { b: 1; a: 2 !important; }\n}\n")
    entity = parsed.entities[0]
    assert entity.type == "css-rule"
    assert entity.media_query == "@media (min-width: 1px)"
    assert entity.specificity == 110
    assert entity.properties[1].important is True


def test_selector_helpers():
    assert classify_selector("@media print") == "css-media"
    assert classify_selector("@keyframes spin") == "css-keyframe"
    assert classify_selector("@font-face") == "css-at-rule"
    assert classify_selector("a:hover") == "css-rule"
    assert vendor_prefix_of("-webkit-box-shadow") == "-webkit-"
    assert vendor_prefix_of("box-shadow") is None


if __name__ == "__main__":
    pytest.main([__file__])

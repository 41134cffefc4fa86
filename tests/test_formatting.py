import pytest

from propsort.core.errors import ReconstructionError
from propsort.core.models import ParsedEntity, ParsedProperty, PropertyComment, SourceSpan
from propsort.core.options import SortOptions
from propsort.rendering.formatting import (
    CommentSyntax, common_separator, convert_line_endings, detect_line_ending,
    final_separator, format_comment, indent_unit, key_value,
)
from propsort.rendering.splice import splice

C_SYNTAX = CommentSyntax()
CSS_SYNTAX = CommentSyntax(line=None)
YAML_SYNTAX = CommentSyntax(line="#", block=False)


def comment(raw, text, kind="single"):
    return PropertyComment(text=text, type=kind, raw=raw, line=1)


def test_line_ending_detection_and_conversion():
    assert detect_line_ending("a\r\nb\r\nc\n") == "\r\n"
    assert detect_line_ending("a\nb\r\n") == "\n"
    assert convert_line_endings("a\nb\r\nc", "\r\n") == "a\r\nb\r\nc"
    assert convert_line_endings("a\r\nb", "\n") == "a\nb"


def test_comment_restyling():
    single = comment("// hello", "hello")
    block = comment("/* a\n * b */", "a\n * b", "multi")

    assert format_comment(single, "preserve", C_SYNTAX) == "// hello"
    assert format_comment(single, "multi-line", C_SYNTAX) == "/* hello */"
    assert format_comment(block, "single-line", C_SYNTAX, "  ") == "// a\n  // b"
    assert format_comment(block, "multi-line", C_SYNTAX, "  ") == "/*\n   * a\n   * b\n   */"


def test_comment_restyling_respects_language_syntax():
    single = comment("// hello", "hello")
    # Plain CSS has no line comments
    assert format_comment(single, "preserve", CSS_SYNTAX) == "/* hello */"
    assert format_comment(single, "single-line", CSS_SYNTAX) == "/* hello */"
    assert format_comment(single, "multi-line", YAML_SYNTAX) == "# hello"


def test_key_value_spacing():
    assert key_value("a", "1", SortOptions()) == "a: 1"
    assert key_value("a", "1", SortOptions(property_spacing="spaced")) == "a : 1"
    assert key_value("a", "1", SortOptions(property_spacing="aligned"), width=5) == "a:     1"


def test_separator_policies():
    members = [ParsedProperty(name=n, trailing_punctuation=p) for n, p in (("a", ";"), ("b", ";"), ("c", ""))]
    assert common_separator(members, ",") == ";"
    assert common_separator(members[:1], ",") == ","
    newline_only = [ParsedProperty(name="a"), ParsedProperty(name="b")]
    assert common_separator(newline_only, ";") == ""

    assert final_separator(SortOptions(trailing_commas="add"), "") == ","
    assert final_separator(SortOptions(trailing_commas="remove"), ",") == ""
    assert final_separator(SortOptions(), ";") == ";"


def test_indent_unit():
    entity = ParsedEntity(type="object", name="x", indent="    ", base_indent="  ")
    assert indent_unit(SortOptions(indentation_type="tabs")) == "\t"
    assert indent_unit(SortOptions(indentation_type="spaces", indentation_size=2)) == "  "
    assert indent_unit(SortOptions(), entity) == "  "
    assert indent_unit(SortOptions(indentation="\t")) == "\t"


def test_splice_writes_placeholder_when_rendering_fails():
    """
    SPLICE TEST: A failing entity becomes an error comment; every other
    entity and the text between them is kept.
    """
    text = "AAA BBB CCC"
    first = ParsedEntity(type="object", name="x", start_line=1, end_line=1, span=SourceSpan(0, 3, 1, 1))
    second = ParsedEntity(type="object", name="y", start_line=1, end_line=1, span=SourceSpan(8, 11, 1, 1))

    def render(entity):
        if entity.name == "x":
            raise ReconstructionError("boom")
        return "ccc"

    out = splice(text, [first, second], [first, second], render,
                 lambda entity, error: f"// Error reconstructing {entity.name}: {error}")
    assert out == "// Error reconstructing x: boom BBB ccc"


if __name__ == "__main__":
    pytest.main([__file__])

import pytest

from propsort.core.processor import CoreProcessor
from propsort.parsing.golang import GoParser
from propsort.sorting.golang import tag_pattern, type_size


def run(text, **options):
    options.setdefault("file_type", "go")
    return CoreProcessor().process_text(text, options)


def test_fields_grouped_embedded_exported_unexported():
    """
    BASELINE: Embedded fields lead, then exported and unexported fields,
    each group alphabetical.
    """
    source = (
        "type S struct {\n"
        "\tName string\n"
        "\tio.Reader\n"
        "\tage  int\n"
        "\tID   int\n"
        "}\n"
    )
    result = run(source)
    assert result.success is True
    assert result.processed_text == (
        "type S struct {\n"
        "\tio.Reader\n"
        "\tID   int\n"
        "\tName string\n"
        "\tage  int\n"
        "}\n"
    )


def test_preserve_tags_groups_by_tag_signature():
    """
    TAG TEST: 'db+json' fields come before 'json+xml' fields regardless of
    their names, each group alphabetical, untagged fields last.
    """
    source = (
        "type T struct {\n"
        '\tB string `json:"a" xml:"b"`\n'
        "\tC int\n"
        '\tZ string `json:"x" db:"y"`\n'
        '\tA string `json:"q" xml:"r"`\n'
        "}\n"
    )
    result = run(source, sort_struct_fields="preserve-tags")
    assert result.processed_text == (
        "type T struct {\n"
        '\tZ string `json:"x" db:"y"`\n'
        '\tA string `json:"q" xml:"r"`\n'
        '\tB string `json:"a" xml:"b"`\n'
        "\tC int\n"
        "}\n"
    )

    # Alphabetical order alone would differ
    plain = run(source)
    assert plain.processed_text.index("\tA string") < plain.processed_text.index("\tZ string")


def test_by_size_strategy():
    source = "type P struct {\n\tA string\n\tB bool\n\tC int64\n}\n"
    result = run(source, sort_struct_fields="by-size")
    assert result.processed_text == "type P struct {\n\tB bool\n\tC int64\n\tA string\n}\n"


def test_by_type_strategy():
    source = "type P struct {\n\tC string\n\tA string\n\tB bool\n}\n"
    result = run(source, sort_struct_fields="by-type")
    assert result.processed_text == "type P struct {\n\tB bool\n\tA string\n\tC string\n}\n"


def test_field_comments_move_with_fields():
    source = (
        "// Config holds settings.\n"
        "type Config struct {\n"
        "\t// Port to bind\n"
        "\tPort int\n"
        "\tHost string // hostname\n"
        "}\n"
    )
    result = run(source)
    assert result.processed_text == (
        "// Config holds settings.\n"
        "type Config struct {\n"
        "\tHost string // hostname\n"
        "\t// Port to bind\n"
        "\tPort int\n"
        "}\n"
    )


def test_empty_struct_succeeds_with_warning():
    result = run("package x\n\ntype E struct{}\n")
    assert result.success is True
    assert result.entities_processed == 1
    assert result.warnings == ["No properties found to sort, but entities were processed"]


def test_grouped_type_declarations():
    source = "type (\n\tA struct {\n\t\tb int\n\t\ta int\n\t}\n)\n"
    result = run(source)
    assert result.processed_text == "type (\n\tA struct {\n\t\ta int\n\t\tb int\n\t}\n)\n"


def test_parser_reads_tags_and_embedding():
    parsed = GoParser().parse('type U struct {\n\t*Base\n\tName string `json:"name"`\n}\n')
    entity = parsed.entities[0]
    assert entity.name == "U"
    assert entity.is_exported is True

    base, name = entity.properties
    assert base.is_embedded is True
    assert base.name == "*Base"
    assert name.struct_tags == 'json:"name"'
    assert name.value == "string"


def test_tag_and_size_helpers():
    assert tag_pattern('json:"id" db:"id"') == "db+json"
    assert tag_pattern('yaml:"x"') is None
    assert tag_pattern(None) is None
    assert type_size("bool") == 1
    assert type_size("*Thing") == 8
    assert type_size("[4]int32") == 16
    assert type_size("[]string") == 24


if __name__ == "__main__":
    pytest.main([__file__])

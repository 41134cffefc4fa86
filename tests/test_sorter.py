import pytest

from propsort.core.errors import SortError
from propsort.core.models import ParsedProperty
from propsort.core.options import SortOptions
from propsort.sorting.base import PropertySorter, natural_compare, numeric_value, strip_quotes


def props(*names, **fields):
    return [ParsedProperty(name=name, **fields) for name in names]


def names(properties):
    return [p.name for p in properties]


def sort(properties, **options):
    return names(PropertySorter(SortOptions(**options)).sort_properties(properties))


def test_numeric_names_first_by_value():
    """ORDERING TEST: '2' < '10' < 'alpha' in ascending order."""
    assert sort(props("10", "2", "alpha")) == ["2", "10", "alpha"]


def test_descending_flips_only_the_name_step():
    assert sort(props("b", "c", "a"), sort_order="desc") == ["c", "b", "a"]
    assert sort(props("b", "z", "a"), sort_order="desc", custom_order=["z"]) == ["z", "b", "a"]


def test_case_sensitivity():
    assert sort(props("b", "C", "a")) == ["C", "a", "b"]
    assert sort(props("b", "C", "a"), case_sensitive=False) == ["a", "b", "C"]


def test_natural_sort():
    assert sort(props("item10", "item2")) == ["item10", "item2"]
    assert sort(props("item10", "item2"), natural_sort=True) == ["item2", "item10"]


def test_custom_order_leads_in_list_order():
    assert sort(props("a", "id", "b", "name"), custom_order=["name", "id"]) == ["name", "id", "a", "b"]


def test_prioritize_required():
    members = [ParsedProperty(name="a", optional=True), ParsedProperty(name="b")]
    assert sort(members, prioritize_required=True) == ["b", "a"]


def test_group_by_type():
    members = [
        ParsedProperty(name="value"),
        ParsedProperty(name="load", member_kind="method"),
        ParsedProperty(name="size", member_kind="getter"),
        ParsedProperty(name="size2", member_kind="setter"),
        ParsedProperty(name="onClick", value="() => go()"),
    ]
    assert sort(members, group_by_type=True) == ["load", "onClick", "size2", "size", "value"]


def test_spreads_keep_their_index():
    members = [ParsedProperty(name="b"), ParsedProperty(name="...x", is_spread=True), ParsedProperty(name="a")]
    assert sort(members) == ["a", "...x", "b"]


def test_nested_properties_sorted_and_input_untouched():
    inner = props("d", "c")
    outer = [ParsedProperty(name="z", nested_properties=inner), ParsedProperty(name="a")]
    result = PropertySorter().sort_properties(outer)

    assert names(result) == ["a", "z"]
    assert names(result[1].nested_properties) == ["c", "d"]
    # Inputs are never mutated
    assert names(outer) == ["z", "a"]
    assert names(inner) == ["d", "c"]


def test_malformed_property_raises_sort_error():
    with pytest.raises(SortError):
        PropertySorter().sort_properties([ParsedProperty(name=None), ParsedProperty(name="a")])


def test_preview_and_would_change_order():
    sorter = PropertySorter()
    preview = sorter.preview_sort(props("b", "a"))
    assert preview == {"original": ["b", "a"], "sorted": ["a", "b"], "changes": True}
    assert sorter.would_change_order(props("a", "b")) is False


def test_name_helpers():
    assert strip_quotes('"x"') == "x"
    assert strip_quotes("'x") == "'x"
    assert numeric_value("'10'") == 10.0
    assert numeric_value("007") is None
    assert natural_compare("a2", "a10") == -1
    assert natural_compare("a10", "a10") == 0


if __name__ == "__main__":
    pytest.main([__file__])

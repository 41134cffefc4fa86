#!/usr/bin/env python3
"""
PROPSORT SORTER - Generic Comparator Chain
------------------------------------------
Orders a property list with a fixed chain of tie-breakers:

  1. custom_order       listed names first, in list order
  2. prioritize_required required members before optional ones
  3. group_by_type      methods, setters, getters, then plain properties
  4. name               case folding, natural digit runs, numeric names
                        by value ahead of the rest, quotes ignored

Only step 4 follows sort_order. Spread members never move: the sorted
members flow around them. Language sorters reuse the chain inside their
own grouping rules by overriding `arrange`.

Sorters are pure: inputs are never mutated, nested lists are rebuilt
through ParsedProperty.copy.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from functools import cmp_to_key
from typing import Callable, Dict, List, Optional

from propsort.core.errors import SortError
from propsort.core.models import ParsedEntity, ParsedProperty, property_names
from propsort.core.options import SortOptions

logger = logging.getLogger("propsort.sorting")

NUMERIC_NAME_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d*[1-9])?")
DIGIT_RUNS_RE = re.compile(r"\d+|\D+")

TYPE_GROUP_ORDER = ("method", "setter", "getter", "property")


def strip_quotes(name: str) -> str:
    if len(name) >= 2 and name[0] == name[-1] and name[0] in "\"'`":
        return name[1:-1]
    return name


def numeric_value(name: str) -> Optional[float]:
    """Value of a name that is exactly a canonical number ('2', '-1.5', "'10'")."""
    clean = strip_quotes(name).strip()
    if NUMERIC_NAME_RE.fullmatch(clean):
        return float(clean)
    return None


def natural_compare(a: str, b: str) -> int:
    a_parts = DIGIT_RUNS_RE.findall(a)
    b_parts = DIGIT_RUNS_RE.findall(b)
    for i in range(max(len(a_parts), len(b_parts))):
        a_part = a_parts[i] if i < len(a_parts) else ""
        b_part = b_parts[i] if i < len(b_parts) else ""
        if a_part.isdigit() and b_part.isdigit():
            if int(a_part) != int(b_part):
                return -1 if int(a_part) < int(b_part) else 1
        elif a_part != b_part:
            return -1 if a_part < b_part else 1
    return 0


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def partition(properties: List[ParsedProperty],
              predicate: Callable[[ParsedProperty], bool]):
    """(matching, rest), both in input order."""
    hits = [p for p in properties if predicate(p)]
    rest = [p for p in properties if not predicate(p)]
    return hits, rest


class PropertySorter:
    """
    The language-neutral sorter, also the base class of every language
    sorter. Subclasses override `arrange` (order of the non-spread
    members of one list) and may override `arrange_nested`.
    """

    def __init__(self, options: Optional[SortOptions] = None):
        self.options = options or SortOptions()
        self._custom_rank: Dict[str, int] = {}
        for index, name in enumerate(self.options.custom_order):
            self._custom_rank.setdefault(name, index)

    # --- Public API ---

    def sort_properties(self, properties: List[ParsedProperty],
                        entity: Optional[ParsedEntity] = None) -> List[ParsedProperty]:
        """Returns a new, sorted list. Raises SortError on malformed records."""
        if not properties:
            return list(properties or [])
        for prop in properties:
            if not isinstance(getattr(prop, "name", None), str):
                raise SortError(f"Property at line {getattr(prop, 'line', 0)} has no usable name")
        try:
            ordered = self.pin_spreads(list(properties), lambda regular: self.arrange(regular, entity))
            if self.options.sort_nested_objects:
                ordered = [self._sort_nested(prop) for prop in ordered]
        except SortError:
            raise
        except (TypeError, AttributeError, ValueError) as e:
            where = f" in {entity.name}" if entity is not None else ""
            raise SortError(f"Unable to order properties{where}: {e}") from e
        return ordered

    def sort_entity(self, entity: ParsedEntity) -> ParsedEntity:
        return entity.copy(properties=self.sort_properties(entity.properties, entity))

    def sort_entities(self, entities: List[ParsedEntity]) -> List[ParsedEntity]:
        return [self.sort_entity(entity) for entity in entities]

    def preview_sort(self, properties: List[ParsedProperty],
                     entity: Optional[ParsedEntity] = None) -> dict:
        """Names before and after sorting, without touching the input."""
        sorted_props = self.sort_properties(properties, entity)
        return {
            "original": [p.name for p in properties],
            "sorted": [p.name for p in sorted_props],
            "changes": property_names(properties) != property_names(sorted_props),
        }

    def would_change_order(self, properties: List[ParsedProperty],
                           entity: Optional[ParsedEntity] = None) -> bool:
        return self.preview_sort(properties, entity)["changes"]

    # --- Hooks ---

    def arrange(self, properties: List[ParsedProperty],
                entity: Optional[ParsedEntity]) -> List[ParsedProperty]:
        return self.sort_group(properties)

    def arrange_nested(self, parent: ParsedProperty) -> List[ParsedProperty]:
        return self.sort_properties(parent.nested_properties)

    # --- Building blocks ---

    def sort_group(self, properties: List[ParsedProperty]) -> List[ParsedProperty]:
        return sorted(properties, key=cmp_to_key(self.compare))

    @staticmethod
    def pin_spreads(properties: List[ParsedProperty],
                    arrange: Callable[[List[ParsedProperty]], List[ParsedProperty]]) -> List[ParsedProperty]:
        """Spread members keep their index; everything else is arranged around them."""
        regular = [p for p in properties if not p.is_spread]
        if len(regular) == len(properties):
            return arrange(regular)
        arranged = iter(arrange(regular))
        return [p if p.is_spread else next(arranged) for p in properties]

    def _sort_nested(self, prop: ParsedProperty) -> ParsedProperty:
        if not prop.nested_properties:
            return prop
        return prop.copy(nested_properties=self.arrange_nested(prop))

    # --- Comparators ---

    def compare(self, a: ParsedProperty, b: ParsedProperty) -> int:
        if self._custom_rank:
            a_rank = self._custom_rank.get(a.name)
            b_rank = self._custom_rank.get(b.name)
            if a_rank is not None and b_rank is not None:
                if a_rank != b_rank:
                    return -1 if a_rank < b_rank else 1
            elif a_rank is not None:
                return -1
            elif b_rank is not None:
                return 1

        if self.options.prioritize_required and a.optional != b.optional:
            return 1 if a.optional else -1

        if self.options.group_by_type:
            a_group = TYPE_GROUP_ORDER.index(self.type_group(a))
            b_group = TYPE_GROUP_ORDER.index(self.type_group(b))
            if a_group != b_group:
                return -1 if a_group < b_group else 1

        return self.compare_names(a.name, b.name)

    def compare_names(self, a: str, b: str) -> int:
        """The base comparator, already flipped for descending order."""
        result = self._name_order(a, b)
        return -result if self.options.descending else result

    def _name_order(self, a: str, b: str) -> int:
        if not self.options.case_sensitive:
            a, b = a.lower(), b.lower()

        if self.options.natural_sort:
            result = natural_compare(strip_quotes(a), strip_quotes(b))
            if result:
                return result

        a_num, b_num = numeric_value(a), numeric_value(b)
        if a_num is not None and b_num is not None:
            return _sign(a_num - b_num)
        if a_num is not None:
            return -1
        if b_num is not None:
            return 1

        a_clean, b_clean = strip_quotes(a), strip_quotes(b)
        if a_clean == b_clean:
            return 0
        return -1 if a_clean < b_clean else 1

    @staticmethod
    def type_group(prop: ParsedProperty) -> str:
        if prop.member_kind in ("method", "setter", "getter"):
            return prop.member_kind
        value = prop.value if isinstance(prop.value, str) else ""
        if "=>" in value or "function" in value or "()" in value or "(" in prop.name:
            return "method"
        return "property"

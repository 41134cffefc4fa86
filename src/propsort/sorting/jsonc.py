#!/usr/bin/env python3
"""
PROPSORT DATA SORTERS - JSON & YAML
-----------------------------------
Objects and mappings sort by key: custom_key_order first, then either
the schema buckets (group_by_schema) or the generic comparator chain.
Arrays and sequences keep their order unless preserve_array_order is
off, in which case elements order by their value.

YAML reuses the JSON rules with its own option names, treats '<<'
merge keys as pinned spreads, and never lets an alias move above the
anchor it refers to.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from functools import cmp_to_key
from typing import Dict, List, Optional

from propsort.core.models import ParsedEntity, ParsedProperty
from propsort.sorting.base import PropertySorter

logger = logging.getLogger("propsort.sorting.data")

SCHEMA_BUCKETS = {
    "metadata": ("id", "type", "version", "$schema", "$id", "$ref"),
    "required": ("name", "title", "required", "properties"),
    "optional": ("description", "default", "example", "examples"),
}

ANCHOR_RE = re.compile(r"(?:^|[\s\[{,:-])&([\w-]+)")
ALIAS_RE = re.compile(r"(?:^|[\s\[{,:-])\*([\w-]+)")


def is_complex(prop: ParsedProperty) -> bool:
    if prop.has_nested_object or isinstance(prop.value, (dict, list)):
        return True
    value = prop.value.strip() if isinstance(prop.value, str) else ""
    return value[:1] in ("{", "[")


class JSONPropertySorter(PropertySorter):

    @property
    def custom_keys(self) -> List[str]:
        return self.options.custom_key_order

    @property
    def schema_grouping(self) -> bool:
        return self.options.group_by_schema

    def arrange(self, properties: List[ParsedProperty],
                entity: Optional[ParsedEntity]) -> List[ParsedProperty]:
        is_array = entity is not None and entity.type.endswith("-array")
        return self._arrange(properties, is_array)

    def arrange_nested(self, parent: ParsedProperty) -> List[ParsedProperty]:
        children = parent.nested_properties
        ordered = self.pin_spreads(list(children), lambda regular: self._arrange(regular, parent.container == "[]"))
        return [self._sort_nested(child) for child in ordered]

    def _arrange(self, properties: List[ParsedProperty], is_array: bool) -> List[ParsedProperty]:
        if is_array:
            if self.options.preserve_array_order:
                return properties
            return sorted(properties, key=cmp_to_key(self._compare_values))
        if not self.options.sort_object_keys:
            return properties

        if self.custom_keys:
            rank = {}
            for index, key in enumerate(self.custom_keys):
                rank.setdefault(key, index)
            listed = sorted((p for p in properties if p.name in rank), key=lambda p: rank[p.name])
            rest = [p for p in properties if p.name not in rank]
            return listed + self._remaining(rest)
        return self._remaining(properties)

    def _remaining(self, properties: List[ParsedProperty]) -> List[ParsedProperty]:
        if not self.schema_grouping:
            return self.sort_group(properties)
        buckets: Dict[str, List[ParsedProperty]] = {name: [] for name in SCHEMA_BUCKETS}
        buckets["nested"] = []
        buckets["other"] = []
        for prop in properties:
            bucket = next((name for name, keys in SCHEMA_BUCKETS.items() if prop.name in keys), None)
            if bucket is None:
                bucket = "nested" if is_complex(prop) else "other"
            buckets[bucket].append(prop)
        return [prop for bucket in buckets.values() for prop in self.sort_group(bucket)]

    def _compare_values(self, a: ParsedProperty, b: ParsedProperty) -> int:
        return self.compare_names(self._value_key(a), self._value_key(b))

    def _value_key(self, prop: ParsedProperty) -> str:
        return prop.full_text.strip() if prop.full_text else str(prop.value)


class YAMLPropertySorter(JSONPropertySorter):

    @property
    def custom_keys(self) -> List[str]:
        return self.options.yaml_custom_key_order

    @property
    def schema_grouping(self) -> bool:
        return self.options.yaml_group_by_schema

    def _arrange(self, properties: List[ParsedProperty], is_array: bool) -> List[ParsedProperty]:
        ordered = super()._arrange(properties, is_array)
        if self.options.preserve_anchors_and_aliases:
            ordered = self._anchors_first(ordered)
        return ordered

    def _value_key(self, prop: ParsedProperty) -> str:
        text = prop.full_text.strip()
        return text[1:].strip() if text.startswith("-") else text

    def _anchors_first(self, properties: List[ParsedProperty]) -> List[ParsedProperty]:
        """Moves an anchor's entry up to the first entry that aliases it."""
        ordered = list(properties)
        for _ in range(len(ordered) * len(ordered)):
            moved = False
            for i, prop in enumerate(ordered):
                for alias in ALIAS_RE.findall(prop.full_text):
                    owner = next((j for j in range(i + 1, len(ordered))
                                  if alias in ANCHOR_RE.findall(ordered[j].full_text)), None)
                    if owner is not None:
                        logger.debug(f"Keeping anchor '&{alias}' ahead of '{prop.name}'")
                        ordered.insert(i, ordered.pop(owner))
                        moved = True
                        break
                if moved:
                    break
            if not moved:
                break
        return ordered

#!/usr/bin/env python3
"""
PROPSORT GO SORTER - Struct Fields
----------------------------------
Embedded fields lead (group_embedded_fields), then each group splits
into exported and unexported fields (group_by_visibility) and is
ordered by the sort_struct_fields strategy:

  alphabetical   the generic comparator chain
  by-type        type text, then name
  by-size        approximate 64-bit size, unknown types last
  preserve-tags  fields grouped by the set of tag keys they carry
                 ('db+json', 'json+xml'), untagged fields last

Author: PropSort Team
Date: 2026-10-18
"""

import re
from functools import cmp_to_key
from typing import Dict, List, Optional

from propsort.core.models import ParsedEntity, ParsedProperty
from propsort.sorting.base import PropertySorter, partition

TYPE_SIZES = {
    "bool": 1, "byte": 1, "int8": 1, "uint8": 1,
    "int16": 2, "uint16": 2,
    "rune": 4, "int32": 4, "uint32": 4, "float32": 4,
    "int64": 8, "uint64": 8, "int": 8, "uint": 8, "uintptr": 8, "float64": 8, "complex64": 8,
    "complex128": 16, "string": 16, "interface{}": 16, "any": 16, "error": 16,
}
POINTER_SIZE = 8
SLICE_SIZE = 24
QUALIFIED_SIZE = 999

TAG_KEYS = ("json", "db", "xml", "gorm", "validate")
ARRAY_RE = re.compile(r"\[(\d+)\](.+)")
QUALIFIED_RE = re.compile(r"\w+\.\w+")


def type_size(type_text: str) -> int:
    clean = " ".join(type_text.split())
    if clean.startswith("*"):
        return POINTER_SIZE
    if clean.startswith("[]"):
        return SLICE_SIZE
    array = ARRAY_RE.fullmatch(clean)
    if array:
        return int(array.group(1)) * type_size(array.group(2))
    if clean.startswith(("map[", "func")) or "chan" in clean:
        return POINTER_SIZE
    base = re.sub(r"[\[\]*<>-]", "", clean).strip()
    if QUALIFIED_RE.fullmatch(base):
        return QUALIFIED_SIZE
    if base in TYPE_SIZES:
        return TYPE_SIZES[base]
    return 1000 + len(base)


def tag_pattern(struct_tags: Optional[str]) -> Optional[str]:
    """'json:"id" db:"id"' -> 'db+json'; None when no known key is present."""
    if not struct_tags:
        return None
    keys = sorted(key for key in TAG_KEYS if re.search(rf'(?<![\w-]){key}:"', struct_tags))
    return "+".join(keys) or None


def is_exported(prop: ParsedProperty) -> bool:
    name = prop.name.lstrip("*")
    if prop.is_embedded:
        name = name.rsplit(".", 1)[-1]
    return name[:1].isupper()


class GoPropertySorter(PropertySorter):

    def arrange(self, properties: List[ParsedProperty],
                entity: Optional[ParsedEntity]) -> List[ParsedProperty]:
        if self.options.group_embedded_fields:
            embedded, regular = partition(properties, lambda p: p.is_embedded)
            return self._strategy(embedded) + self._strategy(regular)
        return self._strategy(properties)

    def _strategy(self, fields: List[ParsedProperty]) -> List[ParsedProperty]:
        if self.options.sort_struct_fields == "preserve-tags":
            groups: Dict[str, List[ParsedProperty]] = {}
            untagged: List[ParsedProperty] = []
            for field in fields:
                pattern = tag_pattern(field.struct_tags)
                if pattern is None:
                    untagged.append(field)
                else:
                    groups.setdefault(pattern, []).append(field)
            ordered: List[ParsedProperty] = []
            for pattern in sorted(groups):
                ordered.extend(self._visible(groups[pattern]))
            return ordered + self._visible(untagged)
        return self._visible(fields)

    def _visible(self, fields: List[ParsedProperty]) -> List[ParsedProperty]:
        if self.options.group_by_visibility:
            exported, unexported = partition(fields, is_exported)
            return self._order(exported) + self._order(unexported)
        return self._order(fields)

    def _order(self, fields: List[ParsedProperty]) -> List[ParsedProperty]:
        strategy = self.options.sort_struct_fields
        if strategy == "by-type":
            return sorted(fields, key=cmp_to_key(self._compare_type))
        if strategy == "by-size":
            return sorted(fields, key=cmp_to_key(self._compare_size))
        return self.sort_group(fields)

    def _compare_type(self, a: ParsedProperty, b: ParsedProperty) -> int:
        a_type, b_type = str(a.value).lower(), str(b.value).lower()
        if a_type != b_type:
            result = -1 if a_type < b_type else 1
            return -result if self.options.descending else result
        return self.compare_names(a.name, b.name)

    def _compare_size(self, a: ParsedProperty, b: ParsedProperty) -> int:
        a_size, b_size = type_size(str(a.value)), type_size(str(b.value))
        if a_size != b_size:
            result = -1 if a_size < b_size else 1
            return -result if self.options.descending else result
        return self.compare_names(a.name, b.name)

#!/usr/bin/env python3
"""
PROPSORT TYPESCRIPT SORTER
--------------------------
Interfaces, type literals and object literals sort with the generic
comparator chain. Object members whose value is a method chain
(`query.where(...).limit(...)`) usually depend on evaluation order, so
with preserve_method_chaining they are pinned first in source order and
only the remaining members are sorted.

Author: PropSort Team
Date: 2026-10-18
"""

import re
from typing import List, Optional

from propsort.core.models import ParsedEntity, ParsedProperty
from propsort.sorting.base import PropertySorter, partition

_STRING_RE = re.compile(r"'[^'\n]*'|\"[^\"\n]*\"|`[^`]*`")
_COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)

CHAIN_PATTERNS = (
    re.compile(r"\.\w+\([^)]*\)\s*\.\w+\([^)]*\)"),   # .a().b()
    re.compile(r"\.\w+\([^)]*\)\s*\.\w+"),             # .a().b
    re.compile(r"\w+\([^)]*\)\s*\.\w+\([^)]*\)"),      # a().b()
)


def has_method_chain(value) -> bool:
    if not value or not isinstance(value, str):
        return False
    clean = _COMMENT_RE.sub("", _STRING_RE.sub('""', value))
    return any(pattern.search(clean) for pattern in CHAIN_PATTERNS)


class TypeScriptPropertySorter(PropertySorter):

    def arrange(self, properties: List[ParsedProperty],
                entity: Optional[ParsedEntity]) -> List[ParsedProperty]:
        in_type = entity is not None and entity.type in ("interface", "type")
        if self.options.preserve_method_chaining and not in_type:
            chained, rest = partition(properties, lambda p: has_method_chain(p.value))
            if chained:
                return chained + self.sort_group(rest)
        return self.sort_group(properties)

#!/usr/bin/env python3
"""
PROPSORT JSON RECONSTRUCTOR
---------------------------
In JSON the comma belongs to the slot, not to the member: the member
dealt into slot N takes the separator the original slot N had, so
commas (and a trailing comma, if the file uses them) stay exactly
where they were.

Author: PropSort Team
Date: 2026-10-18
"""

from typing import List

from propsort.core.models import ParsedProperty
from propsort.rendering.base import Reconstructor
from propsort.rendering.formatting import key_value
from propsort.sorting.jsonc import is_complex


class JSONReconstructor(Reconstructor):
    default_separator = ","
    positional_separators = True
    comma_policy = True

    def nested_kind(self, kind: str, parent: ParsedProperty) -> str:
        return "json-array" if parent.container == "[]" else "json-object"

    def group_of(self, prop: ParsedProperty) -> str:
        return "nested" if is_complex(prop) else "scalar"

    def name_width(self, members: List[ParsedProperty]) -> int:
        return max((len(p.name) + 2 for p in members), default=0)

    def synth_member(self, prop: ParsedProperty, width: int) -> str:
        # Array elements are their own value
        if prop.full_text == prop.value:
            return prop.full_text
        return key_value(f'"{prop.name}"', prop.value, self.options, width)

#!/usr/bin/env python3
"""
PROPSORT GO RECONSTRUCTOR
-------------------------
Fields are separated by line breaks. In preserving mode each field line
moves whole, so gofmt's column alignment survives; synthesized fields
are laid out as `Name Type `tag`` and, with property_spacing 'aligned',
padded so the types line up in one column.

Author: PropSort Team
Date: 2026-10-18
"""

from typing import List

from propsort.core.models import ParsedProperty
from propsort.rendering.base import Reconstructor
from propsort.sorting.golang import is_exported


class GoReconstructor(Reconstructor):
    default_separator = ""

    def group_of(self, prop: ParsedProperty) -> str:
        if prop.is_embedded:
            return "embedded"
        return "exported" if is_exported(prop) else "unexported"

    def name_width(self, members: List[ParsedProperty]) -> int:
        return max((len(p.name) for p in members if self._named(p)), default=0)

    def synth_member(self, prop: ParsedProperty, width: int) -> str:
        if not self._named(prop):
            return prop.full_text
        aligned = self.options.property_spacing == "aligned"
        name = prop.name.ljust(width) if aligned else prop.name
        field = f"{name} {prop.value}"
        if prop.struct_tags is not None:
            field += f" `{prop.struct_tags}`"
        return field

    @staticmethod
    def _named(prop: ParsedProperty) -> bool:
        return not prop.is_embedded and prop.member_kind == "property" and "\n" not in str(prop.value)

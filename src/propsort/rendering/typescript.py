#!/usr/bin/env python3
"""
PROPSORT TYPESCRIPT RECONSTRUCTOR
---------------------------------
Interfaces and type literals separate members with ';', object
literals with ','. trailing_commas governs the last member.

Author: PropSort Team
Date: 2026-10-18
"""

from typing import List

from propsort.core.models import ParsedProperty
from propsort.rendering.base import Reconstructor
from propsort.rendering.formatting import key_value
from propsort.sorting.base import PropertySorter


class TypeScriptReconstructor(Reconstructor):
    comma_policy = True

    def separator_for(self, kind: str) -> str:
        return "," if kind == "object" else ";"

    def group_of(self, prop: ParsedProperty) -> str:
        return PropertySorter.type_group(prop)

    def name_width(self, members: List[ParsedProperty]) -> int:
        return max((len(self._label(p)) for p in members if self._plain(p)), default=0)

    def synth_member(self, prop: ParsedProperty, width: int) -> str:
        if not self._plain(prop):
            return prop.full_text
        return key_value(self._label(prop), prop.value, self.options, width)

    @staticmethod
    def _label(prop: ParsedProperty) -> str:
        return prop.name + ("?" if prop.optional else "")

    @staticmethod
    def _plain(prop: ParsedProperty) -> bool:
        """A 'name: value' member that can be re-typed safely."""
        return (prop.member_kind == "property" and not prop.is_spread
                and prop.full_text.strip() != prop.name and bool(str(prop.value)))

#!/usr/bin/env python3
"""
PROPSORT CSS SORTER - Declarations & Keyframes
----------------------------------------------
Layered grouping for CSS, SCSS, SASS and LESS declarations:

  1. group_variables        '--custom' properties first, as written
  2. group_by_category      fixed category buckets, each kept as written
                            (no alphabetical pass)
  3. sort_by_importance     '!important' declarations first
  4. group_vendor_prefixes  -webkit-, -moz-, -ms-, -o-, other prefixes,
                            then unprefixed

Each innermost group is sorted with the generic comparator chain.
Keyframe steps only move with sort_keyframes, by percentage.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from typing import Dict, List, Optional

from propsort.core.models import ParsedEntity, ParsedProperty
from propsort.sorting.base import PropertySorter, partition

logger = logging.getLogger("propsort.sorting.css")

# z-index belongs to no bucket, so it trails every category; color is
# typography. Both deliberately differ from the usual positioning and
# color groupings.
PROPERTY_CATEGORIES = {
    "positioning": ("position", "top", "right", "bottom", "left", "inset"),
    "display": ("display", "visibility", "opacity", "overflow", "overflow-x", "overflow-y"),
    "flexbox": ("flex", "flex-direction", "flex-wrap", "flex-flow", "justify-content", "align-items",
                "align-content", "align-self", "order", "flex-grow", "flex-shrink", "flex-basis"),
    "grid": ("grid", "grid-template", "grid-template-rows", "grid-template-columns", "grid-template-areas",
             "grid-gap", "grid-row-gap", "grid-column-gap"),
    "boxModel": ("width", "height", "min-width", "min-height", "max-width", "max-height",
                 "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
                 "padding", "padding-top", "padding-right", "padding-bottom", "padding-left"),
    "border": ("border", "border-top", "border-right", "border-bottom", "border-left",
               "border-width", "border-style", "border-color", "border-radius"),
    "background": ("background", "background-color", "background-image", "background-repeat",
                   "background-position", "background-size", "background-attachment"),
    "typography": ("color", "font", "font-family", "font-size", "font-weight", "font-style", "line-height",
                   "text-align", "text-decoration", "text-transform", "letter-spacing", "word-spacing"),
    "animation": ("animation", "animation-name", "animation-duration", "animation-timing-function",
                  "animation-delay", "animation-iteration-count", "animation-direction",
                  "animation-fill-mode", "animation-play-state"),
    "transition": ("transition", "transition-property", "transition-duration",
                   "transition-timing-function", "transition-delay"),
    "transform": ("transform", "transform-origin", "transform-style", "perspective", "perspective-origin"),
}
CATEGORY_OF = {name: category for category, names in PROPERTY_CATEGORIES.items() for name in names}

VENDOR_ORDER = ("-webkit-", "-moz-", "-ms-", "-o-")

STEP_RE = re.compile(r"(\d+(?:\.\d+)?)%")


def category_of(name: str) -> str:
    return CATEGORY_OF.get(name.lower(), "uncategorized")


def keyframe_position(name: str) -> float:
    """Percentage of a keyframe step; the first selector of a list decides."""
    first = name.split(",")[0].strip().lower()
    if first == "from":
        return 0.0
    if first == "to":
        return 100.0
    match = STEP_RE.fullmatch(first)
    return float(match.group(1)) if match else float("inf")


class CSSPropertySorter(PropertySorter):

    def arrange(self, properties: List[ParsedProperty],
                entity: Optional[ParsedEntity]) -> List[ParsedProperty]:
        if entity is not None and entity.type == "css-keyframe" and properties[0].nested_properties is not None:
            return self._arrange_steps(properties)

        variables: List[ParsedProperty] = []
        rest = properties
        if self.options.group_variables:
            variables, rest = partition(properties, lambda p: p.name.startswith("--"))

        if self.options.group_by_category:
            return variables + self._by_category(rest)
        return variables + self._by_importance(rest)

    def _arrange_steps(self, steps: List[ParsedProperty]) -> List[ParsedProperty]:
        if not self.options.sort_keyframes:
            return steps
        ordered = sorted(steps, key=lambda s: keyframe_position(s.name))
        if self.options.descending:
            ordered.reverse()
        logger.debug(f"Keyframe steps ordered: {[s.name for s in ordered]}")
        return ordered

    def _by_category(self, properties: List[ParsedProperty]) -> List[ParsedProperty]:
        buckets: Dict[str, List[ParsedProperty]] = {name: [] for name in PROPERTY_CATEGORIES}
        buckets["uncategorized"] = []
        for prop in properties:
            buckets[category_of(prop.name)].append(prop)
        return [prop for bucket in buckets.values() for prop in bucket]

    def _by_importance(self, properties: List[ParsedProperty]) -> List[ParsedProperty]:
        if not self.options.sort_by_importance:
            return self._by_vendor(properties)
        important, normal = partition(properties, lambda p: p.important)
        return self._by_vendor(important) + self._by_vendor(normal)

    def _by_vendor(self, properties: List[ParsedProperty]) -> List[ParsedProperty]:
        if not self.options.group_vendor_prefixes:
            return self.sort_group(properties)
        groups: Dict[str, List[ParsedProperty]] = {prefix: [] for prefix in VENDOR_ORDER}
        unprefixed: List[ParsedProperty] = []
        for prop in properties:
            if prop.vendor_prefix:
                groups.setdefault(prop.vendor_prefix, []).append(prop)
            else:
                unprefixed.append(prop)
        ordered: List[ParsedProperty] = []
        for group in list(groups.values()) + [unprefixed]:
            ordered.extend(self.sort_group(group))
        return ordered

#!/usr/bin/env python3
"""
PROPSORT CSS RECONSTRUCTOR
--------------------------
Declarations end in ';' except in SASS, which has neither semicolons
nor braces. Plain CSS only knows block comments, so restyled comments
fall back to '/* */' there.

Author: PropSort Team
Date: 2026-10-18
"""

from propsort.core.models import ParsedProperty
from propsort.core.options import SortOptions
from propsort.rendering.base import Reconstructor
from propsort.rendering.formatting import CommentSyntax, key_value
from propsort.sorting.css import category_of

CSS_SYNTAX = CommentSyntax(line=None)
SCSS_SYNTAX = CommentSyntax(line="//")


class CSSReconstructor(Reconstructor):
    error_format = "/* Error reconstructing {name}: {error} */"

    def __init__(self, options: SortOptions = None):
        super().__init__(options)
        file_type = self.options.file_type
        self.syntax = CSS_SYNTAX if file_type == "css" else SCSS_SYNTAX
        if file_type == "sass":
            self.default_separator = ""
            self.closing_break = False

    def group_of(self, prop: ParsedProperty) -> str:
        return category_of(prop.name)

    def synth_member(self, prop: ParsedProperty, width: int) -> str:
        if prop.nested_properties is not None or not prop.value:
            return prop.full_text
        return key_value(prop.name, prop.value, self.options, width)

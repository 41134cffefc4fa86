#!/usr/bin/env python3
"""
PROPSORT COMPONENT REGISTRY
---------------------------
Maps a file type onto its parser, sorter and reconstructor. The three
tables are keyed by language family so dialects (scss, jsonc, yml, ...)
share one implementation and only differ through options.file_type.

Author: PropSort Team
Date: 2026-10-18
"""

from propsort.core.errors import PropSortError
from propsort.core.options import SortOptions
from propsort.parsing.css import CssParser
from propsort.parsing.golang import GoParser
from propsort.parsing.jsonc import JsonParser
from propsort.parsing.sass import SassParser
from propsort.parsing.typescript import TypeScriptParser
from propsort.parsing.yamldoc import YamlParser
from propsort.rendering.base import Reconstructor
from propsort.rendering.css import CSSReconstructor
from propsort.rendering.golang import GoReconstructor
from propsort.rendering.jsonc import JSONReconstructor
from propsort.rendering.typescript import TypeScriptReconstructor
from propsort.rendering.yamldoc import YAMLReconstructor
from propsort.sorting.base import PropertySorter
from propsort.sorting.css import CSSPropertySorter
from propsort.sorting.golang import GoPropertySorter
from propsort.sorting.jsonc import JSONPropertySorter, YAMLPropertySorter
from propsort.sorting.typescript import TypeScriptPropertySorter

PARSERS = {
    "typescript": TypeScriptParser,
    "css": CssParser,
    "go": GoParser,
    "json": JsonParser,
    "yaml": YamlParser,
}

SORTERS = {
    "typescript": TypeScriptPropertySorter,
    "css": CSSPropertySorter,
    "go": GoPropertySorter,
    "json": JSONPropertySorter,
    "yaml": YAMLPropertySorter,
}

RECONSTRUCTORS = {
    "typescript": TypeScriptReconstructor,
    "css": CSSReconstructor,
    "go": GoReconstructor,
    "json": JSONReconstructor,
    "yaml": YAMLReconstructor,
}


def get_parser(options: SortOptions):
    # SASS is indentation based; it is rewritten to braces before the CSS scan
    if options.file_type == "sass":
        return SassParser(options, options.file_type)
    parser_cls = PARSERS.get(options.language)
    if parser_cls is None:
        raise PropSortError(f"No parser registered for {options.file_type}")
    return parser_cls(options, options.file_type)


def get_sorter(options: SortOptions) -> PropertySorter:
    return SORTERS.get(options.language, PropertySorter)(options)


def get_reconstructor(options: SortOptions) -> Reconstructor:
    reconstructor_cls = RECONSTRUCTORS.get(options.language)
    if reconstructor_cls is None:
        raise PropSortError(f"No reconstructor registered for {options.file_type}")
    return reconstructor_cls(options)

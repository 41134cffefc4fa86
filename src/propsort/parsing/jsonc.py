#!/usr/bin/env python3
"""
PROPSORT JSON PARSER - JSON & JSONC Documents
---------------------------------------------
Recursive descent over the masked text. The root object or array is the
single entity 'root'; nested containers become nested_properties, and
array elements are properties named by their index.

Comments and trailing commas are tolerated for both file types, so a
hand-edited '.json' settings file parses the same way as '.jsonc'.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from typing import List, Optional, Tuple

from propsort.core.errors import ParseError
from propsort.core.models import ParsedEntity, ParsedProperty, ParseResult, PropertyComment
from propsort.core.options import SortOptions
from propsort.parsing.comments import (
    take_dangling, take_inside, take_leading, take_trailing, comments_end,
    trailing_source,
)
from propsort.parsing.context import ParseContext
from propsort.parsing.lexer import JSON_PROFILE, matching_close

logger = logging.getLogger("propsort.parsing.json")

NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
LITERAL_RE = re.compile(r"true|false|null")


class JsonParser:
    """Stateless between calls."""

    def __init__(self, options: Optional[SortOptions] = None, file_type: str = "json"):
        self.options = options or SortOptions(file_type=file_type)
        self.file_type = file_type

    def parse(self, source_code: str, file_name: Optional[str] = None) -> ParseResult:
        result = ParseResult(source_code=source_code, file_type=self.file_type)
        try:
            ctx = ParseContext.build(source_code, JSON_PROFILE, self.file_type, self.options)
            entity = self._parse_root(ctx)
            if entity is not None:
                result.entities.append(entity)
        except ParseError as e:
            result.errors.append(f"JSON parsing error: {e} at line {e.line}")
        except Exception as e:
            logger.error(f"JSON parser failed on {file_name or '<text>'}: {e}")
            result.errors.append(f"JSON parsing error: {e}")
        return result

    # --- PHASE 1: Root ---

    def _parse_root(self, ctx: ParseContext) -> Optional[ParsedEntity]:
        start = ctx.next_code(0)
        if start >= len(ctx.masked):
            return None
        opener = ctx.masked[start]
        if opener not in "{[":
            raise ParseError(f"Expected '{{' or '[' but found '{opener}'", line=ctx.line_at(start))

        end = self._value_end(ctx, start)
        rest = ctx.next_code(end)
        if rest < len(ctx.masked):
            raise ParseError(f"Unexpected '{ctx.masked[rest]}' after the root value", line=ctx.line_at(rest))

        close = end - 1
        properties, dangling = self._parse_container(ctx, start, close)
        logger.debug(f"JSON root {opener}{ctx.masked[close]} with {len(properties)} member(s)")
        return ParsedEntity(
            type="json-object" if opener == "{" else "json-array",
            name="root",
            properties=properties,
            start_line=ctx.line_at(start),
            end_line=ctx.line_at(close),
            original_text=ctx.source[start:end],
            span=ctx.span(start, end),
            body=ctx.span(start + 1, close),
            header=opener,
            footer=ctx.source[close],
            indent=self._member_indent(ctx, properties),
            base_indent=ctx.indent_of(start),
            inline="\n" not in ctx.source[start:end],
            dangling_comments=dangling,
            file_type=self.file_type,
        )

    # --- PHASE 2: Values ---

    def _value_end(self, ctx: ParseContext, at: int) -> int:
        """Validates the value starting at `at` and returns the offset past it."""
        masked = ctx.masked
        ch = masked[at:at + 1]
        if ch in ("{", "["):
            close = matching_close(masked, at, ("{}", "[]"))
            if close < 0:
                raise ParseError(f"Unclosed '{ch}'", line=ctx.line_at(at))
            # Members are validated while the container is split
            self._members(ctx, at, close)
            return close + 1
        if ch == '"':
            end = masked.find('"', at + 1)
            if end < 0 or "\n" in masked[at:end]:
                raise ParseError("Unterminated string", line=ctx.line_at(at))
            return end + 1
        match = NUMBER_RE.match(masked, at) or LITERAL_RE.match(masked, at)
        if match:
            return match.end()
        token = masked[at:at + 10].split()[0] if masked[at:at + 10].strip() else "end of input"
        raise ParseError(f"Unexpected token '{token}'", line=ctx.line_at(at))

    def _members(self, ctx: ParseContext, open_at: int, close_at: int) -> List[Tuple[int, int, int, int, str, int]]:
        """
        (start, key_end, value_at, value_end, separator, separator offset)
        per member. key_end == start for array elements.
        """
        masked = ctx.masked
        is_object = masked[open_at] == "{"
        members = []
        i = ctx.next_code(open_at + 1, close_at)
        while i < close_at:
            start = i
            key_end = start
            if is_object:
                if masked[i] != '"':
                    raise ParseError(f"Expected a property name but found '{masked[i]}'", line=ctx.line_at(i))
                key_end = self._value_end(ctx, i)
                i = ctx.next_code(key_end, close_at)
                if masked[i:i + 1] != ":":
                    raise ParseError("Expected ':' after property name", line=ctx.line_at(i))
                i = ctx.next_code(i + 1, close_at)
            value_at = i
            if value_at >= close_at:
                raise ParseError("Missing value", line=ctx.line_at(value_at))
            value_end = self._value_end(ctx, value_at)
            i = ctx.next_code(value_end, close_at)
            if i < close_at and masked[i] == ",":
                members.append((start, key_end, value_at, value_end, ",", i))
                i = ctx.next_code(i + 1, close_at)
            elif i < close_at:
                raise ParseError(f"Expected ',' but found '{masked[i]}'", line=ctx.line_at(i))
            else:
                members.append((start, key_end, value_at, value_end, "", -1))
        return members

    def _parse_container(self, ctx: ParseContext, open_at: int,
                         close_at: int) -> Tuple[List[ParsedProperty], List[PropertyComment]]:
        source = ctx.source
        is_object = ctx.masked[open_at] == "{"
        properties: List[ParsedProperty] = []
        floor = open_at + 1
        for index, (start, key_end, value_at, value_end, punct, punct_at) in enumerate(
                self._members(ctx, open_at, close_at)):
            after = punct_at + 1 if punct else value_end
            leading = take_leading(ctx, start, floor)
            take_inside(ctx, start, value_at)
            prop = ParsedProperty(
                name=source[start + 1:key_end - 1] if is_object else str(index),
                value=source[value_at:value_end],
                comments=leading,
                line=ctx.line_at(start),
                full_text=source[start:value_end],
                trailing_punctuation=punct,
                span=ctx.span(start, value_end),
            )
            opener = ctx.masked[value_at]
            if opener in "{[":
                nested, dangling = self._parse_container(ctx, value_at, value_end - 1)
                prop.nested_properties = nested
                prop.dangling_comments = dangling
                prop.has_nested_object = True
                prop.container = "{}" if opener == "{" else "[]"
                prop.nested_inline = "\n" not in source[value_at:value_end]
                prop.body = ctx.span(value_at + 1, value_end - 1)
            else:
                take_inside(ctx, value_at, value_end)
            trailing = []
            if punct:
                trailing.extend(take_inside(ctx, value_end, punct_at))
            trailing.extend(take_trailing(ctx, after, close_at))
            prop.trailing_comments = trailing
            prop.trailing_text = trailing_source(source, after, trailing)
            prop.unit = ctx.span(leading[0].offset if leading else start, comments_end(trailing, after))
            properties.append(prop)
            floor = comments_end(trailing, after)
        return properties, take_dangling(ctx, open_at + 1, close_at)

    def _member_indent(self, ctx: ParseContext, properties: List[ParsedProperty]) -> str:
        for prop in properties:
            if ctx.starts_line(prop.span.start, verbatim=True):
                return ctx.indent_of(prop.span.start)
        return ""

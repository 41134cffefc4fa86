#!/usr/bin/env python3
"""
PROPSORT GO PARSER - Struct Declarations
----------------------------------------
Extracts `type X struct { ... }` declarations, including the ones that
live inside a `type ( ... )` group. Fields are read line by line from
the masked text:

    Name, Alias string `json:"name"`   // named (possibly several names)
    *pkg.Base                          // embedded
    Inner struct { ... }               // anonymous struct, parsed recursively

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from typing import List, Optional, Tuple

from propsort.core.models import ParsedEntity, ParsedProperty, ParseResult, PropertyComment
from propsort.core.options import SortOptions
from propsort.parsing.comments import (
    take_dangling, take_inside, take_leading, take_trailing, comments_end,
    trailing_source,
)
from propsort.parsing.context import ParseContext
from propsort.parsing.lexer import GO_PROFILE, matching_close

logger = logging.getLogger("propsort.parsing.go")

STRUCT_RE = re.compile(r"(?<![\w.])type\s+(?P<name>[A-Za-z_]\w*)(?:\s*\[[^\]]*\])?\s+struct\s*\{")
TYPE_GROUP_RE = re.compile(r"(?<![\w.])type\s*\(")
GROUP_STRUCT_RE = re.compile(r"(?m)^[ \t]*(?P<name>[A-Za-z_]\w*)(?:\[[^\]]*\])?\s+struct\s*\{")
TAG_RE = re.compile(r"`[^`]*`\s*$")
NAMED_FIELD_RE = re.compile(r"(?s)(?P<names>[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)\s+(?P<type>\S.*)")
EMBEDDED_RE = re.compile(r"\*?[A-Za-z_][\w.]*(?:\[[^\]]*\])?")
ANON_STRUCT_RE = re.compile(r"(?:\*|\[\]|\[\d*\])*struct\s*\{")


class GoParser:
    """Stateless between calls."""

    def __init__(self, options: Optional[SortOptions] = None, file_type: str = "go"):
        self.options = options or SortOptions(file_type="go")
        self.file_type = file_type

    def parse(self, source_code: str, file_name: Optional[str] = None) -> ParseResult:
        result = ParseResult(source_code=source_code, file_type=self.file_type)
        try:
            ctx = ParseContext.build(source_code, GO_PROFILE, self.file_type, self.options)
            result.entities = self._extract_structs(ctx, result.errors)
        except Exception as e:
            logger.error(f"Go parser failed on {file_name or '<text>'}: {e}")
            result.errors.append(f"Go parsing error: {e}")
        logger.debug(f"Found {len(result.entities)} structs in {file_name or '<text>'}")
        return result

    # --- PHASE 1: Declarations ---

    def _declarations(self, ctx: ParseContext) -> List[Tuple[int, str, int]]:
        """(statement start, struct name, opening brace) in source order."""
        found = []
        for match in STRUCT_RE.finditer(ctx.masked):
            found.append((match.start(), match.group("name"), match.end() - 1))
        for group in TYPE_GROUP_RE.finditer(ctx.masked):
            close = matching_close(ctx.masked, group.end() - 1)
            if close < 0:
                continue
            pos = group.end()
            while True:
                match = GROUP_STRUCT_RE.search(ctx.masked, pos, close)
                if not match:
                    break
                brace = match.end() - 1
                found.append((ctx.next_code(match.start()), match.group("name"), brace))
                body_close = matching_close(ctx.masked, brace)
                pos = body_close + 1 if body_close > 0 else match.end()
        return sorted(found)

    def _extract_structs(self, ctx: ParseContext, errors: List[str]) -> List[ParsedEntity]:
        entities: List[ParsedEntity] = []
        floor = 0
        for start, name, brace in self._declarations(ctx):
            if start < floor:
                continue
            close = matching_close(ctx.masked, brace)
            if close < 0:
                errors.append(f"Go parsing error: Unclosed struct '{name}' at line {ctx.line_at(start)}")
                continue
            leading = take_leading(ctx, start, floor)
            properties, dangling = self._parse_fields(ctx, brace, close)
            span_start = leading[0].offset if leading else start
            entities.append(ParsedEntity(
                type="struct",
                name=name,
                properties=properties,
                start_line=ctx.line_at(span_start),
                end_line=ctx.line_at(close),
                leading_comments=leading,
                is_exported=name[:1].isupper(),
                original_text=ctx.source[span_start:close + 1],
                span=ctx.span(span_start, close + 1),
                body=ctx.span(brace + 1, close),
                header=ctx.source[start:brace + 1],
                footer="}",
                indent=self._member_indent(ctx, properties),
                base_indent=ctx.indent_of(start),
                inline="\n" not in ctx.source[brace:close],
                dangling_comments=dangling,
                file_type=self.file_type,
            ))
            floor = close + 1
        return entities

    # --- PHASE 2: Fields ---

    def _split_fields(self, ctx: ParseContext, start: int, end: int) -> List[Tuple[int, int, str, int]]:
        """(start, end, separator, separator offset) per field; newlines and ';' separate."""
        masked = ctx.masked
        fields = []
        depth = 0
        seg_start = None
        for i in range(start, end):
            ch = masked[i]
            if seg_start is None:
                if ch.isspace() or ch == ";":
                    continue
                seg_start = i
            if ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth -= 1
            elif depth == 0 and ch in ";\n":
                stop = ctx.prev_code(i, seg_start)
                if stop > seg_start:
                    fields.append((seg_start, stop, ";" if ch == ";" else "", i))
                seg_start = None
        if seg_start is not None:
            stop = ctx.prev_code(end, seg_start)
            if stop > seg_start:
                fields.append((seg_start, stop, "", -1))
        return fields

    def _parse_fields(self, ctx: ParseContext, brace: int,
                      close: int) -> Tuple[List[ParsedProperty], List[PropertyComment]]:
        properties: List[ParsedProperty] = []
        floor = brace + 1
        for start, end, punct, punct_at in self._split_fields(ctx, brace + 1, close):
            after = punct_at + 1 if punct else end
            leading = take_leading(ctx, start, floor)
            prop = self._parse_field(ctx, start, end)
            take_inside(ctx, start, end)
            trailing = take_trailing(ctx, after, close)
            prop.comments = leading
            prop.trailing_comments = trailing
            prop.trailing_text = trailing_source(ctx.source, after, trailing)
            prop.unit = ctx.span(leading[0].offset if leading else start, comments_end(trailing, after))
            prop.trailing_punctuation = punct
            properties.append(prop)
            floor = comments_end(trailing, after)
        return properties, take_dangling(ctx, brace + 1, close)

    def _parse_field(self, ctx: ParseContext, start: int, end: int) -> ParsedProperty:
        source, masked = ctx.source, ctx.masked
        prop = ParsedProperty(name="", line=ctx.line_at(start), full_text=source[start:end],
                              span=ctx.span(start, end))

        decl_end = end
        tag = TAG_RE.search(masked, start, end)
        if tag:
            decl_end = ctx.prev_code(tag.start(), start)
            prop.struct_tags = source[tag.start():end].strip()[1:-1]

        decl = masked[start:decl_end]
        if EMBEDDED_RE.fullmatch(decl):
            prop.name = source[start:decl_end]
            prop.value = prop.name
            prop.is_embedded = True
            return prop

        match = NAMED_FIELD_RE.fullmatch(decl)
        if not match:
            prop.name = " ".join(source[start:decl_end].split())
            prop.value = prop.name
            prop.member_kind = "signature"
            return prop

        prop.name = " ".join(source[start + match.start("names"):start + match.end("names")].split())
        type_at = start + match.start("type")
        prop.value = source[type_at:decl_end]
        anon = ANON_STRUCT_RE.match(masked, type_at, decl_end)
        if anon:
            inner_brace = anon.end() - 1
            inner_close = matching_close(masked, inner_brace)
            if inner_close == decl_end - 1:
                nested, dangling = self._parse_fields(ctx, inner_brace, inner_close)
                prop.nested_properties = nested
                prop.dangling_comments = dangling
                prop.has_nested_object = True
                prop.container = "{}"
                prop.nested_inline = "\n" not in source[inner_brace:inner_close]
                prop.body = ctx.span(inner_brace + 1, inner_close)
        return prop

    def _member_indent(self, ctx: ParseContext, properties: List[ParsedProperty]) -> str:
        for prop in properties:
            if ctx.starts_line(prop.span.start, verbatim=True):
                return ctx.indent_of(prop.span.start)
        return ""

#!/usr/bin/env python3
"""
PROPSORT TYPESCRIPT PARSER - Interfaces, Types & Object Literals
----------------------------------------------------------------
Finds the sortable declarations of a TypeScript / JavaScript source by
scanning the masked text at statement boundaries:

    interface Foo<T> extends Bar { ... }
    type Foo = { ... };
    const foo: Foo = { ... };
    const foo = defineThing(name, { ... });
    export default { ... }

Each body is split into members at depth 0 and every member keeps its
verbatim text, its punctuation and the comments around it. Object
valued members are parsed recursively into nested_properties.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from propsort.core.models import ParsedEntity, ParsedProperty, ParseResult, PropertyComment
from propsort.core.options import SortOptions
from propsort.parsing.comments import (
    take_dangling, take_inside, take_leading, take_trailing, comments_end,
    trailing_source,
)
from propsort.parsing.context import ParseContext
from propsort.parsing.lexer import TYPESCRIPT_PROFILE, matching_close

logger = logging.getLogger("propsort.parsing.typescript")

_IDENT = r"[A-Za-z_$][\w$]*"
_NAME = rf"(?:{_IDENT}|\"[^\"\n]*\"|'[^'\n]*'|\d[\w.]*|#{_IDENT}|\[[^\]]*\])"

ENTITY_RE = re.compile(
    r"(?<![\w$.])(?:"
    r"(?P<default>export\s+default\s+)(?!(?:interface|class|function|async|abstract|enum)\b)(?=[{\w$])"
    r"|(?P<export>export\s+)?(?:default\s+)?(?:declare\s+)?"
    rf"(?:interface\s+(?P<iface>{_IDENT})"
    rf"|type\s+(?P<alias>{_IDENT})"
    rf"|(?:const|let|var)\s+(?P<var>{_IDENT}))"
    r")"
)
CALL_RE = re.compile(r"(?:new\s+)?[\w$.]+\s*(?:<[^>(]*>)?\s*\(")
TAIL_RE = re.compile(r"[ \t]*(?:(?:as|satisfies)[ \t]+[\w$.]+(?:<[^>\n]*>)?(?:\[\])*[ \t]*)?;?")

SPREAD_RE = re.compile(r"\.\.\.")
ACCESSOR_RE = re.compile(rf"(?:(?:static|public|private|protected)\s+)*(?P<kind>get|set)\s+(?P<name>{_NAME})\s*\(")
METHOD_RE = re.compile(
    rf"(?:(?:static|public|private|protected|readonly|abstract|async)\s+)*(?:\*\s*)?"
    rf"(?P<name>{_NAME})\s*(?P<opt>\?)?\s*(?:<[^>]*>)?\s*\("
)
PROPERTY_RE = re.compile(
    rf"(?:(?:readonly|static|declare|public|private|protected|[-+]readonly)\s+)*"
    rf"(?P<name>{_NAME})\s*(?P<opt>[?!])?\s*:"
)
SHORTHAND_RE = re.compile(_IDENT)
INDEX_SIGNATURE_RE = re.compile(r"\[[^\]]*(?::|\sin\s)[^\]]*\]")

# A member line ending in one of these continues on the next line
_CONTINUATION_TAIL = tuple("|&:=(<[,.?")
_CONTINUATION_HEAD = tuple("|&.=>?")


@dataclass
class Segment:
    """A member's text range inside a body, with its separator."""
    start: int
    end: int
    punct: str = ""
    punct_at: int = -1

    @property
    def after(self) -> int:
        return self.punct_at + 1 if self.punct else self.end


class TypeScriptParser:
    """
    Stateless between calls: every parse() builds its own ParseContext.
    """

    def __init__(self, options: Optional[SortOptions] = None, file_type: str = "typescript"):
        self.options = options or SortOptions(file_type=file_type)
        self.file_type = file_type
        self.label = "JavaScript" if file_type == "javascript" else "TypeScript"

    def parse(self, source_code: str, file_name: Optional[str] = None) -> ParseResult:
        result = ParseResult(source_code=source_code, file_type=self.file_type)
        try:
            ctx = ParseContext.build(source_code, TYPESCRIPT_PROFILE, self.file_type, self.options)
            result.entities = self._extract_entities(ctx, result.errors)
            self._check_balance(ctx, result.errors)
        except Exception as e:
            logger.error(f"{self.label} parser failed on {file_name or '<text>'}: {e}")
            result.errors.append(f"{self.label} parsing error: {e}")
        logger.debug(f"Found {len(result.entities)} entities in {file_name or '<text>'}")
        return result

    # --- PHASE 1: Declarations ---

    def _extract_entities(self, ctx: ParseContext, errors: List[str]) -> List[ParsedEntity]:
        entities: List[ParsedEntity] = []
        floor = 0
        pos = 0
        while True:
            match = ENTITY_RE.search(ctx.masked, pos)
            if not match:
                break
            if not self._at_statement_start(ctx, match.start()):
                pos = match.start() + 1
                continue

            entity = self._entity_at(ctx, match, floor, errors)
            if entity is None:
                pos = match.end()
                continue
            entities.append(entity)
            floor = pos = entity.span.end
        return entities

    def _at_statement_start(self, ctx: ParseContext, offset: int) -> bool:
        prev = ctx.prev_code(offset)
        if prev == 0:
            return True
        ch = ctx.masked[prev - 1]
        if ch in ";{}":
            return True
        # Automatic semicolon insertion: a newline ends the previous statement
        return "\n" in ctx.masked[prev:offset] and ch not in ".,=(+-*/&|?:[<!"

    def _entity_at(self, ctx: ParseContext, match, floor: int, errors: List[str]) -> Optional[ParsedEntity]:
        stmt_start = match.start()
        exported = bool(match.group("export") or match.group("default"))

        if match.group("iface"):
            kind, name, type_context = "interface", match.group("iface"), True
            open_at = self._interface_body(ctx, match.end())
            close_extra = None
        elif match.group("alias"):
            kind, name, type_context = "type", match.group("alias"), True
            open_at = self._alias_body(ctx, match.end())
            close_extra = None
        else:
            kind, type_context = "object", False
            name = match.group("var") or "default"
            value_at = match.end() if match.group("default") else self._initializer(ctx, match.end())
            if value_at < 0:
                return None
            open_at, close_extra = self._object_value(ctx, value_at)

        if open_at < 0:
            return None
        close_at = matching_close(ctx.masked, open_at)
        if close_at < 0:
            errors.append(f"{self.label} parsing error: Unclosed {kind} '{name}' at line {ctx.line_at(stmt_start)}")
            return None

        footer_end = close_at + 1
        if close_extra is not None:
            footer_end = close_extra + 1
        tail = TAIL_RE.match(ctx.masked, footer_end)
        if tail:
            footer_end = tail.end()

        leading = take_leading(ctx, stmt_start, floor)
        take_inside(ctx, stmt_start, open_at + 1)
        properties, dangling = self._parse_body(ctx, open_at, close_at, type_context)
        take_inside(ctx, close_at, footer_end)

        span_start = leading[0].offset if leading else stmt_start
        base_indent = ctx.indent_of(stmt_start)
        logger.debug(f"{kind} '{name}' lines {ctx.line_at(span_start)}-{ctx.line_at(footer_end - 1)}: "
                     f"{len(properties)} members")
        return ParsedEntity(
            type=kind,
            name=name,
            properties=properties,
            start_line=ctx.line_at(span_start),
            end_line=ctx.line_at(footer_end - 1),
            leading_comments=leading,
            is_exported=exported,
            original_text=ctx.source[span_start:footer_end],
            span=ctx.span(span_start, footer_end),
            body=ctx.span(open_at + 1, close_at),
            header=ctx.source[stmt_start:open_at + 1],
            footer=ctx.source[close_at:footer_end],
            indent=self._member_indent(ctx, properties, base_indent),
            base_indent=base_indent,
            inline="\n" not in ctx.source[open_at:close_at],
            dangling_comments=dangling,
            file_type=self.file_type,
        )

    def _interface_body(self, ctx: ParseContext, start: int) -> int:
        """Opening brace after 'interface Name<...> extends ...'."""
        # Object types inside generic parameters are skipped: A<T extends { x: 1 }> {
        masked = ctx.masked
        angle = paren = 0
        i = start
        while i < len(masked):
            ch = masked[i]
            if ch == "<":
                angle += 1
            elif ch == ">" and masked[i - 1] != "=":
                angle = max(0, angle - 1)
            elif ch == "(":
                paren += 1
            elif ch == ")":
                paren = max(0, paren - 1)
            elif ch == "{":
                if angle == 0 and paren == 0:
                    return i
                close = matching_close(masked, i)
                if close < 0:
                    return -1
                i = close
            elif ch in ";}" and angle == 0 and paren == 0:
                return -1
            i += 1
        return -1

    def _alias_body(self, ctx: ParseContext, start: int) -> int:
        """Opening brace of 'type Name<...> = {'; -1 for any other alias."""
        masked = ctx.masked
        angle = 0
        for i in range(start, len(masked)):
            ch = masked[i]
            if ch == "<":
                angle += 1
            elif ch == ">" and masked[i - 1] != "=":
                angle = max(0, angle - 1)
            elif ch == "=" and angle == 0 and masked[i + 1:i + 2] != ">":
                brace = ctx.next_code(i + 1)
                return brace if masked[brace:brace + 1] == "{" else -1
            elif ch in ";{}" and angle == 0:
                return -1
        return -1

    def _initializer(self, ctx: ParseContext, start: int) -> int:
        """Offset of the value after 'const name[: Type] ='; -1 when absent."""
        masked = ctx.masked
        i = ctx.next_code(start)
        if masked[i:i + 1] == "=" and masked[i + 1:i + 2] not in ("=", ">"):
            return ctx.next_code(i + 1)
        if masked[i:i + 1] != ":":
            return -1

        depth = 0
        i += 1
        while i < len(masked):
            ch = masked[i]
            if ch in "([{<":
                depth += 1
            elif ch in ")]}":
                depth -= 1
                if depth < 0:
                    return -1
            elif ch == ">" and masked[i - 1] != "=":
                depth = max(0, depth - 1)
            elif depth == 0:
                if ch == "=" and masked[i + 1:i + 2] not in ("=", ">"):
                    return ctx.next_code(i + 1)
                if ch == ";":
                    return -1
                if ch == "\n" and not self._continues(ctx, start, i, i):
                    return -1
            i += 1
        return -1

    def _object_value(self, ctx: ParseContext, value_at: int) -> Tuple[int, Optional[int]]:
        """
        Brace of an object initializer. For 'callee(..., { ... })' the
        first object argument is used and the call's closing paren is
        returned so the footer can keep the rest of the call verbatim.
        """
        masked = ctx.masked
        if masked[value_at:value_at + 1] == "{":
            return value_at, None
        call = CALL_RE.match(masked, value_at)
        if not call:
            return -1, None
        paren = call.end() - 1
        paren_close = matching_close(masked, paren)
        if paren_close < 0:
            return -1, None

        depth = 0
        expecting = True
        for i in range(paren + 1, paren_close):
            ch = masked[i]
            if ch.isspace():
                continue
            if depth == 0 and ch == "{" and expecting:
                return i, paren_close
            if ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth -= 1
            expecting = depth == 0 and ch == ","
        return -1, None

    # --- PHASE 2: Members ---

    def _parse_body(self, ctx: ParseContext, open_at: int, close_at: int,
                    type_context: bool) -> Tuple[List[ParsedProperty], List[PropertyComment]]:
        properties: List[ParsedProperty] = []
        floor = open_at + 1
        for segment in self._split_members(ctx, open_at + 1, close_at, type_context):
            leading = take_leading(ctx, segment.start, floor)
            prop = self._parse_member(ctx, segment, type_context)
            take_inside(ctx, segment.start, segment.end)
            trailing = []
            if segment.punct:
                trailing.extend(take_inside(ctx, segment.end, segment.punct_at))
            trailing.extend(take_trailing(ctx, segment.after, close_at))
            prop.comments = leading
            prop.trailing_comments = trailing
            prop.trailing_text = trailing_source(ctx.source, segment.after, trailing)
            prop.unit = ctx.span(leading[0].offset if leading else segment.start,
                                 comments_end(trailing, segment.after))
            properties.append(prop)
            floor = comments_end(trailing, segment.after)
        return properties, take_dangling(ctx, open_at + 1, close_at)

    def _split_members(self, ctx: ParseContext, start: int, end: int, type_context: bool) -> List[Segment]:
        masked = ctx.masked
        segments: List[Segment] = []
        depth = angle = 0
        seg_start = None
        i = start
        while i < end:
            ch = masked[i]
            if seg_start is None:
                if ch.isspace() or ch in ",;":
                    i += 1
                    continue
                seg_start = i

            if ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth -= 1
            elif type_context and ch == "<":
                angle += 1
            elif type_context and ch == ">" and angle > 0 and masked[i - 1] != "=":
                angle -= 1
            elif depth == 0 and angle == 0:
                if ch in ",;":
                    segments.append(Segment(seg_start, ctx.prev_code(i, seg_start), ch, i))
                    seg_start = None
                elif ch == "\n" and type_context:
                    seg_end = ctx.prev_code(i, seg_start)
                    if seg_end > seg_start and not self._continues(ctx, seg_start, seg_end, i):
                        segments.append(Segment(seg_start, seg_end))
                        seg_start = None
            i += 1

        if seg_start is not None:
            seg_end = ctx.prev_code(end, seg_start)
            if seg_end > seg_start:
                segments.append(Segment(seg_start, seg_end))
        return segments

    def _continues(self, ctx: ParseContext, start: int, end: int, newline_at: int) -> bool:
        """True when a type member goes on past the newline at newline_at."""
        text = ctx.masked[start:end].rstrip()
        if text.endswith("=>") or text.endswith(_CONTINUATION_TAIL):
            return True
        nxt = ctx.next_code(newline_at)
        return ctx.masked[nxt:nxt + 1] in _CONTINUATION_HEAD and ctx.masked[nxt:nxt + 1] != ""

    def _parse_member(self, ctx: ParseContext, segment: Segment, type_context: bool) -> ParsedProperty:
        source, masked = ctx.source, ctx.masked
        s, e = segment.start, segment.end
        text = masked[s:e]
        prop = ParsedProperty(
            name="",
            line=ctx.line_at(s),
            full_text=source[s:e],
            trailing_punctuation=segment.punct,
            span=ctx.span(s, e),
        )

        if SPREAD_RE.match(text):
            prop.name = " ".join(source[s:e].split())
            prop.value = source[s + 3:e].strip()
            prop.is_spread = True
            return prop

        match = ACCESSOR_RE.match(text)
        if match:
            prop.name = source[s + match.start("name"):s + match.end("name")]
            prop.member_kind = "getter" if match.group("kind") == "get" else "setter"
            prop.value = source[s + match.end() - 1:e].strip()
            return prop

        match = PROPERTY_RE.match(text)
        if match:
            prop.name = source[s + match.start("name"):s + match.end("name")]
            prop.optional = match.group("opt") == "?"
            if type_context and INDEX_SIGNATURE_RE.fullmatch(masked[s + match.start("name"):s + match.end("name")]):
                prop.member_kind = "signature"
            value_at = ctx.next_code(s + match.end(), e)
            prop.value = source[value_at:e]
            self._attach_nested(ctx, prop, value_at, e, type_context)
            return prop

        match = METHOD_RE.match(text)
        if match:
            prop.name = source[s + match.start("name"):s + match.end("name")]
            prop.optional = match.group("opt") == "?"
            prop.member_kind = "method"
            prop.value = source[s + match.end() - 1:e].strip()
            return prop

        if SHORTHAND_RE.fullmatch(text):
            prop.name = prop.value = source[s:e]
            return prop

        # Call signatures, construct signatures and anything unrecognised
        # travel as opaque members so no text is ever dropped
        prop.name = " ".join(source[s:e].split())
        prop.value = source[s:e]
        prop.member_kind = "signature"
        return prop

    def _attach_nested(self, ctx: ParseContext, prop: ParsedProperty, value_at: int, end: int,
                       type_context: bool):
        if ctx.masked[value_at:value_at + 1] != "{":
            return
        if matching_close(ctx.masked, value_at) != end - 1:
            return
        nested, dangling = self._parse_body(ctx, value_at, end - 1, type_context)
        prop.nested_properties = nested
        prop.dangling_comments = dangling
        prop.has_nested_object = True
        prop.container = "{}"
        prop.nested_inline = "\n" not in ctx.source[value_at:end]
        prop.body = ctx.span(value_at + 1, end - 1)

    # --- PHASE 3: Layout & Sanity ---

    def _member_indent(self, ctx: ParseContext, properties: List[ParsedProperty], base_indent: str) -> str:
        for prop in properties:
            if ctx.starts_line(prop.span.start, verbatim=True):
                return ctx.indent_of(prop.span.start)
        return ""

    def _check_balance(self, ctx: ParseContext, errors: List[str]):
        opened = ctx.masked.count("{")
        closed = ctx.masked.count("}")
        if opened != closed:
            errors.append(f"{self.label} parsing error: Unbalanced braces ({opened} opening, {closed} closing)")

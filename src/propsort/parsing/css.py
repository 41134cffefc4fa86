#!/usr/bin/env python3
"""
PROPSORT CSS PARSER - Rules, At-Rules & Keyframes
-------------------------------------------------
Brace-depth scanner for CSS, SCSS and LESS. Every block body is cut
into items (declarations, nested blocks, other statements) with
absolute offsets:

  * a block holding only declarations becomes one entity spanning its
    selector, braces and body
  * a block that mixes declarations with nested blocks or statements
    ('@include', '$var: 1;') yields one body-only entity per contiguous
    run of declarations, so no two entities ever overlap
  * '@keyframes' becomes a single entity whose properties are the
    keyframe steps, each carrying its own declarations

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from propsort.core.models import ParsedEntity, ParsedProperty, ParseResult, PropertyComment, SourceSpan
from propsort.core.options import SortOptions
from propsort.parsing.comments import take_dangling, take_inside, take_leading, take_trailing, comments_end
from propsort.parsing.context import ParseContext
from propsort.parsing.lexer import CSS_PROFILE, SCSS_PROFILE, matching_close

logger = logging.getLogger("propsort.parsing.css")

DECLARATION_RE = re.compile(r"(?P<name>--[\w-]+|-?[A-Za-z_][\w-]*)\s*:")
IMPORTANT_RE = re.compile(r"!\s*important\s*$", re.IGNORECASE)
VENDOR_RE = re.compile(r"^-(webkit|moz|ms|o)-")
OTHER_PREFIX_RE = re.compile(r"^-[a-z]+-")
KEYFRAMES_RE = re.compile(r"^@(?:-[a-z]+-)?keyframes\s+(?P<name>\S+)", re.IGNORECASE)
KEYFRAME_STEP_RE = re.compile(r"^(?:\d+(?:\.\d+)?%|from|to)\b", re.IGNORECASE)


def classify_selector(selector: str) -> str:
    """Entity type for a block prelude."""
    lowered = selector.strip().lower()
    if lowered.startswith("@media"):
        return "css-media"
    if KEYFRAMES_RE.match(lowered) or KEYFRAME_STEP_RE.match(lowered):
        return "css-keyframe"
    if lowered.startswith("@"):
        return "css-at-rule"
    return "css-rule"


def selector_specificity(selector: str) -> int:
    """IDs x100, classes / pseudo-classes / attributes x10, elements x1."""
    bare = re.sub(r"\[[^\]]*\]", "[", selector)
    ids = bare.count("#")
    classes = bare.count(".") + bare.count("[") + len(re.findall(r":+[\w-]", bare))
    elements = len(re.findall(r"(?:^|[\s>+~,(])[A-Za-z][\w-]*", bare))
    return ids * 100 + classes * 10 + elements


def vendor_prefix_of(name: str) -> Optional[str]:
    match = VENDOR_RE.match(name) or OTHER_PREFIX_RE.match(name)
    return match.group(0) if match else None


@dataclass
class Item:
    """One statement of a block body."""
    kind: str                 # 'decl', 'block' or 'statement'
    start: int
    end: int                  # End of the text, separator excluded
    punct: str = ""
    punct_at: int = -1
    open_at: int = -1         # Blocks only
    close_at: int = -1

    @property
    def after(self) -> int:
        if self.kind == "block":
            return self.close_at + 1
        return self.punct_at + 1 if self.punct else self.end


@dataclass
class CssDocument:
    """
    The scanned text and the source the entities must point into. For
    plain CSS both are the same; the SASS parser scans a braced rewrite
    and maps every offset back.
    """
    ctx: ParseContext
    original: str
    to_original: Callable[[int], int]
    mapped: bool = False

    def text(self, start: int, end: int) -> str:
        return self.original[self.to_original(start):self.to_original(end)]

    def span(self, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            start=self.to_original(start),
            end=self.to_original(end),
            start_line=self.ctx.line_at(start),
            end_line=self.ctx.line_at(max(start, end - 1)),
        )

    def comment(self, comment: PropertyComment) -> PropertyComment:
        return replace(comment, offset=self.to_original(comment.offset),
                       end_offset=self.to_original(comment.end_offset))


class CssParser:
    """
    Stateless between calls: every parse() builds its own document.
    """

    label = "CSS"
    trailing_skip = ""

    def __init__(self, options: Optional[SortOptions] = None, file_type: str = "css"):
        self.options = options or SortOptions(file_type=file_type)
        self.file_type = file_type

    def parse(self, source_code: str, file_name: Optional[str] = None) -> ParseResult:
        result = ParseResult(source_code=source_code, file_type=self.file_type)
        try:
            doc = self._document(source_code)
            floor = 0
            for item in self._scan_items(doc.ctx, 0, len(doc.ctx.masked), result.errors):
                if item.kind == "block":
                    self._process_block(doc, item, floor, None, result.entities)
                floor = item.after
            self._relocate_comments(doc, result.entities)
        except Exception as e:
            logger.error(f"{self.label} parser failed on {file_name or '<text>'}: {e}")
            result.errors.append(f"{self.label} parsing error: {e}")
        logger.debug(f"Found {len(result.entities)} rules in {file_name or '<text>'}")
        return result

    def _document(self, source_code: str) -> CssDocument:
        profile = CSS_PROFILE if self.file_type == "css" else SCSS_PROFILE
        ctx = ParseContext.build(source_code, profile, self.file_type, self.options)
        return CssDocument(ctx=ctx, original=source_code, to_original=lambda offset: offset)

    # --- PHASE 1: Statement Scanning ---

    def _scan_items(self, ctx: ParseContext, start: int, end: int, errors: List[str]) -> List[Item]:
        masked = ctx.masked
        items: List[Item] = []
        depth = 0
        st = None
        i = start
        while i < end:
            ch = masked[i]
            if st is None:
                if ch.isspace() or ch == ";":
                    i += 1
                    continue
                if ch == "}":
                    errors.append(f"{self.label} parsing error: Unexpected closing brace at line {ctx.line_at(i)}")
                    i += 1
                    continue
                st = i

            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth = max(0, depth - 1)
            elif ch == "{":
                close = matching_close(masked, i, ("{}",))
                if close < 0 or close >= end:
                    errors.append(f"{self.label} parsing error: Unclosed block at line {ctx.line_at(i)}")
                    st = None
                    break
                if depth == 0 and masked[i - 1:i] != "#":
                    items.append(Item("block", st, ctx.prev_code(i, st), open_at=i, close_at=close))
                    st = None
                # Interpolation '#{...}' stays part of the statement
                i = close + 1
                continue
            elif ch == "}":
                errors.append(f"{self.label} parsing error: Unexpected closing brace at line {ctx.line_at(i)}")
                st = None
            elif ch == ";" and depth == 0:
                items.append(self._statement(ctx, st, ctx.prev_code(i, st), ";", i))
                st = None
            i += 1

        if st is not None:
            stop = ctx.prev_code(end, st)
            if stop > st:
                items.append(self._statement(ctx, st, stop, "", -1))
        return items

    def _statement(self, ctx: ParseContext, start: int, end: int, punct: str, punct_at: int) -> Item:
        kind = "decl" if DECLARATION_RE.match(ctx.masked, start) and ctx.masked[start] not in "$@" else "statement"
        return Item(kind, start, end, punct, punct_at)

    # --- PHASE 2: Blocks ---

    def _process_block(self, doc: CssDocument, item: Item, floor: int, media: Optional[str],
                       entities: List[ParsedEntity]):
        ctx = doc.ctx
        selector = " ".join(doc.text(item.start, item.end).split())
        leading = take_leading(ctx, item.start, floor)
        take_inside(ctx, item.start, item.open_at)

        items = self._scan_items(ctx, item.open_at + 1, item.close_at, [])
        if KEYFRAMES_RE.match(selector) and items and all(it.kind == "block" for it in items):
            entities.append(self._keyframes(doc, item, selector, leading, items, media))
            return

        child_media = selector if selector.lower().startswith("@media") else media
        if all(it.kind == "decl" for it in items):
            properties = self._declarations(doc, items, item.open_at + 1, item.close_at)
            dangling = take_dangling(ctx, item.open_at + 1, item.close_at)
            if properties:
                entities.append(self._rule_entity(doc, item, selector, leading, items, properties,
                                                  dangling, child_media))
            return

        # Mixed body: runs of declarations between nested blocks and statements
        run: List[Item] = []
        inner_floor = item.open_at + 1
        run_floor = inner_floor
        for child in items:
            if child.kind == "decl":
                if not run:
                    run_floor = inner_floor
                run.append(child)
            else:
                if run:
                    entities.append(self._run_entity(doc, run, run_floor, selector, child_media))
                    run = []
                if child.kind == "block":
                    self._process_block(doc, child, inner_floor, child_media, entities)
            inner_floor = max(inner_floor, child.after)
        if run:
            entities.append(self._run_entity(doc, run, run_floor, selector, child_media))

    def _declarations(self, doc: CssDocument, items: List[Item], floor: int, limit: int) -> List[ParsedProperty]:
        ctx = doc.ctx
        properties: List[ParsedProperty] = []
        for it in items:
            leading = take_leading(ctx, it.start, floor)
            prop = self._declaration(doc, it)
            take_inside(ctx, it.start, it.end)
            trailing = []
            if it.punct:
                trailing.extend(take_inside(ctx, it.end, it.punct_at))
            trailing.extend(take_trailing(ctx, it.after, limit, self.trailing_skip))
            prop.comments = leading
            prop.trailing_comments = trailing
            if trailing and all(c.offset >= it.after for c in trailing):
                prop.trailing_text = doc.text(it.after, trailing[-1].end_offset)
            prop.unit = doc.span(leading[0].offset if leading else it.start, comments_end(trailing, it.after))
            properties.append(prop)
            floor = comments_end(trailing, it.after)
        return properties

    def _declaration(self, doc: CssDocument, it: Item) -> ParsedProperty:
        ctx = doc.ctx
        match = DECLARATION_RE.match(ctx.masked, it.start)
        name = doc.text(match.start("name"), match.end("name"))
        value_at = ctx.next_code(match.end(), it.end)
        value = doc.text(value_at, it.end)
        return ParsedProperty(
            name=name,
            value=value,
            line=ctx.line_at(it.start),
            full_text=doc.text(it.start, it.end),
            trailing_punctuation="" if self.file_type == "sass" else it.punct,
            important=bool(IMPORTANT_RE.search(value)),
            vendor_prefix=vendor_prefix_of(name),
            span=doc.span(it.start, it.end),
        )

    # --- PHASE 3: Entities ---

    def _rule_entity(self, doc: CssDocument, item: Item, selector: str, leading: List[PropertyComment],
                     items: List[Item], properties: List[ParsedProperty], dangling: List[PropertyComment],
                     media: Optional[str]) -> ParsedEntity:
        ctx = doc.ctx
        start = leading[0].offset if leading else item.start
        end = comments_end(properties[-1].trailing_comments, item.close_at + 1)
        kind = classify_selector(selector)
        return ParsedEntity(
            type=kind,
            name=selector,
            properties=properties,
            start_line=ctx.line_at(start),
            end_line=ctx.line_at(end - 1),
            leading_comments=leading,
            original_text=doc.text(start, end),
            specificity=selector_specificity(selector) if kind == "css-rule" else None,
            media_query=media,
            span=doc.span(start, end),
            body=doc.span(item.open_at + 1, item.close_at),
            header=doc.text(item.start, item.open_at + 1),
            footer=doc.text(item.close_at, item.close_at + 1),
            indent=self._member_indent(ctx, [it.start for it in items]),
            base_indent=ctx.indent_of(item.start),
            inline="\n" not in ctx.source[item.open_at:item.close_at],
            dangling_comments=dangling,
            file_type=self.file_type,
        )

    def _run_entity(self, doc: CssDocument, run: List[Item], floor: int, selector: str,
                    media: Optional[str]) -> ParsedEntity:
        ctx = doc.ctx
        limit = run[-1].after
        # The line of the last declaration bounds its trailing comments
        line_end = ctx.source.find("\n", limit)
        line_end = len(ctx.source) if line_end == -1 else line_end
        properties = self._declarations(doc, run, floor, line_end)
        first = properties[0]
        start = first.comments[0].offset if first.comments else run[0].start
        end = comments_end(properties[-1].trailing_comments, limit)
        dangling = take_dangling(ctx, start, end)
        kind = classify_selector(selector)
        logger.debug(f"Declaration run of '{selector}' at line {ctx.line_at(start)}")
        return ParsedEntity(
            type=kind,
            name=selector,
            properties=properties,
            start_line=ctx.line_at(start),
            end_line=ctx.line_at(end - 1),
            original_text=doc.text(start, end),
            specificity=selector_specificity(selector) if kind == "css-rule" else None,
            media_query=media,
            span=doc.span(start, end),
            body=doc.span(start, end),
            indent=ctx.indent_of(run[0].start),
            base_indent=ctx.indent_of(run[0].start),
            inline=ctx.line_at(start) == ctx.line_at(end - 1),
            dangling_comments=dangling,
            file_type=self.file_type,
        )

    def _keyframes(self, doc: CssDocument, item: Item, selector: str, leading: List[PropertyComment],
                   steps: List[Item], media: Optional[str]) -> ParsedEntity:
        ctx = doc.ctx
        properties: List[ParsedProperty] = []
        floor = item.open_at + 1
        for step in steps:
            step_leading = take_leading(ctx, step.start, floor)
            take_inside(ctx, step.start, step.open_at)
            inner = self._scan_items(ctx, step.open_at + 1, step.close_at, [])
            declarations = self._declarations(doc, [it for it in inner if it.kind == "decl"],
                                              step.open_at + 1, step.close_at)
            step_dangling = take_dangling(ctx, step.open_at + 1, step.close_at)
            trailing = take_trailing(ctx, step.after, item.close_at, self.trailing_skip)
            properties.append(ParsedProperty(
                name=" ".join(doc.text(step.start, step.end).split()),
                value=doc.text(step.open_at, step.close_at + 1),
                comments=step_leading,
                trailing_comments=trailing,
                trailing_text=doc.text(step.after, trailing[-1].end_offset) if trailing else "",
                line=ctx.line_at(step.start),
                full_text=doc.text(step.start, step.close_at + 1),
                nested_properties=declarations,
                has_nested_object=True,
                span=doc.span(step.start, step.close_at + 1),
                unit=doc.span(step_leading[0].offset if step_leading else step.start,
                              comments_end(trailing, step.after)),
                body=doc.span(step.open_at + 1, step.close_at),
                container="{}",
                nested_inline="\n" not in ctx.source[step.open_at:step.close_at],
                header=doc.text(step.start, step.open_at + 1),
                dangling_comments=step_dangling,
            ))
            floor = comments_end(trailing, step.after)

        start = leading[0].offset if leading else item.start
        return ParsedEntity(
            type="css-keyframe",
            name=selector,
            properties=properties,
            start_line=ctx.line_at(start),
            end_line=ctx.line_at(item.close_at),
            leading_comments=leading,
            original_text=doc.text(start, item.close_at + 1),
            media_query=media,
            keyframe_selector=KEYFRAMES_RE.match(selector).group("name"),
            span=doc.span(start, item.close_at + 1),
            body=doc.span(item.open_at + 1, item.close_at),
            header=doc.text(item.start, item.open_at + 1),
            footer=doc.text(item.close_at, item.close_at + 1),
            indent=self._member_indent(ctx, [s.start for s in steps]),
            base_indent=ctx.indent_of(item.start),
            inline="\n" not in ctx.source[item.open_at:item.close_at],
            dangling_comments=take_dangling(ctx, item.open_at + 1, item.close_at),
            file_type=self.file_type,
        )

    def _relocate_comments(self, doc: CssDocument, entities: List[ParsedEntity]):
        """Moves comment offsets from the scanned text onto the original."""
        if not doc.mapped:
            return
        for entity in entities:
            entity.leading_comments = [doc.comment(c) for c in entity.leading_comments]
            entity.dangling_comments = [doc.comment(c) for c in entity.dangling_comments]
            self._relocate_properties(doc, entity.properties)

    def _relocate_properties(self, doc: CssDocument, properties: Optional[List[ParsedProperty]]):
        for prop in properties or []:
            prop.comments = [doc.comment(c) for c in prop.comments]
            prop.trailing_comments = [doc.comment(c) for c in prop.trailing_comments]
            prop.dangling_comments = [doc.comment(c) for c in prop.dangling_comments]
            self._relocate_properties(doc, prop.nested_properties)

    def _member_indent(self, ctx: ParseContext, starts: List[int]) -> str:
        for offset in starts:
            if ctx.starts_line(offset, verbatim=True):
                return ctx.indent_of(offset)
        return ""

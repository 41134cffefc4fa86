#!/usr/bin/env python3
"""
PROPSORT RECONSTRUCTOR - Positional Rendering
---------------------------------------------
Turns a sorted entity back into the exact text of its span.

Preserving mode (the default) never re-types a member. A body is cut
into member units and the gaps between them, in source order:

    gap0 unit gap1 unit ... unit gapN

The gaps (indentation, blank lines, unattached comments) stay where
they are; the units are dealt back into the slots in sorted order.
A unit carries its leading comments, its own text, its separator and
its same-line trailing comments. Only the separator may change: a
member moved into a non-final slot gains one when it had none.

Synthesizing mode rebuilds the body line by line. It is used whenever
an option asks for a layout the source does not have: comment
restyling, explicit spacing or indentation, blank lines between
groups, dropped comments, or preserve_formatting off.

Author: PropSort Team
Date: 2026-10-18
"""

import logging
from typing import List, Optional, Tuple

from propsort.core.errors import ReconstructionError
from propsort.core.models import ParsedEntity, ParsedProperty, ParseResult, SourceSpan
from propsort.core.options import SortOptions
from propsort.rendering.formatting import (
    CommentSyntax, comment_lines, common_separator, convert_line_endings,
    final_separator, format_comment, indent_unit, resolve_line_ending, trailing_comments,
)
from propsort.rendering.splice import splice

logger = logging.getLogger("propsort.rendering")


def source_order(properties: List[ParsedProperty]) -> List[ParsedProperty]:
    return sorted(properties, key=lambda p: p.unit.start)


def reordered(properties: Optional[List[ParsedProperty]]) -> bool:
    """True when any list in the tree is out of source order."""
    if not properties:
        return False
    if any(a.unit.start > b.unit.start for a, b in zip(properties, properties[1:])):
        return True
    return any(reordered(p.nested_properties) for p in properties)


class Reconstructor:
    """Base renderer; language renderers override the class attributes and hooks."""

    syntax = CommentSyntax()
    default_separator = ";"
    positional_separators = False     # Separators belong to the slot, not the member
    comma_policy = False              # trailing_commas applies to the final slot
    closing_break = True              # Synthesized bodies end with a line break before the footer
    error_format = "// Error reconstructing {name}: {error}"

    def __init__(self, options: Optional[SortOptions] = None):
        self.options = options or SortOptions()

    # --- Public API ---

    def reconstruct(self, original_text: str, parse_result: ParseResult,
                    sorted_entities: List[ParsedEntity]) -> str:
        return splice(original_text, parse_result.entities, sorted_entities,
                      self.reconstruct_entity, self.error_text)

    def reconstruct_entity(self, entity: ParsedEntity) -> str:
        if entity.span is None or entity.body is None:
            raise ReconstructionError(f"Entity '{entity.name}' carries no source positions")
        text, base = entity.original_text, entity.span.start

        if self.synthesize:
            start, end = self._bounds(entity.body, entity.properties)
            body = self._synth_body(entity, text, base)
            rendered = self._prefix(entity, text, base, start) + body + text[end - base:]
        elif not reordered(entity.properties):
            rendered = text
        else:
            start, end, body = self._render_region(text, base, entity.body, entity.properties, entity.type)
            rendered = text[:start - base] + body + text[end - base:]

        if self.options.line_ending != "auto":
            rendered = convert_line_endings(rendered, resolve_line_ending(self.options, text))
        return rendered

    def error_text(self, entity: ParsedEntity, error: Exception) -> str:
        return self.error_format.format(name=entity.name, error=error)

    @property
    def synthesize(self) -> bool:
        o = self.options
        return (not o.preserve_formatting or o.comment_style != "preserve" or o.property_spacing is not None
                or o.indentation_type != "auto" or o.blank_lines_between_groups or not o.comments_enabled)

    # --- Hooks ---

    def separator_for(self, kind: str) -> str:
        return self.default_separator

    def nested_kind(self, kind: str, parent: ParsedProperty) -> str:
        return kind

    def group_of(self, prop: ParsedProperty) -> str:
        return prop.member_kind

    def synth_member(self, prop: ParsedProperty, width: int) -> str:
        return prop.full_text

    def name_width(self, members: List[ParsedProperty]) -> int:
        return max((len(p.name) for p in members), default=0)

    # --- Preserving mode ---

    @staticmethod
    def _bounds(body: SourceSpan, members: List[ParsedProperty]) -> Tuple[int, int]:
        if not members:
            return body.start, body.end
        start = min(body.start, min(p.unit.start for p in members))
        end = max(body.end, max(p.unit.end for p in members))
        return start, end

    def _render_region(self, text: str, base: int, body: SourceSpan, members: List[ParsedProperty],
                       kind: str) -> Tuple[int, int, str]:
        start, end = self._bounds(body, members)
        if not members:
            return start, end, text[start - base:end - base]

        originals = source_order(members)
        gaps = []
        cursor = start
        for prop in originals:
            gaps.append(text[cursor - base:prop.unit.start - base])
            cursor = prop.unit.end
        gaps.append(text[cursor - base:end - base])

        out = [gaps[0]]
        for slot, prop in enumerate(members):
            out.append(self._render_unit(text, base, prop, slot, members, originals, kind))
            out.append(gaps[slot + 1])
        return start, end, "".join(out)

    def _render_unit(self, text: str, base: int, prop: ParsedProperty, slot: int,
                     members: List[ParsedProperty], originals: List[ParsedProperty], kind: str) -> str:
        lead = text[prop.unit.start - base:prop.span.start - base]
        member = self._member_text(text, base, prop, kind)
        region = text[prop.span.end - base:prop.unit.end - base]
        punct = self._slot_separator(prop, slot, members, originals, kind)

        old = prop.trailing_punctuation
        at = self._separator_index(region, prop) if old else -1
        if at < 0:
            return lead + member + punct + region
        return lead + member + region[:at] + punct + region[at + len(old):]

    @staticmethod
    def _separator_index(region: str, prop: ParsedProperty) -> int:
        """Where the member's own separator sits in the text after it, skipping comments."""
        origin = prop.span.end
        covered = [(c.offset - origin, c.end_offset - origin) for c in prop.trailing_comments]
        for i in range(len(region)):
            if any(lo <= i < hi for lo, hi in covered):
                continue
            if region.startswith(prop.trailing_punctuation, i):
                return i
        return -1

    def _member_text(self, text: str, base: int, prop: ParsedProperty, kind: str) -> str:
        verbatim = text[prop.span.start - base:prop.span.end - base]
        if prop.body is None or not reordered(prop.nested_properties):
            return verbatim
        start, end, rendered = self._render_region(text, base, prop.body, prop.nested_properties,
                                                   self.nested_kind(kind, prop))
        return text[prop.span.start - base:start - base] + rendered + text[end - base:prop.span.end - base]

    def _slot_separator(self, prop: ParsedProperty, slot: int, members: List[ParsedProperty],
                        originals: List[ParsedProperty], kind: str) -> str:
        is_last = slot == len(members) - 1
        if self.positional_separators:
            punct = originals[slot].trailing_punctuation
        else:
            punct = prop.trailing_punctuation
            if is_last:
                # An unterminated last member stays unterminated
                if not originals[-1].trailing_punctuation:
                    punct = ""
            elif not punct:
                punct = common_separator(originals, self.separator_for(kind))
        if is_last and self.comma_policy:
            punct = final_separator(self.options, punct, self.separator_for(kind))
        return punct

    # --- Synthesizing mode ---

    def _prefix(self, entity: ParsedEntity, text: str, base: int, body_start: int) -> str:
        """Header region with the entity's leading comments restyled or dropped."""
        prefix = text[:body_start - base]
        comments = [c for c in entity.leading_comments if base <= c.offset and c.end_offset <= body_start]
        if not comments:
            return prefix
        if not self.options.comments_enabled:
            rest = prefix[comments[-1].end_offset - base:]
            return rest.lstrip()
        out = prefix
        for comment in reversed(comments):
            styled = format_comment(comment, self.options.comment_style, self.syntax, entity.base_indent)
            out = out[:comment.offset - base] + styled + out[comment.end_offset - base:]
        return out

    def _synth_body(self, entity: ParsedEntity, text: str, base: int) -> str:
        if not entity.properties:
            start, end = self._bounds(entity.body, entity.properties)
            return text[start - base:end - base]
        unit = indent_unit(self.options, entity)

        if not entity.header:
            entries = self._synth_lines(text, base, entity.properties, entity.dangling_comments,
                                        entity.type, entity.indent, unit)
            return "\n".join(entries)[len(entity.indent):]

        if entity.inline and self.options.preserve_formatting:
            entries = self._synth_lines(text, base, entity.properties, entity.dangling_comments,
                                        entity.type, "", unit)
            return " " + " ".join(e.strip() for e in entries if e.strip()) + " "

        entries = self._synth_lines(text, base, entity.properties, entity.dangling_comments,
                                    entity.type, entity.base_indent + unit, unit)
        body = "\n" + "\n".join(entries)
        return body + "\n" + entity.base_indent if self.closing_break else body

    def _synth_lines(self, text: str, base: int, members: List[ParsedProperty], dangling, kind: str,
                     indent: str, unit: str) -> List[str]:
        originals = source_order(members)
        width = self.name_width(members)
        lines: List[str] = []
        previous = None
        for slot, prop in enumerate(members):
            group = self.group_of(prop)
            if self.options.blank_lines_between_groups and previous is not None and group != previous:
                lines.append("")
            previous = group

            for comment in comment_lines(prop.comments, self.options, self.syntax, indent):
                lines.append(indent + comment)
            tail = (self._slot_separator(prop, slot, members, originals, kind)
                    + trailing_comments(prop.trailing_comments, self.options, self.syntax))

            if prop.nested_properties and prop.body is not None:
                start, end = self._bounds(prop.body, prop.nested_properties)
                head = text[prop.span.start - base:start - base].rstrip()
                close = text[end - base:prop.span.end - base].lstrip()
                lines.append(indent + head)
                lines.extend(self._synth_lines(text, base, prop.nested_properties, prop.dangling_comments,
                                               self.nested_kind(kind, prop), indent + unit, unit))
                lines.append(indent + close + tail)
            else:
                lines.append(indent + self.synth_member(prop, width) + tail)

        for comment in comment_lines(dangling or [], self.options, self.syntax, indent):
            lines.append(indent + comment)
        return lines

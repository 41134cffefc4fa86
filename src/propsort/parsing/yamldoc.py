#!/usr/bin/env python3
"""
PROPSORT YAML PARSER - Mappings & Sequences
-------------------------------------------
ruamel.yaml's round-trip loader supplies the live values and the key
positions; the raw lines supply everything ruamel does not expose in a
stable way: where each entry's text block ends and which comment lines
sit directly above it.

  * an entry is its key line plus every following line up to the next
    sibling, minus trailing blank lines and shallow comment lines
  * comment lines directly above an entry (no blank line in between)
    lead that entry; any other comment stays where it is
  * '<<' merge entries are pinned like spreads
  * a stream split by '---' yields one entity per document

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from propsort.core.models import ParsedEntity, ParsedProperty, ParseResult, PropertyComment, SourceSpan
from propsort.core.options import SortOptions
from propsort.parsing.lexer import LineIndex, comment_text, find_hash_comment

logger = logging.getLogger("propsort.parsing.yaml")

SEPARATOR_RE = re.compile(r"^---[ \t]*(?:#.*)?$")
END_MARKER_RE = re.compile(r"^\.\.\.[ \t]*(?:#.*)?$")
SEQUENCE_ITEM_RE = re.compile(r"-(?:[ \t]|$)")
MERGE_KEY_RE = re.compile(r"<<\s*:")


@dataclass
class YamlDocument:
    """Line tables of the whole stream, shared by every document in it."""
    source: str
    lines: List[str]                     # Line texts without their line break
    index: LineIndex
    comments: Dict[int, PropertyComment] = field(default_factory=dict)

    @classmethod
    def build(cls, source: str) -> "YamlDocument":
        index = LineIndex(source)
        lines = [line[:-1] if line.endswith("\r") else line for line in source.split("\n")]
        doc = cls(source=source, lines=lines, index=index)
        for number, line in enumerate(lines, 1):
            stripped = line.lstrip()
            if stripped.startswith("#"):
                doc.comments[number] = doc.comment_at(number, len(line) - len(stripped))
        return doc

    def text(self, number: int) -> str:
        return self.lines[number - 1] if 1 <= number <= len(self.lines) else ""

    def offset(self, number: int, col: int = 0) -> int:
        return self.index.line_start(number) + col

    def line_end(self, number: int) -> int:
        return self.index.line_start(number) + len(self.text(number))

    def indent(self, number: int) -> int:
        line = self.text(number)
        return len(line) - len(line.lstrip())

    def is_blank(self, number: int) -> bool:
        return not self.text(number).strip()

    def is_comment(self, number: int) -> bool:
        return number in self.comments

    def comment_at(self, number: int, col: int) -> PropertyComment:
        raw = self.text(number)[col:].rstrip()
        start = self.offset(number, col)
        return PropertyComment(text=comment_text(raw), type="single", raw=raw, line=number,
                               end_line=number, offset=start, end_offset=start + len(raw))

    def span(self, start: int, end: int) -> SourceSpan:
        return SourceSpan(start=start, end=end, start_line=self.index.line_at(start),
                          end_line=self.index.line_at(max(start, end - 1)))


class YamlParser:
    """Stateless between calls."""

    def __init__(self, options: Optional[SortOptions] = None, file_type: str = "yaml"):
        self.options = options or SortOptions(file_type=file_type)
        self.file_type = file_type

    def parse(self, source_code: str, file_name: Optional[str] = None) -> ParseResult:
        result = ParseResult(source_code=source_code, file_type=self.file_type)
        try:
            doc = YamlDocument.build(source_code)
            sections = self._documents(doc)
            multi = len(sections) > 1
            for index, (first, last) in enumerate(sections):
                data = self._load(doc, first, last, result.errors)
                if not isinstance(data, (CommentedMap, CommentedSeq)) or not data:
                    continue
                name = f"document-{index}" if multi else "root"
                entity = self._entity(doc, data, name, first, last, result.errors)
                if entity is not None:
                    result.entities.append(entity)
        except Exception as e:
            logger.error(f"YAML parser failed on {file_name or '<text>'}: {e}")
            result.errors.append(f"YAML parsing error: {e}")
        logger.debug(f"Found {len(result.entities)} YAML documents in {file_name or '<text>'}")
        return result

    # --- PHASE 1: Documents ---

    def _documents(self, doc: YamlDocument) -> List[Tuple[int, int]]:
        """1-based (first, last) line ranges between '---' / '...' markers."""
        sections = []
        first = 1
        for number, line in enumerate(doc.lines, 1):
            if SEPARATOR_RE.match(line) or END_MARKER_RE.match(line):
                if number > first:
                    sections.append((first, number - 1))
                first = number + 1
        if first <= len(doc.lines):
            sections.append((first, len(doc.lines)))
        # Directive or comment-only sections hold nothing to sort
        return [s for s in sections if any(
            not doc.is_blank(n) and not doc.is_comment(n) and not doc.text(n).startswith("%")
            for n in range(s[0], s[1] + 1))]

    def _load(self, doc: YamlDocument, first: int, last: int, errors: List[str]) -> Any:
        text = "\n".join(doc.lines[first - 1:last])
        yaml = YAML(typ="rt")
        yaml.preserve_quotes = True
        try:
            data = yaml.load(text)
        except YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            problem = getattr(e, "problem", None) or str(e)
            where = f" at line {mark.line + first}" if mark is not None else ""
            errors.append(f"YAML parsing error: {problem}{where}")
            return None
        self._shift_lines(data, first - 1)
        return data

    def _shift_lines(self, node: Any, offset: int, seen=None):
        """Makes ruamel's document-relative positions stream-relative (still 0-based)."""
        seen = set() if seen is None else seen
        if not isinstance(node, (CommentedMap, CommentedSeq)) or id(node) in seen:
            return
        seen.add(id(node))
        if node.lc.line is not None:
            node.lc.line += offset
        for key, pos in list((node.lc.data or {}).items()):
            node.lc.data[key] = [pos[0] + offset] + list(pos[1:])
        children = node.values() if isinstance(node, CommentedMap) else node
        for child in children:
            self._shift_lines(child, offset, seen)

    def _entity(self, doc: YamlDocument, data: Any, name: str, first: int, last: int,
                errors: List[str]) -> Optional[ParsedEntity]:
        if data.fa.flow_style():
            return self._flow_entity(doc, data, name, first, last)
        if isinstance(data, CommentedMap):
            properties = self._mapping(doc, data, first - 1, last)
            kind = "yaml-object"
        else:
            properties = self._sequence(doc, data, first - 1, last)
            kind = "yaml-array"
        if not properties:
            errors.append(f"YAML parsing error: could not locate the entries of {name}")
            return None

        # A comment block opening the document is the document's, not the first key's
        head = properties[0]
        detached: List[PropertyComment] = []
        content_start = next(n for n in range(first, last + 1) if not doc.is_blank(n))
        if head.comments and head.comments[0].line == content_start:
            detached, head.comments = head.comments, []
            head.unit = doc.span(head.span.start, head.unit.end)

        start = properties[0].unit.start
        end = properties[-1].unit.end
        return ParsedEntity(
            type=kind,
            name=name,
            properties=properties,
            start_line=doc.index.line_at(start),
            end_line=doc.index.line_at(end - 1),
            leading_comments=detached,
            original_text=doc.source[start:end],
            span=doc.span(start, end),
            body=doc.span(start, end),
            indent=" " * doc.indent(properties[-1].line),
            base_indent=" " * doc.indent(properties[-1].line),
            file_type=self.file_type,
        )

    def _flow_entity(self, doc: YamlDocument, data: Any, name: str, first: int, last: int) -> ParsedEntity:
        """A flow collection at the root: '{b: 1, a: 2}' or '[3, 1]'."""
        while first < last and (doc.is_blank(first) or doc.is_comment(first)):
            first += 1
        while last > first and (doc.is_blank(last) or doc.is_comment(last)):
            last -= 1
        start = doc.offset(first, doc.indent(first))
        end = doc.line_end(last)
        if isinstance(data, CommentedMap):
            properties = [ParsedProperty(name=str(k), value=v, line=first) for k, v in data.items()]
            kind = "yaml-object"
        else:
            properties = [ParsedProperty(name=str(i), value=v, line=first) for i, v in enumerate(data)]
            kind = "yaml-array"
        return ParsedEntity(
            type=kind,
            name=name,
            properties=properties,
            start_line=first,
            end_line=last,
            original_text=doc.source[start:end],
            span=doc.span(start, end),
            inline=True,
            file_type=self.file_type,
        )

    # --- PHASE 2: Entries ---

    def _mapping(self, doc: YamlDocument, node: CommentedMap, floor: int,
                 last: int) -> Optional[List[ParsedProperty]]:
        keyed = {}
        for key in node:
            try:
                line, col = node.lc.key(key)
            except (KeyError, TypeError):
                continue
            keyed[line + 1] = (key, col)
        if not keyed:
            return None
        first_line = min(keyed)
        col = keyed[first_line][1]

        entries = [first_line]
        for number in range(first_line + 1, last + 1):
            if doc.is_blank(number) or doc.is_comment(number):
                continue
            indent = doc.indent(number)
            if indent < col:
                break
            # Block sequences may sit at their parent key's indentation
            if indent == col and not SEQUENCE_ITEM_RE.match(doc.text(number).lstrip()):
                entries.append(number)

        properties: List[ParsedProperty] = []
        for i, number in enumerate(entries):
            stop = entries[i + 1] - 1 if i + 1 < len(entries) else self._region_end(doc, number, last, col)
            key_col = keyed[number][1] if number in keyed else col
            prop = self._entry(doc, number, key_col, stop, col, floor)
            if number in keyed:
                key = keyed[number][0]
                prop.name = str(key)
                prop.value = node[key]
                self._attach_nested(doc, prop, node[key])
            else:
                line = doc.text(number)[key_col:]
                prop.name = line.split(":", 1)[0].strip()
                prop.value = line.split(":", 1)[1].strip() if ":" in line else ""
                prop.is_spread = bool(MERGE_KEY_RE.match(line))
            properties.append(prop)
            floor = prop.span.end_line
        return properties

    def _sequence(self, doc: YamlDocument, node: CommentedSeq, floor: int,
                  last: int) -> Optional[List[ParsedProperty]]:
        try:
            first_line = node.lc.item(0)[0] + 1
        except (KeyError, IndexError, TypeError):
            return None
        dash_line = first_line
        while dash_line > floor and not SEQUENCE_ITEM_RE.match(doc.text(dash_line).lstrip()):
            dash_line -= 1
        if dash_line <= floor:
            return None
        col = doc.indent(dash_line)

        entries = []
        for number in range(dash_line, last + 1):
            if doc.is_blank(number) or doc.is_comment(number):
                continue
            indent = doc.indent(number)
            if indent < col:
                break
            if indent == col:
                if not SEQUENCE_ITEM_RE.match(doc.text(number).lstrip()):
                    break
                entries.append(number)
        if len(entries) != len(node):
            return None

        properties: List[ParsedProperty] = []
        for i, number in enumerate(entries):
            stop = entries[i + 1] - 1 if i + 1 < len(entries) else self._region_end(doc, number, last, col)
            prop = self._entry(doc, number, col, stop, col, floor)
            prop.name = str(i)
            prop.value = node[i]
            self._attach_nested(doc, prop, node[i])
            properties.append(prop)
            floor = prop.span.end_line
        return properties

    def _region_end(self, doc: YamlDocument, number: int, last: int, col: int) -> int:
        """Last line of the final entry: everything before the first shallower line."""
        for n in range(number + 1, last + 1):
            if not doc.is_blank(n) and not doc.is_comment(n) and doc.indent(n) < col:
                return n - 1
        return last

    def _entry(self, doc: YamlDocument, number: int, key_col: int, stop: int, col: int,
               floor: int) -> ParsedProperty:
        # Trailing blanks and comments no deeper than the key are not the value's
        while stop > number and (doc.is_blank(stop) or (doc.is_comment(stop) and doc.indent(stop) <= col)):
            stop -= 1

        leading: List[PropertyComment] = []
        above = number - 1
        while above > floor and doc.is_comment(above):
            leading.insert(0, doc.comments[above])
            above -= 1

        start = doc.offset(number, key_col)
        end = doc.line_end(stop)
        trailing = []
        hash_at = find_hash_comment(doc.text(number))
        if hash_at > key_col and stop == number:
            trailing.append(doc.comment_at(number, hash_at))

        return ParsedProperty(
            name="",
            comments=leading,
            trailing_comments=trailing,
            line=number,
            full_text=doc.source[start:end],
            span=doc.span(start, end),
            unit=doc.span(leading[0].offset if leading else start, end),
        )

    def _attach_nested(self, doc: YamlDocument, prop: ParsedProperty, value: Any):
        if not isinstance(value, (CommentedMap, CommentedSeq)) or not value or value.fa.flow_style():
            return
        stop = prop.span.end_line
        if isinstance(value, CommentedMap):
            nested = self._mapping(doc, value, prop.line, stop)
        else:
            nested = self._sequence(doc, value, prop.line, stop)
        if not nested or nested[0].span.start <= prop.span.start:
            return
        prop.nested_properties = nested
        prop.has_nested_object = True
        prop.container = "{}" if isinstance(value, CommentedMap) else "[]"
        prop.body = doc.span(nested[0].unit.start, nested[-1].unit.end)

#!/usr/bin/env python3
"""
PROPSORT LEXER - Comment & String Scanner (Phase 1)
---------------------------------------------------
Walks a source once, recognising string literals and comments for the
language profile in use. It produces:

  * the comment records, with absolute offsets and 1-based lines
  * a 'clean' text where every comment is replaced by equal-length
    whitespace (newlines kept), so offsets and lines never move
  * a 'masked' text where string interiors are also blanked, so brace
    and separator scanning never trips over a '{' inside a literal

Author: PropSort Team
Date: 2026-10-18
"""

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from propsort.core.models import PropertyComment


@dataclass(frozen=True)
class LexerProfile:
    """Which comment and string forms a language has."""
    name: str
    line_comments: Tuple[str, ...] = ("//",)
    block_comments: bool = True
    quotes: str = "\"'"
    multiline_quotes: str = ""        # Quotes allowed to span lines (JS template, Go raw)
    raw_quotes: str = ""              # Quotes without backslash escapes
    paren_guard: bool = False         # Line comments are not recognised inside (...)


TYPESCRIPT_PROFILE = LexerProfile("typescript", quotes="\"'`", multiline_quotes="`")
CSS_PROFILE = LexerProfile("css", line_comments=())
SCSS_PROFILE = LexerProfile("scss", paren_guard=True)
GO_PROFILE = LexerProfile("go", quotes="\"'`", multiline_quotes="`", raw_quotes="`")
JSON_PROFILE = LexerProfile("json", quotes="\"")

MASK_CHAR = "_"


@dataclass(frozen=True)
class LexResult:
    comments: Tuple[PropertyComment, ...]
    clean: str
    masked: str


class LineIndex:
    """Offset <-> line arithmetic for one source text."""

    def __init__(self, source: str):
        starts = [0]
        for match in re.finditer("\n", source):
            starts.append(match.end())
        self.starts: Tuple[int, ...] = tuple(starts)
        self.length = len(source)

    def line_at(self, offset: int) -> int:
        """1-based line containing the offset."""
        return bisect_right(self.starts, max(0, offset))

    def line_start(self, line: int) -> int:
        line = min(max(line, 1), len(self.starts))
        return self.starts[line - 1]

    def line_count(self) -> int:
        return len(self.starts)


def comment_text(raw: str) -> str:
    """Strips comment markers: '//', '#', '/*', '/**', '*/'."""
    if raw.startswith("/*"):
        body = re.sub(r"^/\*\*?", "", raw)
        body = re.sub(r"\*/$", "", body)
        return body.strip()
    if raw.startswith("//"):
        return raw[2:].strip()
    if raw.startswith("#"):
        return raw[1:].strip()
    return raw.strip()


def _blank(chars: List[str], start: int, end: int, filler: str = " "):
    for k in range(start, end):
        if chars[k] not in "\r\n":
            chars[k] = filler


def _string_end(source: str, start: int, quote: str, profile: LexerProfile) -> int:
    """Index just past the closing quote, or where an unterminated literal stops."""
    n = len(source)
    i = start + 1
    escapes = quote not in profile.raw_quotes
    spans_lines = quote in profile.multiline_quotes
    while i < n:
        ch = source[i]
        if escapes and ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and not spans_lines:
            return i
        i += 1
    return n


def scan(source: str, profile: LexerProfile) -> LexResult:
    """
    Single pass over the source. Strings are skipped first so that a
    '//' inside a URL literal is never mistaken for a comment.
    """
    clean = list(source)
    masked = list(source)
    comments: List[PropertyComment] = []
    index = LineIndex(source)
    n = len(source)
    paren_depth = 0
    i = 0

    while i < n:
        ch = source[i]

        if ch in profile.quotes:
            end = _string_end(source, i, ch, profile)
            inner_end = end - 1 if end <= n and end > i + 1 and source[end - 1] == ch else end
            _blank(masked, i + 1, inner_end, MASK_CHAR)
            i = end
            continue

        if profile.block_comments and source.startswith("/*", i):
            close = source.find("*/", i + 2)
            end = n if close == -1 else close + 2
            comments.append(_make_comment(source, i, end, "multi", index))
            _blank(clean, i, end)
            _blank(masked, i, end)
            i = end
            continue

        marker = _line_comment_at(source, i, profile, paren_depth)
        if marker:
            end = source.find("\n", i)
            end = n if end == -1 else end
            if end > i and source[end - 1] == "\r":
                end -= 1
            comments.append(_make_comment(source, i, end, "single", index))
            _blank(clean, i, end)
            _blank(masked, i, end)
            i = end
            continue

        if ch == "(":
            paren_depth += 1
        elif ch == ")":
            paren_depth = max(0, paren_depth - 1)
        i += 1

    return LexResult(comments=tuple(comments), clean="".join(clean), masked="".join(masked))


def _line_comment_at(source: str, i: int, profile: LexerProfile, paren_depth: int) -> str:
    for marker in profile.line_comments:
        if source.startswith(marker, i):
            if profile.paren_guard and paren_depth > 0:
                return ""
            return marker
    return ""


def _make_comment(source: str, start: int, end: int, kind: str, index: LineIndex) -> PropertyComment:
    raw = source[start:end]
    return PropertyComment(
        text=comment_text(raw),
        type=kind,
        raw=raw,
        line=index.line_at(start),
        end_line=index.line_at(max(start, end - 1)),
        offset=start,
        end_offset=end,
    )


def find_hash_comment(line: str) -> int:
    """
    Index of a YAML '#' comment on a line, or -1. Quotes protect the
    '#', and a '#' only starts a comment at line start or after a space.
    """
    in_double = in_single = escaped = False
    for i, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == "\\" and in_double:
            escaped = True
            continue
        if char == '"' and not in_single:
            in_double = not in_double
        elif char == "'" and not in_double:
            in_single = not in_single
        elif char == "#" and not in_double and not in_single:
            if i == 0 or line[i - 1].isspace():
                return i
    return -1


def matching_close(masked: str, open_index: int, pairs: Sequence[str] = ("{}", "[]", "()")) -> int:
    """
    Index of the bracket closing the one at open_index, or -1 when the
    text ends first. Works on masked text so literals cannot interfere.
    """
    openers = {p[0]: p[1] for p in pairs}
    closers = {p[1] for p in pairs}
    stack = []
    for i in range(open_index, len(masked)):
        ch = masked[i]
        if ch in openers:
            stack.append(openers[ch])
        elif ch in closers:
            if not stack or stack[-1] != ch:
                return -1
            stack.pop()
            if not stack:
                return i
    return -1

#!/usr/bin/env python3
"""
PROPSORT SASS PARSER - Indented Syntax Bridge
---------------------------------------------
SASS has no braces or semicolons. Rather than a second grammar, the
source is rewritten line for line into braced form:

  * a declaration or statement line gets ';' after its code
  * a selector line whose block gathered content gets ' {', and the
    last code line of that block gets '}'
  * a selector with an empty block gets ';' so it never merges with
    the next selector

Only characters at the end of a line's code are inserted, so lines
never move and every braced offset maps back to the original by
(line, column). The CSS scanner runs on the rewrite; entity texts and
spans are sliced from the original through that map.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Tuple

from propsort.parsing.context import ParseContext
from propsort.parsing.css import CssDocument, CssParser
from propsort.parsing.lexer import SCSS_PROFILE

logger = logging.getLogger("propsort.parsing.sass")

SASS_DECLARATION_RE = re.compile(r"^(?:\$[\w-]+\s*:\s*\S|-{0,2}[A-Za-z_][\w-]*\s*:\s+\S)")
STATEMENT_PREFIXES = ("+", "@include", "@extend", "@import", "@use", "@forward",
                      "@debug", "@warn", "@error", "@return", "@charset")


@dataclass
class _Frame:
    level: int
    line: int
    last: int
    has_content: bool = False


class SassLineMap:
    """Maps offsets of the braced rewrite back onto the original text."""

    def __init__(self, original_lines: List[str], braced_lines: List[str],
                 code_ends: List[int], inserted: List[int]):
        self.original_starts = self._starts(original_lines)
        self.braced_starts = self._starts(braced_lines)
        self.code_ends = code_ends
        self.inserted = inserted

    @staticmethod
    def _starts(lines: List[str]) -> List[int]:
        starts, offset = [], 0
        for line in lines:
            starts.append(offset)
            offset += len(line) + 1
        return starts

    def to_original(self, offset: int) -> int:
        index = bisect_right(self.braced_starts, offset) - 1
        col = offset - self.braced_starts[index]
        code_end, inserted = self.code_ends[index], self.inserted[index]
        if col > code_end:
            col = code_end if col < code_end + inserted else col - inserted
        return self.original_starts[index] + col


def code_end(line: str) -> int:
    """Column where the code of a line stops, before any comment or trailing space."""
    quote = None
    depth = 0
    end = len(line)
    i = 0
    while i < len(line):
        ch = line[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif line.startswith("/*", i) or (depth == 0 and line.startswith("//", i)):
            end = i
            break
        i += 1
    return len(line[:end].rstrip())


def _is_statement(code: str) -> bool:
    return bool(SASS_DECLARATION_RE.match(code)) or code.startswith(STATEMENT_PREFIXES)


def to_braced(source: str) -> Tuple[str, SassLineMap]:
    """Rewrites indented syntax into braced form without moving any line."""
    lines = source.split("\n")
    bodies = [line[:-1] if line.endswith("\r") else line for line in lines]
    inserts: List[List[str]] = [[] for _ in lines]
    ends: List[int] = []
    stack: List[_Frame] = []
    in_comment = False

    def close(frame: _Frame):
        if frame.has_content:
            inserts[frame.line].append(" {")
            inserts[frame.last].append("}")
            if stack:
                stack[-1].has_content = True
        else:
            inserts[frame.line].append(";")

    for i, body in enumerate(bodies):
        end = code_end(body)
        ends.append(end)
        if in_comment:
            if "*/" in body:
                in_comment = False
            ends[-1] = 0
            continue
        code = body[:end].strip()
        if not code:
            stripped = body.strip()
            if stripped.startswith("/*") and "*/" not in stripped:
                in_comment = True
            continue

        indent = len(body) - len(body.lstrip())
        while stack and stack[-1].level >= indent:
            close(stack.pop())
        for frame in stack:
            frame.last = i

        if _is_statement(code):
            inserts[i].append(";")
            if stack:
                stack[-1].has_content = True
        else:
            stack.append(_Frame(level=indent, line=i, last=i))

    while stack:
        close(stack.pop())

    braced_lines = []
    inserted = []
    for line, body, end, extra in zip(lines, bodies, ends, inserts):
        added = "".join(extra)
        inserted.append(len(added))
        braced_lines.append(body[:end] + added + body[end:] + line[len(body):])
    logger.debug(f"SASS rewrite: {sum(1 for x in inserted if x)} line(s) gained punctuation")
    return "\n".join(braced_lines), SassLineMap(lines, braced_lines, ends, inserted)


class SassParser(CssParser):
    label = "SASS"
    trailing_skip = "}"

    def __init__(self, options=None, file_type: str = "sass"):
        super().__init__(options, file_type)

    def _document(self, source_code: str) -> CssDocument:
        braced, line_map = to_braced(source_code)
        ctx = ParseContext.build(braced, SCSS_PROFILE, self.file_type, self.options)
        return CssDocument(ctx=ctx, original=source_code, to_original=line_map.to_original, mapped=True)

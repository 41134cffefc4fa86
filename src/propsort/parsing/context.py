#!/usr/bin/env python3
"""
PROPSORT PARSE CONTEXT
----------------------
A per-call record of everything a parser knows about one source: the
raw text, its cleaned and masked twins, the comment list and the line
index. Parsers thread it through every extraction step instead of
keeping state on the instance, so one parser object can serve any
number of calls.

The only mutable part is the claimed-comment ledger, which enforces
that a comment is handed out once.

Author: PropSort Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from propsort.core.models import PropertyComment, SourceSpan
from propsort.core.options import SortOptions
from propsort.parsing.lexer import LexerProfile, LineIndex, scan


@dataclass(frozen=True)
class ParseContext:
    source: str
    clean: str                              # Comments blanked
    masked: str                             # Comments and string interiors blanked
    comments: Tuple[PropertyComment, ...]
    lines: LineIndex
    file_type: str
    options: SortOptions
    claimed: Set[PropertyComment] = field(default_factory=set, compare=False, hash=False)

    @classmethod
    def build(cls, source: str, profile: LexerProfile, file_type: str,
              options: Optional[SortOptions] = None) -> "ParseContext":
        lexed = scan(source, profile)
        return cls(
            source=source,
            clean=lexed.clean,
            masked=lexed.masked,
            comments=lexed.comments,
            lines=LineIndex(source),
            file_type=file_type,
            options=options or SortOptions(file_type=file_type),
        )

    # --- Positions ---

    def line_at(self, offset: int) -> int:
        return self.lines.line_at(offset)

    def line_start(self, line: int) -> int:
        return self.lines.line_start(line)

    def span(self, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            start=start,
            end=end,
            start_line=self.line_at(start),
            end_line=self.line_at(max(start, end - 1)),
        )

    def indent_of(self, offset: int) -> str:
        """Leading whitespace of the line holding the offset."""
        start = self.line_start(self.line_at(offset))
        line = self.source[start:offset]
        return line[:len(line) - len(line.lstrip(" \t"))]

    def starts_line(self, offset: int, verbatim: bool = False) -> bool:
        """
        True when only whitespace precedes the offset on its line. Comments
        count as whitespace unless verbatim is set.
        """
        start = self.line_start(self.line_at(offset))
        text = self.source if verbatim else self.masked
        return text[start:offset].strip() == ""

    def next_code(self, offset: int, limit: Optional[int] = None) -> int:
        """Offset of the next non-whitespace masked character, or limit."""
        limit = len(self.masked) if limit is None else limit
        while offset < limit and self.masked[offset].isspace():
            offset += 1
        return offset

    def prev_code(self, offset: int, floor: int = 0) -> int:
        """Offset just past the last non-whitespace masked character before offset."""
        while offset > floor and self.masked[offset - 1].isspace():
            offset -= 1
        return offset

    # --- Comment ledger ---

    def is_claimed(self, comment: PropertyComment) -> bool:
        return comment in self.claimed

    def claim(self, comments: List[PropertyComment]) -> List[PropertyComment]:
        for comment in comments:
            self.claimed.add(comment)
        return comments

    def unclaimed_between(self, start: int, end: int) -> List[PropertyComment]:
        return [
            c for c in self.comments
            if start <= c.offset and c.end_offset <= end and c not in self.claimed
        ]

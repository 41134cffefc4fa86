#!/usr/bin/env python3
"""
PROPSORT COMMENT ASSOCIATION
----------------------------
Decides which comment belongs to which declaration.

  * leading  : comments after the previous declaration and before the
               target, chained backwards while every gap is at most
               LEADING_WINDOW lines and nothing but whitespace separates
               them from what follows
  * trailing : comments that start on the line a declaration ends on,
               after it, with only whitespace in between
  * dangling : whatever is left inside a body once every member took
               its share

Every returned comment is claimed on the context, so no comment can be
attached twice.

Author: PropSort Team
Date: 2026-10-18
"""

from typing import List

from propsort.core.models import PropertyComment
from propsort.parsing.context import ParseContext

LEADING_WINDOW = 2


def take_leading(ctx: ParseContext, target: int, floor: int,
                 window: int = LEADING_WINDOW) -> List[PropertyComment]:
    """Leading comment block of the declaration starting at `target`."""
    candidates = ctx.unclaimed_between(floor, target)
    if not candidates:
        return []

    target_line = ctx.line_at(target)
    anchor_line = target_line
    anchor_offset = target
    picked: List[PropertyComment] = []

    for comment in reversed(candidates):
        if anchor_line - comment.last_line > window:
            break
        if ctx.masked[comment.end_offset:anchor_offset].strip():
            break
        # A comment sharing its line with earlier code belongs to that code,
        # unless it runs on into the target's own line
        if (comment.line != target_line and comment.last_line != target_line
                and not ctx.starts_line(comment.offset)):
            break
        picked.append(comment)
        anchor_line = comment.line
        anchor_offset = comment.offset

    picked.reverse()
    return ctx.claim(picked)


def take_trailing(ctx: ParseContext, after: int, limit: int, skip: str = "") -> List[PropertyComment]:
    """
    Same-line comments following the declaration that ends at `after`.
    Characters in `skip` may sit in the gap (synthesized braces).
    """
    line = ctx.line_at(max(0, after - 1))
    picked: List[PropertyComment] = []
    cursor = after
    for comment in ctx.unclaimed_between(after, limit):
        if comment.line != line:
            break
        gap = ctx.masked[cursor:comment.offset]
        if any(not ch.isspace() and ch not in skip for ch in gap):
            break
        picked.append(comment)
        cursor = comment.end_offset
    return ctx.claim(picked)


def take_inside(ctx: ParseContext, start: int, end: int) -> List[PropertyComment]:
    """Claims comments that live inside a declaration's own text."""
    return ctx.claim(ctx.unclaimed_between(start, end))


def take_dangling(ctx: ParseContext, start: int, end: int) -> List[PropertyComment]:
    return ctx.claim(ctx.unclaimed_between(start, end))


def comments_end(comments: List[PropertyComment], default: int) -> int:
    """Offset just past the last of the comments, or default."""
    if not comments:
        return default
    return max(default, max(c.end_offset for c in comments))


def trailing_source(source: str, after: int, trailing: List[PropertyComment]) -> str:
    """
    Verbatim gap plus trailing comments after a member, so re-emitting a
    moved member keeps its comment column. Empty when a comment sits
    before the separator.
    """
    if not trailing or any(c.offset < after for c in trailing):
        return ""
    return source[after:trailing[-1].end_offset]

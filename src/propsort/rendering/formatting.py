#!/usr/bin/env python3
"""
PROPSORT FORMATTING UTILITIES
-----------------------------
Small, stateless helpers shared by every renderer: line endings,
indentation units, comment restyling, separators and name/colon
spacing.

Author: PropSort Team
Date: 2026-10-18
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

from propsort.core.models import ParsedEntity, ParsedProperty, PropertyComment
from propsort.core.options import SortOptions

_LONE_LF_RE = re.compile(r"(?<!\r)\n")
_ANY_BREAK_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class CommentSyntax:
    """Comment forms a language allows."""
    line: Optional[str] = "//"       # None: no line comments (plain CSS)
    block: bool = True               # False: no block comments (YAML)


# --- Line endings ---

def detect_line_ending(text: str) -> str:
    """CRLF only when it is the majority."""
    crlf = text.count("\r\n")
    lf = len(_LONE_LF_RE.findall(text))
    return "\r\n" if crlf > lf else "\n"


def resolve_line_ending(options: SortOptions, text: str) -> str:
    if options.line_ending == "lf":
        return "\n"
    if options.line_ending == "crlf":
        return "\r\n"
    return detect_line_ending(text)


def convert_line_endings(text: str, ending: str) -> str:
    return _ANY_BREAK_RE.sub(ending, text)


# --- Indentation ---

def indent_unit(options: SortOptions, entity: Optional[ParsedEntity] = None) -> str:
    """One level of indentation: configured, else the entity's own, else indentation_size spaces."""
    if options.indentation_type == "tabs":
        return "\t"
    if options.indentation_type == "spaces":
        return " " * options.indentation_size
    if entity is not None and entity.indent.startswith(entity.base_indent):
        own = entity.indent[len(entity.base_indent):]
        if own:
            return own
    return " " * options.indentation_size


# --- Comments ---

def format_comment(comment: PropertyComment, style: str, syntax: CommentSyntax, indent: str = "") -> str:
    """
    Renders one comment in the requested style. Multi-line block output
    aligns its continuation lines on '*'. The result carries no leading
    indentation; continuation lines carry `indent`.
    """
    if style == "preserve" and _legal(comment.raw, syntax):
        return comment.raw

    lines = [line.strip().lstrip("*").strip() if comment.type == "multi" else line.strip()
             for line in comment.text.split("\n")]
    lines = [line for line in lines if line] or [""]

    if syntax.line == "#" or not syntax.block:
        return f"\n{indent}".join(f"# {line}".rstrip() for line in lines)

    want_line = style == "single-line" or (style == "preserve" and comment.type == "single")
    if want_line and syntax.line:
        return f"\n{indent}".join(f"{syntax.line} {line}".rstrip() for line in lines)

    if len(lines) == 1:
        return f"/* {lines[0]} */"
    body = "".join(f"\n{indent} * {line}".rstrip() for line in lines)
    return f"/*{body}\n{indent} */"


def _legal(raw: str, syntax: CommentSyntax) -> bool:
    if raw.startswith("/*"):
        return syntax.block
    return bool(syntax.line) and raw.startswith(syntax.line)


def comment_lines(comments: List[PropertyComment], options: SortOptions, syntax: CommentSyntax,
                  indent: str = "") -> List[str]:
    """Leading comments as whole lines (without the leading indent)."""
    if not options.comments_enabled:
        return []
    return [format_comment(c, options.comment_style, syntax, indent) for c in comments]


def trailing_comments(comments: List[PropertyComment], options: SortOptions, syntax: CommentSyntax) -> str:
    if not options.comments_enabled or not comments:
        return ""
    return "".join(" " + format_comment(c, options.comment_style, syntax) for c in comments)


# --- Separators ---

def common_separator(originals: List[ParsedProperty], default: str) -> str:
    """
    Most frequent separator among the members that were not last. A list
    whose members were all split by line breaks alone yields ''.
    """
    if len(originals) < 2:
        return default
    seen = Counter(p.trailing_punctuation for p in originals[:-1] if p.trailing_punctuation)
    if not seen:
        return ""
    return seen.most_common(1)[0][0]


def final_separator(options: SortOptions, punct: str, comma: str = ",") -> str:
    """Separator of the last member under the trailing_commas policy."""
    if options.trailing_commas == "add":
        return punct or comma
    if options.trailing_commas == "remove" and punct == ",":
        return ""
    return punct


# --- Spacing ---

def key_value(name: str, value: str, options: SortOptions, width: int = 0, colon: str = ":") -> str:
    """'name: value' under property_spacing; width pads names for 'aligned'."""
    spacing = options.property_spacing or "compact"
    if spacing == "spaced":
        return f"{name} {colon} {value}"
    if spacing == "aligned" and width:
        return f"{name}{colon}".ljust(width + len(colon)) + f" {value}"
    return f"{name}{colon} {value}"

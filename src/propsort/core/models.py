#!/usr/bin/env python3
"""
PROPSORT CORE MODELS
--------------------
Defines the fundamental data structures shared by every parser, sorter
and reconstructor. A parse produces entities, an entity owns properties,
and properties own the comments that were attached to them.

Author: PropSort Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

ENTITY_TYPES = (
    "interface", "object", "type",
    "css-rule", "css-keyframe", "css-media", "css-at-rule",
    "struct",
    "json-object", "json-array",
    "yaml-object", "yaml-array",
)


@dataclass(frozen=True)
class SourceSpan:
    """
    A half-open [start, end) character range of the source with the
    1-based lines it starts and ends on.
    """
    start: int
    end: int
    start_line: int
    end_line: int

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def contains(self, other: "SourceSpan") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "SourceSpan") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True, eq=False)
class PropertyComment:
    """
    One comment as it appeared in the source.

    Instances hash by identity so a parse can remember which comments
    were already handed to a property or entity.
    """
    text: str                 # Comment body without markers, trimmed
    type: str                 # 'single' or 'multi'
    raw: str                  # Exact source text including markers
    line: int                 # Line the comment starts on
    end_line: int = 0         # Line the comment ends on (== line for single)
    offset: int = -1          # Absolute start offset in the source
    end_offset: int = -1      # Absolute end offset (exclusive)

    @property
    def last_line(self) -> int:
        return self.end_line or self.line


@dataclass
class ParsedProperty:
    """
    A member of an entity: interface signature, object key, CSS
    declaration, Go field, JSON key / array element or YAML key.
    """
    name: str
    value: Any = ""
    comments: List[PropertyComment] = field(default_factory=list)
    trailing_comments: List[PropertyComment] = field(default_factory=list)
    trailing_text: str = ""          # Verbatim text from the separator through the last trailing comment
    optional: bool = False
    line: int = 0
    full_text: str = ""
    trailing_punctuation: str = ""   # ';', ',' or ''
    nested_properties: Optional[List["ParsedProperty"]] = None
    has_nested_object: bool = False
    is_spread: bool = False
    important: bool = False
    vendor_prefix: Optional[str] = None
    struct_tags: Optional[str] = None
    is_embedded: bool = False
    member_kind: str = "property"    # property, method, getter, setter, signature
    span: Optional[SourceSpan] = None       # The member text itself (full_text)
    unit: Optional[SourceSpan] = None       # Leading comments through separator and trailing comments
    body: Optional[SourceSpan] = None       # Inside of the nested container
    container: str = ""              # '{}' or '[]' when the value holds nested members
    nested_inline: bool = False      # Nested container written on a single line
    header: str = ""                 # Verbatim text before a nested block (keyframe steps)
    dangling_comments: List[PropertyComment] = field(default_factory=list)  # Unattached comments inside the nested block

    def copy(self, **changes) -> "ParsedProperty":
        """Shallow copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass
class ParsedEntity:
    """
    One sortable declaration together with the exact region of the
    source it occupies.
    """
    type: str
    name: str
    properties: List[ParsedProperty] = field(default_factory=list)
    start_line: int = 0
    end_line: int = 0
    leading_comments: List[PropertyComment] = field(default_factory=list)
    is_exported: bool = False
    original_text: str = ""                 # Exact text of span
    specificity: Optional[int] = None
    media_query: Optional[str] = None
    keyframe_selector: Optional[str] = None
    span: Optional[SourceSpan] = None      # Region replaced on splice (leading comments included)
    body: Optional[SourceSpan] = None      # Between header and footer
    header: str = ""                        # Verbatim text up to and including the opening brace
    footer: str = ""                        # Verbatim closing text ('}', '};', '});')
    indent: str = ""                        # Indentation of member lines
    base_indent: str = ""                   # Indentation of the header line
    inline: bool = False                    # Whole body written on one line
    dangling_comments: List[PropertyComment] = field(default_factory=list)
    file_type: str = ""

    @property
    def key(self):
        """Identity of an entity across the sort step."""
        return (self.start_line, self.end_line, self.name)

    def copy(self, **changes) -> "ParsedEntity":
        return replace(self, **changes)


@dataclass
class ParseResult:
    """What a parser hands to the processor. Errors only ever grow."""
    entities: List[ParsedEntity] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    source_code: str = ""
    file_type: str = ""


@dataclass
class ProcessingResult:
    """Outcome of one CoreProcessor.process_text call."""
    success: bool
    entities_processed: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processed_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "entitiesProcessed": self.entities_processed,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "processedText": self.processed_text,
        }


def property_names(properties: Optional[List[ParsedProperty]]) -> list:
    """
    Nested name signature of a property list. Two lists with the same
    signature render identically, so this is the no-op test.
    """
    if not properties:
        return []
    return [(p.name, property_names(p.nested_properties)) for p in properties]

#!/usr/bin/env python3
"""
PROPSORT OPTIONS - Configuration Layer
--------------------------------------
A single dataclass carries every knob of the pipeline. Callers may hand
in a plain mapping (snake_case or the camelCase names used by editor
settings and JSON config files); SortOptions.from_mapping normalises it
and applies the processor defaults.

Author: PropSort Team
Date: 2026-10-18
"""

import re
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from propsort.core.errors import PropSortError

logger = logging.getLogger("propsort.options")

FILE_TYPES = (
    "typescript", "javascript", "css", "scss", "sass", "less",
    "go", "json", "jsonc", "yaml", "yml",
)
CSS_FAMILY = ("css", "scss", "sass", "less")
TS_FAMILY = ("typescript", "javascript")
JSON_FAMILY = ("json", "jsonc")
YAML_FAMILY = ("yaml", "yml")

# Extension -> file type
EXTENSION_MAP = {
    ".ts": "typescript", ".tsx": "typescript", ".mts": "typescript", ".cts": "typescript",
    ".js": "javascript", ".jsx": "javascript", ".mjs": "javascript", ".cjs": "javascript",
    ".css": "css", ".scss": "scss", ".sass": "sass", ".less": "less",
    ".go": "go",
    ".json": "json", ".jsonc": "jsonc",
    ".yaml": "yaml", ".yml": "yml",
}

# property_spacing may also be None (keep written spacing)
PROPERTY_SPACINGS = ("compact", "spaced", "aligned")

_CHOICES = {
    "sort_order": ("asc", "desc"),
    "sort_struct_fields": ("alphabetical", "by-type", "by-size", "preserve-tags"),
    "indentation_type": ("auto", "spaces", "tabs"),
    "line_ending": ("auto", "lf", "crlf"),
    "comment_style": ("preserve", "single-line", "multi-line"),
    "trailing_commas": ("preserve", "add", "remove"),
    "yaml_indentation_style": ("auto", "2-spaces", "4-spaces"),
}


@dataclass
class SortOptions:
    """
    Every option understood by the processor, with its default.
    """
    # --- General ---
    file_type: str = "typescript"
    sort_order: str = "asc"
    case_sensitive: bool = True
    natural_sort: bool = False
    custom_order: List[str] = field(default_factory=list)
    group_by_type: bool = False
    prioritize_required: bool = False
    sort_nested_objects: bool = True
    preserve_formatting: bool = True
    include_comments: bool = True

    # --- TypeScript ---
    preserve_method_chaining: bool = True

    # --- CSS family ---
    sort_by_importance: bool = False
    group_vendor_prefixes: bool = False
    group_by_category: bool = False
    group_variables: bool = True
    sort_keyframes: bool = False

    # --- Go ---
    sort_struct_fields: str = "alphabetical"
    group_embedded_fields: bool = True
    group_by_visibility: bool = True

    # --- JSON ---
    sort_object_keys: bool = True
    preserve_array_order: bool = True
    custom_key_order: List[str] = field(default_factory=list)
    group_by_schema: bool = False

    # --- YAML ---
    yaml_custom_key_order: List[str] = field(default_factory=list)
    yaml_group_by_schema: bool = False
    preserve_anchors_and_aliases: bool = True
    preserve_document_separators: bool = True
    preserve_string_styles: bool = True
    yaml_indentation_style: str = "auto"
    handle_complex_keys: bool = True

    # --- Formatting ---
    indentation: Optional[str] = None       # Legacy literal indentation string
    indentation_type: str = "auto"
    indentation_size: int = 4
    line_ending: str = "auto"
    preserve_comments: bool = True          # False overrides include_comments
    comment_style: str = "preserve"
    property_spacing: Optional[str] = None  # None keeps each member as written
    trailing_commas: str = "preserve"
    blank_lines_between_groups: bool = False

    def __post_init__(self):
        self.file_type = (self.file_type or "typescript").lower()
        if self.file_type not in FILE_TYPES:
            raise PropSortError(f"Unsupported file type: {self.file_type}")
        for name, allowed in _CHOICES.items():
            value = getattr(self, name)
            if value not in allowed:
                raise PropSortError(f"Invalid value for {name}: {value!r} (expected one of {', '.join(allowed)})")

        # Legacy indentation derives type and size
        if self.indentation:
            if self.indentation == "\t":
                self.indentation_type = "tabs"
            elif re.fullmatch(r" +", self.indentation):
                self.indentation_type = "spaces"
                self.indentation_size = len(self.indentation)

        if self.property_spacing is not None and self.property_spacing not in PROPERTY_SPACINGS:
            raise PropSortError(f"Invalid value for property_spacing: {self.property_spacing!r}")

        self.custom_order = [str(v) for v in self.custom_order or []]
        self.custom_key_order = [str(v) for v in self.custom_key_order or []]
        self.yaml_custom_key_order = [str(v) for v in self.yaml_custom_key_order or []]

    # --- Derived views ---

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"

    @property
    def comments_enabled(self) -> bool:
        return self.include_comments and self.preserve_comments

    @property
    def language(self) -> str:
        """Language family the file type belongs to."""
        if self.file_type in TS_FAMILY:
            return "typescript"
        if self.file_type in CSS_FAMILY:
            return "css"
        if self.file_type in JSON_FAMILY:
            return "json"
        if self.file_type in YAML_FAMILY:
            return "yaml"
        return "go"

    def with_changes(self, **changes) -> "SortOptions":
        return replace(self, **changes)

    # --- Construction ---

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None, **overrides) -> "SortOptions":
        """
        Builds options from a mapping. Keys may be camelCase; unknown
        keys are ignored with a debug log so editor settings can carry
        extras.
        """
        known = {f.name for f in fields(cls)}
        merged: Dict[str, Any] = {}
        for raw_key, value in {**(data or {}), **overrides}.items():
            key = _snake(raw_key)
            if key == "sort_order" and value in ("ascending", "descending"):
                value = "asc" if value == "ascending" else "desc"
            if key in known:
                if value is not None:
                    merged[key] = value
            else:
                logger.debug(f"Ignoring unknown option '{raw_key}'")
        return cls(**merged)

    @classmethod
    def for_file(cls, path: str, data: Optional[Mapping[str, Any]] = None) -> "SortOptions":
        return cls.from_mapping(data, file_type=detect_file_type(path))


def _snake(name: str) -> str:
    name = name.replace("-", "_")
    return re.sub(r"(?<=[a-z0-9])([A-Z])", lambda m: "_" + m.group(1).lower(), name)


def detect_file_type(path: str, default: str = "typescript") -> str:
    """Maps a file name to a file type by its extension."""
    suffix = Path(path).suffix.lower()
    return EXTENSION_MAP.get(suffix, default)


def load_config(path: str) -> Dict[str, Any]:
    """
    Reads an options file. JSON is valid YAML, so one ruamel loader
    serves both formats.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise PropSortError(f"Unable to read config {config_path}: {e}")

    try:
        data = YAML(typ="safe").load(text)
    except YAMLError as e:
        raise PropSortError(f"Invalid config {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PropSortError(f"Config {config_path} must contain a mapping")
    # Editor settings nest under a 'propertySorter' section
    section = data.get("propertySorter", data)
    logger.debug(f"Loaded {len(section)} option(s) from {config_path}")
    return dict(section)

#!/usr/bin/env python3
"""
PROPSORT ERRORS
---------------
Exception taxonomy for the parse -> sort -> reconstruct pipeline. Every
error is caught at the boundary of the component that raised it and
turned into a diagnostic string; nothing escapes process_text.

Author: PropSort Team
Date: 2026-10-18
"""


class PropSortError(Exception):
    """Base class for all pipeline errors."""


class ParseError(PropSortError):
    """Malformed syntax found while scanning a source."""

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.line = line


class NoSortableEntityError(PropSortError):
    """Nothing in the input can be sorted."""


class SortError(PropSortError):
    """A comparator failed on a malformed property record."""


class ReconstructionError(PropSortError):
    """An entity could not be rendered back to text."""

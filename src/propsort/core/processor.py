#!/usr/bin/env python3
"""
PROPSORT CORE PROCESSOR - Text In, Text Out
-------------------------------------------
CoreProcessor runs one source text through the pipeline:

    Idle -> Parsed -> {Failed | Sorted} -> {NoChange | Reconstructed} -> Result

It never raises. Every outcome, including internal failures, comes back
as a ProcessingResult with the diagnostics that explain it.

Author: PropSort Team
Date: 2026-10-18
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from propsort.core.errors import SortError
from propsort.core.models import ParsedEntity, ProcessingResult, property_names
from propsort.core.options import CSS_FAMILY, SortOptions
from propsort.parsing.registry import get_parser, get_reconstructor, get_sorter

logger = logging.getLogger("propsort.processor")

NO_CSS_RULES = "No CSS rules found to sort"
NO_ENTITIES = "No sortable entities found (interfaces, objects, or type aliases)"
NO_PROPERTIES = "No properties found to sort, but entities were processed"
ALREADY_SORTED = "Properties are already sorted in the specified order"

OptionsLike = Union[SortOptions, Mapping[str, Any], None]


class CoreProcessor:
    """
    Stateless orchestrator; one instance may serve any number of calls.
    """

    def process_text(self, source_text: str, options: OptionsLike = None) -> ProcessingResult:
        try:
            opts = self.resolve_options(options)
            return self._run(source_text, opts)
        except Exception as e:
            logger.error(f"Processing failed: {e}")
            return ProcessingResult(success=False, errors=[f"Processing failed: {e}"])

    @staticmethod
    def resolve_options(options: OptionsLike) -> SortOptions:
        """Merges a mapping with the defaults; SortOptions pass through."""
        if isinstance(options, SortOptions):
            return options
        return SortOptions.from_mapping(options)

    def preview(self, source_text: str, options: OptionsLike = None) -> List[dict]:
        """
        Per-entity names before and after sorting, without rendering.
        """
        opts = self.resolve_options(options)
        parse_result = get_parser(opts).parse(source_text)
        sorter = get_sorter(opts)
        return [
            dict(entity=entity.name, **sorter.preview_sort(entity.properties, entity))
            for entity in parse_result.entities
        ]

    # --- Pipeline ---

    def _run(self, source_text: str, opts: SortOptions) -> ProcessingResult:
        # --- PHASE 1: Parse ---
        parse_result = get_parser(opts).parse(source_text)
        entities = parse_result.entities
        logger.debug(f"Parsed {len(entities)} entities ({opts.file_type}), {len(parse_result.errors)} errors")

        if not entities:
            if opts.file_type in CSS_FAMILY:
                return ProcessingResult(success=True, warnings=[NO_CSS_RULES] + parse_result.errors,
                                        processed_text=source_text)
            return ProcessingResult(success=False, errors=[NO_ENTITIES] + parse_result.errors)

        # Entities were recovered, so parse errors only degrade the result
        warnings = list(parse_result.errors)

        if not any(entity.properties for entity in entities):
            if opts.file_type == "go":
                return ProcessingResult(success=True, entities_processed=len(entities),
                                        warnings=warnings + [NO_PROPERTIES], processed_text=source_text)
            return ProcessingResult(success=False, errors=[NO_ENTITIES], warnings=warnings)

        # --- PHASE 2: Sort ---
        sorted_entities = self._sort(entities, opts, warnings)

        # --- PHASE 3: Compare ---
        if not self.has_changes(entities, sorted_entities):
            logger.info(f"{len(entities)} entities already in order")
            return ProcessingResult(success=True, entities_processed=len(sorted_entities),
                                    warnings=warnings + [ALREADY_SORTED], processed_text=source_text)

        # --- PHASE 4: Reconstruct ---
        reconstructor = get_reconstructor(opts)
        processed = reconstructor.reconstruct(source_text, parse_result, sorted_entities)
        logger.info(f"Sorted {len(sorted_entities)} entities")
        return ProcessingResult(success=True, entities_processed=len(sorted_entities),
                                warnings=warnings, processed_text=processed)

    def _sort(self, entities: List[ParsedEntity], opts: SortOptions, warnings: List[str]) -> List[ParsedEntity]:
        """An entity whose sort fails stays as written; the others still sort."""
        sorter = get_sorter(opts)
        result = []
        for entity in entities:
            try:
                result.append(sorter.sort_entity(entity))
            except SortError as e:
                logger.warning(f"Leaving '{entity.name}' unsorted: {e}")
                warnings.append(f"Sorting error: {e}")
                result.append(entity)
        return result

    @staticmethod
    def has_changes(original: List[ParsedEntity], sorted_entities: List[ParsedEntity]) -> bool:
        if len(original) != len(sorted_entities):
            return True
        return any(property_names(a.properties) != property_names(b.properties)
                   for a, b in zip(original, sorted_entities))


def process_text(source_text: str, options: OptionsLike = None) -> ProcessingResult:
    """Module level shortcut for CoreProcessor().process_text."""
    return CoreProcessor().process_text(source_text, options)


def sort_text(source_text: str, options: OptionsLike = None) -> Optional[str]:
    """Sorted text, or None when processing failed."""
    result = process_text(source_text, options)
    return result.processed_text if result.success else None

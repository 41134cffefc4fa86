#!/usr/bin/env python3
"""
PROPSORT SPLICER - Apply Sorted Entities
----------------------------------------
One routine for every language: each original entity is matched with
its sorted twin by (start_line, end_line, name), rendered by the
language renderer, and written over the entity's span. Splices run
from the end of the text backwards so earlier offsets stay valid, and
nothing outside a span is touched.

Author: PropSort Team
Date: 2026-10-18
"""

import logging
from typing import Callable, Dict, List

from propsort.core.models import ParsedEntity

logger = logging.getLogger("propsort.rendering.splice")


def splice(original_text: str, originals: List[ParsedEntity], sorted_entities: List[ParsedEntity],
           render: Callable[[ParsedEntity], str], error_text: Callable[[ParsedEntity, Exception], str]) -> str:
    """
    `render` turns a sorted entity into the text of its span.
    `error_text` builds the placeholder written when rendering fails.
    """
    by_key: Dict[tuple, ParsedEntity] = {entity.key: entity for entity in sorted_entities}
    ordered = sorted((e for e in originals if e.span is not None), key=lambda e: e.span.start, reverse=True)

    text = original_text
    floor = len(original_text) + 1
    for original in ordered:
        span = original.span
        if span.end > floor:
            logger.warning(f"Skipping '{original.name}': its span overlaps an entity already written")
            continue
        replacement_entity = by_key.get(original.key)
        if replacement_entity is None:
            continue
        try:
            replacement = render(replacement_entity)
        except Exception as e:
            logger.error(f"Reconstruction of '{original.name}' failed: {e}")
            replacement = error_text(original, e)
        text = text[:span.start] + replacement + text[span.end:]
        floor = span.start
        logger.debug(f"Spliced '{original.name}' over lines {span.start_line}-{span.end_line}")
    return text
